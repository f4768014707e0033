"""Textual widget hosting the editor."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widget import Widget

from cactus.editor import Editor, Key, KeyInput
from cactus.frame import Frame
from cactus.syntax import Highlight

_KEY_MAP: dict[str, Key] = {
    "enter": Key.ENTER,
    "backspace": Key.BACKSPACE,
    "ctrl+h": Key.BACKSPACE,
    "delete": Key.DELETE,
    "escape": Key.ESCAPE,
    "left": Key.ARROW_LEFT,
    "right": Key.ARROW_RIGHT,
    "up": Key.ARROW_UP,
    "down": Key.ARROW_DOWN,
    "home": Key.HOME,
    "end": Key.END,
    "pageup": Key.PAGE_UP,
    "pagedown": Key.PAGE_DOWN,
    "ctrl+s": Key.SAVE,
    "ctrl+f": Key.FIND,
    "ctrl+q": Key.QUIT,
    "ctrl+l": Key.REFRESH,
}

HIGHLIGHT_STYLE: dict[Highlight, str] = {
    Highlight.NORMAL: "",
    Highlight.COMMENT: "cyan",
    Highlight.MLCOMMENT: "cyan",
    Highlight.KEYWORD1: "yellow",
    Highlight.KEYWORD2: "green",
    Highlight.STRING: "magenta",
    Highlight.NUMBER: "red",
    Highlight.MATCH: "blue",
}


def translate_key(event) -> KeyInput | None:
    """Map a Textual key event to the editor's key vocabulary."""
    key = _KEY_MAP.get(event.key)
    if key is not None:
        return key
    char = event.character or ""
    if len(char) == 1 and (char.isprintable() or char == "\t"):
        return char
    return None


def frame_to_text(frame: Frame, width: int) -> Text:
    """Convert a composed frame into styled rich text, cursor cell reversed."""
    cursor_row, cursor_col = frame.cursor
    lines: list[Text] = []
    for y, segments in enumerate(frame.lines):
        line = Text()
        for seg in segments:
            if seg.control:
                line.append(seg.text, style="reverse")
            else:
                line.append(seg.text, style=HIGHLIGHT_STYLE[seg.hl])
        if y == cursor_row:
            if len(line) <= cursor_col:
                line.append(" " * (cursor_col - len(line) + 1))
            line.stylize("reverse", cursor_col, cursor_col + 1)
        lines.append(line)
    lines.append(Text(frame.status.ljust(width), style="reverse"))
    lines.append(Text(frame.message))
    return Text("\n").join(lines)


class EditorView(Widget, can_focus=True):
    """Full-screen editor: text rows, a status line and a message line."""

    DEFAULT_CSS = """
    EditorView {
        height: 1fr;
        background: $surface;
    }
    """

    @dataclass
    class Quit(Message):
        pass

    def __init__(
        self,
        editor: Editor,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.editor = editor

    def on_mount(self) -> None:
        # Lets the message line expire without a keystroke.
        self.set_interval(1.0, self.refresh)

    def render(self) -> Text:
        width = self.content_region.width
        height = self.content_region.height
        if height < 3 or width < 1:
            return Text("(too small)")
        self.editor.resize(height, width)
        return frame_to_text(self.editor.refresh_screen(), width)

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()

        key = translate_key(event)
        if key is None:
            return
        self.editor.process_key(key)
        if self.editor.should_quit:
            self.post_message(self.Quit())
            return
        self.refresh()
