"""Editor state and key handling.

One :class:`Editor` owns the document, cursor, viewport, message line and
the active prompt. Host code feeds it keys and asks it for frames; it never
touches the terminal itself.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Union

from cactus._search import IncrementalSearch, SearchEvent
from cactus.config import Config
from cactus.document import Document
from cactus.fileio import write_file
from cactus.frame import Frame, compose_frame
from cactus.viewport import Viewport

logger = logging.getLogger(__name__)

HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find"


class Key(Enum):
    ENTER = auto()
    BACKSPACE = auto()
    DELETE = auto()
    ESCAPE = auto()
    ARROW_LEFT = auto()
    ARROW_RIGHT = auto()
    ARROW_UP = auto()
    ARROW_DOWN = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    SAVE = auto()
    FIND = auto()
    QUIT = auto()
    REFRESH = auto()


# A printable character is passed as a one-character string.
KeyInput = Union[Key, str]

Writer = Callable[[str, bytes], int]


class PromptKind(Enum):
    SAVE_AS = auto()
    FIND = auto()


@dataclass
class Prompt:
    kind: PromptKind
    template: str  # "{}" is replaced by the text typed so far
    text: str = ""

    def render(self) -> str:
        return self.template.format(self.text)


@dataclass
class _SavedView:
    cx: int
    cy: int
    row_offset: int
    col_offset: int


class Editor:
    """The editing context threaded through every operation."""

    def __init__(
        self,
        document: Document | None = None,
        *,
        config: Config | None = None,
        writer: Writer = write_file,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or Config()
        if document is None:
            document = Document(tab_stop=self.config.tab_stop)
        self.document = document
        self.viewport = Viewport()
        self.cx: int = 0
        self.cy: int = 0
        self.status_msg: str = ""
        self._status_time: float = 0.0
        self.prompt: Prompt | None = None
        self.search = IncrementalSearch()
        self.should_quit: bool = False
        self._quit_times: int = self.config.quit_times
        self._saved_view: _SavedView | None = None
        self._writer = writer
        self._clock = clock

    # -- Messages ----------------------------------------------------------

    def set_status_message(self, msg: str) -> None:
        self.status_msg = msg
        self._status_time = self._clock()

    def current_message(self) -> str:
        if self.prompt is not None:
            return self.prompt.render()
        if self.status_msg and self._clock() - self._status_time < self.config.message_timeout:
            return self.status_msg
        return ""

    # -- Geometry ----------------------------------------------------------

    def resize(self, screen_rows: int, screen_cols: int) -> None:
        """Set the terminal size; two rows are kept for status and message."""
        self.viewport.rows = max(1, screen_rows - 2)
        self.viewport.cols = max(1, screen_cols)

    @property
    def rx(self) -> int:
        row = self.document.row(self.cy)
        return row.cx_to_rx(self.cx) if row is not None else 0

    def scroll(self) -> None:
        self.viewport.scroll(self.cy, self.rx)

    def refresh_screen(self) -> Frame:
        self.scroll()
        return compose_frame(
            self.document, self.viewport, self.cy, self.rx, self.current_message()
        )

    # -- Key dispatch ------------------------------------------------------

    def process_key(self, key: KeyInput) -> None:
        if self.prompt is not None:
            self._handle_prompt(key)
            return

        if key is Key.QUIT:
            if self.document.modified and self._quit_times > 0:
                self.set_status_message(
                    "WARNING!!! File has unsaved changes. "
                    f"Press Ctrl-Q {self._quit_times} more times to quit."
                )
                self._quit_times -= 1
                return
            self.should_quit = True
            return

        if key is Key.ENTER:
            self.insert_newline()
        elif key is Key.SAVE:
            self.save()
        elif key is Key.FIND:
            self.find()
        elif key is Key.HOME:
            self.cx = 0
        elif key is Key.END:
            row = self.document.row(self.cy)
            if row is not None:
                self.cx = row.size
        elif key is Key.BACKSPACE:
            self.delete_char()
        elif key is Key.DELETE:
            self.move_cursor(Key.ARROW_RIGHT)
            self.delete_char()
        elif key in (Key.PAGE_UP, Key.PAGE_DOWN):
            self._page(key)
        elif key in (Key.ARROW_LEFT, Key.ARROW_RIGHT, Key.ARROW_UP, Key.ARROW_DOWN):
            self.move_cursor(key)
        elif key in (Key.REFRESH, Key.ESCAPE):
            pass
        elif isinstance(key, str) and key:
            self.insert_char(key)

        self._quit_times = self.config.quit_times

    # -- Cursor ------------------------------------------------------------

    def move_cursor(self, key: Key) -> None:
        doc = self.document
        row = doc.row(self.cy)

        if key is Key.ARROW_LEFT:
            if self.cx != 0:
                self.cx -= 1
            elif self.cy > 0:
                self.cy -= 1
                self.cx = doc.rows[self.cy].size
        elif key is Key.ARROW_RIGHT:
            if row is not None and self.cx < row.size:
                self.cx += 1
            elif row is not None and self.cx == row.size:
                self.cy += 1
                self.cx = 0
        elif key is Key.ARROW_UP:
            if self.cy != 0:
                self.cy -= 1
        elif key is Key.ARROW_DOWN:
            if self.cy < doc.num_rows:
                self.cy += 1

        row = doc.row(self.cy)
        row_len = row.size if row is not None else 0
        if self.cx > row_len:
            self.cx = row_len

    def _page(self, key: Key) -> None:
        if key is Key.PAGE_UP:
            self.cy = self.viewport.row_offset
        else:
            self.cy = min(
                self.viewport.row_offset + self.viewport.rows - 1,
                self.document.num_rows,
            )
        arrow = Key.ARROW_UP if key is Key.PAGE_UP else Key.ARROW_DOWN
        for _ in range(self.viewport.rows):
            self.move_cursor(arrow)

    # -- Editing -----------------------------------------------------------

    def insert_char(self, ch: str) -> None:
        if self.cy == self.document.num_rows:
            self.document.insert_row(self.document.num_rows, "")
        self.document.insert_char(self.cy, self.cx, ch)
        self.cx += 1

    def insert_newline(self) -> None:
        if self.cx == 0:
            self.document.insert_row(self.cy, "")
        else:
            self.document.split_row(self.cy, self.cx)
        self.cy += 1
        self.cx = 0

    def delete_char(self) -> None:
        if self.cy == self.document.num_rows:
            return
        if self.cx == 0 and self.cy == 0:
            return
        if self.cx > 0:
            self.document.delete_char(self.cy, self.cx - 1)
            self.cx -= 1
        else:
            self.cx = self.document.join_row_into_previous(self.cy)
            self.cy -= 1

    # -- Save --------------------------------------------------------------

    def save(self) -> None:
        if not self.document.filename:
            self.prompt = Prompt(PromptKind.SAVE_AS, "Save as: {} (ESC to cancel)")
            return
        self._write()

    def _write(self) -> None:
        filename = self.document.filename
        data = self.document.to_bytes()
        try:
            written = self._writer(filename, data)
        except OSError as exc:
            reason = exc.strerror or str(exc)
            logger.warning("save to %s failed: %s", filename, reason)
            self.set_status_message(f"Can't save! I/O error: {reason}")
            return
        self.document.dirty = 0
        logger.info("wrote %d bytes to %s", written, filename)
        self.set_status_message(f"{written} bytes written to disk")

    # -- Find --------------------------------------------------------------

    def find(self) -> None:
        vp = self.viewport
        self._saved_view = _SavedView(self.cx, self.cy, vp.row_offset, vp.col_offset)
        self.search.reset()
        self.prompt = Prompt(PromptKind.FIND, "Search: {} (Use ESC/Arrows/Enter)")

    def _search_step(self, event: SearchEvent) -> None:
        query = self.prompt.text if self.prompt is not None else ""
        match = self.search.step(self.document, query, event)
        if match is None:
            return
        self.cy = match.row
        self.cx = match.col
        # Past the end so the next scroll brings the match row to the top.
        self.viewport.row_offset = self.document.num_rows

    def cancel_find(self) -> None:
        """Drop the match overlay and put cursor and viewport back. Idempotent."""
        self.search.step(self.document, "", SearchEvent.CANCEL)
        saved = self._saved_view
        if saved is not None:
            self.cx, self.cy = saved.cx, saved.cy
            self.viewport.row_offset = saved.row_offset
            self.viewport.col_offset = saved.col_offset
            self._saved_view = None
        if self.prompt is not None and self.prompt.kind is PromptKind.FIND:
            self.prompt = None

    # -- Prompt ------------------------------------------------------------

    def _handle_prompt(self, key: KeyInput) -> None:
        prompt = self.prompt
        if prompt is None:
            return
        is_find = prompt.kind is PromptKind.FIND

        if key in (Key.BACKSPACE, Key.DELETE):
            prompt.text = prompt.text[:-1]
        elif key is Key.ESCAPE:
            self.set_status_message("")
            if is_find:
                self.cancel_find()
            else:
                self.prompt = None
                self.set_status_message("Save aborted")
            return
        elif key is Key.ENTER:
            if prompt.text:
                self.set_status_message("")
                self.prompt = None
                if is_find:
                    self._search_step(SearchEvent.COMMIT)
                    self._saved_view = None
                else:
                    self.document.set_filename(prompt.text)
                    self._write()
                return
            if is_find:
                self._search_step(SearchEvent.COMMIT)
            return
        elif is_find and key in (Key.ARROW_RIGHT, Key.ARROW_DOWN):
            self._search_step(SearchEvent.NEXT)
            return
        elif is_find and key in (Key.ARROW_LEFT, Key.ARROW_UP):
            self._search_step(SearchEvent.PREVIOUS)
            return
        elif isinstance(key, str) and key.isprintable() and len(key) == 1:
            prompt.text += key
        else:
            return

        if is_find:
            self._search_step(SearchEvent.EDIT)
