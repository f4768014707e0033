"""Editor rows and their tab-expanded display projection."""

from __future__ import annotations

from dataclasses import dataclass, field

from cactus.syntax import Highlight

TAB_STOP = 8


def project(text: str, tab_stop: int = TAB_STOP) -> tuple[str, list[int]]:
    """Expand tabs in *text* to the next multiple of *tab_stop*.

    Returns ``(display, col_map)`` where ``col_map[cx]`` is the display
    column at which logical column ``cx`` starts. ``col_map`` has one extra
    entry so that ``col_map[len(text)] == len(display)``.
    """
    if "\t" not in text:
        return text, list(range(len(text) + 1))
    out: list[str] = []
    col_map: list[int] = []
    rx = 0
    for ch in text:
        col_map.append(rx)
        if ch == "\t":
            width = tab_stop - (rx % tab_stop)
            out.append(" " * width)
            rx += width
        else:
            out.append(ch)
            rx += 1
    col_map.append(rx)
    return "".join(out), col_map


@dataclass
class Row:
    """One line of the document.

    ``text`` is what gets edited and saved; ``display`` and ``marks`` are
    derived from it and must only be refreshed through :meth:`update`
    and the highlighter.
    """

    idx: int
    text: str = ""
    display: str = ""
    marks: list[Highlight] = field(default_factory=list)
    open_comment: bool = False  # a block comment is still open at row end
    _col_map: list[int] = field(default_factory=lambda: [0], repr=False)

    def update(self, tab_stop: int = TAB_STOP) -> None:
        """Recompute the display form. Marks are reset to NORMAL."""
        self.display, self._col_map = project(self.text, tab_stop)
        self.marks = [Highlight.NORMAL] * len(self.display)

    @property
    def size(self) -> int:
        return len(self.text)

    def cx_to_rx(self, cx: int) -> int:
        """Logical column -> display column."""
        cx = max(0, min(cx, len(self.text)))
        return self._col_map[cx]

    def rx_to_cx(self, rx: int) -> int:
        """Display column -> first logical column whose expansion reaches past *rx*."""
        col_map = self._col_map
        for cx in range(len(self.text)):
            if col_map[cx + 1] > rx:
                return cx
        return len(self.text)
