"""Row store: the ordered rows of the file being edited."""

from __future__ import annotations

import logging
from typing import Iterable

from cactus.row import TAB_STOP, Row
from cactus.syntax import Syntax, highlight_all, select_syntax, update_syntax

logger = logging.getLogger(__name__)


class Document:
    """Ordered rows plus the dirty counter, filename and file type.

    Positions passed to the editing methods are clamped (or the call is a
    no-op) instead of raising, since every caller is the editor itself.
    """

    def __init__(
        self,
        lines: Iterable[str] = (),
        *,
        filename: str | None = None,
        tab_stop: int = TAB_STOP,
    ) -> None:
        self.rows: list[Row] = []
        self.dirty: int = 0
        self.tab_stop = tab_stop
        self.filename: str | None = None
        self.syntax: Syntax | None = None
        if filename:
            self.set_filename(filename)
        self.load(lines)

    # -- Queries -----------------------------------------------------------

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def row(self, idx: int) -> Row | None:
        if 0 <= idx < len(self.rows):
            return self.rows[idx]
        return None

    @property
    def modified(self) -> bool:
        return self.dirty > 0

    # -- Load / save -------------------------------------------------------

    def load(self, lines: Iterable[str]) -> None:
        """Append one row per line and reset the dirty counter."""
        for line in lines:
            self.insert_row(len(self.rows), line)
        self.dirty = 0

    def to_text(self) -> str:
        return "".join(f"{row.text}\n" for row in self.rows)

    def to_bytes(self) -> bytes:
        """Every row followed by a newline, the last one included."""
        return self.to_text().encode("utf-8", "surrogateescape")

    def set_filename(self, filename: str) -> None:
        self.filename = filename
        syntax = select_syntax(filename)
        if syntax is not self.syntax:
            logger.info(
                "filetype for %s: %s", filename, syntax.filetype if syntax else "none"
            )
            self.syntax = syntax
            highlight_all(self.rows, syntax)

    # -- Row-level edits ---------------------------------------------------

    def _refresh(self, idx: int) -> None:
        row = self.rows[idx]
        row.update(self.tab_stop)
        update_syntax(self.rows, idx, self.syntax)

    def _renumber(self, start: int) -> None:
        for j in range(start, len(self.rows)):
            self.rows[j].idx = j

    def insert_row(self, at: int, text: str) -> Row:
        at = max(0, min(at, len(self.rows)))
        row = Row(idx=at, text=text)
        # Seed with the state the following row was highlighted against so the
        # cascade notices when the new row changes it.
        if at > 0:
            row.open_comment = self.rows[at - 1].open_comment
        self.rows.insert(at, row)
        self._renumber(at + 1)
        self._refresh(at)
        self.dirty += 1
        return row

    def delete_row(self, at: int) -> None:
        if not 0 <= at < len(self.rows):
            return
        del self.rows[at]
        self._renumber(at)
        if at < len(self.rows):
            update_syntax(self.rows, at, self.syntax)
        self.dirty += 1

    def insert_char(self, idx: int, col: int, ch: str) -> None:
        row = self.row(idx)
        if row is None:
            return
        col = max(0, min(col, row.size))
        row.text = row.text[:col] + ch + row.text[col:]
        self._refresh(idx)
        self.dirty += 1

    def delete_char(self, idx: int, col: int) -> None:
        row = self.row(idx)
        if row is None or not 0 <= col < row.size:
            return
        row.text = row.text[:col] + row.text[col + 1 :]
        self._refresh(idx)
        self.dirty += 1

    def append_text(self, idx: int, text: str) -> None:
        row = self.row(idx)
        if row is None:
            return
        row.text += text
        self._refresh(idx)
        self.dirty += 1

    def split_row(self, idx: int, col: int) -> None:
        """Break row *idx* at *col*; the tail becomes a new row below it."""
        row = self.row(idx)
        if row is None:
            return
        col = max(0, min(col, row.size))
        tail = row.text[col:]
        row.text = row.text[:col]
        self._refresh(idx)
        self.insert_row(idx + 1, tail)

    def join_row_into_previous(self, idx: int) -> int:
        """Append row *idx* to the row above and remove it.

        Returns the column in the previous row where the joined text begins,
        or -1 when there is no previous row.
        """
        if not 0 < idx < len(self.rows):
            return -1
        prev = self.rows[idx - 1]
        col = prev.size
        self.append_text(idx - 1, self.rows[idx].text)
        self.delete_row(idx)
        return col
