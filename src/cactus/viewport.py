"""Visible window over the document, in display coordinates."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Viewport:
    row_offset: int = 0
    col_offset: int = 0
    rows: int = 0  # text rows, status and message lines excluded
    cols: int = 0

    def scroll(self, cy: int, rx: int) -> None:
        """Move the window so that the cursor at (cy, rx) is inside it."""
        if cy < self.row_offset:
            self.row_offset = cy
        if cy >= self.row_offset + self.rows:
            self.row_offset = cy - self.rows + 1
        if rx < self.col_offset:
            self.col_offset = rx
        if rx >= self.col_offset + self.cols:
            self.col_offset = rx - self.cols + 1
        self.row_offset = max(0, self.row_offset)
        self.col_offset = max(0, self.col_offset)

    def contains(self, cy: int, rx: int) -> bool:
        return (
            self.row_offset <= cy < self.row_offset + self.rows
            and self.col_offset <= rx < self.col_offset + self.cols
        )
