"""Incremental search with a single-row match overlay."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from cactus.syntax import Highlight

if TYPE_CHECKING:
    from cactus.document import Document

logger = logging.getLogger(__name__)


class SearchEvent(Enum):
    EDIT = auto()  # query text changed
    NEXT = auto()
    PREVIOUS = auto()
    COMMIT = auto()
    CANCEL = auto()


@dataclass
class SearchMatch:
    row: int
    col: int  # logical column
    rx: int  # display column


class IncrementalSearch:
    """Search-as-you-type state.

    Each :meth:`step` first undoes the previous match overlay, then (unless
    the search is ending) scans circularly from one row past the last match
    and overlays the first hit. Cursor and viewport are the caller's.
    """

    def __init__(self) -> None:
        self.last_match: int = -1
        self.direction: int = 1
        self._saved: tuple[int, list[Highlight]] | None = None

    @property
    def has_overlay(self) -> bool:
        return self._saved is not None

    def reset(self) -> None:
        self.last_match = -1
        self.direction = 1

    def restore(self, document: Document) -> None:
        """Put back the marks saved before the last overlay, if any."""
        if self._saved is None:
            return
        idx, marks = self._saved
        self._saved = None
        row = document.row(idx)
        if row is not None and len(row.marks) == len(marks):
            row.marks = marks

    def step(
        self, document: Document, query: str, event: SearchEvent
    ) -> SearchMatch | None:
        self.restore(document)

        if event in (SearchEvent.COMMIT, SearchEvent.CANCEL):
            self.reset()
            return None
        if event is SearchEvent.NEXT:
            self.direction = 1
        elif event is SearchEvent.PREVIOUS:
            self.direction = -1
        else:
            self.reset()

        if self.last_match == -1:
            self.direction = 1
        if not query:
            return None

        num_rows = document.num_rows
        current = self.last_match
        for _ in range(num_rows):
            current += self.direction
            if current == -1:
                current = num_rows - 1
            elif current == num_rows:
                current = 0

            row = document.rows[current]
            rx = row.display.find(query)
            if rx == -1:
                continue

            self.last_match = current
            self._saved = (current, row.marks[:])
            for j in range(rx, min(rx + len(query), len(row.marks))):
                row.marks[j] = Highlight.MATCH
            logger.debug("search %r: row %d col %d", query, current, rx)
            return SearchMatch(row=current, col=row.rx_to_cx(rx), rx=rx)

        logger.debug("search %r: no match", query)
        return None
