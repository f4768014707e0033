"""Frame composition: what to draw, not how to encode it for the terminal."""

from __future__ import annotations

from dataclasses import dataclass, field

from cactus.config import VERSION
from cactus.document import Document
from cactus.syntax import Highlight
from cactus.viewport import Viewport

WELCOME = f"Cactus editor -- version {VERSION}"


@dataclass
class Segment:
    """A run of characters sharing one highlight.

    ``control`` segments hold the printable stand-in for a single control
    character and are drawn in inverse video.
    """

    text: str
    hl: Highlight = Highlight.NORMAL
    control: bool = False


@dataclass
class Frame:
    lines: list[list[Segment]] = field(default_factory=list)
    status_left: str = ""
    status_right: str = ""
    status: str = ""  # full-width status line
    message: str = ""
    cursor: tuple[int, int] = (0, 0)  # (screen row, screen col)


def line_text(line: list[Segment]) -> str:
    return "".join(seg.text for seg in line)


def control_glyph(ch: str) -> str:
    code = ord(ch)
    return chr(ord("@") + code) if code <= 26 else "?"


def is_control(ch: str) -> bool:
    """True for characters drawn as an inverse glyph instead of themselves.

    Undecodable input bytes are loaded as lone surrogates (U+DC80..U+DCFF)
    and count as control characters too.
    """
    code = ord(ch)
    return code < 32 or code == 127 or 0xDC80 <= code <= 0xDCFF


def compose_row(display: str, marks: list[Highlight], start: int, width: int) -> list[Segment]:
    """Slice ``display[start:start + width]`` into highlight runs."""
    segments: list[Segment] = []
    end = min(len(display), start + width)
    col = start
    while col < end:
        ch = display[col]
        if is_control(ch):
            segments.append(Segment(control_glyph(ch), marks[col], control=True))
            col += 1
            continue
        hl = marks[col]
        run_end = col + 1
        while run_end < end and marks[run_end] == hl and not is_control(display[run_end]):
            run_end += 1
        segments.append(Segment(display[col:run_end], hl))
        col = run_end
    return segments


def _welcome_line(cols: int) -> list[Segment]:
    welcome = WELCOME[:cols]
    padding = (cols - len(welcome)) // 2
    prefix = ""
    if padding:
        prefix = "~"
        padding -= 1
    return [Segment(prefix + " " * padding + welcome)]


def status_line(document: Document, cy: int, cols: int) -> tuple[str, str, str]:
    name = (document.filename or "[No Name]")[:20]
    modified = " (modified)" if document.modified else ""
    left = f"{name} - {document.num_rows} lines{modified}"
    filetype = document.syntax.filetype if document.syntax else "no ft"
    right = f"{filetype} | {cy + 1}/{document.num_rows}"

    status = left[:cols]
    if len(status) + len(right) <= cols:
        status += " " * (cols - len(status) - len(right)) + right
    else:
        status += " " * (cols - len(status))
    return left, right, status


def compose_frame(
    document: Document,
    viewport: Viewport,
    cy: int,
    rx: int,
    message: str = "",
) -> Frame:
    """Assemble one frame. *viewport* must already be scrolled for the cursor."""
    frame = Frame()
    for y in range(viewport.rows):
        filerow = y + viewport.row_offset
        if filerow >= document.num_rows:
            if document.num_rows == 0 and y == viewport.rows // 3:
                frame.lines.append(_welcome_line(viewport.cols))
            else:
                frame.lines.append([Segment("~")])
            continue
        row = document.rows[filerow]
        frame.lines.append(
            compose_row(row.display, row.marks, viewport.col_offset, viewport.cols)
        )

    frame.status_left, frame.status_right, frame.status = status_line(
        document, cy, viewport.cols
    )
    frame.message = message[: viewport.cols]
    frame.cursor = (cy - viewport.row_offset, rx - viewport.col_offset)
    return frame
