"""Syntax highlighting: file-type table and the per-row highlight state machine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cactus.row import Row

logger = logging.getLogger(__name__)


class Highlight(IntEnum):
    NORMAL = 0
    COMMENT = 1
    MLCOMMENT = 2
    KEYWORD1 = 3
    KEYWORD2 = 4  # type keywords
    STRING = 5
    NUMBER = 6
    MATCH = 7  # search overlay


HL_NUMBERS = 1 << 0
HL_STRINGS = 1 << 1

SEPARATORS = frozenset(",.()+-/*=~%<>[];")


@dataclass(frozen=True)
class Syntax:
    """Highlighting rules for one file type."""

    filetype: str
    filematch: tuple[str, ...]
    keywords: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    singleline_comment_start: str = ""
    multiline_comment_start: str = ""
    multiline_comment_end: str = ""
    flags: int = 0


C_SYNTAX = Syntax(
    filetype="c",
    filematch=(".c", ".h", ".cpp"),
    keywords=(
        "switch", "if", "while", "for", "break", "continue", "return", "else",
        "struct", "union", "typedef", "static", "enum", "class", "case",
        "default", "do", "goto", "sizeof", "const", "extern", "volatile",
    ),
    types=(
        "int", "long", "double", "float", "char", "unsigned", "signed",
        "void", "short", "size_t", "ssize_t", "bool",
    ),
    singleline_comment_start="//",
    multiline_comment_start="/*",
    multiline_comment_end="*/",
    flags=HL_NUMBERS | HL_STRINGS,
)

PYTHON_SYNTAX = Syntax(
    filetype="python",
    filematch=(".py",),
    keywords=(
        "and", "as", "assert", "async", "await", "break", "class", "continue",
        "def", "del", "elif", "else", "except", "finally", "for", "from",
        "global", "if", "import", "in", "is", "lambda", "nonlocal", "not",
        "or", "pass", "raise", "return", "try", "while", "with", "yield",
    ),
    types=(
        "True", "False", "None", "self", "int", "str", "float", "bytes",
        "bool", "list", "dict", "set", "tuple", "object",
    ),
    singleline_comment_start="#",
    flags=HL_NUMBERS | HL_STRINGS,
)

# Priority ordered: the first entry with a matching pattern wins.
HLDB: tuple[Syntax, ...] = (C_SYNTAX, PYTHON_SYNTAX)


def is_separator(ch: str) -> bool:
    """Whitespace, end of row (empty string) or one of the punctuation separators."""
    return ch == "" or ch.isspace() or ch == "\0" or ch in SEPARATORS


def select_syntax(
    filename: str | None, table: tuple[Syntax, ...] = HLDB
) -> Syntax | None:
    """Pick the file type for *filename*.

    Patterns starting with ``.`` must match the filename's extension;
    other patterns match anywhere in the filename.
    """
    if not filename:
        return None
    dot = filename.rfind(".")
    ext = filename[dot:] if dot != -1 else ""
    for syntax in table:
        for pattern in syntax.filematch:
            is_ext = pattern.startswith(".")
            if (is_ext and ext and ext == pattern) or (
                not is_ext and pattern in filename
            ):
                return syntax
    return None


def highlight_line(
    display: str, syntax: Syntax | None, in_comment: bool = False
) -> tuple[list[Highlight], bool]:
    """Classify every character of *display*.

    *in_comment* is the open-block-comment state carried over from the
    previous row. Returns ``(marks, open_comment)``.
    """
    n = len(display)
    marks = [Highlight.NORMAL] * n
    if syntax is None:
        return marks, False

    scs = syntax.singleline_comment_start
    mcs = syntax.multiline_comment_start
    mce = syntax.multiline_comment_end
    keywords = [(kw, Highlight.KEYWORD1) for kw in syntax.keywords] + [
        (kw, Highlight.KEYWORD2) for kw in syntax.types
    ]
    numbers = bool(syntax.flags & HL_NUMBERS)
    strings = bool(syntax.flags & HL_STRINGS)

    prev_sep = True
    in_string = ""
    i = 0
    while i < n:
        ch = display[i]
        prev_hl = marks[i - 1] if i > 0 else Highlight.NORMAL

        if scs and not in_string and not in_comment:
            if display.startswith(scs, i):
                for j in range(i, n):
                    marks[j] = Highlight.COMMENT
                break

        if mcs and mce and not in_string:
            if in_comment:
                marks[i] = Highlight.MLCOMMENT
                if display.startswith(mce, i):
                    for j in range(i, min(i + len(mce), n)):
                        marks[j] = Highlight.MLCOMMENT
                    i += len(mce)
                    in_comment = False
                    prev_sep = True
                else:
                    i += 1
                continue
            if display.startswith(mcs, i):
                for j in range(i, min(i + len(mcs), n)):
                    marks[j] = Highlight.MLCOMMENT
                i += len(mcs)
                in_comment = True
                continue

        if strings:
            if in_string:
                marks[i] = Highlight.STRING
                if ch == "\\" and i + 1 < n:
                    marks[i + 1] = Highlight.STRING
                    i += 2
                    continue
                if ch == in_string:
                    in_string = ""
                i += 1
                prev_sep = True
                continue
            if ch in ('"', "'"):
                in_string = ch
                marks[i] = Highlight.STRING
                i += 1
                continue

        if numbers:
            if (ch.isdigit() and (prev_sep or prev_hl == Highlight.NUMBER)) or (
                ch == "." and prev_hl == Highlight.NUMBER
            ):
                marks[i] = Highlight.NUMBER
                i += 1
                prev_sep = False
                continue

        if prev_sep:
            matched = False
            for kw, hl in keywords:
                end = i + len(kw)
                if display.startswith(kw, i) and is_separator(display[end : end + 1]):
                    for j in range(i, end):
                        marks[j] = hl
                    i = end
                    matched = True
                    break
            if matched:
                prev_sep = False
                continue

        prev_sep = is_separator(ch)
        i += 1

    return marks, in_comment


def update_syntax(rows: list[Row], start: int, syntax: Syntax | None) -> int:
    """Re-highlight ``rows[start]`` and cascade down while the open-comment state changes.

    Returns the number of rows re-highlighted.
    """
    idx = start
    count = 0
    while 0 <= idx < len(rows):
        row = rows[idx]
        seed = rows[idx - 1].open_comment if idx > 0 else False
        row.marks, open_comment = highlight_line(row.display, syntax, seed)
        count += 1
        changed = row.open_comment != open_comment
        row.open_comment = open_comment
        if not changed:
            break
        idx += 1
    if count > 1:
        logger.debug("highlight cascade from row %d touched %d rows", start, count)
    return count


def highlight_all(rows: list[Row], syntax: Syntax | None) -> None:
    """Highlight every row from the top, e.g. after a file-type change."""
    in_comment = False
    for row in rows:
        row.marks, in_comment = highlight_line(row.display, syntax, in_comment)
        row.open_comment = in_comment
