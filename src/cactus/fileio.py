"""Reading and writing files for the editor."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def read_lines(file_path: str) -> list[str]:
    """Return the lines of *file_path* with trailing ``\\n``/``\\r`` stripped.

    Raises ``OSError`` when the file cannot be read.
    """
    data = Path(file_path).read_bytes()
    text = data.decode("utf-8", "surrogateescape")
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    lines = [line.rstrip("\r") for line in lines]
    logger.info("read %d lines from %s", len(lines), file_path)
    return lines


def write_file(file_path: str, data: bytes) -> int:
    """Atomically replace *file_path* with *data*. Returns the byte count.

    A symlink is followed, so the link stays and its target gets the data.
    """
    path = Path(os.path.realpath(file_path))
    tmp: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "wb", dir=path.parent, prefix=f".{path.name}.", delete=False
        ) as fh:
            tmp = fh.name
            fh.write(data)
        if path.exists():
            os.chmod(tmp, stat.S_IMODE(path.stat().st_mode))
        else:
            os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    except OSError:
        if tmp is not None:
            Path(tmp).unlink(missing_ok=True)
        raise
    return len(data)
