"""Terminal application and command-line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from textual.app import App, ComposeResult

from cactus.config import Config, load_config
from cactus.document import Document
from cactus.editor import HELP_MESSAGE, Editor
from cactus.fileio import read_lines
from cactus.widget import EditorView

logger = logging.getLogger(__name__)


class CactusApp(App, inherit_bindings=False):
    """TUI app that wraps the EditorView widget."""

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    BINDINGS = []
    ENABLE_COMMAND_PALETTE = False

    def __init__(self, editor: Editor, **kwargs) -> None:
        super().__init__(**kwargs)
        self.editor = editor

    def compose(self) -> ComposeResult:
        yield EditorView(self.editor, id="editor")

    def on_mount(self) -> None:
        self.query_one("#editor").focus()

    def on_editor_view_quit(self, event: EditorView.Quit) -> None:
        self.exit()


def open_document(file_path: str, config: Config) -> Document:
    """Load *file_path*; a missing file gives an empty document bound to it.

    Other read errors propagate as ``OSError``.
    """
    lines: list[str] = []
    if file_path:
        if Path(file_path).exists():
            lines = read_lines(file_path)
        else:
            logger.info("%s does not exist, starting a new file", file_path)
    return Document(lines, filename=file_path or None, tab_stop=config.tab_stop)


def _setup_logging(log_file: str, log_level: str) -> None:
    if not log_file:
        logging.basicConfig(handlers=[logging.NullHandler()])
        return
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def main() -> None:
    config = load_config()
    parser = argparse.ArgumentParser(
        prog="cactus",
        description="A small terminal text editor",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="",
        help="file to open",
    )
    parser.add_argument(
        "--log-file",
        default=config.log_file,
        help="write log records to this file (default: no logging)",
    )
    parser.add_argument(
        "--log-level",
        default=config.log_level.lower(),
        choices=["debug", "info", "warning", "error"],
    )
    args = parser.parse_args()

    config.log_file = args.log_file
    config.log_level = args.log_level.upper()
    _setup_logging(config.log_file, config.log_level)

    try:
        document = open_document(args.file, config)
    except OSError as exc:
        print(f"cactus: {exc}", file=sys.stderr)
        sys.exit(1)

    editor = Editor(document, config=config)
    editor.set_status_message(HELP_MESSAGE)
    CactusApp(editor).run()


if __name__ == "__main__":
    main()
