"""Markdown rendering for the terminal."""

from __future__ import annotations

import io
import os
import shutil
import sys
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown


def _check_base_dir(base_dir: str | os.PathLike) -> None:
    if not Path(base_dir).is_dir():
        raise NotADirectoryError(f"Cannot render markdown: not a directory: {base_dir}")


def render_markdown(base_dir: str | os.PathLike, text: str) -> str:
    """Render Markdown into a string to print to the terminal, trimmed."""
    _check_base_dir(base_dir)
    is_tty = sys.stderr.isatty()
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=shutil.get_terminal_size().columns,
        force_terminal=is_tty,
        color_system="auto" if is_tty else None,
        highlight=False,
    )
    console.print(Markdown(text))
    return buffer.getvalue().strip()


def print_markdown(base_dir: str | os.PathLike, text: str) -> None:
    """Print Markdown to stderr."""
    _check_base_dir(base_dir)
    Console(file=sys.stderr, highlight=False).print(Markdown(text))