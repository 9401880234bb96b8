"""Themed Rich consoles that render into a string buffer.

Color only reaches the terminal when stdout is a TTY; in pipes and
tests Rich writes plain text.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DPKGSIZE_THEME = Theme(
    {
        "pkg.ok": "bold green",
        "pkg.error": "bold red",
        "pkg.warning": "bold yellow",
        "pkg.op": "bold cyan",
        "pkg.key": "dim",
        "pkg.name": "bold blue",
        "pkg.percent": "dim",
        "pkg.size": "magenta",
        "pkg.size.small": "dim",
        "pkg.size.large": "bold magenta",
        "pkg.size.huge": "bold red",
    }
)

# Upper bounds in KiB for each size band, smallest first.
_SIZE_BANDS: tuple[tuple[int, str], ...] = (
    (1024, "pkg.size.small"),
    (100 * 1024, "pkg.size"),
    (1024 * 1024, "pkg.size.large"),
)

DEFAULT_WIDTH = 120


def size_style(kib: int) -> str:
    """Theme style for a package footprint: dim under 1 MiB, red from 1 GiB."""
    for limit, style in _SIZE_BANDS:
        if kib < limit:
            return style
    return "pkg.size.huge"


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=DPKGSIZE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Text rendered so far by a console from :func:`create_console`."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        msg = "console does not render to a buffer"
        raise TypeError(msg)
    return buffer.getvalue()
