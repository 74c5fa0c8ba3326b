"""Rich Console factory and theme for profilectl output.

Consoles render into a StringIO buffer so formatting stays a pure
``ServiceResult -> str`` function. In non-TTY environments (tests, pipes)
Rich drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PROFILE_THEME = Theme(
    {
        "profile.ok": "bold green",
        "profile.error": "bold red",
        "profile.warning": "bold yellow",
        "profile.op": "bold cyan",
        "profile.key": "dim",
        "profile.id": "bold blue",
        "profile.field": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=PROFILE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
