"""Rich Console factory and theme for occasion output.

Consoles render into a StringIO buffer so callers decide where the text
goes (click routes it to stdout or stderr). Color is opt-in: the caller
passes ``color=True`` only when the destination stream is a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

OCCASION_THEME = Theme(
    {
        "occasion.error": "bold red",
        "occasion.warning": "yellow",
    }
)


def create_console(*, color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        color: Emit ANSI styles (only when writing to a TTY).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=OCCASION_THEME,
        force_terminal=color,
        no_color=not color,
        highlight=False,
        soft_wrap=True,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
