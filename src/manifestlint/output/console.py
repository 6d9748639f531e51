"""Rich Console factory and theme for manifestlint output.

Consoles render to a StringIO buffer so every formatter returns a plain
``str``. Rich strips color codes when the target is not a terminal unless
color is forced.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

LINT_THEME = Theme(
    {
        "lint.ok": "bold green",
        "lint.error": "bold red",
        "lint.op": "bold cyan",
        "lint.key": "dim",
        "lint.resource": "bold",
        "lint.rule": "cyan",
        "lint.field": "dim",
        "lint.suggestion": "dim italic",
        "lint.severity.fatal": "bold white on red",
        "lint.severity.error": "bold red",
        "lint.severity.warning": "bold yellow",
        "lint.severity.info": "blue",
    }
)


def create_console(
    *,
    no_color: bool = False,
    force_color: bool = False,
    width: int | None = None,
) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        force_color: Emit ANSI codes even though the buffer is not a TTY.
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=LINT_THEME,
        no_color=no_color,
        force_terminal=True if force_color and not no_color else None,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_severity(severity: str) -> str:
    """Return the Rich style name for a finding severity."""
    return f"lint.severity.{severity}" if severity else ""
