"""Command: list registered rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from manifestlint.commands._base import LintCommand

if TYPE_CHECKING:
    from manifestlint.commands._context import AppContext


@click.command(
    cls=LintCommand,
    examples="""\
  manifestlint linters
  manifestlint -q linters
  manifestlint --json linters""",
)
@click.pass_obj
def linters(app: AppContext) -> None:
    """List every registered rule with its description."""
    from manifestlint.services.lint import LintService

    app.emit(LintService(app.registry, app.settings.lint_config()).list_rules())
