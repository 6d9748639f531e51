"""Command group: configuration file checks and scaffolding."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from manifestlint.commands._base import LintGroup

if TYPE_CHECKING:
    from manifestlint.commands._context import AppContext


@click.group(
    cls=LintGroup,
    examples="""\
  manifestlint config validate
  manifestlint -c ci/manifestlint.toml config validate
  manifestlint config init
  manifestlint config init --force""",
)
def config() -> None:
    """Validate or scaffold manifestlint.toml."""


@config.command(
    examples="""\
  manifestlint config validate
  manifestlint -v config validate""",
)
@click.pass_obj
def validate(app: AppContext) -> None:
    """Check custom declarations, rule names and rule settings."""
    from manifestlint.services.lint import LintService

    app.emit(LintService(app.registry, app.settings.lint_config()).validate_config())


@config.command(
    examples="""\
  manifestlint config init
  manifestlint config init --force""",
)
@click.option("--force", is_flag=True, help="Overwrite an existing manifestlint.toml.")
@click.pass_obj
def init(app: AppContext, force: bool) -> None:
    """Write a commented example manifestlint.toml to the project root."""
    from manifestlint.services.config import ConfigService

    app.emit(ConfigService(app.settings.root).init(force=force))
