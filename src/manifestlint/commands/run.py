"""Command: lint Kubernetes manifests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from manifestlint.commands._base import LintCommand

if TYPE_CHECKING:
    from manifestlint.commands._context import AppContext


@click.command(
    cls=LintCommand,
    examples="""\
  manifestlint run
  manifestlint run deploy/ charts/rendered.yaml
  manifestlint run -E image-tags -E resource-limits deploy/
  manifestlint run -D health-probes --fail-on-warning deploy/
  manifestlint run --format github-actions deploy/
  manifestlint --json run deploy/""",
)
@click.argument("paths", nargs=-1, type=click.Path())
@click.option(
    "-E",
    "--enable-linter",
    "enable",
    multiple=True,
    help="Run only this rule (repeatable). Replaces [linters] enable.",
)
@click.option(
    "-D",
    "--disable-linter",
    "disable",
    multiple=True,
    help="Skip this rule (repeatable). Replaces [linters] disable.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "yaml", "github-actions"]),
    default=None,
    help="Findings output format (default from [output] format).",
)
@click.option("--fail-on-warning", is_flag=True, help="Exit 4 when only warnings were found.")
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.pass_obj
def run(
    app: AppContext,
    paths: tuple[str, ...],
    enable: tuple[str, ...],
    disable: tuple[str, ...],
    output_format: str | None,
    fail_on_warning: bool,
    no_color: bool,
) -> None:
    """Lint manifests under PATHS (default: configured sources, else '.')."""
    from manifestlint.services.lint import LintService

    base = app.settings.root
    targets = [str(base / p) for p in app.settings.sources] if not paths else list(paths)
    svc = LintService(app.registry, app.settings.lint_config())
    result = svc.run(targets, enable=enable, disable=disable)
    app.emit(
        result,
        output_format=output_format,  # type: ignore[arg-type]
        color="never" if no_color else None,
        fail_on_warning=fail_on_warning,
    )
