"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Builds the rule registry lazily and owns result
emission: stdout/stderr routing plus the process exit code.
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TYPE_CHECKING

import click

from manifestlint.output.formatters import OutputSettings, format_result
from manifestlint.services.result import ErrorCode

if TYPE_CHECKING:
    from manifestlint.config.models import OutputFormat
    from manifestlint.config.settings import LintSettings
    from manifestlint.plugins.manager import PluginManager
    from manifestlint.rules.registry import Registry
    from manifestlint.services.result import ServiceResult


class ExitCode(IntEnum):
    OK = 0
    ERROR_FINDINGS = 1
    FATAL_FINDINGS = 2
    SETUP = 3
    WARNINGS = 4
    EVALUATION = 5
    CANCELLED = 6


def exit_code_for(result: ServiceResult, *, fail_on_warning: bool = False) -> ExitCode:
    """Map a result to the process exit code.

    Failures map by error code. A successful ``run`` maps by its most severe
    finding; a cancelled or timed-out run without error findings is never
    OK, and warnings only count with *fail_on_warning*.
    """
    if not result.ok:
        if result.error is not None and result.error.code == ErrorCode.EVALUATION_ERROR:
            return ExitCode.EVALUATION
        return ExitCode.SETUP
    if result.op != "run":
        return ExitCode.OK
    counts = result.data.get("counts", {})
    if counts.get("fatal", 0):
        return ExitCode.FATAL_FINDINGS
    if counts.get("error", 0):
        return ExitCode.ERROR_FINDINGS
    if result.data.get("cancelled", False):
        return ExitCode.CANCELLED
    if fail_on_warning and counts.get("warning", 0):
        return ExitCode.WARNINGS
    return ExitCode.OK


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The registry (and plugin discovery behind it) is built on first use so
    ``--help`` and ``--version`` never import plugins.
    """

    def __init__(self, settings: LintSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None
        self._registry: Registry | None = None

        from manifestlint.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def plugins(self) -> PluginManager:
        if self._plugins is None:
            from manifestlint.plugins.manager import LOCAL_PLUGIN_DIR, PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load(local_dir=self.settings.root / LOCAL_PLUGIN_DIR)
        return self._plugins

    @property
    def registry(self) -> Registry:
        """The rule registry (built-ins plus plugin contributions)."""
        if self._registry is None:
            from manifestlint.rules import build_registry

            self._registry = build_registry(plugins=self.plugins)
        return self._registry

    def emit(
        self,
        result: ServiceResult,
        *,
        output_format: OutputFormat | None = None,
        color: str | None = None,
        fail_on_warning: bool = False,
    ) -> None:
        """Format and output a ServiceResult, then exit with its code.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output (in JSON mode they are in the payload).
        * Failure: writes to stderr.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            format=output_format or self.settings.output.format,
            color=color or self.settings.output.color,
            color_tty=sys.stdout.isatty(),
        )
        output = format_result(result, settings=settings)
        if result.ok:
            if output:
                click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)

        code = exit_code_for(result, fail_on_warning=fail_on_warning)
        if code != ExitCode.OK:
            raise SystemExit(int(code))
