"""Rich/JSON/YAML/GitHub-Actions output helpers.

The CLI renders a ServiceResult for humans (Rich text) or machines
(``--json`` or a ``run`` output format). The formatter layer adapts a
ServiceResult to the requested output mode; only ``run`` results honor the
``[output] format`` setting.
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass
from io import StringIO
from typing import TYPE_CHECKING, Any

from ruamel.yaml import YAML

from manifestlint.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from manifestlint.config.models import OutputFormat
    from manifestlint.services.result import ServiceResult

# Severity → GitHub workflow command.
_GITHUB_LEVELS: dict[str, str] = {
    "fatal": "error",
    "error": "error",
    "warning": "warning",
    "info": "notice",
}


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    format: OutputFormat = "text"
    color: str = "auto"
    color_tty: bool = False


def _github_escape(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _github_property(value: str) -> str:
    return _github_escape(value).replace(":", "%3A").replace(",", "%2C")


def format_github(data: dict[str, Any]) -> str:
    """One ``::level title=[rule] resource::message`` workflow command per finding."""
    lines: list[str] = []
    for finding in data.get("findings", []):
        level = _GITHUB_LEVELS.get(str(finding.get("severity", "")), "warning")
        res = finding.get("resource", {})
        target = f"{res.get('kind', '')}/{res.get('name', '')}"
        if res.get("namespace"):
            target = f"{res['namespace']}/{target}"
        title = f"[{finding.get('rule', '')}] {target}"
        message = str(finding.get("message", ""))
        if finding.get("field"):
            message = f"{message} ({finding['field']})"
        if finding.get("suggestion"):
            message = f"{message} (Suggestion: {finding['suggestion']})"
        lines.append(f"::{level} title={_github_property(title)}::{_github_escape(message)}")
    return "\n".join(lines)


def format_yaml(payload: Any) -> str:
    yaml = YAML(typ="safe", pure=True)
    yaml.default_flow_style = False
    buf = StringIO()
    yaml.dump(payload, buf)
    return buf.getvalue().rstrip("\n")


def _run_payload(result: ServiceResult) -> dict[str, Any]:
    return {
        "findings": result.data.get("findings", []),
        "counts": result.data.get("counts", {}),
        "documents": result.data.get("documents", 0),
        "cancelled": result.data.get("cancelled", False),
    }


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    ``--json`` wins over everything else and dumps the whole envelope.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    if result.ok and result.op == "run" and settings.format != "text":
        if settings.format == "json":
            return _json.dumps(_run_payload(result), indent=2)
        if settings.format == "yaml":
            return format_yaml(_run_payload(result))
        return format_github(result.data)

    if settings.quiet:
        return render_quiet(result)
    return render_result(
        result,
        verbose=settings.verbose,
        no_color=settings.color == "never",
        force_color=settings.color == "always" or (settings.color == "auto" and settings.color_tty),
    )
