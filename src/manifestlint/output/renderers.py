"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers are
dispatched by ``result.op`` in :func:`render_result`; unknown ops fall
through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from manifestlint.output.console import create_console, get_output, style_for_severity

if TYPE_CHECKING:
    from rich.console import Console

    from manifestlint.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(
    result: ServiceResult,
    *,
    verbose: bool = False,
    no_color: bool = False,
    force_color: bool = False,
) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console(no_color=no_color, force_color=force_color)

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "run":
        counts = result.data.get("counts", {})
        return " ".join(f"{sev}={n}" for sev, n in counts.items())
    if result.op == "linters":
        return "\n".join(r["name"] for r in result.data.get("rules", []))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="lint.ok")
    op = Text(f"  {result.op}", style="lint.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="lint.key")
    console.print(k, Text(str(value)), end="")
    console.print()


def _resource_label(resource: dict[str, Any]) -> str:
    label = f"{resource.get('kind', '')}/{resource.get('name', '')}"
    if resource.get("namespace"):
        label = f"{resource['namespace']}/{label}"
    return label


def _summary(counts: dict[str, int]) -> str:
    parts = [f"{n} {sev}" for sev, n in counts.items() if n]
    return ", ".join(parts) if parts else "no findings"


# ── Run ───────────────────────────────────────────────────────────────


def _render_run(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render findings grouped by resource, in their sorted order."""
    findings = result.data.get("findings", [])
    documents = result.data.get("documents", 0)

    if not findings:
        console.print(f"[lint.ok]OK[/lint.ok]  No issues found in {documents} resource(s).")
        return

    by_resource: dict[str, list[dict[str, Any]]] = {}
    for finding in findings:
        by_resource.setdefault(_resource_label(finding.get("resource", {})), []).append(finding)

    for label, items in by_resource.items():
        console.print(Text(label, style="lint.resource"))
        for finding in items:
            sev = str(finding.get("severity", ""))
            style = style_for_severity(sev)
            line = Text("  ")
            line.append(f"{sev:<7}", style=style)
            line.append(f" {finding.get('rule', '')}", style="lint.rule")
            if finding.get("field"):
                line.append(f" {finding['field']}", style="lint.field")
            line.append(f": {finding.get('message', '')}")
            console.print(line)
            if finding.get("suggestion"):
                console.print(Text(f"    hint: {finding['suggestion']}", style="lint.suggestion"))
        console.print()

    counts = result.data.get("counts", {})
    console.print(f"{_summary(counts)} across {documents} resource(s)")
    if verbose:
        _field(console, "rules", ", ".join(result.data.get("rules", [])))


# ── Introspection ─────────────────────────────────────────────────────


def _render_linters(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="lint.rule", no_wrap=True)
    table.add_column("Description")
    for rule in result.data.get("rules", []):
        table.add_row(str(rule.get("name", "")), str(rule.get("description", "")))
    console.print(table)
    if verbose:
        _field(console, "kinds", ", ".join(result.data.get("kinds", [])))


def _render_validate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "active_rules", result.data.get("count", 0))
    if verbose:
        for name in result.data.get("rules", []):
            console.print(f"    - {name}")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="lint.error")
    op = Text(f"  {result.op}", style="lint.op")
    console.print(label, op, Text(" — "), msg)

    if err is None or not err.detail:
        return
    for item in err.detail.get("errors", []):
        line = Text(f"  {item['kind']}/{item['name']} ")
        line.append(item["rule"], style="lint.rule")
        line.append(f": {item['error']}")
        console.print(line)
    if verbose:
        partial = err.detail.get("findings", [])
        if partial:
            console.print(Text(f"  partial findings: {len(partial)}", style="dim"))


_OP_RENDERERS: dict[str, Any] = {
    "run": _render_run,
    "linters": _render_linters,
    "validate_config": _render_validate,
}
