"""LintService — renders manifests, runs the engine, wraps the outcome.

Setup failures (config, declarations, unreadable manifests) and evaluation
failures come back as distinct ``ServiceResult`` error codes so the CLI can
map them to distinct exit codes. Partial findings from a failed evaluation
are kept in the error detail.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from manifestlint.config.models import LintersConfig
from manifestlint.errors import EvaluationFailedError, SetupError
from manifestlint.infrastructure.renderer import exclude_documents, render_paths
from manifestlint.rules.engine import Engine
from manifestlint.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from manifestlint.config.models import LintConfig
    from manifestlint.domain.findings import Finding
    from manifestlint.rules.registry import Registry

logger = logging.getLogger(__name__)


def _dump_findings(findings: Sequence[Finding]) -> list[dict[str, Any]]:
    return [f.model_dump(mode="json") for f in findings]


class LintService:
    """Lint operations over a registry and a resolved configuration."""

    def __init__(self, registry: Registry, config: LintConfig) -> None:
        self._registry = registry
        self._config = config

    def list_rules(self) -> ServiceResult:
        """Every registered rule with its description, sorted by name."""
        rules = [{"name": r.name, "description": r.description} for r in self._registry.all()]
        return ServiceResult(
            ok=True,
            op="linters",
            data={"rules": rules, "count": len(rules), "kinds": self._registry.kinds()},
        )

    def validate_config(self) -> ServiceResult:
        """Run setup only: declarations, selection and configuration."""
        try:
            rules = Engine(self._registry, self._config.linters, self._config.run).prepare()
        except SetupError as exc:
            return ServiceResult.failure("validate_config", ErrorCode.SETUP_ERROR, str(exc))
        return ServiceResult(
            ok=True,
            op="validate_config",
            data={"rules": [r.name for r in rules], "count": len(rules)},
        )

    def run(
        self,
        paths: Sequence[str] = (),
        *,
        enable: Sequence[str] = (),
        disable: Sequence[str] = (),
        cancel: threading.Event | None = None,
    ) -> ServiceResult:
        """Lint the manifests under *paths* (or the configured sources).

        Non-empty *enable*/*disable* replace the configured lists.
        """
        targets = list(paths) or list(self._config.sources) or ["."]
        linters = self._config.linters
        if enable or disable:
            linters = LintersConfig(
                enable=list(enable) or linters.enable,
                disable=list(disable) or linters.disable,
                settings=linters.settings,
                custom=linters.custom,
            )

        try:
            engine = Engine(self._registry, linters, self._config.run)
            engine.prepare()
            documents = render_paths(
                targets,
                skip_dirs=self._config.run.skip_dirs,
                exclude=self._config.exclude.paths,
            )
            documents = exclude_documents(documents, self._config.exclude.resources)
            report = engine.run(documents, cancel=cancel)
        except SetupError as exc:
            logger.debug("Run setup failed", exc_info=True)
            return ServiceResult.failure("run", ErrorCode.SETUP_ERROR, str(exc))
        except EvaluationFailedError as exc:
            return ServiceResult.failure(
                "run",
                ErrorCode.EVALUATION_ERROR,
                str(exc),
                errors=[
                    {"rule": e.rule, "kind": e.kind, "name": e.name, "error": str(e.cause)}
                    for e in exc.errors
                ],
                findings=_dump_findings(exc.findings),
            )

        warnings: list[str] = []
        if report.cancelled:
            warnings.append("Run cancelled before all rules finished; results are partial")

        return ServiceResult(
            ok=True,
            op="run",
            data={
                "findings": _dump_findings(report.findings),
                "count": len(report.findings),
                "counts": report.counts,
                "rules": report.rules,
                "documents": report.documents,
                "cancelled": report.cancelled,
            },
            warnings=warnings,
        )
