"""health-probes — containers should declare liveness and readiness probes."""

from __future__ import annotations

from manifestlint.domain.document import Document
from manifestlint.domain.findings import Finding, Severity
from manifestlint.domain.kinds import is_workload_or_pod
from manifestlint.domain.workloads import iter_containers
from manifestlint.rules.base import RuleContext, RuleSettings, SettingsRule


class HealthProbesSettings(RuleSettings):
    require_liveness: bool = True
    require_readiness: bool = True
    exclude_kinds: list[str] = []


class HealthProbesRule(SettingsRule[HealthProbesSettings]):
    name = "health-probes"
    description = "Ensures pods have liveness and readiness probes"
    settings_model = HealthProbesSettings

    def lint(self, document: Document, context: RuleContext) -> list[Finding]:
        if document.kind in self.settings.exclude_kinds:
            return []
        if not is_workload_or_pod(document):
            return []

        probes = []
        if self.settings.require_liveness:
            probes.append(("livenessProbe", "detect and recover from failures"))
        if self.settings.require_readiness:
            probes.append(("readinessProbe", "control traffic routing"))

        findings: list[Finding] = []
        for _index, container, path in iter_containers(document):
            name = container.get("name", "")
            for probe, purpose in probes:
                if probe in container:
                    continue
                findings.append(
                    self.finding(
                        document,
                        Severity.WARNING,
                        f"Container {name!r} missing {probe}",
                        field=f"{path}.{probe}",
                        suggestion=f"Add a {probe} to {purpose}",
                    )
                )
        return findings
