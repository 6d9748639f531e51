"""resource-limits — containers must declare resource requests and limits.

A container without any ``resources`` block gets a single finding; the
per-field checks only run once the block exists, so an empty manifest is
not reported four times over.
"""

from __future__ import annotations

from manifestlint.domain.document import Document
from manifestlint.domain.findings import Finding, Severity
from manifestlint.domain.kinds import is_workload
from manifestlint.domain.workloads import iter_containers
from manifestlint.rules.base import RuleContext, RuleSettings, SettingsRule


class ResourceLimitsSettings(RuleSettings):
    require_cpu_limit: bool = True
    require_memory_limit: bool = True
    require_cpu_request: bool = True
    require_memory_request: bool = True
    exclude_namespaces: list[str] = []


# (setting, section, resource, label, example)
_CHECKS: tuple[tuple[str, str, str, str, str], ...] = (
    ("require_cpu_limit", "limits", "cpu", "CPU limit", '"1000m"'),
    ("require_memory_limit", "limits", "memory", "memory limit", '"512Mi"'),
    ("require_cpu_request", "requests", "cpu", "CPU request", '"100m"'),
    ("require_memory_request", "requests", "memory", "memory request", '"256Mi"'),
)


class ResourceLimitsRule(SettingsRule[ResourceLimitsSettings]):
    name = "resource-limits"
    description = "Ensures containers have resource requests and limits defined"
    settings_model = ResourceLimitsSettings

    def lint(self, document: Document, context: RuleContext) -> list[Finding]:
        if not is_workload(document):
            return []
        if document.namespace in self.settings.exclude_namespaces:
            return []

        findings: list[Finding] = []
        for _index, container, path in iter_containers(document):
            name = container.get("name", "")
            resources = container.get("resources")
            if not isinstance(resources, dict):
                findings.append(
                    self.finding(
                        document,
                        Severity.ERROR,
                        f"Container {name!r} has no resource requirements",
                        field=f"{path}.resources",
                        suggestion="Add resources.requests and resources.limits",
                    )
                )
                continue

            for setting, section, resource, label, example in _CHECKS:
                if not getattr(self.settings, setting):
                    continue
                block = resources.get(section)
                if isinstance(block, dict) and resource in block:
                    continue
                findings.append(
                    self.finding(
                        document,
                        Severity.ERROR,
                        f"Container {name!r} missing {label}",
                        field=f"{path}.resources.{section}.{resource}",
                        suggestion=f"Add: resources.{section}.{resource}: {example}",
                    )
                )
        return findings
