"""security-context — container security contexts must be locked down."""

from __future__ import annotations

from manifestlint.domain.document import Document
from manifestlint.domain.findings import Finding, Severity
from manifestlint.domain.kinds import is_workload_or_pod
from manifestlint.domain.workloads import iter_containers
from manifestlint.rules.base import RuleContext, RuleSettings, SettingsRule


class SecurityContextSettings(RuleSettings):
    require_run_as_non_root: bool = True
    require_read_only_root_filesystem: bool = False
    disallow_privilege_escalation: bool = True
    required_dropped_capabilities: list[str] = []


class SecurityContextRule(SettingsRule[SecurityContextSettings]):
    name = "security-context"
    description = "Validates pod and container security contexts"
    settings_model = SecurityContextSettings

    def lint(self, document: Document, context: RuleContext) -> list[Finding]:
        if not is_workload_or_pod(document):
            return []

        findings: list[Finding] = []
        for _index, container, path in iter_containers(document):
            name = container.get("name", "")
            sc = container.get("securityContext")
            if not isinstance(sc, dict):
                sc = {}
            field = f"{path}.securityContext"

            if self.settings.require_run_as_non_root and sc.get("runAsNonRoot") is not True:
                findings.append(
                    self.finding(
                        document,
                        Severity.ERROR,
                        f"Container {name!r} must set runAsNonRoot to true",
                        field=f"{field}.runAsNonRoot",
                        suggestion="Add: securityContext.runAsNonRoot: true",
                    )
                )

            if (
                self.settings.require_read_only_root_filesystem
                and sc.get("readOnlyRootFilesystem") is not True
            ):
                findings.append(
                    self.finding(
                        document,
                        Severity.WARNING,
                        f"Container {name!r} should set readOnlyRootFilesystem to true",
                        field=f"{field}.readOnlyRootFilesystem",
                        suggestion="Add: securityContext.readOnlyRootFilesystem: true",
                    )
                )

            # Unset counts as allowed: Kubernetes defaults it to true.
            if (
                self.settings.disallow_privilege_escalation
                and sc.get("allowPrivilegeEscalation") is not False
            ):
                findings.append(
                    self.finding(
                        document,
                        Severity.ERROR,
                        f"Container {name!r} must set allowPrivilegeEscalation to false",
                        field=f"{field}.allowPrivilegeEscalation",
                        suggestion="Add: securityContext.allowPrivilegeEscalation: false",
                    )
                )

            if self.settings.required_dropped_capabilities:
                capabilities = sc.get("capabilities")
                drop = capabilities.get("drop") if isinstance(capabilities, dict) else None
                if not isinstance(drop, list):
                    drop = []
                dropped = {c for c in drop if isinstance(c, str)}
                for cap in self.settings.required_dropped_capabilities:
                    if cap in dropped:
                        continue
                    findings.append(
                        self.finding(
                            document,
                            Severity.WARNING,
                            f"Container {name!r} should drop capability {cap!r}",
                            field=f"{field}.capabilities.drop",
                            suggestion=f"Add {cap!r} to capabilities.drop",
                        )
                    )
        return findings
