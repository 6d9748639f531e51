"""cluster-role-binding-security — flag bindings to overly broad groups."""

from __future__ import annotations

from manifestlint.domain.document import Document
from manifestlint.domain.findings import Finding, Severity
from manifestlint.domain.kinds import CLUSTER_ROLE_BINDING, is_kind
from manifestlint.rules.base import RuleContext, RuleSettings, SettingsRule

NAMESPACE_GROUP_PREFIX = "system:serviceaccounts:"


class ClusterRoleBindingSettings(RuleSettings):
    disallowed_groups: list[str] = [
        "system:authenticated",
        "system:unauthenticated",
        "system:serviceaccounts",
    ]
    warn_namespace_groups: bool = True
    allowed_roles_for_broad_groups: list[str] = []
    critical_roles: list[str] = []


class ClusterRoleBindingSecurityRule(SettingsRule[ClusterRoleBindingSettings]):
    name = "cluster-role-binding-security"
    description = "Validates ClusterRoleBindings for overly permissive group assignments"
    settings_model = ClusterRoleBindingSettings

    def lint(self, document: Document, context: RuleContext) -> list[Finding]:
        if not is_kind(document, CLUSTER_ROLE_BINDING):
            return []

        role = document.lookup_str("roleRef.name") or ""
        groups = [
            s["name"]
            for s in document.lookup_list("subjects") or []
            if isinstance(s, dict) and s.get("kind") == "Group" and isinstance(s.get("name"), str)
        ]

        findings: list[Finding] = []
        for group in groups:
            if group in self.settings.disallowed_groups:
                severity = (
                    Severity.WARNING
                    if role in self.settings.allowed_roles_for_broad_groups
                    else Severity.ERROR
                )
                findings.append(
                    self.finding(
                        document,
                        severity,
                        f"Binds to dangerous group {group!r} (role: {role})",
                        field="subjects",
                        suggestion="Use specific ServiceAccounts or Users instead of broad groups",
                    )
                )

            if self.settings.warn_namespace_groups and group.startswith(NAMESPACE_GROUP_PREFIX):
                severity = (
                    Severity.ERROR if role in self.settings.critical_roles else Severity.WARNING
                )
                namespace = group.removeprefix(NAMESPACE_GROUP_PREFIX)
                findings.append(
                    self.finding(
                        document,
                        severity,
                        f"Binds to all ServiceAccounts in namespace {namespace!r} (role: {role})",
                        field="subjects",
                        suggestion="Use specific ServiceAccount instead of namespace-wide group",
                    )
                )
        return findings
