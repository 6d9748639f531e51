"""required-labels — resources must carry a configured set of labels."""

from __future__ import annotations

from manifestlint.domain.document import Document
from manifestlint.domain.findings import Finding, Severity
from manifestlint.rules.base import RuleContext, RuleSettings, SettingsRule


class RequiredLabelsSettings(RuleSettings):
    labels: list[str] = []
    exclude_kinds: list[str] = []


class RequiredLabelsRule(SettingsRule[RequiredLabelsSettings]):
    name = "required-labels"
    description = "Ensures resources have required labels"
    settings_model = RequiredLabelsSettings

    def lint(self, document: Document, context: RuleContext) -> list[Finding]:
        if document.kind in self.settings.exclude_kinds:
            return []

        labels = document.labels
        return [
            self.finding(
                document,
                Severity.WARNING,
                f"Missing required label {label!r}",
                field="metadata.labels",
                suggestion=f"Add label: {label}: <value>",
            )
            for label in self.settings.labels
            if label not in labels
        ]
