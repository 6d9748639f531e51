"""Findings — the normalized output of every rule.

Findings are frozen. Their production order carries no meaning; callers
get a deterministic order through :func:`sort_findings`.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from manifestlint.domain.document import Document


class Severity(StrEnum):
    """Finding severities, most severe first."""

    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.FATAL: 0,
    Severity.ERROR: 1,
    Severity.WARNING: 2,
    Severity.INFO: 3,
}


class ResourceRef(BaseModel):
    """Identifies the document a finding was produced for."""

    model_config = {"frozen": True}

    api_version: str = ""
    kind: str = ""
    namespace: str = ""
    name: str = ""

    @classmethod
    def from_document(cls, document: Document) -> ResourceRef:
        return cls(
            api_version=document.api_version,
            kind=document.kind,
            namespace=document.namespace,
            name=document.name,
        )

    def __str__(self) -> str:
        ref = f"{self.kind}/{self.name}"
        if self.namespace:
            ref = f"{self.namespace}/{ref}"
        return ref


class Finding(BaseModel):
    """One issue reported by one rule against one document."""

    model_config = {"frozen": True}

    severity: Severity
    rule: str
    message: str
    resource: ResourceRef
    field: str = ""
    suggestion: str = ""

    def sort_key(self) -> tuple[str, str, str, str, str, str]:
        r = self.resource
        return (r.kind, r.namespace, r.name, self.rule, self.field, self.message)


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Order findings by resource kind, namespace, name, then rule."""
    return sorted(findings, key=Finding.sort_key)


def count_by_severity(findings: Iterable[Finding]) -> dict[str, int]:
    """Count findings per severity; every severity is present in the result."""
    counts = {s.value: 0 for s in Severity}
    for finding in findings:
        counts[finding.severity.value] += 1
    return counts
