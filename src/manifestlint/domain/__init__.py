"""Domain layer — documents, findings, and resource kinds.

Pure data and helpers; no I/O and no knowledge of rules or the engine.
"""

from manifestlint.domain.document import Document
from manifestlint.domain.findings import Finding, ResourceRef, Severity

__all__ = ["Document", "Finding", "ResourceRef", "Severity"]
