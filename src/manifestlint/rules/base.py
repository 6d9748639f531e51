"""Rule — the unit of validation logic.

A rule is uniquely named, holds its own configuration, and is invoked once
per document. ``configure()`` is called at most once per run, strictly
before evaluation; during evaluation a rule must treat its configuration
as immutable because the same instance is shared by every worker.
A rule that is given a settings block is configured on a :meth:`Rule.clone`,
so the registered instance keeps its defaults.

Most built-in rules derive from :class:`SettingsRule`, which validates the
settings block against a pydantic model with kebab-case keys::

    class MyRule(SettingsRule[MySettings]):
        name = "my-rule"
        description = "..."
        settings_model = MySettings
"""

from __future__ import annotations

import copy
import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from manifestlint.domain.document import Document
from manifestlint.domain.findings import Finding, ResourceRef, Severity
from manifestlint.errors import RuleConfigError


@dataclass(frozen=True)
class RuleContext:
    """Per-run state shared read-only with every rule invocation.

    Attributes:
        documents: Snapshot of every document in the run, for rules that
            reason about relationships between resources.
        cancel: Set once the run has been cancelled or timed out.
    """

    documents: Sequence[Document] = ()
    cancel: threading.Event = field(default_factory=threading.Event)

    @property
    def cancelled(self) -> bool:
        return self.cancel.is_set()


class Rule(ABC):
    """Base class for every rule, built-in or dynamically declared."""

    name: str = ""
    description: str = ""

    def configure(self, settings: Mapping[str, Any]) -> None:
        """Apply a settings block. Rules without settings reject any keys."""
        if settings:
            keys = ", ".join(sorted(settings))
            raise RuleConfigError(self.name, f"rule accepts no settings (got: {keys})")

    @abstractmethod
    def lint(self, document: Document, context: RuleContext) -> list[Finding]:
        """Return the findings for *document*; ``[]`` when it does not apply."""

    def clone(self) -> Self:
        """Return a shallow copy carrying the current configuration.

        ``configure()`` on the copy must rebind attributes rather than mutate
        shared containers in place. Override when that does not hold.
        """
        return copy.copy(self)

    def finding(
        self,
        document: Document,
        severity: Severity,
        message: str,
        *,
        field: str = "",
        suggestion: str = "",
    ) -> Finding:
        """Build a finding attributed to this rule."""
        return Finding(
            severity=severity,
            rule=self.name,
            message=message,
            resource=ResourceRef.from_document(document),
            field=field,
            suggestion=suggestion,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name!r}>"


# ---------------------------------------------------------------------------
# Settings-backed rules
# ---------------------------------------------------------------------------


def _kebab(name: str) -> str:
    return name.replace("_", "-")


class RuleSettings(BaseModel):
    """Base for rule settings: frozen, kebab-case keys, unknown keys rejected."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=_kebab,
        populate_by_name=True,
    )


SettingsT = TypeVar("SettingsT", bound=RuleSettings)


class SettingsRule(Rule, Generic[SettingsT]):
    """A rule whose configuration is a :class:`RuleSettings` model.

    ``configure()`` merges the given keys over the current settings, so keys
    left out keep whatever value this instance already had.
    """

    settings_model: ClassVar[type[RuleSettings]]

    def __init__(self, settings: SettingsT | None = None) -> None:
        self.settings: SettingsT = settings or self.settings_model()  # type: ignore[assignment]
        self._on_configured()

    def configure(self, settings: Mapping[str, Any]) -> None:
        merged = {**self.settings.model_dump(by_alias=True), **dict(settings)}
        try:
            self.settings = self.settings_model.model_validate(merged)  # type: ignore[assignment]
        except ValidationError as exc:
            raise RuleConfigError(self.name, _describe(exc)) from exc
        self._on_configured()

    def _on_configured(self) -> None:
        """Derive compiled state from ``self.settings`` (no-op by default)."""


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
