"""Exception hierarchy for lint runs.

Two families reach the caller of a run:

- :class:`SetupError` — anything wrong before evaluation starts (bad custom
  rule declaration, bad per-rule settings, unknown rule name or kind,
  unreadable manifests). Nothing has been evaluated yet.
- :class:`EvaluationFailedError` — one or more (document, rule) units failed.
  Carries the individual :class:`EvaluationError` records and whatever
  findings the other units produced.

Rules raise :class:`ExpressionError` or :class:`DocumentShapeError` from
inside ``lint()``; the engine wraps them into :class:`EvaluationError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from manifestlint.domain.findings import Finding


class LintError(Exception):
    """Base class for every error raised by manifestlint."""


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


class SetupError(LintError):
    """A run could not be prepared; no document was evaluated."""


class RuleNotFoundError(SetupError):
    """A rule name was referenced that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"rule {name!r} not found")
        self.name = name


class UnknownRuleKindError(SetupError):
    """No factory is registered for a custom rule kind."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"no factory registered for rule kind {kind!r}")
        self.kind = kind


class InvalidDeclarationError(SetupError):
    """A custom rule declaration is missing its name or kind."""


class RuleConfigError(SetupError):
    """Applying settings to a rule failed."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"failed to configure rule {name!r}: {reason}")
        self.name = name
        self.reason = reason


class RenderError(SetupError):
    """Manifests could not be read into documents."""


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


class DocumentShapeError(LintError):
    """A document field exists but has an unexpected type."""

    def __init__(self, path: str, expected: str, actual: object) -> None:
        super().__init__(f"field {path!r}: expected {expected}, got {type(actual).__name__}")
        self.path = path


class ExpressionError(LintError):
    """An expression failed to compile or to evaluate."""

    def __init__(self, expression: str, reason: str) -> None:
        super().__init__(f"expression {expression!r} failed: {reason}")
        self.expression = expression
        self.reason = reason


class EvaluationError(LintError):
    """A single rule failed on a single document."""

    def __init__(self, rule: str, kind: str, name: str, cause: BaseException) -> None:
        super().__init__(f"rule {rule!r} failed on {kind}/{name}: {cause}")
        self.rule = rule
        self.kind = kind
        self.name = name
        self.cause = cause


class EvaluationFailedError(LintError):
    """One or more evaluation units failed during a run.

    ``findings`` holds the sorted findings produced by the units that did
    succeed, so callers can still show partial results.
    """

    def __init__(self, errors: list[EvaluationError], findings: list[Finding]) -> None:
        first = errors[0] if errors else None
        summary = f"{len(errors)} evaluation error(s)"
        if first is not None:
            summary = f"{summary}; first: {first}"
        super().__init__(summary)
        self.errors = errors
        self.findings = findings
