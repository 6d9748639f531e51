"""Expression rule kind — checks defined entirely by user predicates.

A declaration such as::

    [[linters.custom]]
    name = "configmap-exists"
    kind = "jq"
    description = "Referenced ConfigMaps must be part of the manifest set"

    [[linters.custom.settings.rules]]
    expression = '''
      select(.kind == "Deployment")
      | [.spec.template.spec.volumes[]?.configMap.name | strings] as $refs
      | [$objects[] | select(.kind == "ConfigMap") | .metadata.name] as $cms
      | any($refs[]; . as $r | $cms | index([$r]) | not)
    '''
    message = "Deployment references a ConfigMap that does not exist"
    severity = "error"

becomes one :class:`ExpressionRule`. Each entry's expression is compiled
during ``configure()`` and evaluated per document with ``.``/``$object``
bound to the document and ``$objects`` to every document in the run.

A ``null`` or ``false`` result means "no issue"; anything else fires
exactly one finding carrying the entry's static message. Evaluation stops
at the first firing result, so an entry yields at most one finding per
document.

The expression language sits behind :class:`ExpressionEngine`; the default
:class:`JqExpressionEngine` uses jq.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Protocol, Self

import jq
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from manifestlint.domain.document import Document
from manifestlint.domain.findings import Finding, Severity
from manifestlint.errors import ExpressionError, RuleConfigError
from manifestlint.rules.base import Rule, RuleContext

KIND = "jq"
GENERIC_NAME = "jq"
GENERIC_DESCRIPTION = "Evaluates custom jq expressions against Kubernetes resources"


# ---------------------------------------------------------------------------
# Expression engine
# ---------------------------------------------------------------------------


class ExpressionEngine(Protocol):
    """Compiles and evaluates predicate expressions."""

    def compile(self, expression: str) -> Any:
        """Return an opaque compiled form; raise ExpressionError on bad syntax."""
        ...

    def evaluate(
        self,
        compiled: Any,
        document: Document,
        documents: Sequence[Document],
    ) -> Iterator[Any]:
        """Yield the expression's results; raise ExpressionError on failure."""
        ...


class _CompiledJq:
    """A checked jq program, bound to one run's document set on demand.

    ``$objects`` is passed as a named argument, so the document set is
    serialized once per run instead of once per evaluated document.
    """

    def __init__(self, source: str, expression: str) -> None:
        self.source = source
        self.expression = expression
        self._lock = threading.Lock()
        self._documents: Sequence[Document] | None = None
        self._program: Any = None

    def bind(self, documents: Sequence[Document]) -> Any:
        with self._lock:
            if self._program is None or self._documents is not documents:
                objects = [d.data for d in documents]
                try:
                    self._program = jq.compile(self.source, args={"objects": objects})
                except (TypeError, ValueError) as exc:
                    raise ExpressionError(self.expression, str(exc)) from exc
                self._documents = documents
            return self._program


class JqExpressionEngine:
    """jq-backed engine.

    The document is the program input; ``$objects`` is a per-run argument.
    """

    _WRAPPER = ". as $object | (\n{expression}\n)"

    def compile(self, expression: str) -> _CompiledJq:
        source = self._WRAPPER.format(expression=expression)
        try:
            jq.compile(source, args={"objects": []})
        except ValueError as exc:
            raise ExpressionError(expression, str(exc)) from exc
        return _CompiledJq(source, expression)

    def evaluate(
        self,
        compiled: _CompiledJq,
        document: Document,
        documents: Sequence[Document],
    ) -> Iterator[Any]:
        program = compiled.bind(documents)
        try:
            yield from program.input_value(document.data)
        except (TypeError, ValueError) as exc:
            raise ExpressionError(compiled.expression, str(exc)) from exc


# ---------------------------------------------------------------------------
# Rule entries
# ---------------------------------------------------------------------------


class ExpressionEntry(BaseModel):
    """One predicate plus the static content of the finding it fires."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    expression: str = Field(min_length=1)
    message: str = Field(min_length=1)
    severity: Severity = Severity.ERROR
    field: str = Field(
        default="",
        validation_alias=AliasChoices("field", "field-path", "field_path"),
    )
    suggestion: str = ""


def parse_entries(rule_name: str, settings: Mapping[str, Any]) -> list[ExpressionEntry]:
    """Validate the ``rules`` list of a settings block."""
    raw = settings.get("rules")
    if not isinstance(raw, list):
        raise RuleConfigError(rule_name, "rules must be an array")
    unknown = set(settings) - {"rules"}
    if unknown:
        raise RuleConfigError(rule_name, f"unknown settings: {', '.join(sorted(unknown))}")

    entries: list[ExpressionEntry] = []
    for index, item in enumerate(raw):
        if not isinstance(item, Mapping):
            raise RuleConfigError(rule_name, f"rule {index} must be an object")
        try:
            entries.append(ExpressionEntry.model_validate(dict(item)))
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise RuleConfigError(rule_name, f"rule {index}: {problems}") from exc
    return entries


# ---------------------------------------------------------------------------
# Rule
# ---------------------------------------------------------------------------


class ExpressionRule(Rule):
    """A rule whose checks are user-supplied predicate expressions."""

    def __init__(
        self,
        name: str,
        description: str = "",
        *,
        engine: ExpressionEngine | None = None,
    ) -> None:
        self.name = name
        self.description = description
        self._engine: ExpressionEngine = engine or JqExpressionEngine()
        self._entries: tuple[ExpressionEntry, ...] = ()
        self._compiled: tuple[Any, ...] = ()

    @property
    def entries(self) -> tuple[ExpressionEntry, ...]:
        return self._entries

    def configure(self, settings: Mapping[str, Any]) -> None:
        entries = parse_entries(self.name, settings)
        compiled = []
        for index, entry in enumerate(entries):
            try:
                compiled.append(self._engine.compile(entry.expression))
            except ExpressionError as exc:
                raise RuleConfigError(self.name, f"rule {index}: {exc.reason}") from exc
        self._entries = tuple(entries)
        self._compiled = tuple(compiled)

    def lint(self, document: Document, context: RuleContext) -> list[Finding]:
        findings: list[Finding] = []
        for entry, compiled in zip(self._entries, self._compiled, strict=True):
            for result in self._engine.evaluate(compiled, document, context.documents):
                if result is None or result is False:
                    continue
                findings.append(
                    self.finding(
                        document,
                        entry.severity,
                        entry.message,
                        field=entry.field,
                        suggestion=entry.suggestion,
                    )
                )
                break
        return findings

    def clone(self) -> Self:
        # Entries and compiled programs are immutable and reassigned, never mutated.
        return copy.copy(self)


class ExpressionRuleFactory:
    """Creates :class:`ExpressionRule` instances sharing one engine."""

    def __init__(self, engine: ExpressionEngine | None = None) -> None:
        self._engine = engine

    def __call__(self, name: str, description: str = "") -> ExpressionRule:
        return ExpressionRule(name, description, engine=self._engine)
