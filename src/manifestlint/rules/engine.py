"""Execution engine — selects, configures and runs rules over documents.

A run has two phases:

1. **Setup** (:meth:`Engine.prepare`, sequential). Custom rule declarations
   are instantiated through their kind's factory, configured, and
   registered. The active set is then computed (enable list, minus disable
   list; disable wins) and each active rule with a settings block is
   configured. Any failure raises a :class:`~manifestlint.errors.SetupError`
   before a single document is evaluated.

2. **Evaluation** (:meth:`Engine.run`). Every (document, rule) pair is an
   independent unit executed on a thread pool. At most ``concurrency``
   units are in flight: the scheduler acquires a slot before submitting and
   the unit releases it when done. Each unit lints a deep copy of its
   document; all units share one read-only snapshot of the full document
   set through :class:`~manifestlint.rules.base.RuleContext`.

INVARIANT: Rules with a settings block are configured on per-run clones.
Registered instances keep their defaults, so a run never inherits settings
from an earlier run. Rules without settings run as registered.

INVARIANT: A failing unit never stops the other units. Failures are
collected and, once all units have finished, raised together as
:class:`~manifestlint.errors.EvaluationFailedError` with the partial findings.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from pydantic import BaseModel, Field

from manifestlint.config.models import LintersConfig, RunConfig
from manifestlint.domain.document import Document
from manifestlint.domain.findings import Finding, count_by_severity, sort_findings
from manifestlint.errors import (
    EvaluationError,
    EvaluationFailedError,
    InvalidDeclarationError,
    RuleConfigError,
    RuleNotFoundError,
    SetupError,
)
from manifestlint.rules.base import Rule, RuleContext
from manifestlint.rules.registry import Registry

logger = logging.getLogger(__name__)


class RunReport(BaseModel):
    """Outcome of a completed (possibly cancelled) run."""

    model_config = {"frozen": True}

    findings: list[Finding] = Field(default_factory=list)
    counts: dict[str, int] = Field(default_factory=dict)
    rules: list[str] = Field(default_factory=list)
    documents: int = 0
    cancelled: bool = False


class Engine:
    """Runs the active rules of a :class:`Registry` over a document set.

    Parameters:
        registry: Source of rule instances and rule-kind factories. Custom
            declarations are registered into it during :meth:`prepare`.
        linters: Enable/disable lists, per-rule settings, custom declarations.
        run: Concurrency limit and timeout (seconds).
    """

    def __init__(
        self,
        registry: Registry,
        linters: LintersConfig | None = None,
        run: RunConfig | None = None,
    ) -> None:
        self._registry = registry
        self._linters = linters or LintersConfig()
        self._run_config = run or RunConfig()
        self._rules: list[Rule] | None = None

    @property
    def concurrency(self) -> int:
        return self._run_config.concurrency

    @property
    def rules(self) -> list[Rule]:
        """The configured active rules (prepares the run on first access)."""
        if self._rules is None:
            self._rules = self.prepare()
        return self._rules

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def prepare(self) -> list[Rule]:
        """Declare custom rules, select the active set, and configure it."""
        self._declare_custom_rules()

        for name in self._linters.enable:
            if name not in self._registry:
                raise RuleNotFoundError(name)
        for name in self._linters.settings:
            if name not in self._registry:
                raise RuleNotFoundError(name)
        for name in self._linters.disable:
            if name not in self._registry:
                logger.warning("Disabled rule %s is not registered", name)

        enabled = set(self._linters.enable)
        disabled = set(self._linters.disable)
        active: list[Rule] = []
        for registered in self._registry.all():
            if enabled and registered.name not in enabled:
                continue
            if registered.name in disabled:
                continue
            settings = self._linters.settings.get(registered.name)
            if settings is None:
                active.append(registered)
                continue
            try:
                rule = registered.clone()
            except Exception as exc:
                msg = f"cannot copy rule for configuration: {exc}"
                raise RuleConfigError(registered.name, msg) from exc
            try:
                rule.configure(settings)
            except SetupError:
                raise
            except Exception as exc:
                raise RuleConfigError(rule.name, str(exc)) from exc
            active.append(rule)

        logger.debug("Active rules: %s", ", ".join(r.name for r in active) or "<none>")
        self._rules = active
        return active

    def _declare_custom_rules(self) -> None:
        for index, decl in enumerate(self._linters.custom):
            if not decl.name:
                msg = f"custom rule {index}: name is required"
                raise InvalidDeclarationError(msg)
            if not decl.kind:
                msg = f"custom rule {decl.name!r}: kind is required"
                raise InvalidDeclarationError(msg)

            rule = self._registry.create_rule(decl.kind, decl.name, decl.description)
            try:
                rule.configure(decl.settings)
            except SetupError:
                raise
            except Exception as exc:
                raise RuleConfigError(decl.name, str(exc)) from exc
            self._registry.register(rule)
            logger.debug("Declared custom rule %s (kind %s)", decl.name, decl.kind)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def run(
        self,
        documents: Sequence[Document],
        *,
        cancel: threading.Event | None = None,
    ) -> RunReport:
        """Evaluate every document against every active rule.

        Args:
            documents: The full document set. Never mutated.
            cancel: Optional external cancellation signal. The configured
                timeout sets the same event when it expires.

        Raises:
            SetupError: If :meth:`prepare` fails.
            EvaluationFailedError: If any unit failed; carries partial findings.
        """
        rules = self.rules
        cancel = cancel or threading.Event()
        snapshot = tuple(doc.deep_copy() for doc in documents)
        context = RuleContext(documents=snapshot, cancel=cancel)

        findings: list[Finding] = []
        errors: list[EvaluationError] = []
        lock = threading.Lock()
        slots = threading.BoundedSemaphore(self.concurrency)

        def unit(document: Document, rule: Rule) -> None:
            try:
                if cancel.is_set():
                    return
                try:
                    produced = rule.lint(document.deep_copy(), context)
                except Exception as exc:
                    error = EvaluationError(rule.name, document.kind, document.name, exc)
                    logger.debug("%s", error, exc_info=True)
                    with lock:
                        errors.append(error)
                    return
                if produced:
                    with lock:
                        findings.extend(produced)
            finally:
                slots.release()

        timer = self._start_timer(cancel)
        started = time.perf_counter()
        logger.debug("Run started: %d documents x %d rules", len(documents), len(rules))
        try:
            with ThreadPoolExecutor(
                max_workers=self.concurrency, thread_name_prefix="manifestlint"
            ) as executor:
                futures: list[Future[None]] = []
                for document in documents:
                    if cancel.is_set():
                        break
                    for rule in rules:
                        slots.acquire()
                        if cancel.is_set():
                            slots.release()
                            break
                        futures.append(executor.submit(unit, document, rule))
            for future in futures:
                future.result()
        finally:
            if timer is not None:
                timer.cancel()

        cancelled = cancel.is_set()
        ordered = sort_findings(findings)
        logger.debug(
            "Run finished in %.1fms: %d findings, %d errors%s",
            (time.perf_counter() - started) * 1000,
            len(ordered),
            len(errors),
            " (cancelled)" if cancelled else "",
        )

        if errors:
            errors.sort(key=lambda e: (e.kind, e.name, e.rule))
            raise EvaluationFailedError(errors, ordered)

        return RunReport(
            findings=ordered,
            counts=count_by_severity(ordered),
            rules=[r.name for r in rules],
            documents=len(documents),
            cancelled=cancelled,
        )

    def _start_timer(self, cancel: threading.Event) -> threading.Timer | None:
        timeout = self._run_config.timeout
        if timeout is None:
            return None
        timer = threading.Timer(timeout, cancel.set)
        timer.daemon = True
        timer.start()
        return timer
