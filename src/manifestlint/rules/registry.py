"""Registry — catalogue of rule instances and rule-kind factories.

Registration overwrites silently (last wins), so a user-declared rule can
shadow a built-in of the same name. Reads are lock-protected and safe for
concurrent callers; registering while a run is evaluating is not supported,
so callers must declare dynamic rules before starting evaluation.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from manifestlint.errors import RuleNotFoundError, UnknownRuleKindError
from manifestlint.rules.base import Rule

logger = logging.getLogger(__name__)

RuleFactory = Callable[[str, str], Rule]
"""``factory(name, description) -> Rule`` for parameterized rule kinds."""


class Registry:
    """Maps rule name -> rule instance and rule kind -> factory."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._rules: dict[str, Rule] = {}
        self._factories: dict[str, RuleFactory] = {}

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def register(self, rule: Rule) -> None:
        """Insert *rule* under its name, replacing any previous registration."""
        if not rule.name:
            msg = f"Cannot register {rule!r} without a name"
            raise ValueError(msg)
        with self._lock:
            if rule.name in self._rules:
                logger.debug("Rule %s overrides an existing registration", rule.name)
            self._rules[rule.name] = rule

    def get(self, name: str) -> Rule | None:
        with self._lock:
            return self._rules.get(name)

    def require(self, name: str) -> Rule:
        """Like :meth:`get` but raises RuleNotFoundError when absent."""
        rule = self.get(name)
        if rule is None:
            raise RuleNotFoundError(name)
        return rule

    def all(self) -> list[Rule]:
        """Every registered rule, sorted by name."""
        with self._lock:
            return [self._rules[name] for name in sorted(self._rules)]

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._rules)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._rules

    def __len__(self) -> int:
        with self._lock:
            return len(self._rules)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    def register_factory(self, kind: str, factory: RuleFactory) -> None:
        with self._lock:
            self._factories[kind] = factory

    def kinds(self) -> list[str]:
        with self._lock:
            return sorted(self._factories)

    def create_rule(self, kind: str, name: str, description: str = "") -> Rule:
        """Instantiate a rule of *kind* via its factory (not registered yet)."""
        with self._lock:
            factory = self._factories.get(kind)
        if factory is None:
            raise UnknownRuleKindError(kind)
        return factory(name, description)
