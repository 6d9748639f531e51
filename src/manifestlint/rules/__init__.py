"""Rule layer — rule contract, registry, expression kind, engine.

:func:`build_registry` is the single place a process-wide registry is
assembled: built-ins first, then the expression kind, then plugin
contributions (which may shadow built-ins by name).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from manifestlint.rules.base import Rule, RuleContext, RuleSettings, SettingsRule
from manifestlint.rules.builtins import BUILTIN_RULES
from manifestlint.rules.engine import Engine, RunReport
from manifestlint.rules.expression import (
    GENERIC_DESCRIPTION,
    GENERIC_NAME,
    KIND,
    ExpressionRule,
    ExpressionRuleFactory,
)
from manifestlint.rules.registry import Registry

if TYPE_CHECKING:
    from manifestlint.plugins.manager import PluginManager


def build_registry(*, plugins: PluginManager | None = None) -> Registry:
    """Create a registry holding every built-in rule and rule kind."""
    registry = Registry()
    for rule_cls in BUILTIN_RULES:
        registry.register(rule_cls())
    registry.register(ExpressionRule(GENERIC_NAME, GENERIC_DESCRIPTION))
    registry.register_factory(KIND, ExpressionRuleFactory())
    if plugins is not None:
        plugins.contribute(registry)
    return registry


__all__ = [
    "Engine",
    "ExpressionRule",
    "Registry",
    "Rule",
    "RuleContext",
    "RuleSettings",
    "RunReport",
    "SettingsRule",
    "build_registry",
]
