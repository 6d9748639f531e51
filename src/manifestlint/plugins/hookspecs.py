"""Pluggy hook specifications for manifestlint rule providers.

Both hooks are collected once, while the registry is built, before any run
starts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from manifestlint.rules.base import Rule
    from manifestlint.rules.registry import RuleFactory

hookspec = pluggy.HookspecMarker("manifestlint")


class ManifestlintHookSpec:
    """Hook specifications for the manifestlint plugin system."""

    @hookspec
    def manifestlint_rules(self) -> list[Rule] | None:
        """Return rule instances to register (may shadow built-ins by name)."""

    @hookspec
    def manifestlint_rule_kinds(self) -> dict[str, RuleFactory] | None:
        """Return rule kind -> factory mappings for custom rule declarations."""
