"""Tests for Registry — rule and rule-kind catalogue."""

from __future__ import annotations

import threading

import pytest
from helpers import FlagRule

from manifestlint.errors import RuleNotFoundError, UnknownRuleKindError
from manifestlint.rules import build_registry
from manifestlint.rules.builtins import BUILTIN_RULES
from manifestlint.rules.expression import ExpressionRule
from manifestlint.rules.registry import Registry


class TestRules:
    def test_register_and_get(self, registry: Registry) -> None:
        rule = FlagRule("alpha")
        registry.register(rule)
        assert registry.get("alpha") is rule
        assert "alpha" in registry
        assert len(registry) == 1

    def test_get_missing_returns_none(self, registry: Registry) -> None:
        assert registry.get("nope") is None

    def test_require_missing_raises(self, registry: Registry) -> None:
        with pytest.raises(RuleNotFoundError, match="nope"):
            registry.require("nope")

    def test_last_registration_wins(self, registry: Registry) -> None:
        first, second = FlagRule("same"), FlagRule("same")
        registry.register(first)
        registry.register(second)
        assert registry.get("same") is second
        assert len(registry) == 1

    def test_all_sorted_by_name(self, registry: Registry) -> None:
        for name in ("zeta", "alpha", "mid"):
            registry.register(FlagRule(name))
        assert [r.name for r in registry.all()] == ["alpha", "mid", "zeta"]
        assert registry.names() == ["alpha", "mid", "zeta"]

    def test_nameless_rule_rejected(self, registry: Registry) -> None:
        with pytest.raises(ValueError):
            registry.register(FlagRule(""))

    def test_concurrent_reads(self, registry: Registry) -> None:
        for i in range(50):
            registry.register(FlagRule(f"r{i:02d}"))
        seen: list[int] = []

        def reader() -> None:
            for _ in range(100):
                seen.append(len(registry.all()))

        threads = [threading.Thread(target=reader) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert set(seen) == {50}


class TestFactories:
    def test_create_rule_uses_factory(self, registry: Registry) -> None:
        registry.register_factory("flag", lambda name, description: FlagRule(name))
        rule = registry.create_rule("flag", "made", "desc")
        assert rule.name == "made"
        assert "made" not in registry  # created, not registered
        assert registry.kinds() == ["flag"]

    def test_unknown_kind_raises(self, registry: Registry) -> None:
        with pytest.raises(UnknownRuleKindError, match="rego"):
            registry.create_rule("rego", "x")


class TestBuildRegistry:
    def test_contains_builtins_and_expression_kind(self) -> None:
        registry = build_registry()
        for rule_cls in BUILTIN_RULES:
            assert rule_cls.name in registry
        assert isinstance(registry.get("jq"), ExpressionRule)
        assert registry.kinds() == ["jq"]

    def test_fresh_instance_each_call(self) -> None:
        a, b = build_registry(), build_registry()
        assert a is not b
        assert a.get("image-tags") is not b.get("image-tags")
