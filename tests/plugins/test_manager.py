"""Tests for PluginManager — registration, contribution, local discovery."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from helpers import FlagRule, make_pod

from manifestlint.domain.findings import Severity
from manifestlint.plugins import PluginManager, hookimpl
from manifestlint.rules import build_registry
from manifestlint.rules.base import Rule
from manifestlint.rules.registry import Registry


class _RulePlugin:
    @hookimpl
    def manifestlint_rules(self) -> list[Rule]:
        return [FlagRule("from-plugin")]


class _KindPlugin:
    @hookimpl
    def manifestlint_rule_kinds(self) -> dict[str, object]:
        return {"flag": lambda name, description: FlagRule(name)}


class _ShadowPlugin:
    @hookimpl
    def manifestlint_rules(self) -> list[Rule]:
        return [FlagRule("image-tags")]


class _BrokenPlugin:
    @hookimpl
    def manifestlint_rules(self) -> list[Rule]:
        msg = "plugin exploded"
        raise RuntimeError(msg)


class _InvalidItemsPlugin:
    @hookimpl
    def manifestlint_rules(self) -> list[object]:
        return ["not a rule", FlagRule("valid")]

    @hookimpl
    def manifestlint_rule_kinds(self) -> dict[object, object]:
        return {42: "not callable"}


class _SpecnamePlugin:
    @hookimpl(specname="manifestlint_rules")
    def extra_rules(self) -> list[Rule]:
        return [FlagRule("by-specname")]


class _PreferredPlugin:
    @hookimpl(tryfirst=True)
    def manifestlint_rules(self) -> list[Rule]:
        return [FlagRule("contested", Severity.ERROR)]


class _FallbackPlugin:
    @hookimpl
    def manifestlint_rules(self) -> list[Rule]:
        return [FlagRule("contested", Severity.INFO)]


class TestPluginManager:
    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        assert hasattr(pm.hook, "manifestlint_rules")
        assert hasattr(pm.hook, "manifestlint_rule_kinds")

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_RulePlugin(), name="rules")
        assert "rules" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_RulePlugin())
        assert "_RulePlugin" in pm.list_plugin_names()

    def test_unregister(self) -> None:
        pm = PluginManager()
        plugin = _RulePlugin()
        pm.register_plugin(plugin)
        pm.unregister(plugin)
        assert pm.get_plugins() == []

    def test_discover_marks_loaded(self, tmp_path: Path) -> None:
        pm = PluginManager()
        assert pm.is_loaded is False
        pm.discover_and_load(local_dir=tmp_path / "missing")
        assert pm.is_loaded is True


class TestContribute:
    def test_rules_registered(self, registry: Registry) -> None:
        pm = PluginManager()
        pm.register_plugin(_RulePlugin())
        pm.contribute(registry)
        assert "from-plugin" in registry

    def test_rule_kinds_registered(self, registry: Registry) -> None:
        pm = PluginManager()
        pm.register_plugin(_KindPlugin())
        pm.contribute(registry)
        assert registry.kinds() == ["flag"]
        assert registry.create_rule("flag", "made").name == "made"

    def test_plugin_shadows_builtin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_ShadowPlugin())
        registry = build_registry(plugins=pm)
        assert isinstance(registry.get("image-tags"), FlagRule)

    def test_broken_plugin_is_warning(
        self, registry: Registry, caplog: pytest.LogCaptureFixture
    ) -> None:
        pm = PluginManager()
        pm.register_plugin(_BrokenPlugin())
        pm.register_plugin(_RulePlugin())
        with caplog.at_level(logging.WARNING, logger="manifestlint.plugins.manager"):
            pm.contribute(registry)
        assert "from-plugin" in registry
        assert "Failed to collect rules" in caplog.text

    def test_specname_impl_contributes(self, registry: Registry) -> None:
        pm = PluginManager()
        pm.register_plugin(_SpecnamePlugin())
        pm.contribute(registry)
        assert "by-specname" in registry

    def test_tryfirst_impl_wins_name_clash(self, registry: Registry) -> None:
        pm = PluginManager()
        pm.register_plugin(_PreferredPlugin())
        pm.register_plugin(_FallbackPlugin())
        pm.contribute(registry)
        rule = registry.require("contested")
        assert isinstance(rule, FlagRule)
        assert rule.severity == Severity.ERROR

    def test_invalid_items_skipped(self, registry: Registry) -> None:
        pm = PluginManager()
        pm.register_plugin(_InvalidItemsPlugin())
        pm.contribute(registry)
        assert registry.names() == ["valid"]
        assert registry.kinds() == []

    def test_plugin_rule_runs_in_engine(self, registry: Registry) -> None:
        from manifestlint.rules.engine import Engine

        pm = PluginManager()
        pm.register_plugin(_RulePlugin())
        pm.contribute(registry)
        report = Engine(registry).run([make_pod("p")])
        assert [f.rule for f in report.findings] == ["from-plugin"]


_LOCAL_PLUGIN_SRC = """\
from manifestlint.domain.findings import Severity
from manifestlint.plugins import hookimpl
from manifestlint.rules.base import Rule


class NoDefaultNamespace(Rule):
    name = "no-default-namespace"
    description = "Resources must not live in the default namespace"

    def lint(self, document, context):
        if document.namespace == "default":
            return [self.finding(document, Severity.WARNING, "uses default namespace")]
        return []


class LocalRules:
    @hookimpl
    def manifestlint_rules(self):
        return [NoDefaultNamespace()]
"""

_SYNTAX_ERROR_SRC = """\
def broken(
"""


class TestLocalDiscovery:
    def test_loads_single_file_plugin(self, tmp_path: Path) -> None:
        (tmp_path / "local_rules.py").write_text(_LOCAL_PLUGIN_SRC)
        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path)
        assert any(n.endswith("LocalRules") for n in names)

        registry = Registry()
        pm.contribute(registry)
        assert "no-default-namespace" in registry

    def test_syntax_error_is_warning(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (tmp_path / "broken.py").write_text(_SYNTAX_ERROR_SRC)
        pm = PluginManager()
        with caplog.at_level(logging.WARNING, logger="manifestlint.plugins.manager"):
            pm.discover_and_load(local_dir=tmp_path)
        assert "Failed to load local plugin" in caplog.text
        assert not any("broken" in n for n in pm.list_plugin_names())

    def test_underscore_files_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "_private.py").write_text(_LOCAL_PLUGIN_SRC)
        pm = PluginManager()
        pm.discover_and_load(local_dir=tmp_path)
        assert not any("_private" in n for n in pm.list_plugin_names())

    def test_classes_without_hooks_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "plain.py").write_text("class Plain:\n    pass\n")
        pm = PluginManager()
        pm.discover_and_load(local_dir=tmp_path)
        assert not any("Plain" in n for n in pm.list_plugin_names())
