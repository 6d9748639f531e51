"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus local directory discovery from ``.manifestlint/plugins/``.
Capabilities: extra rules and extra rule kinds.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pluggy

from manifestlint.plugins.hookspecs import ManifestlintHookSpec

if TYPE_CHECKING:
    from pluggy import HookImpl

    from manifestlint.rules.registry import Registry

PROJECT_NAME = "manifestlint"
ENTRY_POINT_GROUP = "manifestlint.plugins"
LOCAL_PLUGIN_DIR = Path(".manifestlint") / "plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and rule contribution."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ManifestlintHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Returns a list of loaded plugin names.
        """
        try:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception:
            logger.warning("Failed to load entry-point plugins", exc_info=True)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Registry contribution
    # ------------------------------------------------------------------

    def contribute(self, registry: Registry) -> None:
        """Register every plugin's rules and rule kinds into *registry*.

        Implementations are called one at a time, in pluggy's hookimpl order,
        so one broken plugin only costs its own contributions. Later calls
        overwrite earlier ones, so ``tryfirst`` implementations take
        precedence on a name clash.
        """
        for impl in self._pm.hook.manifestlint_rule_kinds.get_hookimpls():
            self._contribute_kinds(impl, registry)
        for impl in self._pm.hook.manifestlint_rules.get_hookimpls():
            self._contribute_rules(impl, registry)

    @staticmethod
    def _call(impl: HookImpl, what: str) -> object | None:
        try:
            return impl.function()
        except Exception:
            logger.warning(
                "Failed to collect %s from plugin %s", what, impl.plugin_name, exc_info=True
            )
            return None

    @classmethod
    def _contribute_rules(cls, impl: HookImpl, registry: Registry) -> None:
        from manifestlint.rules.base import Rule

        rules = cls._call(impl, "rules")
        if rules is None:
            return
        if not isinstance(rules, list | tuple):
            logger.warning("Plugin %s returned non-list rule registrations", impl.plugin_name)
            return

        for rule in rules:
            if not isinstance(rule, Rule) or not rule.name:
                logger.warning("Skipping invalid rule %r from plugin %s", rule, impl.plugin_name)
                continue
            registry.register(rule)
            logger.debug("Plugin %s registered rule %s", impl.plugin_name, rule.name)

    @classmethod
    def _contribute_kinds(cls, impl: HookImpl, registry: Registry) -> None:
        kinds = cls._call(impl, "rule kinds")
        if kinds is None:
            return
        if not isinstance(kinds, dict):
            logger.warning(
                "Plugin %s returned non-dict rule kind registrations", impl.plugin_name
            )
            return

        for kind, factory in kinds.items():
            if not isinstance(kind, str) or not callable(factory):
                logger.warning(
                    "Skipping invalid rule kind %r from plugin %s", kind, impl.plugin_name
                )
                continue
            registry.register_factory(kind, factory)

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Scan *local_dir* for single-file Python plugins.

        Each ``*.py`` file (excluding ``_``-prefixed names) is loaded as a
        module. Classes inside the module that carry pluggy hookimpl-decorated
        methods are instantiated and registered. Errors are logged as
        warnings and the file is skipped.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"manifestlint_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name:
                    continue
                if not self._has_hook_impls(obj):
                    continue
                try:
                    self.register_plugin(obj(), name=f"{module_name}.{obj.__name__}")
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry points may point at a class; hooks called on the class object
        would leave ``self`` unbound.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s", plugin_name, exc_info=True
                )
                continue
            self._pm.register(instance, name=plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Whether *cls* has any ``@hookimpl``-decorated methods.

        ``HookimplMarker("manifestlint")`` sets a ``manifestlint_impl``
        attribute on decorated functions.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "manifestlint_impl", None):
                return True
        return False
