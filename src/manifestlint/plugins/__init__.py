"""Extension layer — third-party rules via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins from ``.manifestlint/plugins/``.
INVARIANT: Plugin failures are warnings, never errors.
"""

import pluggy

from manifestlint.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("manifestlint")

__all__ = ["PluginManager", "hookimpl"]
