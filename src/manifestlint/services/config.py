"""ConfigService — scaffolds a ``manifestlint.toml``."""

from __future__ import annotations

import logging
from pathlib import Path

from manifestlint.config.discovery import CONFIG_FILENAME
from manifestlint.services.result import ErrorCode, ServiceResult

logger = logging.getLogger(__name__)

CONFIG_TEMPLATE = """\
# manifestlint configuration. Every key is optional; defaults apply otherwise.

# Paths linted when `manifestlint run` is given none.
sources = ["."]

[linters]
# Only these rules run when non-empty. `disable` always wins.
enable = []
disable = []

[linters.settings.image-tags]
disallow-latest = true
require-digest = false
# allowed-registries = ["registry.example.com"]

[linters.settings.resource-limits]
require-cpu-limit = true
require-memory-limit = true
exclude-namespaces = ["kube-system"]

# [linters.settings.required-labels]
# labels = ["app.kubernetes.io/name", "app.kubernetes.io/version"]

# Rules declared from a rule kind. The "jq" kind evaluates one jq
# expression per entry against each resource; `$objects` holds every
# resource in the run.
#
# [[linters.custom]]
# name = "configmap-exists"
# kind = "jq"
# description = "Referenced ConfigMaps must be part of the manifest set"
#
# [[linters.custom.settings.rules]]
# expression = '''
#   select(.kind == "Deployment")
#   | [.spec.template.spec.volumes[]?.configMap.name | strings] as $refs
#   | [$objects[] | select(.kind == "ConfigMap") | .metadata.name] as $cms
#   | any($refs[]; . as $r | $cms | index([$r]) | not)
# '''
# message = "Deployment references a ConfigMap that does not exist"
# severity = "error"

[run]
concurrency = 4
timeout = 300
# skip-dirs = ["charts", "vendor"]

[output]
format = "text"
color = "auto"

# [exclude]
# paths = ["*/generated/*", "*.tmpl.yaml"]
#
# [[exclude.resources]]
# kind = "Secret"
# namespace = "kube-system"
"""


class ConfigService:
    """Configuration file operations rooted at one directory."""

    def __init__(self, root: Path) -> None:
        self._root = root

    def init(self, *, force: bool = False) -> ServiceResult:
        """Write the commented example config unless one already exists."""
        path = self._root / CONFIG_FILENAME
        if path.exists() and not force:
            return ServiceResult.failure(
                "config_init",
                ErrorCode.SETUP_ERROR,
                f"{path} already exists (use --force to overwrite)",
                path=str(path),
            )
        try:
            path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
        except OSError as exc:
            return ServiceResult.failure(
                "config_init", ErrorCode.SETUP_ERROR, f"Cannot write {path}: {exc}"
            )
        logger.debug("Wrote %s", path)
        return ServiceResult(ok=True, op="config_init", data={"path": str(path)})
