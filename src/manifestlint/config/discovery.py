"""Config file discovery and loading.

Walk-up finder locates manifestlint.toml, similar to how git finds .git/.
Supports the MANIFESTLINT_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from manifestlint.config.models import LintConfig
from manifestlint.errors import SetupError

CONFIG_FILENAME = "manifestlint.toml"
CONFIG_ENV_VAR = "MANIFESTLINT_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for manifestlint.toml.

    Returns the path to the config file, or None if not found.
    Checks MANIFESTLINT_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> LintConfig:
    """Load and validate config from a TOML file.

    If *path* is None, uses find_config(*cwd*) to discover the file.
    Returns default LintConfig if no file is found.

    Raises:
        SetupError: If the file is not valid TOML or fails validation.
    """
    if path is None:
        path = find_config(cwd)

    if path is None:
        return LintConfig()

    try:
        data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Cannot read config {path}: {exc}"
        raise SetupError(msg) from exc
    try:
        return LintConfig.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid config {path}: {exc}"
        raise SetupError(msg) from exc
