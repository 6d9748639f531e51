"""Manifest reader — YAML/JSON files into :class:`Document` objects.

Directories are walked recursively in sorted order so document order (and
therefore any tie-breaking downstream) is reproducible. Multi-document YAML
streams are split; empty documents and documents without a ``kind`` are
skipped. Values are normalized to plain JSON data (timestamps become
strings), which is what rules and jq expressions expect.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Collection, Iterable
from fnmatch import fnmatch
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from manifestlint.config.models import ResourceFilter
from manifestlint.domain.document import Document
from manifestlint.errors import RenderError

logger = logging.getLogger(__name__)

MANIFEST_SUFFIXES = frozenset({".yaml", ".yml", ".json"})


def _new_yaml() -> YAML:
    return YAML(typ="safe", pure=True)


def _excluded(path: Path, patterns: Collection[str]) -> bool:
    posix = path.as_posix()
    return any(fnmatch(posix, p) or fnmatch(path.name, p) for p in patterns)


def find_manifests(
    path: Path,
    *,
    skip_dirs: Collection[str] = (),
    exclude: Collection[str] = (),
) -> list[Path]:
    """Return manifest files under *path* (or *path* itself if it is a file).

    Directories named in *skip_dirs* are not descended into, and files
    matching an *exclude* glob are dropped. A path given as a file is
    always returned.
    """
    if not path.exists():
        msg = f"Path not found: {path}"
        raise RenderError(msg)
    if path.is_file():
        return [path]
    found: list[Path] = []
    for p in path.rglob("*"):
        if not p.is_file() or p.suffix.lower() not in MANIFEST_SUFFIXES:
            continue
        if any(part in skip_dirs for part in p.relative_to(path).parts[:-1]):
            continue
        if _excluded(p, exclude):
            logger.debug("Excluded %s", p)
            continue
        found.append(p)
    return sorted(found)


def _normalize(value: Any) -> Any:
    return json.loads(json.dumps(value, default=str))


def render_file(path: Path) -> list[Document]:
    """Parse every resource object in one manifest file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Failed to read {path}: {exc}"
        raise RenderError(msg) from exc

    try:
        raw_documents = list(_new_yaml().load_all(text))
    except YAMLError as exc:
        msg = f"Failed to decode {path}: {exc}"
        raise RenderError(msg) from exc

    documents: list[Document] = []
    for raw in raw_documents:
        if not isinstance(raw, dict):
            continue
        if not isinstance(raw.get("kind"), str) or not raw["kind"]:
            continue
        documents.append(Document(_normalize(raw), source=str(path)))
    logger.debug("Rendered %d documents from %s", len(documents), path)
    return documents


def render_paths(
    paths: Iterable[str | Path],
    *,
    skip_dirs: Collection[str] = (),
    exclude: Collection[str] = (),
) -> list[Document]:
    """Render every manifest file under each path, in order."""
    documents: list[Document] = []
    for entry in paths:
        for file in find_manifests(Path(entry), skip_dirs=skip_dirs, exclude=exclude):
            documents.extend(render_file(file))
    return documents


def _matches(document: Document, rule: ResourceFilter) -> bool:
    if rule.kind and rule.kind != document.kind:
        return False
    if rule.name and rule.name != document.name:
        return False
    return not (rule.namespace and rule.namespace != document.namespace)


def exclude_documents(
    documents: Iterable[Document], filters: Iterable[ResourceFilter]
) -> list[Document]:
    """Drop documents matched by any filter (empty filter fields match anything)."""
    active = [f for f in filters if f.kind or f.name or f.namespace]
    if not active:
        return list(documents)
    return [d for d in documents if not any(_matches(d, f) for f in active)]
