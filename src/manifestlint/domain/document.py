"""Document — one Kubernetes-style resource object.

The underlying tree is plain JSON-compatible data (dicts, lists, strings,
numbers, booleans, None). Navigation never assumes a shape: ``lookup()``
returns None as soon as a segment is missing, and the typed accessors raise
:class:`~manifestlint.errors.DocumentShapeError` when a value is present but
of the wrong type.

Paths are dotted with optional list indexes: ``spec.template.spec.containers[0].image``.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Mapping
from typing import Any

from manifestlint.errors import DocumentShapeError

_SEGMENT_RE = re.compile(r"([^.\[\]]+)|\[(\d+)\]")

_MISSING = object()


def split_path(path: str) -> list[str | int]:
    """Split a dotted path into mapping keys (str) and list indexes (int)."""
    segments: list[str | int] = []
    for key, index in _SEGMENT_RE.findall(path):
        segments.append(int(index) if index else key)
    return segments


def _walk(tree: Any, path: str) -> Any:
    node = tree
    for segment in split_path(path):
        if isinstance(segment, int):
            if not isinstance(node, list) or segment >= len(node):
                return _MISSING
            node = node[segment]
        else:
            if not isinstance(node, Mapping) or segment not in node:
                return _MISSING
            node = node[segment]
    return node


class Document:
    """A single resource object, identified by apiVersion/kind/namespace/name."""

    __slots__ = ("_data", "source")

    def __init__(self, data: dict[str, Any], *, source: str | None = None) -> None:
        if not isinstance(data, dict):
            raise DocumentShapeError("", "mapping", data)
        self._data = data
        self.source = source

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def data(self) -> dict[str, Any]:
        """The raw object tree. Rules must treat it as read-only."""
        return self._data

    @property
    def api_version(self) -> str:
        return self._identity("apiVersion")

    @property
    def kind(self) -> str:
        return self._identity("kind")

    @property
    def name(self) -> str:
        return self._identity("metadata.name")

    @property
    def namespace(self) -> str:
        return self._identity("metadata.namespace")

    @property
    def group(self) -> str:
        """API group, empty for the core group (``v1``)."""
        group, _, _version = self.api_version.rpartition("/")
        return group

    @property
    def version(self) -> str:
        return self.api_version.rpartition("/")[2]

    @property
    def labels(self) -> dict[str, Any]:
        return self.lookup_mapping("metadata.labels") or {}

    @property
    def annotations(self) -> dict[str, Any]:
        return self.lookup_mapping("metadata.annotations") or {}

    def _identity(self, path: str) -> str:
        value = self.lookup(path)
        return value if isinstance(value, str) else ""

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def lookup(self, path: str, default: Any = None) -> Any:
        """Return the value at *path*, or *default* if any segment is absent."""
        value = _walk(self._data, path)
        return default if value is _MISSING else value

    def has(self, path: str) -> bool:
        """Whether *path* resolves to a present value (None counts as present)."""
        return _walk(self._data, path) is not _MISSING

    def lookup_mapping(self, path: str) -> dict[str, Any] | None:
        value = self.lookup(path)
        if value is None:
            return None
        if not isinstance(value, dict):
            raise DocumentShapeError(path, "mapping", value)
        return value

    def lookup_list(self, path: str) -> list[Any] | None:
        value = self.lookup(path)
        if value is None:
            return None
        if not isinstance(value, list):
            raise DocumentShapeError(path, "list", value)
        return value

    def lookup_str(self, path: str) -> str | None:
        value = self.lookup(path)
        if value is None:
            return None
        if not isinstance(value, str):
            raise DocumentShapeError(path, "string", value)
        return value

    # ------------------------------------------------------------------
    # Copying
    # ------------------------------------------------------------------

    def deep_copy(self) -> Document:
        """Return an isolated copy; mutations on it never reach this document."""
        return Document(copy.deepcopy(self._data), source=self.source)

    def __deepcopy__(self, memo: dict[int, Any]) -> Document:
        return Document(copy.deepcopy(self._data, memo), source=self.source)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        ref = f"{self.kind}/{self.name}"
        if self.namespace:
            ref = f"{self.namespace}/{ref}"
        return f"Document({ref})"
