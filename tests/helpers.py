"""Document builders and fake rules shared across test modules."""

from __future__ import annotations

import threading
import time
from typing import Any

from manifestlint.domain.document import Document
from manifestlint.domain.findings import Finding, Severity
from manifestlint.rules.base import Rule, RuleContext

# ---------------------------------------------------------------------------
# Document builders
# ---------------------------------------------------------------------------


def container(name: str = "app", image: str = "nginx:1.25", **extra: Any) -> dict[str, Any]:
    return {"name": name, "image": image, **extra}


def fully_resourced(name: str = "app", image: str = "nginx:1.25", **extra: Any) -> dict[str, Any]:
    return container(
        name,
        image,
        resources={
            "requests": {"cpu": "100m", "memory": "64Mi"},
            "limits": {"cpu": "500m", "memory": "128Mi"},
        },
        **extra,
    )


def make_document(
    kind: str,
    name: str,
    *,
    api_version: str = "v1",
    namespace: str = "default",
    labels: dict[str, str] | None = None,
    **body: Any,
) -> Document:
    metadata: dict[str, Any] = {"name": name}
    if namespace:
        metadata["namespace"] = namespace
    if labels is not None:
        metadata["labels"] = labels
    return Document({"apiVersion": api_version, "kind": kind, "metadata": metadata, **body})


def make_deployment(
    name: str = "web",
    containers: list[dict[str, Any]] | None = None,
    *,
    volumes: list[dict[str, Any]] | None = None,
    **kwargs: Any,
) -> Document:
    pod_spec: dict[str, Any] = {
        "containers": containers if containers is not None else [container()]
    }
    if volumes is not None:
        pod_spec["volumes"] = volumes
    return make_document(
        "Deployment",
        name,
        api_version="apps/v1",
        spec={"replicas": 1, "template": {"spec": pod_spec}},
        **kwargs,
    )


def make_pod(
    name: str = "pod", containers: list[dict[str, Any]] | None = None, **kwargs: Any
) -> Document:
    return make_document(
        "Pod",
        name,
        spec={"containers": containers if containers is not None else [container()]},
        **kwargs,
    )


def make_config_map(name: str, **kwargs: Any) -> Document:
    return make_document("ConfigMap", name, data={"key": "value"}, **kwargs)


# ---------------------------------------------------------------------------
# Fake rules
# ---------------------------------------------------------------------------


class FlagRule(Rule):
    """Reports one finding per document it sees."""

    def __init__(self, name: str, severity: Severity = Severity.INFO) -> None:
        self.name = name
        self.description = f"fake rule {name}"
        self.severity = severity

    def lint(self, document: Document, context: RuleContext) -> list[Finding]:
        return [self.finding(document, self.severity, f"{self.name} saw {document.name}")]


class SlowRule(Rule):
    """Sleeps per document and records the peak number of concurrent calls."""

    def __init__(self, name: str = "slow", delay: float = 0.02) -> None:
        self.name = name
        self.description = "slow fake rule"
        self.delay = delay
        self._lock = threading.Lock()
        self.active = 0
        self.peak = 0
        self.calls = 0

    def lint(self, document: Document, context: RuleContext) -> list[Finding]:
        with self._lock:
            self.active += 1
            self.calls += 1
            self.peak = max(self.peak, self.active)
        try:
            time.sleep(self.delay)
        finally:
            with self._lock:
                self.active -= 1
        return []


class BoomRule(Rule):
    """Raises for documents whose name is in *fail_on*."""

    def __init__(self, name: str = "boom", fail_on: frozenset[str] = frozenset({"bad"})) -> None:
        self.name = name
        self.description = "failing fake rule"
        self.fail_on = fail_on

    def lint(self, document: Document, context: RuleContext) -> list[Finding]:
        if document.name in self.fail_on:
            msg = f"cannot lint {document.name}"
            raise RuntimeError(msg)
        return [self.finding(document, Severity.WARNING, "visited")]


class MutatingRule(Rule):
    """Vandalizes the document it is given."""

    name = "mutator"
    description = "mutates its input"

    def lint(self, document: Document, context: RuleContext) -> list[Finding]:
        document.data["metadata"]["name"] = "mutated"
        document.data.pop("spec", None)
        return []
