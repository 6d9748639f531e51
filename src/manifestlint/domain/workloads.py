"""Container resolution across workload kinds.

Pods keep containers directly under ``spec``; controllers nest a pod
template one level deeper; CronJobs nest a job template on top of that.
Kinds without a known pod template yield no containers, so rules can be run
against a mixed document set and silently skip what does not apply.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from manifestlint.domain import kinds
from manifestlint.domain.document import Document

_POD_SPEC_PATHS: dict[kinds.GroupVersionKind, str] = {
    kinds.POD: "spec",
    kinds.DEPLOYMENT: "spec.template.spec",
    kinds.STATEFUL_SET: "spec.template.spec",
    kinds.DAEMON_SET: "spec.template.spec",
    kinds.REPLICA_SET: "spec.template.spec",
    kinds.JOB: "spec.template.spec",
    kinds.CRON_JOB: "spec.jobTemplate.spec.template.spec",
}


def pod_spec_path(document: Document) -> str | None:
    """Dotted path of the pod spec for *document*, or None for other kinds."""
    return _POD_SPEC_PATHS.get(kinds.gvk_of(document))


def containers_path(document: Document) -> str | None:
    spec = pod_spec_path(document)
    return f"{spec}.containers" if spec is not None else None


def get_containers(document: Document) -> list[Any]:
    """Return the container list of *document*.

    Unknown kinds and workloads without containers return ``[]``. A
    ``containers`` value that is not a list raises DocumentShapeError.
    """
    path = containers_path(document)
    if path is None:
        return []
    return document.lookup_list(path) or []


def iter_containers(document: Document) -> Iterator[tuple[int, dict[str, Any], str]]:
    """Yield ``(index, container, field_path)`` for every mapping container.

    ``field_path`` points at the container itself, e.g.
    ``spec.template.spec.containers[0]``; non-mapping entries are skipped.
    """
    path = containers_path(document)
    if path is None:
        return
    for index, container in enumerate(get_containers(document)):
        if isinstance(container, dict):
            yield index, container, f"{path}[{index}]"
