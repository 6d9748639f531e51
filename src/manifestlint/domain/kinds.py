"""Resource kinds known to the built-in rules.

A kind is matched on (group, version, kind) so that, for example, a CRD
named ``Deployment`` in some other API group is not treated as a workload.
"""

from __future__ import annotations

from typing import NamedTuple

from manifestlint.domain.document import Document


class GroupVersionKind(NamedTuple):
    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version


DEPLOYMENT = GroupVersionKind("apps", "v1", "Deployment")
STATEFUL_SET = GroupVersionKind("apps", "v1", "StatefulSet")
DAEMON_SET = GroupVersionKind("apps", "v1", "DaemonSet")
REPLICA_SET = GroupVersionKind("apps", "v1", "ReplicaSet")
JOB = GroupVersionKind("batch", "v1", "Job")
CRON_JOB = GroupVersionKind("batch", "v1", "CronJob")
POD = GroupVersionKind("", "v1", "Pod")
CONFIG_MAP = GroupVersionKind("", "v1", "ConfigMap")
SECRET = GroupVersionKind("", "v1", "Secret")
SERVICE = GroupVersionKind("", "v1", "Service")
RESOURCE_QUOTA = GroupVersionKind("", "v1", "ResourceQuota")
CLUSTER_ROLE_BINDING = GroupVersionKind("rbac.authorization.k8s.io", "v1", "ClusterRoleBinding")
POD_DISRUPTION_BUDGET = GroupVersionKind("policy", "v1", "PodDisruptionBudget")
NETWORK_POLICY = GroupVersionKind("networking.k8s.io", "v1", "NetworkPolicy")
SERVICE_MONITOR = GroupVersionKind("monitoring.coreos.com", "v1", "ServiceMonitor")

WORKLOADS: frozenset[GroupVersionKind] = frozenset(
    {DEPLOYMENT, STATEFUL_SET, DAEMON_SET, REPLICA_SET, JOB, CRON_JOB}
)
WORKLOADS_AND_PODS: frozenset[GroupVersionKind] = WORKLOADS | {POD}


def gvk_of(document: Document) -> GroupVersionKind:
    return GroupVersionKind(document.group, document.version, document.kind)


def is_kind(document: Document, gvk: GroupVersionKind) -> bool:
    return gvk_of(document) == gvk


def is_workload(document: Document) -> bool:
    """Deployment, StatefulSet, DaemonSet, ReplicaSet, Job or CronJob."""
    return gvk_of(document) in WORKLOADS


def is_workload_or_pod(document: Document) -> bool:
    return gvk_of(document) in WORKLOADS_AND_PODS
