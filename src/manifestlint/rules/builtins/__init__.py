"""Built-in rules.

``BUILTIN_RULES`` is the initialization list evaluated once by
:func:`manifestlint.rules.build_registry`; adding a rule here is the only
step needed to ship it.
"""

from __future__ import annotations

from manifestlint.rules.base import Rule
from manifestlint.rules.builtins.cluster_role_binding import ClusterRoleBindingSecurityRule
from manifestlint.rules.builtins.health_probes import HealthProbesRule
from manifestlint.rules.builtins.image_tags import ImageTagsRule
from manifestlint.rules.builtins.required_labels import RequiredLabelsRule
from manifestlint.rules.builtins.resource_limits import ResourceLimitsRule
from manifestlint.rules.builtins.security_context import SecurityContextRule

BUILTIN_RULES: tuple[type[Rule], ...] = (
    ClusterRoleBindingSecurityRule,
    HealthProbesRule,
    ImageTagsRule,
    RequiredLabelsRule,
    ResourceLimitsRule,
    SecurityContextRule,
)

__all__ = [
    "BUILTIN_RULES",
    "ClusterRoleBindingSecurityRule",
    "HealthProbesRule",
    "ImageTagsRule",
    "RequiredLabelsRule",
    "ResourceLimitsRule",
    "SecurityContextRule",
]
