"""image-tags — container image references must be pinned and trusted."""

from __future__ import annotations

import re
from typing import NamedTuple

from pydantic import field_validator

from manifestlint.domain.document import Document
from manifestlint.domain.findings import Finding, Severity
from manifestlint.domain.kinds import is_workload_or_pod
from manifestlint.domain.workloads import iter_containers
from manifestlint.rules.base import RuleContext, RuleSettings, SettingsRule


class ImageTagsSettings(RuleSettings):
    disallow_latest: bool = True
    require_digest: bool = False
    allowed_registries: list[str] = []
    require_version_pattern: str = ""

    @field_validator("require_version_pattern")
    @classmethod
    def _valid_pattern(cls, value: str) -> str:
        if value:
            try:
                re.compile(value)
            except re.error as exc:
                msg = f"invalid version pattern: {exc}"
                raise ValueError(msg) from exc
        return value


class ImageReference(NamedTuple):
    registry: str
    repository: str
    tag: str
    digest: str


def parse_image(image: str) -> ImageReference:
    """Split ``registry/repo:tag@digest``; missing parts are empty strings.

    The first path component is a registry only if it looks like a host
    (contains ``.`` or ``:``), so ``library/nginx`` has no registry.
    """
    name, _, digest = image.partition("@")
    registry = ""
    repository = name
    first, sep, rest = name.partition("/")
    if sep and ("." in first or ":" in first):
        registry, repository = first, rest
    tag = ""
    if ":" in repository:
        repository, _, tag = repository.partition(":")
    return ImageReference(registry, repository, tag, digest)


class ImageTagsRule(SettingsRule[ImageTagsSettings]):
    name = "image-tags"
    description = "Validates container image tags"
    settings_model = ImageTagsSettings

    _version_re: re.Pattern[str] | None = None

    def _on_configured(self) -> None:
        pattern = self.settings.require_version_pattern
        self._version_re = re.compile(pattern) if pattern else None

    def lint(self, document: Document, context: RuleContext) -> list[Finding]:
        if not is_workload_or_pod(document):
            return []

        findings: list[Finding] = []
        for _index, container, path in iter_containers(document):
            image = container.get("image")
            if not isinstance(image, str):
                continue
            findings.extend(self._check_image(document, container.get("name", ""), image, path))
        return findings

    def _check_image(
        self, document: Document, container: str, image: str, path: str
    ) -> list[Finding]:
        field = f"{path}.image"
        ref = parse_image(image)
        findings: list[Finding] = []

        if self.settings.require_digest and not ref.digest:
            findings.append(
                self.finding(
                    document,
                    Severity.WARNING,
                    f"Container {container!r} image should use digest",
                    field=field,
                    suggestion="Use image with SHA256 digest: image@sha256:...",
                )
            )

        allowed = self.settings.allowed_registries
        if allowed and ref.registry:
            if not any(
                ref.registry == reg or ref.registry.startswith(f"{reg}/") for reg in allowed
            ):
                findings.append(
                    self.finding(
                        document,
                        Severity.ERROR,
                        f"Container {container!r} uses disallowed registry {ref.registry!r}",
                        field=field,
                        suggestion=f"Use one of the allowed registries: {', '.join(allowed)}",
                    )
                )

        if ref.tag:
            if self.settings.disallow_latest and ref.tag == "latest":
                findings.append(
                    self.finding(
                        document,
                        Severity.ERROR,
                        f"Container {container!r} uses 'latest' tag",
                        field=field,
                        suggestion="Specify an explicit version tag",
                    )
                )
            if self._version_re is not None and not self._version_re.search(ref.tag):
                findings.append(
                    self.finding(
                        document,
                        Severity.WARNING,
                        f"Container {container!r} tag {ref.tag!r} doesn't match required pattern",
                        field=field,
                        suggestion=f"Use tag matching pattern: {self._version_re.pattern}",
                    )
                )
        return findings
