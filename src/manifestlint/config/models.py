"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, manifestlint.toml only contains
overrides. An empty file (or no file at all) lints with every built-in rule
at its default settings.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

OutputFormat = Literal["text", "json", "yaml", "github-actions"]


class CustomRuleConfig(BaseModel):
    """One ``[[linters.custom]]`` declaration."""

    model_config = {"frozen": True}

    name: str = ""
    kind: str = ""
    description: str = ""
    settings: dict[str, Any] = Field(default_factory=dict)


class LintersConfig(BaseModel):
    """[linters] section."""

    model_config = {"frozen": True}

    enable: list[str] = Field(default_factory=list)
    disable: list[str] = Field(default_factory=list)
    settings: dict[str, dict[str, Any]] = Field(default_factory=dict)
    custom: list[CustomRuleConfig] = Field(default_factory=list)


class RunConfig(BaseModel):
    """[run] section."""

    model_config = {"frozen": True, "populate_by_name": True}

    concurrency: int = Field(default=4, ge=1)
    timeout: float | None = Field(default=300.0, gt=0)
    # Directory names never descended into when walking a source directory.
    skip_dirs: list[str] = Field(default_factory=list, alias="skip-dirs")


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    format: OutputFormat = "text"
    color: Literal["auto", "always", "never"] = "auto"


class ResourceFilter(BaseModel):
    """One ``[[exclude.resources]]`` entry; empty fields match anything."""

    model_config = {"frozen": True}

    kind: str = ""
    name: str = ""
    namespace: str = ""


class ExcludeConfig(BaseModel):
    """[exclude] section."""

    model_config = {"frozen": True}

    resources: list[ResourceFilter] = Field(default_factory=list)
    # Glob patterns matched against manifest file paths and file names.
    paths: list[str] = Field(default_factory=list)


class LintConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    sources: list[str] = Field(default_factory=list)
    linters: LintersConfig = Field(default_factory=LintersConfig)
    run: RunConfig = Field(default_factory=RunConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    exclude: ExcludeConfig = Field(default_factory=ExcludeConfig)

    @field_validator("sources", mode="before")
    @classmethod
    def _single_source(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value
