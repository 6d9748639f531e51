"""ServiceResult and ServiceError — the contract between services and the CLI.

INVARIANT: Service methods return ServiceResult; setup and evaluation
failures become ``ok=False`` results with a distinct error code, never
exceptions escaping to the caller.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Failure classes a caller can map to distinct exit codes."""

    SETUP_ERROR = "SETUP_ERROR"
    EVALUATION_ERROR = "EVALUATION_ERROR"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded. Findings do not make a run fail;
            only setup or evaluation errors do.
        op: Name of the operation (``"run"``, ``"linters"``, ...).
        data: Operation-specific payload.
        warnings: Non-fatal issues (cancelled run, unmatched paths, ...).
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        code: ErrorCode,
        message: str,
        **detail: Any,
    ) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
