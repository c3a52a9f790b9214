"""ServiceResult and ServiceError: what every service operation returns.

The CLI consumes this type: ``data`` carries the payload (for ``resolve``,
the line to print), ``warnings`` the skipped imports, ``error`` the typed
configuration failure.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from occasion.errors import ConfigError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: ConfigError) -> ServiceError:
        return cls(code=exc.code, message=str(exc), detail={"type": type(exc).__name__})


class ServiceResult(BaseModel):
    """Return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (``"resolve"``, ``"validate"``, ``"init"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues, e.g. imports that were skipped.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def failure(cls, op: str, exc: ConfigError, warnings: list[str] | None = None) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError.from_exception(exc),
            warnings=list(warnings or []),
        )
