"""Common schemas used across the API."""

from typing import Any, Literal

from pydantic import BaseModel

ErrorCode = Literal["SNAPSHOT_FAILED", "INTERNAL_ERROR"]


class ErrorDetail(BaseModel):
    """Structured error detail."""

    code: ErrorCode
    message: str
    detail: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": { "code": str, "message": str, "detail": object } }
    """

    error: ErrorDetail
