"""Pydantic schemas for API request/response validation."""

from app.schemas.common import ErrorDetail, ErrorResponse
from app.schemas.deals import (
    CheckId,
    CheckStatus,
    Currency,
    Deal,
    DealCheck,
    DealFilter,
    DealSnapshot,
    DealsSummary,
    DealType,
    DealValidation,
    SourceType,
    ValidationStatus,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "CheckId",
    "CheckStatus",
    "Currency",
    "Deal",
    "DealCheck",
    "DealFilter",
    "DealSnapshot",
    "DealsSummary",
    "DealType",
    "DealValidation",
    "SourceType",
    "ValidationStatus",
]
