"""Schemas for the deals snapshot endpoint (GET /deals).

Python attributes are snake_case; the JSON payload is camelCase so the
existing front-end can consume it unchanged.
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class DealType(Enum):
    """Kind of travel product."""

    FLIGHT = "flight"
    CRUISE = "cruise"


class SourceType(Enum):
    """Who publishes the fare."""

    AIRLINE = "airline"
    IATA_AGENCY = "iata-agency"
    CRUISE_OPERATOR = "cruise-operator"


class Currency(Enum):
    BRL = "BRL"
    USD = "USD"


class CheckId(Enum):
    """Authenticity checks, in evaluation order."""

    SOURCE = "source"
    DISCOUNT = "discount"
    PRICE = "price"
    HTTPS = "https"
    FRESHNESS = "freshness"


class CheckStatus(Enum):
    PASSED = "passed"
    WARNING = "warning"
    FAILED = "failed"


class ValidationStatus(Enum):
    VALID = "valid"
    REVIEW = "review"


class DealFilter(Enum):
    """Category filter used by the deals board."""

    ALL = "all"
    FLIGHT = "flight"
    CRUISE = "cruise"


class DealCheck(BaseModel):
    """Outcome of a single authenticity check."""

    id: CheckId
    label: str
    status: CheckStatus
    detail: str

    model_config = {"frozen": True}


class DealValidation(BaseModel):
    """Ordered checks plus the overall verdict.

    The verdict is an AND-gate: `valid` only when every check passed.
    Warnings count the same as failures.
    """

    status: ValidationStatus
    checks: tuple[DealCheck, ...]

    model_config = {"frozen": True}

    @classmethod
    def from_checks(cls, checks: list[DealCheck]) -> "DealValidation":
        all_passed = all(check.status is CheckStatus.PASSED for check in checks)
        status = ValidationStatus.VALID if all_passed else ValidationStatus.REVIEW
        return cls(status=status, checks=tuple(checks))

    @model_validator(mode="after")
    def _status_matches_checks(self) -> "DealValidation":
        all_passed = all(check.status is CheckStatus.PASSED for check in self.checks)
        if all_passed != (self.status is ValidationStatus.VALID):
            raise ValueError(
                f"status={self.status.value} is inconsistent with check outcomes"
            )
        return self

    @property
    def non_passed_checks(self) -> list[DealCheck]:
        return [check for check in self.checks if check.status is not CheckStatus.PASSED]


class Deal(BaseModel):
    """A materialized, time-stamped and validated offer."""

    id: str
    type: DealType
    title: str
    route: str
    original_price: float = Field(alias="originalPrice")
    price: float
    currency: Currency
    source: str
    source_type: SourceType = Field(alias="sourceType")
    source_url: str = Field(alias="sourceUrl")
    expires_at: str | None = Field(alias="expiresAt", default=None)
    badge: str | None = None
    notes: str | None = None
    last_checked_at: str = Field(alias="lastCheckedAt")
    discount: int
    validation: DealValidation

    model_config = {"populate_by_name": True, "frozen": True}


class DealsSummary(BaseModel):
    """Aggregate statistics over a collection of deals.

    `not_fully_valid` is serialized as `failing` for compatibility with the
    board UI. It counts every deal whose status is not `valid`, including
    deals that only have warnings and no failed check.
    """

    total: int = Field(ge=0)
    valid: int = Field(ge=0)
    not_fully_valid: int = Field(alias="failing", ge=0)
    avg_discount: int = Field(alias="avgDiscount")

    model_config = {"populate_by_name": True, "frozen": True}

    @model_validator(mode="after")
    def _counts_add_up(self) -> "DealsSummary":
        if self.valid + self.not_fully_valid != self.total:
            raise ValueError("valid + failing must equal total")
        return self

    @property
    def failing(self) -> int:
        return self.not_fully_valid


class DealSnapshot(BaseModel):
    """Response payload for GET /deals."""

    deals: tuple[Deal, ...]
    refreshed_at: str = Field(alias="refreshedAt")
    summary: DealsSummary

    model_config = {"populate_by_name": True, "frozen": True}
