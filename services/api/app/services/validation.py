"""Deal validation service.

Every materialized deal goes through five independent checks, always in the
same order:
- source: fare comes from an airline, IATA agency or cruise operator
- discount: 45-90% passes, 30-44% warns, anything else fails
- price: current price is below the original price
- https: source link uses the https scheme
- freshness: price was checked within the last 6 hours (warns, never fails)

Overall status is `valid` only when all five passed; any warning or failure
puts the deal under `review`.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo

from app.schemas.deals import (
    CheckId,
    CheckStatus,
    Currency,
    DealCheck,
    DealValidation,
    SourceType,
)
from app.services.clock import ensure_utc, format_time_of_day
from app.services.pricing import format_currency

# Discount bands (percent, inclusive). No warning band above the max:
# implausibly deep discounts fail outright.
DISCOUNT_PASS_MIN = 45
DISCOUNT_PASS_MAX = 90
DISCOUNT_WARN_MIN = 30

FRESHNESS_MAX_AGE = timedelta(hours=6)
SECURE_URL_PREFIX = "https://"

_RECOGNIZED_SOURCES = frozenset(source.value for source in SourceType)

_LABELS = {
    CheckId.SOURCE: "Official or authorized source",
    CheckId.DISCOUNT: f"Discount between {DISCOUNT_PASS_MIN}% and {DISCOUNT_PASS_MAX}%",
    CheckId.PRICE: "Price below the original",
    CheckId.HTTPS: "Secure link (https)",
    CheckId.FRESHNESS: "Checked within the last 6h",
}


@dataclass(frozen=True)
class ValidationInput:
    """Computed fields of a candidate deal."""

    price: float
    display_price: float
    discount: int
    source_url: str
    original_price: float
    last_checked_at: datetime
    source_type: SourceType | str
    currency: Currency
    now: datetime


def check_source(source_type: SourceType | str) -> DealCheck:
    """Raw strings are accepted so unknown categories can be reported, not rejected."""
    raw = source_type.value if isinstance(source_type, SourceType) else str(source_type)
    status = CheckStatus.PASSED if raw in _RECOGNIZED_SOURCES else CheckStatus.FAILED
    return DealCheck(id=CheckId.SOURCE, label=_LABELS[CheckId.SOURCE], status=status, detail=raw)


def discount_status(discount: int) -> CheckStatus:
    if DISCOUNT_PASS_MIN <= discount <= DISCOUNT_PASS_MAX:
        return CheckStatus.PASSED
    if DISCOUNT_WARN_MIN <= discount < DISCOUNT_PASS_MIN:
        return CheckStatus.WARNING
    return CheckStatus.FAILED


def check_discount(discount: int) -> DealCheck:
    return DealCheck(
        id=CheckId.DISCOUNT,
        label=_LABELS[CheckId.DISCOUNT],
        status=discount_status(discount),
        detail=f"{discount}% below list fare",
    )


def check_price(
    price: float,
    original_price: float,
    currency: Currency,
    display_price: float | None = None,
) -> DealCheck:
    """Current price must be strictly below the original.

    `display_price` is the rounded price shown to users; the comparison uses
    the unrounded `price`.
    """
    shown = price if display_price is None else display_price
    return DealCheck(
        id=CheckId.PRICE,
        label=_LABELS[CheckId.PRICE],
        status=CheckStatus.PASSED if price < original_price else CheckStatus.FAILED,
        detail=(
            f"from {format_currency(original_price, currency)} "
            f"to {format_currency(shown, currency)}"
        ),
    )


def check_https(source_url: str) -> DealCheck:
    """Literal, case-sensitive prefix match: "HTTPS://..." fails."""
    return DealCheck(
        id=CheckId.HTTPS,
        label=_LABELS[CheckId.HTTPS],
        status=(
            CheckStatus.PASSED if source_url.startswith(SECURE_URL_PREFIX) else CheckStatus.FAILED
        ),
        detail=source_url,
    )


def is_fresh(last_checked_at: datetime, now: datetime, max_age: timedelta = FRESHNESS_MAX_AGE) -> bool:
    """True when the last check is at most `max_age` old (boundary inclusive)."""
    return ensure_utc(now) - ensure_utc(last_checked_at) <= max_age


def check_freshness(
    last_checked_at: datetime,
    now: datetime,
    tz: tzinfo = timezone.utc,
) -> DealCheck:
    # Stale data only warns; it never hard-fails a deal.
    return DealCheck(
        id=CheckId.FRESHNESS,
        label=_LABELS[CheckId.FRESHNESS],
        status=CheckStatus.PASSED if is_fresh(last_checked_at, now) else CheckStatus.WARNING,
        detail=format_time_of_day(last_checked_at, tz),
    )


def validate_deal(candidate: ValidationInput, *, tz: tzinfo = timezone.utc) -> DealValidation:
    """Run all checks against a candidate deal.

    Args:
        candidate: Computed deal fields.
        tz: Timezone for the time-of-day shown in the freshness detail.

    Returns:
        DealValidation with exactly five checks, in fixed order.
    """
    checks = [
        check_source(candidate.source_type),
        check_discount(candidate.discount),
        check_price(
            candidate.price,
            candidate.original_price,
            candidate.currency,
            display_price=candidate.display_price,
        ),
        check_https(candidate.source_url),
        check_freshness(candidate.last_checked_at, candidate.now, tz),
    ]
    return DealValidation.from_checks(checks)
