"""Deal snapshot service.

Turns the seed catalog into the payload served by GET /deals:
1. Materialize each seed (drift -> discount -> timestamps -> validation)
2. Keep catalog order
3. Summarize exactly the materialized deals

Everything here is a pure function of (catalog, now). The clock is read at
most once, in `get_deals_snapshot`, when the caller does not pass `now`.
"""

import logging
import math
from collections.abc import Sequence
from datetime import datetime, timezone, tzinfo

from app.schemas.deals import (
    Deal,
    DealFilter,
    DealSnapshot,
    DealsSummary,
    ValidationStatus,
)
from app.services.catalog import DealCatalog, SeedDeal
from app.services.clock import ensure_utc, hours_from_now, minutes_ago, to_iso, utc_now
from app.services.errors import DealPipelineError
from app.services.pricing import apply_price_drift, calculate_discount, round_half_away, round_to_int
from app.services.validation import ValidationInput, validate_deal

logger = logging.getLogger("uvicorn.error")


def materialize_deal(
    seed: SeedDeal,
    index: int,
    now: datetime,
    *,
    tz: tzinfo = timezone.utc,
) -> Deal:
    """Build the presentable, validated deal for `seed` at instant `now`.

    Args:
        seed: Seed template.
        index: 0-based catalog position (phase of the price drift).
        now: Reference instant.
        tz: Display timezone for the freshness detail.

    Raises:
        DealPipelineError: Original price <= 0 or a non-finite computed price.
    """
    now = ensure_utc(now)
    adjusted_price = apply_price_drift(seed.price, index, now)
    if not math.isfinite(adjusted_price):
        raise DealPipelineError(
            f"Non-finite price for {seed.id}: {adjusted_price}", deal_id=seed.id
        )

    try:
        discount = calculate_discount(seed.original_price, adjusted_price)
    except DealPipelineError as e:
        raise DealPipelineError(f"{seed.id}: {e}", deal_id=seed.id) from e

    display_price = round_half_away(adjusted_price, 2)
    last_checked = minutes_ago(seed.last_checked_minutes_ago, now)
    expires_at = (
        to_iso(hours_from_now(seed.expires_in_hours, now))
        if seed.expires_in_hours is not None
        else None
    )

    validation = validate_deal(
        ValidationInput(
            price=adjusted_price,
            display_price=display_price,
            discount=discount,
            source_url=seed.source_url,
            original_price=seed.original_price,
            last_checked_at=last_checked,
            source_type=seed.source_type,
            currency=seed.currency,
            now=now,
        ),
        tz=tz,
    )

    return Deal(
        id=seed.id,
        type=seed.type,
        title=seed.title,
        route=seed.route,
        original_price=seed.original_price,
        price=display_price,
        currency=seed.currency,
        source=seed.source,
        source_type=seed.source_type,
        source_url=seed.source_url,
        expires_at=expires_at,
        badge=seed.badge,
        notes=seed.notes,
        last_checked_at=to_iso(last_checked),
        discount=discount,
        validation=validation,
    )


def summarize_deals(deals: Sequence[Deal]) -> DealsSummary:
    """Totals, verdict counts and average discount. Empty input averages to 0."""
    total = len(deals)
    valid = sum(1 for deal in deals if deal.validation.status is ValidationStatus.VALID)
    avg_discount = 0 if total == 0 else round_to_int(sum(deal.discount for deal in deals) / total)
    return DealsSummary(
        total=total,
        valid=valid,
        not_fully_valid=total - valid,
        avg_discount=avg_discount,
    )


def filter_deals(deals: Sequence[Deal], category: DealFilter | str) -> list[Deal]:
    """Deals of the given category, in their original order.

    Raises:
        ValueError: Unknown category string.
    """
    category = DealFilter(category)
    if category is DealFilter.ALL:
        return list(deals)
    return [deal for deal in deals if deal.type.value == category.value]


def get_deals_snapshot(
    catalog: DealCatalog,
    now: datetime | None = None,
    *,
    tz: tzinfo = timezone.utc,
) -> DealSnapshot:
    """Materialize the whole catalog and summarize it.

    Any seed that cannot be materialized fails the whole snapshot.

    Args:
        catalog: Seed catalog to materialize.
        now: Reference instant; defaults to the current wall clock.
        tz: Display timezone for the freshness detail.

    Returns:
        DealSnapshot whose summary covers exactly its deals.
    """
    now = utc_now() if now is None else ensure_utc(now)
    deals = tuple(materialize_deal(seed, index, now, tz=tz) for index, seed in enumerate(catalog))
    summary = summarize_deals(deals)
    logger.info(
        f"Deals snapshot built: total={summary.total}, valid={summary.valid}, "
        f"review={summary.not_fully_valid}"
    )
    return DealSnapshot(deals=deals, refreshed_at=to_iso(now), summary=summary)
