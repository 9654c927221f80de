"""Tests for deal materialization, summary, filtering and snapshots."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from app.schemas import (
    CheckId,
    CheckStatus,
    Currency,
    DealFilter,
    DealType,
    SourceType,
    ValidationStatus,
)
from app.services.catalog import DealCatalog, SeedDeal, build_default_catalog
from app.services.clock import parse_iso, to_iso
from app.services.errors import DealPipelineError
from app.services.pricing import apply_price_drift, calculate_discount
from app.services.snapshot import (
    filter_deals,
    get_deals_snapshot,
    materialize_deal,
    summarize_deals,
)

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

SEED = SeedDeal(
    id="flight-test",
    type=DealType.FLIGHT,
    title="Test City to Elsewhere (round trip)",
    route="AAA - BBB",
    original_price=4000,
    price=2000,
    currency=Currency.BRL,
    source="Test Air - official site",
    source_type=SourceType.AIRLINE,
    source_url="https://www.test-air.example/",
    expires_in_hours=24,
    badge="Checked bag",
    notes="Seeded for tests.",
    last_checked_minutes_ago=15,
)


class TestMaterializeDeal:
    """Tests for single-deal materialization."""

    def test_copies_static_fields(self):
        deal = materialize_deal(SEED, 0, NOW)
        assert deal.id == SEED.id
        assert deal.type is DealType.FLIGHT
        assert deal.route == "AAA - BBB"
        assert deal.original_price == 4000
        assert deal.source_type is SourceType.AIRLINE
        assert deal.badge == "Checked bag"
        assert deal.notes == "Seeded for tests."

    def test_price_and_discount(self):
        deal = materialize_deal(SEED, 3, NOW)
        adjusted = apply_price_drift(2000, 3, NOW)
        assert deal.price == pytest.approx(adjusted, abs=0.005)
        assert deal.price == round(deal.price, 2)
        assert deal.discount == calculate_discount(4000, adjusted)

    def test_timestamps(self):
        deal = materialize_deal(SEED, 0, NOW)
        assert deal.last_checked_at == "2025-01-15T11:45:00.000Z"
        assert deal.expires_at == "2025-01-16T12:00:00.000Z"

    def test_no_expiry_window(self):
        deal = materialize_deal(replace(SEED, expires_in_hours=None), 0, NOW)
        assert deal.expires_at is None

    def test_zero_hour_expiry_is_kept(self):
        deal = materialize_deal(replace(SEED, expires_in_hours=0), 0, NOW)
        assert deal.expires_at == to_iso(NOW)

    def test_valid_seed_is_valid(self):
        deal = materialize_deal(SEED, 0, NOW)
        assert deal.validation.status is ValidationStatus.VALID
        assert len(deal.validation.checks) == 5

    def test_insecure_link_needs_review(self):
        deal = materialize_deal(replace(SEED, source_url="http://www.test-air.example/"), 0, NOW)
        assert deal.validation.status is ValidationStatus.REVIEW
        https = next(check for check in deal.validation.checks if check.id is CheckId.HTTPS)
        assert https.status is CheckStatus.FAILED

    def test_stale_seed_only_warns(self):
        deal = materialize_deal(replace(SEED, last_checked_minutes_ago=7 * 60), 0, NOW)
        assert deal.validation.status is ValidationStatus.REVIEW
        assert [check.status for check in deal.validation.non_passed_checks] == [CheckStatus.WARNING]

    def test_price_above_original_gives_negative_discount(self):
        deal = materialize_deal(replace(SEED, original_price=1000), 0, NOW)
        assert deal.discount < 0
        assert deal.validation.status is ValidationStatus.REVIEW

    def test_rejects_non_positive_original_price(self):
        with pytest.raises(DealPipelineError) as exc_info:
            materialize_deal(replace(SEED, original_price=0), 0, NOW)
        assert exc_info.value.deal_id == SEED.id

    def test_large_finite_prices_materialize(self):
        deal = materialize_deal(replace(SEED, original_price=4e30, price=2e30), 0, NOW)
        assert deal.discount == calculate_discount(4e30, apply_price_drift(2e30, 0, NOW))
        assert deal.price == pytest.approx(apply_price_drift(2e30, 0, NOW))
        assert deal.validation.status is ValidationStatus.VALID

    @pytest.mark.parametrize("price", [float("inf"), float("nan")])
    def test_rejects_non_finite_price(self, price):
        with pytest.raises(DealPipelineError):
            materialize_deal(replace(SEED, price=price), 0, NOW)


class TestSummarizeDeals:
    """Tests for summary statistics."""

    def test_empty(self):
        summary = summarize_deals([])
        assert summary.total == 0
        assert summary.valid == 0
        assert summary.failing == 0
        assert summary.avg_discount == 0

    def test_counts(self):
        deals = [
            materialize_deal(SEED, 0, NOW),
            materialize_deal(replace(SEED, id="b", source_url="http://b.example/"), 1, NOW),
            materialize_deal(replace(SEED, id="c", last_checked_minutes_ago=600), 2, NOW),
        ]
        summary = summarize_deals(deals)
        assert summary.total == 3
        assert summary.valid == 1
        # Warning-only deals count as not fully valid too.
        assert summary.not_fully_valid == 2
        assert summary.failing == summary.total - summary.valid

    def test_average_rounds_half_away_from_zero(self):
        deal = materialize_deal(SEED, 0, NOW)
        deals = [deal.model_copy(update={"discount": 45}), deal.model_copy(update={"discount": 46})]
        assert summarize_deals(deals).avg_discount == 46

    def test_serializes_failing(self):
        data = summarize_deals([materialize_deal(SEED, 0, NOW)]).model_dump(by_alias=True)
        assert data == {"total": 1, "valid": 1, "failing": 0, "avgDiscount": data["avgDiscount"]}


class TestFilterDeals:
    """Tests for category filtering."""

    def test_filters_keep_order(self):
        deals = get_deals_snapshot(build_default_catalog(), NOW).deals
        assert [deal.id for deal in filter_deals(deals, DealFilter.CRUISE)] == [
            "cruise-mediterraneo",
            "cruise-caribe",
        ]
        assert [deal.id for deal in filter_deals(deals, "flight")] == [
            "flight-rio-lisbon",
            "flight-sao-nyc",
            "flight-bsb-mia",
            "flight-porto-orlando",
        ]
        assert len(filter_deals(deals, DealFilter.ALL)) == 6

    def test_filtered_summary(self):
        deals = get_deals_snapshot(build_default_catalog(), NOW).deals
        assert summarize_deals(filter_deals(deals, DealFilter.CRUISE)).total == 2

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            filter_deals([], "train")


class TestDealCatalog:
    """Tests for the seed catalog."""

    def test_default_catalog(self):
        catalog = build_default_catalog()
        assert len(catalog) == 6
        assert catalog[0].id == "flight-rio-lisbon"
        assert catalog.get("cruise-caribe").type is DealType.CRUISE
        assert catalog.get("missing") is None

    def test_duplicate_ids_rejected(self):
        with pytest.raises(DealPipelineError):
            DealCatalog([SEED, SEED])

    def test_independent_catalogs(self):
        assert get_deals_snapshot(DealCatalog([SEED]), NOW).summary.total == 1
        assert get_deals_snapshot(build_default_catalog(), NOW).summary.total == 6


class TestGetDealsSnapshot:
    """End-to-end snapshot tests."""

    def test_summary_covers_snapshot_deals(self):
        snapshot = get_deals_snapshot(build_default_catalog(), NOW)
        assert snapshot.summary.total == 6
        assert snapshot.summary == summarize_deals(snapshot.deals)
        assert snapshot.refreshed_at == "2025-01-15T12:00:00.000Z"

    def test_default_catalog_is_valid(self):
        for hours in range(0, 48, 5):
            snapshot = get_deals_snapshot(build_default_catalog(), NOW + timedelta(hours=hours))
            assert snapshot.summary.valid == 6
            assert 45 <= snapshot.summary.avg_discount <= 90

    def test_deterministic_for_frozen_now(self):
        first = get_deals_snapshot(build_default_catalog(), NOW)
        second = get_deals_snapshot(build_default_catalog(), NOW)
        assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)

    def test_catalog_order_preserved(self):
        catalog = build_default_catalog()
        snapshot = get_deals_snapshot(catalog, NOW)
        assert [deal.id for deal in snapshot.deals] == [seed.id for seed in catalog]

    def test_naive_now_is_utc(self):
        naive = get_deals_snapshot(build_default_catalog(), NOW.replace(tzinfo=None))
        aware = get_deals_snapshot(build_default_catalog(), NOW)
        assert naive == aware

    def test_defaults_to_wall_clock(self):
        before = datetime.now(timezone.utc) - timedelta(seconds=1)
        snapshot = get_deals_snapshot(build_default_catalog())
        assert parse_iso(snapshot.refreshed_at) >= before

    def test_one_bad_seed_fails_whole_snapshot(self):
        catalog = DealCatalog([SEED, replace(SEED, id="broken", original_price=-1)])
        with pytest.raises(DealPipelineError):
            get_deals_snapshot(catalog, NOW)
