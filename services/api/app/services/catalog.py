"""Seed catalog of tracked travel deals.

Seeds are static templates. The snapshot builder receives a catalog
explicitly, so tests can build their own catalogs side by side.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from app.schemas.deals import Currency, DealType, SourceType
from app.services.errors import DealPipelineError


@dataclass(frozen=True)
class SeedDeal:
    """Immutable template for one offer."""

    id: str
    type: DealType
    title: str
    route: str
    original_price: float
    price: float  # nominal price before drift
    currency: Currency
    source: str
    source_type: SourceType
    source_url: str
    last_checked_minutes_ago: float
    expires_in_hours: float | None = None
    badge: str | None = None
    notes: str | None = None


class DealCatalog:
    """Ordered, read-only collection of seed deals with unique ids."""

    def __init__(self, seeds: Iterable[SeedDeal]):
        self._seeds: tuple[SeedDeal, ...] = tuple(seeds)
        seen: set[str] = set()
        for seed in self._seeds:
            if seed.id in seen:
                raise DealPipelineError(f"Duplicate seed id: {seed.id}", deal_id=seed.id)
            seen.add(seed.id)

    def __iter__(self) -> Iterator[SeedDeal]:
        return iter(self._seeds)

    def __len__(self) -> int:
        return len(self._seeds)

    def __getitem__(self, index: int) -> SeedDeal:
        return self._seeds[index]

    @property
    def seeds(self) -> tuple[SeedDeal, ...]:
        return self._seeds

    def get(self, deal_id: str) -> SeedDeal | None:
        return next((seed for seed in self._seeds if seed.id == deal_id), None)


def build_default_catalog() -> DealCatalog:
    """The six tracked flight and cruise promotions."""
    return DealCatalog(
        [
            SeedDeal(
                id="flight-rio-lisbon",
                type=DealType.FLIGHT,
                title="Rio de Janeiro to Lisbon (round trip)",
                route="GIG - LIS",
                original_price=4120,
                price=1790,
                currency=Currency.BRL,
                source="TAP Air Portugal - official site",
                source_type=SourceType.AIRLINE,
                source_url="https://www.flytap.com/",
                expires_in_hours=42,
                badge="Checked bag and free rebooking",
                notes="Booked directly with TAP, flexible fare.",
                last_checked_minutes_ago=18,
            ),
            SeedDeal(
                id="flight-sao-nyc",
                type=DealType.FLIGHT,
                title="Sao Paulo to New York (round trip)",
                route="GRU - JFK",
                original_price=5280,
                price=2480,
                currency=Currency.BRL,
                source="United - official site",
                source_type=SourceType.AIRLINE,
                source_url="https://www.united.com/",
                expires_in_hours=30,
                badge="2 carry-ons + checked bag",
                notes="Validated with an airline fare token.",
                last_checked_minutes_ago=32,
            ),
            SeedDeal(
                id="flight-bsb-mia",
                type=DealType.FLIGHT,
                title="Brasilia to Miami (round trip)",
                route="BSB - MIA",
                original_price=4870,
                price=2290,
                currency=Currency.BRL,
                source="Authorized IATA agency",
                source_type=SourceType.IATA_AGENCY,
                source_url="https://www.cvc.com.br/",
                expires_in_hours=22,
                badge="Light fare, instant ticketing",
                notes="Ticketed by an agency on a consolidated fare.",
                last_checked_minutes_ago=8,
            ),
            SeedDeal(
                id="cruise-mediterraneo",
                type=DealType.CRUISE,
                title="Mediterranean - 7 nights",
                route="Barcelona - Rome - Marseille",
                original_price=7890,
                price=3190,
                currency=Currency.BRL,
                source="MSC - official agent",
                source_type=SourceType.CRUISE_OPERATOR,
                source_url="https://www.msccruzeiros.com.br/",
                expires_in_hours=52,
                badge="Ocean-view cabin + port fees",
                notes="Inventory checked directly in the MSC system.",
                last_checked_minutes_ago=20,
            ),
            SeedDeal(
                id="cruise-caribe",
                type=DealType.CRUISE,
                title="Caribbean - 5 nights",
                route="Miami - Nassau - Cozumel",
                original_price=5120,
                price=2140,
                currency=Currency.BRL,
                source="Royal Caribbean - official site",
                source_type=SourceType.CRUISE_OPERATOR,
                source_url="https://www.royalcaribbean.com/",
                expires_in_hours=18,
                badge="Inside cabin, fees included",
                notes="Price checked on the official booking engine.",
                last_checked_minutes_ago=11,
            ),
            SeedDeal(
                id="flight-porto-orlando",
                type=DealType.FLIGHT,
                title="Porto Alegre to Orlando (round trip)",
                route="POA - MCO",
                original_price=4650,
                price=2130,
                currency=Currency.BRL,
                source="Delta - official site",
                source_type=SourceType.AIRLINE,
                source_url="https://www.delta.com/",
                expires_in_hours=27,
                badge="Economy fare with checked bag",
                notes="Validated with a test PNR.",
                last_checked_minutes_ago=16,
            ),
        ]
    )
