"""Deals endpoint.

GET /deals - Returns the current DealSnapshot.

Routers are thin: call services for business logic. Every request
recomputes from the current instant; responses are never cached.
"""

from functools import lru_cache

from fastapi import APIRouter, Depends, Response

from app.schemas import DealSnapshot
from app.services.catalog import DealCatalog, build_default_catalog
from app.services.clock import utc_now
from app.services.snapshot import get_deals_snapshot
from app.settings import Settings, get_settings

router = APIRouter()


@lru_cache
def get_catalog() -> DealCatalog:
    """Catalog served by the API (overridable via dependency_overrides)."""
    return build_default_catalog()


@router.get("", response_model=DealSnapshot, response_model_exclude_none=True)
async def get_deals(
    response: Response,
    catalog: DealCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> DealSnapshot:
    """Get all tracked deals with their validation and summary.

    Optional fields (expiresAt, badge, notes) are left out when unset.

    Returns:
        DealSnapshot with deals in catalog order, refreshedAt and summary.
    """
    response.headers["Cache-Control"] = "no-store"
    return get_deals_snapshot(catalog, utc_now(), tz=settings.display_tz)
