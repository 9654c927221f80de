"""HTTP client for the deals endpoint.

Used by the board UI / CLI to refresh on demand. There is no retry or
backoff: a failed refresh surfaces one generic message and the user
triggers it again.
"""

import logging

import httpx
from pydantic import ValidationError

from app.schemas.deals import DealSnapshot
from app.services.errors import RefreshError
from app.settings import get_settings

logger = logging.getLogger("uvicorn.error")


class DealsClient:
    """Client for GET /deals."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            base_url: API root; defaults to settings.deals_api_base_url.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests, in-process ASGI app).
        """
        settings = get_settings()
        self.base_url = (base_url or settings.deals_api_base_url).rstrip("/")
        self.timeout = timeout or settings.refresh_timeout_seconds
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "DealsClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def fetch_snapshot(self) -> DealSnapshot:
        """Fetch a fresh snapshot.

        Raises:
            RefreshError: Transport error, non-200 status or unparseable body.
        """
        client = await self._get_client()
        try:
            resp = await client.get("/deals", headers={"Cache-Control": "no-cache"})
        except httpx.HTTPError as e:
            logger.warning(f"Deals refresh failed: {type(e).__name__}: {e}")
            raise RefreshError(f"transport error: {e}") from e

        if resp.status_code != 200:
            logger.warning(f"Deals refresh failed: HTTP {resp.status_code} - {resp.text[:200]}")
            raise RefreshError(f"unexpected status {resp.status_code}")

        try:
            return DealSnapshot.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            logger.warning(f"Deals refresh returned an invalid payload: {e}")
            raise RefreshError("invalid payload") from e
