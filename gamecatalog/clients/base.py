"""Base HTTP client class."""
import asyncio
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class BaseClient:
    """Shared httpx plumbing for upstream APIs."""

    name: str = "base"
    rate_limit_delay: float = 0.0  # Seconds to wait before each request
    timeout: float = 30.0

    def __init__(self, client: httpx.AsyncClient | None = None, rate_limit_delay: float | None = None):
        self.client = client or httpx.AsyncClient(timeout=self.timeout)
        self._owns_client = client is None
        self.last_error: str | None = None
        if rate_limit_delay is not None:
            self.rate_limit_delay = rate_limit_delay

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        if self._owns_client:
            await self.client.aclose()

    async def throttle(self):
        if self.rate_limit_delay > 0:
            await asyncio.sleep(self.rate_limit_delay)

    async def fetch_json(self, url: str, **kwargs) -> Any | None:
        """Fetch JSON from URL, returning None on transport, status or decode errors."""
        await self.throttle()
        self.last_error = None
        try:
            response = await self.client.get(url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            self.last_error = f"HTTP {e.response.status_code}"
            logger.warning(f"{self.name} request failed with status {e.response.status_code}: {url}")
            return None
        except httpx.HTTPError as e:
            self.last_error = f"{type(e).__name__}: {e}"
            logger.error(f"HTTP error fetching {url}: {e}")
            return None
        except ValueError as e:
            self.last_error = "invalid JSON"
            logger.error(f"Invalid JSON from {url}: {e}")
            return None
