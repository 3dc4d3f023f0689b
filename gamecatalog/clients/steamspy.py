"""SteamSpy API client."""
import logging
from typing import Any

import httpx

from gamecatalog.clients.base import BaseClient
from gamecatalog.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class SteamSpyClient(BaseClient):
    """Fetch game stats from the SteamSpy API."""

    name = "steamspy"

    STEAMSPY_BASE = "https://steamspy.com/api.php"

    def __init__(self, client: httpx.AsyncClient | None = None, rate_limit_delay: float | None = None):
        if rate_limit_delay is None:
            rate_limit_delay = settings.steamspy_rate_limit_delay_ms / 1000
        super().__init__(client, rate_limit_delay)

    async def fetch_game_details(self, app_id: str) -> dict[str, Any] | None:
        """Get SteamSpy appdetails for a Steam app id, or None when unusable."""
        data = await self.fetch_json(
            self.STEAMSPY_BASE,
            params={"request": "appdetails", "appid": app_id},
            timeout=15.0,
        )

        if not data or not isinstance(data, dict):
            self.last_error = self.last_error or "empty response"
            logger.warning(f"No SteamSpy data for app {app_id}")
            return None

        if "error" in data:
            self.last_error = f"SteamSpy error: {data['error']}"
            logger.warning(f"SteamSpy error for app {app_id}: {data['error']}")
            return None

        return data

    async def fetch_top100_in_two_weeks(self) -> dict[str, Any]:
        """Top 100 games by players in the last two weeks, keyed by app id."""
        data = await self.fetch_json(
            self.STEAMSPY_BASE,
            params={"request": "top100in2weeks"},
            timeout=30.0,
        )
        return data if isinstance(data, dict) else {}

    async def fetch_all_games(self, page: int = 0) -> dict[str, Any]:
        """One page (1000 games) of the full SteamSpy catalog."""
        data = await self.fetch_json(
            self.STEAMSPY_BASE,
            params={"request": "all", "page": page},
            timeout=60.0,
        )
        return data if isinstance(data, dict) else {}
