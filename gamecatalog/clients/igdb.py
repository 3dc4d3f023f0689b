"""IGDB API client."""
import logging
from dataclasses import dataclass, asdict
from typing import Any

import httpx
from cachetools import TTLCache

from gamecatalog.clients.base import BaseClient
from gamecatalog.config import get_settings
from gamecatalog.exceptions import IgdbAuthError, UpstreamFetchError

logger = logging.getLogger(__name__)
settings = get_settings()

# Twitch tokens live ~60 days; refresh well before that
token_cache: TTLCache = TTLCache(maxsize=8, ttl=23 * 3600)

# Legacy IGDB external_games.category values
CATEGORY_NAMES = {
    1: "Steam",
    5: "GOG",
    10: "YouTube",
    11: "Xbox Marketplace",
    13: "Apple App Store",
    14: "Google Play",
    15: "itch.io",
    20: "Amazon ASIN",
    22: "Twitch",
    23: "Android",
    26: "Epic Games Store",
    28: "Oculus",
    29: "Utomik",
    31: "Focus Entertainment",
    36: "PlayStation Store",
    37: "Xbox Game Pass",
}


GAME_FIELDS = ", ".join([
    "name",
    "slug",
    "summary",
    "first_release_date",
    "cover.image_id",
    "external_games.external_game_source",
    "external_games.category",
    "external_games.uid",
    "external_games.url",
])


@dataclass(frozen=True)
class ExternalSourceData:
    """One external catalog entry parsed from an IGDB game payload."""

    source_id: int
    source_name: str
    external_uid: str
    external_url: str | None
    category: int | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class IgdbClient(BaseClient):
    """Query IGDB with Twitch client-credentials auth."""

    name = "igdb"

    TOKEN_URL = "https://id.twitch.tv/oauth2/token"
    IGDB_BASE = "https://api.igdb.com/v4"

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        rate_limit_delay: float | None = None,
    ):
        if rate_limit_delay is None:
            rate_limit_delay = settings.igdb_rate_limit_delay_ms / 1000
        super().__init__(client, rate_limit_delay)
        self.client_id = client_id or settings.igdb_client_id
        self.client_secret = client_secret or settings.igdb_client_secret

    async def get_access_token(self) -> str:
        """Get a bearer token, cached per client id."""
        if self.client_id in token_cache:
            logger.debug("IGDB token cache hit")
            return token_cache[self.client_id]

        if not self.client_id or not self.client_secret:
            raise IgdbAuthError("IGDB credentials are not configured")

        try:
            response = await self.client.post(
                self.TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "grant_type": "client_credentials",
                },
            )
        except httpx.HTTPError as e:
            raise IgdbAuthError(f"Token request failed: {e}") from e

        if response.is_error:
            raise IgdbAuthError(
                f"Failed to obtain IGDB access token: {response.text}",
                response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise IgdbAuthError("Token response was not valid JSON", response.status_code) from e

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise IgdbAuthError("Token response did not contain an access_token")

        token_cache[self.client_id] = token
        return token

    async def query(self, endpoint: str, body: str) -> list[dict[str, Any]]:
        """POST an Apicalypse query to an IGDB endpoint."""
        token = await self.get_access_token()
        await self.throttle()

        url = f"{self.IGDB_BASE}/{endpoint}"
        try:
            response = await self.client.post(
                url,
                content=body,
                headers={
                    "Client-ID": self.client_id,
                    "Authorization": f"Bearer {token}",
                    "Accept": "application/json",
                    "Content-Type": "text/plain",
                },
            )
        except httpx.HTTPError as e:
            raise UpstreamFetchError(self.name, f"{endpoint} request failed: {e}") from e

        if response.is_error:
            raise UpstreamFetchError(
                self.name,
                f"{endpoint} returned {response.status_code}: {response.text}",
                response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamFetchError(self.name, f"{endpoint} returned invalid JSON") from e

        if not isinstance(data, list):
            raise UpstreamFetchError(self.name, f"{endpoint} returned unexpected payload")

        return data

    async def fetch_external_game_sources(self) -> list[dict[str, Any]]:
        return await self.query("external_game_sources", "fields id, name; limit 500;")

    async def fetch_games(self, igdb_ids: list[int]) -> list[dict[str, Any]]:
        """Game payloads with cover and external_games expanded, at most 500 ids."""
        if not igdb_ids:
            return []
        ids = ",".join(str(igdb_id) for igdb_id in igdb_ids)
        body = (
            f"fields {GAME_FIELDS}; "
            f"where id = ({ids}); "
            f"limit {min(len(igdb_ids), 500)};"
        )
        return await self.query("games", body)

    @staticmethod
    def extract_external_sources(igdb_game: dict[str, Any]) -> list[ExternalSourceData]:
        """Parse expanded external_games of an IGDB game into source entries.

        ``external_game_source`` may be an id or an expanded object; older
        payloads only carry ``category``. Entries without a source id or uid
        are skipped.
        """
        external_games = igdb_game.get("external_games")
        if not external_games or not isinstance(external_games, list):
            return []

        sources = []
        for external_game in external_games:
            if not isinstance(external_game, dict):
                continue

            source = external_game.get("external_game_source")
            if isinstance(source, dict):
                source_id = source.get("id")
                source_name = source.get("name")
            else:
                source_id = source if source is not None else external_game.get("category")
                source_name = CATEGORY_NAMES.get(source_id)

            uid = external_game.get("uid")
            if not source_id or not uid:
                continue

            sources.append(ExternalSourceData(
                source_id=int(source_id),
                source_name=source_name or "Unknown",
                external_uid=str(uid),
                external_url=external_game.get("url"),
                category=int(source_id),
            ))

        return sources
