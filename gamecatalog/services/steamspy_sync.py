"""Sync one Steam source link from SteamSpy."""
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gamecatalog.clients import SteamSpyClient
from gamecatalog.clock import Clock, system_clock
from gamecatalog.exceptions import PersistenceError
from gamecatalog.models import GameExternalSource
from gamecatalog.services.repository import upsert_steam_game_data

logger = logging.getLogger(__name__)


def _int_or_none(value: Any) -> int | None:
    # SteamSpy sends some numbers as strings, and "" for unknown
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def steam_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Map a SteamSpy appdetails payload onto SteamGameData columns."""
    tags = data.get("tags")
    return {
        "owners": data.get("owners"),
        "players_forever": data.get("players_forever"),
        "players_2weeks": data.get("players_2weeks"),
        "average_forever": _int_or_none(data.get("average_forever")),
        "average_2weeks": _int_or_none(data.get("average_2weeks")),
        "median_forever": _int_or_none(data.get("median_forever")),
        "median_2weeks": _int_or_none(data.get("median_2weeks")),
        "ccu": _int_or_none(data.get("ccu")),
        "price": _int_or_none(data.get("price")),
        "score_rank": _int_or_none(data.get("score_rank")),
        "genre": data.get("genre"),
        # SteamSpy returns [] instead of {} for games without tags
        "tags": tags if isinstance(tags, dict) else None,
    }


class SteamSpySyncService:
    """Fetch SteamSpy data for a link and store the outcome."""

    def __init__(self, steamspy: SteamSpyClient, clock: Clock = system_clock):
        self.steamspy = steamspy
        self.clock = clock

    async def sync_game_data(self, session: AsyncSession, link: GameExternalSource) -> bool:
        """Sync ``link`` (game loaded). Returns True when data was stored.

        Upstream failures mark the link failed and return False.
        Database failures roll back and raise PersistenceError.
        """
        link_id = link.id
        steam_app_id = link.external_uid
        game = link.game

        if not steam_app_id or game is None:
            await self._mark_failed(session, link, "no Steam app id or game")
            return False

        data = await self.steamspy.fetch_game_details(steam_app_id)

        if not data:
            await self._mark_failed(
                session, link, f"fetch for app {steam_app_id} failed ({self.steamspy.last_error or 'no data'})"
            )
            return False

        try:
            await upsert_steam_game_data(session, game.id, steam_app_id, steam_fields(data))
            link.mark_synced(self.clock.now())
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            raise PersistenceError(link_id, str(e)) from e

        logger.info(
            f"SteamSpy: synced game {game.id} (app {steam_app_id}, owners: {data.get('owners') or 'N/A'})"
        )
        return True

    async def _mark_failed(self, session: AsyncSession, link: GameExternalSource, reason: str):
        link_id = link.id
        link.mark_failed(self.clock.now())
        try:
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            raise PersistenceError(link_id, str(e)) from e
        logger.error(
            f"SteamSpy: link {link_id} failed: {reason} (retry {link.retry_count}, next at {link.next_retry_at})"
        )
