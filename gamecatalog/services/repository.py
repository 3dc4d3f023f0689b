"""Queries and writes for source links and Steam data."""
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gamecatalog.models import ExternalGameSource, Game, GameExternalSource, SteamGameData

STEAM_DATA_FIELDS = (
    "owners",
    "players_forever",
    "players_2weeks",
    "average_forever",
    "average_2weeks",
    "median_forever",
    "median_2weeks",
    "ccu",
    "price",
    "score_rank",
    "genre",
    "tags",
)


def _for_source(stmt, source_igdb_id: int):
    return stmt.join(GameExternalSource.external_game_source).where(
        ExternalGameSource.igdb_id == source_igdb_id
    )


async def find_link(session: AsyncSession, link_id: int) -> GameExternalSource | None:
    """Load a link with its game and source definition."""
    result = await session.execute(
        select(GameExternalSource)
        .options(
            selectinload(GameExternalSource.game),
            selectinload(GameExternalSource.external_game_source),
        )
        .where(GameExternalSource.id == link_id)
    )
    return result.scalar_one_or_none()


async def link_exists(session: AsyncSession, link_id: int) -> bool:
    result = await session.execute(
        select(GameExternalSource.id).where(GameExternalSource.id == link_id)
    )
    return result.scalar_one_or_none() is not None


async def find_next_link_id(session: AsyncSession, source_igdb_id: int, after_id: int) -> int | None:
    """Smallest link id above ``after_id`` within one external source."""
    stmt = _for_source(select(GameExternalSource.id), source_igdb_id)
    result = await session.execute(
        stmt.where(GameExternalSource.id > after_id)
        .order_by(GameExternalSource.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def stale_link_candidates(
    session: AsyncSession,
    source_igdb_id: int,
    min_priority: int = 0,
) -> list[GameExternalSource]:
    """Links of one source whose game meets the priority threshold, most important first."""
    stmt = _for_source(select(GameExternalSource), source_igdb_id)
    result = await session.execute(
        stmt.join(GameExternalSource.game)
        .where(Game.update_priority >= min_priority)
        .options(selectinload(GameExternalSource.game))
        .order_by(Game.update_priority.desc(), GameExternalSource.id)
    )
    return list(result.scalars())


async def upsert_steam_game_data(
    session: AsyncSession,
    game_id: int,
    steam_app_id: str,
    fields: dict[str, Any],
) -> SteamGameData:
    """Create or update the single SteamGameData row of a game."""
    result = await session.execute(
        select(SteamGameData).where(SteamGameData.game_id == game_id)
    )
    steam_data = result.scalar_one_or_none()

    if steam_data is None:
        steam_data = SteamGameData(game_id=game_id)
        session.add(steam_data)

    steam_data.steam_app_id = steam_app_id
    for field in STEAM_DATA_FIELDS:
        setattr(steam_data, field, fields.get(field))

    await session.flush()
    return steam_data
