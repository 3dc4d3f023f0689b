"""Refresh catalogued games from IGDB."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from gamecatalog.clients import IgdbClient
from gamecatalog.clock import Clock, system_clock
from gamecatalog.models import Game
from gamecatalog.services.runs import complete_run, start_run
from gamecatalog.services.sources import sync_game_external_sources

logger = logging.getLogger(__name__)


def apply_igdb_game(game: Game, igdb_game: dict[str, Any], now: datetime):
    """Copy IGDB fields onto ``game``, keeping current values for missing ones."""
    game.name = igdb_game.get("name") or game.name
    game.slug = igdb_game.get("slug") or game.slug
    game.summary = igdb_game.get("summary") or game.summary

    release_timestamp = igdb_game.get("first_release_date")
    if release_timestamp is not None:
        game.first_release_date = datetime.fromtimestamp(release_timestamp, timezone.utc).replace(tzinfo=None)

    cover = igdb_game.get("cover")
    if isinstance(cover, dict) and cover.get("image_id"):
        game.cover_image_id = cover["image_id"]

    game.last_igdb_sync_at = now


async def stale_games(
    session: AsyncSession,
    now: datetime,
    min_days: int,
    limit: int,
) -> list[Game]:
    """Games never refreshed from IGDB or not refreshed for ``min_days``."""
    result = await session.execute(
        select(Game)
        .where(or_(
            Game.last_igdb_sync_at.is_(None),
            Game.last_igdb_sync_at <= now - timedelta(days=min_days),
        ))
        .order_by(Game.update_priority.desc(), Game.view_count.desc(), Game.id)
        .limit(limit)
    )
    return list(result.scalars())


async def refresh_stale_games(
    session: AsyncSession,
    igdb: IgdbClient,
    active_source_ids: list[int],
    clock: Clock = system_clock,
    min_days: int = 90,
    batch_size: int = 50,
) -> dict[str, int]:
    """Refresh the most important stale games and their external source links.

    Fetches the whole batch with one IGDB query. Games IGDB no longer
    returns are counted as missing and left untouched.
    """
    now = clock.now()
    run = await start_run(session, "igdb_stale_games", clock)
    updated = 0
    links = 0

    try:
        games = await stale_games(session, now, min_days, batch_size)
        payloads = await igdb.fetch_games([game.igdb_id for game in games])
        by_igdb_id = {payload.get("id"): payload for payload in payloads}

        for game in games:
            igdb_game = by_igdb_id.get(game.igdb_id)
            if igdb_game is None:
                logger.warning(f"IGDB returned no data for game {game.id} (igdb {game.igdb_id})")
                continue

            apply_igdb_game(game, igdb_game, now)
            links += len(await sync_game_external_sources(session, game, igdb_game, active_source_ids))
            updated += 1

        await session.commit()
    except Exception as e:
        await session.rollback()
        await session.refresh(run)
        await complete_run(session, run, 0, str(e), clock)
        raise

    missing = len(games) - updated
    await complete_run(session, run, updated, clock=clock)
    logger.info(f"IGDB game refresh complete: {updated} updated, {missing} missing, {links} links")
    return {"updated": updated, "missing": missing, "links": links}
