"""Update priority scoring for catalogued games."""
import logging
import math
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gamecatalog.clock import Clock, system_clock
from gamecatalog.models import Game

logger = logging.getLogger(__name__)


def calculate_update_priority(game: Game, now: datetime) -> int:
    """Score 0-100, higher means refresh sooner."""
    score = 0.0

    # 1. View count (0-40 points), logarithmic
    view_count = game.view_count or 0
    if view_count > 0:
        score += min(math.log2(view_count + 1) * 5, 40)

    # 2. Release recency (0-30 points)
    if game.first_release_date is not None:
        days_since_release = abs((now - game.first_release_date).days)
        if days_since_release <= 30:
            score += 30
        elif days_since_release <= 90:
            score += 20
        elif days_since_release <= 180:
            score += 10

    # 3. IGDB sync age (0-20 points)
    if game.last_igdb_sync_at is not None:
        days_since_sync = (now - game.last_igdb_sync_at).days
        if days_since_sync > 90:
            score += 20
        elif days_since_sync > 60:
            score += 15
        elif days_since_sync > 30:
            score += 10
        elif days_since_sync > 14:
            score += 5
    else:
        score += 20

    # 4. Missing data (0-10 points)
    if not game.cover_image_id or not game.summary or not game.steam_data:
        score += 10

    return min(round(score), 100)


async def refresh_update_priorities(session: AsyncSession, clock: Clock = system_clock) -> int:
    """Recompute update_priority for every game. Returns number of games changed."""
    now = clock.now()
    result = await session.execute(select(Game))
    changed = 0

    for game in result.scalars():
        priority = calculate_update_priority(game, now)
        if priority != game.update_priority:
            game.update_priority = priority
            changed += 1

    await session.commit()
    logger.info(f"Refreshed update priorities ({changed} changed)")
    return changed
