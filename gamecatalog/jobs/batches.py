"""Batch entry points that seed sync job chains."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from gamecatalog.clock import Clock, system_clock
from gamecatalog.jobs.dispatcher import Dispatcher
from gamecatalog.models import STEAM_SOURCE_IGDB_ID
from gamecatalog.services.repository import stale_link_candidates
from gamecatalog.services.runs import complete_run, start_run
from gamecatalog.services.staleness import is_stale

logger = logging.getLogger(__name__)


async def dispatch_steamspy_sync(
    session: AsyncSession,
    dispatcher: Dispatcher,
    clock: Clock = system_clock,
    threshold: int = 0,
    limit: int = 500,
) -> list[int]:
    """Select stale Steam links and start a sync chain over them.

    Links are taken by descending update priority, skipping fresh links and
    links still waiting out a retry backoff, up to ``limit``. The chain is
    seeded with the two lowest selected ids so every step moves forward.
    Later steps walk the following links of the source and re-check each
    row, so only stale links that are due get fetched. Returns the
    selected link ids, ascending.
    """
    now = clock.now()
    run = await start_run(session, "steamspy_sync", clock)

    candidates = await stale_link_candidates(session, STEAM_SOURCE_IGDB_ID, threshold)
    selected = []
    for link in candidates:
        if len(selected) >= limit:
            break
        if link.next_retry_at is not None and link.next_retry_at > now:
            continue
        if is_stale(link.game, link, now):
            selected.append(link.id)

    selected.sort()
    await complete_run(session, run, len(selected), clock=clock)

    if not selected:
        logger.info(f"No games eligible for SteamSpy sync (threshold {threshold})")
        return []

    first_id = selected[0]
    second_id = selected[1] if len(selected) > 1 else None
    dispatcher.dispatch(first_id, second_id)

    logger.info(
        f"Dispatched SteamSpy sync chain for {len(selected)} links starting with link {first_id}"
    )
    return selected
