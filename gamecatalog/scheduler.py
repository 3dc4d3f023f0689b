"""Background task scheduler for metadata synchronization."""
import logging

from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from gamecatalog.clients import IgdbClient, SteamSpyClient
from gamecatalog.config import get_settings
from gamecatalog.database import async_session_maker
from gamecatalog.jobs import SchedulerDispatcher, SteamSpySyncChain, dispatch_steamspy_sync
from gamecatalog.services.games import refresh_stale_games
from gamecatalog.services.priority import refresh_update_priorities
from gamecatalog.services.sources import sync_external_game_sources

logger = logging.getLogger(__name__)
settings = get_settings()

scheduler = AsyncIOScheduler(
    executors={
        "default": AsyncIOExecutor(),
        "low": AsyncIOExecutor(),  # SteamSpy chain steps
    },
)


async def run_steamspy_sync_step(link_id: int, next_link_id: int | None = None):
    """Job: sync one Steam source link and dispatch the next one."""
    async with SteamSpyClient() as steamspy:
        chain = SteamSpySyncChain(async_session_maker, steamspy, dispatcher)
        await chain.run(link_id, next_link_id)


dispatcher = SchedulerDispatcher(scheduler, run_steamspy_sync_step)


async def start_steamspy_sync(threshold: int | None = None, limit: int | None = None) -> list[int]:
    """Scheduled job: select stale Steam links and start a sync chain."""
    logger.info("Starting scheduled SteamSpy sync")
    async with async_session_maker() as session:
        return await dispatch_steamspy_sync(
            session,
            dispatcher,
            threshold=settings.steamspy_sync_threshold if threshold is None else threshold,
            limit=settings.steamspy_sync_limit if limit is None else limit,
        )


async def sync_sources() -> dict[str, int]:
    """Scheduled job: refresh external game source definitions from IGDB."""
    logger.info("Starting scheduled external source sync")
    async with async_session_maker() as session:
        async with IgdbClient() as igdb:
            return await sync_external_game_sources(session, igdb)


async def refresh_games() -> dict[str, int]:
    """Scheduled job: refresh stale games and their external source links from IGDB."""
    logger.info("Starting scheduled IGDB game refresh")
    async with async_session_maker() as session:
        async with IgdbClient() as igdb:
            return await refresh_stale_games(
                session,
                igdb,
                settings.active_external_source_ids,
                min_days=settings.igdb_stale_min_days,
                batch_size=settings.igdb_stale_batch_size,
            )


async def refresh_priorities() -> int:
    """Scheduled job: recompute update priorities."""
    logger.info("Starting scheduled priority refresh")
    async with async_session_maker() as session:
        return await refresh_update_priorities(session)


def start_scheduler():
    """Start the background scheduler with all jobs."""
    # Overlapping runs of the same job are never allowed
    job_defaults = {"max_instances": 1, "coalesce": True, "replace_existing": True}

    scheduler.add_job(
        refresh_priorities,
        trigger=IntervalTrigger(hours=settings.priority_refresh_interval_hours),
        id="priority_refresh",
        name="Refresh Update Priorities",
        **job_defaults,
    )

    scheduler.add_job(
        start_steamspy_sync,
        trigger=IntervalTrigger(hours=settings.steamspy_sync_interval_hours),
        id="steamspy_sync",
        name="SteamSpy Sync",
        **job_defaults,
    )

    # IGDB jobs - only if IGDB credentials configured
    if settings.igdb_configured:
        scheduler.add_job(
            sync_sources,
            trigger=IntervalTrigger(hours=settings.sources_sync_interval_hours),
            id="igdb_sources",
            name="Sync IGDB External Sources",
            **job_defaults,
        )

        scheduler.add_job(
            refresh_games,
            trigger=IntervalTrigger(hours=settings.games_refresh_interval_hours),
            id="igdb_games",
            name="Refresh Stale Games From IGDB",
            **job_defaults,
        )

    scheduler.start()
    logger.info("Scheduler started with jobs: priority_refresh, steamspy_sync" +
                (", igdb_sources, igdb_games" if settings.igdb_configured else ""))


def stop_scheduler():
    """Stop the scheduler."""
    if scheduler.running:
        scheduler.shutdown()
    logger.info("Scheduler stopped")
