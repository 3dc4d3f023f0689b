"""Self-dispatching SteamSpy sync job.

Each step syncs one Steam source link and then dispatches the step for
the next link, so a whole batch is walked one row at a time on the job
runner. A failing link is recorded on its row and never stops the walk.
Links that are fresh, or still waiting out a retry backoff, are passed
over without a fetch.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gamecatalog.clients import SteamSpyClient
from gamecatalog.clock import Clock, system_clock
from gamecatalog.jobs.dispatcher import Dispatcher
from gamecatalog.models import STEAM_SOURCE_IGDB_ID
from gamecatalog.services.repository import find_link, find_next_link_id, link_exists
from gamecatalog.services.staleness import is_stale
from gamecatalog.services.steamspy_sync import SteamSpySyncService

logger = logging.getLogger(__name__)


class SteamSpySyncChain:
    """Process link ``link_id``, then hand ``next_link_id`` to the dispatcher."""

    tries = 1

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        steamspy: SteamSpyClient,
        dispatcher: Dispatcher,
        clock: Clock = system_clock,
        source_igdb_id: int = STEAM_SOURCE_IGDB_ID,
    ):
        self.session_maker = session_maker
        self.dispatcher = dispatcher
        self.clock = clock
        self.source_igdb_id = source_igdb_id
        self.sync_service = SteamSpySyncService(steamspy, clock)

    async def run(self, link_id: int, next_link_id: int | None = None):
        """Execute one chain step. The next step is dispatched on every outcome."""
        try:
            await self.handle(link_id)
        except Exception as e:
            await self.failed(link_id, e)

        await self.dispatch_next(link_id, next_link_id)

    async def handle(self, link_id: int):
        async with self.session_maker() as session:
            link = await find_link(session, link_id)

            if link is None:
                logger.warning(f"SteamSpy sync: source link {link_id} not found")
                return

            now = self.clock.now()
            if link.next_retry_at is not None and link.next_retry_at > now:
                logger.info(f"SteamSpy sync: link {link_id} waits for retry until {link.next_retry_at}, skipped")
                return

            if not is_stale(link.game, link, now):
                logger.info(f"SteamSpy sync: link {link_id} is fresh, skipped")
                return

            await self.sync_service.sync_game_data(session, link)

    async def failed(self, link_id: int, error: Exception):
        """Record an unhandled step error on the link."""
        logger.error(f"SteamSpy sync job failed for link {link_id}: {error}")

        try:
            async with self.session_maker() as session:
                link = await find_link(session, link_id)
                if link is not None:
                    link.mark_failed(self.clock.now())
                    await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Could not mark link {link_id} as failed: {e}")

    async def dispatch_next(self, link_id: int, next_link_id: int | None):
        if not next_link_id:
            logger.info(f"SteamSpy sync chain finished at link {link_id}")
            return

        # Walks only move forward; anything else would revisit links
        if next_link_id <= link_id:
            logger.warning(
                f"SteamSpy sync chain stopped: next link {next_link_id} does not follow {link_id}"
            )
            return

        try:
            async with self.session_maker() as session:
                if not await link_exists(session, next_link_id):
                    logger.info(f"SteamSpy sync chain stopped: link {next_link_id} no longer exists")
                    return

                following_id = await find_next_link_id(session, self.source_igdb_id, next_link_id)
        except SQLAlchemyError as e:
            logger.error(
                f"SteamSpy sync chain stopped after link {link_id}: lookup of next link {next_link_id} failed ({e}); "
                f"remaining links are left for the next batch"
            )
            return

        self.dispatcher.dispatch(next_link_id, following_id)
