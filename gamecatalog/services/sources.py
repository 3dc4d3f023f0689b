"""Sync external catalog definitions and game links from IGDB."""
import logging
import re
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gamecatalog.clients import IgdbClient
from gamecatalog.clock import Clock, system_clock
from gamecatalog.models import ExternalGameSource, Game, GameExternalSource
from gamecatalog.services.runs import complete_run, start_run

logger = logging.getLogger(__name__)


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower())
    return slug.strip("-")


async def sync_external_game_sources(
    session: AsyncSession,
    igdb: IgdbClient,
    clock: Clock = system_clock,
) -> dict[str, int]:
    """Upsert ExternalGameSource rows from IGDB's external_game_sources endpoint."""
    run = await start_run(session, "igdb_external_sources", clock)
    created = 0
    updated = 0

    try:
        sources = await igdb.fetch_external_game_sources()
        if not sources:
            logger.warning("No external game sources returned from IGDB")

        existing_result = await session.execute(select(ExternalGameSource))
        existing = {source.igdb_id: source for source in existing_result.scalars()}

        for source in sources:
            igdb_id = source.get("id")
            name = source.get("name")
            if not igdb_id or not name:
                continue

            record = existing.get(igdb_id)
            if record:
                record.name = name
                record.slug = slugify(name)
                updated += 1
            else:
                record = ExternalGameSource(igdb_id=igdb_id, name=name, slug=slugify(name))
                session.add(record)
                existing[igdb_id] = record
                created += 1

        await session.flush()
    except Exception as e:
        await session.rollback()
        await session.refresh(run)
        await complete_run(session, run, 0, str(e), clock)
        raise

    await complete_run(session, run, created + updated, clock=clock)
    logger.info(f"External source sync complete: {created} created, {updated} updated")
    return {"created": created, "updated": updated}


async def sync_game_external_sources(
    session: AsyncSession,
    game: Game,
    igdb_game: dict[str, Any],
    active_source_ids: list[int],
) -> list[GameExternalSource]:
    """Create or update links for ``game`` from an IGDB payload.

    Only sources listed in ``active_source_ids`` that already exist locally
    are linked. New links start as pending.
    """
    links = []
    for source_data in IgdbClient.extract_external_sources(igdb_game):
        if source_data.source_id not in active_source_ids:
            continue

        result = await session.execute(
            select(ExternalGameSource).where(ExternalGameSource.igdb_id == source_data.source_id)
        )
        source = result.scalar_one_or_none()
        if source is None:
            continue

        result = await session.execute(
            select(GameExternalSource).where(
                GameExternalSource.game_id == game.id,
                GameExternalSource.external_game_source_id == source.id,
            )
        )
        link = result.scalar_one_or_none()
        if link is None:
            link = GameExternalSource(game_id=game.id, external_game_source_id=source.id)
            session.add(link)

        link.external_uid = source_data.external_uid
        link.external_url = source_data.external_url
        links.append(link)

    await session.flush()
    return links
