"""Sync status listing and admin triggers."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gamecatalog.api.auth import verify_api_key
from gamecatalog.api.deps import get_clock, get_dispatcher, get_igdb_client
from gamecatalog.api.schemas import SourceLinkResponse
from gamecatalog.clients import IgdbClient
from gamecatalog.clock import Clock
from gamecatalog.config import get_settings
from gamecatalog.database import get_session
from gamecatalog.exceptions import UpstreamFetchError
from gamecatalog.jobs import Dispatcher, dispatch_steamspy_sync
from gamecatalog.models import GameExternalSource, SyncStatus
from gamecatalog.services.games import refresh_stale_games
from gamecatalog.services.sources import sync_external_game_sources

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(tags=["sync"])


@router.get("/sync/links", response_model=list[SourceLinkResponse])
async def list_links(
    status: Optional[str] = Query(None, description="pending, synced or failed"),
    ready_for_retry: bool = Query(False, description="Only failed links whose backoff has elapsed"),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    _: str = Depends(verify_api_key),
):
    """List external source links by sync state."""
    if status is not None and status not in SyncStatus.ALL:
        raise HTTPException(status_code=422, detail=f"Unknown sync status: {status}")

    now = clock.now()
    query = (
        select(GameExternalSource)
        .options(
            selectinload(GameExternalSource.game),
            selectinload(GameExternalSource.external_game_source),
        )
        .order_by(GameExternalSource.id)
        .limit(limit)
    )

    if status:
        query = query.where(GameExternalSource.sync_status == status)

    if ready_for_retry:
        query = query.where(
            GameExternalSource.sync_status == SyncStatus.FAILED,
            or_(
                GameExternalSource.next_retry_at.is_(None),
                GameExternalSource.next_retry_at <= now,
            ),
        )

    result = await db.execute(query)
    return [SourceLinkResponse.from_link(link, now) for link in result.scalars()]


@router.post("/admin/sync/steamspy")
async def trigger_steamspy_sync(
    threshold: int = Query(0, ge=0, description="Minimum update_priority"),
    limit: int = Query(500, ge=1, description="Maximum number of links"),
    db: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    dispatcher: Dispatcher = Depends(get_dispatcher),
    _: str = Depends(verify_api_key),
):
    """Select stale Steam links and start a SteamSpy sync chain."""
    link_ids = await dispatch_steamspy_sync(db, dispatcher, clock, threshold=threshold, limit=limit)
    return {
        "status": "dispatched" if link_ids else "idle",
        "job": "steamspy_sync",
        "count": len(link_ids),
        "first_link_id": link_ids[0] if link_ids else None,
    }


@router.post("/admin/sync/sources")
async def trigger_sources_sync(
    db: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    igdb: IgdbClient = Depends(get_igdb_client),
    _: str = Depends(verify_api_key),
):
    """Refresh external game source definitions from IGDB."""
    try:
        counts = await sync_external_game_sources(db, igdb, clock)
    except UpstreamFetchError as e:
        logger.error(f"External source sync failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return {"status": "completed", "job": "igdb_external_sources", **counts}


@router.post("/admin/sync/games")
async def trigger_games_refresh(
    min_days: int = Query(settings.igdb_stale_min_days, ge=0, description="Days since last IGDB refresh"),
    batch_size: int = Query(settings.igdb_stale_batch_size, ge=1, le=500),
    db: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    igdb: IgdbClient = Depends(get_igdb_client),
    _: str = Depends(verify_api_key),
):
    """Refresh stale games and their external source links from IGDB."""
    try:
        counts = await refresh_stale_games(
            db,
            igdb,
            settings.active_external_source_ids,
            clock,
            min_days=min_days,
            batch_size=batch_size,
        )
    except UpstreamFetchError as e:
        logger.error(f"IGDB game refresh failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return {"status": "completed", "job": "igdb_stale_games", **counts}
