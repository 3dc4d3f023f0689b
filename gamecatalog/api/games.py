"""Per-game external data endpoints."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gamecatalog.api.auth import verify_api_key
from gamecatalog.api.deps import get_clock
from gamecatalog.api.schemas import SourceLinkResponse, SteamGameDataResponse
from gamecatalog.clock import Clock
from gamecatalog.database import get_session
from gamecatalog.models import Game, GameExternalSource, SteamGameData

router = APIRouter(prefix="/games", tags=["games"])


@router.get("/{game_id}/steam", response_model=SteamGameDataResponse)
async def get_steam_data(
    game_id: int,
    db: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
):
    """Latest SteamSpy figures for a game."""
    result = await db.execute(
        select(SteamGameData).where(SteamGameData.game_id == game_id)
    )
    steam_data = result.scalar_one_or_none()

    if steam_data is None:
        raise HTTPException(status_code=404, detail=f"No Steam data for game {game_id}")

    return SteamGameDataResponse.model_validate(steam_data)


@router.get("/{game_id}/sources", response_model=list[SourceLinkResponse])
async def get_game_sources(
    game_id: int,
    db: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    _: str = Depends(verify_api_key),
):
    """External catalog links of a game with their sync state and staleness."""
    result = await db.execute(
        select(Game)
        .options(
            selectinload(Game.external_sources).selectinload(GameExternalSource.external_game_source)
        )
        .where(Game.id == game_id)
    )
    game = result.scalar_one_or_none()

    if game is None:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")

    now = clock.now()
    links = sorted(game.external_sources, key=lambda link: link.id)
    return [SourceLinkResponse.from_link(link, now, game) for link in links]
