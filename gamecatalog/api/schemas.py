"""API response models."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from gamecatalog.models import Game, GameExternalSource
from gamecatalog.services.staleness import is_stale


class SteamGameDataResponse(BaseModel):
    """SteamSpy figures for a game."""
    game_id: int
    steam_app_id: str
    owners: Optional[str]
    owners_range: Optional[dict[str, int]]
    players_forever: Optional[str]
    players_2weeks: Optional[str]
    ccu: Optional[int]
    average_forever: Optional[int]
    average_playtime_hours: Optional[float]
    median_forever: Optional[int]
    price: Optional[int]
    price_formatted: Optional[str]
    score_rank: Optional[int]
    genre: Optional[str]
    tags: Optional[dict[str, int]]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class SourceLinkResponse(BaseModel):
    """A game's link to an external catalog, with sync state."""
    id: int
    game_id: int
    source_igdb_id: Optional[int]
    source_name: Optional[str]
    external_uid: str
    full_url: Optional[str]
    sync_status: str
    retry_count: int
    last_attempted_at: Optional[datetime]
    last_synced_at: Optional[datetime]
    next_retry_at: Optional[datetime]
    is_stale: bool

    @classmethod
    def from_link(
        cls, link: GameExternalSource, now: datetime, game: Optional[Game] = None
    ) -> "SourceLinkResponse":
        """Build from a link with external_game_source (and game, unless given) loaded."""
        source = link.external_game_source
        return cls(
            id=link.id,
            game_id=link.game_id,
            source_igdb_id=source.igdb_id if source else None,
            source_name=source.name if source else None,
            external_uid=link.external_uid,
            full_url=link.full_url,
            sync_status=link.sync_status,
            retry_count=link.retry_count or 0,
            last_attempted_at=link.last_attempted_at,
            last_synced_at=link.last_synced_at,
            next_retry_at=link.next_retry_at,
            is_stale=is_stale(game or link.game, link, now),
        )
