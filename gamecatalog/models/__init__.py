"""SQLAlchemy models."""
from gamecatalog.models.game import Game
from gamecatalog.models.sources import (
    ExternalGameSource,
    GameExternalSource,
    SyncStatus,
    STEAM_SOURCE_IGDB_ID,
)
from gamecatalog.models.steam import SteamGameData
from gamecatalog.models.system import SyncRun

__all__ = [
    "Game",
    "ExternalGameSource",
    "GameExternalSource",
    "SyncStatus",
    "STEAM_SOURCE_IGDB_ID",
    "SteamGameData",
    "SyncRun",
]
