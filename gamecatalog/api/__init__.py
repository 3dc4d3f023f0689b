"""API routes."""
from gamecatalog.api.games import router as games_router
from gamecatalog.api.sync import router as sync_router

__all__ = [
    "games_router",
    "sync_router",
]
