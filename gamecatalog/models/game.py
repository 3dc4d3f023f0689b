"""Game catalog model."""
from sqlalchemy import Column, String, Integer, DateTime, Text, JSON
from sqlalchemy.orm import relationship

from gamecatalog.clock import utcnow
from gamecatalog.database import Base


class Game(Base):
    """A catalogued game, keyed by its IGDB id."""

    __tablename__ = "games"

    id = Column(Integer, primary_key=True, autoincrement=True)
    igdb_id = Column(Integer, unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), index=True)
    summary = Column(Text)
    first_release_date = Column(DateTime)

    # Images
    cover_image_id = Column(String(255))
    hero_image_id = Column(String(255))
    logo_image_id = Column(String(255))

    # Update tracking
    update_priority = Column(Integer, nullable=False, default=0, index=True)
    view_count = Column(Integer, nullable=False, default=0)
    last_igdb_sync_at = Column(DateTime)

    # Legacy IGDB "steam" blob, superseded by SteamGameData
    steam_data = Column(JSON)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    external_sources = relationship(
        "GameExternalSource", back_populates="game", cascade="all, delete-orphan"
    )
    steam_game_data = relationship(
        "SteamGameData", back_populates="game", uselist=False, cascade="all, delete-orphan"
    )
