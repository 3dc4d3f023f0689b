"""External catalog definitions and per-game source links."""
from datetime import datetime, timedelta

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from gamecatalog.clock import utcnow
from gamecatalog.database import Base

STEAM_SOURCE_IGDB_ID = 1

STORE_URLS = {
    1: "https://store.steampowered.com/app/",
    5: "https://www.gog.com/game/",
    26: "https://store.epicgames.com/p/",
}


class SyncStatus:
    """Values of GameExternalSource.sync_status."""

    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"

    ALL = (PENDING, SYNCED, FAILED)


def retry_backoff(retry_count: int) -> timedelta:
    """Delay before the next attempt after the given number of failures."""
    if retry_count <= 1:
        return timedelta(hours=1)
    if retry_count == 2:
        return timedelta(hours=4)
    if retry_count == 3:
        return timedelta(hours=24)
    return timedelta(days=7)


class ExternalGameSource(Base):
    """An external catalog known to IGDB (Steam, GOG, Epic, ...)."""

    __tablename__ = "external_game_sources"

    id = Column(Integer, primary_key=True, autoincrement=True)
    igdb_id = Column(Integer, unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255))
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    links = relationship("GameExternalSource", back_populates="external_game_source")

    @property
    def store_url(self) -> str | None:
        return STORE_URLS.get(self.igdb_id)


class GameExternalSource(Base):
    """Link between one game and its identifier in one external catalog."""

    __tablename__ = "game_external_sources"
    __table_args__ = (
        UniqueConstraint("game_id", "external_game_source_id", name="uq_game_external_source"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    game_id = Column(Integer, ForeignKey("games.id", ondelete="CASCADE"), nullable=False)
    external_game_source_id = Column(
        Integer, ForeignKey("external_game_sources.id", ondelete="CASCADE"), nullable=False
    )
    external_uid = Column(String(255), nullable=False, index=True)
    external_url = Column(String(512))

    # Sync tracking
    sync_status = Column(String(20), nullable=False, default=SyncStatus.PENDING, index=True)
    retry_count = Column(Integer, nullable=False, default=0)
    last_attempted_at = Column(DateTime)
    next_retry_at = Column(DateTime, index=True)
    last_synced_at = Column(DateTime)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    game = relationship("Game", back_populates="external_sources")
    external_game_source = relationship("ExternalGameSource", back_populates="links")

    def mark_synced(self, now: datetime) -> None:
        self.sync_status = SyncStatus.SYNCED
        self.last_synced_at = now
        self.last_attempted_at = now
        self.retry_count = 0
        self.next_retry_at = None

    def mark_failed(self, now: datetime) -> None:
        retry_count = (self.retry_count or 0) + 1
        self.sync_status = SyncStatus.FAILED
        self.last_attempted_at = now
        self.retry_count = retry_count
        self.next_retry_at = now + retry_backoff(retry_count)

    def is_ready_for_retry(self, now: datetime) -> bool:
        return self.sync_status == SyncStatus.FAILED and (
            self.next_retry_at is None or self.next_retry_at <= now
        )

    @property
    def full_url(self) -> str | None:
        """Store page URL; requires external_game_source to be loaded."""
        if self.external_url:
            return self.external_url

        base_url = self.external_game_source.store_url if self.external_game_source else None
        if base_url and self.external_uid:
            return f"{base_url}{self.external_uid}"
        return None
