"""SteamSpy snapshot model."""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from gamecatalog.clock import utcnow
from gamecatalog.database import Base


class SteamGameData(Base):
    """Latest SteamSpy figures for a game. One row per game, updated in place."""

    __tablename__ = "steam_game_data"

    id = Column(Integer, primary_key=True, autoincrement=True)
    game_id = Column(Integer, ForeignKey("games.id", ondelete="CASCADE"), unique=True, nullable=False)
    steam_app_id = Column(String(32), nullable=False, index=True)

    # Ownership & Players
    owners = Column(String(64))  # e.g. "1,000,000 .. 2,000,000"
    players_forever = Column(String(64))
    players_2weeks = Column(String(64))
    ccu = Column(Integer)

    # Playtime (minutes)
    average_forever = Column(Integer)
    average_2weeks = Column(Integer)
    median_forever = Column(Integer)
    median_2weeks = Column(Integer)

    # Pricing (cents)
    price = Column(Integer)

    score_rank = Column(Integer)
    genre = Column(String(255))
    tags = Column(JSON)  # tag name -> votes

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    game = relationship("Game", back_populates="steam_game_data")

    @property
    def price_formatted(self) -> str | None:
        if self.price is None:
            return None
        if self.price == 0:
            return "Free"
        return f"${self.price / 100:,.2f}"

    @property
    def owners_range(self) -> dict[str, int] | None:
        """Parse owners string like '100,000 .. 200,000' to {'min', 'max'}."""
        if not self.owners:
            return None
        parts = [part.strip() for part in self.owners.split("..")]
        if len(parts) != 2:
            return None
        try:
            return {
                "min": int(parts[0].replace(",", "")),
                "max": int(parts[1].replace(",", "")),
            }
        except ValueError:
            return None

    @property
    def average_playtime_hours(self) -> float | None:
        if self.average_forever is None:
            return None
        return round(self.average_forever / 60, 1)
