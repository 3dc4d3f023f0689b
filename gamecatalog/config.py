"""Application configuration."""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database
    database_url: str

    # API Security
    api_secret_key: str

    # IGDB (Twitch OAuth client credentials)
    igdb_client_id: str | None = None
    igdb_client_secret: str | None = None
    igdb_rate_limit_delay_ms: int = 280
    igdb_active_external_sources: str = "1"  # Comma-separated IGDB source IDs (1=Steam)
    igdb_stale_min_days: int = 90
    igdb_stale_batch_size: int = 50

    # SteamSpy
    steamspy_rate_limit_delay_ms: int = 250
    steamspy_sync_threshold: int = 0
    steamspy_sync_limit: int = 500

    # Schedule Settings
    scheduler_enabled: bool = True
    steamspy_sync_interval_hours: int = 24
    sources_sync_interval_hours: int = 168
    priority_refresh_interval_hours: int = 24
    games_refresh_interval_hours: int = 6

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False

    @property
    def active_external_source_ids(self) -> list[int]:
        """Parse igdb_active_external_sources into list of IGDB source IDs."""
        if not self.igdb_active_external_sources:
            return []
        return [int(x.strip()) for x in self.igdb_active_external_sources.split(",") if x.strip()]

    @property
    def igdb_configured(self) -> bool:
        return bool(self.igdb_client_id and self.igdb_client_secret)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
