"""Catalog exceptions."""


class CatalogError(Exception):
    """Base exception for the catalog service."""


class UpstreamFetchError(CatalogError):
    """An external API returned an error status or an unusable payload."""

    def __init__(self, service: str, message: str, status_code: int | None = None):
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class IgdbAuthError(UpstreamFetchError):
    """Twitch OAuth token for IGDB could not be obtained."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__("igdb", message, status_code)


class PersistenceError(CatalogError):
    """Writing sync results to the database failed."""

    def __init__(self, link_id: int, message: str):
        self.link_id = link_id
        super().__init__(f"Failed to persist sync for link {link_id}: {message}")
