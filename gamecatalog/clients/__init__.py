"""HTTP clients for external game metadata APIs."""
from gamecatalog.clients.steamspy import SteamSpyClient
from gamecatalog.clients.igdb import IgdbClient, ExternalSourceData

__all__ = [
    "SteamSpyClient",
    "IgdbClient",
    "ExternalSourceData",
]
