"""Background sync jobs."""
from gamecatalog.jobs.dispatcher import Dispatcher, SchedulerDispatcher
from gamecatalog.jobs.steamspy_chain import SteamSpySyncChain
from gamecatalog.jobs.batches import dispatch_steamspy_sync

__all__ = [
    "Dispatcher",
    "SchedulerDispatcher",
    "SteamSpySyncChain",
    "dispatch_steamspy_sync",
]
