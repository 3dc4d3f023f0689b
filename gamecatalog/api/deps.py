"""Shared route dependencies."""
from gamecatalog.clients import IgdbClient
from gamecatalog.clock import Clock, system_clock
from gamecatalog.jobs import Dispatcher


def get_clock() -> Clock:
    return system_clock


def get_dispatcher() -> Dispatcher:
    from gamecatalog.scheduler import dispatcher
    return dispatcher


async def get_igdb_client():
    async with IgdbClient() as igdb:
        yield igdb
