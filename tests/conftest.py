"""Pytest fixtures shared across the test suite."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("API_SECRET_KEY", "test-secret")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("STEAMSPY_RATE_LIMIT_DELAY_MS", "0")
os.environ.setdefault("IGDB_RATE_LIMIT_DELAY_MS", "0")

from datetime import datetime, timedelta

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from gamecatalog.clients import SteamSpyClient
from gamecatalog.database import Base
from gamecatalog.models import ExternalGameSource, Game, GameExternalSource, SyncStatus

NOW = datetime(2026, 3, 1, 12, 0, 0)


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


class RecordingDispatcher:
    """Collects dispatched chain steps instead of running them."""

    def __init__(self):
        self.dispatched: list[tuple[int, int | None]] = []

    def dispatch(self, link_id: int, next_link_id: int | None) -> None:
        self.dispatched.append((link_id, next_link_id))


def steamspy_client(handler) -> SteamSpyClient:
    """SteamSpy client answering every request with ``handler``."""
    transport = httpx.MockTransport(handler)
    return SteamSpyClient(httpx.AsyncClient(transport=transport), rate_limit_delay=0)


def steamspy_payload(**overrides):
    payload = {
        "appid": 123456,
        "name": "Test Game",
        "owners": "1,000,000 .. 2,000,000",
        "players_forever": "500,000",
        "average_forever": 120,
        "median_forever": 60,
        "ccu": 5000,
        "price": "1999",
        "score_rank": "",
        "genre": "Action, Indie",
        "tags": {"Action": 1000, "Adventure": 500},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def reload(session_maker):
    """Read a row back through a fresh session."""

    async def _reload(model, pk):
        async with session_maker() as fresh:
            return await fresh.get(model, pk)

    return _reload


@pytest_asyncio.fixture
async def steam_source(session):
    source = ExternalGameSource(igdb_id=1, name="Steam", slug="steam")
    session.add(source)
    await session.commit()
    return source


@pytest.fixture
def make_game(session):
    counter = {"igdb_id": 1000}

    async def _make_game(**kwargs):
        counter["igdb_id"] += 1
        kwargs.setdefault("igdb_id", counter["igdb_id"])
        kwargs.setdefault("name", f"Game {kwargs['igdb_id']}")
        kwargs.setdefault("update_priority", 0)
        game = Game(**kwargs)
        session.add(game)
        await session.commit()
        return game

    return _make_game


@pytest.fixture
def make_link(session):
    async def _make_link(game, source, **kwargs):
        kwargs.setdefault("external_uid", str(100000 + game.id))
        kwargs.setdefault("sync_status", SyncStatus.PENDING)
        kwargs.setdefault("retry_count", 0)
        link = GameExternalSource(
            game_id=game.id,
            external_game_source_id=source.id,
            **kwargs,
        )
        session.add(link)
        await session.commit()
        return link

    return _make_link
