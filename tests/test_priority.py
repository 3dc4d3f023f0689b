"""Update priority scoring tests."""
from datetime import timedelta

from sqlalchemy import select

from gamecatalog.models import Game
from gamecatalog.services.priority import calculate_update_priority, refresh_update_priorities

from conftest import NOW


def complete_game(**kwargs):
    kwargs.setdefault("igdb_id", 1)
    kwargs.setdefault("name", "Test Game")
    kwargs.setdefault("cover_image_id", "co1abc")
    kwargs.setdefault("summary", "A game.")
    kwargs.setdefault("steam_data", {"appid": 1})
    kwargs.setdefault("last_igdb_sync_at", NOW - timedelta(days=1))
    return Game(**kwargs)


def test_fresh_complete_unviewed_game_scores_zero():
    assert calculate_update_priority(complete_game(), NOW) == 0


def test_never_synced_and_missing_data():
    game = Game(igdb_id=1, name="Bare", last_igdb_sync_at=None)
    assert calculate_update_priority(game, NOW) == 30


def test_view_count_is_logarithmic_and_capped():
    # log2(7 + 1) * 5 = 15
    assert calculate_update_priority(complete_game(view_count=7), NOW) == 15
    assert calculate_update_priority(complete_game(view_count=10_000_000), NOW) == 40


def test_release_recency_tiers():
    assert calculate_update_priority(complete_game(first_release_date=NOW - timedelta(days=10)), NOW) == 30
    assert calculate_update_priority(complete_game(first_release_date=NOW - timedelta(days=60)), NOW) == 20
    assert calculate_update_priority(complete_game(first_release_date=NOW - timedelta(days=150)), NOW) == 10
    assert calculate_update_priority(complete_game(first_release_date=NOW - timedelta(days=400)), NOW) == 0
    # Upcoming games count by distance too
    assert calculate_update_priority(complete_game(first_release_date=NOW + timedelta(days=10)), NOW) == 30


def test_sync_age_tiers():
    assert calculate_update_priority(complete_game(last_igdb_sync_at=NOW - timedelta(days=100)), NOW) == 20
    assert calculate_update_priority(complete_game(last_igdb_sync_at=NOW - timedelta(days=70)), NOW) == 15
    assert calculate_update_priority(complete_game(last_igdb_sync_at=NOW - timedelta(days=40)), NOW) == 10
    assert calculate_update_priority(complete_game(last_igdb_sync_at=NOW - timedelta(days=20)), NOW) == 5


def test_score_is_capped_at_100():
    game = Game(
        igdb_id=1,
        name="Hot",
        view_count=10_000_000,
        first_release_date=NOW - timedelta(days=3),
    )
    assert calculate_update_priority(game, NOW) == 100


async def test_refresh_update_priorities(session, make_game, clock):
    await make_game(update_priority=0)  # never synced, missing data -> 30
    await make_game(
        update_priority=0,
        cover_image_id="co1",
        summary="s",
        steam_data={"a": 1},
        last_igdb_sync_at=NOW - timedelta(days=1),
    )

    changed = await refresh_update_priorities(session, clock)

    assert changed == 1
    result = await session.execute(select(Game.update_priority).order_by(Game.id))
    assert list(result.scalars()) == [30, 0]
