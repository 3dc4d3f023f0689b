"""Staleness policy tests."""
from datetime import timedelta

import pytest

from gamecatalog.models import Game, GameExternalSource
from gamecatalog.services.staleness import is_stale, stale_after

from conftest import NOW


def game(priority=0, released_days_ago=None):
    release = NOW - timedelta(days=released_days_ago) if released_days_ago is not None else None
    return Game(igdb_id=1, name="Test Game", update_priority=priority, first_release_date=release)


def link(synced_ago=None):
    return GameExternalSource(
        external_uid="123456",
        last_synced_at=NOW - synced_ago if synced_ago is not None else None,
    )


class TestNeverSynced:
    """Links without a sync are always stale."""

    @pytest.mark.parametrize("priority", [0, 20, 60, 100])
    @pytest.mark.parametrize("released_days_ago", [None, -30, 2, 90])
    def test_never_synced_is_stale(self, priority, released_days_ago):
        assert is_stale(game(priority, released_days_ago), link(None), NOW)


class TestSyncedBeforeRelease:
    def test_synced_before_release_is_stale(self):
        # Released 2 days ago, last synced 5 days ago
        assert is_stale(game(60, 2), link(timedelta(days=5)), NOW)

    def test_pre_release_sync_of_old_release_is_stale(self):
        # Would be fresh under the 30 day threshold, but predates the release
        assert is_stale(game(20, 20), link(timedelta(days=21)), NOW)

    def test_unreleased_game_uses_priority_threshold(self):
        # Release still ahead: every sync predates it, so it must not force a refresh
        assert not is_stale(game(20, -10), link(timedelta(days=5)), NOW)
        assert is_stale(game(20, -10), link(timedelta(days=31)), NOW)


class TestRecentlyReleased:
    def test_stale_after_three_days(self):
        assert is_stale(game(20, 7), link(timedelta(days=4)), NOW)

    def test_fresh_within_three_days(self):
        assert not is_stale(game(20, 7), link(timedelta(days=2)), NOW)

    def test_applies_regardless_of_priority(self):
        assert is_stale(game(90, 7), link(timedelta(days=4)), NOW)

    def test_window_edge_is_inclusive(self):
        assert stale_after(game(20, 14), NOW) == timedelta(days=3)
        assert stale_after(game(20, 15), NOW) == timedelta(days=30)

    def test_exactly_three_days_is_not_stale(self):
        assert not is_stale(game(20, 7), link(timedelta(days=3)), NOW)


class TestPriorityThresholds:
    def test_high_priority_stale_after_seven_days(self):
        assert is_stale(game(60, 90), link(timedelta(days=8)), NOW)

    def test_high_priority_fresh_within_seven_days(self):
        assert not is_stale(game(60, 90), link(timedelta(days=5)), NOW)

    def test_low_priority_stale_after_thirty_days(self):
        assert is_stale(game(20, 90), link(timedelta(days=31)), NOW)

    def test_low_priority_fresh_within_thirty_days(self):
        assert not is_stale(game(20, 90), link(timedelta(days=15)), NOW)

    def test_priority_59_is_low(self):
        assert not is_stale(game(59, 90), link(timedelta(days=8)), NOW)

    def test_unknown_release_date_uses_priority(self):
        assert is_stale(game(60, None), link(timedelta(days=8)), NOW)
        assert not is_stale(game(0, None), link(timedelta(days=8)), NOW)

    def test_missing_priority_counts_as_zero(self):
        g = game(0, 90)
        g.update_priority = None
        assert not is_stale(g, link(timedelta(days=8)), NOW)

    def test_threshold_is_strictly_older_than(self):
        assert not is_stale(game(60, 90), link(timedelta(days=7)), NOW)
        assert is_stale(game(60, 90), link(timedelta(days=7, seconds=1)), NOW)
