"""Model behaviour tests."""
from datetime import timedelta

import pytest

from gamecatalog.models import ExternalGameSource, GameExternalSource, SteamGameData, SyncStatus

from conftest import NOW


class TestGameExternalSource:
    def test_mark_synced_resets_retry_state(self):
        link = GameExternalSource(
            sync_status=SyncStatus.FAILED,
            retry_count=3,
            next_retry_at=NOW + timedelta(hours=1),
        )

        link.mark_synced(NOW)

        assert link.sync_status == SyncStatus.SYNCED
        assert link.last_synced_at == NOW
        assert link.last_attempted_at == NOW
        assert link.retry_count == 0
        assert link.next_retry_at is None

    @pytest.mark.parametrize("prior_retries, backoff_hours", [
        (0, 1),
        (1, 4),
        (2, 24),
        (3, 168),
        (10, 168),
    ])
    def test_mark_failed_backoff(self, prior_retries, backoff_hours):
        link = GameExternalSource(sync_status=SyncStatus.PENDING, retry_count=prior_retries)

        link.mark_failed(NOW)

        assert link.sync_status == SyncStatus.FAILED
        assert link.retry_count == prior_retries + 1
        assert link.last_attempted_at == NOW
        assert link.next_retry_at == NOW + timedelta(hours=backoff_hours)

    def test_mark_failed_keeps_last_synced_at(self):
        synced = NOW - timedelta(days=3)
        link = GameExternalSource(retry_count=0, last_synced_at=synced)

        link.mark_failed(NOW)

        assert link.last_synced_at == synced

    def test_ready_for_retry(self):
        link = GameExternalSource(sync_status=SyncStatus.FAILED, next_retry_at=NOW + timedelta(hours=1))
        assert not link.is_ready_for_retry(NOW)
        assert link.is_ready_for_retry(NOW + timedelta(hours=1))

        link.next_retry_at = None
        assert link.is_ready_for_retry(NOW)

        link.sync_status = SyncStatus.SYNCED
        assert not link.is_ready_for_retry(NOW)

    def test_full_url_prefers_explicit_url(self):
        link = GameExternalSource(external_uid="620", external_url="https://example.com/portal-2")
        link.external_game_source = ExternalGameSource(igdb_id=1, name="Steam")
        assert link.full_url == "https://example.com/portal-2"

    def test_full_url_from_store_prefix(self):
        link = GameExternalSource(external_uid="620")
        link.external_game_source = ExternalGameSource(igdb_id=1, name="Steam")
        assert link.full_url == "https://store.steampowered.com/app/620"

    def test_full_url_unknown_store(self):
        link = GameExternalSource(external_uid="abc")
        link.external_game_source = ExternalGameSource(igdb_id=36, name="PlayStation Store")
        assert link.full_url is None


class TestSteamGameData:
    @pytest.mark.parametrize("price, expected", [
        (None, None),
        (0, "Free"),
        (1999, "$19.99"),
        (123456, "$1,234.56"),
    ])
    def test_price_formatted(self, price, expected):
        assert SteamGameData(price=price).price_formatted == expected

    def test_owners_range(self):
        data = SteamGameData(owners="1,000,000 .. 2,000,000")
        assert data.owners_range == {"min": 1_000_000, "max": 2_000_000}

    @pytest.mark.parametrize("owners", [None, "", "lots", "1 .. 2 .. 3", "a .. b"])
    def test_owners_range_unparseable(self, owners):
        assert SteamGameData(owners=owners).owners_range is None

    def test_average_playtime_hours(self):
        assert SteamGameData(average_forever=125).average_playtime_hours == 2.1
        assert SteamGameData(average_forever=None).average_playtime_hours is None
