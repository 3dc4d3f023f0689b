"""When a game's external source data needs re-fetching."""
from datetime import datetime, timedelta

from gamecatalog.models import Game, GameExternalSource

HIGH_PRIORITY_THRESHOLD = 60
HIGH_PRIORITY_STALE_AFTER = timedelta(days=7)
LOW_PRIORITY_STALE_AFTER = timedelta(days=30)
RECENTLY_RELEASED_WINDOW = timedelta(days=14)
RECENTLY_RELEASED_STALE_AFTER = timedelta(days=3)


def stale_after(game: Game, now: datetime) -> timedelta:
    """Maximum age of synced data before it is stale, for a game at ``now``."""
    release_date = game.first_release_date
    if release_date is not None and now - RECENTLY_RELEASED_WINDOW <= release_date <= now:
        return RECENTLY_RELEASED_STALE_AFTER

    if (game.update_priority or 0) >= HIGH_PRIORITY_THRESHOLD:
        return HIGH_PRIORITY_STALE_AFTER
    return LOW_PRIORITY_STALE_AFTER


def is_stale(game: Game, link: GameExternalSource, now: datetime) -> bool:
    """Decide whether ``link`` should be synced again.

    Rules, first match wins:

    1. Never synced.
    2. Synced before the release date, and the game is out now.
    3. Released within the last 14 days: older than 3 days.
    4. Otherwise older than 7 days for high priority games
       (``update_priority >= 60``), 30 days for everything else.

    Data synced exactly at the threshold is still fresh.
    """
    last_synced_at = link.last_synced_at
    if last_synced_at is None:
        return True

    release_date = game.first_release_date
    if release_date is not None and last_synced_at < release_date <= now:
        return True

    return last_synced_at < now - stale_after(game, now)
