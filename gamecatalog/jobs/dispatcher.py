"""Enqueue chain steps on the job runner."""
import logging
from typing import Awaitable, Callable, Protocol

from apscheduler.schedulers.base import BaseScheduler

logger = logging.getLogger(__name__)


class Dispatcher(Protocol):
    def dispatch(self, link_id: int, next_link_id: int | None) -> None:
        ...


class SchedulerDispatcher:
    """Run each chain step as a one-shot APScheduler job.

    Jobs are keyed by link id, so dispatching a link that is already
    waiting replaces the pending job instead of queueing it twice.
    """

    queue = "low"

    def __init__(self, scheduler: BaseScheduler, step: Callable[[int, int | None], Awaitable[None]]):
        self.scheduler = scheduler
        self.step = step

    def dispatch(self, link_id: int, next_link_id: int | None) -> None:
        self.scheduler.add_job(
            self.step,
            args=[link_id, next_link_id],
            id=f"steamspy-sync-{link_id}",
            name=f"SteamSpy sync link {link_id}",
            executor=self.queue,
            replace_existing=True,
            misfire_grace_time=None,
        )
        logger.debug(f"Dispatched SteamSpy sync for link {link_id} (next: {next_link_id})")
