"""Batch run bookkeeping."""
import logging

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from gamecatalog.clock import Clock, system_clock
from gamecatalog.models import SyncRun

logger = logging.getLogger(__name__)


async def start_run(session: AsyncSession, job_name: str, clock: Clock = system_clock) -> SyncRun:
    """Record the start of a batch run."""
    run = SyncRun(
        job_name=job_name,
        started_at=clock.now(),
        status="running",
    )
    session.add(run)
    await session.commit()
    logger.info(f"Started sync run: {job_name} ({run.id})")
    return run


async def complete_run(
    session: AsyncSession,
    run: SyncRun,
    records: int,
    error: str | None = None,
    clock: Clock = system_clock,
):
    """Record the completion of a batch run."""
    status = "failed" if error else "completed"
    await session.execute(
        update(SyncRun)
        .where(SyncRun.id == run.id)
        .values(
            completed_at=clock.now(),
            status=status,
            records_processed=records,
            error_message=error,
        )
    )
    await session.commit()
    logger.info(f"Completed sync run: {run.job_name} - {status} ({records} records)")
