"""System bookkeeping models."""
from sqlalchemy import Column, String, Integer, DateTime, Text

from gamecatalog.clock import utcnow
from gamecatalog.database import Base


class SyncRun(Base):
    """Track batch sync runs."""

    __tablename__ = "sync_runs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_name = Column(String(100), nullable=False, index=True)
    started_at = Column(DateTime, nullable=False)
    completed_at = Column(DateTime)
    status = Column(String(20), default="running")  # 'running', 'completed', 'failed'
    records_processed = Column(Integer, default=0)
    error_message = Column(Text)
    created_at = Column(DateTime, default=utcnow)
