from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from storefront.data.database import Base


class SyncRunModel(Base):
    """Audit row per synchronization run. Nothing coordinates on it."""

    __tablename__ = "sync_runs"

    id = Column(Integer, primary_key=True)
    trigger = Column(String(20), nullable=False)  # scheduled, manual, api
    status = Column(String(20), nullable=False)  # SUCCESS, FAILED
    started_at = Column(DateTime(timezone=True), nullable=False)
    finished_at = Column(DateTime(timezone=True), nullable=False)
    duration_ms = Column(Integer, nullable=False)
    synchronized = Column(Integer, nullable=False, default=0)
    errors = Column(Integer, nullable=False, default=0)
    error_message = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc),
    )
