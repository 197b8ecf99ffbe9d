"""SQLAlchemy database models for the local key-value store."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from mlotasks.database.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StorageEntryDB(Base):
    """One JSON-serialized entry per record kind (tasks, contexts, settings, views)."""

    __tablename__ = "storage_entries"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)
