"""
SQLAlchemy models for the Agent Copilot.

The browser build kept saved widgets and chat shortcuts in
``localStorage``; the backend keeps the same shape: one row
per well-known key holding a JSON-encoded list.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime
from copilot.database import Base


# Well-known keys
SAVED_WIDGETS_KEY = "savedWidgets"
CHAT_HISTORY_KEY = "chatHistory"


def utcnow() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


class StoredValue(Base):
    """
    A single JSON blob stored under a well-known key.

    ``value`` is written as text and parsed on every read, so
    a corrupted row only affects the key it belongs to.
    """

    __tablename__ = "stored_values"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False, default="[]")
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
