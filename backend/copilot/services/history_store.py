"""
Chat history shortcuts.

Keeps the few most recent chat submissions for the sidebar
under the ``chatHistory`` key.  Exactly one entry, the newest
by default, is marked active.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from copilot.config import settings
from copilot.models import CHAT_HISTORY_KEY
from copilot.schemas import ChatHistoryEntry
from copilot.services.storage import read_list, write_list

logger = logging.getLogger(__name__)


def shortcut_title(query: str, max_length: Optional[int] = None) -> str:
    """Truncate a query for display, adding an ellipsis if cut."""
    max_length = max_length or settings.chat_title_max_length
    if len(query) > max_length:
        return query[:max_length] + "..."
    return query


class ChatHistoryStore:
    """
    Read and update the chat history shortcut list.

    Parameters:
        db (Session): Active SQLAlchemy session.
        limit (int, optional): Entries to keep.
    """

    def __init__(self, db: Session, limit: Optional[int] = None):
        self.db = db
        self.limit = limit or settings.chat_history_limit

    def list(self) -> List[ChatHistoryEntry]:
        entries = []
        for item in read_list(self.db, CHAT_HISTORY_KEY):
            try:
                entries.append(ChatHistoryEntry.model_validate(item))
            except ValidationError:
                logger.warning("[history] skipping malformed entry")
        return entries

    def _store(self, entries: List[ChatHistoryEntry]) -> None:
        write_list(
            self.db,
            CHAT_HISTORY_KEY,
            [e.model_dump() for e in entries],
        )

    def record(self, query: str) -> ChatHistoryEntry:
        """
        Add a submission as the active, most recent entry.

        Parameters:
            query (str): Submitted chat text.

        Returns:
            ChatHistoryEntry: The new entry.
        """
        entry = ChatHistoryEntry(
            id=str(uuid.uuid4()),
            title=shortcut_title(query.strip()),
            timestamp=datetime.now(timezone.utc).isoformat(),
            active=True,
        )
        older = [
            e.model_copy(update={"active": False}) for e in self.list()
        ]
        self._store([entry, *older][: self.limit])
        return entry

    def activate(self, entry_id: str) -> Optional[ChatHistoryEntry]:
        """
        Mark one entry active and every other entry inactive.

        Returns:
            ChatHistoryEntry | None: The activated entry, or None
            if ``entry_id`` is unknown (nothing changes then).
        """
        entries = self.list()
        if not any(e.id == entry_id for e in entries):
            return None
        updated = [
            e.model_copy(update={"active": e.id == entry_id})
            for e in entries
        ]
        self._store(updated)
        return next(e for e in updated if e.id == entry_id)


class ChatHistoryRecorder:
    """
    Chat event subscriber that records each submission.

    Opens a short-lived database session per event, because
    events fire outside any request-scoped session.

    Parameters:
        session_factory (callable): Returns a new SQLAlchemy
            session (e.g. ``SessionLocal``).
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def __call__(self, event) -> None:
        db = self.session_factory()
        try:
            ChatHistoryStore(db).record(event.query)
        finally:
            db.close()
