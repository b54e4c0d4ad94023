"""
API routes for chat history shortcuts shown in the sidebar.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from copilot.database import get_db
from copilot.schemas import ChatHistoryEntry
from copilot.services.history_store import ChatHistoryStore

router = APIRouter(prefix="/api/history", tags=["history"])


@router.get(
    "",
    response_model=List[ChatHistoryEntry],
    summary="List chat history shortcuts",
)
def list_history(db: Session = Depends(get_db)):
    """Most recent chat submissions, newest first."""
    return ChatHistoryStore(db).list()


@router.put(
    "/{entry_id}/activate",
    response_model=ChatHistoryEntry,
    summary="Mark a shortcut as active",
)
def activate_entry(
    entry_id: str,
    db: Session = Depends(get_db),
):
    """Make one shortcut active and deactivate the rest."""
    entry = ChatHistoryStore(db).activate(entry_id)
    if entry is None:
        raise HTTPException(
            status_code=404,
            detail="History entry not found",
        )
    return entry
