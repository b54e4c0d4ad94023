"""
Durable key-value storage.

Each well-known key holds a JSON-encoded list in the
``stored_values`` table.  Reads parse on every call and writes
commit immediately; there is no caching layer.
"""

import json
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from copilot.models import StoredValue

logger = logging.getLogger(__name__)


def read_list(db: Session, key: str) -> List[Dict[str, Any]]:
    """
    Read the list stored under ``key``.

    Missing keys, malformed JSON and non-list values all read
    as an empty list.

    Parameters:
        db (Session): Active SQLAlchemy session.
        key (str): Well-known storage key.

    Returns:
        list[dict]: Stored items.
    """
    row = db.get(StoredValue, key)
    if row is None:
        return []
    try:
        items = json.loads(row.value or "[]")
    except (json.JSONDecodeError, TypeError) as exc:
        logger.warning(
            "[storage] malformed JSON under %r, treating as empty: %s",
            key,
            exc,
        )
        return []
    if not isinstance(items, list):
        logger.warning(
            "[storage] expected a list under %r, got %s",
            key,
            type(items).__name__,
        )
        return []
    return items


def write_list(
    db: Session,
    key: str,
    items: List[Dict[str, Any]],
) -> None:
    """
    Replace the list stored under ``key`` and commit.

    Parameters:
        db (Session): Active SQLAlchemy session.
        key (str): Well-known storage key.
        items (list[dict]): JSON-serialisable items.
    """
    payload = json.dumps(items, ensure_ascii=False)
    row = db.get(StoredValue, key)
    if row is None:
        db.add(StoredValue(key=key, value=payload))
    else:
        row.value = payload
    db.commit()
