"""
Saved widget store.

Widgets are kept newest-first as one JSON list under the
``savedWidgets`` key.  Every call reads through and every
mutation writes through to the database.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from copilot.models import SAVED_WIDGETS_KEY
from copilot.schemas import ChartType, Dataset, Notice, SavedWidget
from copilot.services.storage import read_list, write_list

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    """Outcome of a save: the widget, or a rejection notice."""

    widget: Optional[SavedWidget]
    notice: Notice

    @property
    def ok(self) -> bool:
        return self.widget is not None


class WidgetStore:
    """
    List, save and delete widgets.

    Parameters:
        db (Session): Active SQLAlchemy session.
    """

    def __init__(self, db: Session):
        self.db = db

    def _load(self) -> List[SavedWidget]:
        widgets = []
        for item in read_list(self.db, SAVED_WIDGETS_KEY):
            try:
                widgets.append(SavedWidget.model_validate(item))
            except ValidationError as exc:
                logger.warning(
                    "[widgets] skipping malformed record %r: %s",
                    item.get("id") if isinstance(item, dict) else item,
                    exc,
                )
        return widgets

    def _store(self, widgets: List[SavedWidget]) -> None:
        write_list(
            self.db,
            SAVED_WIDGETS_KEY,
            [w.model_dump(by_alias=True) for w in widgets],
        )

    def list(self) -> List[SavedWidget]:
        """Return saved widgets, most recent first."""
        return self._load()

    def get(self, widget_id: str) -> Optional[SavedWidget]:
        for widget in self._load():
            if widget.id == widget_id:
                return widget
        return None

    def save(
        self,
        title: str,
        dataset: Dataset,
        chart_type: ChartType = "line",
    ) -> SaveResult:
        """
        Save a dataset snapshot as a new widget.

        Parameters:
            title (str): User-supplied title; must not be blank.
            dataset (Dataset): Dataset to snapshot.
            chart_type (str): Preferred chart type.

        Returns:
            SaveResult: The new widget, or ``widget=None`` with a
            destructive notice when the title is blank.
        """
        if not title or not title.strip():
            return SaveResult(
                widget=None,
                notice=Notice(
                    title="Error",
                    description="Please enter a title for your widget",
                    variant="destructive",
                ),
            )

        widget = SavedWidget(
            id=str(uuid.uuid4()),
            title=title,
            data=dataset.model_copy(deep=True),
            chart_type=chart_type,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        self._store([widget, *self._load()])
        logger.info("[widgets] saved %s (%s)", widget.id, title)

        return SaveResult(
            widget=widget,
            notice=Notice(
                title="Widget Saved",
                description=f'"{title}" has been added to your widgets',
            ),
        )

    def delete(self, widget_id: str, confirmed: bool = False) -> bool:
        """
        Delete a widget after explicit confirmation.

        Parameters:
            widget_id (str): Widget to remove.
            confirmed (bool): The user confirmed the deletion.

        Returns:
            bool: True if a record was removed.
        """
        if not confirmed:
            return False
        widgets = self._load()
        remaining = [w for w in widgets if w.id != widget_id]
        if len(remaining) == len(widgets):
            return False
        self._store(remaining)
        logger.info("[widgets] deleted %s", widget_id)
        return True
