"""
API routes for saved widgets.

Provides list, save, delete and JSON export for widgets
persisted in the durable key-value store.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from copilot.database import get_db
from copilot.schemas import SavedWidget, WidgetCreate, WidgetSaveResponse
from copilot.services.visualization import (
    content_disposition,
    export_filename,
    to_json,
)
from copilot.services.widget_store import WidgetStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/widgets", tags=["widgets"])


@router.get(
    "",
    response_model=List[SavedWidget],
    summary="List saved widgets",
)
def list_widgets(db: Session = Depends(get_db)):
    """Retrieve all saved widgets, most recent first."""
    return WidgetStore(db).list()


@router.post(
    "",
    response_model=WidgetSaveResponse,
    status_code=201,
    summary="Save a dataset as a widget",
)
def create_widget(
    data: WidgetCreate,
    db: Session = Depends(get_db),
):
    """
    Save the current dataset and chart type under a title.

    A blank title is rejected with a 400 whose detail is the
    notice to show; nothing is stored in that case.
    """
    result = WidgetStore(db).save(
        data.title, data.data, data.chart_type,
    )
    if not result.ok:
        raise HTTPException(
            status_code=400,
            detail=result.notice.model_dump(),
        )
    return {"widget": result.widget, "notice": result.notice}


@router.delete(
    "/{widget_id}",
    status_code=204,
    summary="Delete a widget",
)
def delete_widget(
    widget_id: str,
    confirm: bool = Query(
        default=False,
        description="Must be true; deletion cannot be undone",
    ),
    db: Session = Depends(get_db),
):
    """
    Delete a widget after explicit confirmation.

    Deleting an unknown id succeeds without changes.
    """
    if not confirm:
        raise HTTPException(
            status_code=400,
            detail="Deletion must be confirmed with confirm=true",
        )
    WidgetStore(db).delete(widget_id, confirmed=True)


@router.get(
    "/{widget_id}/export",
    summary="Download a widget's dataset as JSON",
)
def export_widget(
    widget_id: str,
    db: Session = Depends(get_db),
):
    """Return the widget's dataset as a ``.json`` attachment."""
    widget = WidgetStore(db).get(widget_id)
    if not widget:
        raise HTTPException(
            status_code=404,
            detail="Widget not found",
        )
    filename = export_filename(widget.data.title)
    return Response(
        content=to_json(widget.data),
        media_type="application/json",
        headers={
            "Content-Disposition": content_disposition(filename),
        },
    )
