"""
API routes for chat sessions and the visualization panel.

Provides session lifecycle, chat turns (plain and SSE
streaming), explicit agent switching, and the chart panel
(toggle, chart type, series, JSON export).
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response, StreamingResponse
from starlette.background import BackgroundTask

from copilot.database import SessionLocal
from copilot.schemas import (
    AgentChange,
    ChartTypeUpdate,
    ChatMessageSend,
    ChatTurnResponse,
    SessionResponse,
    VisualizationResponse,
)
from copilot.services.agents import get_agent
from copilot.services.chat_session import (
    ChatSession,
    SessionNotFoundError,
    SessionRegistry,
    TurnInProgressError,
)
from copilot.services.history_store import ChatHistoryRecorder
from copilot.services.orchestrator import run_turn, run_turn_stream
from copilot.services.visualization import (
    content_disposition,
    export_filename,
    to_json,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])

registry = SessionRegistry(
    subscriber_factory=lambda: ChatHistoryRecorder(SessionLocal),
)


def get_registry() -> SessionRegistry:
    """Dependency that provides the chat session registry."""
    return registry


def _get_session(
    session_id: str,
    sessions: SessionRegistry,
) -> ChatSession:
    try:
        return sessions.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=404,
            detail="Chat session not found",
        )


def _serialize_session(session: ChatSession) -> Dict[str, Any]:
    return {
        "id": session.id,
        "current_agent": session.current_agent,
        "agent_title": get_agent(session.current_agent).title,
        "awaiting_reply": session.awaiting_reply,
        "context": session.context,
        "messages": session.messages,
    }


@router.post(
    "/sessions",
    response_model=SessionResponse,
    status_code=201,
    summary="Open a chat session",
)
def open_session(sessions: SessionRegistry = Depends(get_registry)):
    """Start a new chat with the General agent."""
    return _serialize_session(sessions.open())


@router.get(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    summary="Get chat session state",
)
def get_session(
    session_id: str,
    sessions: SessionRegistry = Depends(get_registry),
):
    """Retrieve messages, active agent and conversation context."""
    return _serialize_session(_get_session(session_id, sessions))


@router.delete(
    "/sessions/{session_id}",
    status_code=204,
    summary="Close a chat session",
)
def close_session(
    session_id: str,
    sessions: SessionRegistry = Depends(get_registry),
):
    """Close a session and drop its event subscriptions."""
    sessions.close(session_id)


@router.post(
    "/sessions/{session_id}/messages",
    response_model=ChatTurnResponse,
    summary="Send a chat message",
)
def send_message(
    session_id: str,
    data: ChatMessageSend,
    sessions: SessionRegistry = Depends(get_registry),
):
    """
    Run one chat turn and return the user and agent messages.

    Blank messages are ignored and produce an empty message
    list.  The simulated typing delay is only applied by the
    streaming endpoint.
    """
    session = _get_session(session_id, sessions)
    try:
        result = run_turn(session, data.message)
    except TurnInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return {
        "messages": result.messages,
        "notices": result.notices,
        "current_agent": session.current_agent,
        "dataset": result.dataset,
    }


@router.post(
    "/sessions/{session_id}/messages/stream",
    summary="Send a chat message (SSE stream)",
)
def send_message_stream(
    session_id: str,
    data: ChatMessageSend,
    sessions: SessionRegistry = Depends(get_registry),
):
    """
    SSE streaming variant of the chat endpoint.

    Emits the user message immediately, a ``typing`` event,
    then the agent reply after the configured delay.
    The turn is released when the response ends, even if the
    client disconnects before the stream starts.
    """
    session = _get_session(session_id, sessions)
    try:
        events = run_turn_stream(session, data.message)
    except TurnInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return StreamingResponse(
        events,
        background=BackgroundTask(session.finish_turn),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )


@router.put(
    "/sessions/{session_id}/agent",
    response_model=ChatTurnResponse,
    summary="Switch the active agent",
)
def change_agent(
    session_id: str,
    data: AgentChange,
    sessions: SessionRegistry = Depends(get_registry),
):
    """
    Switch agents explicitly.

    Selecting the active agent is a no-op; otherwise a
    transition message is appended.
    """
    session = _get_session(session_id, sessions)
    before = len(session.messages)
    notice = session.change_agent(data.agent)
    return {
        "messages": session.messages[before:],
        "notices": [notice] if notice else [],
        "current_agent": session.current_agent,
    }


# --- Visualization ---


@router.get(
    "/sessions/{session_id}/visualization",
    response_model=VisualizationResponse,
    summary="Get visualization state",
)
def get_visualization(
    session_id: str,
    sessions: SessionRegistry = Depends(get_registry),
):
    """Active dataset, chart type, visibility and chart series."""
    session = _get_session(session_id, sessions)
    return session.visualization.snapshot()


@router.post(
    "/sessions/{session_id}/visualization/toggle",
    response_model=VisualizationResponse,
    summary="Show or hide the visualization",
)
def toggle_visualization(
    session_id: str,
    sessions: SessionRegistry = Depends(get_registry),
):
    """Flip panel visibility; warns when there is no dataset."""
    session = _get_session(session_id, sessions)
    notice = session.visualization.toggle()
    return {
        **session.visualization.snapshot(),
        "notices": [notice] if notice else [],
    }


@router.put(
    "/sessions/{session_id}/visualization/chart-type",
    response_model=VisualizationResponse,
    summary="Change the chart type",
)
def set_chart_type(
    session_id: str,
    data: ChartTypeUpdate,
    sessions: SessionRegistry = Depends(get_registry),
):
    """Select the line, bar or pie chart."""
    session = _get_session(session_id, sessions)
    session.visualization.set_chart_type(data.chart_type)
    return session.visualization.snapshot()


@router.get(
    "/sessions/{session_id}/visualization/export",
    summary="Download the active dataset as JSON",
)
def export_visualization(
    session_id: str,
    sessions: SessionRegistry = Depends(get_registry),
):
    """Return the active dataset as a ``.json`` attachment."""
    session = _get_session(session_id, sessions)
    dataset = session.visualization.dataset
    if dataset is None:
        raise HTTPException(
            status_code=404,
            detail="No dataset to export",
        )
    filename = export_filename(dataset.title)
    return Response(
        content=to_json(dataset),
        media_type="application/json",
        headers={
            "Content-Disposition": content_disposition(filename),
        },
    )
