"""
Pydantic schemas for the chat engine and API validation.

Provides the conversation data model (messages, context,
datasets), persisted widget / history records, and the
request/response bodies for all API endpoints.
"""

from typing import Optional, List, Any, Dict, Literal
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


# --- Allowed type literals -----------------------------

AgentType = Literal["general", "clinical", "food"]
ChartType = Literal["line", "bar", "pie"]
Sender = Literal["user", "agent"]
NoticeVariant = Literal["default", "warning", "destructive"]

AGENT_TYPES = ("general", "clinical", "food")
CHART_TYPES = ("line", "bar", "pie")


# --- Conversation model --------------------------------

class Dataset(BaseModel):
    """Structured time-series payload for charts and export."""

    title: str
    description: str = ""
    years: List[str] = []
    data: List[Dict[str, Any]] = []


class ConversationContext(BaseModel):
    """
    Per-session conversation state carried across turns.

    Frozen: each turn produces a new context object instead
    of mutating the previous one.
    """

    model_config = ConfigDict(frozen=True)

    last_query: str = ""
    current_topic: Optional[str] = None
    json_requested: bool = False
    agent_switched: bool = False


class Message(BaseModel):
    """A single immutable chat message."""

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    sender: Sender
    agent_type: AgentType
    timestamp: datetime
    display_time: str
    dataset: Optional[Dataset] = None


class Notice(BaseModel):
    """User-visible notification (rendered as a toast)."""

    title: str
    description: str = ""
    variant: NoticeVariant = "default"


# --- Persisted records ---------------------------------

class SavedWidget(BaseModel):
    """
    Durable widget record.

    Serialised with camelCase keys (``chartType``) so the
    stored blob keeps the layout the frontend reads.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    data: Dataset
    chart_type: ChartType = Field(default="line", alias="chartType")
    timestamp: str


class ChatHistoryEntry(BaseModel):
    """Sidebar shortcut for a previous chat submission."""

    id: str
    title: str
    timestamp: str
    active: bool = False


# --- Chat API ------------------------------------------

class ChatMessageSend(BaseModel):
    """Schema for sending a chat message.

    Blank messages are accepted here and ignored by the
    session, matching the chat box behaviour.
    """

    message: str = ""


class AgentChange(BaseModel):
    """Schema for an explicit agent switch."""

    agent: AgentType


class ChatTurnResponse(BaseModel):
    """Messages produced by one chat action."""

    messages: List[Message] = []
    notices: List[Notice] = []
    current_agent: AgentType
    dataset: Optional[Dataset] = None


class SessionResponse(BaseModel):
    """Full state of a chat session."""

    id: str
    current_agent: AgentType
    agent_title: str
    awaiting_reply: bool = False
    context: ConversationContext
    messages: List[Message] = []


# --- Visualization API ---------------------------------

class ChartTypeUpdate(BaseModel):
    """Schema for changing the visualization chart type."""

    chart_type: ChartType


class ChartSeries(BaseModel):
    """Chart-ready projection of the active dataset."""

    chart_type: ChartType
    x_key: str = "year"
    metrics: List[str] = []
    series: List[str] = []
    points: List[Dict[str, Any]] = []
    slices: List[Dict[str, Any]] = []


class VisualizationResponse(BaseModel):
    """Visualization session state."""

    visible: bool
    chart_type: ChartType
    dataset: Optional[Dataset] = None
    chart: Optional[ChartSeries] = None
    notices: List[Notice] = []


# --- Widget API ----------------------------------------

class WidgetCreate(BaseModel):
    """Schema for saving a dataset as a widget."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    data: Dataset
    chart_type: ChartType = Field(default="line", alias="chartType")


class WidgetSaveResponse(BaseModel):
    """Saved widget plus the confirmation notice."""

    widget: SavedWidget
    notice: Notice
