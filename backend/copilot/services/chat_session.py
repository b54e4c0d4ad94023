"""
Chat sessions.

A ``ChatSession`` is the process-local state of one chat:
the active agent, the conversation context, the ordered
message list, the visualization panel, and the synthesizer
with its anti-repetition history.

Submissions are published to subscribers as
``ChatSubmitted`` events.  Subscriptions are explicit and
removed when the session is closed.
"""

import itertools
import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from copilot.config import settings
from copilot.schemas import (
    AgentType,
    ConversationContext,
    Dataset,
    Message,
    Notice,
    Sender,
)
from copilot.services.agents.registry import DEFAULT_AGENT, get_agent
from copilot.services.agents.synthesizer import ResponseSynthesizer
from copilot.services.visualization import VisualizationSession

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Raised for an unknown chat session id."""


class TurnInProgressError(RuntimeError):
    """Raised when a message is submitted while a reply is pending."""


@dataclass(frozen=True)
class ChatSubmitted:
    """Event published when the user submits a chat message."""

    session_id: str
    query: str


Subscriber = Callable[[ChatSubmitted], None]


def format_display_time(timestamp: datetime) -> str:
    """Format a timestamp as ``h:MM AM/PM`` (e.g. ``3:07 PM``)."""
    return timestamp.strftime("%I:%M %p").lstrip("0")


def agent_changed_notice(agent: AgentType, routed: bool) -> Notice:
    label = get_agent(agent).label
    if routed:
        description = f"Your query was routed to the {label} agent"
    else:
        description = f"Switched to the {label} agent"
    return Notice(title="Agent Changed", description=description)


class ChatSession:
    """
    State of a single chat.

    Parameters:
        session_id (str, optional): Identifier; generated when
            omitted.
        rng (random.Random, optional): Random source shared by
            the synthesizer and the sample-data generator.
    """

    def __init__(
        self,
        session_id: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        self.id = session_id or str(uuid.uuid4())
        self.rng = rng or random.Random()
        self.current_agent: AgentType = DEFAULT_AGENT
        self.context = ConversationContext()
        self.messages: List[Message] = []
        self.visualization = VisualizationSession()
        self.synthesizer = ResponseSynthesizer(rng=self.rng)
        self.awaiting_reply = False

        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._subscribers: List[Subscriber] = []

    # ----- events -----------------------------------------------------

    def subscribe(self, handler: Subscriber) -> Callable[[], None]:
        """
        Register a submission handler.

        Returns:
            callable: Removes the handler when called.
        """
        self._subscribers.append(handler)

        def unsubscribe() -> None:
            if handler in self._subscribers:
                self._subscribers.remove(handler)

        return unsubscribe

    def _publish(self, event: ChatSubmitted) -> None:
        for handler in list(self._subscribers):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "[session %s] subscriber %r failed",
                    self.id,
                    handler,
                )

    def close(self) -> None:
        """Drop every subscriber."""
        self._subscribers.clear()

    # ----- messages ---------------------------------------------------

    def add_message(
        self,
        content: str,
        sender: Sender,
        agent_type: AgentType,
        dataset: Optional[Dataset] = None,
    ) -> Message:
        """Append a new message and return it."""
        timestamp = datetime.now(timezone.utc)
        message = Message(
            id=str(next(self._ids)),
            content=content,
            sender=sender,
            agent_type=agent_type,
            timestamp=timestamp,
            display_time=format_display_time(timestamp),
            dataset=dataset,
        )
        self.messages.append(message)
        return message

    def submit(self, text: str) -> Optional[Message]:
        """
        Accept a user submission.

        Parameters:
            text (str): Raw chat input.

        Returns:
            Message | None: The user message, or None when the
            input is blank (nothing happens then).

        Raises:
            TurnInProgressError: A reply is still pending.
        """
        if not text or not text.strip():
            return None
        with self._lock:
            if self.awaiting_reply:
                raise TurnInProgressError(
                    "Wait for the current reply before sending "
                    "another message"
                )
            self.awaiting_reply = True
        message = self.add_message(text, "user", self.current_agent)
        self._publish(ChatSubmitted(session_id=self.id, query=text))
        return message

    def finish_turn(self) -> None:
        with self._lock:
            self.awaiting_reply = False

    def change_agent(self, agent: AgentType) -> Optional[Notice]:
        """
        Explicitly switch agents.

        Switching to the active agent does nothing.

        Returns:
            Notice | None: "Agent Changed" notice when switched.
        """
        if agent == self.current_agent:
            return None
        self.current_agent = agent
        label = get_agent(agent).label
        self.add_message(
            f"You are now chatting with the {label} agent. "
            "How can I help you?",
            "agent",
            agent,
        )
        logger.info("[session %s] switched to %s", self.id, agent)
        return agent_changed_notice(agent, routed=False)


class SessionRegistry:
    """
    In-memory registry of open chat sessions.

    Sessions idle for longer than ``idle_timeout`` seconds are
    closed on the next ``open`` or ``get``; a session waiting
    for a reply is never swept.

    Parameters:
        subscriber_factory (callable, optional): Builds a
            submission subscriber attached to every new session
            (the chat history recorder in production).
        idle_timeout (float, optional): Idle lifetime in seconds
            (defaults to ``settings.session_idle_timeout_seconds``).
        clock (callable, optional): Monotonic time source.
    """

    def __init__(
        self,
        subscriber_factory: Optional[Callable[[], Subscriber]] = None,
        idle_timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.subscriber_factory = subscriber_factory
        self.idle_timeout = (
            settings.session_idle_timeout_seconds
            if idle_timeout is None else idle_timeout
        )
        self.clock = clock
        self._sessions: Dict[str, ChatSession] = {}
        self._unsubscribers: Dict[str, Callable[[], None]] = {}
        self._last_seen: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, rng: Optional[random.Random] = None) -> ChatSession:
        self.sweep()
        session = ChatSession(rng=rng)
        if self.subscriber_factory is not None:
            self._unsubscribers[session.id] = session.subscribe(
                self.subscriber_factory(),
            )
        self._sessions[session.id] = session
        self._last_seen[session.id] = self.clock()
        logger.info("[sessions] opened %s", session.id)
        return session

    def get(self, session_id: str) -> ChatSession:
        self.sweep()
        try:
            session = self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None
        self._last_seen[session_id] = self.clock()
        return session

    def sweep(self) -> List[str]:
        """Close idle sessions and return their ids."""
        cutoff = self.clock() - self.idle_timeout
        expired = [
            session_id
            for session_id, seen in self._last_seen.items()
            if seen < cutoff
            and not self._sessions[session_id].awaiting_reply
        ]
        for session_id in expired:
            logger.info("[sessions] %s idle, closing", session_id)
            self.close(session_id)
        return expired

    def close(self, session_id: str) -> None:
        """Unsubscribe and forget a session; unknown ids are ignored."""
        unsubscribe = self._unsubscribers.pop(session_id, None)
        if unsubscribe is not None:
            unsubscribe()
        self._last_seen.pop(session_id, None)
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.close()
            logger.info("[sessions] closed %s", session_id)
