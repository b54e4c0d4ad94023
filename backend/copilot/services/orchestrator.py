"""
Turn orchestrator.

Runs one chat turn through the agent pipeline:

1. **Router**           → picks the agent that owns the query.
2. **Topic Extractor**  → keywords from the agent vocabulary.
3. **Context Store**    → new context snapshot for the turn.
4. **Synthesizer**      → reply text.
5. **Sample Data**      → optional dataset, embedded in the
   reply as a fenced JSON block.

``run_turn`` applies a whole turn to a ``ChatSession``;
``run_turn_stream`` is the streaming variant that yields
Server-Sent Events and pauses for the simulated typing delay
before the agent reply.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Generator, Iterator, List, Optional

from copilot.config import settings
from copilot.schemas import (
    AgentType,
    ConversationContext,
    Dataset,
    Message,
    Notice,
)
from copilot.services.agents.context import update_context
from copilot.services.agents.registry import get_agent
from copilot.services.agents.router import route_query
from copilot.services.agents.sample_data import (
    generate_sample_data,
    wants_structured_data,
)
from copilot.services.agents.topics import extract_topics
from copilot.services.chat_session import ChatSession, agent_changed_notice
from copilot.services.visualization import fenced_json

logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    """Outcome of the agent pipeline for one query."""

    agent: AgentType
    context: ConversationContext
    content: str
    topics: List[str] = field(default_factory=list)
    dataset: Optional[Dataset] = None
    notices: List[Notice] = field(default_factory=list)
    messages: List[Message] = field(default_factory=list)

    @property
    def switched(self) -> bool:
        return self.context.agent_switched


def orchestrate_turn(session: ChatSession, query: str) -> TurnResult:
    """
    Run the pipeline for a query without touching the session.

    Parameters:
        session (ChatSession): Session providing the current
            agent, context, synthesizer and random source.
        query (str): User query.

    Returns:
        TurnResult: Resolved agent, new context, reply text,
        optional dataset and notices.
    """
    lowered = query.lower()

    # ---- 1. Router --------------------------------------------------
    previous_agent = session.current_agent
    agent_name = route_query(lowered, previous_agent)
    switched = agent_name != previous_agent
    agent = get_agent(agent_name)

    # ---- 2. Topic extractor -----------------------------------------
    topics = extract_topics(lowered, agent)
    json_requested = wants_structured_data(lowered)

    # ---- 3. Context -------------------------------------------------
    context = update_context(
        session.context, query, topics, json_requested, switched,
    )
    logger.info(
        "[orchestrator] agent=%s switched=%s topics=%s json=%s",
        agent_name,
        switched,
        topics,
        json_requested,
    )

    # ---- 4. Synthesizer ---------------------------------------------
    content = session.synthesizer.respond(agent, query, context)

    # ---- 5. Sample data ---------------------------------------------
    dataset = None
    if json_requested:
        dataset = generate_sample_data(agent, topics, rng=session.rng)
        content = (
            f"{content}\n\nHere's the data in JSON format:\n\n"
            f"{fenced_json(dataset)}"
        )

    notices = []
    if switched:
        notices.append(agent_changed_notice(agent_name, routed=True))

    return TurnResult(
        agent=agent_name,
        context=context,
        content=content,
        topics=topics,
        dataset=dataset,
        notices=notices,
    )


def apply_turn(session: ChatSession, result: TurnResult) -> Message:
    """
    Commit a pipeline result to the session.

    Switches the agent, stores the context, hands the dataset
    to the visualization panel and appends the agent message.
    """
    session.current_agent = result.agent
    session.context = result.context
    if result.dataset is not None:
        session.visualization.load(result.dataset)
    return session.add_message(
        result.content, "agent", result.agent, dataset=result.dataset,
    )


def run_turn(session: ChatSession, text: str) -> TurnResult:
    """
    Run a complete chat turn with no artificial delay.

    Parameters:
        session (ChatSession): Target session.
        text (str): Raw chat input.

    Returns:
        TurnResult: ``messages`` holds the user and agent
        messages; empty when the input was blank.

    Raises:
        TurnInProgressError: A reply is still pending.
    """
    user_msg = session.submit(text)
    if user_msg is None:
        return TurnResult(
            agent=session.current_agent,
            context=session.context,
            content="",
        )
    try:
        result = orchestrate_turn(session, text)
        agent_msg = apply_turn(session, result)
    finally:
        session.finish_turn()
    result.messages = [user_msg, agent_msg]
    return result


def _sse_event(
    event: str,
    data: Any,
) -> str:
    """
    Format a Server-Sent Event string.

    Parameters:
        event (str): Event name.
        data: Payload (will be JSON-serialised).

    Returns:
        str: SSE-formatted string.
    """
    payload = json.dumps(data, ensure_ascii=False, default=str)
    return f"event: {event}\ndata: {payload}\n\n"


def run_turn_stream(
    session: ChatSession,
    text: str,
    delay: Optional[float] = None,
) -> Iterator[str]:
    """
    Streaming variant of ``run_turn``.

    The submission is accepted before this returns, so a
    pending reply raises here rather than mid-stream.  The
    returned iterator yields SSE events:

    - ``user_message``  → the user message, immediately
    - ``typing``        → ``{"agent": "..."}`` while waiting
    - ``agent_message`` → the agent reply, after ``delay``
    - ``notice``        → one per notice
    - ``done``          → ``{"current_agent": "...", "dataset": ...}``

    Blank input yields only ``done``.

    Parameters:
        session (ChatSession): Target session.
        text (str): Raw chat input.
        delay (float, optional): Typing delay in seconds
            (defaults to ``settings.response_delay_seconds``).

    Returns:
        Iterator[str]: SSE-formatted event strings.

    Raises:
        TurnInProgressError: A reply is still pending.
    """
    delay = settings.response_delay_seconds if delay is None else delay

    user_msg = session.submit(text)
    if user_msg is None:
        return iter([_sse_event("done", {
            "current_agent": session.current_agent,
            "dataset": None,
        })])
    return _stream_reply(session, user_msg, delay)


def _stream_reply(
    session: ChatSession,
    user_msg: Message,
    delay: float,
) -> Generator[str, None, TurnResult]:
    try:
        yield _sse_event("user_message", user_msg.model_dump(mode="json"))
        yield _sse_event("typing", {"agent": session.current_agent})
        if delay > 0:
            time.sleep(delay)

        result = orchestrate_turn(session, user_msg.content)
        agent_msg = apply_turn(session, result)
    finally:
        session.finish_turn()

    result.messages = [user_msg, agent_msg]
    yield _sse_event("agent_message", agent_msg.model_dump(mode="json"))
    for notice in result.notices:
        yield _sse_event("notice", notice.model_dump())
    yield _sse_event("done", {
        "current_agent": result.agent,
        "dataset": (
            result.dataset.model_dump() if result.dataset else None
        ),
    })
    return result
