"""
Conversation context updates.

The context is a frozen snapshot; each turn derives a new one
from the previous snapshot.
"""

from typing import List

from copilot.schemas import ConversationContext

DEFAULT_TOPIC = "this subject"


def update_context(
    previous: ConversationContext,
    query: str,
    topics: List[str],
    json_requested: bool,
    switched: bool,
) -> ConversationContext:
    """
    Build the context for the current turn.

    The new context starts as a copy of ``previous``.  The
    topic is only replaced when this turn extracted one.

    Parameters:
        previous (ConversationContext): Last turn's context.
        query (str): Raw user query.
        topics (list[str]): Topics extracted this turn.
        json_requested (bool): Whether structured data was asked for.
        switched (bool): Whether routing changed the agent.

    Returns:
        ConversationContext: New context snapshot.
    """
    update = {
        "last_query": query,
        "json_requested": json_requested,
        "agent_switched": switched,
    }
    if topics:
        update["current_topic"] = topics[0]
    return previous.model_copy(update=update)


def topic_or_default(context: ConversationContext) -> str:
    """Return the current topic or the neutral placeholder."""
    return context.current_topic or DEFAULT_TOPIC
