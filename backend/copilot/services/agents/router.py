"""
Keyword-based agent router.

Clinical triggers are checked before food triggers, so a
query mentioning both goes to the clinical agent.  A query
with no trigger stays with the current agent; ``general`` is
never selected by keyword.
"""

import logging

from copilot.schemas import AgentType

logger = logging.getLogger(__name__)

# Checked in order; first matching set wins.
ROUTING_TABLE = (
    ("clinical", (
        "clinical", "medical", "health", "disease",
        "treatment", "doctor",
    )),
    ("food", (
        "food", "agriculture", "crop", "farm",
        "nutrition", "hunger",
    )),
)


def route_query(query: str, current: AgentType) -> AgentType:
    """
    Decide which agent owns a query.

    Parameters:
        query (str): User query (any case).
        current (str): Currently active agent.

    Returns:
        str: Resolved agent name.
    """
    lowered = query.lower()
    for agent, triggers in ROUTING_TABLE:
        if any(trigger in lowered for trigger in triggers):
            logger.debug("[router] %r -> %s", query, agent)
            return agent
    return current
