"""
Base agent class for the topic-specialised chat agents.

Every agent is a persona with its own keyword vocabulary,
canned response templates, and an insight decision table.
Agents hold no per-conversation state, so one instance per
agent type is shared by every chat session.
"""

import logging
from typing import Dict, List

from copilot.services.template_engine import extract_placeholders

logger = logging.getLogger(__name__)

ALLOWED_PLACEHOLDERS = {"topic", "insight"}


class BaseAgent:
    """
    Abstract base for all specialised agents.

    Subclasses must set ``name``, ``label``, ``title``,
    ``vocabulary``, ``templates`` and the fixed replies, and
    implement ``insight()``.

    Attributes:
        name (str): Agent identifier (``general``, ``clinical``,
            ``food``).
        label (str): Short display name used in notices.
        title (str): Header title shown while the agent is
            active.
        vocabulary (dict[str, list[str]]): Keyword lists by
            category.  Category order and list order are the
            topic extraction order.
        templates (list[str]): Response templates with
            ``{topic}`` and ``{insight}`` placeholders.
        greeting (str): Reply to greetings.
        help_text (str): Capability description.
        switch_message (str): Transition reply after routing
            switched to this agent; may use ``{topic}``.
    """

    name: str = "base"
    label: str = "Base"
    title: str = "Base Agent"
    vocabulary: Dict[str, List[str]] = {}
    templates: List[str] = []
    greeting: str = ""
    help_text: str = ""
    switch_message: str = ""

    def __init__(self):
        # Fail at startup, not on the first random.choice().
        if not self.templates:
            raise ValueError(
                f"Agent '{self.name}' must define at least one "
                "response template"
            )
        for template in self.templates:
            unknown = (
                set(extract_placeholders(template))
                - ALLOWED_PLACEHOLDERS
            )
            if unknown:
                raise ValueError(
                    f"Agent '{self.name}' template uses unknown "
                    f"placeholders {sorted(unknown)}: {template!r}"
                )
        logger.debug(
            "[%s] loaded %d templates, %d vocabulary categories",
            self.name,
            len(self.templates),
            len(self.vocabulary),
        )

    # ----- public interface (override in subclass) --------------------

    def insight(self, query: str) -> str:
        """
        Pick the canned insight clause for a query.

        Parameters:
            query (str): Lowercased user query.

        Returns:
            str: Insight clause inserted into a template.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
