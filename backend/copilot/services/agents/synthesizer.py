"""
Response synthesizer.

Builds the agent's reply text.  Fixed replies (greeting,
thanks, help, agent switch) are checked first; otherwise a
template is sampled from the agent's pool, filled with the
context topic and a canned insight, and resampled while it
repeats one of the agent's recent responses.

Recent responses live in a per-agent ring buffer owned by
the synthesizer instance, so separate chat sessions never
share anti-repetition state.
"""

import logging
import random
from collections import deque
from typing import Deque, Dict, List, Optional

from copilot.config import settings
from copilot.schemas import ConversationContext
from copilot.services.agents.base import BaseAgent
from copilot.services.agents.context import topic_or_default
from copilot.services.template_engine import render_template

logger = logging.getLogger(__name__)

THANKS_REPLY = (
    "You're welcome! Let me know if there's anything else "
    "I can help you with."
)


class ResponseHistory:
    """Bounded per-agent record of recently produced responses."""

    def __init__(self, size: Optional[int] = None):
        self.size = size or settings.response_history_size
        self._recent: Dict[str, Deque[str]] = {}

    def recent(self, agent_name: str) -> List[str]:
        """Return an agent's recent responses, oldest first."""
        return list(self._recent.get(agent_name, ()))

    def contains(self, agent_name: str, text: str) -> bool:
        return text in self._recent.get(agent_name, ())

    def record(self, agent_name: str, text: str) -> None:
        """Append a response, evicting the oldest when full."""
        buffer = self._recent.setdefault(
            agent_name, deque(maxlen=self.size),
        )
        buffer.append(text)


class ResponseSynthesizer:
    """
    Produce reply text for one chat session.

    Parameters:
        rng (random.Random, optional): Random source for
            template selection.  Inject a seeded instance for
            reproducible output.
        history (ResponseHistory, optional): Anti-repetition
            buffer.
        max_attempts (int, optional): Upper bound on template
            draws per reply.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        history: Optional[ResponseHistory] = None,
        max_attempts: Optional[int] = None,
    ):
        self.rng = rng or random.Random()
        self.history = history or ResponseHistory()
        self.max_attempts = (
            max_attempts or settings.max_resample_attempts
        )

    def respond(
        self,
        agent: BaseAgent,
        query: str,
        context: ConversationContext,
    ) -> str:
        """
        Build the reply for a query.

        Parameters:
            agent (BaseAgent): Agent chosen by the router.
            query (str): Raw user query.
            context (ConversationContext): Context for this turn.

        Returns:
            str: Reply text.
        """
        lowered = query.lower()
        topic = topic_or_default(context)

        if "hello" in lowered or "hi " in lowered:
            return agent.greeting
        if "thank" in lowered:
            return THANKS_REPLY
        if "help" in lowered:
            return agent.help_text
        if context.agent_switched:
            return render_template(
                agent.switch_message, {"topic": topic},
            )

        params = {"topic": topic, "insight": agent.insight(lowered)}
        text = self._sample(agent, params)
        self.history.record(agent.name, text)
        return text

    def _sample(self, agent: BaseAgent, params: Dict[str, str]) -> str:
        """
        Draw templates until one is not a recent repeat.

        Gives up after ``max_attempts`` draws and returns the
        last (repeated) rendering.
        """
        text = ""
        for attempt in range(1, self.max_attempts + 1):
            template = self.rng.choice(agent.templates)
            text = render_template(template, params)
            if not self.history.contains(agent.name, text):
                return text
        logger.info(
            "[synthesizer] %s: no fresh template after %d attempts, "
            "repeating a recent response",
            agent.name,
            attempt,
        )
        return text
