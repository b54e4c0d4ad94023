"""
Agent registry.

Agents are instantiated once at import so a misconfigured
agent (e.g. an empty template pool) fails at startup.
"""

from typing import Dict

from copilot.services.agents.base import BaseAgent
from copilot.services.agents.clinical import ClinicalAgent
from copilot.services.agents.food import FoodAgent
from copilot.services.agents.general import GeneralAgent

DEFAULT_AGENT = "general"


def build_registry() -> Dict[str, BaseAgent]:
    """
    Instantiate every agent, validating its templates.

    Returns:
        dict[str, BaseAgent]: Agents keyed by name.
    """
    agents = [GeneralAgent(), ClinicalAgent(), FoodAgent()]
    return {agent.name: agent for agent in agents}


AGENTS: Dict[str, BaseAgent] = build_registry()


def get_agent(name: str) -> BaseAgent:
    """
    Look up an agent by name.

    Raises:
        KeyError: If ``name`` is not a known agent.
    """
    return AGENTS[name]
