"""
Topic-specialised chat agents.

Each agent owns a keyword vocabulary, canned response
templates and an insight decision table:
- GeneralAgent   → default assistant, data sources, navigation
- ClinicalAgent  → health, disease and treatment research
- FoodAgent      → agriculture, nutrition and food security

The router picks the agent for each query; the synthesizer
and sample-data generator build the reply from it.  The turn
pipeline that ties them together lives in
``copilot.services.orchestrator``.
"""

from copilot.services.agents.registry import (
    AGENTS,
    DEFAULT_AGENT,
    get_agent,
)

__all__ = ["AGENTS", "DEFAULT_AGENT", "get_agent"]
