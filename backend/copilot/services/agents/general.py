"""
General web assistant agent.

Default agent for every session.  Handles data/API questions
and points users at the specialised agents.
"""

from copilot.services.agents.base import BaseAgent


class GeneralAgent(BaseAgent):
    """Broad questions, data sources and agent navigation."""

    name = "general"
    label = "General"
    title = "Web UI Copilot"

    vocabulary = {
        "economy": [
            "gdp", "economy", "inflation", "income", "trade",
        ],
        "environment": [
            "co2", "emission", "energy", "land", "population",
        ],
        "data": [
            "data", "api", "dataset", "indicator", "chart",
        ],
        "navigation": [
            "agent", "switch", "widget",
        ],
    }

    templates = [
        "Regarding {topic}, {insight}",
        "I can help with {topic}: {insight}",
        "Here's what I found on {topic}: {insight}",
        "Good question about {topic}: {insight}",
        "Let's look at {topic} together: {insight}",
    ]

    greeting = (
        "Hello! I'm your general web assistant. I can help you "
        "navigate data sources, answer general questions, or "
        "connect you with our Clinical and Food Security agents."
    )

    help_text = (
        "I'm your general assistant. For specialised information "
        "I can route you to the Clinical agent for health-related "
        "questions or the Food Security agent for agriculture and "
        "nutrition. Ask for data in JSON format and I'll generate "
        "a chart-ready dataset."
    )

    switch_message = (
        "You're back with the General agent. Let's continue with "
        "{topic}, or ask me anything else."
    )

    def insight(self, query: str) -> str:
        if "data" in query or "api" in query:
            return (
                "I can help you explore economic indicators like GDP, "
                "environmental data such as CO2 emissions, or "
                "agricultural land usage statistics."
            )
        elif "agent" in query or "switch" in query:
            return (
                "you can switch between the General, Clinical and "
                "Food Security agents with the buttons above or by "
                "asking a domain question."
            )
        elif "gdp" in query or "economy" in query:
            return (
                "the WorldBank GDP growth series is a good starting "
                "point for comparing economies over time."
            )
        elif "co2" in query or "emission" in query:
            return (
                "emissions data is best read per capita alongside "
                "total output."
            )
        elif "widget" in query or "chart" in query:
            return (
                "any generated dataset can be charted and saved as a "
                "widget from the visualization panel."
            )
        return (
            "I can answer general questions or connect you with our "
            "specialised agents."
        )
