"""
Food Security agent.

Covers agriculture, nutrition and food supply questions.
"""

from copilot.services.agents.base import BaseAgent


class FoodAgent(BaseAgent):
    """Agriculture, nutrition and food security topics."""

    name = "food"
    label = "Food"
    title = "Food Security Agent"

    vocabulary = {
        "production": [
            "food", "crop", "harvest", "yield", "farm",
            "agriculture", "livestock",
        ],
        "nutrition": [
            "nutrition", "diet", "protein", "malnutrition",
            "hunger",
        ],
        "environment": [
            "climate", "drought", "warming", "soil", "water",
        ],
        "trade": [
            "export", "import", "price", "supply", "distribution",
        ],
    }

    templates = [
        "Our food security database shows that {insight} "
        "Is there a region you'd like to focus on for {topic}?",
        "When it comes to {topic}, {insight}",
        "Here's an overview of {topic}: {insight}",
        "Agricultural data on {topic} indicates that {insight}",
        "Looking at global trends for {topic}, {insight} I can "
        "also produce production figures in JSON format.",
    ]

    greeting = (
        "Hello! I'm the Food Security agent. Ask me about global "
        "agriculture trends, nutrition, sustainable farming, or "
        "food distribution."
    )

    help_text = (
        "As the Food Security agent I can explain how climate "
        "affects crop yields, discuss nutrition and hunger, "
        "describe sustainable farming practices, and generate "
        "sample production, consumption and export data (ask "
        "for it in JSON format)."
    )

    switch_message = (
        "I've routed your question about {topic} to the Food "
        "Security agent. I focus on agriculture, nutrition and "
        "food supply. What aspect of {topic} should we explore?"
    )

    def insight(self, query: str) -> str:
        if "climate" in query or "warming" in query:
            return (
                "rising temperatures affect crop yields and shifting "
                "rainfall disrupts traditional growing seasons."
            )
        elif "nutrition" in query or "diet" in query:
            return (
                "around 2 billion people lack regular access to "
                "safe, nutritious food."
            )
        elif "farm" in query or "agriculture" in query:
            return (
                "crop rotation, minimal tillage and integrated pest "
                "management maintain soil health while raising "
                "productivity."
            )
        elif "hunger" in query or "malnutrition" in query:
            return (
                "conflict, climate shocks and economic downturns are "
                "the main drivers of acute hunger."
            )
        elif "export" in query or "price" in query or "supply" in query:
            return (
                "trade restrictions and input costs are the biggest "
                "short-term drivers of food price volatility."
            )
        return (
            "agriculture trends, nutrition and distribution systems "
            "together determine food security outcomes."
        )
