"""
Clinical RAG agent.

Answers health and medical research questions from a canned
clinical knowledge table.
"""

from copilot.services.agents.base import BaseAgent


class ClinicalAgent(BaseAgent):
    """Health, disease and treatment topics."""

    name = "clinical"
    label = "Clinical"
    title = "Clinical RAG Agent"

    vocabulary = {
        "conditions": [
            "diabetes", "covid", "coronavirus", "cancer",
            "hypertension", "asthma", "obesity", "malaria",
        ],
        "treatments": [
            "treatment", "therapy", "vaccine", "medication",
            "surgery", "prevention",
        ],
        "research": [
            "clinical trial", "study", "research", "evidence",
            "outcome",
        ],
        "care": [
            "hospital", "doctor", "patient", "symptom", "diagnosis",
        ],
    }

    templates = [
        "Based on our clinical research database, {insight} "
        "Would you like me to go deeper into {topic}?",
        "Looking at the medical literature on {topic}, {insight}",
        "Here is what the evidence says about {topic}: {insight} "
        "Always confirm clinical decisions with a qualified "
        "healthcare professional.",
        "Our clinical records on {topic} suggest that {insight}",
        "From a clinical perspective, {insight} I can also pull "
        "trend data on {topic} if you ask for it in JSON format.",
    ]

    greeting = (
        "Hello! I'm the Clinical agent. I can provide "
        "evidence-based information on medical conditions, "
        "treatments, and health research. What would you like "
        "to know?"
    )

    help_text = (
        "As the Clinical agent I can summarise research on "
        "diseases such as diabetes or COVID-19, explain "
        "treatment approaches, and generate sample clinical "
        "trend data (ask for it in JSON format). This does not "
        "replace professional medical advice."
    )

    switch_message = (
        "I've routed your question about {topic} to the Clinical "
        "agent. I specialise in evidence-based health and medical "
        "research. What would you like to know about {topic}?"
    )

    def insight(self, query: str) -> str:
        if "covid" in query or "coronavirus" in query:
            return (
                "COVID-19 is caused by the SARS-CoV-2 virus and "
                "vaccination remains one of the most effective "
                "preventive measures."
            )
        elif "diabetes" in query:
            return (
                "diabetes is a chronic condition affecting how the "
                "body processes blood sugar, with Type 1 and Type 2 "
                "as the two main forms."
            )
        elif "treatment" in query or "therapy" in query:
            return (
                "treatments should always be prescribed by qualified "
                "professionals and chosen from research-backed "
                "options."
            )
        elif "vaccine" in query or "prevention" in query:
            return (
                "preventive care such as vaccination and screening "
                "consistently reduces long-term disease burden."
            )
        elif "trial" in query or "study" in query or "research" in query:
            return (
                "randomised controlled trials remain the strongest "
                "source of evidence for clinical decisions."
            )
        elif "symptom" in query or "diagnosis" in query:
            return (
                "early diagnosis based on symptom patterns "
                "significantly improves patient outcomes."
            )
        return (
            "evidence-based information is available on medical "
            "conditions, treatments, and health research."
        )
