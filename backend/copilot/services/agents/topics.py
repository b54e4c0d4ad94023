"""
Topic extraction.

Pulls candidate topic keywords out of a query using the
active agent's vocabulary, with a long-word fallback when
the vocabulary has no match.
"""

from typing import List

from copilot.services.agents.base import BaseAgent

STOP_WORDS = {"about", "would", "should", "could", "please", "thank"}
MIN_FALLBACK_LENGTH = 6


def extract_topics(query: str, agent: BaseAgent) -> List[str]:
    """
    Extract topic keywords from a query.

    Keywords are matched as case-insensitive substrings in
    vocabulary category order, then list order.  A keyword
    listed under two categories is returned twice.

    When nothing matches, whitespace-separated tokens longer
    than five characters (minus a small stop-list) are
    returned in their original order.

    Parameters:
        query (str): User query.
        agent (BaseAgent): Agent whose vocabulary is scanned.

    Returns:
        list[str]: Matched keywords, possibly empty.
    """
    lowered = query.lower()
    topics = [
        keyword
        for keywords in agent.vocabulary.values()
        for keyword in keywords
        if keyword in lowered
    ]
    if topics:
        return topics

    return [
        token
        for token in lowered.split()
        if len(token) >= MIN_FALLBACK_LENGTH
        and token not in STOP_WORDS
    ]
