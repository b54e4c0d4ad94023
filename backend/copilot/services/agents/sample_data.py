"""
Sample-data generator.

Fabricates a ten-year time series when a query asks for
data in JSON format.  Values are independent random draws
per field and per year; pass a seeded ``random.Random`` for
reproducible output.
"""

import random
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from copilot.schemas import Dataset
from copilot.services.agents.base import BaseAgent

STRUCTURED_DATA_TRIGGERS = ("json", "data format", "format data")
WINDOW_YEARS = 10
FALLBACK_TOPIC = "general"


def wants_structured_data(query: str) -> bool:
    """Return True when the query asks for JSON / formatted data."""
    lowered = query.lower()
    return any(trigger in lowered for trigger in STRUCTURED_DATA_TRIGGERS)


def _clinical_record(rng: random.Random) -> Dict[str, Any]:
    cases = rng.randint(1000, 10000)
    return {
        "cases": cases,
        "recoveries": rng.randint(500, cases),
        "treatments": rng.randint(100, 5000),
    }


def _food_record(rng: random.Random) -> Dict[str, Any]:
    return {
        "production": rng.randint(1000, 10000),
        "consumption": rng.randint(800, 9000),
        "export": rng.randint(0, 3000),
    }


def _general_record(rng: random.Random) -> Dict[str, Any]:
    return {
        "value": rng.randint(100, 1000),
        "growth": f"{rng.uniform(-5, 10):.1f}",
        "indicator": rng.randint(0, 100),
    }


RECORD_BUILDERS: Dict[str, Callable[[random.Random], Dict[str, Any]]] = {
    "clinical": _clinical_record,
    "food": _food_record,
    "general": _general_record,
}


def year_window(today: Optional[date] = None) -> List[str]:
    """
    Return the ten consecutive years ending at ``today.year``.

    Parameters:
        today (date, optional): Reference date (defaults to now).

    Returns:
        list[str]: Ascending year labels.
    """
    end = (today or date.today()).year
    return [str(year) for year in range(end - WINDOW_YEARS + 1, end + 1)]


def generate_sample_data(
    agent: BaseAgent,
    topics: List[str],
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> Dataset:
    """
    Build a sample dataset for an agent.

    Parameters:
        agent (BaseAgent): Agent that owns the reply.
        topics (list[str]): Topics extracted this turn; the
            first one names the dataset.
        rng (random.Random, optional): Random source.
        today (date, optional): Reference date for the window.

    Returns:
        Dataset: Title, description, year labels and one
        record per year.
    """
    rng = rng or random.Random()
    topic = topics[0] if topics else FALLBACK_TOPIC
    build_record = RECORD_BUILDERS[agent.name]

    years = year_window(today)
    data = [{"year": year, **build_record(rng)} for year in years]

    return Dataset(
        title=f"{topic.title()} {agent.label} Data",
        description=(
            f"Sample {agent.label.lower()} data for {topic} "
            f"over the last {WINDOW_YEARS} years"
        ),
        years=years,
        data=data,
    )
