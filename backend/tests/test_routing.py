"""Unit tests for agent routing, topic extraction and context updates."""

import pytest

from copilot.schemas import ConversationContext
from copilot.services.agents import get_agent
from copilot.services.agents.context import (
    DEFAULT_TOPIC,
    topic_or_default,
    update_context,
)
from copilot.services.agents.router import route_query
from copilot.services.agents.topics import extract_topics


class TestRouteQuery:
    """Keyword routing with clinical priority and sticky fallback."""

    @pytest.mark.parametrize("current", ["general", "clinical", "food"])
    @pytest.mark.parametrize(
        "query",
        [
            "clinical guidelines",
            "any medical news?",
            "Public HEALTH statistics",
            "heart disease rates",
            "what treatment works",
            "ask a doctor",
        ],
    )
    def test_clinical_trigger_always_wins(self, query, current):
        assert route_query(query, current) == "clinical"

    @pytest.mark.parametrize(
        "query",
        ["food prices", "agriculture", "crop yields", "farm size",
         "nutrition facts", "world hunger"],
    )
    def test_food_trigger(self, query):
        assert route_query(query, "general") == "food"

    def test_clinical_beats_food(self):
        assert route_query("food and health policy", "food") == "clinical"
        assert route_query("nutrition treatment plans", "general") == "clinical"

    def test_no_trigger_keeps_current_agent(self):
        assert route_query("tell me more", "food") == "food"
        assert route_query("tell me more", "clinical") == "clinical"
        assert route_query("tell me more", "general") == "general"

    def test_general_is_never_selected_by_keyword(self):
        assert route_query("general question", "food") == "food"


class TestExtractTopics:
    """Vocabulary matching and the long-word fallback."""

    def test_category_order_then_list_order(self):
        clinical = get_agent("clinical")
        topics = extract_topics("What about diabetes treatment?", clinical)
        assert topics == ["diabetes", "treatment"]

    def test_match_is_case_insensitive(self):
        food = get_agent("food")
        assert extract_topics("CROP Harvest", food) == ["crop", "harvest"]

    def test_fallback_keeps_long_tokens_in_order(self):
        general = get_agent("general")
        topics = extract_topics(
            "please explain quantum entanglement briefly", general,
        )
        assert topics == ["explain", "quantum", "entanglement", "briefly"]

    def test_fallback_drops_stop_words_and_short_tokens(self):
        general = get_agent("general")
        assert extract_topics("should we go now", general) == []

    def test_vocabulary_match_disables_fallback(self):
        general = get_agent("general")
        assert extract_topics("explain inflation thoroughly", general) == [
            "inflation",
        ]

    def test_matches_span_categories(self):
        general = get_agent("general")
        # "land" (environment) is listed before "trade" (economy)
        # in the query, but economy is scanned first.
        assert extract_topics("land and trade", general) == ["trade", "land"]


class TestUpdateContext:
    """Context snapshots are replaced, topics carried when absent."""

    def test_new_topic_replaces_old(self):
        previous = ConversationContext(current_topic="diabetes")
        context = update_context(previous, "covid?", ["covid"], False, False)
        assert context.current_topic == "covid"
        assert context.last_query == "covid?"

    def test_topic_carried_when_none_extracted(self):
        previous = ConversationContext(current_topic="diabetes")
        context = update_context(previous, "ok", [], True, True)
        assert context.current_topic == "diabetes"
        assert context.json_requested is True
        assert context.agent_switched is True

    def test_flags_overwritten_each_turn(self):
        previous = ConversationContext(
            json_requested=True, agent_switched=True,
        )
        context = update_context(previous, "next", [], False, False)
        assert context.json_requested is False
        assert context.agent_switched is False

    def test_previous_snapshot_is_not_mutated(self):
        previous = ConversationContext()
        update_context(previous, "covid", ["covid"], True, True)
        assert previous == ConversationContext()

    def test_default_topic_placeholder(self):
        assert topic_or_default(ConversationContext()) == DEFAULT_TOPIC
        assert DEFAULT_TOPIC == "this subject"
