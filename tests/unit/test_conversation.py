"""Unit tests for scripted conversation replies and grammar hints."""
from datetime import timedelta

import pytest

from flashcat.models.conversation import CEFRLevel, Role
from flashcat.services import conversation
from flashcat.services.scenario_catalog import FREE_CHAT_ID, SCENARIOS, SCRIPTS, script_for


def test_every_scenario_has_a_script():
    assert {s.id for s in SCENARIOS} <= set(SCRIPTS)
    assert script_for("no-such-scenario") is SCRIPTS[FREE_CHAT_ID]


class TestFindBestResponse:
    def test_keyword_match(self):
        reply = conversation.find_best_response("restaurant-order", "Una cervesa, si us plau", [])
        assert reply.response.startswith("Molt bé, una cervesa")

    def test_longer_keywords_score_higher(self):
        reply = conversation.find_best_response("restaurant-order", "Vi negre o blanc?", [])
        assert "Rioja" in reply.response

    def test_repeated_topic_is_penalised(self):
        conv = conversation.start_conversation("restaurant-order")
        conversation.process_user_message(conv, "cervesa")
        reply = conversation.find_best_response(
            "restaurant-order", "cervesa o aigua", conv.messages
        )
        assert reply.response.startswith("Perfecte, una aigua")

    def test_fallbacks_rotate(self):
        script = SCRIPTS["restaurant-order"]
        conv = conversation.start_conversation("restaurant-order")
        first = conversation.process_user_message(conv, "Hmm")
        second = conversation.process_user_message(conv, "Hmm")
        assert first.assistant_message.content == script.fallback_responses[0].response
        assert second.assistant_message.content == script.fallback_responses[1].response


class TestAnalyzeGrammar:
    def test_clean_sentence(self):
        assert conversation.analyze_grammar("Bon dia, vull un cafè") == []

    def test_spanish_words(self):
        corrections = conversation.analyze_grammar("Mucho gracias")
        assert [c.corrected for c in corrections] == ["molt", "gràcies"]
        assert corrections[1].type == "spelling"

    def test_redundant_pronoun(self):
        (correction,) = conversation.analyze_grammar("Jo tinc gana")
        assert correction.original == "jo tinc"
        assert correction.corrected == "tinc"
        assert correction.type == "grammar"


class TestConversationLifecycle:
    def test_start_known_scenario(self):
        conv = conversation.start_conversation("asking-directions")
        assert conv.level is CEFRLevel.A2
        assert len(conv.messages) == 1
        assert conv.messages[0].role is Role.ASSISTANT
        assert conv.messages[0].translation
        assert conversation.get_conversation(conv.id) is conv

    def test_start_unknown_scenario_uses_default_greeting(self):
        conv = conversation.start_conversation("mystery")
        assert conv.messages[0].content == conversation.DEFAULT_GREETING
        assert conv.level is CEFRLevel.A1

    def test_turn_appends_both_messages(self):
        conv = conversation.start_conversation("restaurant-order")
        turn = conversation.process_user_message(conv, "Jo tinc set")
        assert [m.role for m in conv.messages] == [Role.ASSISTANT, Role.USER, Role.ASSISTANT]
        assert turn.user_message.corrections
        assert turn.xp_awarded == conversation.XP_PER_MESSAGE

    def test_xp_is_capped(self):
        conv = conversation.start_conversation("restaurant-order")
        awarded = [conversation.process_user_message(conv, "hola").xp_awarded for _ in range(12)]
        assert sum(awarded) == conversation.MAX_CONVERSATION_XP
        assert awarded[-1] == 0
        assert conv.xp_earned == conversation.MAX_CONVERSATION_XP

    def test_end_removes_conversation(self):
        conv = conversation.start_conversation("restaurant-order")
        conversation.end_conversation(conv.id)
        with pytest.raises(conversation.ConversationNotFound):
            conversation.get_conversation(conv.id)

    def test_stale_conversations_are_evicted(self):
        old = conversation.start_conversation("restaurant-order")
        old.started_at -= timedelta(hours=25)
        fresh = conversation.start_conversation("restaurant-order")
        assert conversation.get_conversation(fresh.id) is fresh
        with pytest.raises(conversation.ConversationNotFound):
            conversation.get_conversation(old.id)

    def test_purge_keeps_recent_conversations(self):
        conv = conversation.start_conversation("restaurant-order")
        assert conversation.purge_stale_conversations() == 0
        assert conversation.purge_stale_conversations(conv.started_at + timedelta(hours=25)) == 1
