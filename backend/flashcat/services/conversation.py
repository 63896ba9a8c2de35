"""
Scripted conversation practice.

Replies are picked by keyword matching against the scenario's script: each
keyword found in the lowercased user message scores its length, and the
highest-scoring response wins. Responses already triggered by an earlier
user message score half. Without any match the first fallback not used in
the last six messages is returned.
"""
from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timedelta, timezone

from flashcat.config import settings
from flashcat.models.conversation import (
    CannedResponse,
    CEFRLevel,
    Conversation,
    GrammarCorrection,
    Message,
    Role,
    TurnResult,
)
from flashcat.services.scenario_catalog import SCENARIOS_BY_ID, script_for

logger = logging.getLogger(__name__)

XP_PER_MESSAGE = 10
MAX_CONVERSATION_XP = 100
RECENT_FALLBACK_WINDOW = 6
REPEAT_PENALTY = 0.5
DEFAULT_GREETING = "Hola! Com et puc ajudar?"

_GRAMMAR_PATTERNS: list[tuple[re.Pattern[str], str, str, str]] = [
    (
        re.compile(r"\bjo tinc\b", re.I),
        "tinc",
        "In Catalan, the subject pronoun \"jo\" is often omitted when it's clear from context.",
        "grammar",
    ),
    (
        re.compile(r"\besta\b", re.I),
        "està",
        "The verb \"estar\" in third person is \"està\" with an accent on the final \"a\".",
        "accent",
    ),
    (
        re.compile(r"\bvol (.*?)\?$", re.I),
        "Vols {0}?",
        "Use \"vols\" (informal) when speaking to friends, \"vol\" is formal.",
        "word-choice",
    ),
    (
        re.compile(r"\bmucho\b", re.I),
        "molt",
        "\"Mucho\" is Spanish. In Catalan, use \"molt\" for \"very\" or \"much\".",
        "word-choice",
    ),
    (
        re.compile(r"\bpuedo\b", re.I),
        "puc",
        "\"Puedo\" is Spanish. In Catalan, \"I can\" is \"puc\".",
        "word-choice",
    ),
    (
        re.compile(r"\bgracias\b", re.I),
        "gràcies",
        "\"Gracias\" is Spanish. In Catalan, \"thank you\" is \"gràcies\".",
        "spelling",
    ),
]

_conversations: dict[str, Conversation] = {}


class ConversationNotFound(LookupError):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _message(role: Role, content: str, translation: str | None = None, corrections=None) -> Message:
    return Message(
        id=uuid.uuid4().hex,
        role=role,
        content=content,
        translation=translation,
        corrections=corrections or [],
        timestamp=_now(),
    )


def find_best_response(
    scenario_id: str, user_message: str, history: list[Message]
) -> CannedResponse:
    script = script_for(scenario_id)
    lowered = user_message.lower()

    previous_user = [m.content.lower() for m in history if m.role is Role.USER]
    already_used = {
        kr.response
        for kr in script.keyword_responses
        if any(kw in text for kw in kr.keywords for text in previous_user)
    }

    best: CannedResponse | None = None
    best_score = 0.0
    for kr in script.keyword_responses:
        score = sum(len(kw) for kw in kr.keywords if kw.lower() in lowered)
        if score == 0:
            continue
        if kr.response in already_used:
            score *= REPEAT_PENALTY
        if score > best_score:
            best = CannedResponse(response=kr.response, translation=kr.translation)
            best_score = score
    if best is not None:
        return best

    recent = {
        m.content for m in history[-RECENT_FALLBACK_WINDOW:] if m.role is Role.ASSISTANT
    }
    fresh = [fb for fb in script.fallback_responses if fb.response not in recent]
    return (fresh or script.fallback_responses)[0]


def analyze_grammar(text: str) -> list[GrammarCorrection]:
    lowered = text.lower()
    corrections = []
    for pattern, replacement, explanation, kind in _GRAMMAR_PATTERNS:
        match = pattern.search(lowered)
        if match:
            corrections.append(
                GrammarCorrection(
                    original=match.group(0),
                    corrected=replacement.format(*(g or "" for g in match.groups())),
                    explanation=explanation,
                    type=kind,
                )
            )
    return corrections


def purge_stale_conversations(now: datetime | None = None) -> int:
    cutoff = (now or _now()) - timedelta(hours=settings.stale_after_hours)
    stale = [cid for cid, c in _conversations.items() if c.started_at < cutoff]
    for cid in stale:
        del _conversations[cid]
    if stale:
        logger.info("Evicted %d stale conversations", len(stale))
    return len(stale)


def start_conversation(scenario_id: str) -> Conversation:
    purge_stale_conversations()
    scenario = SCENARIOS_BY_ID.get(scenario_id)
    if scenario is None:
        logger.info("Unknown scenario %s, using free conversation script", scenario_id)
    greeting = _message(
        Role.ASSISTANT,
        scenario.starter_prompt if scenario else DEFAULT_GREETING,
        scenario.starter_prompt_english if scenario else None,
    )
    conversation = Conversation(
        id=uuid.uuid4().hex,
        scenario_id=scenario_id,
        level=scenario.level if scenario else CEFRLevel.A1,
        messages=[greeting],
        started_at=_now(),
    )
    _conversations[conversation.id] = conversation
    return conversation


def get_conversation(conversation_id: str) -> Conversation:
    conversation = _conversations.get(conversation_id)
    if conversation is None:
        raise ConversationNotFound(conversation_id)
    return conversation


def end_conversation(conversation_id: str) -> Conversation:
    conversation = get_conversation(conversation_id)
    del _conversations[conversation_id]
    return conversation


def process_user_message(conversation: Conversation, text: str) -> TurnResult:
    """Append the user's turn and the scripted reply; award conversation XP."""
    corrections = analyze_grammar(text)
    user_msg = _message(Role.USER, text, corrections=corrections)
    reply = find_best_response(conversation.scenario_id, text, conversation.messages)
    assistant_msg = _message(Role.ASSISTANT, reply.response, reply.translation)

    xp = min(XP_PER_MESSAGE, MAX_CONVERSATION_XP - conversation.xp_earned)
    conversation.messages.extend([user_msg, assistant_msg])
    conversation.xp_earned += max(0, xp)
    return TurnResult(user_message=user_msg, assistant_message=assistant_msg, xp_awarded=max(0, xp))
