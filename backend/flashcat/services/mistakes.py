"""
Mistake history and weakness analysis.

Every answer that is not fully correct is kept as a ``MistakeRecord`` in the
``mistake-history`` document, capped to the newest ``MAX_HISTORY_SIZE``
entries. The history feeds the error-pattern breakdown and the weakness
deck, which ranks (card, direction) pairs by low ease, low accuracy and
mistake count.
"""
from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta, timezone

import aiosqlite

from flashcat.db.local_store import LocalStore
from flashcat.models.flashcard import (
    CardProgress,
    Flashcard,
    Gender,
    StudyCard,
    StudyDirection,
)
from flashcat.models.mistake import (
    ConfusionPair,
    ErrorPatternAnalysis,
    MistakeHistory,
    MistakeRecord,
    MistakeType,
)
from flashcat.services import due_selector, scheduler
from flashcat.services.answer_check import levenshtein
from flashcat.services.store_versioning import VersionedStorage

logger = logging.getLogger(__name__)

MAX_HISTORY_SIZE = 500
DEFAULT_WEAKNESS_DECK_LIMIT = 20
SPELLING_SIMILARITY = 0.5
MAX_CONFUSION_PAIRS = 10

_GENDER_ARTICLES = {
    Gender.MASCULINE: ("el ", "un ", "lo "),
    Gender.FEMININE: ("la ", "una "),
}

mistake_store = LocalStore("mistake-history", VersionedStorage(current_version=1))


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def classify_mistake(
    user_answer: str, correct_answer: str, gender: Gender | None = None
) -> MistakeType:
    user = user_answer.lower().strip()
    correct = correct_answer.lower().strip()

    if gender is not None:
        wrong = Gender.FEMININE if gender is Gender.MASCULINE else Gender.MASCULINE
        if user.startswith(_GENDER_ARTICLES[wrong]):
            return MistakeType.GENDER

    if _strip_accents(user) == _strip_accents(correct):
        return MistakeType.ACCENT

    longest = max(len(user), len(correct))
    similarity = 1 - levenshtein(user, correct) / longest if longest else 1.0
    if similarity > SPELLING_SIMILARITY:
        return MistakeType.SPELLING
    return MistakeType.WRONG


def mistake_for(
    card: Flashcard,
    direction: StudyDirection,
    correct_answer: str,
    user_answer: str | None,
    now: datetime | None = None,
) -> MistakeRecord:
    """Build the record for a missed answer; ungraded text counts as wrong."""
    if user_answer:
        error_type = classify_mistake(user_answer, correct_answer, card.gender)
    else:
        error_type = MistakeType.WRONG
    return MistakeRecord(
        card_id=card.id,
        direction=direction,
        timestamp=now or datetime.now(timezone.utc),
        error_type=error_type,
        user_answer=user_answer or "",
        correct_answer=correct_answer,
    )


# --- Analysis ---


def confusion_pairs(mistakes: Iterable[MistakeRecord]) -> list[ConfusionPair]:
    """Word pairs mixed up at least twice, most frequent first."""
    seen: dict[tuple[str, str], tuple[int, datetime]] = {}
    for m in mistakes:
        first, second = sorted((m.user_answer.lower().strip(), m.correct_answer.lower().strip()))
        if len(first) < 2:
            continue
        count, last = seen.get((first, second), (0, m.timestamp))
        seen[(first, second)] = (count + 1, max(last, m.timestamp))

    pairs = [
        ConfusionPair(word1=w1, word2=w2, confusion_count=count, last_confused=last)
        for (w1, w2), (count, last) in seen.items()
        if count >= 2
    ]
    pairs.sort(key=lambda p: p.confusion_count, reverse=True)
    return pairs[:MAX_CONFUSION_PAIRS]


def analyze_error_patterns(mistakes: list[MistakeRecord]) -> ErrorPatternAnalysis:
    counts = {t: 0 for t in MistakeType}
    for m in mistakes:
        counts[m.error_type] += 1

    most_common = MistakeType.WRONG
    if mistakes:
        most_common = max(counts, key=lambda t: counts[t])

    return ErrorPatternAnalysis(
        accent_errors=counts[MistakeType.ACCENT],
        spelling_errors=counts[MistakeType.SPELLING],
        gender_errors=counts[MistakeType.GENDER],
        wrong_answers=counts[MistakeType.WRONG],
        total=len(mistakes),
        most_common_type=most_common,
        confusion_pairs=confusion_pairs(mistakes),
    )


def recent_mistakes(
    mistakes: Iterable[MistakeRecord], days: int, now: datetime | None = None
) -> list[MistakeRecord]:
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=days)
    return [m for m in mistakes if m.timestamp >= cutoff]


def weakness_deck(
    cards: Iterable[Flashcard],
    progress: Mapping[str, CardProgress],
    mistakes: Iterable[MistakeRecord],
    limit: int = DEFAULT_WEAKNESS_DECK_LIMIT,
) -> list[StudyCard]:
    """Rank pairs by weakness. Every card in the deck requires typing."""
    per_card: dict[str, int] = {}
    for m in mistakes:
        per_card[m.card_id] = per_card.get(m.card_id, 0) + 1

    scored: list[tuple[float, StudyCard]] = []
    for card, direction, p in due_selector.iter_pairs(cards, progress):
        score = per_card.get(card.id, 0) * 5.0
        if p is not None:
            score += (3 - p.ease_factor) * 10
            if p.total_reviews > 0:
                score += (1 - p.correct_reviews / p.total_reviews) * 20
        if score <= 0:
            continue
        scored.append(
            (
                score,
                StudyCard(
                    flashcard=card,
                    progress=p or scheduler.create_initial_progress(card.id, direction),
                    direction=direction,
                    requires_typing=True,
                    is_new=p is None,
                ),
            )
        )

    scored.sort(key=lambda item: item[0], reverse=True)
    return [sc for _, sc in scored[: max(0, limit)]]


# --- Persistence ---


async def load_mistakes(db: aiosqlite.Connection) -> list[MistakeRecord]:
    data = await mistake_store.load(db)
    return MistakeHistory.model_validate(data).mistakes if data else []


async def record_mistake(db: aiosqlite.Connection, mistake: MistakeRecord) -> None:
    history = await load_mistakes(db)
    history.append(mistake)
    if len(history) > MAX_HISTORY_SIZE:
        history = history[-MAX_HISTORY_SIZE:]
    await mistake_store.save(db, MistakeHistory(mistakes=history).model_dump(mode="json"))
    logger.debug("Recorded %s mistake for %s", mistake.error_type.value, mistake.card_id)


async def clear_mistakes(db: aiosqlite.Connection) -> None:
    await mistake_store.save(db, MistakeHistory().model_dump(mode="json"))
