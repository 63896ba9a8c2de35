"""
Study session orchestration.

A session is a shuffled deck of due (card, direction) pairs held in an
in-process registry. Each answer is scheduled immediately and earns XP;
ending the session records totals, advances challenges and checks
achievements. Challenge and achievement bookkeeping is best-effort and
never fails the request.
"""
from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

import aiosqlite

from flashcat.config import settings
from flashcat.db import sqlite as sqlite_db
from flashcat.models.challenge import SessionOutcome
from flashcat.models.flashcard import StudyCard, StudyDirection, StudyMode, StudyResult
from flashcat.models.session import AnswerRequest, AnswerResult, SessionState, SessionSummary
from flashcat.services import achievements, challenges, gamification, mistakes, scheduler
from flashcat.services.answer_check import check_answer
from flashcat.services.card_store import CardStore

logger = logging.getLogger(__name__)


class NoCardsDue(Exception):
    """Raised when a session is requested but nothing is due."""


class SessionNotFound(LookupError):
    pass


class InvalidAnswer(ValueError):
    """Raised for answers the current session state cannot accept."""


@dataclass
class StudySession:
    id: str
    mode: StudyMode
    cards: list[StudyCard]
    current_index: int = 0
    results: list[StudyResult] = field(default_factory=list)
    answered: set[int] = field(default_factory=set)
    perfect_streak: int = 0
    best_perfect_streak: int = 0
    xp_earned: int = 0
    cards_mastered: int = 0
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def current_card(self) -> StudyCard | None:
        if self.current_index < len(self.cards):
            return self.cards[self.current_index]
        return None

    @property
    def is_complete(self) -> bool:
        return self.current_index >= len(self.cards)

    def state(self) -> SessionState:
        total = len(self.cards)
        return SessionState(
            id=self.id,
            mode=self.mode,
            cards=self.cards,
            current_index=self.current_index,
            results=self.results,
            perfect_streak=self.perfect_streak,
            current_card=self.current_card,
            progress=round(min(self.current_index, total) / total * 100) if total else 100,
            is_complete=self.is_complete,
        )


_sessions: dict[str, StudySession] = {}


def purge_stale_sessions(now: datetime | None = None) -> int:
    """Drop sessions started more than ``stale_after_hours`` ago."""
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(hours=settings.stale_after_hours)
    stale = [sid for sid, s in _sessions.items() if s.started_at < cutoff]
    for sid in stale:
        del _sessions[sid]
    if stale:
        logger.info("Evicted %d stale study sessions", len(stale))
    return len(stale)


def register_session(session: StudySession) -> StudySession:
    purge_stale_sessions()
    _sessions[session.id] = session
    return session


def get_session(session_id: str) -> StudySession:
    session = _sessions.get(session_id)
    if session is None:
        raise SessionNotFound(session_id)
    return session


def discard_session(session_id: str) -> None:
    _sessions.pop(session_id, None)


def expected_answer(card: StudyCard) -> str:
    if card.direction is StudyDirection.ENGLISH_TO_CATALAN:
        return card.flashcard.back
    return card.flashcard.front


# --- Operations ---


async def start_session(
    db: aiosqlite.Connection,
    mode: StudyMode = StudyMode.MIXED,
    limit: int | None = None,
    today: date | None = None,
    rng: random.Random | None = None,
) -> StudySession:
    today = today or date.today()
    store = await CardStore.load(db)
    deck = store.study_deck(limit or settings.session_card_limit, today, rng)
    if not deck:
        raise NoCardsDue("No cards are due for review")

    streak = gamification.update_streak(await sqlite_db.get_user_progress(db), today)
    if streak.changed:
        await sqlite_db.save_user_progress(db, streak.progress)
        if streak.used_freeze:
            logger.info("Streak freeze used to keep a %d-day streak", streak.progress.current_streak)

    session = register_session(StudySession(id=uuid.uuid4().hex, mode=mode, cards=deck))
    logger.info("Started %s session %s with %d cards", mode.value, session.id, len(deck))
    return session


def _resolve_quality(
    card: StudyCard, body: AnswerRequest
) -> tuple[int, bool, str | None, str | None]:
    """Return (quality, fully_correct, match_type, feedback) for an answer."""
    if body.user_answer is not None:
        result = check_answer(body.user_answer, expected_answer(card))
        quality = scheduler.quality_from_typing_result(
            result.is_correct, result.is_acceptable, body.time_spent_ms or 0
        )
        return quality, result.is_correct, result.match_type, result.feedback
    for grade in (body.quality, body.grade, body.correct):
        if grade is not None:
            quality = scheduler.quality_for(grade)
            return quality, quality >= scheduler.PASSING_QUALITY, None, None
    raise InvalidAnswer("Provide a grade, quality, correct flag or typed answer")


async def submit_answer(
    db: aiosqlite.Connection,
    session_id: str,
    body: AnswerRequest,
    today: date | None = None,
) -> AnswerResult:
    today = today or date.today()
    session = get_session(session_id)
    card = session.current_card
    if card is None:
        raise InvalidAnswer("Session has no more cards")
    if session.current_index in session.answered:
        raise InvalidAnswer("Current card was already answered")

    quality, fully_correct, match_type, feedback = _resolve_quality(card, body)

    store = await CardStore.load(db)
    review = await store.review(card.flashcard.id, card.direction, quality, today)
    if not fully_correct:
        await mistakes.record_mistake(
            db,
            mistakes.mistake_for(
                card.flashcard, card.direction, expected_answer(card), body.user_answer
            ),
        )

    progress = await sqlite_db.get_user_progress(db)
    # cards from finished sessions today, plus this one
    cards_today = gamification.cards_studied_today(progress, today) + len(session.results) + 1
    xp = gamification.xp_for_quality(quality) + gamification.daily_bonus(
        cards_today, settings.daily_goal
    )
    progress, awarded = gamification.award_xp(progress, xp, today)
    if review.newly_mastered:
        session.cards_mastered += 1
        progress = gamification.update_cards_learned(progress, store.mastered_card_count())
    await sqlite_db.save_user_progress(db, progress)

    if quality == 5:
        session.perfect_streak += 1
        session.best_perfect_streak = max(session.best_perfect_streak, session.perfect_streak)
    else:
        session.perfect_streak = 0

    result = StudyResult(
        card_id=card.flashcard.id,
        direction=card.direction,
        mode=session.mode,
        quality=quality,
        is_correct=quality >= scheduler.PASSING_QUALITY,
        time_spent_ms=body.time_spent_ms or 0,
        user_answer=body.user_answer,
        answered_at=datetime.now(timezone.utc),
    )
    session.results.append(result)
    session.answered.add(session.current_index)
    session.cards[session.current_index] = card.model_copy(update={"progress": review.progress})
    session.xp_earned += awarded

    return AnswerResult(
        result=result,
        xp_awarded=awarded,
        perfect_streak=session.perfect_streak,
        newly_mastered=review.newly_mastered,
        match_type=match_type,
        feedback=feedback,
    )


def next_card(session_id: str) -> SessionState:
    session = get_session(session_id)
    if not session.is_complete:
        session.current_index += 1
    return session.state()


def _outcome(session: StudySession) -> SessionOutcome:
    results = session.results
    correct = sum(1 for r in results if r.is_correct)
    categories: dict[str, int] = {}
    by_id = {c.flashcard.id: c.flashcard.category for c in session.cards}
    for r in results:
        category = by_id.get(r.card_id)
        if category:
            categories[category] = categories.get(category, 0) + 1
    return SessionOutcome(
        cards_reviewed=len(results),
        cards_mastered=session.cards_mastered,
        accuracy=correct / len(results) * 100 if results else 0.0,
        best_perfect_streak=session.best_perfect_streak,
        fast_answers=sum(
            1
            for r in results
            if r.is_correct and 0 < r.time_spent_ms < challenges.FAST_ANSWER_MS
        ),
        typed_correct=sum(1 for r in results if r.is_correct and r.user_answer is not None),
        categories_reviewed=categories,
    )


async def end_session(
    db: aiosqlite.Connection, session_id: str, today: date | None = None
) -> SessionSummary:
    today = today or date.today()
    session = get_session(session_id)
    outcome = _outcome(session)
    correct = sum(1 for r in session.results if r.is_correct)
    time_spent = sum(r.time_spent_ms for r in session.results)

    progress = gamification.record_study_session(
        await sqlite_db.get_user_progress(db), len(session.results), correct, time_spent, today
    )
    await sqlite_db.save_user_progress(db, progress)

    if session.results:
        try:
            bonus = await challenges.record_session_outcome(db, outcome, today)
            if bonus:
                progress, _ = gamification.award_xp(progress, bonus, today)
                await sqlite_db.save_user_progress(db, progress)
        except Exception:
            logger.warning("Challenge update failed for session %s", session_id, exc_info=True)

    new_achievements: list[str] = []
    try:
        new_achievements = await _grant_achievements(db, session, today)
    except Exception:
        logger.warning("Achievement check failed for session %s", session_id, exc_info=True)

    discard_session(session_id)
    logger.info(
        "Ended session %s: %d answers, %d correct", session_id, len(session.results), correct
    )
    return SessionSummary(
        total_cards=len(session.results),
        correct_answers=correct,
        accuracy=round(outcome.accuracy),
        xp_earned=session.xp_earned,
        time_spent_ms=time_spent,
        perfect_streak=session.best_perfect_streak,
        new_achievements=new_achievements,
    )


async def _grant_achievements(
    db: aiosqlite.Connection, session: StudySession, today: date
) -> list[str]:
    store = await CardStore.load(db)
    progress = await sqlite_db.get_user_progress(db)
    ctx = achievements.AchievementContext(
        progress=progress,
        card_progress=store.progress,
        flashcards=store.cards,
        perfect_streak=session.best_perfect_streak,
        unlocked=await sqlite_db.list_unlocked_achievements(db),
    )
    granted: list[str] = []
    now = datetime.now(timezone.utc)
    for achievement in achievements.check_achievements(ctx):
        if await sqlite_db.unlock_achievement(db, achievement.id, now):
            progress, _ = gamification.award_xp(progress, achievement.xp_reward, today)
            granted.append(achievement.id)
            logger.info("Unlocked achievement %s", achievement.id)
    if granted:
        await sqlite_db.save_user_progress(db, progress)
    return granted
