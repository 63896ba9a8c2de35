"""
Daily and weekly challenges.

Three daily challenges are drawn from a fixed template pool each day, and
one easy, one medium and one hard weekly challenge each week (weeks start
on Monday). Session outcomes advance the current challenges; a challenge
pays its XP reward once, the first time it is completed. Finishing every
weekly challenge pays a one-off bonus.

State is kept as versioned documents in the local store. A document from
an earlier day or week is replaced by a fresh draw when loaded.
"""
from __future__ import annotations

import logging
import random
from datetime import date, datetime, timedelta, timezone

import aiosqlite

from flashcat.db.local_store import LocalStore
from flashcat.models.challenge import (
    Challenge,
    ChallengeTemplate,
    ChallengeType,
    DailyChallengeState,
    Difficulty,
    SessionOutcome,
    WeeklyChallengeState,
)
from flashcat.services.store_versioning import VersionedStorage

logger = logging.getLogger(__name__)

DAILY_CHALLENGE_COUNT = 3
WEEKLY_COMPLETION_BONUS = 500
FAST_ANSWER_MS = 3000

_T = ChallengeType

DAILY_TEMPLATES: list[ChallengeTemplate] = [
    ChallengeTemplate(type=_T.REVIEW_CARDS, title="Card Collector",
                      description="Review {target} cards today",
                      target=20, xp_reward=50, bonus_multiplier=1.2),
    ChallengeTemplate(type=_T.REVIEW_CARDS, title="Dedicated Learner",
                      description="Review {target} cards today",
                      target=30, xp_reward=75, bonus_multiplier=1.3),
    ChallengeTemplate(type=_T.PERFECT_STREAK, title="Perfectionist",
                      description="Get {target} perfect answers in a row",
                      target=5, xp_reward=60, bonus_multiplier=1.25),
    ChallengeTemplate(type=_T.PERFECT_STREAK, title="Flawless",
                      description="Get {target} perfect answers in a row",
                      target=10, xp_reward=100, bonus_multiplier=1.4),
    ChallengeTemplate(type=_T.SPEED_ROUND, title="Speed Demon",
                      description="Answer {target} cards in under 3 seconds each",
                      target=10, xp_reward=70, bonus_multiplier=1.3),
    ChallengeTemplate(type=_T.ACCURACY_GOAL, title="Sharp Mind",
                      description="Achieve {target}% accuracy in a session",
                      target=90, xp_reward=80, bonus_multiplier=1.35),
    ChallengeTemplate(type=_T.TYPING_PRACTICE, title="Keyboard Warrior",
                      description="Type {target} correct answers",
                      target=10, xp_reward=65, bonus_multiplier=1.25),
    ChallengeTemplate(type=_T.CATEGORY_FOCUS, title="Verb Master",
                      description="Review {target} verb cards",
                      target=10, xp_reward=55, bonus_multiplier=1.2, category="Verbs"),
    ChallengeTemplate(type=_T.CATEGORY_FOCUS, title="Number Ninja",
                      description="Review {target} number cards",
                      target=8, xp_reward=50, bonus_multiplier=1.2, category="Numbers"),
]

_E, _M, _H = Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD

WEEKLY_TEMPLATES: list[ChallengeTemplate] = [
    ChallengeTemplate(type=_T.REVIEW_CARDS, title="Weekly Explorer",
                      description="Review {target} cards this week",
                      target=100, xp_reward=150, bonus_multiplier=1.3, difficulty=_E),
    ChallengeTemplate(type=_T.STREAK_DAYS, title="Consistent Learner",
                      description="Study for {target} days this week",
                      target=5, xp_reward=125, bonus_multiplier=1.25, difficulty=_E),
    ChallengeTemplate(type=_T.ACCURACY_CHAMPION, title="Precision Player",
                      description="Maintain {target}% average accuracy",
                      target=80, xp_reward=100, bonus_multiplier=1.2, difficulty=_E),
    ChallengeTemplate(type=_T.REVIEW_CARDS, title="Weekly Warrior",
                      description="Review {target} cards this week",
                      target=200, xp_reward=300, bonus_multiplier=1.5, difficulty=_M),
    ChallengeTemplate(type=_T.MASTER_CARDS, title="Knowledge Builder",
                      description="Master {target} new cards",
                      target=10, xp_reward=250, bonus_multiplier=1.4, difficulty=_M),
    ChallengeTemplate(type=_T.STREAK_DAYS, title="Perfect Week",
                      description="Study every day this week",
                      target=7, xp_reward=200, bonus_multiplier=1.35, difficulty=_M),
    ChallengeTemplate(type=_T.PERFECT_SESSIONS, title="Flawless Performance",
                      description="Complete {target} sessions with 90%+ accuracy",
                      target=5, xp_reward=275, bonus_multiplier=1.45, difficulty=_M),
    ChallengeTemplate(type=_T.CATEGORY_FOCUS, title="Verb Veteran",
                      description="Review {target} verb cards",
                      target=50, xp_reward=200, bonus_multiplier=1.3,
                      category="Verbs", difficulty=_M),
    ChallengeTemplate(type=_T.REVIEW_CARDS, title="Weekly Champion",
                      description="Review {target} cards this week",
                      target=350, xp_reward=500, bonus_multiplier=1.75, difficulty=_H),
    ChallengeTemplate(type=_T.MASTER_CARDS, title="Mastery Machine",
                      description="Master {target} new cards",
                      target=25, xp_reward=450, bonus_multiplier=1.6, difficulty=_H),
    ChallengeTemplate(type=_T.SPEED_MASTERY, title="Speed Demon",
                      description="Answer {target} cards in under 3 seconds each",
                      target=100, xp_reward=400, bonus_multiplier=1.55, difficulty=_H),
    ChallengeTemplate(type=_T.ACCURACY_CHAMPION, title="Perfectionist",
                      description="Maintain {target}% average accuracy",
                      target=95, xp_reward=425, bonus_multiplier=1.6, difficulty=_H),
]

daily_store = LocalStore("daily-challenges", VersionedStorage(current_version=1))
weekly_store = LocalStore("weekly-challenges", VersionedStorage(current_version=1))


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def _instantiate(
    template: ChallengeTemplate, challenge_id: str, starts_on: date, expires_on: date
) -> Challenge:
    return Challenge(
        id=challenge_id,
        type=template.type,
        title=template.title,
        description=template.description.replace("{target}", str(template.target)),
        target=template.target,
        xp_reward=template.xp_reward,
        bonus_multiplier=template.bonus_multiplier,
        starts_on=starts_on,
        expires_on=expires_on,
        category=template.category,
        difficulty=template.difficulty,
    )


def generate_daily_challenges(
    today: date, rng: random.Random | None = None
) -> DailyChallengeState:
    rng = rng or random.Random()
    picked = rng.sample(DAILY_TEMPLATES, DAILY_CHALLENGE_COUNT)
    return DailyChallengeState(
        day=today,
        challenges=[
            _instantiate(t, f"daily-{today.isoformat()}-{i}", today, today)
            for i, t in enumerate(picked)
        ],
    )


def generate_weekly_challenges(
    today: date, rng: random.Random | None = None
) -> WeeklyChallengeState:
    rng = rng or random.Random()
    start = week_start(today)
    end = start + timedelta(days=6)
    picked = [
        rng.choice([t for t in WEEKLY_TEMPLATES if t.difficulty is level])
        for level in (_E, _M, _H)
    ]
    return WeeklyChallengeState(
        week_start=start,
        challenges=[
            _instantiate(t, f"weekly-{start.isoformat()}-{i}", start, end)
            for i, t in enumerate(picked)
        ],
    )


def _advance(challenge: Challenge, outcome: SessionOutcome, days_studied: int) -> int:
    """Return the new progress value for one challenge."""
    current = challenge.current
    kind = challenge.type
    if kind is _T.REVIEW_CARDS:
        return current + outcome.cards_reviewed
    if kind is _T.MASTER_CARDS:
        return current + outcome.cards_mastered
    if kind is _T.STREAK_DAYS:
        return days_studied
    if kind is _T.PERFECT_SESSIONS:
        return current + (1 if outcome.is_perfect_session else 0)
    if kind in (_T.SPEED_ROUND, _T.SPEED_MASTERY):
        return current + outcome.fast_answers
    if kind is _T.PERFECT_STREAK:
        return max(current, outcome.best_perfect_streak)
    if kind in (_T.ACCURACY_GOAL, _T.ACCURACY_CHAMPION):
        if outcome.cards_reviewed == 0:
            return current
        return max(current, round(outcome.accuracy))
    if kind is _T.TYPING_PRACTICE:
        return current + outcome.typed_correct
    if kind is _T.CATEGORY_FOCUS and challenge.category:
        return current + outcome.categories_reviewed.get(challenge.category, 0)
    return current


def _apply(
    challenges: list[Challenge], outcome: SessionOutcome, days_studied: int, now: datetime
) -> tuple[list[Challenge], int]:
    updated: list[Challenge] = []
    xp = 0
    for challenge in challenges:
        if challenge.completed_at is not None:
            updated.append(challenge)
            continue
        value = _advance(challenge, outcome, days_studied)
        done = value >= challenge.target
        if done:
            xp += challenge.xp_reward
        updated.append(
            challenge.model_copy(
                update={
                    "current": min(value, challenge.target),
                    "completed_at": now if done else None,
                }
            )
        )
    return updated, xp


def update_daily_challenges(
    state: DailyChallengeState, outcome: SessionOutcome, now: datetime | None = None
) -> tuple[DailyChallengeState, int]:
    """Advance today's challenges. Returns (state, xp earned by completions)."""
    now = now or datetime.now(timezone.utc)
    challenges, xp = _apply(state.challenges, outcome, 0, now)
    return (
        state.model_copy(
            update={"challenges": challenges, "bonus_xp_earned": state.bonus_xp_earned + xp}
        ),
        xp,
    )


def update_weekly_challenges(
    state: WeeklyChallengeState,
    outcome: SessionOutcome,
    today: date,
    now: datetime | None = None,
) -> tuple[WeeklyChallengeState, int]:
    now = now or datetime.now(timezone.utc)
    days = state.days_studied if today in state.days_studied else [*state.days_studied, today]
    were_all_complete = all(c.completed_at is not None for c in state.challenges)

    challenges, xp = _apply(state.challenges, outcome, len(days), now)
    if not were_all_complete and all(c.completed_at is not None for c in challenges):
        xp += WEEKLY_COMPLETION_BONUS
        logger.info("All weekly challenges complete for week of %s", state.week_start)

    return (
        state.model_copy(
            update={
                "challenges": challenges,
                "days_studied": days,
                "bonus_xp_earned": state.bonus_xp_earned + xp,
            }
        ),
        xp,
    )


# --- Persistence ---


async def load_daily_challenges(
    db: aiosqlite.Connection, today: date, rng: random.Random | None = None
) -> DailyChallengeState:
    data = await daily_store.load(db)
    state = DailyChallengeState.model_validate(data) if data else None
    if state is None or state.day != today:
        state = generate_daily_challenges(today, rng)
        await daily_store.save(db, state.model_dump(mode="json"))
    return state


async def load_weekly_challenges(
    db: aiosqlite.Connection, today: date, rng: random.Random | None = None
) -> WeeklyChallengeState:
    data = await weekly_store.load(db)
    state = WeeklyChallengeState.model_validate(data) if data else None
    if state is None or state.week_start != week_start(today):
        state = generate_weekly_challenges(today, rng)
        await weekly_store.save(db, state.model_dump(mode="json"))
    return state


async def record_session_outcome(
    db: aiosqlite.Connection, outcome: SessionOutcome, today: date
) -> int:
    """Advance and persist both challenge sets; return the XP they pay out."""
    daily, daily_xp = update_daily_challenges(await load_daily_challenges(db, today), outcome)
    weekly, weekly_xp = update_weekly_challenges(
        await load_weekly_challenges(db, today), outcome, today
    )
    await daily_store.save(db, daily.model_dump(mode="json"))
    await weekly_store.save(db, weekly.model_dump(mode="json"))
    return daily_xp + weekly_xp
