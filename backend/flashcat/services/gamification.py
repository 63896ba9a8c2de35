"""
XP, levels and streaks.

Every function here takes a ``UserProgress`` and returns an updated copy;
persisting the result is the caller's job.
"""
from __future__ import annotations

from datetime import date

from flashcat.models.progress import (
    DailyActivity,
    Level,
    LevelProgress,
    StreakResult,
    UserProgress,
)

LEVELS: list[Level] = [
    Level(level=1, title="Beginner", title_catalan="Principiant", xp_required=0),
    Level(level=2, title="Apprentice", title_catalan="Aprenent", xp_required=100),
    Level(level=3, title="Student", title_catalan="Estudiant", xp_required=300),
    Level(level=4, title="Scholar", title_catalan="Erudit", xp_required=600),
    Level(level=5, title="Linguist", title_catalan="Lingüista", xp_required=1000),
    Level(level=6, title="Expert", title_catalan="Expert", xp_required=1500),
    Level(level=7, title="Master", title_catalan="Mestre", xp_required=2200),
    Level(level=8, title="Sage", title_catalan="Savi", xp_required=3000),
    Level(level=9, title="Virtuoso", title_catalan="Virtuós", xp_required=4000),
    Level(level=10, title="Polyglot", title_catalan="Poliglot", xp_required=5500),
    Level(level=11, title="Ambassador", title_catalan="Ambaixador", xp_required=7500),
    Level(level=12, title="Catalan Champion", title_catalan="Campió Català", xp_required=10000),
]

CARD_CORRECT = 10
CARD_PERFECT = 25
CARD_DIFFICULT = 5
CARD_WRONG = 2
DAILY_GOAL_BONUS = 50
FIRST_CARD_OF_DAY = 15

# (minimum streak, multiplier), highest first
STREAK_MULTIPLIERS: list[tuple[int, float]] = [
    (100, 1.5),
    (60, 1.4),
    (30, 1.25),
    (14, 1.15),
    (7, 1.1),
]


def day_key(day: date) -> str:
    return day.isoformat()


def streak_multiplier(streak: int) -> float:
    for minimum, multiplier in STREAK_MULTIPLIERS:
        if streak >= minimum:
            return multiplier
    return 1.0


def xp_for_quality(quality: int) -> int:
    """Base XP for one answer, before the streak multiplier."""
    if quality >= 5:
        return CARD_PERFECT
    if quality == 4:
        return CARD_CORRECT
    if quality == 3:
        return CARD_DIFFICULT
    return CARD_WRONG


def level_for_xp(xp: int) -> Level:
    for level in reversed(LEVELS):
        if xp >= level.xp_required:
            return level
    return LEVELS[0]


def xp_for_next_level(xp: int) -> LevelProgress:
    current = level_for_xp(xp)
    if current.level == LEVELS[-1].level:
        return LevelProgress(level=current, current=xp, required=xp, progress=100)

    following = LEVELS[current.level]
    gained = xp - current.xp_required
    needed = following.xp_required - current.xp_required
    return LevelProgress(
        level=current,
        current=gained,
        required=needed,
        progress=round(gained / needed * 100),
    )


def _activity(progress: UserProgress, today: date) -> DailyActivity:
    return progress.daily_activity.get(day_key(today), DailyActivity())


def cards_studied_today(progress: UserProgress, today: date) -> int:
    return _activity(progress, today).cards


def daily_bonus(cards_today: int, daily_goal: int) -> int:
    """Bonus XP for the answer that brings today's card count to ``cards_today``."""
    bonus = 0
    if cards_today == 1:
        bonus += FIRST_CARD_OF_DAY
    if cards_today == daily_goal:
        bonus += DAILY_GOAL_BONUS
    return bonus


def award_xp(
    progress: UserProgress, amount: int, today: date | None = None
) -> tuple[UserProgress, int]:
    """Apply the streak multiplier to ``amount`` and add it. Returns (progress, awarded)."""
    today = today or date.today()
    awarded = round(amount * streak_multiplier(progress.current_streak))
    xp = progress.xp + awarded
    activity = _activity(progress, today)
    return (
        progress.model_copy(
            update={
                "xp": xp,
                "level": level_for_xp(xp).level,
                "daily_activity": {
                    **progress.daily_activity,
                    day_key(today): activity.model_copy(update={"xp": activity.xp + awarded}),
                },
            }
        ),
        awarded,
    )


def update_streak(progress: UserProgress, today: date | None = None) -> StreakResult:
    today = today or date.today()
    last = progress.last_study_date
    used_freeze = False

    if last is None:
        streak = 1
    elif last == today:
        return StreakResult(progress=progress, changed=False, used_freeze=False)
    else:
        gap = (today - last).days
        if gap == 1:
            streak = progress.current_streak + 1
        elif gap == 2 and progress.streak_freeze_available:
            streak = progress.current_streak + 1
            used_freeze = True
        else:
            streak = 1

    update: dict = {
        "current_streak": streak,
        "longest_streak": max(streak, progress.longest_streak),
        "last_study_date": today,
    }
    if used_freeze:
        update["streak_freeze_available"] = False
        update["last_streak_freeze_used"] = today

    return StreakResult(
        progress=progress.model_copy(update=update), changed=True, used_freeze=used_freeze
    )


def use_streak_freeze(
    progress: UserProgress, today: date | None = None
) -> tuple[UserProgress, bool]:
    if not progress.streak_freeze_available:
        return progress, False
    return (
        progress.model_copy(
            update={
                "streak_freeze_available": False,
                "last_streak_freeze_used": today or date.today(),
            }
        ),
        True,
    )


def record_study_session(
    progress: UserProgress,
    cards_reviewed: int,
    correct_answers: int,
    time_spent_ms: int,
    today: date | None = None,
) -> UserProgress:
    today = today or date.today()
    activity = _activity(progress, today)
    return progress.model_copy(
        update={
            "total_cards_reviewed": progress.total_cards_reviewed + cards_reviewed,
            "total_correct": progress.total_correct + correct_answers,
            "total_time_spent_ms": progress.total_time_spent_ms + time_spent_ms,
            "daily_activity": {
                **progress.daily_activity,
                day_key(today): activity.model_copy(
                    update={"cards": activity.cards + cards_reviewed}
                ),
            },
        }
    )


def update_cards_learned(progress: UserProgress, count: int) -> UserProgress:
    return progress.model_copy(update={"cards_learned": count})
