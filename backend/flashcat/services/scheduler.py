"""
SM-2 review scheduler.

Quality scale (0-5):
  0 - complete blackout        3 - correct with serious difficulty
  1 - wrong, answer recognised 4 - correct with hesitation
  2 - wrong, answer felt easy  5 - perfect recall

A quality of 3 or more is a passing grade. Both study directions of a card
are scheduled independently; this module only ever sees one of them.
"""
from __future__ import annotations

from datetime import date, timedelta

from flashcat.models.flashcard import CardProgress, Grade, StudyDirection

DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
FAILED_EASE_PENALTY = 0.2
MAX_INTERVAL_DAYS = 365
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6
PASSING_QUALITY = 3

STRUGGLING_EASE_THRESHOLD = 2.0
NEW_CARD_REPETITIONS = 2
LEARNING_INTERVAL_DAYS = 7
MASTERED_INTERVAL_DAYS = 21

_GRADE_QUALITY = {
    Grade.AGAIN: 1,
    Grade.HARD: 3,
    Grade.GOOD: 4,
    Grade.EASY: 5,
}


def create_initial_progress(
    card_id: str, direction: StudyDirection, today: date | None = None
) -> CardProgress:
    return CardProgress(
        card_id=card_id,
        direction=direction,
        ease_factor=DEFAULT_EASE_FACTOR,
        interval=0,
        repetitions=0,
        due_date=today or date.today(),
    )


def quality_for(grade: Grade | bool | int | float | None) -> int:
    """Normalise any accepted grade form to an SM-2 quality in 0..5."""
    if isinstance(grade, Grade):
        return _GRADE_QUALITY[grade]
    if isinstance(grade, bool):
        return 4 if grade else 1
    if isinstance(grade, (int, float)) and grade == grade:  # NaN check
        return max(0, min(5, round(grade)))
    return PASSING_QUALITY


def calculate_sm2(
    progress: CardProgress,
    grade: Grade | bool | int,
    today: date | None = None,
) -> CardProgress:
    """Return the next review state for one card direction. Pure."""
    today = today or date.today()
    q = quality_for(grade)

    if q < PASSING_QUALITY:
        new_reps = 0
        new_interval = FIRST_INTERVAL_DAYS
        new_ef = max(MIN_EASE_FACTOR, progress.ease_factor - FAILED_EASE_PENALTY)
    else:
        new_ef = max(
            MIN_EASE_FACTOR,
            progress.ease_factor + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)),
        )
        new_reps = progress.repetitions + 1
        if new_reps == 1:
            new_interval = FIRST_INTERVAL_DAYS
        elif new_reps == 2:
            new_interval = SECOND_INTERVAL_DAYS
        else:
            new_interval = round(progress.interval * new_ef)

    new_interval = min(new_interval, MAX_INTERVAL_DAYS)

    return progress.model_copy(
        update={
            "ease_factor": round(new_ef, 4),
            "interval": new_interval,
            "repetitions": new_reps,
            "due_date": today + timedelta(days=new_interval),
            "last_review_date": today,
            "last_quality": q,
            "total_reviews": progress.total_reviews + 1,
            "correct_reviews": progress.correct_reviews + (1 if q >= PASSING_QUALITY else 0),
        }
    )


def is_due(progress: CardProgress | None, today: date | None = None) -> bool:
    if progress is None:
        return True
    return progress.due_date <= (today or date.today())


def is_new_card(progress: CardProgress) -> bool:
    return progress.repetitions < NEW_CARD_REPETITIONS


def is_struggling(progress: CardProgress) -> bool:
    return progress.ease_factor < STRUGGLING_EASE_THRESHOLD


def requires_typing(progress: CardProgress) -> bool:
    return is_new_card(progress) or is_struggling(progress)


def is_mastered(progress: CardProgress | None) -> bool:
    return progress is not None and progress.interval >= MASTERED_INTERVAL_DAYS


def mastery_level(progress: CardProgress) -> str:
    if progress.repetitions == 0:
        return "new"
    if progress.interval < LEARNING_INTERVAL_DAYS:
        return "learning"
    if progress.interval < MASTERED_INTERVAL_DAYS:
        return "reviewing"
    return "mastered"


def quality_from_typing_result(
    is_correct: bool, is_acceptable: bool, time_spent_ms: int
) -> int:
    if not is_correct and not is_acceptable:
        return 1
    if not is_correct:
        return 3
    seconds = time_spent_ms / 1000
    if seconds < 3:
        return 5
    if seconds < 6:
        return 4
    return 3


def quality_from_multiple_choice(is_correct: bool, time_spent_ms: int) -> int:
    if not is_correct:
        return 1
    seconds = time_spent_ms / 1000
    if seconds < 2:
        return 5
    if seconds < 4:
        return 4
    return 3
