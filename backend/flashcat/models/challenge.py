from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class ChallengeType(str, Enum):
    REVIEW_CARDS = "review_cards"
    PERFECT_STREAK = "perfect_streak"
    SPEED_ROUND = "speed_round"
    CATEGORY_FOCUS = "category_focus"
    ACCURACY_GOAL = "accuracy_goal"
    TYPING_PRACTICE = "typing_practice"
    # weekly only
    MASTER_CARDS = "master_cards"
    STREAK_DAYS = "streak_days"
    PERFECT_SESSIONS = "perfect_sessions"
    SPEED_MASTERY = "speed_mastery"
    ACCURACY_CHAMPION = "accuracy_champion"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ChallengeTemplate(BaseModel):
    type: ChallengeType
    title: str
    description: str
    target: int
    xp_reward: int
    bonus_multiplier: float
    category: str | None = None
    difficulty: Difficulty | None = None


class Challenge(BaseModel):
    id: str
    type: ChallengeType
    title: str
    description: str
    target: int
    current: int = 0
    xp_reward: int
    bonus_multiplier: float
    starts_on: date
    expires_on: date
    completed_at: datetime | None = None
    category: str | None = None
    difficulty: Difficulty | None = None

    @property
    def is_complete(self) -> bool:
        return self.current >= self.target

    @property
    def percent(self) -> int:
        return min(100, round(self.current / self.target * 100))


class DailyChallengeState(BaseModel):
    day: date
    challenges: list[Challenge]
    bonus_xp_earned: int = 0


class WeeklyChallengeState(BaseModel):
    week_start: date
    challenges: list[Challenge]
    days_studied: list[date] = Field(default_factory=list)
    bonus_xp_earned: int = 0


class SessionOutcome(BaseModel):
    """Aggregate results of one study session, as consumed by challenges."""

    cards_reviewed: int = 0
    cards_mastered: int = 0
    accuracy: float = 0.0
    best_perfect_streak: int = 0
    fast_answers: int = 0
    typed_correct: int = 0
    categories_reviewed: dict[str, int] = Field(default_factory=dict)

    @property
    def is_perfect_session(self) -> bool:
        return self.cards_reviewed > 0 and self.accuracy >= 90
