from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class DailyActivity(BaseModel):
    cards: int = 0
    xp: int = 0


class UserProgress(BaseModel):
    xp: int = 0
    level: int = 1
    current_streak: int = 0
    longest_streak: int = 0
    last_study_date: date | None = None
    total_cards_reviewed: int = 0
    total_correct: int = 0
    total_time_spent_ms: int = 0
    cards_learned: int = 0          # cards with interval >= 21 days
    streak_freeze_available: bool = True
    last_streak_freeze_used: date | None = None
    daily_activity: dict[str, DailyActivity] = Field(default_factory=dict)


class Level(BaseModel):
    level: int
    title: str
    title_catalan: str
    xp_required: int


class LevelProgress(BaseModel):
    level: Level
    current: int
    required: int
    progress: int


class AchievementCategory(str, Enum):
    STREAK = "streak"
    MASTERY = "mastery"
    SPEED = "speed"
    DEDICATION = "dedication"
    SPECIAL = "special"


class RequirementType(str, Enum):
    STREAK = "streak"
    CARDS_REVIEWED = "cards_reviewed"
    CARDS_MASTERED = "cards_mastered"
    PERFECT_STREAK = "perfect_streak"
    CATEGORY_MASTERED = "category_mastered"
    LEVEL = "level"
    XP = "xp"
    FIRST_ACTION = "first_action"


class AchievementRequirement(BaseModel):
    type: RequirementType
    threshold: int = 0
    category: str | None = None   # category_mastered
    action: str | None = None     # first_action: "review" | "import"


class Achievement(BaseModel):
    id: str
    name: str
    description: str
    category: AchievementCategory
    requirement: AchievementRequirement
    xp_reward: int
    rarity: str


class UnlockedAchievement(BaseModel):
    achievement_id: str
    unlocked_at: datetime


class AchievementStatus(BaseModel):
    achievement: Achievement
    unlocked_at: datetime | None = None
    progress: int


class StreakResult(BaseModel):
    progress: UserProgress
    changed: bool
    used_freeze: bool
