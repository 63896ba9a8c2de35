"""Achievement catalog and unlock checks."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from flashcat.models.flashcard import DIRECTIONS, CardProgress, Flashcard
from flashcat.models.progress import (
    Achievement,
    AchievementCategory,
    AchievementRequirement,
    AchievementStatus,
    RequirementType,
    UnlockedAchievement,
    UserProgress,
)
from flashcat.services.due_selector import progress_key
from flashcat.services.scheduler import MASTERED_INTERVAL_DAYS


def _achievement(
    id: str,
    name: str,
    description: str,
    category: AchievementCategory,
    requirement: AchievementRequirement,
    xp_reward: int,
    rarity: str,
) -> Achievement:
    return Achievement(
        id=id,
        name=name,
        description=description,
        category=category,
        requirement=requirement,
        xp_reward=xp_reward,
        rarity=rarity,
    )


def _req(type: RequirementType, threshold: int = 0, **kwargs) -> AchievementRequirement:
    return AchievementRequirement(type=type, threshold=threshold, **kwargs)


_S, _ST, _D, _M, _SP = (
    AchievementCategory.SPECIAL,
    AchievementCategory.STREAK,
    AchievementCategory.DEDICATION,
    AchievementCategory.MASTERY,
    AchievementCategory.SPEED,
)
_R = RequirementType

ACHIEVEMENTS: list[Achievement] = [
    _achievement("first_card", "First Steps", "Review your first card", _S,
                 _req(_R.FIRST_ACTION, action="review"), 10, "common"),
    _achievement("first_import", "Collector", "Import your first flashcard set", _S,
                 _req(_R.FIRST_ACTION, action="import"), 15, "common"),
    _achievement("streak_3", "Getting Started", "3-day study streak", _ST,
                 _req(_R.STREAK, 3), 25, "common"),
    _achievement("streak_7", "Week Warrior", "7-day study streak", _ST,
                 _req(_R.STREAK, 7), 50, "uncommon"),
    _achievement("streak_14", "Fortnight Fighter", "14-day study streak", _ST,
                 _req(_R.STREAK, 14), 100, "rare"),
    _achievement("streak_30", "Monthly Master", "30-day study streak", _ST,
                 _req(_R.STREAK, 30), 200, "epic"),
    _achievement("streak_100", "Century Champion", "100-day study streak", _ST,
                 _req(_R.STREAK, 100), 500, "legendary"),
    _achievement("cards_10", "Warm Up", "Review 10 cards", _D,
                 _req(_R.CARDS_REVIEWED, 10), 15, "common"),
    _achievement("cards_50", "Getting Serious", "Review 50 cards", _D,
                 _req(_R.CARDS_REVIEWED, 50), 30, "common"),
    _achievement("cards_100", "Century", "Review 100 cards", _D,
                 _req(_R.CARDS_REVIEWED, 100), 50, "uncommon"),
    _achievement("cards_500", "Half Thousand", "Review 500 cards", _D,
                 _req(_R.CARDS_REVIEWED, 500), 100, "rare"),
    _achievement("cards_1000", "Millennium", "Review 1000 cards", _D,
                 _req(_R.CARDS_REVIEWED, 1000), 250, "epic"),
    _achievement("master_10", "Apprentice", "Master 10 cards", _M,
                 _req(_R.CARDS_MASTERED, 10), 40, "common"),
    _achievement("master_25", "Rising Star", "Master 25 cards", _M,
                 _req(_R.CARDS_MASTERED, 25), 75, "uncommon"),
    _achievement("master_50", "Knowledge Keeper", "Master 50 cards", _M,
                 _req(_R.CARDS_MASTERED, 50), 150, "rare"),
    _achievement("master_100", "Sage", "Master 100 cards", _M,
                 _req(_R.CARDS_MASTERED, 100), 300, "epic"),
    _achievement("perfect_5", "Sharp Mind", "5 perfect answers in a row", _SP,
                 _req(_R.PERFECT_STREAK, 5), 25, "common"),
    _achievement("perfect_10", "Flawless", "10 perfect answers in a row", _SP,
                 _req(_R.PERFECT_STREAK, 10), 50, "uncommon"),
    _achievement("perfect_20", "Untouchable", "20 perfect answers in a row", _SP,
                 _req(_R.PERFECT_STREAK, 20), 100, "rare"),
    _achievement("level_5", "Linguist", "Reach level 5", _M,
                 _req(_R.LEVEL, 5), 75, "uncommon"),
    _achievement("level_10", "Polyglot", "Reach level 10", _M,
                 _req(_R.LEVEL, 10), 200, "epic"),
    _achievement("verbs_master", "Verb Virtuoso", "Master all verb cards", _S,
                 _req(_R.CATEGORY_MASTERED, category="Verbs"), 150, "rare"),
]

ACHIEVEMENTS_BY_ID: dict[str, Achievement] = {a.id: a for a in ACHIEVEMENTS}


@dataclass
class AchievementContext:
    progress: UserProgress
    card_progress: Mapping[str, CardProgress]
    flashcards: list[Flashcard]
    perfect_streak: int = 0
    unlocked: list[UnlockedAchievement] = field(default_factory=list)
    has_imported: bool = False


def count_mastered_cards(card_progress: Mapping[str, CardProgress]) -> int:
    """Cards with at least one direction at the mastery interval."""
    return len(
        {p.card_id for p in card_progress.values() if p.interval >= MASTERED_INTERVAL_DAYS}
    )


def _mastered_in_category(
    card_progress: Mapping[str, CardProgress], cards: Iterable[Flashcard]
) -> tuple[int, int]:
    total = mastered = 0
    for card in cards:
        total += 1
        if all(
            (p := card_progress.get(progress_key(card.id, d))) is not None
            and p.interval >= MASTERED_INTERVAL_DAYS
            for d in DIRECTIONS
        ):
            mastered += 1
    return mastered, total


def is_category_mastered(
    card_progress: Mapping[str, CardProgress], flashcards: list[Flashcard], category: str
) -> bool:
    mastered, total = _mastered_in_category(
        card_progress, (c for c in flashcards if c.category == category)
    )
    return total > 0 and mastered == total


def _is_met(req: AchievementRequirement, ctx: AchievementContext) -> bool:
    p = ctx.progress
    if req.type is RequirementType.STREAK:
        return p.current_streak >= req.threshold
    if req.type is RequirementType.CARDS_REVIEWED:
        return p.total_cards_reviewed >= req.threshold
    if req.type is RequirementType.CARDS_MASTERED:
        return count_mastered_cards(ctx.card_progress) >= req.threshold
    if req.type is RequirementType.PERFECT_STREAK:
        return ctx.perfect_streak >= req.threshold
    if req.type is RequirementType.LEVEL:
        return p.level >= req.threshold
    if req.type is RequirementType.XP:
        return p.xp >= req.threshold
    if req.type is RequirementType.FIRST_ACTION:
        if req.action == "review":
            return p.total_cards_reviewed >= 1
        if req.action == "import":
            return ctx.has_imported or len(ctx.flashcards) > 0
        return False
    if req.type is RequirementType.CATEGORY_MASTERED and req.category:
        return is_category_mastered(ctx.card_progress, ctx.flashcards, req.category)
    return False


def check_achievements(ctx: AchievementContext) -> list[Achievement]:
    """Return achievements whose requirement now holds and that are not yet unlocked."""
    unlocked_ids = {u.achievement_id for u in ctx.unlocked}
    return [a for a in ACHIEVEMENTS if a.id not in unlocked_ids and _is_met(a.requirement, ctx)]


def _percent(value: int, target: int) -> int:
    if target <= 0:
        return 0
    return min(100, round(value / target * 100))


def achievement_progress(achievement: Achievement, ctx: AchievementContext) -> int:
    req = achievement.requirement
    p = ctx.progress
    if req.type is RequirementType.STREAK:
        return _percent(p.current_streak, req.threshold)
    if req.type is RequirementType.CARDS_REVIEWED:
        return _percent(p.total_cards_reviewed, req.threshold)
    if req.type is RequirementType.CARDS_MASTERED:
        return _percent(count_mastered_cards(ctx.card_progress), req.threshold)
    if req.type is RequirementType.PERFECT_STREAK:
        return _percent(ctx.perfect_streak, req.threshold)
    if req.type is RequirementType.LEVEL:
        return _percent(p.level, req.threshold)
    if req.type is RequirementType.XP:
        return _percent(p.xp, req.threshold)
    if req.type is RequirementType.FIRST_ACTION:
        return 100 if _is_met(req, ctx) else 0
    if req.type is RequirementType.CATEGORY_MASTERED and req.category:
        mastered, total = _mastered_in_category(
            ctx.card_progress, (c for c in ctx.flashcards if c.category == req.category)
        )
        return _percent(mastered, total)
    return 0


def achievement_statuses(ctx: AchievementContext) -> list[AchievementStatus]:
    unlocked_at = {u.achievement_id: u.unlocked_at for u in ctx.unlocked}
    return [
        AchievementStatus(
            achievement=a,
            unlocked_at=unlocked_at.get(a.id),
            progress=100 if a.id in unlocked_at else achievement_progress(a, ctx),
        )
        for a in ACHIEVEMENTS
    ]
