from flashcat.models.flashcard import (
    DIRECTIONS,
    CardProgress,
    Flashcard,
    FlashcardCreate,
    FlashcardList,
    FlashcardUpdate,
    Gender,
    Grade,
    StudyCard,
    StudyDirection,
    StudyMode,
    StudyResult,
)
from flashcat.models.progress import (
    Achievement,
    DailyActivity,
    Level,
    UnlockedAchievement,
    UserProgress,
)

__all__ = [
    "DIRECTIONS",
    "Achievement",
    "CardProgress",
    "DailyActivity",
    "Flashcard",
    "FlashcardCreate",
    "FlashcardList",
    "FlashcardUpdate",
    "Gender",
    "Grade",
    "Level",
    "StudyCard",
    "StudyDirection",
    "StudyMode",
    "StudyResult",
    "UnlockedAchievement",
    "UserProgress",
]
