from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class StudyDirection(str, Enum):
    ENGLISH_TO_CATALAN = "english-to-catalan"
    CATALAN_TO_ENGLISH = "catalan-to-english"


DIRECTIONS: tuple[StudyDirection, ...] = (
    StudyDirection.ENGLISH_TO_CATALAN,
    StudyDirection.CATALAN_TO_ENGLISH,
)


class Gender(str, Enum):
    MASCULINE = "masculine"
    FEMININE = "feminine"


class Grade(str, Enum):
    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


class StudyMode(str, Enum):
    FLIP = "flip"
    MULTIPLE_CHOICE = "multiple-choice"
    TYPE_ANSWER = "type-answer"
    MIXED = "mixed"
    LISTENING = "listening"
    DICTATION = "dictation"
    SPEAK = "speak"


class Flashcard(BaseModel):
    id: str
    front: str              # English
    back: str               # Catalan
    notes: str = ""
    category: str = "Vocabulary"
    subcategory: str | None = None
    gender: Gender | None = None
    icon_key: str = ""
    mnemonic: str | None = None
    created_at: str


class FlashcardCreate(BaseModel):
    front: str = Field(min_length=1)
    back: str = Field(min_length=1)
    notes: str = ""
    category: str | None = None
    gender: Gender | None = None


class FlashcardUpdate(BaseModel):
    front: str | None = None
    back: str | None = None
    notes: str | None = None
    category: str | None = None
    gender: Gender | None = None
    mnemonic: str | None = None


class FlashcardList(BaseModel):
    items: list[Flashcard]
    total: int


class CardProgress(BaseModel):
    card_id: str
    direction: StudyDirection
    ease_factor: float = 2.5
    interval: int = 0           # days until next review
    repetitions: int = 0        # consecutive passing reviews
    due_date: date
    last_review_date: date | None = None
    last_quality: int | None = None
    total_reviews: int = 0
    correct_reviews: int = 0

    @property
    def key(self) -> str:
        return f"{self.card_id}_{self.direction.value}"


class StudyCard(BaseModel):
    flashcard: Flashcard
    progress: CardProgress
    direction: StudyDirection
    requires_typing: bool
    is_new: bool


class ReviewRequest(BaseModel):
    card_id: str
    direction: StudyDirection
    grade: Grade | None = None
    correct: bool | None = None
    quality: int | None = Field(default=None, ge=0, le=5)


class ReviewResult(BaseModel):
    progress: CardProgress
    newly_mastered: bool


class DueCounts(BaseModel):
    total_due: int
    unique_cards_due: int
    new_pairs: int
    total_cards: int


class CategoryStats(BaseModel):
    total: int = 0
    mastered: int = 0
    learning: int = 0


class ImportResult(BaseModel):
    imported: int
    skipped: int


class StudyResult(BaseModel):
    """Timestamped record of a single graded answer inside a study session."""

    card_id: str
    direction: StudyDirection
    mode: StudyMode
    quality: int
    is_correct: bool
    time_spent_ms: int
    user_answer: str | None = None
    answered_at: datetime
