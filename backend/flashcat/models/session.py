from __future__ import annotations

from pydantic import BaseModel, Field

from flashcat.models.flashcard import Grade, StudyCard, StudyMode, StudyResult


class SessionStart(BaseModel):
    mode: StudyMode = StudyMode.MIXED
    limit: int | None = Field(default=None, ge=1, le=200)


class AnswerRequest(BaseModel):
    grade: Grade | None = None
    correct: bool | None = None
    quality: int | None = Field(default=None, ge=0, le=5)
    user_answer: str | None = None
    time_spent_ms: int | None = Field(default=None, ge=0)


class AnswerResult(BaseModel):
    result: StudyResult
    xp_awarded: int
    perfect_streak: int
    newly_mastered: bool
    match_type: str | None = None
    feedback: str | None = None


class SessionState(BaseModel):
    id: str
    mode: StudyMode
    cards: list[StudyCard]
    current_index: int
    results: list[StudyResult]
    perfect_streak: int
    current_card: StudyCard | None
    progress: int
    is_complete: bool


class SessionSummary(BaseModel):
    total_cards: int
    correct_answers: int
    accuracy: int
    xp_earned: int
    time_spent_ms: int
    perfect_streak: int
    new_achievements: list[str]
