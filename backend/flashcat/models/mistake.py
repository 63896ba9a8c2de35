from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from flashcat.models.flashcard import StudyDirection


class MistakeType(str, Enum):
    ACCENT = "accent"
    SPELLING = "spelling"
    GENDER = "gender"
    WRONG = "wrong"


class MistakeRecord(BaseModel):
    card_id: str
    direction: StudyDirection
    timestamp: datetime
    error_type: MistakeType
    user_answer: str = ""
    correct_answer: str


class MistakeHistory(BaseModel):
    mistakes: list[MistakeRecord] = Field(default_factory=list)


class ConfusionPair(BaseModel):
    word1: str
    word2: str
    confusion_count: int
    last_confused: datetime


class ErrorPatternAnalysis(BaseModel):
    accent_errors: int = 0
    spelling_errors: int = 0
    gender_errors: int = 0
    wrong_answers: int = 0
    total: int = 0
    most_common_type: MistakeType = MistakeType.WRONG
    confusion_pairs: list[ConfusionPair] = Field(default_factory=list)
