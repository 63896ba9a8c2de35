from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class CEFRLevel(str, Enum):
    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class VocabularyItem(BaseModel):
    catalan: str
    english: str


class Scenario(BaseModel):
    id: str
    title: str
    title_catalan: str
    description: str
    level: CEFRLevel
    category: str
    starter_prompt: str
    starter_prompt_english: str
    suggested_responses: list[str] = Field(default_factory=list)
    key_vocabulary: list[VocabularyItem] = Field(default_factory=list)


class KeywordResponse(BaseModel):
    keywords: list[str]
    response: str
    translation: str


class CannedResponse(BaseModel):
    response: str
    translation: str


class ScenarioScript(BaseModel):
    keyword_responses: list[KeywordResponse]
    fallback_responses: list[CannedResponse]


class GrammarCorrection(BaseModel):
    original: str
    corrected: str
    explanation: str
    type: str  # grammar | spelling | word-choice | accent


class Message(BaseModel):
    id: str
    role: Role
    content: str
    translation: str | None = None
    corrections: list[GrammarCorrection] = Field(default_factory=list)
    timestamp: datetime


class Conversation(BaseModel):
    id: str
    scenario_id: str
    level: CEFRLevel
    messages: list[Message]
    started_at: datetime
    xp_earned: int = 0


class ConversationStart(BaseModel):
    scenario_id: str


class UserTurn(BaseModel):
    text: str = Field(min_length=1, max_length=1000)


class TurnResult(BaseModel):
    user_message: Message
    assistant_message: Message
    xp_awarded: int
