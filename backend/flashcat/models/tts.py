from enum import Enum
from typing import Any

from pydantic import BaseModel


class Language(str, Enum):
    CATALAN = "ca-ES"
    ENGLISH = "en-US"


class GenerateAudioRequest(BaseModel):
    # Checked by the TTS service so bad values surface as "invalid-argument"
    text: Any = None
    language: Any = None


class GenerateAudioResponse(BaseModel):
    url: str
    cached: bool
