"""
Text-to-speech with a content-addressed cache.

Audio is keyed by the md5 of the lowercased, trimmed text and stored at
``audio/{language}/{hash}.mp3``. A cache hit returns the existing object's
URL; a miss synthesizes, stores and then returns it.
"""
from __future__ import annotations

import asyncio
import hashlib
import io
import logging
from abc import ABC, abstractmethod
from typing import Any

from gtts import gTTS

from flashcat.config import settings
from flashcat.models.tts import GenerateAudioResponse, Language
from flashcat.services.audio_store import AudioStore

logger = logging.getLogger(__name__)

INVALID_ARGUMENT = "invalid-argument"
INTERNAL = "internal"


class TTSError(Exception):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class AudioEngine(ABC):
    """Turns text into MP3 bytes."""

    @abstractmethod
    async def synthesize(self, text: str, language: Language) -> bytes:
        ...


class GTTSEngine(AudioEngine):
    """Google Translate TTS via gTTS. The network call runs in a worker thread."""

    _LANGS = {Language.CATALAN: "ca", Language.ENGLISH: "en"}

    async def synthesize(self, text: str, language: Language) -> bytes:
        return await asyncio.to_thread(self._synthesize, text, self._LANGS[language])

    def _synthesize(self, text: str, lang: str) -> bytes:
        buffer = io.BytesIO()
        gTTS(text=text, lang=lang).write_to_fp(buffer)
        return buffer.getvalue()


def hash_text(text: str) -> str:
    return hashlib.md5(text.lower().strip().encode("utf-8")).hexdigest()


def object_path(text: str, language: Language) -> str:
    return f"audio/{language.value}/{hash_text(text)}.mp3"


def validate_request(text: Any, language: Any, max_chars: int) -> tuple[str, Language]:
    if not text or not isinstance(text, str):
        raise TTSError(INVALID_ARGUMENT, "Text is required and must be a string")
    try:
        lang = Language(language)
    except ValueError:
        raise TTSError(INVALID_ARGUMENT, "Language must be ca-ES or en-US") from None

    clean = text.strip()
    if not clean:
        raise TTSError(INVALID_ARGUMENT, "Text cannot be empty")
    if len(clean) > max_chars:
        raise TTSError(INVALID_ARGUMENT, f"Text too long (max {max_chars} characters)")
    return clean, lang


class TTSService:
    def __init__(
        self,
        store: AudioStore,
        engine: AudioEngine,
        max_chars: int = settings.tts_max_chars,
    ) -> None:
        self.store = store
        self.engine = engine
        self.max_chars = max_chars

    async def generate(self, text: Any, language: Any) -> GenerateAudioResponse:
        clean, lang = validate_request(text, language, self.max_chars)
        path = object_path(clean, lang)

        if self.store.exists(path):
            return GenerateAudioResponse(url=self.store.public_url(path), cached=True)

        try:
            audio = await self.engine.synthesize(clean, lang)
        except Exception as exc:
            logger.error("Speech synthesis failed for %s: %s", path, exc)
            raise TTSError(INTERNAL, "Failed to generate audio") from exc
        if not audio:
            raise TTSError(INTERNAL, "Failed to generate audio")

        await self.store.save(path, audio)
        logger.info("Generated audio %s (%d chars)", path, len(clean))
        return GenerateAudioResponse(url=self.store.public_url(path), cached=False)
