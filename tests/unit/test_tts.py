"""Unit tests for the TTS cache and request validation."""
import hashlib

import pytest

from flashcat.models.tts import Language
from flashcat.services.audio_store import AudioStore
from flashcat.services.tts import (
    INTERNAL,
    INVALID_ARGUMENT,
    TTSError,
    TTSService,
    hash_text,
    object_path,
    validate_request,
)


@pytest.fixture
def store(tmp_path):
    return AudioStore(tmp_path / "media", "http://localhost:8000/")


@pytest.fixture
def service(store, fake_engine):
    return TTSService(store, fake_engine, max_chars=20)


class TestKeys:
    def test_hash_ignores_case_and_outer_whitespace(self):
        assert hash_text("  Hola ") == hash_text("hola")
        assert hash_text("hola") == hashlib.md5(b"hola").hexdigest()

    def test_object_path(self):
        assert object_path("Hola", Language.CATALAN) == f"audio/ca-ES/{hash_text('hola')}.mp3"


class TestValidation:
    @pytest.mark.parametrize("text", [None, "", 42])
    def test_text_must_be_a_string(self, text):
        with pytest.raises(TTSError) as exc:
            validate_request(text, "ca-ES", 500)
        assert exc.value.code == INVALID_ARGUMENT

    def test_whitespace_only(self):
        with pytest.raises(TTSError, match="empty"):
            validate_request("   ", "ca-ES", 500)

    def test_unsupported_language(self):
        with pytest.raises(TTSError, match="ca-ES or en-US"):
            validate_request("hola", "es-ES", 500)

    def test_too_long(self):
        with pytest.raises(TTSError, match="max 5"):
            validate_request("massa llarg", "en-US", 5)

    def test_trims_text(self):
        assert validate_request(" hola ", "ca-ES", 500) == ("hola", Language.CATALAN)


class TestGenerate:
    async def test_miss_then_hit(self, service, store, fake_engine):
        first = await service.generate("Bon dia", "ca-ES")
        assert not first.cached
        path = object_path("Bon dia", Language.CATALAN)
        assert first.url == f"http://localhost:8000/media/{path}"
        assert (store.root / path).read_bytes() == fake_engine.payload

        second = await service.generate("  bon dia ", "ca-ES")
        assert second.cached
        assert second.url == first.url
        assert len(fake_engine.calls) == 1

    async def test_languages_are_cached_separately(self, service, fake_engine):
        await service.generate("no", "ca-ES")
        result = await service.generate("no", "en-US")
        assert not result.cached
        assert len(fake_engine.calls) == 2

    async def test_engine_failure_is_internal(self, service, fake_engine, store):
        fake_engine.error = RuntimeError("network down")
        with pytest.raises(TTSError) as exc:
            await service.generate("hola", "ca-ES")
        assert exc.value.code == INTERNAL
        assert not store.exists(object_path("hola", Language.CATALAN))

    async def test_empty_audio_is_internal(self, service, fake_engine):
        fake_engine.payload = b""
        with pytest.raises(TTSError) as exc:
            await service.generate("hola", "ca-ES")
        assert exc.value.code == INTERNAL
