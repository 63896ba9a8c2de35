"""
Pytest configuration and shared fixtures.

Integration tests run the FastAPI app against a SQLite database in a
temporary directory; the speech engine is replaced with an in-process fake
so no test touches the network.
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient

from flashcat import create_app
from flashcat.config import settings
from flashcat.db import init_all_databases
from flashcat.db.sqlite import get_db
from flashcat.models.flashcard import Flashcard
from flashcat.routers.tts import get_tts_service
from flashcat.services import conversation, session
from flashcat.services.audio_store import AudioStore
from flashcat.services.tts import AudioEngine, TTSService

TODAY = date(2026, 3, 11)  # a Wednesday


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (use SQLite and the HTTP app)")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


class FakeEngine(AudioEngine):
    """Returns fixed bytes and records what it was asked to say."""

    def __init__(self, payload: bytes = b"ID3fake-mp3", error: Exception | None = None):
        self.payload = payload
        self.error = error
        self.calls = []

    async def synthesize(self, text, language):
        self.calls.append((text, language))
        if self.error:
            raise self.error
        return self.payload


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the settings at an empty data directory."""
    path = tmp_path / "data"
    monkeypatch.setattr(settings, "data_dir", path)
    return path


@pytest.fixture(autouse=True)
def clear_registries():
    yield
    session._sessions.clear()
    conversation._conversations.clear()


@pytest.fixture
async def db(data_dir):
    await init_all_databases(data_dir)
    async for conn in get_db():
        yield conn


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def client(data_dir, fake_engine):
    app = create_app()
    app.dependency_overrides[get_tts_service] = lambda: TTSService(
        AudioStore(settings.media_dir, "http://testserver"), fake_engine, max_chars=500
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_card():
    """Factory for flashcards with predictable ids."""
    counter = {"n": 0}

    def _make(front="hello", back="hola", category="Vocabulary", **kwargs):
        counter["n"] += 1
        return Flashcard(
            id=kwargs.pop("id", f"card_{counter['n']:03d}"),
            front=front,
            back=back,
            category=category,
            created_at=f"2026-01-01 00:00:{counter['n']:02d}",
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_csv():
    return (
        "Front,Back,Notes\n"
        "to be,ser,Verb: Ser\n"
        "house,casa,Feminine\n"
        "big,gran,Adjective\n"
    )
