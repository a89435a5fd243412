import os

# Keep the app off the real disk and away from Gemini while testing
os.environ['STORAGE_BACKEND'] = 'memory'
os.environ.pop('GEMINI_API_KEY', None)
os.environ.pop('LOG_FILE', None)

import pytest
from fastapi.testclient import TestClient

from services.generation_service import GenerationService
from services.kv_store import InMemoryKeyValueStore
from services.preview_service import PreviewManager
from services.errors import GenerationError


class StubGeminiClient:
    """Records prompts and answers with canned text (or a canned failure)."""

    def __init__(self, response="<html><body>stub</body></html>", error=None):
        self.response = response
        self.error = error
        self.prompts = []

    async def generate(self, prompt_text):
        self.prompts.append(prompt_text)
        if self.error is not None:
            raise self.error
        return self.response


class FailingStore(InMemoryKeyValueStore):
    def set(self, key, value):
        raise OSError("QuotaExceededError: store is full")


class UnreadableStore(InMemoryKeyValueStore):
    """Holds data but fails the next ``fail_reads`` reads."""

    def __init__(self, initial=None, fail_reads=1):
        super().__init__(initial)
        self.fail_reads = fail_reads
        self.writes = 0

    def get(self, key):
        if self.fail_reads:
            self.fail_reads -= 1
            raise ConnectionError("connection reset by peer")
        return super().get(key)

    def set(self, key, value):
        self.writes += 1
        super().set(key, value)


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def generation_service(store):
    return GenerationService(store)


@pytest.fixture
def stub_gemini():
    return StubGeminiClient()


@pytest.fixture
def preview_manager():
    return PreviewManager()


@pytest.fixture
def app(generation_service, stub_gemini, preview_manager):
    from index import app as fastapi_app
    from services.gemini_client import get_gemini_client
    from services.generation_service import get_generation_service
    from services.preview_service import get_preview_manager

    fastapi_app.dependency_overrides[get_gemini_client] = lambda: stub_gemini
    fastapi_app.dependency_overrides[get_generation_service] = lambda: generation_service
    fastapi_app.dependency_overrides[get_preview_manager] = lambda: preview_manager
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Create a test client."""
    return TestClient(app)


@pytest.fixture
def failing_gemini():
    return StubGeminiClient(error=GenerationError("API key not valid. Please pass a valid API key."))


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def unreadable_store():
    return UnreadableStore()
