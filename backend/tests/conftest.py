import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure backend package is importable
backend_root = Path(__file__).resolve().parents[1]
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))


class FakeModelClient:
    """Records every call; replies from `replies`, or raises queued `errors` first."""

    def __init__(self):
        self.calls = []
        self.replies = []
        self.errors = []

    async def generate(self, model, contents, temperature, max_output_tokens):
        self.calls.append({
            "model": model,
            "contents": contents,
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
        })
        if self.errors:
            raise self.errors.pop(0)
        if self.replies:
            return self.replies.pop(0)
        return f"reply {len(self.calls)}"


class FakeImageFetcher:
    def __init__(self):
        self.urls = []
        self.content = b"\xff\xd8\xff\xe0fake-jpeg"
        self.error = None

    async def fetch(self, url):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.content


async def no_sleep(delay):
    return None


@pytest.fixture
def model_client():
    return FakeModelClient()


@pytest.fixture
def image_fetcher():
    return FakeImageFetcher()


@pytest.fixture
def settings():
    from cvgen.config import Settings

    return Settings(
        gemini_api_key="test-key",
        text_model="gemini-test-flash",
        vision_model="gemini-test-pro",
        max_history=20,
        system_prompt="You are a CV writer.",
    )


@pytest.fixture
def service(model_client, image_fetcher, settings):
    from cvgen.conversation import InMemoryConversationStore
    from cvgen.generation import GenerationService
    from cvgen.retry import RetryPolicy

    return GenerationService(
        store=InMemoryConversationStore(max_turns=settings.max_history),
        model_client=model_client,
        retry=RetryPolicy(max_retries=2, initial_delay_ms=500, sleep=no_sleep),
        image_fetcher=image_fetcher,
        settings=settings,
    )


@pytest.fixture
def client(service, monkeypatch):
    """FastAPI TestClient wired to an isolated in-memory service."""
    # Avoid accidental usage of real API keys during tests
    monkeypatch.setenv("GEMINI_API_KEY", "")

    from cvgen.generation import get_generation_service
    from cvgen.main import app

    app.dependency_overrides[get_generation_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
