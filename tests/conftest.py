"""Pytest configuration and shared fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from openai.types.chat import ChatCompletion, ChatCompletionMessage
from openai.types.chat.chat_completion import Choice
from openai.types.completion_usage import CompletionUsage

from api.auth import create_access_token
from api.config import Settings
from api.services.ai_gateway import AIGateway
from api.services.note_store import MemoryNoteStore


@pytest.fixture(autouse=True)
def quiet_telemetry(monkeypatch):
    """Disable span and metric export during tests."""
    monkeypatch.setenv("OTEL_ENABLE_TRACES", "false")
    monkeypatch.setenv("OTEL_ENABLE_METRICS", "false")
    monkeypatch.setenv("LOG_FORMAT", "console")


@pytest.fixture
def demo_settings():
    """Settings without a provider key, backed by the memory store."""
    return Settings(openai_api_key=None, note_store_backend="memory")


@pytest.fixture
def live_settings():
    """Settings with a (fake) provider key."""
    return Settings(
        openai_api_key="test-key", note_store_backend="memory", ai_request_timeout=5.0
    )


@pytest.fixture
def note_store():
    """Empty in-memory note store."""
    return MemoryNoteStore()


@pytest.fixture
def mock_connector():
    """OpenAI connector double; set chat_completion.return_value per test."""
    connector = AsyncMock()
    connector.chat_completion = AsyncMock()
    connector.estimate_cost = MagicMock(return_value=0.00045)
    connector.close = AsyncMock()
    return connector


@pytest.fixture
def live_gateway(live_settings, mock_connector):
    """Gateway in live mode talking to the mocked connector."""
    return AIGateway(live_settings, connector=mock_connector)


@pytest.fixture
def make_completion():
    """Factory building a ChatCompletion carrying the given message content."""

    def _make(content):
        return ChatCompletion(
            id="chatcmpl-123",
            model="gpt-3.5-turbo",
            object="chat.completion",
            created=1234567890,
            choices=[
                Choice(
                    index=0,
                    message=ChatCompletionMessage(role="assistant", content=content),
                    finish_reason="stop",
                )
            ],
            usage=CompletionUsage(prompt_tokens=10, completion_tokens=20, total_tokens=30),
        )

    return _make


@pytest.fixture
def api_client(demo_settings, note_store):
    """FastAPI test client in demo mode with lifespan context."""
    from api.app import create_app

    app = create_app(settings=demo_settings, note_store=note_store)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers():
    """Bearer headers for a freshly named user."""
    import uuid

    return {"Authorization": f"Bearer {create_access_token(f'user-{uuid.uuid4().hex[:8]}')}"}


@pytest.fixture
def other_user_headers():
    """Bearer headers for a second, distinct user."""
    return {"Authorization": f"Bearer {create_access_token('someone-else')}"}


@pytest.fixture
def sample_note_data():
    """Sample note data for testing."""
    return {
        "title": "Project kickoff",
        "content": "Planning the quarterly roadmap with design and engineering teams tomorrow",
    }
