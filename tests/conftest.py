"""Shared pytest fixtures for NeuraVision tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from neuravision.api.main import create_app
from neuravision.api.prompt_enhancer import PromptEnhancer
from neuravision.core.config import NeuravisionConfig
from neuravision.core.storage import MemStorage


class FakeClock:
    """Deterministic clock that advances by *step* on every call."""

    def __init__(
        self,
        start: datetime = datetime(2025, 1, 1, tzinfo=timezone.utc),
        step: timedelta = timedelta(seconds=1),
    ):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + self.step
        return current


@pytest.fixture
def test_config() -> NeuravisionConfig:
    """Create a configuration isolated from the environment and .env file.

    Returns:
        NeuravisionConfig without an API key
    """
    return NeuravisionConfig(
        _env_file=None,
        google_api_key=None,
        enhancement_model="gemini-test",
        default_page_size=20,
    )


@pytest.fixture
def clock() -> FakeClock:
    """Clock starting at 2025-01-01 UTC and ticking one second per call."""
    return FakeClock()


@pytest.fixture
def storage(clock: FakeClock) -> MemStorage:
    """Empty in-memory store using the deterministic clock."""
    return MemStorage(clock=clock)


@pytest.fixture
def fake_enhancer() -> MagicMock:
    """PromptEnhancer stand-in whose ``enhance`` returns a fixed string."""
    enhancer = MagicMock(spec=PromptEnhancer)
    enhancer.enhance = AsyncMock(return_value="A cat on a roof at golden hour, cinematic lighting")
    return enhancer


@pytest.fixture
def test_client(test_config, storage, fake_enhancer) -> TestClient:
    """TestClient for an app with AI features enabled through the fake enhancer."""
    app = create_app(settings=test_config, storage=storage, enhancer=fake_enhancer)
    return TestClient(app)


@pytest.fixture
def disabled_ai_client(test_config, storage) -> TestClient:
    """TestClient for an app without a Google API key."""
    app = create_app(settings=test_config, storage=storage)
    return TestClient(app)


@pytest.fixture
def image_payload() -> dict:
    """Minimal valid ``POST /api/images`` body."""
    return {
        "prompt": "a cat",
        "model": "x",
        "width": 512,
        "height": 512,
        "imageData": "abc",
        "artStyle": "photo",
    }


@pytest.fixture
def saved_image_payload(image_payload) -> dict:
    """Minimal valid ``POST /api/saved-images`` body."""
    return {**image_payload, "userId": "user-1"}
