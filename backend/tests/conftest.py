"""Root conftest — shared test configuration."""

import os

import pytest

# Ensure tests never pick up real credentials
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key-0000")
os.environ.setdefault("APP_ENV", "development")

from tests.fakes import FakeGemini, FakeTTSClient  # noqa: E402


@pytest.fixture
def fake_gemini():
	return FakeGemini()


@pytest.fixture
def fake_tts():
	return FakeTTSClient()
