"""Shared fixtures for the sleepcoach tests."""
import pytest
from fastapi.testclient import TestClient

from sleepcoach import HistoryStore, Observation, RuleBasedCoach, Settings


@pytest.fixture(autouse=True)
def offline_env(monkeypatch):
    """Never reach a real model API from the tests."""
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)


@pytest.fixture
def make_obs():
    def _make(quality=3, concentration=3, hours=7.0):
        return Observation(
            sleep_quality_score=quality,
            concentration_score=concentration,
            sleep_duration_hours=hours,
        )
    return _make


class StaticCoach:
    """Coach double returning a fixed line."""

    def __init__(self, text: str):
        self.text = text
        self.calls = []

    async def advise(self, observation):
        self.calls.append(observation)
        return self.text


@pytest.fixture
def store():
    return HistoryStore()


@pytest.fixture
def settings():
    return Settings(history_limit=7)


@pytest.fixture
def client(store, settings):
    from server import create_app

    app = create_app(store=store, coach=RuleBasedCoach(), settings=settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def static_coach():
    return StaticCoach
