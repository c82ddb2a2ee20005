"""Pytest configuration and shared fixtures."""

import os
from collections.abc import Generator
from datetime import datetime

import pytest

# Set test environment
os.environ.setdefault("OPSBOARD_REPLY_DELAY", "0")
os.environ.setdefault("OPSBOARD_LOG_LEVEL", "DEBUG")
os.environ.setdefault("OPSBOARD_SEED_DEMO_TASKS", "true")


class ScriptedRandom:
    """Random source returning a fixed sequence, then a fallback value."""

    def __init__(self, values: list[float] | None = None, fallback: float = 0.0) -> None:
        self.values = list(values or [])
        self.fallback = fallback
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.fallback


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def mock_settings() -> Generator:
    """Clear cached settings around a test."""
    from opsboard.core.config import clear_settings_cache

    clear_settings_cache()

    yield

    clear_settings_cache()


@pytest.fixture
def start_time() -> datetime:
    """Provide a fixed reference time."""
    return datetime(2025, 3, 14, 9, 0, 0)


@pytest.fixture
def clock(start_time: datetime) -> FrozenClock:
    """Provide a controllable clock starting at ``start_time``."""
    return FrozenClock(start_time)


@pytest.fixture
def scripted_random():
    """Factory for scripted random sources."""
    return ScriptedRandom


@pytest.fixture
def id_generator():
    """Provide a fresh id generator starting after 1000."""
    from opsboard.pipeline.factory import IdGenerator

    return IdGenerator(start=1000)


@pytest.fixture
def factory(id_generator, clock):
    """Provide a task factory with deterministic ids and time."""
    from opsboard.pipeline.factory import TaskFactory

    return TaskFactory(id_generator=id_generator, clock=clock)


@pytest.fixture
def board(factory):
    """Provide an empty board using the deterministic factory."""
    from opsboard.core.board import TaskBoard

    return TaskBoard(factory=factory)


@pytest.fixture
def plan_text() -> str:
    """Provide a two-step plan as the planner would format it."""
    return "1. Ingest Inputs — GPT-4\n2. Plan & Branch — Claude Sonnet 4.5"


# Markers
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
