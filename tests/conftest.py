"""Shared test fixtures for ideaflow."""

from __future__ import annotations

from pathlib import Path

import pytest

from ideaflow.config import Config
from ideaflow.core.evaluation import EvaluationService
from ideaflow.events.bus import EventBus
from ideaflow.storage.memory_store import MemoryStore


@pytest.fixture
async def store() -> MemoryStore:
    s = MemoryStore()
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def service(store: MemoryStore, bus: EventBus) -> EvaluationService:
    return EvaluationService(store, bus)


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(config_path=tmp_path)
