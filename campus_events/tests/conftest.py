from __future__ import annotations

import random

import pytest
from fastapi.testclient import TestClient

from campus_events.analytics.store import clear_events
from campus_events.app import app, get_llm_config
from campus_events.llm.config import LLMConfig
from campus_events.storage.data_store import get_store
from campus_events.storage.memory import MemoryStore
from campus_events.storage.seed import seed_sample_data


@pytest.fixture
def store() -> MemoryStore:
    s = MemoryStore()
    seed_sample_data(s)
    return s


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_llm_config] = lambda: LLMConfig(api_key="", enabled=False)
    clear_events()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
