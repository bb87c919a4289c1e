"""Shared test fixtures."""

import random
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.db.database import get_db
from src.db.models import Base
from src.main import app
from src.services.ai import MockProvider
from src.services.chat_session import ChatSessionOptions
from src.services.kv_store import SqlKeyValueStore
from src.services.scenario_generator import ScenarioGenerator
from src.services.session_registry import SessionRegistry

TEST_ENGINE = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSession = sessionmaker(bind=TEST_ENGINE, autocommit=False, autoflush=False)
Base.metadata.create_all(bind=TEST_ENGINE)


def _override_get_db():
    db = TestSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = _override_get_db


class MemoryKeyValueStore:
    """dict 기반 저장소 (테스트 전용)"""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class FakeClock:
    """수동으로 진행하는 시계"""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def memory_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def fast_options() -> ChatSessionOptions:
    """재시도 대기 없이, 고정 시드로"""
    return ChatSessionOptions(sleep=lambda seconds: None, rng=random.Random(7))


@pytest.fixture()
def sql_store() -> SqlKeyValueStore:
    Base.metadata.drop_all(bind=TEST_ENGINE)
    Base.metadata.create_all(bind=TEST_ENGINE)
    return SqlKeyValueStore(TestSession)


@pytest.fixture()
def registry(sql_store: SqlKeyValueStore, fast_options: ChatSessionOptions) -> SessionRegistry:
    return SessionRegistry(
        ScenarioGenerator(MockProvider()),
        store=sql_store,
        options=fast_options,
        debounce_seconds=0,
    )


@pytest.fixture()
def client(registry: SessionRegistry) -> TestClient:
    """FastAPI TestClient wired to an in-memory SQLite database."""
    app.state.session_registry = registry
    app.state.ai_provider = registry.generator.ai
    return TestClient(app)


@pytest.fixture()
def db_session() -> Session:
    """Raw database session for direct DB assertions."""
    session = TestSession()
    try:
        yield session
    finally:
        session.close()
