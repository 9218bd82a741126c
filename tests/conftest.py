# tests/conftest.py
from __future__ import annotations

from collections.abc import Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from fastapi_dto import ContainerListener, Listener, install_dto_support
from fastapi_dto.config.settings import get_settings
from fastapi_dto.infrastructure.http.request_context import _CURRENT_REQUEST_CTX
from fixtures.dto_testkit import Base

_ENV_KEYS = ("DTO_FLAGS", "DTO_METRICS_ENABLED", "ENVIRONMENT", "LOG_LEVEL")


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Force pytest-anyio to use asyncio (not trio)."""
    return "asyncio"


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test from default settings, unaffected by the host env."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_listeners() -> Iterator[None]:
    """Flush listener registries so registrations never leak across tests."""
    yield
    Listener.instance().flush()
    ContainerListener.instance().flush()


@pytest.fixture(autouse=True)
def _reset_request_context() -> Iterator[None]:
    token = _CURRENT_REQUEST_CTX.set(None)
    yield
    _CURRENT_REQUEST_CTX.reset(token)


@pytest.fixture
def sqlite_session() -> Generator[Session, None, None]:
    """Session bound to a fresh in-memory SQLite database."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    factory = sessionmaker(engine, expire_on_commit=False)
    with factory() as session:
        yield session
    engine.dispose()


@pytest.fixture
def app() -> FastAPI:
    """Bare FastAPI app with DTO support installed."""
    return install_dto_support(FastAPI())


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
