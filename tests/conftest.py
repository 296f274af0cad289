"""Shared fixtures: a fresh SQLite database and app per test."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tasklist.config import get_settings
from tasklist.main import create_app
from tests.helpers import ANN, BOB, register


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def app_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every setting at per-test temporary paths."""
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_SSLMODE", raising=False)
    monkeypatch.setenv("DB_FILE", str(tmp_path / "app.db"))
    monkeypatch.setenv("SEED_FILE", str(tmp_path / "seed.sql"))
    monkeypatch.setenv("FRONTEND_DIR", str(tmp_path / "frontend"))
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("CORS_ORIGINS", "*")
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


@pytest.fixture
def client(app_env: Path) -> TestClient:
    """Test client whose lifespan bootstraps and disposes the database."""
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def ann(client: TestClient) -> dict:
    return register(client, ANN)


@pytest.fixture
def bob(client: TestClient, ann: dict) -> dict:
    return register(client, BOB)
