"""Global test fixtures."""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from fastapi.testclient import TestClient  # noqa: E402

from argos.api.deps import get_engine  # noqa: E402
from argos.api.main import app  # noqa: E402
from argos.api.rate_limit import RateLimiter  # noqa: E402
from argos.config.settings import settings  # noqa: E402
from argos.db.engine import build_engine  # noqa: E402
from argos.db.init_db import ensure_db  # noqa: E402

API_KEY = "test-api-key"


@pytest.fixture(autouse=True)
def _relax_rate_limit():
    # Ensure tests are not impacted by rate limiting unless explicitly set.
    app.state.rate_limiter = RateLimiter(limit=10_000, window_s=60, time_fn=lambda: 0)
    yield


@pytest.fixture(autouse=True)
def _server_identity(monkeypatch):
    monkeypatch.setattr(settings, "api_key", API_KEY)
    monkeypatch.setattr(settings, "machine_id", "machine-test")
    yield


@pytest.fixture
def engine(tmp_path):
    """Throwaway SQLite file per test."""
    eng = build_engine(f"sqlite:///{tmp_path / 'argos_test.db'}")
    ensure_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_engine] = lambda: engine
    try:
        yield TestClient(app, headers={"x-api-key": API_KEY})
    finally:
        app.dependency_overrides.clear()
