"""Shared pytest fixtures."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from buildpilot.core.config import Settings
from buildpilot.main import create_app
from buildpilot.services.store import USERS, MemoryRecordStore


@pytest.fixture
def store():
    return MemoryRecordStore()


@pytest.fixture
def settings():
    """Fast timings and a generous rate limit so tests never trip the limiter."""
    return Settings(
        autosave_ms=50,
        assistant_delay_ms=0,
        rate_limit_max=1000,
        rate_limit_window_s=60,
        log_level="WARNING",
    )


@pytest.fixture
def make_user(store):
    def _make(credits=100, plan="free", email=None, referral_code=None):
        row = store.insert(
            USERS,
            {
                "email": email or f"user{len(store.select(USERS))}@example.com",
                "name": "Test User",
                "credits": credits,
                "plan": plan,
                "api_key_enabled": False,
                "referral_code": referral_code or f"CODE{len(store.select(USERS)):04d}",
                "referred_by": None,
            },
        )
        return row["id"]

    return _make


@pytest.fixture
def client(settings, store):
    """TestClient kept open for the whole test so every request shares one event loop."""
    app = create_app(settings, store)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth(make_user):
    user_id = make_user()
    return {"X-User-Id": user_id}
