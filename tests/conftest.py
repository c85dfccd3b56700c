"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta

# ---------------------------------------------------------------------------
# Ensure a valid JWT_SECRET is always set for test runs.
# This must happen before any import of toastx.api.deps which validates
# the secret at module-load time.
# ---------------------------------------------------------------------------
_TEST_JWT_SECRET = "test-secret-for-pytest-only-" + "x" * 40  # > 32 chars
os.environ.setdefault("JWT_SECRET", _TEST_JWT_SECRET)

import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from toastx.database.models import Base  # noqa: E402
from toastx.store.state import ToastState, ToastUser  # noqa: E402

# Wednesday afternoon, mid-month and mid-quarter
FIXED_NOW = datetime(2026, 2, 18, 15, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def make_user():
    """Factory for a fresh user who joined a month before ``FIXED_NOW``."""

    def _make(user_id: str, name: str | None = None, **kwargs) -> ToastUser:
        kwargs.setdefault("joined_at", FIXED_NOW - timedelta(days=30))
        return ToastUser(
            id=user_id,
            name=name or user_id.title(),
            email=f"{user_id}@example.com",
            **kwargs,
        )

    return _make


@pytest.fixture
def state(make_user) -> ToastState:
    """Five colleagues with clean counters."""
    users = {
        uid: make_user(uid, team="Platform" if uid in ("alice", "bob") else "Care")
        for uid in ("alice", "bob", "carol", "dave", "erin")
    }
    return ToastState(users=users)


@pytest.fixture
def db_engine() -> Engine:
    """In-memory SQLite engine with the Toast X tables.

    StaticPool keeps one shared connection so every session sees the same
    in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine
