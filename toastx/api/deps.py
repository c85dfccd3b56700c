"""
toastx.api.deps — FastAPI dependency injection
================================================
"""

from __future__ import annotations

import logging
import os
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Annotated

import jwt
from fastapi import Depends, Header, HTTPException, status
from jwt.exceptions import InvalidTokenError
from sqlalchemy import Engine

from toastx.config import ToastXConfig, load_config
from toastx.database.engine import create_db_engine, init_db
from toastx.services.seed import seed_users
from toastx.services.snapshot_service import load_snapshot, save_snapshot
from toastx.store.holder import StateStore
from toastx.store.state import ToastState

logger = logging.getLogger(__name__)

_WEAK_SECRETS = frozenset({
    "toastx-dev-secret-change-me",
    "change-me",
    "secret",
    "dev",
    "",
})

_MIN_SECRET_LENGTH = 32

JWT_ALGORITHM = "HS256"


def _load_jwt_secret() -> str:
    """Load and validate JWT_SECRET from the environment.

    Raises RuntimeError at import time if the secret is missing, blank,
    too short (< 32 chars), or a known weak default.
    """
    secret = os.getenv("JWT_SECRET", "")
    if not secret:
        raise RuntimeError(
            "JWT_SECRET environment variable is not set. "
            "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(64))\""
        )
    if secret in _WEAK_SECRETS:
        raise RuntimeError(
            f"JWT_SECRET is set to a known weak default ('{secret}'). "
            "Please set a strong, unique secret."
        )
    if len(secret) < _MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"JWT_SECRET is too short ({len(secret)} chars). "
            f"Minimum length is {_MIN_SECRET_LENGTH} characters."
        )
    return secret


JWT_SECRET: str = _load_jwt_secret()


def create_access_token(user_id: str, hours: int = 12) -> str:
    """Issue a bearer token whose ``sub`` is *user_id*."""
    payload = {"sub": user_id, "exp": datetime.now(UTC) + timedelta(hours=hours)}
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


@lru_cache(maxsize=1)
def get_config() -> ToastXConfig:
    """``config.yaml`` if present, otherwise built-in defaults."""
    try:
        return load_config(os.getenv("TOASTX_CONFIG", "config.yaml"))
    except FileNotFoundError:
        logger.warning("config.yaml not found; using default configuration")
        return ToastXConfig()


@lru_cache(maxsize=1)
def get_store() -> StateStore:
    """Process-wide store: restored from the last snapshot or seeded fresh.

    Every committed dispatch writes the new snapshot back.
    """
    engine = get_engine()
    cfg = get_config()
    init_db(engine)

    state = load_snapshot(engine, cfg.snapshot_key)
    if state is None:
        state = seed_users(ToastState())
        save_snapshot(engine, state, cfg.snapshot_key)

    return StateStore(state, on_commit=lambda s: save_snapshot(engine, s, cfg.snapshot_key))


def get_current_user_id(
    authorization: Annotated[str | None, Header()] = None,
    store: StateStore = Depends(get_store),
) -> str:
    """Validate the bearer JWT and return the acting user's id.  401 if invalid."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Missing token")
    token = authorization.split(" ", 1)[1]
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except InvalidTokenError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token")
    user_id = payload.get("sub")
    if not user_id or user_id not in store.state.users:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unknown user")
    return user_id
