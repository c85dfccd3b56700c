"""
toastx.services.seed — Demo Data Seeder
========================================

Loads the demo colleagues from ``seeds/users.yaml`` so an empty store is
immediately usable.  Idempotent: users already in the state are never
overwritten.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path

import yaml

from toastx.engine.timeutil import parse_ts, utcnow
from toastx.store import users as user_store
from toastx.store.state import ExpertArea, ToastState, ToastUser

logger = logging.getLogger(__name__)

DEFAULT_SEED_PATH = Path(__file__).resolve().parents[2] / "seeds" / "users.yaml"


def load_seed_users(path: str | Path = DEFAULT_SEED_PATH) -> list[ToastUser]:
    """Parse *path* into fresh users with zeroed counters.

    Raises
    ------
    FileNotFoundError
        If the seed file doesn't exist.
    """
    with open(path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    users = []
    for entry in raw.get("users", []):
        joined = entry.get("joined_at")
        users.append(
            ToastUser(
                id=entry["id"],
                name=entry["name"],
                email=entry.get("email", ""),
                title=entry.get("title", ""),
                team=entry.get("team", ""),
                department=entry.get("department", ""),
                avatar=entry.get("avatar"),
                manager_id=entry.get("manager_id"),
                expert_areas=tuple(
                    ExpertArea(id=a["id"], name=a["name"], score=int(a.get("score", 0)))
                    for a in entry.get("expert_areas", [])
                ),
                joined_at=parse_ts(joined) if joined else None,
            )
        )
    return users


def seed_users(
    state: ToastState,
    path: str | Path = DEFAULT_SEED_PATH,
    *,
    now: datetime | None = None,
) -> ToastState:
    """Add every seed user whose id is not in *state* yet."""
    now = parse_ts(now or utcnow())
    inserted = 0
    for user in load_seed_users(path):
        if user.id in state.users:
            continue
        if user.joined_at is None:
            user = replace(user, joined_at=now)
        state = user_store.add_user(state, user)
        inserted += 1

    if inserted:
        logger.info("Seeded %d demo users.", inserted)
    return state