"""
toastx.services.snapshot_service — Snapshot Persistence
========================================================

Writes the aggregate store to the ``state_snapshots`` table as one JSON
blob per key and reads it back.  Last writer wins; there is no merge across
processes.
"""

from __future__ import annotations

import json
import logging

from sqlalchemy import Engine

from toastx.database.engine import get_session
from toastx.database.models import StateSnapshot
from toastx.store.snapshot import SNAPSHOT_VERSION, state_from_dict, state_to_dict
from toastx.store.state import ToastState

logger = logging.getLogger(__name__)

DEFAULT_KEY = "toast-x-storage"


def save_snapshot(engine: Engine, state: ToastState, key: str = DEFAULT_KEY) -> None:
    """Upsert the snapshot row for *key*."""
    payload = json.dumps(state_to_dict(state), ensure_ascii=False)
    with get_session(engine) as session:
        row = session.get(StateSnapshot, key)
        if row is None:
            session.add(StateSnapshot(key=key, payload_json=payload, version=SNAPSHOT_VERSION))
        else:
            row.payload_json = payload
            row.version = SNAPSHOT_VERSION
    logger.info(
        "Snapshot saved → %s (%d users, %d recognitions, %d notifications)",
        key, len(state.users), len(state.recognitions), len(state.notifications),
    )


def load_snapshot(
    engine: Engine, key: str = DEFAULT_KEY, defaults: ToastState | None = None
) -> ToastState | None:
    """Return the stored state for *key* merged with *defaults*, or None if absent."""
    with get_session(engine) as session:
        row = session.get(StateSnapshot, key)
        if row is None:
            return None
        payload = row.payload_json

    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        logger.warning("Snapshot %s is not valid JSON; using defaults", key)
        data = None
    state = state_from_dict(data, defaults)
    logger.info("Snapshot loaded ← %s (%d users)", key, len(state.users))
    return state


def delete_snapshot(engine: Engine, key: str = DEFAULT_KEY) -> bool:
    with get_session(engine) as session:
        row = session.get(StateSnapshot, key)
        if row is None:
            return False
        session.delete(row)
    logger.info("Snapshot deleted: %s", key)
    return True
