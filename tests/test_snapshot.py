"""
tests/test_snapshot.py — Snapshot Codec & Persistence Tests
=============================================================
"""

from __future__ import annotations

import json

from toastx.database.engine import get_session
from toastx.database.models import CompanyValue, ReactionType, RecognitionType, StateSnapshot
from toastx.services import recognition_service as svc
from toastx.services.snapshot_service import delete_snapshot, load_snapshot, save_snapshot
from toastx.store.snapshot import SNAPSHOT_VERSION, state_from_dict, state_to_dict
from toastx.store.state import ToastState


def _busy_state(state, now):
    data = svc.CreateRecognitionInput(
        type=RecognitionType.STANDING_OVATION,
        recipient_ids=("bob",),
        value=CompanyValue.EXPLORE_FEARLESSLY,
        message="You prototyped the new triage flow in two days and it is already in use.",
        expert_areas=("Data Science",),
    )
    s, result = svc.create_recognition(state, "alice", data, now=now)
    s, _ = svc.react(s, result.recognition_id, "carol", ReactionType.GEM, now=now)
    s, _ = svc.comment(s, result.recognition_id, "carol", "Amazing work", now=now)
    return s


class TestCodec:
    def test_round_trip_through_json(self, state, now):
        original = _busy_state(state, now)
        restored = state_from_dict(json.loads(json.dumps(state_to_dict(original))))
        assert restored == original

    def test_version_is_written(self, state):
        assert state_to_dict(state)["version"] == SNAPSHOT_VERSION

    def test_non_object_falls_back_to_defaults(self, state):
        assert state_from_dict(["not", "a", "dict"], state) is state

    def test_missing_collections_merge_with_defaults(self, state):
        restored = state_from_dict({"recognitions": []}, state)
        assert restored.users == state.users
        assert restored.recognitions == ()

    def test_malformed_entities_are_skipped(self, state, now):
        payload = state_to_dict(_busy_state(state, now))
        payload["recognitions"].append({"id": "broken"})
        payload["users"]["ghost"] = {"name": "No id"}
        restored = state_from_dict(payload)
        assert len(restored.recognitions) == 1
        assert "ghost" not in restored.users


class TestPersistence:
    def test_save_then_load(self, db_engine, state, now):
        original = _busy_state(state, now)
        save_snapshot(db_engine, original, "test-key")
        assert load_snapshot(db_engine, "test-key") == original

    def test_save_overwrites(self, db_engine, state, now):
        save_snapshot(db_engine, ToastState(), "test-key")
        save_snapshot(db_engine, state, "test-key")
        assert set(load_snapshot(db_engine, "test-key").users) == set(state.users)

    def test_missing_key(self, db_engine):
        assert load_snapshot(db_engine, "absent") is None

    def test_corrupt_payload_uses_defaults(self, db_engine, state):
        with get_session(db_engine) as session:
            session.add(StateSnapshot(key="bad", payload_json="{not json", version=1))
        assert load_snapshot(db_engine, "bad", state) is state

    def test_delete(self, db_engine, state):
        save_snapshot(db_engine, state, "test-key")
        assert delete_snapshot(db_engine, "test-key")
        assert not delete_snapshot(db_engine, "test-key")
