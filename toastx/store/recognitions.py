"""
toastx.store.recognitions — Recognition Transitions & Selectors
================================================================

Recognitions are kept newest first.  Transitions targeting an unknown
recognition id return the input state unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from toastx.database.models import CompanyValue, ReactionType
from toastx.engine.anti_gaming import sanitize_message
from toastx.engine.timeutil import parse_ts, utcnow
from toastx.store.state import Comment, Reaction, Recognition, ToastState


def _map_recognition(
    state: ToastState, recognition_id: str, fn: Callable[[Recognition], Recognition]
) -> ToastState:
    changed = False
    updated = []
    for rec in state.recognitions:
        if rec.id == recognition_id:
            mapped = fn(rec)
            changed = mapped is not rec
            rec = mapped
        updated.append(rec)
    if not changed:
        return state
    return replace(state, recognitions=tuple(updated))


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------
def add_recognition(state: ToastState, recognition: Recognition) -> ToastState:
    return replace(state, recognitions=(recognition, *state.recognitions))


def update_recognition(
    state: ToastState, recognition_id: str, *, now: datetime | None = None, **changes
) -> ToastState:
    changes.pop("updated_at", None)
    stamp = parse_ts(now or utcnow())
    return _map_recognition(
        state, recognition_id, lambda r: replace(r, **changes, updated_at=stamp)
    )


def delete_recognition(state: ToastState, recognition_id: str) -> ToastState:
    kept = tuple(r for r in state.recognitions if r.id != recognition_id)
    if len(kept) == len(state.recognitions):
        return state
    return replace(state, recognitions=kept)


# ---------------------------------------------------------------------------
# Reactions
# ---------------------------------------------------------------------------
def add_reaction(state: ToastState, recognition_id: str, reaction: Reaction) -> ToastState:
    """Append *reaction*; a user holds at most one reaction of each type."""

    def apply(rec: Recognition) -> Recognition:
        if any(r.user_id == reaction.user_id and r.type == reaction.type for r in rec.reactions):
            return rec
        return replace(rec, reactions=(*rec.reactions, reaction))

    return _map_recognition(state, recognition_id, apply)


def remove_reaction(
    state: ToastState, recognition_id: str, user_id: str, rtype: ReactionType
) -> ToastState:
    return _map_recognition(
        state,
        recognition_id,
        lambda rec: replace(
            rec,
            reactions=tuple(
                r for r in rec.reactions if not (r.user_id == user_id and r.type == rtype)
            ),
        ),
    )


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------
def add_comment(state: ToastState, recognition_id: str, comment: Comment) -> ToastState:
    return _map_recognition(
        state, recognition_id, lambda rec: replace(rec, comments=(*rec.comments, comment))
    )


def update_comment(
    state: ToastState,
    recognition_id: str,
    comment_id: str,
    content: str,
    *,
    now: datetime | None = None,
) -> ToastState:
    stamp = parse_ts(now or utcnow())
    text = sanitize_message(content)
    return _map_recognition(
        state,
        recognition_id,
        lambda rec: replace(
            rec,
            comments=tuple(
                replace(c, content=text, updated_at=stamp) if c.id == comment_id else c
                for c in rec.comments
            ),
        ),
    )


def delete_comment(state: ToastState, recognition_id: str, comment_id: str) -> ToastState:
    return _map_recognition(
        state,
        recognition_id,
        lambda rec: replace(rec, comments=tuple(c for c in rec.comments if c.id != comment_id)),
    )


# ---------------------------------------------------------------------------
# Social counters
# ---------------------------------------------------------------------------
def increment_reposts(state: ToastState, recognition_id: str) -> ToastState:
    return _map_recognition(state, recognition_id, lambda r: replace(r, reposts=r.reposts + 1))


def increment_bookmarks(state: ToastState, recognition_id: str) -> ToastState:
    return _map_recognition(state, recognition_id, lambda r: replace(r, bookmarks=r.bookmarks + 1))


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------
def get_recognition(state: ToastState, recognition_id: str) -> Recognition | None:
    return next((r for r in state.recognitions if r.id == recognition_id), None)


def recognitions_by_giver(state: ToastState, user_id: str) -> list[Recognition]:
    return [r for r in state.recognitions if r.giver_id == user_id]


def recognitions_by_recipient(state: ToastState, user_id: str) -> list[Recognition]:
    return [r for r in state.recognitions if user_id in r.recipient_ids]


def recognitions_by_value(state: ToastState, value: CompanyValue) -> list[Recognition]:
    return [r for r in state.recognitions if r.value == value]


def recent_recognitions(state: ToastState, limit: int) -> list[Recognition]:
    return list(state.recognitions[:limit])
