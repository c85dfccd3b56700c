"""
toastx.store.users — User Transitions & Selectors
===================================================

Pure reducer-style transitions over ``ToastState.users``.  Every function
takes a state and returns a new one; an unknown user id returns the input
state unchanged.  Selectors derive read-only lists on demand.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from toastx.database.models import CompanyValue, RecognitionType
from toastx.engine.timeutil import is_today, month_string, parse_ts, today_string, utcnow
from toastx.store.state import (
    EarnedAward,
    EarnedBadge,
    ExpertArea,
    RecentRecipient,
    ToastState,
    ToastUser,
)


def _map_user(
    state: ToastState, user_id: str, fn: Callable[[ToastUser], ToastUser]
) -> ToastState:
    user = state.users.get(user_id)
    if user is None:
        return state
    users = dict(state.users)
    users[user_id] = fn(user)
    return replace(state, users=users)


def _upsert_entry(
    user: ToastUser, counterparty_id: str, fn: Callable[[RecentRecipient], RecentRecipient]
) -> tuple[RecentRecipient, ...]:
    entries = list(user.recent_recipients)
    for i, entry in enumerate(entries):
        if entry.user_id == counterparty_id:
            entries[i] = fn(entry)
            return tuple(entries)
    entries.append(fn(RecentRecipient(user_id=counterparty_id)))
    return tuple(entries)


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------
def add_user(state: ToastState, user: ToastUser) -> ToastState:
    users = dict(state.users)
    users[user.id] = user
    return replace(state, users=users)


def update_user(
    state: ToastState, user_id: str, *, now: datetime | None = None, **changes
) -> ToastState:
    """Apply field *changes* and stamp ``last_active_at``."""
    stamp = parse_ts(now or utcnow())
    return _map_user(state, user_id, lambda u: replace(u, **changes, last_active_at=stamp))


# ---------------------------------------------------------------------------
# Credits
# ---------------------------------------------------------------------------
def add_credits(
    state: ToastState, user_id: str, amount: int, *, now: datetime | None = None
) -> ToastState:
    """Add to lifetime and monthly credits; the monthly counter restarts in a new month."""
    month = month_string(now)

    def apply(u: ToastUser) -> ToastUser:
        this_month = u.credits_this_month if u.credits_month == month else 0
        return replace(
            u,
            credits=u.credits + amount,
            credits_this_month=this_month + amount,
            credits_month=month,
        )

    return _map_user(state, user_id, apply)


# ---------------------------------------------------------------------------
# Expert areas
# ---------------------------------------------------------------------------
def boost_expert_area(
    state: ToastState,
    user_id: str,
    area_id: str,
    area_name: str,
    boost: int,
    *,
    now: datetime | None = None,
) -> ToastState:
    stamp = parse_ts(now or utcnow())

    def apply(u: ToastUser) -> ToastUser:
        areas = list(u.expert_areas)
        for i, area in enumerate(areas):
            if area.id == area_id:
                areas[i] = replace(area, score=area.score + boost, last_boosted_at=stamp)
                break
        else:
            areas.append(ExpertArea(area_id, area_name, boost, stamp))
        return replace(u, expert_areas=tuple(areas))

    return _map_user(state, user_id, apply)


# ---------------------------------------------------------------------------
# Badges & awards
# ---------------------------------------------------------------------------
def award_badge(state: ToastState, user_id: str, badge: EarnedBadge) -> ToastState:
    """Append *badge* unless the user already holds that badge type."""
    user = state.users.get(user_id)
    if user is None or user.has_badge(badge.badge):
        return state
    return _map_user(state, user_id, lambda u: replace(u, earned_badges=(*u.earned_badges, badge)))


def award_award(state: ToastState, user_id: str, award: EarnedAward) -> ToastState:
    return _map_user(state, user_id, lambda u: replace(u, earned_awards=(*u.earned_awards, award)))


def increment_value_count(state: ToastState, user_id: str, value: CompanyValue) -> ToastState:
    def apply(u: ToastUser) -> ToastUser:
        counts = dict(u.values_counts)
        counts[value] = counts.get(value, 0) + 1
        return replace(u, values_counts=counts)

    return _map_user(state, user_id, apply)


# ---------------------------------------------------------------------------
# Anti-gaming bookkeeping
# ---------------------------------------------------------------------------
def increment_daily_counter(
    state: ToastState, user_id: str, rtype: RecognitionType, *, now: datetime | None = None
) -> ToastState:
    """Bump the daily counter for *rtype*, zeroing both counters first on a new day.

    Uncapped types leave the user untouched.
    """
    if rtype not in (RecognitionType.QUICK_TOAST, RecognitionType.STANDING_OVATION):
        return state

    def apply(u: ToastUser) -> ToastUser:
        if not is_today(u.last_recognition_reset, now):
            u = replace(
                u,
                daily_quick_toasts=0,
                daily_standing_ovations=0,
                last_recognition_reset=today_string(now),
            )
        if rtype == RecognitionType.QUICK_TOAST:
            return replace(u, daily_quick_toasts=u.daily_quick_toasts + 1)
        return replace(u, daily_standing_ovations=u.daily_standing_ovations + 1)

    return _map_user(state, user_id, apply)


def record_recent_recipient(
    state: ToastState, giver_id: str, recipient_id: str, *, now: datetime | None = None
) -> ToastState:
    """Stamp the giver's ledger entry for *recipient_id* (starts the cooldown)."""
    stamp = parse_ts(now or utcnow())
    return _map_user(
        state,
        giver_id,
        lambda u: replace(
            u,
            recent_recipients=_upsert_entry(
                u, recipient_id, lambda e: replace(e, last_recognized_at=stamp)
            ),
        ),
    )


def record_credits_received(
    state: ToastState,
    recipient_id: str,
    giver_id: str,
    amount: int,
    *,
    now: datetime | None = None,
) -> ToastState:
    """Add *amount* to what *recipient_id* received from *giver_id* this month."""
    month = month_string(now)

    def bump(entry: RecentRecipient) -> RecentRecipient:
        so_far = entry.credits_from_this_month if entry.month == month else 0
        return replace(entry, credits_from_this_month=so_far + amount, month=month)

    return _map_user(
        state,
        recipient_id,
        lambda u: replace(u, recent_recipients=_upsert_entry(u, giver_id, bump)),
    )


def reset_daily_limits(state: ToastState, *, now: datetime | None = None) -> ToastState:
    today = today_string(now)
    users = {
        uid: replace(u, daily_quick_toasts=0, daily_standing_ovations=0, last_recognition_reset=today)
        for uid, u in state.users.items()
    }
    return replace(state, users=users)


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------
def increment_recognitions_given(state: ToastState, user_id: str) -> ToastState:
    return _map_user(state, user_id, lambda u: replace(u, recognitions_given=u.recognitions_given + 1))


def increment_recognitions_received(state: ToastState, user_id: str) -> ToastState:
    return _map_user(
        state, user_id, lambda u: replace(u, recognitions_received=u.recognitions_received + 1)
    )


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------
def get_user(state: ToastState, user_id: str) -> ToastUser | None:
    return state.users.get(user_id)


def all_users(state: ToastState) -> list[ToastUser]:
    return list(state.users.values())


def users_by_team(state: ToastState, team: str) -> list[ToastUser]:
    return [u for u in state.users.values() if u.team == team]


def top_users_by_credits(state: ToastState, limit: int) -> list[ToastUser]:
    return sorted(state.users.values(), key=lambda u: (-u.credits, u.id))[:limit]
