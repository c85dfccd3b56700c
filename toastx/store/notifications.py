"""
toastx.store.notifications — Notification Transitions & Selectors
==================================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from toastx.database.models import NotificationPriority, NotificationType
from toastx.engine.timeutil import generate_id, parse_ts, utcnow
from toastx.store.state import Notification, ToastState


def build_notification(
    user_id: str,
    ntype: NotificationType,
    message: str,
    *,
    recognition_id: str | None = None,
    priority: NotificationPriority = NotificationPriority.MEDIUM,
    action_url: str | None = None,
    action_label: str | None = None,
    now: datetime | None = None,
) -> Notification:
    now = parse_ts(now or utcnow())
    return Notification(
        id=generate_id("notif", now=now),
        type=ntype,
        user_id=user_id,
        message=message,
        created_at=now,
        recognition_id=recognition_id,
        priority=priority,
        action_url=action_url,
        action_label=action_label,
    )


def add_notification(state: ToastState, notification: Notification) -> ToastState:
    return replace(state, notifications=(notification, *state.notifications))


def mark_as_read(state: ToastState, notification_id: str) -> ToastState:
    if not any(n.id == notification_id and not n.read for n in state.notifications):
        return state
    return replace(
        state,
        notifications=tuple(
            replace(n, read=True) if n.id == notification_id else n for n in state.notifications
        ),
    )


def mark_all_as_read(state: ToastState, user_id: str) -> ToastState:
    """Mark every notification addressed to *user_id* as read."""
    return replace(
        state,
        notifications=tuple(
            replace(n, read=True) if n.user_id == user_id and not n.read else n
            for n in state.notifications
        ),
    )


def delete_notification(state: ToastState, notification_id: str) -> ToastState:
    return replace(
        state, notifications=tuple(n for n in state.notifications if n.id != notification_id)
    )


def clear_all(state: ToastState, user_id: str) -> ToastState:
    return replace(
        state, notifications=tuple(n for n in state.notifications if n.user_id != user_id)
    )


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------
def notifications_for(state: ToastState, user_id: str) -> list[Notification]:
    return [n for n in state.notifications if n.user_id == user_id]


def unread_count(state: ToastState, user_id: str) -> int:
    return sum(1 for n in state.notifications if n.user_id == user_id and not n.read)


def recent_notifications(state: ToastState, user_id: str, limit: int) -> list[Notification]:
    return notifications_for(state, user_id)[:limit]


def notifications_by_type(
    state: ToastState, user_id: str, ntype: NotificationType
) -> list[Notification]:
    return [n for n in notifications_for(state, user_id) if n.type == ntype]
