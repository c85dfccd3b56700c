"""
toastx.store.snapshot — State ⇄ JSON-compatible dict
=====================================================

Snapshot shape::

    {
      "version": 1,
      "recognitions": [ {...}, ... ],   # newest first
      "users": { "<id>": {...}, ... },
      "notifications": [ {...}, ... ]   # newest first
    }

Loading merges with defaults: a missing or malformed top-level collection
falls back to the defaults' collection, and missing entity fields fall back
to the dataclass defaults.  Entities missing a required field are skipped.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from toastx.database.models import (
    AwardType,
    CompanyValue,
    MilestoneBadge,
    NotificationPriority,
    NotificationType,
    ReactionType,
    RecognitionType,
)
from toastx.engine.timeutil import parse_ts
from toastx.store.state import (
    Comment,
    EarnedAward,
    EarnedBadge,
    ExpertArea,
    Notification,
    Reaction,
    RecentRecipient,
    RecipientInfo,
    Recognition,
    ToastState,
    ToastUser,
)

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def _ts(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_opt_ts(value: str | None) -> datetime | None:
    return parse_ts(value) if value else None


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------
def _reaction_to_dict(r: Reaction) -> dict[str, Any]:
    return {
        "type": str(r.type),
        "user_id": r.user_id,
        "user_name": r.user_name,
        "created_at": _ts(r.created_at),
    }


def _comment_to_dict(c: Comment) -> dict[str, Any]:
    return {
        "id": c.id,
        "user_id": c.user_id,
        "user_name": c.user_name,
        "user_avatar": c.user_avatar,
        "user_title": c.user_title,
        "content": c.content,
        "created_at": _ts(c.created_at),
        "updated_at": _ts(c.updated_at),
        "reactions": [_reaction_to_dict(r) for r in c.reactions],
        "parent_id": c.parent_id,
        "mentions": list(c.mentions),
    }


def recognition_to_dict(rec: Recognition) -> dict[str, Any]:
    return {
        "id": rec.id,
        "type": str(rec.type),
        "giver_id": rec.giver_id,
        "giver_name": rec.giver_name,
        "giver_avatar": rec.giver_avatar,
        "giver_title": rec.giver_title,
        "recipient_ids": list(rec.recipient_ids),
        "recipients": [
            {"id": p.id, "name": p.name, "avatar": p.avatar, "title": p.title, "team": p.team}
            for p in rec.recipients
        ],
        "value": str(rec.value),
        "expert_areas": list(rec.expert_areas),
        "message": rec.message,
        "impact": rec.impact,
        "image_id": rec.image_id,
        "award": str(rec.award) if rec.award else None,
        "created_at": _ts(rec.created_at),
        "updated_at": _ts(rec.updated_at),
        "reactions": [_reaction_to_dict(r) for r in rec.reactions],
        "comments": [_comment_to_dict(c) for c in rec.comments],
        "reposts": rec.reposts,
        "bookmarks": rec.bookmarks,
        "is_private": rec.is_private,
        "notify_managers": rec.notify_managers,
        "nominated_for_monthly": rec.nominated_for_monthly,
        "chain_parent_id": rec.chain_parent_id,
        "chain_depth": rec.chain_depth,
    }


def user_to_dict(u: ToastUser) -> dict[str, Any]:
    return {
        "id": u.id,
        "name": u.name,
        "email": u.email,
        "title": u.title,
        "team": u.team,
        "department": u.department,
        "avatar": u.avatar,
        "manager_id": u.manager_id,
        "credits": u.credits,
        "credits_this_month": u.credits_this_month,
        "credits_month": u.credits_month,
        "recognitions_given": u.recognitions_given,
        "recognitions_received": u.recognitions_received,
        "expert_areas": [
            {"id": a.id, "name": a.name, "score": a.score, "last_boosted_at": _ts(a.last_boosted_at)}
            for a in u.expert_areas
        ],
        "earned_badges": [
            {"badge": str(b.badge), "earned_at": _ts(b.earned_at)} for b in u.earned_badges
        ],
        "earned_awards": [
            {"award": str(a.award), "recognition_id": a.recognition_id, "earned_at": _ts(a.earned_at)}
            for a in u.earned_awards
        ],
        "values_counts": {str(k): v for k, v in u.values_counts.items()},
        "daily_quick_toasts": u.daily_quick_toasts,
        "daily_standing_ovations": u.daily_standing_ovations,
        "last_recognition_reset": u.last_recognition_reset,
        "recent_recipients": [
            {
                "user_id": e.user_id,
                "last_recognized_at": _ts(e.last_recognized_at),
                "credits_from_this_month": e.credits_from_this_month,
                "month": e.month,
            }
            for e in u.recent_recipients
        ],
        "joined_at": _ts(u.joined_at),
        "last_active_at": _ts(u.last_active_at),
    }


def notification_to_dict(n: Notification) -> dict[str, Any]:
    return {
        "id": n.id,
        "type": str(n.type),
        "user_id": n.user_id,
        "recognition_id": n.recognition_id,
        "message": n.message,
        "read": n.read,
        "priority": str(n.priority),
        "created_at": _ts(n.created_at),
        "action_url": n.action_url,
        "action_label": n.action_label,
    }


def state_to_dict(state: ToastState) -> dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "recognitions": [recognition_to_dict(r) for r in state.recognitions],
        "users": {uid: user_to_dict(u) for uid, u in state.users.items()},
        "notifications": [notification_to_dict(n) for n in state.notifications],
    }


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------
def _reaction_from_dict(d: dict) -> Reaction:
    return Reaction(
        type=ReactionType(d["type"]),
        user_id=d["user_id"],
        user_name=d.get("user_name", ""),
        created_at=parse_ts(d["created_at"]),
    )


def _comment_from_dict(d: dict) -> Comment:
    return Comment(
        id=d["id"],
        user_id=d["user_id"],
        user_name=d.get("user_name", ""),
        content=d.get("content", ""),
        created_at=parse_ts(d["created_at"]),
        user_avatar=d.get("user_avatar"),
        user_title=d.get("user_title"),
        updated_at=_parse_opt_ts(d.get("updated_at")),
        reactions=tuple(_reaction_from_dict(r) for r in d.get("reactions") or ()),
        parent_id=d.get("parent_id"),
        mentions=tuple(d.get("mentions") or ()),
    )


def recognition_from_dict(d: dict) -> Recognition:
    award = d.get("award")
    return Recognition(
        id=d["id"],
        type=RecognitionType(d["type"]),
        giver_id=d["giver_id"],
        giver_name=d.get("giver_name", ""),
        recipient_ids=tuple(d.get("recipient_ids") or ()),
        recipients=tuple(
            RecipientInfo(
                id=p["id"],
                name=p.get("name", ""),
                avatar=p.get("avatar"),
                title=p.get("title"),
                team=p.get("team"),
            )
            for p in d.get("recipients") or ()
        ),
        value=CompanyValue(d["value"]),
        message=d.get("message", ""),
        created_at=parse_ts(d["created_at"]),
        giver_avatar=d.get("giver_avatar"),
        giver_title=d.get("giver_title"),
        expert_areas=tuple(d.get("expert_areas") or ()),
        impact=d.get("impact"),
        image_id=d.get("image_id", ""),
        award=AwardType(award) if award else None,
        updated_at=_parse_opt_ts(d.get("updated_at")),
        reactions=tuple(_reaction_from_dict(r) for r in d.get("reactions") or ()),
        comments=tuple(_comment_from_dict(c) for c in d.get("comments") or ()),
        reposts=int(d.get("reposts", 0)),
        bookmarks=int(d.get("bookmarks", 0)),
        is_private=bool(d.get("is_private", False)),
        notify_managers=bool(d.get("notify_managers", False)),
        nominated_for_monthly=bool(d.get("nominated_for_monthly", False)),
        chain_parent_id=d.get("chain_parent_id"),
        chain_depth=int(d.get("chain_depth", 0)),
    )


def user_from_dict(d: dict) -> ToastUser:
    return ToastUser(
        id=d["id"],
        name=d["name"],
        email=d.get("email", ""),
        title=d.get("title", ""),
        team=d.get("team", ""),
        department=d.get("department", ""),
        avatar=d.get("avatar"),
        manager_id=d.get("manager_id"),
        credits=int(d.get("credits", 0)),
        credits_this_month=int(d.get("credits_this_month", 0)),
        credits_month=d.get("credits_month", ""),
        recognitions_given=int(d.get("recognitions_given", 0)),
        recognitions_received=int(d.get("recognitions_received", 0)),
        expert_areas=tuple(
            ExpertArea(
                id=a["id"],
                name=a.get("name", a["id"]),
                score=int(a.get("score", 0)),
                last_boosted_at=_parse_opt_ts(a.get("last_boosted_at")),
            )
            for a in d.get("expert_areas") or ()
        ),
        earned_badges=tuple(
            EarnedBadge(MilestoneBadge(b["badge"]), parse_ts(b["earned_at"]))
            for b in d.get("earned_badges") or ()
        ),
        earned_awards=tuple(
            EarnedAward(AwardType(a["award"]), a.get("recognition_id", ""), parse_ts(a["earned_at"]))
            for a in d.get("earned_awards") or ()
        ),
        values_counts={
            CompanyValue(k): int(v) for k, v in (d.get("values_counts") or {}).items()
        },
        daily_quick_toasts=int(d.get("daily_quick_toasts", 0)),
        daily_standing_ovations=int(d.get("daily_standing_ovations", 0)),
        last_recognition_reset=d.get("last_recognition_reset", ""),
        recent_recipients=tuple(
            RecentRecipient(
                user_id=e["user_id"],
                last_recognized_at=_parse_opt_ts(e.get("last_recognized_at")),
                credits_from_this_month=int(e.get("credits_from_this_month", 0)),
                month=e.get("month", ""),
            )
            for e in d.get("recent_recipients") or ()
        ),
        joined_at=_parse_opt_ts(d.get("joined_at")),
        last_active_at=_parse_opt_ts(d.get("last_active_at")),
    )


def notification_from_dict(d: dict) -> Notification:
    return Notification(
        id=d["id"],
        type=NotificationType(d["type"]),
        user_id=d.get("user_id", ""),
        message=d.get("message", ""),
        created_at=parse_ts(d["created_at"]),
        recognition_id=d.get("recognition_id"),
        read=bool(d.get("read", False)),
        priority=NotificationPriority(d.get("priority", NotificationPriority.MEDIUM)),
        action_url=d.get("action_url"),
        action_label=d.get("action_label"),
    )


def _decode_all(items, decode, kind: str) -> list:
    out = []
    for item in items:
        try:
            out.append(decode(item))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed %s in snapshot: %s", kind, exc)
    return out


def state_from_dict(data: Any, defaults: ToastState | None = None) -> ToastState:
    """Rebuild a :class:`ToastState` from a snapshot, merging with *defaults*."""
    defaults = defaults or ToastState()
    if not isinstance(data, dict):
        logger.warning("Snapshot is not an object; using defaults")
        return defaults

    raw_recs = data.get("recognitions")
    if isinstance(raw_recs, list):
        recognitions = tuple(_decode_all(raw_recs, recognition_from_dict, "recognition"))
    else:
        recognitions = defaults.recognitions

    raw_users = data.get("users")
    if isinstance(raw_users, dict):
        users = {u.id: u for u in _decode_all(raw_users.values(), user_from_dict, "user")}
    else:
        users = dict(defaults.users)

    raw_notifs = data.get("notifications")
    if isinstance(raw_notifs, list):
        notifications = tuple(_decode_all(raw_notifs, notification_from_dict, "notification"))
    else:
        notifications = defaults.notifications

    return ToastState(users=users, recognitions=recognitions, notifications=notifications)
