"""
toastx.api.routes.public — Read-only public endpoints
=======================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from toastx.api.deps import get_store
from toastx.constants import AWARDS, COMPANY_VALUES
from toastx.database.models import BadgeCategory, LeaderboardTimeframe, LeaderboardType
from toastx.engine.badges import BADGES, METRIC_HANDLERS, get_badge_progress
from toastx.engine.credits import credit_color, format_credits
from toastx.engine.timeutil import utcnow
from toastx.services.leaderboard_service import get_leaderboard, get_stats
from toastx.store import users as user_store
from toastx.store.holder import StateStore
from toastx.store.snapshot import user_to_dict
from toastx.store.state import ToastUser

router = APIRouter(tags=["public"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _user_summary(u: ToastUser) -> dict:
    return {
        "id": u.id,
        "name": u.name,
        "avatar": u.avatar,
        "title": u.title,
        "team": u.team,
        "credits": u.credits,
        "credits_display": format_credits(u.credits),
        "credits_color": credit_color(u.credits),
    }


def _badge_progress(u: ToastUser) -> dict:
    now = utcnow()
    progress = {}
    for category in BadgeCategory:
        count = METRIC_HANDLERS[category](u, now)
        next_badge, percent, remaining = get_badge_progress(category, count)
        progress[str(category)] = {
            "current": count,
            "next_badge": str(next_badge) if next_badge else None,
            "progress": round(percent, 1),
            "remaining": remaining,
        }
    return progress


# ---------------------------------------------------------------------------
# GET /users
# ---------------------------------------------------------------------------
@router.get("/users")
def list_users(
    team: str | None = None,
    store: StateStore = Depends(get_store),
):
    users = (
        store.select(user_store.users_by_team, team) if team else store.select(user_store.all_users)
    )
    return [_user_summary(u) for u in sorted(users, key=lambda u: u.name)]


@router.get("/users/top")
def top_users(
    limit: int = Query(10, ge=1, le=100),
    store: StateStore = Depends(get_store),
):
    return [_user_summary(u) for u in store.select(user_store.top_users_by_credits, limit)]


@router.get("/users/{user_id}")
def get_user(user_id: str, store: StateStore = Depends(get_store)):
    user = store.select(user_store.get_user, user_id)
    if user is None:
        raise HTTPException(404, "User not found")
    profile = user_to_dict(user)
    # Anti-gaming bookkeeping stays private
    for key in ("recent_recipients", "daily_quick_toasts", "daily_standing_ovations",
                "last_recognition_reset"):
        profile.pop(key, None)
    profile["badge_progress"] = _badge_progress(user)
    return profile


# ---------------------------------------------------------------------------
# GET /leaderboard
# ---------------------------------------------------------------------------
@router.get("/leaderboard")
def leaderboard(
    kind: LeaderboardType = LeaderboardType.MOST_RECOGNIZED,
    timeframe: LeaderboardTimeframe = LeaderboardTimeframe.THIS_MONTH,
    limit: int = Query(10, ge=1, le=100),
    store: StateStore = Depends(get_store),
):
    entries = get_leaderboard(store.state, kind, timeframe, limit)
    return {
        "kind": str(kind),
        "timeframe": str(timeframe),
        "entries": [
            {
                "rank": e.rank,
                "user_id": e.user_id,
                "user_name": e.user_name,
                "user_avatar": e.user_avatar,
                "score": e.score,
            }
            for e in entries
        ],
    }


# ---------------------------------------------------------------------------
# GET /stats
# ---------------------------------------------------------------------------
@router.get("/stats")
def stats(store: StateStore = Depends(get_store)):
    s = get_stats(store.state)
    return {
        "total_recognitions": s.total_recognitions,
        "this_week": s.this_week,
        "this_month": s.this_month,
        "by_value": {str(k): v for k, v in s.by_value.items()},
    }


# ---------------------------------------------------------------------------
# Catalogues
# ---------------------------------------------------------------------------
@router.get("/catalog")
def catalog():
    """Company values, awards, and badges for building forms."""
    return {
        "values": [
            {"id": str(v.id), "name": v.name, "short_name": v.short_name, "icon": v.icon,
             "award": str(v.award)}
            for v in COMPANY_VALUES.values()
        ],
        "awards": [
            {"type": str(a.type), "name": a.name, "description": a.description, "icon": a.icon,
             "value": str(a.value) if a.value else None}
            for a in AWARDS.values()
        ],
        "badges": [
            {"type": str(b.type), "name": b.name, "description": b.description, "icon": b.icon,
             "requirement": b.requirement, "category": str(b.category)}
            for b in BADGES.values()
        ],
    }
