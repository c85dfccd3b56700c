"""
toastx.services.leaderboard_service — Leaderboards & Feed Stats
================================================================

Read-only aggregations over a :class:`ToastState` snapshot.  Scores are
counts of recognitions inside the requested timeframe; ties rank by user id
so the ordering is stable.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime

from toastx.database.models import CompanyValue, LeaderboardTimeframe, LeaderboardType
from toastx.engine.timeutil import (
    parse_ts,
    start_of_month,
    start_of_quarter,
    start_of_week,
    utcnow,
)
from toastx.store.state import ToastState


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    rank: int
    user_id: str
    user_name: str
    user_avatar: str | None
    score: int


@dataclass(frozen=True, slots=True)
class RecognitionStats:
    total_recognitions: int
    this_week: int
    this_month: int
    by_value: dict[CompanyValue, int]


def timeframe_start(timeframe: LeaderboardTimeframe, now: datetime | None = None) -> datetime | None:
    """Start of *timeframe*, or None for all time."""
    if timeframe == LeaderboardTimeframe.THIS_WEEK:
        return start_of_week(now)
    if timeframe == LeaderboardTimeframe.THIS_MONTH:
        return start_of_month(now)
    if timeframe == LeaderboardTimeframe.THIS_QUARTER:
        return start_of_quarter(now)
    return None


def get_leaderboard(
    state: ToastState,
    kind: LeaderboardType,
    timeframe: LeaderboardTimeframe,
    limit: int = 10,
    *,
    now: datetime | None = None,
) -> list[LeaderboardEntry]:
    start = timeframe_start(timeframe, parse_ts(now or utcnow()))
    scores: Counter[str] = Counter()
    for rec in state.recognitions:
        if start is not None and rec.created_at < start:
            continue
        if kind == LeaderboardType.MOST_RECOGNIZED:
            scores.update(rec.recipient_ids)
        else:
            scores[rec.giver_id] += 1

    ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))[:limit]
    entries = []
    for rank, (user_id, score) in enumerate(ranked, start=1):
        user = state.users.get(user_id)
        entries.append(
            LeaderboardEntry(
                rank=rank,
                user_id=user_id,
                user_name=user.name if user else "Unknown",
                user_avatar=user.avatar if user else None,
                score=score,
            )
        )
    return entries


def get_stats(state: ToastState, *, now: datetime | None = None) -> RecognitionStats:
    now = parse_ts(now or utcnow())
    week_start, month_start = start_of_week(now), start_of_month(now)
    by_value = {value: 0 for value in CompanyValue}
    this_week = this_month = 0
    for rec in state.recognitions:
        by_value[rec.value] += 1
        if rec.created_at >= week_start:
            this_week += 1
        if rec.created_at >= month_start:
            this_month += 1
    return RecognitionStats(
        total_recognitions=len(state.recognitions),
        this_week=this_week,
        this_month=this_month,
        by_value=by_value,
    )
