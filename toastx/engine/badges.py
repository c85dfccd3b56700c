"""
toastx.engine.badges — Milestone Badge Table
==============================================

Declarative badge catalogue evaluated uniformly.  Each badge names a
category and a requirement; each category maps to a pure metric handler
that reads one number off a user.  A badge is earned when its category's
metric reaches the requirement.

This module is pure calculation: no store writes, no notifications.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from toastx.database.models import BadgeCategory, MilestoneBadge
from toastx.engine.timeutil import parse_ts, utcnow
from toastx.store.state import ToastUser

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BadgeDefinition:
    type: MilestoneBadge
    name: str
    description: str
    icon: str
    requirement: int
    category: BadgeCategory


def _badge(badge, name, description, icon, requirement, category) -> BadgeDefinition:
    return BadgeDefinition(badge, name, description, icon, requirement, category)


_G, _R, _A = BadgeCategory.GIVING, BadgeCategory.RECEIVING, BadgeCategory.ANNIVERSARY

# Table order is the order new badges are reported in.
BADGES: dict[MilestoneBadge, BadgeDefinition] = {
    b.type: b
    for b in (
        _badge(MilestoneBadge.TOAST_DEBUT, "Toast Debut", "First recognition given", "\U0001f331", 1, _G),
        _badge(MilestoneBadge.GRATEFUL_DOZEN, "Grateful Dozen", "12 recognitions given", "\U0001f33f", 12, _G),
        _badge(MilestoneBadge.TOAST_TREE, "Toast Tree", "50 recognitions given", "\U0001f333", 50, _G),
        _badge(MilestoneBadge.MOUNTAIN_TOP, "Mountain Top", "100 recognitions given", "\U0001f3d4️", 100, _G),
        _badge(MilestoneBadge.FIRST_TOAST, "First Toast", "First recognition received", "✨", 1, _R),
        _badge(MilestoneBadge.RISING_STAR, "Rising Star", "10 recognitions received", "\U0001f4ab", 10, _R),
        _badge(MilestoneBadge.STAR_QUALITY, "Star Quality", "25 recognitions received", "\U0001f31f", 25, _R),
        _badge(MilestoneBadge.CONSTELLATION, "Constellation", "50 recognitions received", "⭐", 50, _R),
        _badge(MilestoneBadge.GALAXY, "Galaxy", "100 recognitions received", "\U0001f30c", 100, _R),
        _badge(MilestoneBadge.YEAR_ONE, "Year One", "1 year work anniversary", "\U0001f382", 1, _A),
        _badge(MilestoneBadge.TRIPLE, "Triple", "3 year work anniversary", "\U0001f38a", 3, _A),
        _badge(MilestoneBadge.HALF_DECADE, "Half Decade", "5 year work anniversary", "\U0001f3c6", 5, _A),
        _badge(MilestoneBadge.DIAMOND, "Diamond", "10 year work anniversary", "\U0001f48e", 10, _A),
    )
}


# ---------------------------------------------------------------------------
# Metric handlers: pure functions (user, now) → int
# ---------------------------------------------------------------------------
def _recognitions_given(user: ToastUser, now: datetime) -> int:
    return user.recognitions_given


def _recognitions_received(user: ToastUser, now: datetime) -> int:
    return user.recognitions_received


def _years_of_service(user: ToastUser, now: datetime) -> int:
    """Whole years since ``joined_at``; 0 when the join date is unknown."""
    if user.joined_at is None:
        return 0
    joined = parse_ts(user.joined_at)
    now = parse_ts(now)
    years = now.year - joined.year
    if (now.month, now.day) < (joined.month, joined.day):
        years -= 1
    return max(years, 0)


METRIC_HANDLERS: dict[BadgeCategory, Callable[[ToastUser, datetime], int]] = {
    BadgeCategory.GIVING: _recognitions_given,
    BadgeCategory.RECEIVING: _recognitions_received,
    BadgeCategory.ANNIVERSARY: _years_of_service,
}


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------
def check_badges(user: ToastUser, now: datetime | None = None) -> list[MilestoneBadge]:
    """Return badges *user* qualifies for but has not earned yet."""
    now = now or utcnow()
    metrics = {category: handler(user, now) for category, handler in METRIC_HANDLERS.items()}
    earned = {b.badge for b in user.earned_badges}

    newly_earned: list[MilestoneBadge] = []
    for badge in BADGES.values():
        if badge.type in earned:
            continue
        if metrics[badge.category] >= badge.requirement:
            newly_earned.append(badge.type)
            logger.debug("Badge threshold crossed: %s for %s", badge.type, user.id)
    return newly_earned


def _category_badges(category: BadgeCategory) -> list[BadgeDefinition]:
    return sorted(
        (b for b in BADGES.values() if b.category == category),
        key=lambda b: b.requirement,
    )


def get_next_badge(category: BadgeCategory, current_count: int) -> MilestoneBadge | None:
    """First badge in *category* whose requirement is above *current_count*."""
    for badge in _category_badges(category):
        if badge.requirement > current_count:
            return badge.type
    return None


def get_badge_progress(
    category: BadgeCategory, current_count: int
) -> tuple[MilestoneBadge | None, float, int]:
    """Return ``(next_badge, progress_percent, remaining)``.

    Progress is measured from the previous tier's requirement, so it resets
    to 0 after every badge.  With every badge earned: ``(None, 100, 0)``.
    """
    next_badge = get_next_badge(category, current_count)
    if next_badge is None:
        return None, 100.0, 0

    target = BADGES[next_badge].requirement
    previous = max(
        (b.requirement for b in _category_badges(category) if b.requirement < target),
        default=0,
    )
    progress = min(100.0, (current_count - previous) / (target - previous) * 100)
    return next_badge, progress, target - current_count
