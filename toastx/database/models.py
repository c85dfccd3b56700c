"""
toastx.database.models — Enums & SQLAlchemy 2.0 Data Models
============================================================

The aggregate store lives in memory; the only table is the snapshot blob
it is persisted to.  The domain enums live here so every layer imports them
from one place.

Tables:
- state_snapshots  — Last-writer-wins JSON snapshot of the aggregate store
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all Toast X ORM models."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class RecognitionType(enum.StrEnum):
    """Kinds of recognition a colleague can give."""
    QUICK_TOAST = "QUICK_TOAST"
    STANDING_OVATION = "STANDING_OVATION"
    TEAM_TOAST = "TEAM_TOAST"
    MILESTONE_MOMENT = "MILESTONE_MOMENT"


class CompanyValue(enum.StrEnum):
    """The six values every recognition is anchored to."""
    DO_IT_DIFFERENTLY = "DO_IT_DIFFERENTLY"
    HEALTHCARE_IS_PERSONAL = "HEALTHCARE_IS_PERSONAL"
    BE_ALL_IN = "BE_ALL_IN"
    OWN_THE_OUTCOME = "OWN_THE_OUTCOME"
    DO_THE_RIGHT_THING = "DO_THE_RIGHT_THING"
    EXPLORE_FEARLESSLY = "EXPLORE_FEARLESSLY"


class AwardType(enum.StrEnum):
    """Value awards (one per company value) and special awards."""
    MAVERICK = "MAVERICK"
    HEARTBEAT = "HEARTBEAT"
    BRIDGE_BUILDER = "BRIDGE_BUILDER"
    OWNER = "OWNER"
    GUARDIAN = "GUARDIAN"
    EXPLORER = "EXPLORER"
    TOAST_OF_THE_MONTH = "TOAST_OF_THE_MONTH"
    VALUES_CHAMPION = "VALUES_CHAMPION"
    GRATITUDE_GURU = "GRATITUDE_GURU"
    QUARTERLY_GEM = "QUARTERLY_GEM"
    SUNSHINE_AWARD = "SUNSHINE_AWARD"
    BULLSEYE = "BULLSEYE"
    PUZZLE_MASTER = "PUZZLE_MASTER"
    MENTOR_STAR = "MENTOR_STAR"
    FIRE_STARTER = "FIRE_STARTER"
    CALM_IN_THE_STORM = "CALM_IN_THE_STORM"


class MilestoneBadge(enum.StrEnum):
    """Badges awarded automatically when a counter crosses a threshold."""
    TOAST_DEBUT = "TOAST_DEBUT"
    GRATEFUL_DOZEN = "GRATEFUL_DOZEN"
    TOAST_TREE = "TOAST_TREE"
    MOUNTAIN_TOP = "MOUNTAIN_TOP"
    FIRST_TOAST = "FIRST_TOAST"
    RISING_STAR = "RISING_STAR"
    STAR_QUALITY = "STAR_QUALITY"
    CONSTELLATION = "CONSTELLATION"
    GALAXY = "GALAXY"
    YEAR_ONE = "YEAR_ONE"
    TRIPLE = "TRIPLE"
    HALF_DECADE = "HALF_DECADE"
    DIAMOND = "DIAMOND"


class BadgeCategory(enum.StrEnum):
    GIVING = "giving"
    RECEIVING = "receiving"
    ANNIVERSARY = "anniversary"


class ReactionType(enum.StrEnum):
    APPLAUSE = "applause"
    CELEBRATE = "celebrate"
    LOVE = "love"
    FIRE = "fire"
    STAR = "star"
    PRAISE = "praise"
    STRONG = "strong"
    MAGIC = "magic"
    ROCKET = "rocket"
    BRILLIANT = "brilliant"
    SHINE = "shine"
    GEM = "gem"


class NotificationType(enum.StrEnum):
    RECOGNIZED = "RECOGNIZED"
    REACTION = "REACTION"
    COMMENT = "COMMENT"
    MENTION = "MENTION"
    BADGE_EARNED = "BADGE_EARNED"
    AWARD_EARNED = "AWARD_EARNED"
    LEADERBOARD_RANK = "LEADERBOARD_RANK"
    GRATITUDE_CHAIN = "GRATITUDE_CHAIN"


class NotificationPriority(enum.StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class LeaderboardType(enum.StrEnum):
    MOST_RECOGNIZED = "MOST_RECOGNIZED"
    MOST_GENEROUS = "MOST_GENEROUS"


class LeaderboardTimeframe(enum.StrEnum):
    THIS_WEEK = "THIS_WEEK"
    THIS_MONTH = "THIS_MONTH"
    THIS_QUARTER = "THIS_QUARTER"
    ALL_TIME = "ALL_TIME"


# ---------------------------------------------------------------------------
# StateSnapshot: persisted aggregate store
# ---------------------------------------------------------------------------
class StateSnapshot(Base):
    """Opaque JSON snapshot of recognitions, users, and notifications.

    One row per storage key.  Writes replace the whole payload, so the
    last writer wins.
    """
    __tablename__ = "state_snapshots"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    payload_json: Mapped[str] = mapped_column(Text, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<StateSnapshot key={self.key!r} version={self.version}>"
