"""
toastx.store.state — Immutable Domain Records
===============================================

Frozen dataclasses for every entity the aggregate store holds, plus the
``ToastState`` aggregate itself.  Transitions never mutate these; they build
new instances with :func:`dataclasses.replace`.

Collections are tuples (newest first for recognitions and notifications);
users are a single ``id → ToastUser`` mapping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from toastx.database.models import (
    AwardType,
    CompanyValue,
    MilestoneBadge,
    NotificationPriority,
    NotificationType,
    ReactionType,
    RecognitionType,
)


# ---------------------------------------------------------------------------
# User-owned records
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ExpertArea:
    id: str
    name: str
    score: int = 0
    last_boosted_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class RecentRecipient:
    """Per-counterparty ledger entry kept on a user.

    ``last_recognized_at`` is when the owning user last recognized
    ``user_id`` (None if never).  ``credits_from_this_month`` is what the
    owning user received from ``user_id`` during ``month`` (``YYYY-MM``).
    """

    user_id: str
    last_recognized_at: datetime | None = None
    credits_from_this_month: int = 0
    month: str = ""


@dataclass(frozen=True, slots=True)
class EarnedBadge:
    badge: MilestoneBadge
    earned_at: datetime


@dataclass(frozen=True, slots=True)
class EarnedAward:
    award: AwardType
    recognition_id: str
    earned_at: datetime


@dataclass(frozen=True, slots=True)
class ToastUser:
    id: str
    name: str
    email: str
    title: str = ""
    team: str = ""
    department: str = ""
    avatar: str | None = None
    manager_id: str | None = None

    # Stats
    credits: int = 0
    credits_this_month: int = 0
    credits_month: str = ""
    recognitions_given: int = 0
    recognitions_received: int = 0

    expert_areas: tuple[ExpertArea, ...] = ()
    earned_badges: tuple[EarnedBadge, ...] = ()
    earned_awards: tuple[EarnedAward, ...] = ()
    values_counts: dict[CompanyValue, int] = field(default_factory=dict)

    # Anti-gaming bookkeeping
    daily_quick_toasts: int = 0
    daily_standing_ovations: int = 0
    last_recognition_reset: str = ""
    recent_recipients: tuple[RecentRecipient, ...] = ()

    joined_at: datetime | None = None
    last_active_at: datetime | None = None

    def recent_entry(self, user_id: str) -> RecentRecipient | None:
        """Ledger entry for counterparty *user_id*, if any."""
        for entry in self.recent_recipients:
            if entry.user_id == user_id:
                return entry
        return None

    def has_badge(self, badge: MilestoneBadge) -> bool:
        return any(b.badge == badge for b in self.earned_badges)


# ---------------------------------------------------------------------------
# Recognition records
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class RecipientInfo:
    """Display snapshot of a recipient taken at recognition time."""

    id: str
    name: str
    avatar: str | None = None
    title: str | None = None
    team: str | None = None


@dataclass(frozen=True, slots=True)
class Reaction:
    type: ReactionType
    user_id: str
    user_name: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class Comment:
    id: str
    user_id: str
    user_name: str
    content: str
    created_at: datetime
    user_avatar: str | None = None
    user_title: str | None = None
    updated_at: datetime | None = None
    reactions: tuple[Reaction, ...] = ()
    parent_id: str | None = None
    mentions: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Recognition:
    id: str
    type: RecognitionType
    giver_id: str
    giver_name: str
    recipient_ids: tuple[str, ...]
    recipients: tuple[RecipientInfo, ...]
    value: CompanyValue
    message: str
    created_at: datetime
    giver_avatar: str | None = None
    giver_title: str | None = None
    expert_areas: tuple[str, ...] = ()
    impact: str | None = None
    image_id: str = ""
    award: AwardType | None = None
    updated_at: datetime | None = None

    # Social
    reactions: tuple[Reaction, ...] = ()
    comments: tuple[Comment, ...] = ()
    reposts: int = 0
    bookmarks: int = 0

    # Options
    is_private: bool = False
    notify_managers: bool = False
    nominated_for_monthly: bool = False

    # Gratitude chain
    chain_parent_id: str | None = None
    chain_depth: int = 0


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class Notification:
    id: str
    type: NotificationType
    user_id: str
    message: str
    created_at: datetime
    recognition_id: str | None = None
    read: bool = False
    priority: NotificationPriority = NotificationPriority.MEDIUM
    action_url: str | None = None
    action_label: str | None = None


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ToastState:
    users: dict[str, ToastUser] = field(default_factory=dict)
    recognitions: tuple[Recognition, ...] = ()
    notifications: tuple[Notification, ...] = ()
