"""
toastx.services.recognition_service — Recognition Orchestration
=================================================================

Composes the anti-gaming validator, the credit calculator and the store
transitions into whole actions.  Every action is a pure function
``(state, ...) -> (new_state, result)`` suitable for
:meth:`toastx.store.holder.StateStore.dispatch`.

A rejected action returns the *input* state object untouched, so callers
(and the holder) can tell by identity that nothing was committed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from toastx.config import ToastXConfig
from toastx.constants import AWARDS, COMMENT_MAX_CHARS
from toastx.database.models import (
    AwardType,
    CompanyValue,
    MilestoneBadge,
    NotificationPriority,
    NotificationType,
    ReactionType,
    RecognitionType,
)
from toastx.engine.anti_gaming import (
    AntiGamingCheck,
    can_recognize_multiple,
    check_monthly_cap,
    credits_received_this_month,
    expert_area_slug,
    is_reciprocal,
    sanitize_message,
    validate_expert_areas,
    validate_message,
    validate_recipient_count,
    validate_recipient_ids,
)
from toastx.engine.badges import BADGES, check_badges
from toastx.engine.credits import apply_monthly_cap, calculate_credits
from toastx.engine.timeutil import generate_id, parse_ts, utcnow
from toastx.store import notifications as notif_store
from toastx.store import recognitions as rec_store
from toastx.store import users as user_store
from toastx.store.state import (
    Comment,
    EarnedAward,
    EarnedBadge,
    Reaction,
    RecipientInfo,
    Recognition,
    ToastState,
)

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = ToastXConfig()


# ---------------------------------------------------------------------------
# Input / result types
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class CreateRecognitionInput:
    type: RecognitionType
    recipient_ids: tuple[str, ...]
    value: CompanyValue
    message: str
    expert_areas: tuple[str, ...] = ()
    impact: str | None = None
    image_id: str = ""
    award: AwardType | None = None
    is_private: bool = False
    notify_managers: bool = False
    nominated_for_monthly: bool = False
    chain_parent_id: str | None = None


@dataclass(frozen=True, slots=True)
class CreateRecognitionResult:
    success: bool
    error: str | None = None
    suggested_action: str | None = None
    cooldown_ends_at: datetime | None = None
    recognition_id: str | None = None
    # recipient id → credits actually applied after the monthly clamp
    credits: dict[str, int] = field(default_factory=dict)
    # user id → badges newly earned by this recognition
    new_badges: dict[str, tuple[MilestoneBadge, ...]] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Outcome of a social action; ``id`` carries a created entity's id."""

    success: bool
    error: str | None = None
    id: str | None = None


def _reject(state: ToastState, giver_id: str, error: str, check: AntiGamingCheck | None = None):
    logger.debug("Recognition by %s rejected: %s", giver_id, error)
    return state, CreateRecognitionResult(
        success=False,
        error=error,
        suggested_action=check.suggested_action if check else None,
        cooldown_ends_at=check.cooldown_ends_at if check else None,
    )


# ---------------------------------------------------------------------------
# Gate
# ---------------------------------------------------------------------------
def check_recognition(
    state: ToastState,
    giver_id: str,
    recipient_ids: Sequence[str],
    rtype: RecognitionType,
    *,
    now: datetime | None = None,
    config: ToastXConfig | None = None,
) -> AntiGamingCheck:
    """Would *giver_id* currently be allowed to recognize *recipient_ids*?"""
    config = config or _DEFAULT_CONFIG
    giver = state.users.get(giver_id)
    if giver is None:
        return AntiGamingCheck(allowed=False, reason="User not found")
    return can_recognize_multiple(giver, recipient_ids, rtype, now=now, limits=config.limits)


# ---------------------------------------------------------------------------
# Badges
# ---------------------------------------------------------------------------
def check_and_award_badges(
    state: ToastState, user_id: str, *, now: datetime | None = None
) -> tuple[ToastState, list[MilestoneBadge]]:
    """Award every newly crossed badge and notify the user about each one."""
    now = parse_ts(now or utcnow())
    user = state.users.get(user_id)
    if user is None:
        return state, []

    earned = check_badges(user, now)
    for badge_type in earned:
        badge = BADGES[badge_type]
        state = user_store.award_badge(state, user_id, EarnedBadge(badge_type, now))
        state = notif_store.add_notification(
            state,
            notif_store.build_notification(
                user_id,
                NotificationType.BADGE_EARNED,
                f'You earned the "{badge.name}" badge! {badge.icon}',
                priority=NotificationPriority.HIGH,
                now=now,
            ),
        )
        logger.info("Badge earned: %s by %s", badge_type, user_id)
    return state, earned


# ---------------------------------------------------------------------------
# create_recognition
# ---------------------------------------------------------------------------
def _validate(
    state: ToastState, giver_id: str, data: CreateRecognitionInput, now: datetime, config: ToastXConfig
) -> tuple[str, AntiGamingCheck | None] | None:
    """Return ``(error, check)`` for the first failing rule, or None."""
    ids = data.recipient_ids
    for result in (
        validate_recipient_ids(ids, giver_id),
        validate_recipient_count(data.type, ids),
    ):
        if not result.valid:
            return result.error, None

    if any(rid not in state.users for rid in ids):
        return "Recipient not found", None

    for result in (
        validate_message(data.type, data.message),
        validate_expert_areas(data.type, data.expert_areas),
    ):
        if not result.valid:
            return result.error, None

    giver = state.users[giver_id]
    check = can_recognize_multiple(giver, ids, data.type, now=now, limits=config.limits)
    if not check.allowed:
        return check.reason or "Recognition not allowed", check

    for rid in ids:
        check = check_monthly_cap(state.users[rid], giver_id, now=now, limits=config.limits)
        if not check.allowed:
            return check.reason or "Recognition not allowed", check
    return None


def create_recognition(
    state: ToastState,
    giver_id: str,
    data: CreateRecognitionInput,
    *,
    now: datetime | None = None,
    config: ToastXConfig | None = None,
) -> tuple[ToastState, CreateRecognitionResult]:
    """Validate, gate, and apply a recognition as one all-or-nothing step.

    1. Resolve the giver
    2. Validate input and run the anti-gaming gate (rejections return *state*)
    3. Build the recognition from recipient snapshots
    4. Update counters, daily limits, and the cooldown ledger
    5. Apply credits (reciprocal discount, monthly clamp), expert boosts, awards
    6. Award badges to the giver, then to each recipient
    7. Notify each recipient
    """
    now = parse_ts(now or utcnow())
    config = config or _DEFAULT_CONFIG
    limits, values = config.limits, config.credits

    giver = state.users.get(giver_id)
    if giver is None:
        return _reject(state, giver_id, "User not found")

    failure = _validate(state, giver_id, data, now, config)
    if failure is not None:
        error, check = failure
        return _reject(state, giver_id, error, check)

    ids = tuple(data.recipient_ids)
    recipients = [state.users[rid] for rid in ids]

    # Gratitude chain
    depth = 0
    if data.chain_parent_id:
        parent = rec_store.get_recognition(state, data.chain_parent_id)
        depth = parent.chain_depth + 1 if parent else 1

    recognition_id = generate_id("rec", now=now)
    recognition = Recognition(
        id=recognition_id,
        type=data.type,
        giver_id=giver.id,
        giver_name=giver.name,
        giver_avatar=giver.avatar,
        giver_title=giver.title,
        recipient_ids=ids,
        recipients=tuple(
            RecipientInfo(id=r.id, name=r.name, avatar=r.avatar, title=r.title, team=r.team)
            for r in recipients
        ),
        value=data.value,
        expert_areas=tuple(data.expert_areas),
        message=sanitize_message(data.message),
        impact=sanitize_message(data.impact) if data.impact else None,
        image_id=data.image_id,
        award=data.award,
        created_at=now,
        is_private=data.is_private,
        notify_managers=data.notify_managers,
        nominated_for_monthly=data.nominated_for_monthly,
        chain_parent_id=data.chain_parent_id,
        chain_depth=depth,
    )

    new = rec_store.add_recognition(state, recognition)

    # Giver stats
    new = user_store.increment_recognitions_given(new, giver_id)
    new = user_store.increment_daily_counter(new, giver_id, data.type, now=now)
    new = user_store.update_user(new, giver_id, now=now)
    for rid in ids:
        new = user_store.record_recent_recipient(new, giver_id, rid, now=now)
        new = user_store.increment_recognitions_received(new, rid)
        new = user_store.increment_value_count(new, rid, data.value)

    # Credits
    has_award = data.award is not None
    giver_calc = calculate_credits(data.type, len(data.expert_areas), has_award, values=values, limits=limits)
    new = user_store.add_credits(new, giver_id, giver_calc.giver_credits, now=now)

    applied: dict[str, int] = {}
    for recipient in recipients:
        reciprocal = is_reciprocal(giver, recipient, now=now, limits=limits)
        calc = calculate_credits(
            data.type, len(data.expert_areas), has_award, reciprocal, values=values, limits=limits
        )
        received = credits_received_this_month(recipient, giver_id, now)
        clamp = apply_monthly_cap(received, calc.recipient_total, limits=limits)
        if clamp.capped:
            logger.debug("%s → %s: %s", giver_id, recipient.id, clamp.message)
        applied[recipient.id] = clamp.credits_that_apply
        new = user_store.add_credits(new, recipient.id, clamp.credits_that_apply, now=now)
        new = user_store.record_credits_received(
            new, recipient.id, giver_id, clamp.credits_that_apply, now=now
        )

        for area in data.expert_areas:
            new = user_store.boost_expert_area(
                new, recipient.id, expert_area_slug(area), area, values.expert_area_boost, now=now
            )

        if data.award is not None:
            award = AWARDS[data.award]
            new = user_store.award_award(new, recipient.id, EarnedAward(data.award, recognition_id, now))
            new = notif_store.add_notification(
                new,
                notif_store.build_notification(
                    recipient.id,
                    NotificationType.AWARD_EARNED,
                    f'You received the "{award.name}" award! {award.icon}',
                    recognition_id=recognition_id,
                    priority=NotificationPriority.HIGH,
                    now=now,
                ),
            )

    # Badges
    new_badges: dict[str, tuple[MilestoneBadge, ...]] = {}
    for uid in (giver_id, *ids):
        new, earned = check_and_award_badges(new, uid, now=now)
        if earned:
            new_badges[uid] = tuple(earned)

    # Notify recipients
    value_label = data.value.replace("_", " ").lower()
    for rid in ids:
        new = notif_store.add_notification(
            new,
            notif_store.build_notification(
                rid,
                NotificationType.RECOGNIZED,
                f"{giver.name} recognized you for {value_label}!",
                recognition_id=recognition_id,
                priority=NotificationPriority.HIGH,
                now=now,
            ),
        )

    logger.info(
        "Recognition %s created: %s → %s (%s, %s)",
        recognition_id, giver_id, ", ".join(ids), data.type, data.value,
    )
    return new, CreateRecognitionResult(
        success=True,
        recognition_id=recognition_id,
        credits=applied,
        new_badges=new_badges,
    )


# ---------------------------------------------------------------------------
# Social actions
# ---------------------------------------------------------------------------
def _participants(rec: Recognition) -> list[str]:
    return [rec.giver_id, *rec.recipient_ids]


def _notify_many(
    state: ToastState,
    user_ids: Sequence[str],
    ntype: NotificationType,
    message: str,
    recognition_id: str,
    now: datetime,
    priority: NotificationPriority = NotificationPriority.MEDIUM,
) -> ToastState:
    for uid in dict.fromkeys(user_ids):
        state = notif_store.add_notification(
            state,
            notif_store.build_notification(
                uid, ntype, message, recognition_id=recognition_id, priority=priority, now=now
            ),
        )
    return state


def react(
    state: ToastState,
    recognition_id: str,
    user_id: str,
    reaction_type: ReactionType,
    *,
    now: datetime | None = None,
) -> tuple[ToastState, ActionResult]:
    """Add *user_id*'s reaction and notify the other participants."""
    now = parse_ts(now or utcnow())
    user = state.users.get(user_id)
    if user is None:
        return state, ActionResult(False, "User not found")
    rec = rec_store.get_recognition(state, recognition_id)
    if rec is None:
        return state, ActionResult(False, "Recognition not found")

    new = rec_store.add_reaction(
        state, recognition_id, Reaction(reaction_type, user_id, user.name, now)
    )
    if new is state:
        return state, ActionResult(False, "Already reacted")

    others = [uid for uid in _participants(rec) if uid != user_id]
    new = _notify_many(
        new, others, NotificationType.REACTION,
        f"{user.name} reacted to a recognition you're part of",
        recognition_id, now, NotificationPriority.LOW,
    )
    return new, ActionResult(True)


def unreact(
    state: ToastState, recognition_id: str, user_id: str, reaction_type: ReactionType
) -> tuple[ToastState, ActionResult]:
    new = rec_store.remove_reaction(state, recognition_id, user_id, reaction_type)
    before = rec_store.get_recognition(state, recognition_id)
    after = rec_store.get_recognition(new, recognition_id)
    if before is None or after is None or len(after.reactions) == len(before.reactions):
        return state, ActionResult(False, "Reaction not found")
    return new, ActionResult(True)


def comment(
    state: ToastState,
    recognition_id: str,
    user_id: str,
    content: str,
    *,
    parent_id: str | None = None,
    mentions: Sequence[str] = (),
    now: datetime | None = None,
) -> tuple[ToastState, ActionResult]:
    """Add a comment; mentioned users get MENTION, other participants COMMENT."""
    now = parse_ts(now or utcnow())
    user = state.users.get(user_id)
    if user is None:
        return state, ActionResult(False, "User not found")
    rec = rec_store.get_recognition(state, recognition_id)
    if rec is None:
        return state, ActionResult(False, "Recognition not found")

    text = sanitize_message(content)
    if not text:
        return state, ActionResult(False, "Comment cannot be empty")
    if len(text) > COMMENT_MAX_CHARS:
        return state, ActionResult(False, f"Comment must be at most {COMMENT_MAX_CHARS} characters")
    if parent_id is not None and all(c.id != parent_id for c in rec.comments):
        return state, ActionResult(False, "Parent comment not found")

    mentioned = [uid for uid in dict.fromkeys(mentions) if uid in state.users and uid != user_id]
    comment_id = generate_id("comment", now=now)
    new = rec_store.add_comment(
        state,
        recognition_id,
        Comment(
            id=comment_id,
            user_id=user_id,
            user_name=user.name,
            content=text,
            created_at=now,
            user_avatar=user.avatar,
            user_title=user.title,
            parent_id=parent_id,
            mentions=tuple(mentioned),
        ),
    )

    new = _notify_many(
        new, mentioned, NotificationType.MENTION,
        f"{user.name} mentioned you in a comment", recognition_id, now,
    )
    others = [uid for uid in _participants(rec) if uid != user_id and uid not in mentioned]
    new = _notify_many(
        new, others, NotificationType.COMMENT,
        f"{user.name} commented on a recognition you're part of", recognition_id, now,
    )
    return new, ActionResult(True, id=comment_id)


def edit_comment(
    state: ToastState,
    recognition_id: str,
    comment_id: str,
    user_id: str,
    content: str,
    *,
    now: datetime | None = None,
) -> tuple[ToastState, ActionResult]:
    """Only the author may edit a comment."""
    rec = rec_store.get_recognition(state, recognition_id)
    target = next((c for c in rec.comments if c.id == comment_id), None) if rec else None
    if target is None:
        return state, ActionResult(False, "Comment not found")
    if target.user_id != user_id:
        return state, ActionResult(False, "You can only edit your own comments")
    text = sanitize_message(content)
    if not text:
        return state, ActionResult(False, "Comment cannot be empty")
    if len(text) > COMMENT_MAX_CHARS:
        return state, ActionResult(False, f"Comment must be at most {COMMENT_MAX_CHARS} characters")
    new = rec_store.update_comment(state, recognition_id, comment_id, text, now=now)
    return new, ActionResult(True, id=comment_id)


def remove_comment(
    state: ToastState, recognition_id: str, comment_id: str, user_id: str
) -> tuple[ToastState, ActionResult]:
    rec = rec_store.get_recognition(state, recognition_id)
    target = next((c for c in rec.comments if c.id == comment_id), None) if rec else None
    if target is None:
        return state, ActionResult(False, "Comment not found")
    if target.user_id != user_id:
        return state, ActionResult(False, "You can only delete your own comments")
    return rec_store.delete_comment(state, recognition_id, comment_id), ActionResult(True)


def repost(state: ToastState, recognition_id: str) -> tuple[ToastState, ActionResult]:
    new = rec_store.increment_reposts(state, recognition_id)
    if new is state:
        return state, ActionResult(False, "Recognition not found")
    return new, ActionResult(True)


def bookmark(state: ToastState, recognition_id: str) -> tuple[ToastState, ActionResult]:
    new = rec_store.increment_bookmarks(state, recognition_id)
    if new is state:
        return state, ActionResult(False, "Recognition not found")
    return new, ActionResult(True)


# ---------------------------------------------------------------------------
# Notification actions, scoped to the owning user
# ---------------------------------------------------------------------------
def _owned(state: ToastState, notification_id: str, user_id: str) -> bool:
    return any(n.id == notification_id and n.user_id == user_id for n in state.notifications)


def mark_notification_read(
    state: ToastState, notification_id: str, user_id: str
) -> tuple[ToastState, ActionResult]:
    if not _owned(state, notification_id, user_id):
        return state, ActionResult(False, "Notification not found")
    return notif_store.mark_as_read(state, notification_id), ActionResult(True)


def mark_all_read(state: ToastState, user_id: str) -> tuple[ToastState, ActionResult]:
    if notif_store.unread_count(state, user_id) == 0:
        return state, ActionResult(True)
    return notif_store.mark_all_as_read(state, user_id), ActionResult(True)


def remove_notification(
    state: ToastState, notification_id: str, user_id: str
) -> tuple[ToastState, ActionResult]:
    if not _owned(state, notification_id, user_id):
        return state, ActionResult(False, "Notification not found")
    return notif_store.delete_notification(state, notification_id), ActionResult(True)


def clear_notifications(state: ToastState, user_id: str) -> tuple[ToastState, ActionResult]:
    if not notif_store.notifications_for(state, user_id):
        return state, ActionResult(True)
    return notif_store.clear_all(state, user_id), ActionResult(True)
