"""
toastx.engine.anti_gaming — Anti-gaming checks & input validation
===================================================================

Keeps recognition meaningful: per-type daily limits, a same-person
cooldown, a monthly cap on credits from a single giver, and reciprocal
exchange detection.  Every check reads a user snapshot and returns an
:class:`AntiGamingCheck`; nothing here raises for an expected rejection.

Input validation (recipient ids, counts, message length) lives here too and
runs before the anti-gaming checks in the orchestrator.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from toastx.config import DEFAULT_LIMITS, AntiGamingLimits
from toastx.constants import (
    COOLDOWN_ACTIVE,
    DAILY_LIMIT_QUICK_TOAST,
    DAILY_LIMIT_STANDING_OVATION,
    MESSAGE_BOUNDS,
    MONTHLY_CAP_REACHED,
    RECIPIENT_BOUNDS,
)
from toastx.database.models import RecognitionType
from toastx.engine.timeutil import hours_since, is_today, month_string
from toastx.store.state import ToastUser

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class AntiGamingCheck:
    """Outcome of a gating check; reason/suggestion are user-facing copy."""

    allowed: bool
    reason: str | None = None
    suggested_action: str | None = None
    cooldown_ends_at: datetime | None = None
    remaining: int | None = None

    @classmethod
    def reject(cls, copy: tuple[str, str], **kwargs) -> AntiGamingCheck:
        reason, suggestion = copy
        return cls(allowed=False, reason=reason, suggested_action=suggestion, **kwargs)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    error: str | None = None


_OK = ValidationResult(valid=True)


# ---------------------------------------------------------------------------
# Gating checks
# ---------------------------------------------------------------------------
def _daily_cap(rtype: RecognitionType, limits: AntiGamingLimits) -> int | None:
    if rtype == RecognitionType.QUICK_TOAST:
        return limits.daily_quick_toasts
    if rtype == RecognitionType.STANDING_OVATION:
        return limits.daily_standing_ovations
    return None


def check_daily_limit(
    user: ToastUser,
    rtype: RecognitionType,
    *,
    now: datetime | None = None,
    limits: AntiGamingLimits = DEFAULT_LIMITS,
) -> AntiGamingCheck:
    """Can *user* give another recognition of *rtype* today?

    Counters from a previous day count as zero.  Team toasts and milestone
    moments are not capped.
    """
    cap = _daily_cap(rtype, limits)
    if cap is None:
        return AntiGamingCheck(allowed=True)

    if not is_today(user.last_recognition_reset, now):
        return AntiGamingCheck(allowed=True, remaining=cap)

    if rtype == RecognitionType.QUICK_TOAST:
        used, copy = user.daily_quick_toasts, DAILY_LIMIT_QUICK_TOAST
    else:
        used, copy = user.daily_standing_ovations, DAILY_LIMIT_STANDING_OVATION

    remaining = cap - used
    if remaining <= 0:
        logger.debug("Daily %s limit hit for %s (%d/%d)", rtype, user.id, used, cap)
        return AntiGamingCheck.reject(copy, remaining=0)
    return AntiGamingCheck(allowed=True, remaining=remaining)


def check_recipient_cooldown(
    user: ToastUser,
    recipient_id: str,
    *,
    now: datetime | None = None,
    limits: AntiGamingLimits = DEFAULT_LIMITS,
) -> AntiGamingCheck:
    """Has enough time passed since *user* last recognized *recipient_id*?"""
    entry = user.recent_entry(recipient_id)
    if entry is None or entry.last_recognized_at is None:
        return AntiGamingCheck(allowed=True)

    cooldown = limits.same_person_cooldown_hours
    elapsed = hours_since(entry.last_recognized_at, now)
    if elapsed >= cooldown:
        return AntiGamingCheck(allowed=True)

    hours_left = math.ceil(cooldown - elapsed)
    reason, suggestion = COOLDOWN_ACTIVE
    plural = "" if hours_left == 1 else "s"
    logger.debug("Cooldown active: %s → %s (%dh left)", user.id, recipient_id, hours_left)
    return AntiGamingCheck(
        allowed=False,
        reason=f"{reason} You can recognize them again in {hours_left} hour{plural}.",
        suggested_action=suggestion,
        cooldown_ends_at=entry.last_recognized_at + timedelta(hours=cooldown),
    )


def credits_received_this_month(
    recipient: ToastUser, giver_id: str, now: datetime | None = None
) -> int:
    """Credits *recipient* has received from *giver_id* in the current month."""
    entry = recipient.recent_entry(giver_id)
    if entry is None or entry.month != month_string(now):
        return 0
    return entry.credits_from_this_month


def check_monthly_cap(
    recipient: ToastUser,
    giver_id: str,
    *,
    now: datetime | None = None,
    limits: AntiGamingLimits = DEFAULT_LIMITS,
) -> AntiGamingCheck:
    """Reject once *recipient* has received the monthly cap from *giver_id*."""
    received = credits_received_this_month(recipient, giver_id, now)
    cap = limits.monthly_cap_from_single_person
    if received >= cap:
        logger.debug("Monthly cap reached: %s → %s (%d)", giver_id, recipient.id, received)
        return AntiGamingCheck.reject(MONTHLY_CAP_REACHED, remaining=0)
    return AntiGamingCheck(allowed=True, remaining=cap - received)


def can_recognize(
    giver: ToastUser,
    recipient_id: str,
    rtype: RecognitionType,
    *,
    now: datetime | None = None,
    limits: AntiGamingLimits = DEFAULT_LIMITS,
) -> AntiGamingCheck:
    """Daily limit, then cooldown.  The first failure is returned as-is."""
    daily = check_daily_limit(giver, rtype, now=now, limits=limits)
    if not daily.allowed:
        return daily
    cooldown = check_recipient_cooldown(giver, recipient_id, now=now, limits=limits)
    if not cooldown.allowed:
        return cooldown
    return AntiGamingCheck(allowed=True, remaining=daily.remaining)


def can_recognize_multiple(
    giver: ToastUser,
    recipient_ids: Sequence[str],
    rtype: RecognitionType,
    *,
    now: datetime | None = None,
    limits: AntiGamingLimits = DEFAULT_LIMITS,
) -> AntiGamingCheck:
    """Daily limit once, then cooldown per recipient in order."""
    daily = check_daily_limit(giver, rtype, now=now, limits=limits)
    if not daily.allowed:
        return daily
    for recipient_id in recipient_ids:
        cooldown = check_recipient_cooldown(giver, recipient_id, now=now, limits=limits)
        if not cooldown.allowed:
            return cooldown
    return AntiGamingCheck(allowed=True, remaining=daily.remaining)


def is_reciprocal(
    giver: ToastUser,
    recipient: ToastUser,
    *,
    now: datetime | None = None,
    limits: AntiGamingLimits = DEFAULT_LIMITS,
) -> bool:
    """True when *recipient* recognized *giver* inside the detection window."""
    window = limits.reciprocal_detection_hours
    if window <= 0:
        return False
    entry = recipient.recent_entry(giver.id)
    if entry is None or entry.last_recognized_at is None:
        return False
    return hours_since(entry.last_recognized_at, now) < window


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------
def validate_recipient_ids(ids: Sequence[str], current_user_id: str) -> ValidationResult:
    if not ids:
        return ValidationResult(False, "At least one recipient is required")
    if current_user_id in ids:
        return ValidationResult(False, "You can't recognize yourself (nice try though!)")
    if len(set(ids)) != len(ids):
        return ValidationResult(False, "Duplicate recipients detected")
    return _OK


def validate_recipient_count(rtype: RecognitionType, ids: Sequence[str]) -> ValidationResult:
    low, high = RECIPIENT_BOUNDS[rtype]
    label = rtype.replace("_", " ").title()
    if len(ids) < low:
        return ValidationResult(False, f"{label} needs at least {low} recipient(s)")
    if high is not None and len(ids) > high:
        return ValidationResult(False, f"{label} allows at most {high} recipient(s)")
    return _OK


def validate_message(rtype: RecognitionType, message: str) -> ValidationResult:
    """Check the sanitized *message* length against the per-type bounds."""
    low, high = MESSAGE_BOUNDS[rtype]
    length = len(sanitize_message(message))
    if length < low:
        return ValidationResult(False, f"Message must be at least {low} characters")
    if length > high:
        return ValidationResult(False, f"Message must be at most {high} characters")
    return _OK


def validate_expert_areas(rtype: RecognitionType, expert_areas: Sequence[str]) -> ValidationResult:
    if rtype == RecognitionType.STANDING_OVATION and not expert_areas:
        return ValidationResult(False, "Select at least one expert area")
    return _OK


_WHITESPACE = re.compile(r"\s+")


def sanitize_message(message: str) -> str:
    """Trim and collapse whitespace runs to a single space."""
    return _WHITESPACE.sub(" ", message.strip())


def expert_area_slug(name: str) -> str:
    """Lowercase *name* and join its words with hyphens."""
    return _WHITESPACE.sub("-", name.strip().lower())
