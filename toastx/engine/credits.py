"""
toastx.engine.credits — Credit Calculation Pipeline
=====================================================

Pure calculation: recognition type + expert areas + award + reciprocity →
credit breakdown.  No store access.

Pipeline stages:
  Base → Expert boost → Award bonus → Reciprocal reduction → Monthly clamp
"""

from __future__ import annotations

from dataclasses import dataclass

from toastx.config import (
    DEFAULT_CREDIT_VALUES,
    DEFAULT_LIMITS,
    AntiGamingLimits,
    CreditValues,
)
from toastx.database.models import RecognitionType


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class CreditCalculation:
    """Full credit breakdown for one recipient of a recognition.

    ``recipient_credits`` is the base amount only; ``recipient_total`` is
    what the recipient actually earns before the monthly clamp.
    """

    recipient_credits: int
    giver_credits: int
    expert_boost: int
    award_bonus: int
    reciprocal_reduction: int
    recipient_total: int
    breakdown: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class MonthlyCapResult:
    credits_that_apply: int
    capped: bool
    message: str | None = None


# ---------------------------------------------------------------------------
# Stage 1: Base credits
# ---------------------------------------------------------------------------
def get_base_credits(
    rtype: RecognitionType, values: CreditValues = DEFAULT_CREDIT_VALUES
) -> tuple[int, int]:
    """Return ``(recipient, giver)`` base credits for *rtype*.

    Milestone moments are system-generated and carry no credits.
    """
    if rtype == RecognitionType.QUICK_TOAST:
        return values.quick_toast_recipient, values.quick_toast_giver
    if rtype == RecognitionType.STANDING_OVATION:
        return values.standing_ovation_recipient, values.standing_ovation_giver
    if rtype == RecognitionType.TEAM_TOAST:
        return values.team_toast_recipient, values.team_toast_giver
    return 0, 0


# ---------------------------------------------------------------------------
# Stages 2–4: Boosts and reduction
# ---------------------------------------------------------------------------
def calculate_credits(
    rtype: RecognitionType,
    expert_area_count: int,
    has_award: bool,
    is_reciprocal: bool = False,
    *,
    values: CreditValues = DEFAULT_CREDIT_VALUES,
    limits: AntiGamingLimits = DEFAULT_LIMITS,
) -> CreditCalculation:
    """Calculate credits for a single recipient with a readable breakdown."""
    base_recipient, base_giver = get_base_credits(rtype, values)
    breakdown = [f"Base credits: {base_recipient}"]
    total = base_recipient

    expert_boost = expert_area_count * values.expert_area_boost
    if expert_boost > 0:
        total += expert_boost
        breakdown.append(f"Expert areas ({expert_area_count}): +{expert_boost}")

    award_bonus = values.award_bonus if has_award else 0
    if award_bonus > 0:
        total += award_bonus
        breakdown.append(f"Award bonus: +{award_bonus}")

    reduction = 0
    if is_reciprocal:
        reduction = total * limits.reciprocal_reduction_percent // 100
        total -= reduction
        breakdown.append(f"Reciprocal reduction: -{reduction}")

    return CreditCalculation(
        recipient_credits=base_recipient,
        giver_credits=base_giver,
        expert_boost=expert_boost,
        award_bonus=award_bonus,
        reciprocal_reduction=reduction,
        recipient_total=total,
        breakdown=tuple(breakdown),
    )


# ---------------------------------------------------------------------------
# Stage 5: Monthly clamp
# ---------------------------------------------------------------------------
def apply_monthly_cap(
    credits_received_from_giver: int,
    new_credits: int,
    *,
    limits: AntiGamingLimits = DEFAULT_LIMITS,
) -> MonthlyCapResult:
    """Trim *new_credits* so the giver's monthly total never exceeds the cap."""
    cap = limits.monthly_cap_from_single_person
    remaining = cap - credits_received_from_giver

    if remaining <= 0:
        return MonthlyCapResult(
            credits_that_apply=0,
            capped=True,
            message=f"Monthly cap of {cap} credits reached from this person",
        )
    if new_credits > remaining:
        return MonthlyCapResult(
            credits_that_apply=remaining,
            capped=True,
            message=f"Credits capped at {remaining} (monthly limit)",
        )
    return MonthlyCapResult(credits_that_apply=new_credits, capped=False)


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------
def format_credits(credits: int) -> str:
    if credits >= 1000:
        return f"{credits / 1000:.1f}k"
    return str(credits)


def credit_color(credits: int) -> str:
    """Gold / silver / bronze / green tier colour for a credit balance."""
    if credits >= 1000:
        return "#FFD700"
    if credits >= 500:
        return "#C0C0C0"
    if credits >= 100:
        return "#CD7F32"
    return "#6BCB77"
