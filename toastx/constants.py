"""
toastx.constants — Shared Constants & Catalogues
==================================================

Single source of truth for the company value catalogue, the award
catalogue, per-type input bounds, and the user-facing copy returned by the
anti-gaming checks.  Import from here instead of duplicating strings.
"""

from __future__ import annotations

from dataclasses import dataclass

from toastx.database.models import AwardType, CompanyValue, RecognitionType

# ---------------------------------------------------------------------------
# Company values
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ValueDefinition:
    id: CompanyValue
    name: str
    short_name: str
    icon: str
    award: AwardType


COMPANY_VALUES: dict[CompanyValue, ValueDefinition] = {
    CompanyValue.DO_IT_DIFFERENTLY: ValueDefinition(
        CompanyValue.DO_IT_DIFFERENTLY, "We Do It Differently", "Do It Differently",
        "\U0001f680", AwardType.MAVERICK,
    ),
    CompanyValue.HEALTHCARE_IS_PERSONAL: ValueDefinition(
        CompanyValue.HEALTHCARE_IS_PERSONAL, "Healthcare Is Personal",
        "Healthcare Is Personal", "\U0001f49c", AwardType.HEARTBEAT,
    ),
    CompanyValue.BE_ALL_IN: ValueDefinition(
        CompanyValue.BE_ALL_IN, "Be All In", "Be All In", "\U0001f91d",
        AwardType.BRIDGE_BUILDER,
    ),
    CompanyValue.OWN_THE_OUTCOME: ValueDefinition(
        CompanyValue.OWN_THE_OUTCOME, "Own The Outcome", "Own The Outcome",
        "\U0001f3af", AwardType.OWNER,
    ),
    CompanyValue.DO_THE_RIGHT_THING: ValueDefinition(
        CompanyValue.DO_THE_RIGHT_THING, "Do The Right Thing", "Do The Right Thing",
        "⚖️", AwardType.GUARDIAN,
    ),
    CompanyValue.EXPLORE_FEARLESSLY: ValueDefinition(
        CompanyValue.EXPLORE_FEARLESSLY, "Explore Fearlessly", "Explore Fearlessly",
        "\U0001f52d", AwardType.EXPLORER,
    ),
}


# ---------------------------------------------------------------------------
# Awards
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class AwardDefinition:
    type: AwardType
    name: str
    description: str
    icon: str
    value: CompanyValue | None = None

    @property
    def is_special(self) -> bool:
        return self.value is None


AWARDS: dict[AwardType, AwardDefinition] = {
    a.type: a
    for a in (
        AwardDefinition(AwardType.MAVERICK, "The Maverick",
                        "For challenging assumptions, bold approaches, and unexpected solutions",
                        "\U0001f3a8", CompanyValue.DO_IT_DIFFERENTLY),
        AwardDefinition(AwardType.HEARTBEAT, "The Heartbeat",
                        "For patient-centered decisions, empathy, and payer-provider connection",
                        "\U0001f497", CompanyValue.HEALTHCARE_IS_PERSONAL),
        AwardDefinition(AwardType.BRIDGE_BUILDER, "The Bridge Builder",
                        "For exceptional cross-team collaboration and One Team spirit",
                        "\U0001f31f", CompanyValue.BE_ALL_IN),
        AwardDefinition(AwardType.OWNER, "The Owner",
                        "For taking responsibility and driving to results",
                        "\U0001f981", CompanyValue.OWN_THE_OUTCOME),
        AwardDefinition(AwardType.GUARDIAN, "The Guardian",
                        "For integrity, speaking up, and protecting customers & patients",
                        "\U0001f6e1️", CompanyValue.DO_THE_RIGHT_THING),
        AwardDefinition(AwardType.EXPLORER, "The Explorer",
                        "For learning, curiosity, innovation, and data-driven insights",
                        "\U0001f680", CompanyValue.EXPLORE_FEARLESSLY),
        AwardDefinition(AwardType.TOAST_OF_THE_MONTH, "Toast of the Month",
                        "Most impactful recognition of the month", "⭐"),
        AwardDefinition(AwardType.VALUES_CHAMPION, "Values Champion",
                        "Received awards across all 6 values", "\U0001f308"),
        AwardDefinition(AwardType.GRATITUDE_GURU, "Gratitude Guru",
                        "Given 50+ recognitions to others", "\U0001f381"),
        AwardDefinition(AwardType.QUARTERLY_GEM, "Quarterly Gem",
                        "Leadership-selected exceptional contributor", "\U0001f48e"),
        AwardDefinition(AwardType.SUNSHINE_AWARD, "Sunshine Award",
                        "For consistently bringing positivity and lifting others up", "\U0001f33b"),
        AwardDefinition(AwardType.BULLSEYE, "Bullseye",
                        "For exceptional precision and quality in work", "\U0001f3af"),
        AwardDefinition(AwardType.PUZZLE_MASTER, "Puzzle Master",
                        "For solving complex, seemingly impossible problems", "\U0001f9e9"),
        AwardDefinition(AwardType.MENTOR_STAR, "Mentor Star",
                        "For exceptional guidance and support of others' growth", "\U0001f393"),
        AwardDefinition(AwardType.FIRE_STARTER, "Fire Starter",
                        "For igniting new initiatives that gained momentum", "\U0001f525"),
        AwardDefinition(AwardType.CALM_IN_THE_STORM, "Calm In The Storm",
                        "For exceptional composure and leadership during crisis", "\U0001f30a"),
    )
}


def get_award_for_value(value: CompanyValue) -> AwardType | None:
    """Return the value award that represents *value*."""
    for award in AWARDS.values():
        if award.value == value:
            return award.type
    return None


# ---------------------------------------------------------------------------
# Per-type input bounds
# ---------------------------------------------------------------------------
# type → (min_recipients, max_recipients); None means unbounded
RECIPIENT_BOUNDS: dict[RecognitionType, tuple[int, int | None]] = {
    RecognitionType.QUICK_TOAST: (1, 1),
    RecognitionType.STANDING_OVATION: (1, 10),
    RecognitionType.TEAM_TOAST: (2, 50),
    RecognitionType.MILESTONE_MOMENT: (1, None),
}

# type → (min_chars, max_chars) after sanitizing
MESSAGE_BOUNDS: dict[RecognitionType, tuple[int, int]] = {
    RecognitionType.QUICK_TOAST: (10, 500),
    RecognitionType.STANDING_OVATION: (50, 2000),
    RecognitionType.TEAM_TOAST: (20, 1000),
    RecognitionType.MILESTONE_MOMENT: (1, 2000),
}

COMMENT_MAX_CHARS = 1000


# ---------------------------------------------------------------------------
# Anti-gaming rejection copy as (reason, suggested_action)
# ---------------------------------------------------------------------------
DAILY_LIMIT_QUICK_TOAST = (
    "You've used all your Quick Toasts for today!",
    "Come back tomorrow to spread more appreciation, or try a Standing "
    "Ovation for something truly exceptional.",
)
DAILY_LIMIT_STANDING_OVATION = (
    "You've already given a Standing Ovation today.",
    "Standing Ovations are reserved for truly exceptional moments. Try again tomorrow!",
)
COOLDOWN_ACTIVE = (
    "You've recently recognized this person.",
    "Wait a bit before recognizing them again, or thank someone else who deserves it!",
)
MONTHLY_CAP_REACHED = (
    "You've reached the monthly recognition limit for this person.",
    "Spread the love! There are other colleagues who might appreciate your recognition.",
)
RECIPROCAL_DETECTED = (
    "This looks like a mutual recognition exchange.",
    "Recognition is most meaningful when unexpected. Consider recognizing someone else!",
)
