"""
toastx.config — YAML Configuration Loader
==========================================

Reads ``config.yaml`` for identity settings and the recognition tuning
knobs (anti-gaming limits and credit values).  Secrets and the database URL
stay in the environment (``.env``).

Usage::

    from toastx.config import load_config

    cfg = load_config()                       # reads ./config.yaml by default
    print(cfg.company_name)                   # "Toast X"
    print(cfg.limits.daily_quick_toasts)      # 3
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


# ---------------------------------------------------------------------------
# Anti-gaming limits
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class AntiGamingLimits:
    """Rules that keep recognition meaningful rather than exploitable."""

    daily_quick_toasts: int = 3
    daily_standing_ovations: int = 1
    same_person_cooldown_hours: float = 24
    monthly_cap_from_single_person: int = 500
    reciprocal_reduction_percent: int = 50
    reciprocal_detection_hours: float = 48

    @classmethod
    def unlimited(cls) -> AntiGamingLimits:
        """Limits used in admin mode: effectively no gating at all."""
        return cls(
            daily_quick_toasts=999,
            daily_standing_ovations=999,
            same_person_cooldown_hours=0,
            monthly_cap_from_single_person=99999,
            reciprocal_reduction_percent=0,
            reciprocal_detection_hours=0,
        )


# ---------------------------------------------------------------------------
# Credit values
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class CreditValues:
    """Credits awarded to recipients and givers per recognition type."""

    quick_toast_recipient: int = 5
    quick_toast_giver: int = 2
    standing_ovation_recipient: int = 25
    standing_ovation_giver: int = 5
    team_toast_recipient: int = 15  # per member
    team_toast_giver: int = 3
    expert_area_boost: int = 10     # per selected area
    award_bonus: int = 50


DEFAULT_LIMITS = AntiGamingLimits()
DEFAULT_CREDIT_VALUES = CreditValues()


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ToastXConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    company_name: str = "Toast X"

    # Dashboard
    dashboard_port: int = 8000

    # Persistence
    snapshot_key: str = "toast-x-storage"

    # Testing aid: bypasses every anti-gaming limit
    admin_mode: bool = False

    limits: AntiGamingLimits = field(default_factory=AntiGamingLimits)
    credits: CreditValues = field(default_factory=CreditValues)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def _build_limits(raw: dict | None, admin_mode: bool) -> AntiGamingLimits:
    if admin_mode:
        return AntiGamingLimits.unlimited()
    raw = raw or {}
    base = DEFAULT_LIMITS
    return AntiGamingLimits(
        daily_quick_toasts=int(raw.get("daily_quick_toasts", base.daily_quick_toasts)),
        daily_standing_ovations=int(
            raw.get("daily_standing_ovations", base.daily_standing_ovations)
        ),
        same_person_cooldown_hours=float(
            raw.get("same_person_cooldown_hours", base.same_person_cooldown_hours)
        ),
        monthly_cap_from_single_person=int(
            raw.get("monthly_cap_from_single_person", base.monthly_cap_from_single_person)
        ),
        reciprocal_reduction_percent=int(
            raw.get("reciprocal_reduction_percent", base.reciprocal_reduction_percent)
        ),
        reciprocal_detection_hours=float(
            raw.get("reciprocal_detection_hours", base.reciprocal_detection_hours)
        ),
    )


def _build_credits(raw: dict | None) -> CreditValues:
    raw = raw or {}
    known = set(CreditValues.__dataclass_fields__)
    return CreditValues(**{k: int(v) for k, v in raw.items() if k in known})


def load_config(path: str | Path = "config.yaml") -> ToastXConfig:
    """Read *path* and return a :class:`ToastXConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    admin_mode = bool(raw.get("admin_mode", False))
    return ToastXConfig(
        company_name=raw["company_name"],
        dashboard_port=int(raw.get("dashboard_port", 8000)),
        snapshot_key=raw.get("snapshot_key") or "toast-x-storage",
        admin_mode=admin_mode,
        limits=_build_limits(raw.get("anti_gaming"), admin_mode),
        credits=_build_credits(raw.get("credits")),
    )
