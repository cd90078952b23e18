"""
parameters.py
─────────────
Advanced planning parameters and lenient parsing of raw user input.

Numbers that are out of range are clamped; numbers that cannot be parsed
fall back to documented defaults. Only an unknown campus type raises.

Usage:
    from parameters import parse_advanced, clamp_class_size
    adv  = parse_advanced("high", {"utilization": "0.9", "scienceConfig": "separate"})
    size = clamp_class_size("high", 30)     # → 25
"""

from __future__ import annotations
import math
from dataclasses import dataclass, replace
from typing import Optional

from space_standards import (
    CampusType, ScienceConfig, campus_standard,
    GROSS_FACTOR_MIN, GROSS_FACTOR_MAX,
)


UTILIZATION_MIN, UTILIZATION_MAX, UTILIZATION_FALLBACK = 0.5, 1.0, 0.85
SPED_PCT_MIN,    SPED_PCT_MAX,    SPED_PCT_FALLBACK    = 0.0, 0.5, 0.12
PERIODS_FALLBACK   = 7
SPED_CAP_FALLBACK  = 12


@dataclass(frozen=True)
class AdvancedParameters:
    periods_per_day: int           = 7
    utilization:     float         = 0.85
    sped_pct:        float         = 0.12
    sped_room_cap:   int           = 12
    science_config:  ScienceConfig = ScienceConfig.COMBO
    elective_rooms:  int           = 0

    def to_dict(self) -> dict:
        return {
            "periods_per_day": self.periods_per_day,
            "utilization":     self.utilization,
            "sped_pct":        self.sped_pct,
            "sped_room_cap":   self.sped_room_cap,
            "science_config":  self.science_config.value,
            "elective_rooms":  self.elective_rooms,
        }


_DEFAULT_ADVANCED: dict[CampusType, AdvancedParameters] = {
    CampusType.ELEMENTARY: AdvancedParameters(periods_per_day=1, utilization=0.85, elective_rooms=2),
    CampusType.MIDDLE:     AdvancedParameters(periods_per_day=7, utilization=0.85, elective_rooms=4),
    CampusType.HIGH:       AdvancedParameters(periods_per_day=7, utilization=0.80, elective_rooms=6),
}

# Accept both the snake_case field names and the camelCase keys a
# browser front end sends.
_ALIASES = {
    "periodsPerDay":  "periods_per_day",
    "spedPct":        "sped_pct",
    "spedRoomCap":    "sped_room_cap",
    "scienceConfig":  "science_config",
    "electiveRooms":  "elective_rooms",
}


def default_advanced(campus_type: CampusType | str) -> AdvancedParameters:
    return _DEFAULT_ADVANCED[CampusType(campus_type)]


# ─── Number coercion ──────────────────────────────────────────────────────────

def _to_int(raw) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return None


def _to_float(raw) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        v = float(raw)
    except (TypeError, ValueError):
        return None
    return v if math.isfinite(v) else None


def _clamp(v, lo, hi):
    return min(hi, max(lo, v))


# ─── Public parsers ───────────────────────────────────────────────────────────

def parse_advanced(campus_type: CampusType | str, raw: Optional[dict] = None) -> AdvancedParameters:
    """
    Build AdvancedParameters from a loose dict, starting from the campus
    defaults. An unparseable value takes the fallback and an out-of-range
    one is clamped: utilization "abc" → 0.85, utilization 3 → 1.0,
    sped_pct 0 → 0.0. A zero period, cap or utilization also falls back.
    """
    base = default_advanced(campus_type)
    if not raw:
        return base

    vals = {_ALIASES.get(k, k): v for k, v in raw.items()}
    changes: dict = {}

    if "periods_per_day" in vals:
        n = _to_int(vals["periods_per_day"])
        changes["periods_per_day"] = max(1, n or PERIODS_FALLBACK)
    if "utilization" in vals:
        u = _to_float(vals["utilization"])
        changes["utilization"] = _clamp(u or UTILIZATION_FALLBACK, UTILIZATION_MIN, UTILIZATION_MAX)
    if "sped_pct" in vals:
        p = _to_float(vals["sped_pct"])
        changes["sped_pct"] = _clamp(SPED_PCT_FALLBACK if p is None else p, SPED_PCT_MIN, SPED_PCT_MAX)
    if "sped_room_cap" in vals:
        n = _to_int(vals["sped_room_cap"])
        changes["sped_room_cap"] = max(1, n or SPED_CAP_FALLBACK)
    if "elective_rooms" in vals:
        n = _to_int(vals["elective_rooms"])
        changes["elective_rooms"] = max(0, n or 0)
    if "science_config" in vals:
        try:
            changes["science_config"] = ScienceConfig(str(vals["science_config"]).lower().strip())
        except ValueError:
            changes["science_config"] = ScienceConfig.COMBO

    return replace(base, **changes)


def clamp_class_size(campus_type: CampusType | str, raw) -> int:
    """None or unparseable → campus default; otherwise clamp to [1, max]."""
    std = campus_standard(campus_type)
    n = _to_int(raw)
    if n is None:
        return std.default_class_size
    return _clamp(n, 1, std.max_class_size)


def clamp_gross_factor(raw) -> Optional[float]:
    """None or unparseable → None (campus default applies)."""
    v = _to_float(raw)
    if v is None:
        return None
    return _clamp(v, GROSS_FACTOR_MIN, GROSS_FACTOR_MAX)


def parse_enrollment(raw) -> int:
    return max(0, _to_int(raw) or 0)


_TRUE_STRINGS = {"true", "1", "yes", "on"}


def parse_flag(raw) -> bool:
    """Only True, 1 or a string such as "true" / "yes" count as set; "false" does not."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return raw == 1
    if isinstance(raw, str):
        return raw.strip().lower() in _TRUE_STRINGS
    return False
