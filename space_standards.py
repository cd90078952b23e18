"""
space_standards.py
──────────────────
Texas school facility space standards and IBC plumbing profiles.
Based on 19 TAC §61.1040 (TEA new construction standards) and the
IBC Chapter 29 plumbing fixture tables for Group E occupancies.

Usage:
    from space_standards import CAMPUS_STANDARDS, CampusType, code_profile
    std = CAMPUS_STANDARDS[CampusType.MIDDLE]
    ibc = code_profile("2021")
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping


# ─── Enums ────────────────────────────────────────────────────────────────────

class CampusType(str, Enum):
    ELEMENTARY = "elementary"
    MIDDLE     = "middle"
    HIGH       = "high"


class FlexibilityLevel(str, Enum):
    L1 = "L1"
    L2 = "L2"
    L3 = "L3"
    L4 = "L4"


class CodeEdition(str, Enum):
    IBC_2003 = "2003"
    IBC_2012 = "2012"
    IBC_2015 = "2015"
    IBC_2018 = "2018"
    IBC_2021 = "2021"
    IBC_2024 = "2024"


class ComplianceMethod(str, Enum):
    QUANTITATIVE = "quantitative"   # §61.1040(h)
    QUALITATIVE  = "qualitative"    # §61.1040(i), board-approved practices


class ScienceConfig(str, Enum):
    COMBO    = "combo"      # combination classroom/lab
    SEPARATE = "separate"   # stand-alone lab + paired classrooms


FLEXIBILITY_DESCRIPTIONS: Mapping[FlexibilityLevel, str] = MappingProxyType({
    FlexibilityLevel.L1: "Fixed teacher presentation, attached desk/chairs, teacher-centric, minimal flexibility",
    FlexibilityLevel.L2: "Fixed presentation, detached furniture, moderate digital access, limited outdoor visibility",
    FlexibilityLevel.L3: "Multiple presentation spaces, flexible mobile furniture, high digital access, outdoor proximity",
    FlexibilityLevel.L4: "Mobile presentation spaces, direct outdoor access, reconfigurable walls, anytime/anywhere philosophy",
})


# ─── Data classes ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RegulatoryProfile:
    """Plumbing-relevant provisions of one IBC edition."""
    edition:                   CodeEdition
    label:                     str
    note:                      str
    gender_neutral_provisions: bool
    single_user_contribute:    bool
    separate_facilities_threshold: int    # occupant load below which one facility may serve both sexes
    urinal_sub_max:            float      # max fraction of male WCs substituted by urinals
    df_exempt_threshold:       int        # drinking fountains not required at or below this load


@dataclass(frozen=True)
class ScienceAreas:
    combo:        int                     # SF/student, combination classroom/lab
    separate_lab: int | None = None       # SF/student, stand-alone lab (secondary only)


@dataclass(frozen=True)
class SupportBenchmarks:
    """Support-space SF per enrolled student."""
    admin:        float
    teacher_work: float
    cafeteria:    float
    custodial:    float
    mechanical:   float


@dataclass(frozen=True)
class CampusStandard:
    campus_type:           CampusType
    label:                 str
    default_class_size:    int
    max_class_size:        int
    science_max_class_size: int
    sf_per_student:        Mapping[FlexibilityLevel, int]
    gym_sf:                int
    science_sf:            ScienceAreas
    staff_ratio:           float
    support:               SupportBenchmarks
    net_to_gross:          float

    def sf_for(self, level: FlexibilityLevel | str) -> int:
        return self.sf_per_student[FlexibilityLevel(level)]


# ─── Fixed constants ──────────────────────────────────────────────────────────

SPED_SF_PER_STUDENT = 45          # §61.1040(g)(2)(K) floor

WC_RATIO  = 50                    # Group E: 1 WC per 50 per sex
LAV_RATIO = 50                    # Group E: 1 lavatory per 50 per sex
DF_RATIO  = 100                   # 1 drinking fountain per 100 occupants

STAFF_WC_FIRST_TIER   = 25        # Business occupancy: 1 per 25 for the first 50
STAFF_WC_NEXT_TIER    = 50        #   then 1 per 50
STAFF_LAV_FIRST_TIER  = 40        # 1 per 40 for the first 80
STAFF_LAV_NEXT_TIER   = 80        #   then 1 per 80
STAFF_URINAL_CAP      = 0.5

STUDENTS_PER_CLUSTER  = 250
MIN_STUDENT_CLUSTERS  = 2
STAFF_PER_CLUSTER     = 40
MIN_STAFF_CLUSTERS    = 1

RR_WC_STALL_SF      = 35
RR_WC_ACCESSIBLE_SF = 65
RR_URINAL_SF        = 15
RR_LAVATORY_SF      = 12
RR_CIRCULATION      = 1.35

CAFETERIA_CREDIT_FACTOR = 0.5     # §61.1040(i)(2), ≤50% instructional use

GROSS_FACTOR_MIN = 1.1
GROSS_FACTOR_MAX = 1.7


# ─── IBC edition table ────────────────────────────────────────────────────────

def _profile(edition, label, note, gender_neutral, single_user, df_exempt):
    return RegulatoryProfile(
        edition=edition,
        label=label,
        note=note,
        gender_neutral_provisions=gender_neutral,
        single_user_contribute=single_user,
        separate_facilities_threshold=15,
        urinal_sub_max=0.67,
        df_exempt_threshold=df_exempt,
    )


CODE_PROFILES: Mapping[CodeEdition, RegulatoryProfile] = MappingProxyType({
    CodeEdition.IBC_2003: _profile(
        CodeEdition.IBC_2003, "IBC 2003",
        "TEA default for unincorporated areas without adopted codes per §61.1040(j)(1)(A)",
        False, False, 0),
    CodeEdition.IBC_2012: _profile(
        CodeEdition.IBC_2012, "IBC 2012",
        "Adopted by some smaller Texas municipalities",
        False, True, 0),
    CodeEdition.IBC_2015: _profile(
        CodeEdition.IBC_2015, "IBC 2015",
        "Common in mid-size Texas cities",
        False, True, 15),
    CodeEdition.IBC_2018: _profile(
        CodeEdition.IBC_2018, "IBC 2018",
        "Widely adopted across Texas municipalities",
        False, True, 15),
    CodeEdition.IBC_2021: _profile(
        CodeEdition.IBC_2021, "IBC 2021",
        "Current model code — includes multi-user gender-neutral provisions",
        True, True, 30),
    CodeEdition.IBC_2024: _profile(
        CodeEdition.IBC_2024, "IBC 2024",
        "Latest cycle — expanded gender-neutral/all-gender facility language",
        True, True, 30),
})


# ─── Campus standards table ───────────────────────────────────────────────────
# Sources:
#   Class sizes        → TEC §25.112 (elementary), district practice (secondary)
#   SF/student         → §61.1040(h)(1), table by flexibility level
#   Science            → §61.1040(g)(2)
#   Support benchmarks → district educational specifications

def _levels(l1, l2, l3, l4) -> Mapping[FlexibilityLevel, int]:
    return MappingProxyType({
        FlexibilityLevel.L1: l1,
        FlexibilityLevel.L2: l2,
        FlexibilityLevel.L3: l3,
        FlexibilityLevel.L4: l4,
    })


CAMPUS_STANDARDS: Mapping[CampusType, CampusStandard] = MappingProxyType({
    CampusType.ELEMENTARY: CampusStandard(
        campus_type=CampusType.ELEMENTARY,
        label="Elementary (PK–5)",
        default_class_size=22, max_class_size=22, science_max_class_size=25,
        sf_per_student=_levels(36, 36, 42, 42),
        gym_sf=3000,
        science_sf=ScienceAreas(combo=50),
        staff_ratio=0.10,
        support=SupportBenchmarks(admin=2.5, teacher_work=1.5, cafeteria=12,
                                  custodial=0.8, mechanical=3.0),
        net_to_gross=1.35,
    ),
    CampusType.MIDDLE: CampusStandard(
        campus_type=CampusType.MIDDLE,
        label="Middle School (6–8)",
        default_class_size=25, max_class_size=25, science_max_class_size=28,
        sf_per_student=_levels(32, 32, 36, 36),
        gym_sf=4800,
        science_sf=ScienceAreas(combo=58, separate_lab=42),
        staff_ratio=0.08,
        support=SupportBenchmarks(admin=2.0, teacher_work=1.2, cafeteria=10,
                                  custodial=0.7, mechanical=2.8),
        net_to_gross=1.38,
    ),
    CampusType.HIGH: CampusStandard(
        campus_type=CampusType.HIGH,
        label="High School (9–12)",
        default_class_size=25, max_class_size=25, science_max_class_size=28,
        sf_per_student=_levels(32, 32, 36, 36),
        gym_sf=7500,
        science_sf=ScienceAreas(combo=58, separate_lab=42),
        staff_ratio=0.07,
        support=SupportBenchmarks(admin=1.8, teacher_work=1.0, cafeteria=9,
                                  custodial=0.6, mechanical=2.5),
        net_to_gross=1.40,
    ),
})


def _validate_tables() -> None:
    """Fail at import if any enum member is missing from a lookup table."""
    missing = [e.value for e in CodeEdition if e not in CODE_PROFILES]
    if missing:
        raise RuntimeError(f"Missing IBC profiles for editions: {missing}")
    for ct in CampusType:
        std = CAMPUS_STANDARDS.get(ct)
        if std is None:
            raise RuntimeError(f"Missing campus standard for '{ct.value}'")
        lv = [lvl.value for lvl in FlexibilityLevel if lvl not in std.sf_per_student]
        if lv:
            raise RuntimeError(f"Campus '{ct.value}' missing SF/student for {lv}")
        if std.default_class_size > std.max_class_size:
            raise RuntimeError(f"Campus '{ct.value}' default class size exceeds maximum")


_validate_tables()


# ─── Lookup helpers ───────────────────────────────────────────────────────────

def campus_standard(campus_type: CampusType | str) -> CampusStandard:
    return CAMPUS_STANDARDS[CampusType(campus_type)]


def as_edition(edition: CodeEdition | str | int) -> CodeEdition:
    """Accepts a member, "2021" or 2021."""
    if isinstance(edition, CodeEdition):
        return edition
    return CodeEdition(str(edition).strip())


def code_profile(edition: CodeEdition | str) -> RegulatoryProfile:
    return CODE_PROFILES[as_edition(edition)]


def ceil_int(value: float) -> int:
    """
    Ceiling that ignores binary representation noise, so 750 × 0.10
    gives 75 and not 76. Never rounds a genuine fraction down.
    """
    return math.ceil(round(value, 9))


def library_sf(students: int) -> int:
    """Piecewise-linear library area by enrollment."""
    if students <= 100:
        return 1400
    if students <= 500:
        return 1400 + 4 * (students - 100)
    if students <= 2000:
        return 3000 + 3 * (students - 500)
    return 7500 + 2 * (students - 2000)


def staff_count(students: int, campus_type: CampusType | str) -> int:
    if students <= 0:
        return 0
    return ceil_int(students * campus_standard(campus_type).staff_ratio)
