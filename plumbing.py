"""
plumbing.py
───────────
Plumbing fixture counts and restroom floor area.

Students are Group E (Educational): 1 WC and 1 lavatory per 50 per sex.
Staff use the tiered Business occupancy ratios. Restrooms are planned as
clusters, each with one accessible stall per sex (TAS §604).
"""

from __future__ import annotations
import logging
from dataclasses import dataclass

from space_standards import (
    CodeEdition, code_profile, ceil_int,
    WC_RATIO, LAV_RATIO, DF_RATIO,
    STAFF_WC_FIRST_TIER, STAFF_WC_NEXT_TIER,
    STAFF_LAV_FIRST_TIER, STAFF_LAV_NEXT_TIER, STAFF_URINAL_CAP,
    STUDENTS_PER_CLUSTER, MIN_STUDENT_CLUSTERS,
    STAFF_PER_CLUSTER, MIN_STAFF_CLUSTERS,
    RR_WC_STALL_SF, RR_WC_ACCESSIBLE_SF, RR_URINAL_SF, RR_LAVATORY_SF, RR_CIRCULATION,
)

logger = logging.getLogger(__name__)


# ─── Output types ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PlumbingFixtureSet:
    wc_male:    int
    wc_female:  int
    lav_male:   int
    lav_female: int
    clusters:   int
    sf:         int

    def to_dict(self) -> dict:
        return {
            "wc_male":    self.wc_male,
            "wc_female":  self.wc_female,
            "lav_male":   self.lav_male,
            "lav_female": self.lav_female,
            "clusters":   self.clusters,
            "sf":         self.sf,
        }


@dataclass(frozen=True)
class PlumbingResult:
    student:            PlumbingFixtureSet
    staff:              PlumbingFixtureSet
    drinking_fountains: int
    gender_neutral:     bool

    @property
    def total_sf(self) -> int:
        return self.student.sf + self.staff.sf

    def to_dict(self) -> dict:
        return {
            "student":            self.student.to_dict(),
            "staff":              self.staff.to_dict(),
            "drinking_fountains": self.drinking_fountains,
            "total_sf":           self.total_sf,
            "gender_neutral":     self.gender_neutral,
        }


# ─── Fixture ratios ───────────────────────────────────────────────────────────

def per_sex(count: int) -> int:
    return ceil_int(count / 2)


def tiered_count(per_sex_pop: int, first_tier: int, next_tier: int) -> int:
    """1 per `first_tier` up to the tier, then 1 more per `next_tier` beyond it."""
    if per_sex_pop <= first_tier:
        return ceil_int(per_sex_pop / first_tier)
    return 1 + ceil_int((per_sex_pop - first_tier) / next_tier)


def staff_water_closets(per_sex_pop: int) -> int:
    return tiered_count(per_sex_pop, STAFF_WC_FIRST_TIER, STAFF_WC_NEXT_TIER)


def staff_lavatories(per_sex_pop: int) -> int:
    return tiered_count(per_sex_pop, STAFF_LAV_FIRST_TIER, STAFF_LAV_NEXT_TIER)


def drinking_fountains(total_occupants: int, edition: CodeEdition | str) -> int:
    if total_occupants <= code_profile(edition).df_exempt_threshold:
        return 0
    return ceil_int(total_occupants / DF_RATIO)


def student_clusters(students: int) -> int:
    return max(MIN_STUDENT_CLUSTERS, ceil_int(students / STUDENTS_PER_CLUSTER))


def staff_clusters(staff: int) -> int:
    return max(MIN_STAFF_CLUSTERS, ceil_int(staff / STAFF_PER_CLUSTER))


# ─── Restroom area ────────────────────────────────────────────────────────────

def restroom_area(wc_m: int, wc_f: int, lav_m: int, lav_f: int,
                  clusters: int, urinal_max: float) -> int:
    """
    Floor area of `clusters` identical restroom groups.

    Fixtures are spread evenly per cluster (rounded up). Each sex gets one
    accessible stall; the rest are standard stalls. Men's rooms add
    ⌊WC × urinal_max⌋ urinals. Women's rooms never take urinals.
    """
    wc_pc_m  = ceil_int(wc_m / clusters)
    wc_pc_f  = ceil_int(wc_f / clusters)
    lav_pc_m = ceil_int(lav_m / clusters)
    lav_pc_f = ceil_int(lav_f / clusters)

    accessible_m = 1
    standard_m   = max(0, wc_pc_m - accessible_m)
    urinals_m    = int(wc_pc_m * urinal_max)
    sf  = accessible_m * RR_WC_ACCESSIBLE_SF + standard_m * RR_WC_STALL_SF
    sf += urinals_m * RR_URINAL_SF + lav_pc_m * RR_LAVATORY_SF

    accessible_f = 1
    standard_f   = max(0, wc_pc_f - accessible_f)
    sf += accessible_f * RR_WC_ACCESSIBLE_SF + standard_f * RR_WC_STALL_SF
    sf += lav_pc_f * RR_LAVATORY_SF

    return ceil_int(sf * RR_CIRCULATION * clusters)


# ─── Main entry ───────────────────────────────────────────────────────────────

def calc_plumbing(students: int, staff: int, edition: CodeEdition | str) -> PlumbingResult:
    """
    Fixture counts and restroom area for students and staff.

    Per-sex populations are ⌈count/2⌉ computed separately for students
    and staff.
    """
    ibc = code_profile(edition)
    student_ps = per_sex(students)
    staff_ps   = per_sex(staff)

    s_wc  = ceil_int(student_ps / WC_RATIO)
    s_lav = ceil_int(student_ps / LAV_RATIO)
    s_clusters = student_clusters(students)
    student = PlumbingFixtureSet(
        wc_male=s_wc, wc_female=s_wc,
        lav_male=s_lav, lav_female=s_lav,
        clusters=s_clusters,
        sf=restroom_area(s_wc, s_wc, s_lav, s_lav, s_clusters, ibc.urinal_sub_max),
    )

    t_wc  = staff_water_closets(staff_ps)
    t_lav = staff_lavatories(staff_ps)
    t_clusters = staff_clusters(staff)
    staff_set = PlumbingFixtureSet(
        wc_male=t_wc, wc_female=t_wc,
        lav_male=t_lav, lav_female=t_lav,
        clusters=t_clusters,
        sf=restroom_area(t_wc, t_wc, t_lav, t_lav, t_clusters,
                         min(ibc.urinal_sub_max, STAFF_URINAL_CAP)),
    )

    result = PlumbingResult(
        student=student,
        staff=staff_set,
        drinking_fountains=drinking_fountains(students + staff, ibc.edition),
        gender_neutral=ibc.gender_neutral_provisions,
    )
    logger.debug(
        f"Plumbing ({ibc.label}): students={students} staff={staff} → "
        f"{result.total_sf} SF, {result.drinking_fountains} DF"
    )
    return result
