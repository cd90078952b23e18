"""
space_calculator.py
───────────────────
Combines the room program, support spaces and restroom sizing into a
single space program, applies the net-to-gross factor and checks the
TEA aggregate instructional-area standard.

Usage:
    from space_calculator import compute

    result = compute("elementary", 750, "L2", 22, adv,
                     "quantitative", False, "2021")
    print(result.summary())
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Optional

from parameters import AdvancedParameters, clamp_gross_factor, default_advanced
from plumbing import PlumbingResult, calc_plumbing
from room_program import (
    RoomLineItem, aggregate_standard_sf, compute_room_program, total_room_sf,
)
from space_standards import (
    CampusType, CodeEdition, ComplianceMethod, FlexibilityLevel,
    as_edition, campus_standard, code_profile, ceil_int,
    library_sf, staff_count,
)
from support_spaces import SupportLineItem, compute_support_spaces

logger = logging.getLogger(__name__)


DISCLAIMER = (
    "Estimated minimums for early feasibility. Science lab safety (chemical "
    "storage (F), fume hoods (D), eye/face wash (G), safety showers (H), "
    "emergency shut-offs (J) per §61.1040(g)(2)) not sized by this tool. "
    "Local amendments may modify IBC requirements — verify with AHJ. "
    "Does not replace licensed architect or engineer services."
)


# ─── Result type ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CalculationResult:
    campus_type:       CampusType
    students:          int
    flexibility_level: FlexibilityLevel
    class_size:        int
    compliance_method: ComplianceMethod
    code_edition:      CodeEdition

    rooms:                  tuple[RoomLineItem, ...]
    library_sf:             int
    gym_sf:                 int
    total_instructional_sf: int     # rooms + cafeteria credit
    aggregate_sf:           int     # enrollment × SF/student baseline

    support:          tuple[SupportLineItem, ...]
    total_support_sf: int           # includes both restroom lines
    plumbing:         Optional[PlumbingResult]

    net_sf:       int
    gross_factor: float
    gross_sf:     int
    staff_count:  int

    cafeteria_sf:                   int
    cafeteria_instructional_credit: int

    caveats: tuple[str, ...] = field(default_factory=tuple)

    # ── Derived ──────────────────────────────────────────────────────────────
    @property
    def drinking_fountains(self) -> int:
        return self.plumbing.drinking_fountains if self.plumbing else 0

    @property
    def meets_aggregate(self) -> bool:
        return self.total_instructional_sf >= self.aggregate_sf

    @property
    def aggregate_surplus_sf(self) -> int:
        """Positive = surplus over the aggregate standard, negative = deficit."""
        return self.total_instructional_sf - self.aggregate_sf

    # ── Formatted summary ────────────────────────────────────────────────────
    def summary(self) -> str:
        ibc = code_profile(self.code_edition)
        lines = [
            "═" * 64,
            f"  SPACE PROGRAM — {campus_standard(self.campus_type).label.upper()}",
            f"  {self.students:,} students · {self.flexibility_level.value} · "
            f"class size {self.class_size} · {ibc.label}",
            "═" * 64,
            "  INSTRUCTIONAL SPACES",
            "─" * 64,
        ]
        for r in self.rooms:
            lines.append(f"  {r.space_type:<38} {r.count:>3} × {r.sf_per_room:>5,} = {r.total_sf:>8,} SF")
        if self.cafeteria_instructional_credit:
            lines.append(f"  {'Cafeteria instructional credit':<50} {self.cafeteria_instructional_credit:>8,} SF")
        lines += [
            f"  {'Library / media center':<50} {self.library_sf:>8,} SF",
            f"  {'Gymnasium':<50} {self.gym_sf:>8,} SF",
            "─" * 64,
            "  SUPPORT & SERVICE SPACES",
            "─" * 64,
        ]
        for s in self.support:
            lines.append(f"  {s.space_type:<50} {s.sf:>8,} SF")
        lines += [
            "─" * 64,
            f"  Instructional total : {self.total_instructional_sf:>10,} SF",
            f"  Aggregate standard  : {self.aggregate_sf:>10,} SF"
            + ("  ✅ MEETS" if self.meets_aggregate else "  ⚠️  BELOW"),
            f"  Surplus / deficit   : {self.aggregate_surplus_sf:>+10,} SF",
            f"  Net area            : {self.net_sf:>10,} SF",
            f"  Net-to-gross        : {self.gross_factor:>10.2f}",
            f"  GROSS AREA          : {self.gross_sf:>10,} SF",
            f"  Staff               : {self.staff_count:>10,}",
            f"  Drinking fountains  : {self.drinking_fountains:>10,}",
        ]
        if self.caveats:
            lines += ["─" * 64, "  CAVEATS"]
            for c in self.caveats:
                lines.append(f"  • {c}")
        lines.append("═" * 64)
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Serialise to a plain dict (e.g. for JSON API response)."""
        return {
            "campus_type":            self.campus_type.value,
            "students":               self.students,
            "flexibility_level":      self.flexibility_level.value,
            "class_size":             self.class_size,
            "compliance_method":      self.compliance_method.value,
            "code_edition":           self.code_edition.value,
            "rooms":                  [r.to_dict() for r in self.rooms],
            "library_sf":             self.library_sf,
            "gym_sf":                 self.gym_sf,
            "total_instructional_sf": self.total_instructional_sf,
            "aggregate_sf":           self.aggregate_sf,
            "meets_aggregate":        self.meets_aggregate,
            "aggregate_surplus_sf":   self.aggregate_surplus_sf,
            "support":                [s.to_dict() for s in self.support],
            "total_support_sf":       self.total_support_sf,
            "plumbing":               self.plumbing.to_dict() if self.plumbing else None,
            "drinking_fountains":     self.drinking_fountains,
            "net_sf":                 self.net_sf,
            "gross_factor":           self.gross_factor,
            "gross_sf":               self.gross_sf,
            "staff_count":            self.staff_count,
            "cafeteria_sf":           self.cafeteria_sf,
            "cafeteria_instructional_credit": self.cafeteria_instructional_credit,
            "caveats":                list(self.caveats),
        }


# ─── Caveats ──────────────────────────────────────────────────────────────────

def build_caveats(campus_type: CampusType, students: int, flexibility_level: FlexibilityLevel,
                  method: ComplianceMethod, edition: CodeEdition, aggregate_sf: int) -> tuple[str, ...]:
    ibc   = code_profile(edition)
    sf_pp = campus_standard(campus_type).sf_for(flexibility_level)

    plumbing = (
        f"Building code: {ibc.label}. Group E fixture ratios WC 1:50/sex, Lav 1:50/sex, "
        f"DF 1:100; staff areas at Business occupancy rates. Urinal substitution capped at "
        f"{ibc.urinal_sub_max * 100:.0f}% of required WC."
    )
    if ibc.gender_neutral_provisions:
        plumbing += f" Multi-user gender-neutral provisions available per {ibc.label} §2902.1.2 / §2902.2."
    if ibc.df_exempt_threshold > 0:
        plumbing += f" Drinking fountain exemption: occupant loads ≤{ibc.df_exempt_threshold}."

    if method is ComplianceMethod.QUANTITATIVE:
        compliance = "TEA compliance: Quantitative method per §61.1040(h)."
    else:
        compliance = ("TEA compliance: Qualitative method per §61.1040(i). Requires "
                      "board-approved innovative instructional practices.")
    compliance += f" Aggregate = {sf_pp} SF/pp × {students:,} = {aggregate_sf:,} SF."

    return (
        plumbing,
        compliance,
        "Cafeteria: Quantitative (§61.1040(h)(1)) cafeterias/gyms may not count. "
        "Qualitative (§61.1040(i)(2)) cafeterias/library may count at 0.5 (≤50% day). "
        "Gyms excluded under both methods.",
        "Unincorporated areas: per §61.1040(j)(1)(A), projects outside municipal "
        "jurisdiction without adopted codes default to IBC 2003.",
        DISCLAIMER,
    )


# ─── Calculator ───────────────────────────────────────────────────────────────

class SpaceProgramCalculator:
    """
    Holds one input snapshot and produces a CalculationResult.

    Every call to calculate() is a full recomputation; the calculator keeps
    no state beyond its (immutable) inputs.
    """

    def __init__(
        self,
        campus_type:       CampusType | str        = CampusType.ELEMENTARY,
        flexibility_level: FlexibilityLevel | str  = FlexibilityLevel.L2,
        class_size:        Optional[int]           = None,
        advanced:          Optional[AdvancedParameters] = None,
        compliance_method: ComplianceMethod | str  = ComplianceMethod.QUANTITATIVE,
        cafeteria_credit:  bool                    = False,
        code_edition:      CodeEdition | str       = CodeEdition.IBC_2021,
        gross_factor_override: Optional[float]     = None,
    ):
        self.campus_type       = CampusType(campus_type)
        self.flexibility_level = FlexibilityLevel(flexibility_level)
        self.compliance_method = ComplianceMethod(compliance_method)
        self.code_edition      = as_edition(code_edition)
        std = campus_standard(self.campus_type)
        self.class_size        = class_size if class_size is not None else std.default_class_size
        self.advanced          = advanced if advanced is not None else default_advanced(self.campus_type)
        self.cafeteria_credit  = bool(cafeteria_credit)
        self.gross_factor_override = gross_factor_override

    def gross_factor(self) -> float:
        override = clamp_gross_factor(self.gross_factor_override)
        if override is not None:
            return override
        return campus_standard(self.campus_type).net_to_gross

    def calculate(self, students: int) -> CalculationResult:
        campus, flex = self.campus_type, self.flexibility_level
        std    = campus_standard(campus)
        staff  = staff_count(students, campus)
        factor = self.gross_factor()
        aggregate = aggregate_standard_sf(campus, students, flex)
        caveats = build_caveats(campus, max(0, students), flex,
                                self.compliance_method, self.code_edition, aggregate)

        if students <= 0:
            return CalculationResult(
                campus_type=campus, students=max(0, students), flexibility_level=flex,
                class_size=self.class_size, compliance_method=self.compliance_method,
                code_edition=self.code_edition,
                rooms=(), library_sf=0, gym_sf=0,
                total_instructional_sf=0, aggregate_sf=0,
                support=(), total_support_sf=0, plumbing=None,
                net_sf=0, gross_factor=factor, gross_sf=0, staff_count=staff,
                cafeteria_sf=0, cafeteria_instructional_credit=0,
                caveats=caveats,
            )

        # ── Independent calculators ──────────────────────────────────────────
        rooms    = compute_room_program(campus, students, flex, self.class_size, self.advanced)
        support  = compute_support_spaces(campus, students, staff, self.compliance_method,
                                          self.cafeteria_credit, self.code_edition)
        plumbing = calc_plumbing(students, staff, self.code_edition)

        # ── Restroom line items ──────────────────────────────────────────────
        ed = self.code_edition.value
        restrooms = (
            SupportLineItem(
                "Student Restrooms", plumbing.student.sf,
                f"{plumbing.student.clusters} clusters · {plumbing.student.wc_male}M/"
                f"{plumbing.student.wc_female}F WC · TAS accessible",
                f"IBC {ed} §2902.1 / TAS",
            ),
            SupportLineItem(
                "Staff Restrooms", plumbing.staff.sf,
                f"{plumbing.staff.clusters} cluster(s) · {plumbing.staff.wc_male}M/"
                f"{plumbing.staff.wc_female}F WC · Separate",
                f"IBC {ed} §2902.1 / TAS",
            ),
        )
        support_items = support.items + restrooms

        # ── Aggregate totals ─────────────────────────────────────────────────
        instructional = total_room_sf(rooms) + support.cafeteria_instructional_credit
        library       = library_sf(students)
        gym           = std.gym_sf
        support_total = sum(s.sf for s in support_items)
        net           = instructional + library + gym + support_total
        gross         = ceil_int(net * factor)

        logger.debug(
            f"Space program {campus.value} N={students}: instructional={instructional} "
            f"aggregate={aggregate} net={net} gross={gross}"
        )

        return CalculationResult(
            campus_type=campus, students=students, flexibility_level=flex,
            class_size=self.class_size, compliance_method=self.compliance_method,
            code_edition=self.code_edition,
            rooms=tuple(rooms), library_sf=library, gym_sf=gym,
            total_instructional_sf=instructional, aggregate_sf=aggregate,
            support=support_items, total_support_sf=support_total, plumbing=plumbing,
            net_sf=net, gross_factor=factor, gross_sf=gross, staff_count=staff,
            cafeteria_sf=support.cafeteria_sf,
            cafeteria_instructional_credit=support.cafeteria_instructional_credit,
            caveats=caveats,
        )


def compute(
    campus_type:       CampusType | str,
    enrollment:        int,
    flexibility_level: FlexibilityLevel | str,
    class_size:        int,
    advanced:          Optional[AdvancedParameters],
    compliance_method: ComplianceMethod | str,
    cafeteria_credit:  bool,
    code_edition:      CodeEdition | str,
    gross_factor_override: Optional[float] = None,
) -> CalculationResult:
    """Functional entry point: one input snapshot → one CalculationResult."""
    calc = SpaceProgramCalculator(
        campus_type=campus_type,
        flexibility_level=flexibility_level,
        class_size=class_size,
        advanced=advanced,
        compliance_method=compliance_method,
        cafeteria_credit=cafeteria_credit,
        code_edition=code_edition,
        gross_factor_override=gross_factor_override,
    )
    return calc.calculate(enrollment)
