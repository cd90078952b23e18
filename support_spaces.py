"""
support_spaces.py
─────────────────
Administrative, service and mechanical areas from per-student benchmarks,
plus the optional cafeteria instructional credit (§61.1040(i)(2)).
"""

from __future__ import annotations
import logging
from dataclasses import dataclass

from space_standards import (
    CampusType, CodeEdition, ComplianceMethod,
    CAFETERIA_CREDIT_FACTOR, campus_standard, code_profile, ceil_int,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SupportLineItem:
    space_type: str
    sf:         int
    note:       str
    code:       str

    def to_dict(self) -> dict:
        return {"type": self.space_type, "sf": self.sf, "note": self.note, "code": self.code}


@dataclass(frozen=True)
class SupportProgram:
    items:                          tuple[SupportLineItem, ...]
    cafeteria_sf:                   int
    cafeteria_instructional_credit: int

    @property
    def total_sf(self) -> int:
        return sum(s.sf for s in self.items)


def cafeteria_credit_applies(method: ComplianceMethod | str, requested: bool) -> bool:
    """The credit exists only under the qualitative method."""
    return ComplianceMethod(method) is ComplianceMethod.QUALITATIVE and bool(requested)


def compute_support_spaces(
    campus_type:      CampusType | str,
    students:         int,
    staff:            int,
    method:           ComplianceMethod | str,
    cafeteria_credit: bool,
    edition:          CodeEdition | str,
) -> SupportProgram:
    """Benchmark-driven support line items, each rounded up on its own."""
    if students <= 0:
        return SupportProgram(items=(), cafeteria_sf=0, cafeteria_instructional_credit=0)

    bench  = campus_standard(campus_type).support
    ibc    = code_profile(edition)
    credit = cafeteria_credit_applies(method, cafeteria_credit)

    cafeteria_sf = ceil_int(students * bench.cafeteria)
    credit_sf    = ceil_int(cafeteria_sf * CAFETERIA_CREDIT_FACTOR) if credit else 0

    items = (
        SupportLineItem(
            "Administration & Front Office",
            ceil_int(students * bench.admin),
            "Principal, AP, registrar, counselors, nurse, reception, conference",
            "District Ed. Specs.",
        ),
        SupportLineItem(
            "Teacher Workrooms & Lounges",
            ceil_int(students * bench.teacher_work),
            f"{staff} staff — planning rooms, workrooms, break areas",
            "District Ed. Specs.",
        ),
        SupportLineItem(
            "Cafeteria / Kitchen / Serving",
            cafeteria_sf,
            "Kitchen, serving lines, dining (~1/3 student body per lunch)",
            "§61.1040(i)(2)" if credit else "Non-instructional",
        ),
        SupportLineItem(
            "Custodial & Storage",
            ceil_int(students * bench.custodial),
            "Custodial closets, receiving dock, central/IT storage",
            "IBC / District Std.",
        ),
        SupportLineItem(
            "Mechanical / Electrical / Telecom",
            ceil_int(students * bench.mechanical),
            "HVAC, electrical rooms, MDF/IDF, fire riser",
            f"{ibc.label} / IMC",
        ),
    )
    if credit:
        logger.debug(f"Cafeteria instructional credit: {credit_sf} SF of {cafeteria_sf} SF")
    return SupportProgram(items=items, cafeteria_sf=cafeteria_sf,
                          cafeteria_instructional_credit=credit_sf)
