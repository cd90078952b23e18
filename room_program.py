"""
room_program.py
───────────────
Instructional room counts and areas per 19 TAC §61.1040.

Elementary campuses are planned as self-contained homerooms; secondary
campuses are planned by subject sections spread across the periods of
the day at a target room utilization.

Usage:
    from room_program import compute_room_program
    rooms = compute_room_program("elementary", 750, "L2", 22, adv)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import NoReturn

from parameters import AdvancedParameters
from space_standards import (
    CampusStandard, CampusType, FlexibilityLevel, ScienceConfig,
    SPED_SF_PER_STUDENT, campus_standard, ceil_int,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoomLineItem:
    space_type:          str
    count:               int
    sf_per_room:         int
    sf_per_student_used: int
    max_students:        int
    note:                str
    code:                str

    @property
    def total_sf(self) -> int:
        return self.count * self.sf_per_room

    def to_dict(self) -> dict:
        return {
            "type":                self.space_type,
            "count":               self.count,
            "sf_per_room":         self.sf_per_room,
            "sf_per_student_used": self.sf_per_student_used,
            "max_students":        self.max_students,
            "total_sf":            self.total_sf,
            "note":                self.note,
            "code":                self.code,
        }


def _unhandled(value) -> NoReturn:
    raise AssertionError(f"Unhandled variant: {value!r}")


def _classroom(space_type: str, count: int, class_size: int, sf_pp: int,
               note: str, code: str) -> RoomLineItem:
    return RoomLineItem(
        space_type=space_type,
        count=count,
        sf_per_room=class_size * sf_pp,
        sf_per_student_used=sf_pp,
        max_students=class_size,
        note=note,
        code=code,
    )


# ─── Campus branches ──────────────────────────────────────────────────────────

def _elementary_rooms(std: CampusStandard, students: int, class_size: int,
                      sf_pp: int, adv: AdvancedParameters) -> list[RoomLineItem]:
    sci_max  = std.science_max_class_size
    sci_sf   = std.science_sf.combo
    homerooms = ceil_int(students / class_size)

    return [
        _classroom("General Classrooms (Homerooms)", homerooms, class_size, sf_pp,
                   "Self-contained homerooms", "§61.1040(h)(1)(A)"),
        RoomLineItem(
            space_type="Science Combo Classroom/Labs",
            count=ceil_int(homerooms / 3),
            sf_per_room=sci_max * sci_sf,
            sf_per_student_used=sci_sf,
            max_students=sci_max,
            note=f"{sci_sf} SF/student, max {sci_max}",
            code="§61.1040(g)(2)(A)(i)",
        ),
        _classroom("Elective Rooms (Art, Music, etc.)", adv.elective_rooms, class_size, sf_pp,
                   "Specials rotation rooms", "§61.1040(h)(1)(F)"),
    ]


def _science_rooms(std: CampusStandard, sci_rooms: int, class_size: int,
                   sf_pp: int, config: ScienceConfig) -> list[RoomLineItem]:
    sci_max = std.science_max_class_size
    if config is ScienceConfig.COMBO:
        sci_sf = std.science_sf.combo
        return [RoomLineItem(
            space_type="Science Combo Classroom/Labs",
            count=sci_rooms,
            sf_per_room=sci_max * sci_sf,
            sf_per_student_used=sci_sf,
            max_students=sci_max,
            note=f"{sci_sf} SF/student, max {sci_max}",
            code="§61.1040(g)(2)(A)",
        )]
    if config is ScienceConfig.SEPARATE:
        lab_sf = std.science_sf.separate_lab or std.science_sf.combo
        return [
            RoomLineItem(
                space_type="Science Laboratories",
                count=sci_rooms,
                sf_per_room=sci_max * lab_sf,
                sf_per_student_used=lab_sf,
                max_students=sci_max,
                note=f"{lab_sf} SF/student, max {sci_max}",
                code="§61.1040(g)(2)(B)",
            ),
            _classroom("Science Classrooms (paired)", sci_rooms * 2, class_size, sf_pp,
                       "2:1 classroom-to-lab ratio max", "§61.1040(g)(2)(C)"),
        ]
    _unhandled(config)


def _secondary_rooms(std: CampusStandard, students: int, class_size: int,
                     sf_pp: int, adv: AdvancedParameters) -> list[RoomLineItem]:
    sections = ceil_int(students / class_size)
    per_day  = adv.periods_per_day * adv.utilization
    rooms_per_subject = ceil_int(sections / per_day)
    note = (f"{sections} sec. ÷ ({adv.periods_per_day} per. × "
            f"{adv.utilization * 100:.0f}% util.)")

    out = [
        _classroom(subject, rooms_per_subject, class_size, sf_pp, note, "§61.1040(h)(1)(A)")
        for subject in ("Math Classrooms", "ELA Classrooms", "Social Studies Classrooms")
    ]
    out += _science_rooms(std, ceil_int(sections / per_day), class_size, sf_pp,
                          adv.science_config)
    out.append(_classroom("Elective Rooms (CTE, Fine Arts, etc.)", adv.elective_rooms,
                          class_size, sf_pp, "User-defined elective spaces", "§61.1040(h)(1)(F)"))
    return out


def _sped_rooms(students: int, adv: AdvancedParameters) -> RoomLineItem:
    sped_students = ceil_int(students * adv.sped_pct)
    return RoomLineItem(
        space_type="Special Education Classrooms",
        count=max(1, ceil_int(sped_students / adv.sped_room_cap)),
        sf_per_room=adv.sped_room_cap * SPED_SF_PER_STUDENT,
        sf_per_student_used=SPED_SF_PER_STUDENT,
        max_students=adv.sped_room_cap,
        note=(f"{sped_students} SpEd ({adv.sped_pct * 100:.0f}%), "
              f"{SPED_SF_PER_STUDENT} SF/student min"),
        code="§61.1040(g)(2)(K)",
    )


# ─── Public entry ─────────────────────────────────────────────────────────────

def compute_room_program(
    campus_type:       CampusType | str,
    students:          int,
    flexibility_level: FlexibilityLevel | str,
    class_size:        int,
    advanced:          AdvancedParameters,
) -> list[RoomLineItem]:
    """
    Return the instructional room line items for one campus.

    `class_size` is expected to be pre-clamped to [1, campus max]; it is
    not re-validated here. Returns an empty list when students <= 0.
    """
    if students <= 0:
        return []

    campus_type = CampusType(campus_type)
    std   = campus_standard(campus_type)
    sf_pp = std.sf_for(flexibility_level)

    if campus_type is CampusType.ELEMENTARY:
        rooms = _elementary_rooms(std, students, class_size, sf_pp, advanced)
    elif campus_type in (CampusType.MIDDLE, CampusType.HIGH):
        rooms = _secondary_rooms(std, students, class_size, sf_pp, advanced)
    else:
        _unhandled(campus_type)

    rooms.append(_sped_rooms(students, advanced))
    logger.debug(
        f"Room program: {campus_type.value} N={students} → "
        f"{sum(r.count for r in rooms)} rooms, {total_room_sf(rooms)} SF"
    )
    return rooms


def total_room_sf(rooms: list[RoomLineItem]) -> int:
    return sum(r.total_sf for r in rooms)


def aggregate_standard_sf(campus_type: CampusType | str, students: int,
                          flexibility_level: FlexibilityLevel | str) -> int:
    """Enrollment × SF/student — the comparison baseline, never added to totals."""
    if students <= 0:
        return 0
    return students * campus_standard(campus_type).sf_for(flexibility_level)
