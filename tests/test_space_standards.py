import pytest

from space_standards import (
    CAMPUS_STANDARDS, CODE_PROFILES,
    CampusType, CodeEdition, FlexibilityLevel,
    as_edition, campus_standard, code_profile, ceil_int, library_sf, staff_count,
)


def test_every_campus_and_edition_has_an_entry():
    assert set(CAMPUS_STANDARDS) == set(CampusType)
    assert set(CODE_PROFILES) == set(CodeEdition)
    for std in CAMPUS_STANDARDS.values():
        assert set(std.sf_per_student) == set(FlexibilityLevel)


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        CAMPUS_STANDARDS[CampusType.HIGH] = None
    with pytest.raises(TypeError):
        CAMPUS_STANDARDS[CampusType.HIGH].sf_per_student[FlexibilityLevel.L1] = 99


def test_unknown_keys_fail_fast():
    with pytest.raises(ValueError):
        campus_standard("college")
    with pytest.raises(ValueError):
        code_profile("2009")


def test_edition_profiles():
    assert code_profile("2003").df_exempt_threshold == 0
    assert code_profile("2012").df_exempt_threshold == 0
    assert code_profile("2015").df_exempt_threshold == 15
    assert code_profile("2018").df_exempt_threshold == 15
    assert code_profile("2021").df_exempt_threshold == 30
    assert code_profile("2024").df_exempt_threshold == 30
    assert code_profile(2021).gender_neutral_provisions is True
    assert code_profile("2018").gender_neutral_provisions is False
    assert code_profile("2003").single_user_contribute is False
    assert all(p.urinal_sub_max == 0.67 for p in CODE_PROFILES.values())


def test_sf_per_student_by_flexibility():
    elem = campus_standard("elementary")
    assert elem.sf_for("L2") == 36
    assert elem.sf_for(FlexibilityLevel.L4) == 42
    assert campus_standard("high").sf_for("L3") == 36


@pytest.mark.parametrize("students, expected", [
    (0, 1400), (100, 1400), (101, 1404), (500, 3000),
    (750, 3750), (2000, 7500), (2100, 7700),
])
def test_library_sf_tiers(students, expected):
    assert library_sf(students) == expected


def test_ceil_int_ignores_float_noise():
    assert ceil_int(750 * 0.10) == 75
    assert ceil_int(75.0000001) == 76
    assert ceil_int(34.09) == 35


def test_staff_count():
    assert staff_count(750, "elementary") == 75
    assert staff_count(1000, "high") == 70
    assert staff_count(901, "middle") == 73
    assert staff_count(0, "middle") == 0
    # 100 × 0.07 is 7.000000000000001 in binary floating point
    assert staff_count(100, "high") == 7


@pytest.mark.parametrize("edition", [CodeEdition.IBC_2021, "2021", " 2021", 2021])
def test_code_profile_accepts_members_strings_and_ints(edition):
    assert as_edition(edition) is CodeEdition.IBC_2021
    assert code_profile(edition) is CODE_PROFILES[CodeEdition.IBC_2021]


def test_code_profile_for_every_member():
    for edition in CodeEdition:
        assert code_profile(edition).edition is edition
