import pytest

from parameters import default_advanced
from space_calculator import DISCLAIMER, SpaceProgramCalculator, compute
from space_standards import CampusType, CodeEdition


def _elementary_750(**overrides):
    kwargs = dict(
        campus_type="elementary", enrollment=750, flexibility_level="L2",
        class_size=22, advanced=default_advanced("elementary"),
        compliance_method="quantitative", cafeteria_credit=False, code_edition="2021",
    )
    kwargs.update(overrides)
    return compute(**kwargs)


def test_elementary_750_full_program():
    r = _elementary_750()
    assert r.rooms[0].count == 35
    assert r.rooms[1].count == 12
    assert r.aggregate_sf == 27000
    assert r.total_instructional_sf == 48624
    assert r.library_sf == 3750
    assert r.gym_sf == 3000
    assert r.staff_count == 75
    assert r.total_support_sf == 16773
    assert r.net_sf == 48624 + 3750 + 3000 + 16773
    assert r.gross_factor == 1.35
    assert r.gross_sf == 97399
    assert r.meets_aggregate is True
    assert r.aggregate_surplus_sf == 21624
    assert r.drinking_fountains == 9


def test_restroom_lines_are_part_of_support():
    r = _elementary_750()
    by_type = {s.space_type: s for s in r.support}
    assert by_type["Student Restrooms"].sf == r.plumbing.student.sf
    assert by_type["Staff Restrooms"].sf == r.plumbing.staff.sf
    assert by_type["Student Restrooms"].code == "IBC 2021 §2902.1 / TAS"
    assert "3 clusters · 8M/8F WC" in by_type["Student Restrooms"].note
    assert len(r.support) == 7


@pytest.mark.parametrize("enrollment", [0, -1, -500])
def test_non_positive_enrollment_gives_empty_result(enrollment):
    r = _elementary_750(enrollment=enrollment)
    assert r.rooms == ()
    assert r.support == ()
    assert r.plumbing is None
    assert r.total_instructional_sf == 0
    assert r.total_support_sf == 0
    assert r.net_sf == 0
    assert r.gross_sf == 0
    assert r.drinking_fountains == 0


def test_identical_inputs_give_identical_results():
    assert _elementary_750() == _elementary_750()
    assert _elementary_750().to_dict() == _elementary_750().to_dict()


def test_gross_factor_override_is_clamped():
    assert _elementary_750(gross_factor_override=2.5).gross_factor == 1.7
    assert _elementary_750(gross_factor_override=0.9).gross_factor == 1.1
    r = _elementary_750(gross_factor_override=1.5)
    assert r.gross_sf == -(-r.net_sf * 15 // 10)


def test_drinking_fountains_at_100_students_under_2021():
    for campus in CampusType:
        r = compute(campus, 100, "L1", 22 if campus is CampusType.ELEMENTARY else 25,
                    None, "quantitative", False, "2021")
        occupants = 100 + r.staff_count
        assert occupants > 30
        assert r.drinking_fountains == -(-occupants // 100)
        assert r.drinking_fountains >= 1


def test_cafeteria_credit_adds_exactly_half_of_cafeteria():
    with_credit = _elementary_750(compliance_method="qualitative", cafeteria_credit=True)
    without = _elementary_750(compliance_method="qualitative", cafeteria_credit=False)
    assert with_credit.cafeteria_sf == 9000
    assert with_credit.cafeteria_instructional_credit == 4500
    assert with_credit.total_instructional_sf - without.total_instructional_sf == 4500
    assert with_credit.net_sf - without.net_sf == 4500


def test_cafeteria_credit_ignored_under_quantitative():
    r = _elementary_750(compliance_method="quantitative", cafeteria_credit=True)
    assert r.cafeteria_instructional_credit == 0
    assert r.total_instructional_sf == 48624


def test_deficit_is_reported_signed():
    # L4 raises the aggregate baseline to 36 SF/student
    r = compute("high", 2000, "L4", 25, default_advanced("high"),
                "quantitative", False, "2021")
    assert r.aggregate_sf == 72000
    assert r.aggregate_surplus_sf == r.total_instructional_sf - 72000
    assert r.meets_aggregate == (r.aggregate_surplus_sf >= 0)


def test_calculator_defaults_and_string_inputs():
    calc = SpaceProgramCalculator("middle")
    assert calc.class_size == 25
    assert calc.advanced == default_advanced("middle")
    r = calc.calculate(900)
    assert r.code_edition.value == "2021"
    assert r.gross_factor == 1.38


def test_caveats_and_summary():
    r = _elementary_750()
    assert r.caveats[-1] == DISCLAIMER
    assert any("gender-neutral" in c for c in r.caveats)
    assert any("Aggregate = 36 SF/pp × 750 = 27,000 SF" in c for c in r.caveats)
    text = r.summary()
    assert "GROSS AREA" in text
    assert "97,399" in text

    older = _elementary_750(code_edition="2003")
    assert not any("gender-neutral" in c for c in older.caveats)


def test_to_dict_is_json_ready():
    d = _elementary_750().to_dict()
    assert d["campus_type"] == "elementary"
    assert d["rooms"][0]["total_sf"] == 35 * 792
    assert d["plumbing"]["student"]["clusters"] == 3
    assert d["meets_aggregate"] is True


def test_enum_members_are_accepted_directly():
    by_member = compute(CampusType.ELEMENTARY, 750, "L2", 22, None,
                        "quantitative", False, CodeEdition.IBC_2021)
    assert by_member == _elementary_750(advanced=None)
    assert by_member.code_edition is CodeEdition.IBC_2021
    calc = SpaceProgramCalculator("high", code_edition=CodeEdition.IBC_2003)
    assert calc.code_edition is CodeEdition.IBC_2003
    assert calc.calculate(0).gross_sf == 0
