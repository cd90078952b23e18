from parameters import (
    AdvancedParameters, clamp_class_size, clamp_gross_factor,
    default_advanced, parse_advanced, parse_enrollment, parse_flag,
)
from space_standards import ScienceConfig


def test_campus_defaults():
    assert default_advanced("elementary") == AdvancedParameters(
        periods_per_day=1, utilization=0.85, sped_pct=0.12, sped_room_cap=12,
        science_config=ScienceConfig.COMBO, elective_rooms=2)
    assert default_advanced("middle").elective_rooms == 4
    high = default_advanced("high")
    assert high.utilization == 0.80
    assert high.elective_rooms == 6


def test_parse_advanced_without_input_returns_defaults():
    assert parse_advanced("middle", None) == default_advanced("middle")
    assert parse_advanced("middle", {}) == default_advanced("middle")


def test_parse_advanced_accepts_camel_case_keys():
    adv = parse_advanced("high", {"periodsPerDay": "8", "scienceConfig": "separate",
                                  "electiveRooms": 3, "spedRoomCap": 10})
    assert adv.periods_per_day == 8
    assert adv.science_config is ScienceConfig.SEPARATE
    assert adv.elective_rooms == 3
    assert adv.sped_room_cap == 10
    assert adv.utilization == 0.80


def test_utilization_clamps_and_falls_back():
    assert parse_advanced("high", {"utilization": "abc"}).utilization == 0.85
    assert parse_advanced("high", {"utilization": 3}).utilization == 1.0
    assert parse_advanced("high", {"utilization": 0.2}).utilization == 0.5
    assert parse_advanced("high", {"utilization": "0.9"}).utilization == 0.9


def test_other_fallbacks():
    adv = parse_advanced("middle", {"sped_pct": 0.9, "periods_per_day": "x",
                                    "elective_rooms": -3, "sped_room_cap": None,
                                    "science_config": "bogus"})
    assert adv.sped_pct == 0.5
    assert adv.periods_per_day == 7
    assert adv.elective_rooms == 0
    assert adv.sped_room_cap == 12
    assert adv.science_config is ScienceConfig.COMBO


def test_clamp_class_size():
    assert clamp_class_size("elementary", None) == 22
    assert clamp_class_size("elementary", "abc") == 22
    assert clamp_class_size("elementary", 30) == 22
    assert clamp_class_size("elementary", 0) == 1
    assert clamp_class_size("high", "18") == 18


def test_clamp_gross_factor():
    assert clamp_gross_factor(None) is None
    assert clamp_gross_factor("n/a") is None
    assert clamp_gross_factor(2.5) == 1.7
    assert clamp_gross_factor(0.5) == 1.1
    assert clamp_gross_factor("1.45") == 1.45


def test_parse_enrollment():
    assert parse_enrollment("750") == 750
    assert parse_enrollment(-20) == 0
    assert parse_enrollment("lots") == 0


def test_zero_sped_share_is_kept():
    assert parse_advanced("middle", {"sped_pct": 0}).sped_pct == 0.0
    assert parse_advanced("middle", {"spedPct": "0"}).sped_pct == 0.0
    assert parse_advanced("middle", {"sped_pct": "n/a"}).sped_pct == 0.12
    assert parse_advanced("middle", {"sped_pct": -0.2}).sped_pct == 0.0


def test_parse_flag():
    for raw in (True, 1, "true", "TRUE", " yes ", "1", "on"):
        assert parse_flag(raw) is True
    for raw in (False, 0, 2, None, "false", "0", "no", "", "off", [], {}):
        assert parse_flag(raw) is False
