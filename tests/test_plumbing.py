import pytest

from plumbing import (
    calc_plumbing, drinking_fountains, per_sex, restroom_area,
    staff_clusters, staff_lavatories, staff_water_closets, student_clusters,
)
from space_standards import CodeEdition, code_profile, staff_count


def test_per_sex_rounds_up():
    assert per_sex(750) == 375
    assert per_sex(75) == 38
    assert per_sex(0) == 0


@pytest.mark.parametrize("pop, expected", [(0, 0), (1, 1), (25, 1), (26, 2), (75, 2), (76, 3)])
def test_staff_water_closet_tiers(pop, expected):
    assert staff_water_closets(pop) == expected


@pytest.mark.parametrize("pop, expected", [(0, 0), (40, 1), (41, 2), (120, 2), (121, 3)])
def test_staff_lavatory_tiers(pop, expected):
    assert staff_lavatories(pop) == expected


def test_cluster_minimums():
    assert student_clusters(10) == 2
    assert student_clusters(750) == 3
    assert student_clusters(751) == 4
    assert staff_clusters(5) == 1
    assert staff_clusters(75) == 2


@pytest.mark.parametrize("edition", list(CodeEdition))
def test_drinking_fountain_exemption_boundary(edition):
    threshold = code_profile(edition).df_exempt_threshold
    assert drinking_fountains(threshold, edition) == 0
    assert drinking_fountains(threshold + 1, edition) == -(-(threshold + 1) // 100)


def test_restroom_area_worked_examples():
    # 3 clusters, 3 WC + 3 lav per sex each; 2 urinals per men's room
    # male 65 + 2×35 + 2×15 + 3×12 = 201, female 65 + 2×35 + 3×12 = 171
    assert restroom_area(8, 8, 8, 8, 3, 0.67) == 1507
    # single fixtures, no urinal at a 0.5 cap
    assert restroom_area(1, 1, 1, 1, 1, 0.5) == 208


def test_female_rooms_never_take_urinals():
    # men: 65 + 3×35 + 2×15 + 2×12 = 224, women: 65 + 3×35 + 2×12 = 194
    assert restroom_area(4, 4, 2, 2, 1, 0.67) == 565
    # without substitution only the two men's urinals (30 SF) disappear
    assert restroom_area(4, 4, 2, 2, 1, 0.0) == 524


def test_calc_plumbing_elementary_750():
    p = calc_plumbing(750, 75, "2021")
    assert (p.student.wc_male, p.student.wc_female) == (8, 8)
    assert (p.student.lav_male, p.student.lav_female) == (8, 8)
    assert p.student.clusters == 3
    assert p.student.sf == 1507
    assert (p.staff.wc_male, p.staff.lav_male) == (2, 1)
    assert p.staff.clusters == 2
    assert p.staff.sf == 416
    assert p.drinking_fountains == 9
    assert p.total_sf == 1923
    assert p.gender_neutral is True


def test_gender_neutral_flag_follows_edition():
    assert calc_plumbing(500, 50, "2018").gender_neutral is False
    assert calc_plumbing(500, 50, "2024").gender_neutral is True


def test_fixture_counts_never_decrease_with_occupants():
    prev = None
    for students in range(0, 2501, 7):
        p = calc_plumbing(students, staff_count(students, "middle"), "2015")
        counts = (p.student.wc_male, p.student.lav_male, p.staff.wc_male,
                  p.staff.lav_male, p.drinking_fountains)
        if prev is not None:
            assert all(c >= q for c, q in zip(counts, prev))
        prev = counts


@pytest.mark.parametrize("edition", list(CodeEdition))
def test_calc_plumbing_takes_edition_members(edition):
    assert calc_plumbing(750, 75, edition) == calc_plumbing(750, 75, edition.value)
