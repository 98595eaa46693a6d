from decimal import Decimal

import pytest

from reporting import metrics


def test_empty_inputs_fall_back_to_neutral_values():
    assert metrics.safe_average([]) == 0
    assert metrics.percentage(5, 0) == 0
    assert metrics.attendance_rate(0, 0) is None
    assert metrics.gpa_from_percentages([]) is None
    assert metrics.grade_distribution([]) == {"A+": 0, "A": 0, "B": 0, "C": 0, "F": 0}
    assert metrics.monthly_buckets([], lambda row: row) == [0] * 12
    assert metrics.growth_rate(4, 0) == 0
    assert metrics.decimal_sum([]) == Decimal("0")
    assert metrics.decimal_share(Decimal("10"), Decimal("0")) == 0


@pytest.mark.parametrize(
    "pct,expected",
    [
        (100, "A+"), (97, "A+"), (96.99, "A"), (93, "A"), (90, "A-"), (87, "B+"),
        (83, "B"), (80, "B-"), (77, "C+"), (73, "C"), (70, "C-"), (67, "D+"),
        (65, "D"), (64.99, "F"), (0, "F"),
    ],
)
def test_letter_grade_lower_bounds_are_inclusive(pct, expected):
    assert metrics.letter_grade(pct) == expected


def test_letter_grade_never_drops_as_score_rises():
    order = [label for _, label in reversed(metrics.LETTER_GRADES)]
    order.insert(0, "F")
    ranks = [order.index(metrics.letter_grade(p / 2)) for p in range(0, 201)]
    assert ranks == sorted(ranks)


def test_distribution_buckets_are_half_open():
    counts = metrics.grade_distribution([90, 89.99, 80, 60, 59.9, 40, 39.9, 0])
    assert counts == {"A+": 1, "A": 2, "B": 1, "C": 2, "F": 2}


def test_result_grade_scale():
    assert metrics.result_grade(90) == "A+"
    assert metrics.result_grade(75) == "B+"
    assert metrics.result_grade(40) == "C"
    assert metrics.result_grade(39) == "F"


def test_attendance_rate_rounds_half_up():
    assert metrics.attendance_rate(2, 3) == 66.7
    assert metrics.attendance_rate(1, 8) == 12.5
    assert metrics.attendance_rate(3, 3) == 100.0


def test_behavior_score_is_clamped():
    assert metrics.behavior_score(0, 0) == 85
    assert metrics.behavior_score(1, 0) == 90
    assert metrics.behavior_score(10, 0) == 100
    assert metrics.behavior_score(0, 1) == 75
    assert metrics.behavior_score(0, 10) == 50


def test_student_tiers_first_match_wins():
    assert metrics.classify_student(3.6, 96, 90) == "excellent"
    assert metrics.classify_student(3.6, 92, 90) == "good"
    assert metrics.classify_student(2.6, 85, 70) == "average"
    assert metrics.classify_student(2.4, 99, 100) == "needs_attention"
    assert metrics.classify_student(None, 99, 100) == "insufficient_data"
    # missing attendance does not count against the student
    assert metrics.classify_student(3.8, None, 95) == "excellent"


def test_teacher_tiers():
    assert metrics.classify_teacher(4.5) == "excellent"
    assert metrics.classify_teacher(4.0) == "good"
    assert metrics.classify_teacher(3.5) == "average"
    assert metrics.classify_teacher(3.49) == "needs_improvement"
    assert metrics.classify_teacher(None) == "insufficient_data"


def test_teacher_rating_fallback():
    rating = metrics.teacher_rating_fallback(80, 90, 5)
    # 1.6 + 1.35 + 1.05 + 0.25
    assert rating == pytest.approx(4.25)
    assert metrics.teacher_rating_fallback(100, 100, 40) == 5
    assert metrics.teacher_rating_fallback(None, 90, 5) is None


def test_gpa_is_mean_percentage_over_25():
    assert metrics.gpa_from_percentages([100, 80]) == 3.6


def test_monthly_buckets_sum_values_by_month():
    import datetime

    rows = [
        (datetime.date(2024, 1, 5), Decimal("10.00")),
        (datetime.date(2024, 1, 20), Decimal("5.50")),
        (datetime.date(2024, 12, 1), Decimal("1.00")),
        (None, Decimal("99")),
    ]
    buckets = metrics.monthly_buckets(rows, lambda r: r[0], value=lambda r: r[1], zero=Decimal("0"))
    assert buckets[0] == Decimal("15.50")
    assert buckets[11] == Decimal("1.00")
    assert sum(buckets[1:11]) == 0


def test_growth_rate_one_decimal():
    assert metrics.growth_rate(3, 2) == 50.0
    assert metrics.growth_rate(1, 3) == -66.7


def test_teacher_position_by_experience():
    assert metrics.teacher_position(None) == "Assistant Teacher"
    assert metrics.teacher_position(5) == "Teacher"
    assert metrics.teacher_position(10) == "Senior Teacher"
