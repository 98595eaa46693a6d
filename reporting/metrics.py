"""
Pure aggregation helpers shared by the dashboards and report endpoints.

Nothing in here touches the database; callers fetch rows and hand over plain
numbers or iterables. Every function returns a neutral value for empty input.
A return value of ``None`` means "insufficient data" and is rendered as N/A.
"""
from __future__ import annotations

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from django.utils import timezone

CENT = Decimal("0.01")

LETTER_GRADES = [
    (97, "A+"),
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (67, "D+"),
    (65, "D"),
]

# Coarser scale used on the results page when a result has no stored grade
RESULT_GRADES = [
    (90, "A+"),
    (80, "A"),
    (70, "B+"),
    (60, "B"),
    (50, "C+"),
    (40, "C"),
]

# (label, lower bound inclusive, upper bound exclusive)
DISTRIBUTION_BUCKETS = [
    ("A+", 90, None),
    ("A", 80, 90),
    ("B", 60, 80),
    ("C", 40, 60),
    ("F", None, 40),
]

# Legacy optimistic default; kept for reference, never emitted as measured
ATTENDANCE_FALLBACK = 95.0

BEHAVIOR_BASE = 85
BEHAVIOR_BONUS = 5
BEHAVIOR_PENALTY = 10
BEHAVIOR_MIN = 50
BEHAVIOR_MAX = 100

STUDENT_TIERS = [
    ("excellent", 3.5, 95, 90),
    ("good", 3.0, 90, 80),
    ("average", 2.5, 85, 70),
]

TEACHER_TIERS = [
    ("excellent", 4.5),
    ("good", 4.0),
    ("average", 3.5),
]

MONTH_LABELS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def safe_average(values: Iterable) -> float:
    values = [float(v) for v in values if v is not None]
    return sum(values) / len(values) if values else 0


def percentage(part, whole) -> float:
    return float(part) / float(whole) * 100 if whole else 0


def round_half_up(value) -> int:
    return math.floor(float(value) + 0.5)


def round1(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return round_half_up(float(value) * 10) / 10


def letter_grade(pct) -> str:
    pct = float(pct or 0)
    for threshold, label in LETTER_GRADES:
        if pct >= threshold:
            return label
    return "F"


def result_grade(pct) -> str:
    pct = float(pct or 0)
    for threshold, label in RESULT_GRADES:
        if pct >= threshold:
            return label
    return "F"


def distribution_bucket(pct) -> str:
    pct = float(pct)
    for label, low, high in DISTRIBUTION_BUCKETS:
        if (low is None or pct >= low) and (high is None or pct < high):
            return label
    return "F"


def grade_distribution(percentages: Iterable) -> Dict[str, int]:
    counts = {label: 0 for label, _, _ in DISTRIBUTION_BUCKETS}
    for pct in percentages:
        counts[distribution_bucket(pct)] += 1
    return counts


def attendance_rate(present: int, total: int) -> Optional[float]:
    """present/total as a percentage to one decimal; None when nothing was taken."""
    if not total:
        return None
    return round1(present / total * 100)


def behavior_score(positive: int, negative: int) -> int:
    score = BEHAVIOR_BASE + positive * BEHAVIOR_BONUS - negative * BEHAVIOR_PENALTY
    return max(BEHAVIOR_MIN, min(BEHAVIOR_MAX, score))


def gpa_from_percentages(percentages: Sequence) -> Optional[float]:
    values = [float(p) for p in percentages if p is not None]
    if not values:
        return None
    return round(sum(values) / len(values) / 25, 2)


def _meets(value, threshold) -> bool:
    return value is None or value >= threshold


def classify_student(gpa: Optional[float], attendance: Optional[float], behavior: int) -> str:
    # attendance without records is not held against the student
    if gpa is None:
        return "insufficient_data"
    for tier, min_gpa, min_attendance, min_behavior in STUDENT_TIERS:
        if gpa >= min_gpa and _meets(attendance, min_attendance) and behavior >= min_behavior:
            return tier
    return "needs_attention"


def classify_teacher(rating: Optional[float]) -> str:
    if rating is None:
        return "insufficient_data"
    for tier, minimum in TEACHER_TIERS:
        if rating >= minimum:
            return tier
    return "needs_improvement"


def teacher_rating_fallback(avg_grade: Optional[float], attendance: Optional[float], experience: int) -> Optional[float]:
    if avg_grade is None or attendance is None:
        return None
    grade_part = avg_grade / 100 * 5 * 0.4
    attendance_part = attendance / 100 * 5 * 0.3
    base_part = 3.5 * 0.3
    experience_bonus = min(0.5, (experience or 0) * 0.05)
    return min(5, max(1, grade_part + attendance_part + base_part + experience_bonus))


def review_overall(scores: Sequence) -> float:
    return round(safe_average(scores), 2)


def teacher_position(experience: int) -> str:
    experience = experience or 0
    if experience >= 10:
        return "Senior Teacher"
    if experience >= 5:
        return "Teacher"
    return "Assistant Teacher"


def monthly_buckets(rows: Iterable, when, value=None, zero=0) -> List:
    """
    Fold timestamped rows into a 12-slot list indexed by calendar month.

    ``when`` extracts a date/datetime from a row; ``value`` extracts the amount
    to add (defaults to counting rows).
    """
    buckets = [zero for _ in range(12)]
    for row in rows:
        stamp = when(row)
        if stamp is None:
            continue
        if isinstance(stamp, datetime) and timezone.is_aware(stamp):
            stamp = timezone.localtime(stamp)
        buckets[stamp.month - 1] += value(row) if value else 1
    return buckets


def growth_rate(current: int, previous: int) -> float:
    if previous <= 0:
        return 0
    return round1((current - previous) / previous * 100)


def quantize(amount) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def decimal_sum(values: Iterable) -> Decimal:
    total = Decimal("0")
    for value in values:
        if value is not None:
            total += Decimal(value)
    return total


def decimal_share(part: Decimal, whole: Decimal) -> float:
    """Percentage of ``whole`` with one decimal, computed in Decimal."""
    if not whole:
        return 0
    return float((Decimal(part) / Decimal(whole) * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def time_ago(moment, now=None) -> str:
    now = now or timezone.now()
    seconds = max(0, (now - moment).total_seconds())
    hours = int(seconds // 3600)
    if hours < 1:
        return f"{int(seconds // 60)} minutes ago"
    if hours < 24:
        return f"{hours} hours ago"
    return f"{hours // 24} days ago"
