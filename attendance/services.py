from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, Iterable, Optional, Tuple

from django.db.models import Count, Q
from django.utils import timezone

from reporting.metrics import attendance_rate
from .models import AttendanceRecord

PRESENT = "PRESENT"


def _counts(qs) -> Tuple[int, int]:
    agg = qs.aggregate(
        total=Count("id"),
        present=Count("id", filter=Q(status=PRESENT)),
    )
    return agg["present"] or 0, agg["total"] or 0


def records_for(
    student_ids: Optional[Iterable[int]] = None,
    class_ids: Optional[Iterable[int]] = None,
    since: Optional[date] = None,
):
    qs = AttendanceRecord.objects.all()
    if student_ids is not None:
        qs = qs.filter(student_id__in=list(student_ids))
    if class_ids is not None:
        qs = qs.filter(session__school_class_id__in=list(class_ids))
    if since is not None:
        qs = qs.filter(session__date__gte=since)
    return qs


def rate_for(**filters) -> Optional[float]:
    present, total = _counts(records_for(**filters))
    return attendance_rate(present, total)


def student_rate(student) -> Optional[float]:
    return rate_for(student_ids=[student.pk])


def class_rate(school_class) -> Optional[float]:
    return rate_for(
        student_ids=school_class.students.values_list("id", flat=True),
        class_ids=[school_class.pk],
    )


def rates_by_student(student_ids: Iterable[int]) -> Dict[int, Optional[float]]:
    """One grouped query for many students."""
    student_ids = list(student_ids)
    rows = (
        records_for(student_ids=student_ids)
        .values("student_id")
        .annotate(total=Count("id"), present=Count("id", filter=Q(status=PRESENT)))
    )
    rates = {sid: None for sid in student_ids}
    for row in rows:
        rates[row["student_id"]] = attendance_rate(row["present"], row["total"])
    return rates


def recent_average(days: int = 7) -> float:
    """Attendance over the last ``days`` days; 0 when nothing was recorded."""
    since = timezone.localdate() - timedelta(days=days)
    return rate_for(since=since) or 0


def today_rate(class_ids: Iterable[int]) -> Optional[float]:
    qs = records_for(class_ids=class_ids).filter(session__date=timezone.localdate())
    present, total = _counts(qs)
    return attendance_rate(present, total)
