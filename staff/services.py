from __future__ import annotations

import logging
from typing import Any, Dict, List

from django.db import transaction
from django.db.models import Count, Q

from academics.models import ExamResult, Subject
from accounts.models import User
from attendance.models import AttendanceRecord
from reporting import metrics
from reporting.presenters import money
from .models import PerformanceReview

logger = logging.getLogger(__name__)

# experience filter value -> (min years, max years)
EXPERIENCE_BUCKETS = {
    "0": (None, 2),
    "5": (5, 10),
    "10": (10, None),
}


def experience_q(bucket: str | None) -> Q:
    bounds = EXPERIENCE_BUCKETS.get(bucket or "")
    if bounds is None:
        return Q()
    low, high = bounds
    q = Q()
    if low is not None:
        q &= Q(experience__gte=low)
    if high is not None:
        q &= Q(experience__lte=high)
    return q


def teacher_row(teacher: User) -> Dict[str, Any]:
    return {
        "id": teacher.pk,
        "name": teacher.display_name,
        "email": teacher.email,
        "phone": teacher.phone,
        "qualification": teacher.qualification,
        "specialization": teacher.specialization,
        "experience": teacher.experience,
        "salary": money(teacher.salary) if teacher.salary is not None else None,
        "position": metrics.teacher_position(teacher.experience),
        "joinDate": teacher.date_of_joining.isoformat() if teacher.date_of_joining else None,
        "subjects": [
            {"id": s.pk, "name": s.name, "code": s.code}
            for s in teacher.teaching_subjects.all()
        ],
        "classes": [
            {"id": c.pk, "name": str(c)} for c in teacher.homeroom_classes.all()
        ],
    }


def teachers_queryset():
    return (
        User.objects.teachers()
        .prefetch_related("teaching_subjects", "homeroom_classes")
        .order_by("name", "email")
    )


def create_teacher(data: Dict[str, Any]) -> User:
    with transaction.atomic():
        teacher = User.objects.create_user(
            email=data["email"],
            password=data.get("password") or None,
            role=User.TEACHER,
            name=data["name"].strip(),
            phone=data.get("phone", ""),
            address=data.get("address", ""),
            qualification=data.get("qualification", ""),
            specialization=data.get("specialization", ""),
            experience=data.get("experience"),
            salary=data.get("salary"),
            date_of_joining=data.get("joinDate"),
        )
        if data.get("subjectIds"):
            teacher.teaching_subjects.set(Subject.objects.filter(pk__in=data["subjectIds"]))
    logger.info("Created teacher %s", teacher.email)
    return teacher


def _latest_reviews(teacher_ids: List[int]) -> Dict[int, PerformanceReview]:
    latest: Dict[int, PerformanceReview] = {}
    for review in PerformanceReview.objects.filter(teacher_id__in=teacher_ids).order_by("-created_at", "-id"):
        latest.setdefault(review.teacher_id, review)
    return latest


def _average_grade(subject_ids: List[int]):
    if not subject_ids:
        return None
    results = ExamResult.objects.filter(exam__subject_id__in=subject_ids).select_related("exam")
    pcts = [r.percentage for r in results]
    if not pcts:
        return None
    return metrics.round1(metrics.safe_average(pcts))


def _attendance(class_ids: List[int]):
    if not class_ids:
        return None
    agg = AttendanceRecord.objects.filter(session__school_class_id__in=class_ids).aggregate(
        total=Count("id"), present=Count("id", filter=Q(status="PRESENT"))
    )
    return metrics.attendance_rate(agg["present"] or 0, agg["total"] or 0)


def performance_row(teacher: User, review: PerformanceReview | None) -> Dict[str, Any]:
    classes = list(teacher.homeroom_classes.all())
    subjects = list(teacher.teaching_subjects.all())
    class_ids = [c.pk for c in classes]
    total_students = User.objects.students().filter(school_class_id__in=class_ids).count() if class_ids else 0
    avg_grade = _average_grade([s.pk for s in subjects])
    attendance = _attendance(class_ids)
    if review is not None:
        rating = float(review.overall_rating)
    else:
        rating = metrics.teacher_rating_fallback(avg_grade, attendance, teacher.experience)
        if rating is not None:
            rating = round(rating, 2)
    row = teacher_row(teacher)
    row.update(
        {
            "totalClasses": len(classes),
            "totalStudents": total_students,
            "totalSubjects": len(subjects),
            "averageGrade": avg_grade,
            "attendanceRate": attendance,
            "rating": rating,
            "ratingSource": "review" if review is not None else ("derived" if rating is not None else None),
            "status": metrics.classify_teacher(rating),
            "parentSatisfaction": (
                float(review.parent_satisfaction)
                if review is not None and review.parent_satisfaction is not None else None
            ),
            "completionRate": (
                float(review.completion_rate)
                if review is not None and review.completion_rate is not None else None
            ),
            "goalsSet": review.goals_set if review is not None else None,
            "goalsAchieved": review.goals_achieved if review is not None else None,
            "lastReview": review_row(review) if review is not None else None,
        }
    )
    return row


def performance_for(teachers: List[User]) -> List[Dict[str, Any]]:
    reviews = _latest_reviews([t.pk for t in teachers])
    return [performance_row(t, reviews.get(t.pk)) for t in teachers]


def performance_summary(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    counts = {s: 0 for s in ("excellent", "good", "average", "needs_improvement", "insufficient_data")}
    for row in rows:
        counts[row["status"]] += 1
    ratings = [r["rating"] for r in rows if r["rating"] is not None]
    return {
        "totalTeachers": len(rows),
        "averageRating": round(metrics.safe_average(ratings), 2) if ratings else None,
        "statusCounts": counts,
    }


def review_row(review: PerformanceReview) -> Dict[str, Any]:
    data = {name: getattr(review, name) for name in PerformanceReview.SCORE_FIELDS}
    data.update(
        {
            "id": review.pk,
            "teacherId": review.teacher_id,
            "reviewPeriod": review.review_period,
            "academicYear": review.academic_year,
            "overallRating": float(review.overall_rating),
            "strengths": review.strengths,
            "areasForImprovement": review.areas_for_improvement,
            "comments": review.comments,
            "createdAt": review.created_at.isoformat() if review.created_at else None,
        }
    )
    return data
