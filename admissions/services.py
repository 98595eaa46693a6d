from __future__ import annotations

import logging
import secrets
from datetime import datetime, time, timedelta
from typing import Any, Dict, Optional

from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone

from jobs.tasks import send_application_notice
from mailer.sending import RECEIVED, STATUS_CHANGED
from reporting import metrics
from reporting.query import fan_out
from .models import AdmissionApplication, ApplicationDocument, ApplicationTimeline

logger = logging.getLogger(__name__)

ID_ATTEMPTS = 5

NEXT_STEPS = {
    "PENDING": "Your application is being reviewed by our admissions team.",
    "UNDER_REVIEW": "Documents are being verified. You may be contacted for additional information.",
    "INTERVIEW_SCHEDULED": "Please prepare for your scheduled interview. Check your email for details.",
    "ACCEPTED": "Congratulations! Please complete enrollment procedures.",
    "REJECTED": "Thank you for your interest. You may reapply next academic year.",
    "WAITLISTED": "You are on our waiting list. We will contact you if a spot becomes available.",
}
DEFAULT_NEXT_STEP = "Please contact admissions office for more information."

STATUS_TIMELINE = {
    "UNDER_REVIEW": ("Under Review", "Application is being reviewed by the admissions team"),
    "INTERVIEW_SCHEDULED": ("Interview Scheduled", "An interview has been scheduled"),
    "ACCEPTED": ("Application Accepted", "Congratulations, the application has been accepted"),
    "REJECTED": ("Application Rejected", "The application was not successful"),
    "WAITLISTED": ("Waitlisted", "The application has been placed on the waiting list"),
    "PENDING": ("Returned to Pending", "Application returned to the pending queue"),
}

ACTIVITY_STATUS = {"ACCEPTED": "success", "REJECTED": "error", "PENDING": "info"}

PERIODS = ("thisWeek", "thisMonth", "thisYear", "lastYear")


def new_application_id(year: Optional[int] = None) -> str:
    year = year or timezone.localdate().year
    return f"APP-{year}-{secrets.randbelow(1_000_000):06d}"


def status_text(status: str) -> str:
    return status.lower().replace("_", " ")


def next_step(status: str) -> str:
    return NEXT_STEPS.get(status, DEFAULT_NEXT_STEP)


def _enqueue_notice(application: AdmissionApplication, template_key: str, event: str):
    transaction.on_commit(
        lambda: send_application_notice.delay(application.pk, template_key, event)
    )


def submit_application(data: Dict[str, Any]) -> AdmissionApplication:
    """Store a new application with a fresh id and its first timeline entry."""
    fields = {
        "student_first_name": data["studentFirstName"],
        "student_last_name": data["studentLastName"],
        "student_date_of_birth": data["studentDateOfBirth"],
        "student_gender": data["studentGender"],
        "student_grade": data["studentGrade"],
        "parent_first_name": data["parentFirstName"],
        "parent_last_name": data["parentLastName"],
        "parent_email": data["parentEmail"],
        "parent_phone": data["parentPhone"],
        "parent_address": data["parentAddress"],
        "parent_occupation": data.get("parentOccupation", ""),
        "previous_school": data.get("previousSchool", ""),
        "previous_grade": data.get("previousGrade", ""),
        "reason_for_transfer": data.get("reasonForTransfer", ""),
        "extracurriculars": data.get("extracurriculars", ""),
        "medical_conditions": data.get("medicalConditions", ""),
        "special_needs": data.get("specialNeeds", ""),
    }
    for attempt in range(ID_ATTEMPTS):
        application_id = new_application_id()
        if AdmissionApplication.objects.filter(application_id=application_id).exists():
            continue
        try:
            with transaction.atomic():
                application = AdmissionApplication.objects.create(
                    application_id=application_id, status="PENDING", **fields
                )
                ApplicationTimeline.objects.create(
                    application=application,
                    status="Application Submitted",
                    description="Application received and logged in system",
                    completed=True,
                )
                _enqueue_notice(application, RECEIVED, "submitted")
        except IntegrityError:
            logger.warning("Application id collision on %s (attempt %s)", application_id, attempt + 1)
            continue
        logger.info("Application %s submitted for grade %s", application_id, application.student_grade)
        return application
    raise RuntimeError("Could not allocate a unique application id")


def track(application: AdmissionApplication) -> Dict[str, Any]:
    return {
        "applicationId": application.application_id,
        "studentName": application.student_name,
        "grade": application.student_grade,
        "submittedDate": application.submitted_at.isoformat(),
        "status": status_text(application.status),
        "lastUpdate": application.updated_at.isoformat(),
        "nextStep": next_step(application.status),
        "documents": [
            {"id": doc.pk, "name": doc.document_type, "status": doc.status.lower()}
            for doc in application.documents.order_by("uploaded_at", "id")
        ],
        "timeline": [
            {
                "date": event.created_at.isoformat(),
                "status": event.status,
                "description": event.description,
                "completed": event.completed,
            }
            for event in application.timeline.order_by("created_at", "id")
        ],
    }


def application_row(application: AdmissionApplication) -> Dict[str, Any]:
    return {
        "id": application.pk,
        "applicationId": application.application_id,
        "studentName": application.student_name,
        "grade": application.student_grade,
        "parentName": application.parent_name,
        "parentEmail": application.parent_email,
        "parentPhone": application.parent_phone,
        "status": application.status,
        "submittedAt": application.submitted_at.isoformat(),
        "updatedAt": application.updated_at.isoformat(),
        "documents": [
            {"id": d.pk, "type": d.document_type, "fileName": d.file_name, "status": d.status}
            for d in application.documents.all()
        ],
    }


def change_status(application: AdmissionApplication, status: str, note: str = "") -> bool:
    """
    Move an application to ``status``. Returns False when it already has that
    status, in which case nothing is written and no email goes out.
    """
    if application.status == status:
        return False
    title, description = STATUS_TIMELINE.get(status, (status_text(status).title(), ""))
    with transaction.atomic():
        application.status = status
        application.save(update_fields=["status", "updated_at"])
        ApplicationTimeline.objects.create(
            application=application,
            status=title,
            description=note or description,
            completed=True,
        )
        _enqueue_notice(application, STATUS_CHANGED, status)
    logger.info("Application %s moved to %s", application.application_id, status)
    return True


def review_document(document: ApplicationDocument, status: str) -> bool:
    """Set a document's review status. Re-submitting the same status is a no-op."""
    if document.status == status:
        return False
    document.status = status
    document.reviewed_at = timezone.now()
    document.save(update_fields=["status", "reviewed_at"])
    logger.info(
        "Document %s of %s marked %s", document.document_type, document.application.application_id, status
    )
    return True


# Reports

def _aware(day) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min))


def period_window(period: str, now=None):
    """(start, end) for a report period; unknown values mean thisYear."""
    now = now or timezone.localtime()
    today = now.date()
    if period == "thisWeek":
        return now - timedelta(days=7), now
    if period == "thisMonth":
        return _aware(today.replace(day=1)), now
    if period == "lastYear":
        start = _aware(today.replace(year=today.year - 1, month=1, day=1))
        end = _aware(today.replace(month=1, day=1))
        return start, end - timedelta(microseconds=1)
    return _aware(today.replace(month=1, day=1)), now


def _shift_month(first_of_month, months: int):
    index = first_of_month.year * 12 + first_of_month.month - 1 + months
    return first_of_month.replace(year=index // 12, month=index % 12 + 1, day=1)


def _status_counts(base):
    rows = base.values("status").annotate(n=Count("id"))
    counts = {status: 0 for status, _ in AdmissionApplication.STATUS_CHOICES}
    for row in rows:
        counts[row["status"]] = row["n"]
    return counts


def _month_counts(grade_q: Q, now):
    this_start = _aware(now.date().replace(day=1))
    last_start = _aware(_shift_month(now.date().replace(day=1), -1))
    qs = AdmissionApplication.objects.filter(grade_q)
    return (
        qs.filter(submitted_at__gte=this_start).count(),
        qs.filter(submitted_at__gte=last_start, submitted_at__lt=this_start).count(),
    )


def _grade_distribution(base):
    rows = (
        base.values("student_grade")
        .annotate(n=Count("id"), accepted=Count("id", filter=Q(status="ACCEPTED")))
        .order_by("student_grade")
    )
    return [
        {
            "grade": row["student_grade"],
            "applications": row["n"],
            "accepted": row["accepted"],
            "acceptanceRate": metrics.round1(metrics.percentage(row["accepted"], row["n"])),
        }
        for row in rows
    ]


def _monthly_data(grade_q: Q, now):
    first = now.date().replace(day=1)
    start = _aware(_shift_month(first, -11))
    rows = list(
        AdmissionApplication.objects.filter(grade_q, submitted_at__gte=start).values("status", "submitted_at")
    )
    for row in rows:
        stamp = timezone.localtime(row["submitted_at"])
        row["key"] = (stamp.year, stamp.month)
    data = []
    for offset in range(-11, 1):
        month_start = _shift_month(first, offset)
        key = (month_start.year, month_start.month)
        in_month = [r for r in rows if r["key"] == key]
        data.append(
            {
                "month": metrics.MONTH_LABELS[month_start.month - 1],
                "applications": len(in_month),
                "accepted": sum(1 for r in in_month if r["status"] == "ACCEPTED"),
                "rejected": sum(1 for r in in_month if r["status"] == "REJECTED"),
            }
        )
    return data


def _recent_activity(grade_q: Q, now):
    recent = AdmissionApplication.objects.filter(grade_q).order_by("-submitted_at")[:10]
    return [
        {
            "id": app.pk,
            "type": "application",
            "message": f"New application from {app.student_name} for {app.student_grade}",
            "time": metrics.time_ago(app.submitted_at, now),
            "status": ACTIVITY_STATUS.get(app.status, "warning"),
        }
        for app in recent
    ]


def admissions_report(period: str = "thisYear", grade: str = "all") -> Dict[str, Any]:
    now = timezone.localtime()
    start, end = period_window(period, now)
    grade_q = Q(student_grade=grade) if grade and grade != "all" else Q()
    base = AdmissionApplication.objects.filter(grade_q, submitted_at__gte=start, submitted_at__lte=end)

    loaded = fan_out(
        total=base.count,
        statuses=lambda: _status_counts(base),
        months=lambda: _month_counts(grade_q, now),
        grades=lambda: _grade_distribution(base),
        monthly=lambda: _monthly_data(grade_q, now),
        recent=lambda: _recent_activity(grade_q, now),
    )
    statuses = loaded["statuses"]
    this_month, last_month = loaded["months"]
    return {
        "stats": {
            "total": loaded["total"],
            "pending": statuses["PENDING"],
            "underReview": statuses["UNDER_REVIEW"],
            "interviewScheduled": statuses["INTERVIEW_SCHEDULED"],
            "accepted": statuses["ACCEPTED"],
            "rejected": statuses["REJECTED"],
            "waitlisted": statuses["WAITLISTED"],
            "thisMonth": this_month,
            "lastMonth": last_month,
            "growthRate": metrics.growth_rate(this_month, last_month),
        },
        "gradeDistribution": loaded["grades"],
        "monthlyData": loaded["monthly"],
        "recentActivity": loaded["recent"],
    }
