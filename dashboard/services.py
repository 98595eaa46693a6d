from __future__ import annotations

import logging
from typing import Any, Dict, List

from django.db.models import Sum
from django.utils import timezone

from academics.models import SchoolClass
from accounts.models import User
from admissions.models import AdmissionApplication
from attendance import services as attendance_services
from content import services as content_services
from financials.models import FeePayment
from reporting import metrics
from reporting.presenters import money
from reporting.query import fan_out

logger = logging.getLogger(__name__)

ACTIVITY_LIMIT = 8


def _month_revenue():
    today = timezone.localdate()
    total = FeePayment.objects.filter(
        status="PAID", payment_date__year=today.year, payment_date__month=today.month
    ).aggregate(total=Sum("amount_paid"))["total"]
    return total or 0


def _recent_applications(limit: int = 5):
    return list(AdmissionApplication.objects.order_by("-submitted_at")[:limit])


def recent_activity(limit: int = ACTIVITY_LIMIT) -> List[Dict[str, Any]]:
    """Newest applications, payments and notices merged into one feed."""
    items = []
    for app in AdmissionApplication.objects.order_by("-submitted_at")[:limit]:
        items.append((app.submitted_at, {
            "message": f"New application from {app.student_name} for {app.student_grade}",
            "status": "info" if app.status == "PENDING" else "success",
        }))
    payments = FeePayment.objects.filter(status="PAID", payment_date__isnull=False).select_related(
        "student", "fee"
    ).order_by("-payment_date")[:limit]
    for payment in payments:
        items.append((payment.payment_date, {
            "message": f"{payment.student.display_name} paid {payment.fee.title}",
            "status": "success",
        }))
    for notice in content_services.active_announcements().order_by("-publish_date")[:limit]:
        items.append((notice.publish_date, {
            "message": f"Announcement: {notice.title}",
            "status": "warning" if notice.announcement_type == "URGENT" else "info",
        }))
    items.sort(key=lambda pair: pair[0], reverse=True)
    now = timezone.now()
    return [dict(entry, time=metrics.time_ago(stamp, now)) for stamp, entry in items[:limit]]


def admin_overview() -> Dict[str, Any]:
    loaded = fan_out(
        students=User.objects.students().count,
        teachers=User.objects.teachers().count,
        classes=SchoolClass.objects.count,
        pending=AdmissionApplication.objects.filter(status__in=AdmissionApplication.OPEN_STATUSES).count,
        announcements=content_services.active_announcements().count,
        attendance=attendance_services.recent_average,
        revenue=_month_revenue,
        events=lambda: content_services.upcoming_events(limit=5),
        applications=_recent_applications,
        activity=recent_activity,
    )
    return {
        "stats": {
            "totalStudents": loaded["students"],
            "totalTeachers": loaded["teachers"],
            "totalClasses": loaded["classes"],
            "pendingAdmissions": loaded["pending"],
            "activeAnnouncements": loaded["announcements"],
            "averageAttendance": loaded["attendance"],
            "monthlyRevenue": money(loaded["revenue"]),
        },
        "upcomingEvents": loaded["events"],
        "recentApplications": loaded["applications"],
        "recentActivity": loaded["activity"],
    }
