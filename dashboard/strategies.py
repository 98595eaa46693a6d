"""
Per-role dashboard content.

Each role gets a strategy that knows which template to render and how to
build its context; ``strategy_for`` picks one from ``DASHBOARD_STRATEGIES``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from django.db.models import Count, Q, Sum
from django.utils import timezone

from academics.models import Exam, ExamResult, SchoolClass
from accounts.models import User
from attendance import services as attendance_services
from content import services as content_services
from financials.models import FeePayment
from reporting import metrics
from reporting.presenters import format_percent, money, stat_card
from students.models import ParentStudentLink

logger = logging.getLogger(__name__)


def _average_percentage(results) -> float | None:
    pcts = [r.percentage for r in results]
    if not pcts:
        return None
    return metrics.round1(metrics.safe_average(pcts))


class DashboardStrategy:
    role = None
    template = "dashboard/index.html"
    greeting = "Welcome to your dashboard!"

    def __init__(self, user: User):
        self.user = user

    def build(self) -> Dict[str, Any]:
        return {}

    def context(self) -> Dict[str, Any]:
        ctx = {"greeting": self.greeting, "role": self.role}
        ctx.update(self.build())
        return ctx

    def empty_context(self) -> Dict[str, Any]:
        return {"greeting": self.greeting, "role": self.role, "cards": []}


class TeacherDashboard(DashboardStrategy):
    role = User.TEACHER
    template = "dashboard/teacher.html"
    greeting = "Welcome to your teaching dashboard!"

    def classes(self):
        subject_ids = self.user.teaching_subjects.values_list("id", flat=True)
        return (
            SchoolClass.objects.filter(Q(teacher=self.user) | Q(subjects__in=subject_ids))
            .annotate(student_count=Count("students", distinct=True))
            .distinct()
            .order_by("grade", "section")
        )

    def build(self):
        classes = list(self.classes())
        class_ids = [c.pk for c in classes]
        subject_ids = list(self.user.teaching_subjects.values_list("id", flat=True))
        total_students = sum(c.student_count for c in classes)
        attendance = attendance_services.today_rate(class_ids)
        now = timezone.now()
        exams = Exam.objects.filter(school_class_id__in=class_ids).filter(
            Q(subject_id__in=subject_ids) | Q(school_class__teacher=self.user)
        )
        awaiting = list(
            exams.filter(date__lte=now)
            .annotate(result_count=Count("results"))
            .filter(result_count=0)
            .select_related("school_class", "subject")
            .order_by("-date")[:10]
        )
        upcoming = list(
            exams.filter(date__gt=now).select_related("school_class", "subject").order_by("date")[:5]
        )
        return {
            "cards": [
                stat_card("My Classes", len(classes)),
                stat_card("Total Students", total_students),
                stat_card("Today's Attendance", format_percent(attendance), "across my classes"),
                stat_card("Awaiting Results", len(awaiting), "exams without marks"),
            ],
            "classes": classes,
            "awaiting_results": awaiting,
            "upcoming_exams": upcoming,
            "announcements": content_services.announcements_for_classes(class_ids),
            "events": events,
        }


class StudentDashboard(DashboardStrategy):
    role = User.STUDENT
    template = "dashboard/student.html"
    greeting = "Ready for another day of learning?"

    def build(self):
        results = list(
            ExamResult.objects.filter(student=self.user)
            .select_related("exam__subject")
            .order_by("-exam__date")
        )
        average = _average_percentage(results)
        attendance = attendance_services.student_rate(self.user)
        class_ids = [self.user.school_class_id] if self.user.school_class_id else []
        upcoming = list(
            Exam.objects.filter(school_class_id__in=class_ids, date__gt=timezone.now())
            .select_related("subject")
            .order_by("date")[:5]
        )
        return {
            "cards": [
                stat_card("Average Score", format_percent(average)),
                stat_card("Grade", metrics.letter_grade(average) if average is not None else "N/A"),
                stat_card("Attendance", format_percent(attendance)),
                stat_card("Upcoming Exams", len(upcoming)),
            ],
            "recent_results": results[:5],
            "upcoming_exams": upcoming,
            "announcements": content_services.announcements_for_classes(class_ids),
            "events": content_services.upcoming_events(),
        }


class ParentDashboard(DashboardStrategy):
    role = User.PARENT
    template = "dashboard/parent.html"
    greeting = "Stay connected with your child's education."

    def children(self) -> List[User]:
        links = (
            ParentStudentLink.objects.filter(user=self.user, active=True)
            .select_related("student__school_class")
            .order_by("student__name")
        )
        return [link.student for link in links]

    def child_summary(self, child: User) -> Dict[str, Any]:
        results = list(ExamResult.objects.filter(student=child).select_related("exam"))
        average = _average_percentage(results)
        pending = FeePayment.objects.filter(
            student=child, status__in=("PENDING", "OVERDUE")
        ).aggregate(total=Sum("fee__amount"), count=Count("id"))
        return {
            "student": child,
            "attendance": attendance_services.student_rate(child),
            "average": average,
            "letter": metrics.letter_grade(average) if average is not None else None,
            "pending_fees": money(pending["total"]),
            "pending_count": pending["count"],
        }

    def build(self):
        children = self.children()
        summaries = [self.child_summary(c) for c in children]
        class_ids = {c.school_class_id for c in children if c.school_class_id}
        pending_total = sum(s["pending_count"] for s in summaries)
        events = content_services.upcoming_events()
        return {
            "cards": [
                stat_card("Children", len(children)),
                stat_card("Pending Payments", pending_total),
                stat_card("Upcoming Events", len(events)),
            ],
            "children": summaries,
            "announcements": content_services.announcements_for_classes(class_ids),
            "events": events,
        }


DASHBOARD_STRATEGIES = {
    User.TEACHER: TeacherDashboard,
    User.STUDENT: StudentDashboard,
    User.PARENT: ParentDashboard,
}


def strategy_for(user: User) -> DashboardStrategy:
    return DASHBOARD_STRATEGIES.get(user.role, DashboardStrategy)(user)
