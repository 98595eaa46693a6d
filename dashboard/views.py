import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect, render
from django.utils import timezone

from academics import services as academic_services
from academics.models import Exam, SchoolClass, Subject
from accounts.decorators import admin_required
from admissions import services as admission_services
from admissions.models import AdmissionApplication
from financials.models import FeePayment
from financials.reports import finance_report
from reporting.query import exact_filters, safe_load
from students import services as student_services
from students.decorators import require_parent_access_to_student
from . import services
from .strategies import strategy_for

logger = logging.getLogger(__name__)

LOAD_ERROR = "Some information could not be loaded. Please try again shortly."


def _load(request, loader, default, label):
    """safe_load plus a banner when the loader degraded."""
    sentinel = object()
    value = safe_load(loader, sentinel, label)
    if value is sentinel:
        messages.error(request, LOAD_ERROR)
        return default
    return value


@login_required
def index(request):
    if request.user.role == "ADMIN":
        return redirect("dashboard:admin_overview")
    strategy = strategy_for(request.user)
    ctx = _load(request, strategy.context, strategy.empty_context(), f"{request.user.role} dashboard")
    ctx["active_nav"] = "dashboard"
    return render(request, strategy.template, ctx)


@require_parent_access_to_student()
def child(request, student_id: int):
    student = request.student

    def load():
        performance = student_services.performance_for([student])[0]
        payments = list(
            FeePayment.objects.filter(student=student).select_related("fee").order_by("-created_at")
        )
        return {"performance": performance, "payments": payments}

    ctx = _load(request, load, {"performance": None, "payments": []}, f"student {student.pk}")
    ctx.update({"student": student, "active_nav": "dashboard"})
    return render(request, "dashboard/child.html", ctx)


@admin_required
def admin_overview(request):
    ctx = _load(request, services.admin_overview, {"stats": {}, "upcomingEvents": [],
                "recentApplications": [], "recentActivity": []}, "admin overview")
    ctx["active_nav"] = "overview"
    return render(request, "manage/overview.html", ctx)


@admin_required
def manage_students(request):
    ctx = {
        "classes": SchoolClass.objects.order_by("grade", "section"),
        "page_size": 20,
        "active_nav": "students",
    }
    return render(request, "manage/students.html", ctx)


@admin_required
def manage_results(request):
    filters = exact_filters(request.GET, {"classId": "school_class_id", "subjectId": "subject_id"})

    def load():
        exams = (
            Exam.objects.filter(filters)
            .select_related("school_class", "subject")
            .prefetch_related("results")
            .order_by("-date")
        )
        return academic_services.results_overview(exams)

    empty = academic_services.results_overview([])
    ctx = _load(request, load, empty, "results overview")
    ctx.update({
        "classes": SchoolClass.objects.order_by("grade", "section"),
        "subjects": Subject.objects.order_by("name"),
        "selected_class": request.GET.get("classId", ""),
        "selected_subject": request.GET.get("subjectId", ""),
        "active_nav": "results",
    })
    return render(request, "manage/results.html", ctx)


@admin_required
def manage_finance(request):
    try:
        year = int(request.GET.get("year") or timezone.localdate().year)
    except ValueError:
        year = timezone.localdate().year
    report = _load(request, lambda: finance_report(year), None, "finance report")
    this_year = timezone.localdate().year
    ctx = {
        "report": report,
        "year": year,
        "years": list(range(this_year - 4, this_year + 1)),
        "active_nav": "finance",
    }
    return render(request, "manage/finance.html", ctx)


@admin_required
def manage_admissions(request):
    period = request.GET.get("period") or "thisYear"
    if period not in admission_services.PERIODS:
        period = "thisYear"
    grade = request.GET.get("grade") or "all"
    report = _load(request, lambda: admission_services.admissions_report(period, grade), None, "admissions report")
    applications = _load(
        request,
        lambda: list(AdmissionApplication.objects.prefetch_related("documents").order_by("-submitted_at")[:25]),
        [],
        "applications",
    )
    grades = (
        AdmissionApplication.objects.order_by("student_grade")
        .values_list("student_grade", flat=True)
        .distinct()
    )
    ctx = {
        "report": report,
        "applications": applications,
        "period": period,
        "grade": grade,
        "grades": grades,
        "periods": admission_services.PERIODS,
        "statuses": [c[0] for c in AdmissionApplication.STATUS_CHOICES],
        "active_nav": "admissions",
    }
    return render(request, "manage/admissions.html", ctx)
