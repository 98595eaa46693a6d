import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_http_methods

from academics.models import SchoolClass, Subject
from students.models import ParentStudentLink
from . import services
from .forms import ContactForm

logger = logging.getLogger(__name__)

PROGRAMS = [
    {"title": "Elementary (Grades 1-5)", "grades": range(1, 6),
     "summary": "Foundations in literacy, numeracy and inquiry-based science."},
    {"title": "Middle School (Grades 6-8)", "grades": range(6, 9),
     "summary": "Subject specialists, clubs and a first taste of independent projects."},
    {"title": "High School (Grades 9-12)", "grades": range(9, 13),
     "summary": "College preparatory courses, electives and advanced placement."},
]

REQUIREMENTS = [
    "Completed application form",
    "Birth certificate",
    "Previous school report cards",
    "Immunisation records",
    "Two passport photographs",
]


@require_GET
def home(request):
    ctx = {
        "news": services.public_news(limit=3),
        "events": services.upcoming_events(limit=3, public_only=True),
        "active_nav": "home",
    }
    return render(request, "content/home.html", ctx)


@require_GET
def about(request):
    return render(request, "content/about.html", {"active_nav": "about"})


@require_GET
def programs(request):
    ctx = {
        "programs": PROGRAMS,
        "subjects": Subject.objects.order_by("name"),
        "class_count": SchoolClass.objects.count(),
        "active_nav": "programs",
    }
    return render(request, "content/programs.html", ctx)


@require_GET
def news(request):
    ctx = {
        "news": services.public_news(limit=20),
        "events": services.upcoming_events(limit=10, public_only=True),
        "active_nav": "news",
    }
    return render(request, "content/news.html", ctx)


@require_http_methods(["GET", "POST"])
def contact(request):
    form = ContactForm(request.POST or None)
    if request.method == "POST":
        if form.is_valid():
            inquiry = form.save()
            logger.info("Inquiry %s received (%s)", inquiry.pk, inquiry.topic)
            messages.success(request, "Thank you. We will get back to you shortly.")
            return redirect("content:contact")
        messages.error(request, "Please correct the errors below.")
    return render(request, "content/contact.html", {"form": form, "active_nav": "contact"})


@require_GET
def admissions(request):
    ctx = {"requirements": REQUIREMENTS, "active_nav": "admissions"}
    return render(request, "content/admissions.html", ctx)


@require_GET
def apply(request):
    grades = [f"Grade {n}" for n in range(1, 13)]
    return render(request, "content/apply.html", {"grades": grades, "active_nav": "admissions"})


@require_GET
def track(request):
    ctx = {"application_id": request.GET.get("applicationId", ""), "active_nav": "admissions"}
    return render(request, "content/track.html", ctx)


@login_required
def announcements(request):
    """Notices for the signed-in user: school-wide plus their classes."""
    user = request.user
    class_ids = []
    if user.school_class_id:
        class_ids.append(user.school_class_id)
    class_ids.extend(user.homeroom_classes.values_list("id", flat=True))
    children = ParentStudentLink.objects.filter(user=user, active=True, student__school_class__isnull=False)
    class_ids.extend(children.values_list("student__school_class_id", flat=True))
    items = services.announcements_for_classes(set(class_ids), limit=50)
    return render(
        request,
        "content/announcements.html",
        {"announcements": items, "active_nav": "announcements"},
    )


@require_GET
def terms(request):
    """Public Terms of Service page (no auth required)."""
    return render(request, "content/terms.html", {"active_nav": None})


@require_GET
def privacy(request):
    """Public Privacy Policy page (no auth required)."""
    return render(request, "content/privacy.html", {"active_nav": None})
