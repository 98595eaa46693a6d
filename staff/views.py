import logging

from django.db import IntegrityError

from accounts.models import User
from reporting.api import fail, first_error, generation, json_endpoint, ok
from reporting.query import Page, page_params, paginate, search_q
from . import services
from .models import PerformanceReview
from .serializers import ReviewSerializer, TeacherSerializer

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ["name", "email", "qualification", "specialization"]


def _filtered_teachers(request):
    qs = services.teachers_queryset()
    qs = qs.filter(search_q(request.GET.get("search"), SEARCH_FIELDS))
    subject = request.GET.get("subject")
    if subject and subject != "all":
        qs = qs.filter(teaching_subjects__pk=subject).distinct()
    return qs.filter(services.experience_q(request.GET.get("experience")))


@json_endpoint(methods=("GET", "POST"), roles=("ADMIN",))
def teachers(request):
    if request.method == "GET":
        page, limit = page_params(request)
        result = paginate(_filtered_teachers(request), page, limit)
        return ok(
            {
                "teachers": [services.teacher_row(t) for t in result.items],
                "pagination": result.pagination(),
            },
            generation=generation(request),
        )

    serializer = TeacherSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    if User.objects.filter(email__iexact=data["email"]).exists():
        return fail("A user with this email already exists")
    try:
        teacher = services.create_teacher(data)
    except IntegrityError:
        logger.warning("Duplicate teacher insert for %s", data["email"])
        return fail("A user with this email already exists")
    return ok(services.teacher_row(teacher), status=201, message="Teacher created successfully")


@json_endpoint(methods=("GET", "POST"), roles=("ADMIN",))
def performance(request):
    if request.method == "GET":
        teachers_list = list(_filtered_teachers(request))
        rows = services.performance_for(teachers_list)
        status = request.GET.get("status")
        if status and status != "all":
            rows = [row for row in rows if row["status"] == status]
        page, limit = page_params(request)
        offset = (page - 1) * limit
        result = Page(items=rows[offset:offset + limit], total=len(rows), page=page, limit=limit)
        return ok(
            {
                "teachers": result.items,
                "summary": services.performance_summary(rows),
                "pagination": result.pagination(),
            },
            generation=generation(request),
        )

    serializer = ReviewSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    teacher = User.objects.teachers().filter(pk=serializer.validated_data["teacherId"]).first()
    if teacher is None:
        return fail("Teacher not found", 404)
    review = PerformanceReview.objects.create(
        teacher=teacher, reviewer=request.user, **serializer.review_fields()
    )
    logger.info("Review %s recorded for teacher %s", review.pk, teacher.pk)
    return ok(services.review_row(review), status=201, message="Performance review created successfully")
