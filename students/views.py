import logging

from django.db import IntegrityError

from academics.models import SchoolClass
from accounts.models import User
from reporting.api import fail, first_error, generation, json_endpoint, ok
from reporting.query import Page, exact_filters, page_params, paginate, search_q
from . import services
from .models import BehaviorRecord
from .serializers import BehaviorSerializer, StudentSerializer

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ["name", "email", "student_number"]


def _filtered_students(request):
    qs = User.objects.students().select_related("school_class").order_by("name", "email")
    qs = qs.filter(search_q(request.GET.get("search"), SEARCH_FIELDS))
    return qs.filter(exact_filters(request.GET, {"classId": "school_class_id"}))


@json_endpoint(methods=("GET", "POST"), roles={"GET": ("ADMIN", "TEACHER"), "POST": ("ADMIN",)})
def students(request):
    if request.method == "GET":
        page, limit = page_params(request)
        result = paginate(_filtered_students(request), page, limit)
        return ok(
            {
                "students": [services.student_row(s) for s in result.items],
                "pagination": result.pagination(),
            },
            generation=generation(request),
        )

    rows = request.payload.get("students")
    if rows is not None:
        if not isinstance(rows, list) or not rows:
            return fail("students must be a non-empty list")
        summary = services.bulk_import(rows)
        message = (
            f"Processed {summary['processed']} rows: {len(summary['created'])} created, "
            f"{len(summary['skipped'])} skipped, {len(summary['errors'])} errors"
        )
        return ok(summary, message=message)

    serializer = StudentSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    if services.duplicate_exists(data["email"], data["studentNumber"]):
        return fail("A user with this email or student number already exists", 409)
    if data.get("classId") is not None and not SchoolClass.objects.filter(pk=data["classId"]).exists():
        return fail("Class not found", 404)
    try:
        student = services.create_student(data)
    except IntegrityError:
        logger.warning("Duplicate student insert for %s", data["email"])
        return fail("A user with this email or student number already exists", 409)
    return ok(services.student_row(student), status=201, message="Student created successfully")


@json_endpoint(methods=("GET", "PUT", "DELETE"), roles=("ADMIN",))
def student_detail(request, pk: int):
    student = User.objects.students().select_related("school_class").filter(pk=pk).first()
    if student is None:
        return fail("Student not found", 404)

    if request.method == "GET":
        data = services.student_row(student)
        data["performance"] = services.performance_for([student])[0]
        return ok(data)

    if request.method == "DELETE":
        student.delete()
        return ok(message="Student deleted successfully")

    serializer = StudentSerializer(data=request.payload, partial=True)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    email = data.get("email", student.email)
    number = data.get("studentNumber", student.student_number)
    if services.duplicate_exists(email, number, exclude_pk=student.pk):
        return fail("A user with this email or student number already exists", 409)
    if data.get("classId") is not None and not SchoolClass.objects.filter(pk=data["classId"]).exists():
        return fail("Class not found", 404)
    mapping = {
        "name": "name",
        "email": "email",
        "studentNumber": "student_number",
        "grade": "grade_level",
        "classId": "school_class_id",
        "phone": "phone",
        "address": "address",
        "dateOfBirth": "date_of_birth",
        "gender": "gender",
        "parentName": "parent_name",
        "parentEmail": "parent_email",
        "parentPhone": "parent_phone",
    }
    for key, attr in mapping.items():
        if key in data:
            setattr(student, attr, data[key])
    try:
        student.save()
    except IntegrityError:
        return fail("A user with this email or student number already exists", 409)
    student.refresh_from_db()
    return ok(services.student_row(student), message="Student updated successfully")


@json_endpoint(methods=("GET",), roles=("ADMIN", "TEACHER"))
def performance(request):
    qs = _filtered_students(request)
    rows = services.performance_for(list(qs))
    status = request.GET.get("status")
    if status and status != "all":
        rows = [row for row in rows if row["status"] == status]
    page, limit = page_params(request)
    offset = (page - 1) * limit
    result = Page(items=rows[offset:offset + limit], total=len(rows), page=page, limit=limit)
    return ok(
        {
            "students": result.items,
            "summary": services.performance_summary(rows),
            "pagination": result.pagination(),
        },
        generation=generation(request),
    )


@json_endpoint(methods=("POST",), roles=("ADMIN", "TEACHER"))
def behavior(request, pk: int):
    student = User.objects.students().filter(pk=pk).first()
    if student is None:
        return fail("Student not found", 404)
    serializer = BehaviorSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    record = BehaviorRecord.objects.create(
        student=student,
        record_type=serializer.validated_data["type"],
        description=serializer.validated_data["description"],
        reported_by=request.user,
    )
    return ok({"id": record.pk, "type": record.record_type}, status=201, message="Behaviour recorded")
