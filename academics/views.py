import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Count, Q

from accounts.models import User
from reporting.api import fail, first_error, generation, json_endpoint, ok
from reporting.query import exact_filters, page_params, paginate, search_q
from . import services
from .models import Exam, SchoolClass, Subject
from .serializers import (
    ExamResultSerializer,
    ExamSerializer,
    SchoolClassSerializer,
    SubjectSerializer,
)

logger = logging.getLogger(__name__)

ADMIN = ("ADMIN",)
STAFF = ("ADMIN", "TEACHER")


def _teacher_or_error(teacher_id):
    """(teacher, error response) for an optional teacher id."""
    if teacher_id is None:
        return None, None
    teacher = User.objects.filter(pk=teacher_id).first()
    if teacher is None:
        return None, fail("Teacher not found", 404)
    if teacher.role != User.TEACHER:
        return None, fail("Selected user is not a teacher", 400)
    return teacher, None


def _validation_message(exc: ValidationError) -> str:
    if hasattr(exc, "message_dict"):
        for messages in exc.message_dict.values():
            return messages[0]
    return exc.messages[0]


# Classes

@json_endpoint(methods=("GET", "POST"), roles=ADMIN)
def classes(request):
    if request.method == "GET":
        qs = services.classes_with_counts()
        grade = request.GET.get("grade")
        if grade:
            qs = qs.filter(grade=grade)
        return ok([services.class_row(c) for c in qs], generation=generation(request))

    serializer = SchoolClassSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    teacher, error = _teacher_or_error(data.get("teacherId"))
    if error:
        return error
    if SchoolClass.objects.filter(grade=data["grade"], section=data["section"]).exists():
        return fail("A class with this grade and section already exists", 409)
    try:
        with transaction.atomic():
            school_class = SchoolClass.objects.create(
                name=data["name"],
                grade=data["grade"],
                section=data["section"],
                capacity=data["capacity"],
                teacher=teacher,
            )
            if data.get("subjectIds"):
                school_class.subjects.set(Subject.objects.filter(pk__in=data["subjectIds"]))
    except IntegrityError:
        logger.warning("Duplicate class %s%s", data["grade"], data["section"])
        return fail("A class with this grade and section already exists", 409)
    return ok(services.class_row(school_class, 0), status=201, message="Class created successfully")


@json_endpoint(methods=("GET", "PUT", "DELETE"), roles=ADMIN)
def class_detail(request, pk: int):
    school_class = SchoolClass.objects.select_related("teacher").filter(pk=pk).first()
    if school_class is None:
        return fail("Class not found", 404)

    if request.method == "GET":
        return ok(services.class_detail(school_class))

    if request.method == "DELETE":
        enrolled = school_class.students.count()
        if enrolled:
            return fail(
                f"Cannot delete class with {enrolled} enrolled students. Reassign them first.", 400
            )
        school_class.delete()
        return ok(message="Class deleted successfully")

    serializer = SchoolClassSerializer(data=request.payload, partial=True)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    if "teacherId" in data:
        teacher, error = _teacher_or_error(data["teacherId"])
        if error:
            return error
        school_class.teacher = teacher
    for field in ("name", "grade", "section", "capacity"):
        if field in data:
            setattr(school_class, field, data[field])
    clash = SchoolClass.objects.filter(
        grade=school_class.grade, section=school_class.section
    ).exclude(pk=school_class.pk)
    if clash.exists():
        return fail("A class with this grade and section already exists", 409)
    if school_class.capacity < school_class.students.count():
        return fail("Capacity cannot be lower than the number of enrolled students")
    school_class.save()
    if "subjectIds" in data:
        school_class.subjects.set(Subject.objects.filter(pk__in=data["subjectIds"]))
    return ok(services.class_row(school_class), message="Class updated successfully")


@json_endpoint(methods=("POST",), roles=ADMIN)
def class_students(request, pk: int):
    school_class = SchoolClass.objects.filter(pk=pk).first()
    if school_class is None:
        return fail("Class not found", 404)
    ids = request.payload.get("studentIds")
    if not isinstance(ids, list) or not ids:
        return fail("studentIds is required")
    students = User.objects.filter(pk__in=ids, role=User.STUDENT)
    if students.count() != len(set(ids)):
        return fail("One or more students not found", 400)
    already = school_class.students.filter(pk__in=ids).count()
    if school_class.students.count() - already + len(set(ids)) > school_class.capacity:
        return fail("Class capacity would be exceeded", 400)
    updated = students.update(school_class=school_class)
    return ok({"assigned": updated}, message=f"{updated} students assigned to {school_class}")


@json_endpoint(methods=("DELETE",), roles=ADMIN)
def class_student_remove(request, pk: int, student_id: int):
    student = User.objects.filter(pk=student_id, role=User.STUDENT, school_class_id=pk).first()
    if student is None:
        return fail("Student not found in this class", 404)
    student.school_class = None
    student.save(update_fields=["school_class"])
    return ok(message="Student removed from class")


@json_endpoint(methods=("PUT",), roles=ADMIN)
def class_teacher(request, pk: int):
    school_class = SchoolClass.objects.filter(pk=pk).first()
    if school_class is None:
        return fail("Class not found", 404)
    teacher, error = _teacher_or_error(request.payload.get("teacherId"))
    if error:
        return error
    school_class.teacher = teacher
    school_class.save(update_fields=["teacher"])
    message = "Teacher assigned successfully" if teacher else "Teacher removed from class"
    return ok(services.class_row(school_class), message=message)


# Subjects

def _subject_row(subject):
    return {
        "id": subject.pk,
        "name": subject.name,
        "code": subject.code,
        "description": subject.description,
        "credits": subject.credits,
        "classCount": getattr(subject, "class_count", None),
        "teachers": [{"id": t.pk, "name": t.display_name} for t in subject.teachers.all()],
    }


@json_endpoint(methods=("GET", "POST"), roles=ADMIN)
def subjects(request):
    if request.method == "GET":
        qs = Subject.objects.prefetch_related("teachers").annotate(
            class_count=Count("classes", distinct=True)
        )
        qs = qs.filter(search_q(request.GET.get("search"), ["name", "code"]))
        return ok([_subject_row(s) for s in qs], generation=generation(request))

    serializer = SubjectSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    if Subject.objects.filter(Q(name__iexact=data["name"]) | Q(code=data["code"])).exists():
        return fail("A subject with this name or code already exists", 409)
    try:
        subject = Subject.objects.create(
            name=data["name"],
            code=data["code"],
            description=data["description"],
            credits=data["credits"],
        )
    except IntegrityError:
        return fail("A subject with this name or code already exists", 409)
    if data.get("teacherIds"):
        subject.teachers.set(User.objects.teachers().filter(pk__in=data["teacherIds"]))
    return ok(_subject_row(subject), status=201, message="Subject created successfully")


@json_endpoint(methods=("PUT", "DELETE"), roles=ADMIN)
def subject_detail(request, pk: int):
    subject = Subject.objects.filter(pk=pk).first()
    if subject is None:
        return fail("Subject not found", 404)
    if request.method == "DELETE":
        if subject.exams.exists():
            return fail("Cannot delete a subject that has exams", 400)
        subject.delete()
        return ok(message="Subject deleted successfully")

    serializer = SubjectSerializer(data=request.payload, partial=True)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    clash = Q()
    if "name" in data:
        clash |= Q(name__iexact=data["name"])
    if "code" in data:
        clash |= Q(code=data["code"])
    if clash and Subject.objects.filter(clash).exclude(pk=pk).exists():
        return fail("A subject with this name or code already exists", 409)
    for field in ("name", "code", "description", "credits"):
        if field in data:
            setattr(subject, field, data[field])
    subject.save()
    if "teacherIds" in data:
        subject.teachers.set(User.objects.teachers().filter(pk__in=data["teacherIds"]))
    return ok(_subject_row(subject), message="Subject updated successfully")


# Exams

@json_endpoint(methods=("GET", "POST"), roles=ADMIN)
def exams(request):
    if request.method == "GET":
        qs = Exam.objects.select_related("school_class", "subject")
        qs = qs.filter(
            exact_filters(request.GET, {"classId": "school_class_id", "subjectId": "subject_id", "type": "exam_type"})
        )
        qs = qs.filter(search_q(request.GET.get("search"), ["title", "subject__name"]))
        page, limit = page_params(request)
        result = paginate(qs, page, limit)
        return ok(
            {
                "exams": [services.exam_row(e) for e in result.items],
                "pagination": result.pagination(),
            },
            generation=generation(request),
        )

    serializer = ExamSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    school_class = SchoolClass.objects.filter(pk=data["classId"]).first()
    if school_class is None:
        return fail("Class not found", 404)
    subject = Subject.objects.filter(pk=data["subjectId"]).first()
    if subject is None:
        return fail("Subject not found", 404)
    exam = Exam.objects.create(
        title=data["title"],
        description=data["description"],
        exam_type=data["type"],
        school_class=school_class,
        subject=subject,
        date=data["date"],
        duration=data["duration"],
        total_marks=data["totalMarks"],
        pass_marks=data["passMarks"],
    )
    return ok(services.exam_row(exam), status=201, message="Exam created successfully")


@json_endpoint(methods=("PUT", "DELETE"), roles=ADMIN)
def exam_detail(request, pk: int):
    exam = Exam.objects.select_related("school_class", "subject").filter(pk=pk).first()
    if exam is None:
        return fail("Exam not found", 404)
    if request.method == "DELETE":
        exam.delete()
        return ok(message="Exam deleted successfully")

    serializer = ExamSerializer(instance=exam, data=request.payload, partial=True)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    if "totalMarks" in data:
        top = max((r.marks_obtained for r in exam.results.all()), default=None)
        if top is not None and top > data["totalMarks"]:
            return fail("Total marks cannot be lower than an existing result", 400)
    mapping = {
        "title": "title",
        "description": "description",
        "type": "exam_type",
        "date": "date",
        "duration": "duration",
        "totalMarks": "total_marks",
        "passMarks": "pass_marks",
        "classId": "school_class_id",
        "subjectId": "subject_id",
    }
    if "classId" in data and not SchoolClass.objects.filter(pk=data["classId"]).exists():
        return fail("Class not found", 404)
    if "subjectId" in data and not Subject.objects.filter(pk=data["subjectId"]).exists():
        return fail("Subject not found", 404)
    for key, attr in mapping.items():
        if key in data:
            setattr(exam, attr, data[key])
    exam.save()
    exam.refresh_from_db()
    return ok(services.exam_row(exam), message="Exam updated successfully")


@json_endpoint(methods=("GET", "POST"), roles=STAFF)
def exam_results(request, pk: int):
    exam = Exam.objects.select_related("school_class", "subject").filter(pk=pk).first()
    if exam is None:
        return fail("Exam not found", 404)

    if request.method == "GET":
        results = list(exam.results.select_related("student").order_by("student__name"))
        return ok(
            {
                "exam": services.exam_row(exam),
                "results": [services.result_row(r) for r in results],
                "stats": services.result_stats(exam, results),
            }
        )

    rows = request.payload.get("results")
    if rows is None:
        rows = [request.payload]
    if not isinstance(rows, list) or not rows:
        return fail("results is required")
    serializer = ExamResultSerializer(data=rows, many=True)
    if not serializer.is_valid():
        errors = next((e for e in serializer.errors if e), {})
        return fail(first_error(errors))
    rows = serializer.validated_data
    students = {
        s.pk: s
        for s in User.objects.students().filter(pk__in=[r["studentId"] for r in rows])
    }
    try:
        saved = services.record_results(exam, rows, students)
    except ValidationError as exc:
        return fail(_validation_message(exc))
    return ok(
        {"results": [services.result_row(r) for r in saved], "stats": services.result_stats(exam)},
        message=f"{len(saved)} results recorded",
    )
