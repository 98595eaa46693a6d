import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, Q

from academics.models import SchoolClass
from accounts.models import User
from reporting.api import fail, first_error, generation, json_endpoint, ok
from reporting.metrics import attendance_rate
from reporting.query import exact_filters, page_params, paginate
from .models import AttendanceRecord, AttendanceSession
from .serializers import SessionSerializer

logger = logging.getLogger(__name__)


def session_row(session: AttendanceSession):
    total = getattr(session, "total", None)
    present = getattr(session, "present", None)
    if total is None:
        total = session.records.count()
        present = session.records.filter(status="PRESENT").count()
    return {
        "id": session.pk,
        "class": {"id": session.school_class_id, "name": str(session.school_class)},
        "date": session.date.isoformat(),
        "takenBy": session.taken_by.display_name if session.taken_by else None,
        "totalRecords": total,
        "present": present,
        "attendanceRate": attendance_rate(present, total),
    }


@json_endpoint(methods=("GET", "POST"), roles=("ADMIN", "TEACHER"))
def sessions(request):
    if request.method == "GET":
        qs = (
            AttendanceSession.objects.select_related("school_class", "taken_by")
            .annotate(total=Count("records"), present=Count("records", filter=Q(records__status="PRESENT")))
            .order_by("-date", "-id")
        )
        qs = qs.filter(exact_filters(request.GET, {"classId": "school_class_id", "date": "date"}))
        page, limit = page_params(request)
        result = paginate(qs, page, limit)
        return ok(
            {
                "sessions": [session_row(s) for s in result.items],
                "pagination": result.pagination(),
            },
            generation=generation(request),
        )

    serializer = SessionSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    school_class = SchoolClass.objects.filter(pk=data["classId"]).first()
    if school_class is None:
        return fail("Class not found", 404)
    if AttendanceSession.objects.filter(school_class=school_class, date=data["date"]).exists():
        return fail("Attendance has already been taken for this class on this date", 409)
    ids = [r["studentId"] for r in data["records"]]
    found = set(User.objects.students().filter(pk__in=ids).values_list("id", flat=True))
    missing = [sid for sid in ids if sid not in found]
    if missing:
        return fail(f"Students not found: {', '.join(str(m) for m in missing)}", 400)
    try:
        with transaction.atomic():
            session = AttendanceSession.objects.create(
                school_class=school_class, date=data["date"], taken_by=request.user
            )
            AttendanceRecord.objects.bulk_create(
                [
                    AttendanceRecord(
                        session=session,
                        student_id=r["studentId"],
                        status=r["status"],
                        notes=r["notes"],
                    )
                    for r in data["records"]
                ]
            )
    except IntegrityError:
        logger.warning("Concurrent attendance for class %s on %s", school_class.pk, data["date"])
        return fail("Attendance has already been taken for this class on this date", 409)
    present = sum(1 for r in data["records"] if r["status"] == "PRESENT")
    return ok(
        {
            "id": session.pk,
            "classId": school_class.pk,
            "date": session.date.isoformat(),
            "totalRecords": len(data["records"]),
            "present": present,
            "attendanceRate": attendance_rate(present, len(data["records"])),
        },
        status=201,
        message=f"Attendance recorded: {present} of {len(data['records'])} present",
    )
