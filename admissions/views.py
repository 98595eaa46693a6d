import logging

from django.db.models import Prefetch

from reporting.api import fail, first_error, generation, json_endpoint, ok
from reporting.query import exact_filters, page_params, paginate, search_q
from . import services
from .models import AdmissionApplication, ApplicationDocument
from .serializers import ApplicationSerializer, DocumentReviewSerializer, StatusSerializer

logger = logging.getLogger(__name__)

ADMIN = ("ADMIN",)
SEARCH_FIELDS = ["application_id", "student_first_name", "student_last_name", "parent_email"]


@json_endpoint(methods=("GET", "POST"))
def admissions(request):
    if request.method == "GET":
        application_id = (request.GET.get("applicationId") or "").strip()
        if not application_id:
            return fail("Application ID is required")
        application = AdmissionApplication.objects.filter(application_id=application_id).first()
        if application is None:
            return fail("Application not found", 404)
        return ok(services.track(application))

    serializer = ApplicationSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    application = services.submit_application(serializer.validated_data)
    return ok(
        {
            "applicationId": application.application_id,
            "studentName": application.student_name,
            "submittedDate": application.submitted_at.isoformat(),
            "status": services.status_text(application.status),
        },
        status=201,
        message="Application submitted successfully",
        applicationId=application.application_id,
    )


@json_endpoint(methods=("GET",), roles=ADMIN)
def application_list(request):
    qs = AdmissionApplication.objects.prefetch_related(
        Prefetch("documents", queryset=ApplicationDocument.objects.order_by("uploaded_at", "id"))
    ).order_by("-submitted_at")
    qs = qs.filter(exact_filters(request.GET, {"status": "status", "grade": "student_grade"}))
    qs = qs.filter(search_q(request.GET.get("search"), SEARCH_FIELDS))
    page, limit = page_params(request)
    result = paginate(qs, page, limit)
    return ok(
        {
            "applications": [services.application_row(a) for a in result.items],
            "pagination": result.pagination(),
        },
        generation=generation(request),
    )


@json_endpoint(methods=("PUT",), roles=ADMIN)
def application_status(request, application_id: str):
    application = AdmissionApplication.objects.filter(application_id=application_id).first()
    if application is None:
        return fail("Application not found", 404)
    serializer = StatusSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    changed = services.change_status(
        application, serializer.validated_data["status"], serializer.validated_data["note"]
    )
    message = "Application status updated" if changed else "Application already has this status"
    return ok(services.application_row(application), message=message, changed=changed)


@json_endpoint(methods=("PUT",), roles=ADMIN)
def document_review(request, application_id: str, doc_id: int):
    document = (
        ApplicationDocument.objects.select_related("application")
        .filter(pk=doc_id, application__application_id=application_id)
        .first()
    )
    if document is None:
        return fail("Document not found", 404)
    serializer = DocumentReviewSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    changed = services.review_document(document, serializer.validated_data["status"])
    return ok(
        {
            "id": document.pk,
            "type": document.document_type,
            "status": document.status,
            "reviewedAt": document.reviewed_at.isoformat() if document.reviewed_at else None,
        },
        message="Document status updated" if changed else "Document already has this status",
        changed=changed,
    )


@json_endpoint(methods=("GET",), roles=ADMIN)
def reports(request):
    period = request.GET.get("period") or "thisYear"
    if period not in services.PERIODS:
        return fail(f"period must be one of {', '.join(services.PERIODS)}")
    grade = request.GET.get("grade") or "all"
    return ok(services.admissions_report(period, grade))
