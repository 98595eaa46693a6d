from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("django-rq/", include("django_rq.urls")),
    path("webhooks/email/", include("anymail.urls")),
    path("accounts/", include("allauth.urls")),
    # JSON API
    path("api/admin/students/", include("students.urls")),
    path("api/admin/teachers/", include("staff.urls")),
    path("api/admin/", include("academics.urls")),
    path("api/admin/attendance/", include("attendance.urls")),
    path("api/admin/", include("financials.urls")),
    path("api/", include("admissions.urls")),
    path("api/admin/events/", include("content.api_urls")),
    # pages
    path("", include("dashboard.urls")),
    path("", include("content.urls")),
]
