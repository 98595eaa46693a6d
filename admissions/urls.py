from django.urls import path
from . import views

app_name = "admissions"

urlpatterns = [
    path("admissions/", views.admissions, name="public"),
    path("admin/admissions/", views.application_list, name="list"),
    path("admin/admissions/reports/", views.reports, name="reports"),
    path("admin/admissions/<str:application_id>/status/", views.application_status, name="status"),
    path(
        "admin/admissions/<str:application_id>/documents/<int:doc_id>/",
        views.document_review,
        name="document",
    ),
]
