from django.urls import path
from . import views

app_name = "dashboard"

urlpatterns = [
    path("dashboard/", views.index, name="index"),
    path("dashboard/children/<int:student_id>/", views.child, name="child"),
    path("manage/", views.admin_overview, name="admin_overview"),
    path("manage/students/", views.manage_students, name="students"),
    path("manage/results/", views.manage_results, name="results"),
    path("manage/finance/", views.manage_finance, name="finance"),
    path("manage/admissions/", views.manage_admissions, name="admissions"),
]
