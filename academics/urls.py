from django.urls import path
from . import views

app_name = "academics"

urlpatterns = [
    path("classes/", views.classes, name="classes"),
    path("classes/<int:pk>/", views.class_detail, name="class_detail"),
    path("classes/<int:pk>/students/", views.class_students, name="class_students"),
    path("classes/<int:pk>/students/<int:student_id>/", views.class_student_remove, name="class_student_remove"),
    path("classes/<int:pk>/teacher/", views.class_teacher, name="class_teacher"),
    path("subjects/", views.subjects, name="subjects"),
    path("subjects/<int:pk>/", views.subject_detail, name="subject_detail"),
    path("exams/", views.exams, name="exams"),
    path("exams/<int:pk>/", views.exam_detail, name="exam_detail"),
    path("exams/<int:pk>/results/", views.exam_results, name="exam_results"),
]
