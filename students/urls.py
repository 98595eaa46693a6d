from django.urls import path
from . import views

app_name = "students"

urlpatterns = [
    path("", views.students, name="list"),
    path("performance/", views.performance, name="performance"),
    path("<int:pk>/", views.student_detail, name="detail"),
    path("<int:pk>/behavior/", views.behavior, name="behavior"),
]
