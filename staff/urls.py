from django.urls import path

from financials import views as financial_views
from . import views

app_name = "staff"

urlpatterns = [
    path("", views.teachers, name="list"),
    path("performance/", views.performance, name="performance"),
    path("payroll/", financial_views.payroll, name="payroll"),
]
