from django.urls import path
from . import views

app_name = "financials"

urlpatterns = [
    path("payments/", views.payments, name="payments"),
    path("payments/<int:pk>/status/", views.payment_status, name="payment_status"),
    path("expenses/", views.expenses, name="expenses"),
    path("expenses/<int:pk>/", views.expense_detail, name="expense_detail"),
    path("finance/reports/", views.reports, name="reports"),
]
