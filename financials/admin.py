from django.contrib import admin

from .models import Expense, Fee, FeePayment, PayrollRecord


@admin.register(Fee)
class FeeAdmin(admin.ModelAdmin):
    list_display = ("title", "fee_type", "amount", "due_date")
    list_filter = ("fee_type",)


@admin.register(FeePayment)
class FeePaymentAdmin(admin.ModelAdmin):
    list_display = ("fee", "student", "amount_paid", "status", "payment_date")
    list_filter = ("status", "payment_method")
    search_fields = ("student__name", "student__email", "transaction_id")


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ("title", "category", "amount", "status", "fiscal_year", "fiscal_month")
    list_filter = ("category", "status", "fiscal_year")


@admin.register(PayrollRecord)
class PayrollRecordAdmin(admin.ModelAdmin):
    list_display = ("employee", "pay_period", "gross_salary", "net_salary", "status")
    list_filter = ("status", "pay_year", "pay_month")
