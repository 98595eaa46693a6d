from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q


class Fee(models.Model):
    TYPE_CHOICES = [
        ("TUITION","TUITION"),
        ("LIBRARY","LIBRARY"),
        ("SPORTS","SPORTS"),
        ("EXAMINATION","EXAMINATION"),
        ("TRANSPORT","TRANSPORT"),
        ("UNIFORM","UNIFORM"),
        ("OTHER","OTHER"),
    ]
    title = models.CharField(max_length=200)
    fee_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    description = models.TextField(blank=True)
    due_date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.title


class FeePayment(models.Model):
    STATUS_CHOICES = [
        ("PENDING","PENDING"),
        ("PAID","PAID"),
        ("OVERDUE","OVERDUE"),
        ("CANCELLED","CANCELLED"),
    ]
    METHOD_CHOICES = [
        ("CASH","CASH"),
        ("CARD","CARD"),
        ("BANK_TRANSFER","BANK_TRANSFER"),
        ("CHEQUE","CHEQUE"),
        ("ONLINE","ONLINE"),
    ]
    fee = models.ForeignKey(Fee, related_name="payments", on_delete=models.CASCADE)
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="fee_payments", on_delete=models.CASCADE
    )
    amount_paid = models.DecimalField(max_digits=10, decimal_places=2)
    payment_date = models.DateTimeField(null=True, blank=True)
    payment_method = models.CharField(max_length=16, choices=METHOD_CHOICES, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default="PENDING")
    transaction_id = models.CharField(max_length=64, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = [("fee", "student")]
        ordering = ["-created_at"]


class Expense(models.Model):
    CATEGORY_CHOICES = [
        ("SALARIES","SALARIES"),
        ("INFRASTRUCTURE","INFRASTRUCTURE"),
        ("UTILITIES","UTILITIES"),
        ("SUPPLIES","SUPPLIES"),
        ("MARKETING","MARKETING"),
        ("MAINTENANCE","MAINTENANCE"),
        ("TRANSPORT","TRANSPORT"),
        ("INSURANCE","INSURANCE"),
        ("TECHNOLOGY","TECHNOLOGY"),
        ("OTHER","OTHER"),
    ]
    STATUS_CHOICES = [
        ("PENDING","PENDING"),
        ("APPROVED","APPROVED"),
        ("PAID","PAID"),
        ("REJECTED","REJECTED"),
    ]
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=16, choices=CATEGORY_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default="PENDING")
    payment_date = models.DateTimeField(null=True, blank=True)
    payment_method = models.CharField(max_length=32, blank=True)
    vendor_name = models.CharField(max_length=200, blank=True)
    vendor_contact = models.CharField(max_length=200, blank=True)
    invoice_number = models.CharField(max_length=64, blank=True)
    fiscal_year = models.PositiveIntegerField()
    fiscal_month = models.PositiveSmallIntegerField()
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(condition=Q(amount__gt=0), name="expense_amount_positive"),
        ]


class PayrollRecord(models.Model):
    STATUS_CHOICES = [
        ("PENDING","PENDING"),
        ("PROCESSED","PROCESSED"),
        ("PAID","PAID"),
        ("CANCELLED","CANCELLED"),
    ]
    employee = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="payroll_records", on_delete=models.CASCADE
    )
    pay_period = models.CharField(max_length=32)
    pay_year = models.PositiveIntegerField()
    pay_month = models.PositiveSmallIntegerField()
    base_salary = models.DecimalField(max_digits=10, decimal_places=2)
    allowances = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    overtime = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    bonus = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    gross_salary = models.DecimalField(max_digits=10, decimal_places=2)
    tax_deducted = models.DecimalField(max_digits=10, decimal_places=2)
    insurance = models.DecimalField(max_digits=10, decimal_places=2)
    provident_fund = models.DecimalField(max_digits=10, decimal_places=2)
    other_deductions = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total_deductions = models.DecimalField(max_digits=10, decimal_places=2)
    net_salary = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default="PENDING")
    payment_date = models.DateTimeField(null=True, blank=True)
    working_days = models.PositiveSmallIntegerField(default=30)
    actual_days = models.PositiveSmallIntegerField(default=30)
    bank_account = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [("employee", "pay_year", "pay_month")]
        ordering = ["-pay_year", "-pay_month"]
