import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Fee",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("fee_type", models.CharField(choices=[("TUITION", "TUITION"), ("LIBRARY", "LIBRARY"), ("SPORTS", "SPORTS"), ("EXAMINATION", "EXAMINATION"), ("TRANSPORT", "TRANSPORT"), ("UNIFORM", "UNIFORM"), ("OTHER", "OTHER")], max_length=16)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ("description", models.TextField(blank=True)),
                ("due_date", models.DateField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="FeePayment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount_paid", models.DecimalField(decimal_places=2, max_digits=10)),
                ("payment_date", models.DateTimeField(blank=True, null=True)),
                ("payment_method", models.CharField(blank=True, choices=[("CASH", "CASH"), ("CARD", "CARD"), ("BANK_TRANSFER", "BANK_TRANSFER"), ("CHEQUE", "CHEQUE"), ("ONLINE", "ONLINE")], max_length=16)),
                ("status", models.CharField(choices=[("PENDING", "PENDING"), ("PAID", "PAID"), ("OVERDUE", "OVERDUE"), ("CANCELLED", "CANCELLED")], default="PENDING", max_length=16)),
                ("transaction_id", models.CharField(blank=True, max_length=64)),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("fee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="payments", to="financials.fee")),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="fee_payments", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "unique_together": {("fee", "student")},
            },
        ),
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("category", models.CharField(choices=[("SALARIES", "SALARIES"), ("INFRASTRUCTURE", "INFRASTRUCTURE"), ("UTILITIES", "UTILITIES"), ("SUPPLIES", "SUPPLIES"), ("MARKETING", "MARKETING"), ("MAINTENANCE", "MAINTENANCE"), ("TRANSPORT", "TRANSPORT"), ("INSURANCE", "INSURANCE"), ("TECHNOLOGY", "TECHNOLOGY"), ("OTHER", "OTHER")], max_length=16)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("status", models.CharField(choices=[("PENDING", "PENDING"), ("APPROVED", "APPROVED"), ("PAID", "PAID"), ("REJECTED", "REJECTED")], default="PENDING", max_length=16)),
                ("payment_date", models.DateTimeField(blank=True, null=True)),
                ("payment_method", models.CharField(blank=True, max_length=32)),
                ("vendor_name", models.CharField(blank=True, max_length=200)),
                ("vendor_contact", models.CharField(blank=True, max_length=200)),
                ("invoice_number", models.CharField(blank=True, max_length=64)),
                ("fiscal_year", models.PositiveIntegerField()),
                ("fiscal_month", models.PositiveSmallIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="expense_amount_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PayrollRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("pay_period", models.CharField(max_length=32)),
                ("pay_year", models.PositiveIntegerField()),
                ("pay_month", models.PositiveSmallIntegerField()),
                ("base_salary", models.DecimalField(decimal_places=2, max_digits=10)),
                ("allowances", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("overtime", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("bonus", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("gross_salary", models.DecimalField(decimal_places=2, max_digits=10)),
                ("tax_deducted", models.DecimalField(decimal_places=2, max_digits=10)),
                ("insurance", models.DecimalField(decimal_places=2, max_digits=10)),
                ("provident_fund", models.DecimalField(decimal_places=2, max_digits=10)),
                ("other_deductions", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("total_deductions", models.DecimalField(decimal_places=2, max_digits=10)),
                ("net_salary", models.DecimalField(decimal_places=2, max_digits=10)),
                ("status", models.CharField(choices=[("PENDING", "PENDING"), ("PROCESSED", "PROCESSED"), ("PAID", "PAID"), ("CANCELLED", "CANCELLED")], default="PENDING", max_length=16)),
                ("payment_date", models.DateTimeField(blank=True, null=True)),
                ("working_days", models.PositiveSmallIntegerField(default=30)),
                ("actual_days", models.PositiveSmallIntegerField(default=30)),
                ("bank_account", models.CharField(blank=True, max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("employee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="payroll_records", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-pay_year", "-pay_month"],
                "unique_together": {("employee", "pay_year", "pay_month")},
            },
        ),
    ]
