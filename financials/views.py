import logging

from django.db import IntegrityError
from django.utils import timezone

from accounts.models import User
from reporting.api import fail, first_error, generation, json_endpoint, ok
from reporting.presenters import category_color, money, style_for
from reporting.query import exact_filters, page_params, paginate, search_q
from . import payroll as payroll_service
from .models import Expense, Fee, FeePayment, PayrollRecord
from .reports import finance_report
from .serializers import (
    ExpenseSerializer,
    PaymentSerializer,
    PaymentStatusSerializer,
    PayrollRequestSerializer,
)

logger = logging.getLogger(__name__)

ADMIN = ("ADMIN",)


def _iso(value):
    return value.isoformat() if value else None


def payment_row(payment: FeePayment):
    return {
        "id": payment.pk,
        "fee": {
            "id": payment.fee_id,
            "title": payment.fee.title,
            "type": payment.fee.fee_type,
            "amount": money(payment.fee.amount),
            "dueDate": _iso(payment.fee.due_date),
        },
        "student": {
            "id": payment.student_id,
            "name": payment.student.display_name,
            "studentNumber": payment.student.student_number,
        },
        "amountPaid": money(payment.amount_paid),
        "paymentDate": _iso(payment.payment_date),
        "paymentMethod": payment.payment_method or None,
        "status": payment.status,
        "statusStyle": style_for(payment.status),
        "transactionId": payment.transaction_id,
        "notes": payment.notes,
    }


def expense_row(expense: Expense):
    return {
        "id": expense.pk,
        "title": expense.title,
        "description": expense.description,
        "category": expense.category,
        "color": category_color(expense.category),
        "amount": money(expense.amount),
        "status": expense.status,
        "vendorName": expense.vendor_name,
        "invoiceNumber": expense.invoice_number,
        "paymentDate": _iso(expense.payment_date),
        "fiscalYear": expense.fiscal_year,
        "fiscalMonth": expense.fiscal_month,
        "createdAt": _iso(expense.created_at),
    }


def payroll_row(record: PayrollRecord):
    return {
        "id": record.pk,
        "employee": {
            "id": record.employee_id,
            "name": record.employee.display_name,
            "email": record.employee.email,
        },
        "payPeriod": record.pay_period,
        "payYear": record.pay_year,
        "payMonth": record.pay_month,
        "baseSalary": money(record.base_salary),
        "allowances": money(record.allowances),
        "overtime": money(record.overtime),
        "bonus": money(record.bonus),
        "grossSalary": money(record.gross_salary),
        "taxDeducted": money(record.tax_deducted),
        "insurance": money(record.insurance),
        "providentFund": money(record.provident_fund),
        "totalDeductions": money(record.total_deductions),
        "netSalary": money(record.net_salary),
        "status": record.status,
        "paymentDate": _iso(record.payment_date),
    }


# Payments

@json_endpoint(methods=("GET", "POST"), roles=ADMIN)
def payments(request):
    if request.method == "GET":
        qs = FeePayment.objects.select_related("fee", "student").order_by("-created_at", "-id")
        qs = qs.filter(
            exact_filters(
                request.GET,
                {"status": "status", "studentId": "student_id", "feeId": "fee_id"},
            )
        )
        qs = qs.filter(search_q(request.GET.get("search"), ["student__name", "student__student_number", "fee__title"]))
        page, limit = page_params(request)
        result = paginate(qs, page, limit)
        return ok(
            {
                "payments": [payment_row(p) for p in result.items],
                "pagination": result.pagination(),
            },
            generation=generation(request),
        )

    serializer = PaymentSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    fee = Fee.objects.filter(pk=data["feeId"]).first()
    if fee is None:
        return fail("Fee not found", 404)
    student = User.objects.students().filter(pk=data["studentId"]).first()
    if student is None:
        return fail("Student not found", 404)
    if FeePayment.objects.filter(fee=fee, student=student).exists():
        return fail("A payment for this fee and student already exists", 409)
    method = data["paymentMethod"]
    try:
        payment = FeePayment.objects.create(
            fee=fee,
            student=student,
            amount_paid=data["amountPaid"],
            payment_method=method,
            status="PAID" if method else "PENDING",
            payment_date=timezone.now() if method else None,
            transaction_id=data["transactionId"],
            notes=data["notes"],
        )
    except IntegrityError:
        logger.warning("Duplicate payment for fee %s student %s", fee.pk, student.pk)
        return fail("A payment for this fee and student already exists", 409)
    return ok(payment_row(payment), status=201, message="Payment recorded successfully")


@json_endpoint(methods=("PUT",), roles=ADMIN)
def payment_status(request, pk: int):
    payment = FeePayment.objects.select_related("fee", "student").filter(pk=pk).first()
    if payment is None:
        return fail("Payment not found", 404)
    serializer = PaymentStatusSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    status = serializer.validated_data["status"]
    payment.status = status
    if status == "PAID" and payment.payment_date is None:
        payment.payment_date = timezone.now()
    payment.save(update_fields=["status", "payment_date", "updated_at"])
    return ok(payment_row(payment), message="Payment status updated successfully")


# Expenses

@json_endpoint(methods=("GET", "POST"), roles=ADMIN)
def expenses(request):
    if request.method == "GET":
        qs = Expense.objects.order_by("-created_at", "-id")
        qs = qs.filter(
            exact_filters(
                request.GET,
                {
                    "category": "category",
                    "status": "status",
                    "year": "fiscal_year",
                    "month": "fiscal_month",
                },
            )
        )
        qs = qs.filter(search_q(request.GET.get("search"), ["title", "vendor_name", "invoice_number"]))
        page, limit = page_params(request)
        result = paginate(qs, page, limit)
        return ok(
            {
                "expenses": [expense_row(e) for e in result.items],
                "pagination": result.pagination(),
            },
            generation=generation(request),
        )

    serializer = ExpenseSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    today = timezone.localdate()
    expense = Expense.objects.create(
        title=data["title"],
        description=data["description"],
        category=data["category"],
        amount=data["amount"],
        status="PENDING",
        vendor_name=data["vendorName"],
        vendor_contact=data["vendorContact"],
        invoice_number=data["invoiceNumber"],
        payment_method=data["paymentMethod"],
        fiscal_year=data.get("fiscalYear") or today.year,
        fiscal_month=data.get("fiscalMonth") or today.month,
        created_by=request.user,
    )
    return ok(expense_row(expense), status=201, message="Expense created successfully")


@json_endpoint(methods=("PUT", "DELETE"), roles=ADMIN)
def expense_detail(request, pk: int):
    expense = Expense.objects.filter(pk=pk).first()
    if expense is None:
        return fail("Expense not found", 404)

    if request.method == "DELETE":
        expense.delete()
        return ok(message="Expense deleted successfully")

    serializer = ExpenseSerializer(data=request.payload, partial=True)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    mapping = {
        "title": "title",
        "description": "description",
        "category": "category",
        "amount": "amount",
        "status": "status",
        "vendorName": "vendor_name",
        "vendorContact": "vendor_contact",
        "invoiceNumber": "invoice_number",
        "paymentMethod": "payment_method",
        "fiscalYear": "fiscal_year",
        "fiscalMonth": "fiscal_month",
    }
    for key, attr in mapping.items():
        if key in request.payload and key in data:
            setattr(expense, attr, data[key])
    if expense.status == "PAID" and expense.payment_date is None:
        expense.payment_date = timezone.now()
    expense.save()
    return ok(expense_row(expense), message="Expense updated successfully")


# Payroll

@json_endpoint(methods=("GET", "POST"), roles=ADMIN)
def payroll(request):
    if request.method == "GET":
        qs = PayrollRecord.objects.select_related("employee").order_by("-pay_year", "-pay_month", "employee__name")
        qs = qs.filter(
            exact_filters(request.GET, {"month": "pay_month", "year": "pay_year", "status": "status"})
        )
        page, limit = page_params(request)
        result = paginate(qs, page, limit)
        records = list(result.items)
        return ok(
            {
                "payroll": [payroll_row(r) for r in records],
                "pagination": result.pagination(),
            },
            generation=generation(request),
        )

    serializer = PayrollRequestSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    overtime = {}
    for key, amount in (data.get("overtime") or {}).items():
        try:
            overtime[int(key)] = amount
        except ValueError:
            return fail("overtime: keys must be teacher ids")
    summary = payroll_service.generate_payroll(data["month"], data["year"], overtime)
    created = summary["created"]
    return ok(
        {
            "records": [payroll_row(r) for r in created],
            "created": len(created),
            "skipped": summary["skipped"],
        },
        status=201 if created else 200,
        message=f"Generated payroll for {len(created)} teachers",
    )


# Reports

@json_endpoint(methods=("GET",), roles=ADMIN)
def reports(request):
    year = request.GET.get("year")
    try:
        year = int(year) if year else timezone.localdate().year
    except ValueError:
        return fail("year must be a number")
    return ok(finance_report(year))
