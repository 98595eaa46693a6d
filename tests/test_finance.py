import datetime
from decimal import Decimal

import pytest
from django.utils import timezone

from accounts.models import User
from financials.models import Expense, Fee, FeePayment
from financials.reports import FEE_GROUPS, finance_report, revenue_group

pytestmark = pytest.mark.django_db

YEAR = 2025


def _paid_on(month, day=10):
    return timezone.make_aware(datetime.datetime(YEAR, month, day, 9, 0))


@pytest.fixture
def fees(db):
    return {
        "TUITION": Fee.objects.create(
            title="Tuition", fee_type="TUITION", amount=Decimal("1000.00"), due_date=datetime.date(YEAR, 3, 1)
        ),
        "LIBRARY": Fee.objects.create(
            title="Library", fee_type="LIBRARY", amount=Decimal("50.00"), due_date=datetime.date(YEAR, 3, 1)
        ),
        "UNIFORM": Fee.objects.create(
            title="Uniform", fee_type="UNIFORM", amount=Decimal("80.00"), due_date=datetime.date(YEAR, 4, 1)
        ),
    }


@pytest.fixture
def ledger(fees, student, make_user):
    other = make_user(User.STUDENT)
    FeePayment.objects.create(
        fee=fees["TUITION"], student=student, amount_paid=Decimal("1000.00"),
        status="PAID", payment_method="CARD", payment_date=_paid_on(1),
    )
    FeePayment.objects.create(
        fee=fees["LIBRARY"], student=student, amount_paid=Decimal("50.00"),
        status="PAID", payment_method="CASH", payment_date=_paid_on(1, 20),
    )
    FeePayment.objects.create(
        fee=fees["UNIFORM"], student=other, amount_paid=Decimal("80.00"),
        status="PAID", payment_method="CASH", payment_date=_paid_on(2),
    )
    FeePayment.objects.create(
        fee=fees["TUITION"], student=other, amount_paid=Decimal("1000.00"), status="PENDING",
    )
    Expense.objects.create(
        title="Books", category="SUPPLIES", amount=Decimal("300.00"), status="APPROVED",
        fiscal_year=YEAR, fiscal_month=1,
    )
    Expense.objects.create(
        title="Roof", category="MAINTENANCE", amount=Decimal("100.00"), status="PAID",
        fiscal_year=YEAR, fiscal_month=2,
    )
    Expense.objects.create(
        title="Draft", category="MARKETING", amount=Decimal("999.00"), status="PENDING",
        fiscal_year=YEAR, fiscal_month=2,
    )
    return student, other


def test_revenue_groups():
    assert revenue_group("TUITION") == "tuition"
    assert {revenue_group(t) for t in ("LIBRARY", "SPORTS", "EXAMINATION")} == {"fees"}
    assert revenue_group("UNIFORM") == "other"
    assert set(FEE_GROUPS.values()) == {"tuition", "fees"}


def test_empty_year_report_is_all_zero(db):
    report = finance_report(1999)
    assert report["summary"] == {
        "totalRevenue": 0.0,
        "totalExpenses": 0.0,
        "netProfit": 0.0,
        "profitMargin": 0,
        "paidPayments": 0,
    }
    assert len(report["monthlyRevenue"]) == 12
    assert all(row["total"] == 0.0 for row in report["monthlyRevenue"])
    assert report["expenseBreakdown"] == []
    assert report["classRevenue"] == []


def test_finance_report_for_a_year(ledger):
    student, _ = ledger
    report = finance_report(YEAR)
    summary = report["summary"]
    assert summary["totalRevenue"] == 1130.0
    assert summary["totalExpenses"] == 400.0
    assert summary["netProfit"] == 730.0
    assert summary["profitMargin"] == 64.6
    assert summary["paidPayments"] == 3

    january, february = report["monthlyRevenue"][0], report["monthlyRevenue"][1]
    assert january == {"month": "Jan", "tuition": 1000.0, "fees": 50.0, "other": 0.0, "total": 1050.0}
    assert february["other"] == 80.0

    breakdown = report["expenseBreakdown"]
    assert [row["category"] for row in breakdown] == ["SUPPLIES", "MAINTENANCE"]
    assert [row["percentage"] for row in breakdown] == [75.0, 25.0]
    assert breakdown[0]["color"] == "#10B981"

    trends = report["monthlyTrends"]
    assert trends[0]["profit"] == 750.0
    assert trends[1]["profit"] == -20.0

    tuition = next(row for row in report["feeCollections"] if row["feeType"] == "TUITION")
    assert tuition == {
        "feeType": "TUITION", "collected": 1000.0, "pending": 1000.0, "total": 2000.0, "collectionRate": 50.0,
    }

    by_class = {row["className"]: row for row in report["classRevenue"]}
    assert by_class["Grade 9-A"]["revenue"] == 1050.0
    assert by_class["Grade 9-A"]["students"] == 1
    assert by_class["Unassigned"]["avgPerStudent"] == 80.0

    # status rows follow when the payment was recorded, not when it was paid
    current = finance_report(timezone.localdate().year)
    statuses = {row["status"]: row for row in current["paymentStatus"]}
    assert statuses["PENDING"]["count"] == 1
    assert statuses["PAID"]["amount"] == 1130.0


def test_report_endpoint_defaults_and_validates_year(login, admin, ledger):
    client = login(admin)
    response = client.get("/api/admin/finance/reports/", {"year": YEAR})
    assert response.status_code == 200
    assert response.json()["data"]["summary"]["totalRevenue"] == 1130.0
    assert client.get("/api/admin/finance/reports/", {"year": "soon"}).status_code == 400


def test_payment_create_rules(login, admin, fees, student):
    client = login(admin)
    url = "/api/admin/payments/"
    zero = client.post(
        url, {"feeId": fees["TUITION"].pk, "studentId": student.pk, "amountPaid": "0"},
        content_type="application/json",
    )
    assert zero.json()["error"] == "Amount must be greater than 0"

    missing_fee = client.post(
        url, {"feeId": 999999, "studentId": student.pk, "amountPaid": "10"}, content_type="application/json"
    )
    assert missing_fee.status_code == 404
    assert missing_fee.json()["error"] == "Fee not found"

    pending = client.post(
        url, {"feeId": fees["TUITION"].pk, "studentId": student.pk, "amountPaid": "500"},
        content_type="application/json",
    )
    assert pending.status_code == 201
    assert pending.json()["data"]["status"] == "PENDING"
    assert pending.json()["data"]["paymentDate"] is None

    duplicate = client.post(
        url, {"feeId": fees["TUITION"].pk, "studentId": student.pk, "amountPaid": "500"},
        content_type="application/json",
    )
    assert duplicate.status_code == 409

    paid = client.post(
        url,
        {"feeId": fees["LIBRARY"].pk, "studentId": student.pk, "amountPaid": "50", "paymentMethod": "CASH"},
        content_type="application/json",
    )
    assert paid.json()["data"]["status"] == "PAID"
    assert paid.json()["data"]["paymentDate"] is not None
    assert paid.json()["data"]["amountPaid"] == 50.0


def test_payment_status_stamps_first_paid(login, admin, fees, student):
    payment = FeePayment.objects.create(fee=fees["TUITION"], student=student, amount_paid=Decimal("10"))
    client = login(admin)
    url = f"/api/admin/payments/{payment.pk}/status/"
    response = client.put(url, {"status": "paid"}, content_type="application/json")
    assert response.json()["data"]["status"] == "PAID"
    payment.refresh_from_db()
    stamped = payment.payment_date
    assert stamped is not None
    client.put(url, {"status": "PAID"}, content_type="application/json")
    payment.refresh_from_db()
    assert payment.payment_date == stamped
    bad = client.put(url, {"status": "REFUNDED"}, content_type="application/json")
    assert bad.json()["error"] == "Invalid payment status"


def test_payment_filters(login, admin, ledger):
    student, _ = ledger
    data = login(admin).get("/api/admin/payments/", {"studentId": student.pk, "status": "PAID"}).json()["data"]
    assert data["pagination"]["total"] == 2
    assert {row["fee"]["type"] for row in data["payments"]} == {"TUITION", "LIBRARY"}


def test_expense_lifecycle(login, admin):
    client = login(admin)
    created = client.post(
        "/api/admin/expenses/",
        {"title": "Projector", "category": "technology", "amount": "450.00"},
        content_type="application/json",
    )
    assert created.status_code == 201
    data = created.json()["data"]
    today = timezone.localdate()
    assert data["status"] == "PENDING"
    assert data["category"] == "TECHNOLOGY"
    assert (data["fiscalYear"], data["fiscalMonth"]) == (today.year, today.month)

    expense_id = data["id"]
    updated = client.put(
        f"/api/admin/expenses/{expense_id}/", {"status": "PAID"}, content_type="application/json"
    ).json()["data"]
    assert updated["status"] == "PAID"
    assert updated["paymentDate"] is not None
    assert updated["title"] == "Projector"

    bad = client.post(
        "/api/admin/expenses/", {"title": "X", "category": "PARTY", "amount": "5"}, content_type="application/json"
    )
    assert bad.json()["error"] == "Invalid expense category"

    deleted = client.delete(f"/api/admin/expenses/{expense_id}/")
    assert deleted.status_code == 200
    assert not Expense.objects.exists()
