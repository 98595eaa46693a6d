from decimal import Decimal

import pytest

from academics.models import SchoolClass, Subject
from accounts.models import User
from financials import payroll
from financials.models import PayrollRecord


def test_compute_without_salary_uses_experience():
    result = payroll.compute(None, 5, classes=2, subjects=3)
    assert result.base_salary == Decimal("4000.00")
    assert result.allowances == Decimal("1150.00")
    assert result.overtime == Decimal("0.00")
    assert result.gross_salary == Decimal("5150.00")
    assert result.tax_deducted == Decimal("772.50")
    assert result.provident_fund == Decimal("480.00")
    assert result.insurance == Decimal("150.00")
    assert result.total_deductions == Decimal("1402.50")
    assert result.net_salary == Decimal("3747.50")


def test_base_salary_defaults():
    assert payroll.base_salary(Decimal("5200"), 12) == Decimal("5200")
    assert payroll.base_salary(None, None) == Decimal("3200")
    assert payroll.base_salary(None, 0) == Decimal("3200")


def test_zero_salary_falls_back_to_experience():
    assert payroll.compute(None, 0, 0, 0).base_salary == Decimal("3200.00")
    result = payroll.compute(Decimal("0"), 5, classes=0, subjects=0)
    assert result.base_salary == Decimal("4000.00")
    assert result.net_salary == Decimal("3025.00")


def test_overtime_is_added_to_gross():
    result = payroll.compute(Decimal("3000"), 0, classes=0, subjects=0, overtime=Decimal("100"))
    assert result.gross_salary == Decimal("3400.00")
    assert result.tax_deducted == Decimal("510.00")


def test_pay_period_label():
    assert payroll.pay_period(3, 2025) == "March 2025"


@pytest.mark.django_db
def test_generate_payroll_skips_existing_records(make_user):
    teacher = make_user(User.TEACHER, experience=5)
    SchoolClass.objects.create(name="Grade 1-A", grade=1, section="A", teacher=teacher)
    SchoolClass.objects.create(name="Grade 1-B", grade=1, section="B", teacher=teacher)
    for code in ("ART", "MUS", "PE"):
        Subject.objects.create(name=code.title(), code=code).teachers.add(teacher)
    make_user(User.STUDENT)

    first = payroll.generate_payroll(4, 2025)
    assert len(first["created"]) == 1
    assert first["skipped"] == 0
    record = PayrollRecord.objects.get(employee=teacher)
    assert record.net_salary == Decimal("3747.50")
    assert record.pay_period == "April 2025"
    assert record.status == "PENDING"

    second = payroll.generate_payroll(4, 2025)
    assert second["created"] == []
    assert second["skipped"] == 1
    assert PayrollRecord.objects.count() == 1


@pytest.mark.django_db
def test_payroll_endpoint_generates_and_lists(login, admin, teacher):
    client = login(admin)
    response = client.post(
        "/api/admin/teachers/payroll/", {"month": 5, "year": 2025}, content_type="application/json"
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["created"] == 1

    listing = client.get("/api/admin/teachers/payroll/", {"month": 5, "year": 2025}).json()
    assert listing["data"]["pagination"]["total"] == 1
    row = listing["data"]["payroll"][0]
    assert row["employee"]["id"] == teacher.pk
    assert row["payPeriod"] == "May 2025"

    again = client.post(
        "/api/admin/teachers/payroll/", {"month": 5, "year": 2025}, content_type="application/json"
    )
    assert again.status_code == 200
    assert again.json()["data"]["skipped"] == 1
