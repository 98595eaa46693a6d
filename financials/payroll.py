"""
Monthly payroll computation for teaching staff.

Everything here stays in Decimal; amounts are quantized to cents once each
component is known.
"""
from __future__ import annotations

import calendar
import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from django.db import IntegrityError, transaction
from django.db.models import Count

from accounts.models import User
from reporting.metrics import quantize
from .models import PayrollRecord

logger = logging.getLogger(__name__)

DEFAULT_BASE = Decimal("3000")
PER_YEAR_EXPERIENCE = Decimal("200")
PER_CLASS = Decimal("200")
PER_SUBJECT = Decimal("150")
FIXED_ALLOWANCE = Decimal("300")
TAX_RATE = Decimal("0.15")
INSURANCE = Decimal("150")
PF_RATE = Decimal("0.12")


@dataclass
class PayrollBreakdown:
    base_salary: Decimal
    allowances: Decimal
    overtime: Decimal
    gross_salary: Decimal
    tax_deducted: Decimal
    insurance: Decimal
    provident_fund: Decimal
    total_deductions: Decimal
    net_salary: Decimal

    def as_fields(self) -> Dict[str, Decimal]:
        return asdict(self)


def base_salary(salary, experience: Optional[int]) -> Decimal:
    # a zero salary falls back to the experience formula; zero years counts as one
    if salary:
        return Decimal(salary)
    years = experience or 1
    return DEFAULT_BASE + Decimal(years) * PER_YEAR_EXPERIENCE


def compute(salary, experience, classes: int, subjects: int, overtime=0) -> PayrollBreakdown:
    base = quantize(base_salary(salary, experience))
    allowances = quantize(classes * PER_CLASS + subjects * PER_SUBJECT + FIXED_ALLOWANCE)
    overtime = quantize(overtime or 0)
    gross = base + allowances + overtime
    tax = quantize(gross * TAX_RATE)
    insurance = quantize(INSURANCE)
    pf = quantize(base * PF_RATE)
    deductions = tax + insurance + pf
    return PayrollBreakdown(
        base_salary=base,
        allowances=allowances,
        overtime=overtime,
        gross_salary=gross,
        tax_deducted=tax,
        insurance=insurance,
        provident_fund=pf,
        total_deductions=deductions,
        net_salary=gross - deductions,
    )


def pay_period(month: int, year: int) -> str:
    return f"{calendar.month_name[month]} {year}"


def generate_payroll(month: int, year: int, overtime: Optional[Dict[int, Any]] = None) -> Dict[str, Any]:
    """
    Create a PENDING payroll record for every teacher who has none for the
    period. Existing records are left untouched.
    """
    overtime = overtime or {}
    teachers = User.objects.teachers().filter(is_active=True).annotate(
        class_count=Count("homeroom_classes", distinct=True),
        subject_count=Count("teaching_subjects", distinct=True),
    )
    existing = set(
        PayrollRecord.objects.filter(pay_year=year, pay_month=month).values_list("employee_id", flat=True)
    )
    created, skipped = [], 0
    for teacher in teachers:
        if teacher.pk in existing:
            skipped += 1
            continue
        breakdown = compute(
            teacher.salary,
            teacher.experience,
            teacher.class_count,
            teacher.subject_count,
            overtime.get(teacher.pk, 0),
        )
        try:
            with transaction.atomic():
                record = PayrollRecord.objects.create(
                    employee=teacher,
                    pay_period=pay_period(month, year),
                    pay_year=year,
                    pay_month=month,
                    bank_account=teacher.bank_account,
                    status="PENDING",
                    **breakdown.as_fields(),
                )
        except IntegrityError:
            skipped += 1
            continue
        created.append(record)
    logger.info("Payroll %s/%s: %s created, %s skipped", month, year, len(created), skipped)
    return {"created": created, "skipped": skipped}
