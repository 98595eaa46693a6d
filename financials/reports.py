from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Any, Dict, List

from django.db.models import Count, Sum

from reporting import metrics
from reporting.presenters import category_color, money, status_color
from reporting.query import fan_out
from .models import Expense, FeePayment

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
FEE_GROUPS = {
    "TUITION": "tuition",
    "LIBRARY": "fees",
    "SPORTS": "fees",
    "EXAMINATION": "fees",
}
COUNTED_EXPENSES = ("APPROVED", "PAID")


def revenue_group(fee_type: str) -> str:
    return FEE_GROUPS.get(fee_type, "other")


def _paid_payments(year: int):
    return list(
        FeePayment.objects.filter(status="PAID", payment_date__year=year)
        .select_related("fee", "student__school_class")
    )


def _expenses(year: int):
    return list(Expense.objects.filter(fiscal_year=year, status__in=COUNTED_EXPENSES))


def _collections(year: int):
    return list(
        FeePayment.objects.filter(fee__due_date__year=year)
        .values("fee__fee_type", "status")
        .annotate(amount=Sum("amount_paid"), n=Count("id"))
    )


def _status_rows(year: int):
    return list(
        FeePayment.objects.filter(created_at__year=year)
        .values("status")
        .annotate(amount=Sum("amount_paid"), n=Count("id"))
        .order_by("status")
    )


def monthly_revenue(payments) -> List[Dict[str, Any]]:
    groups = {
        name: metrics.monthly_buckets(
            [p for p in payments if revenue_group(p.fee.fee_type) == name],
            lambda p: p.payment_date,
            value=lambda p: p.amount_paid,
            zero=ZERO,
        )
        for name in ("tuition", "fees", "other")
    }
    rows = []
    for month in range(12):
        total = groups["tuition"][month] + groups["fees"][month] + groups["other"][month]
        rows.append(
            {
                "month": metrics.MONTH_LABELS[month],
                "tuition": money(groups["tuition"][month]),
                "fees": money(groups["fees"][month]),
                "other": money(groups["other"][month]),
                "total": money(total),
            }
        )
    return rows


def expense_breakdown(expenses) -> List[Dict[str, Any]]:
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for expense in expenses:
        totals[expense.category] += expense.amount
    grand = metrics.decimal_sum(totals.values())
    rows = [
        {
            "category": category,
            "amount": money(amount),
            "percentage": metrics.decimal_share(amount, grand),
            "color": category_color(category),
        }
        for category, amount in totals.items()
    ]
    rows.sort(key=lambda r: r["amount"], reverse=True)
    return rows


def monthly_trends(payments, expenses) -> List[Dict[str, Any]]:
    revenue = metrics.monthly_buckets(
        payments, lambda p: p.payment_date, value=lambda p: p.amount_paid, zero=ZERO
    )
    spent = [ZERO] * 12
    for expense in expenses:
        if 1 <= expense.fiscal_month <= 12:
            spent[expense.fiscal_month - 1] += expense.amount
    return [
        {
            "month": metrics.MONTH_LABELS[m],
            "revenue": money(revenue[m]),
            "expenses": money(spent[m]),
            "profit": money(revenue[m] - spent[m]),
        }
        for m in range(12)
    ]


def collections_by_type(rows) -> List[Dict[str, Any]]:
    by_type: Dict[str, Dict[str, Decimal]] = {}
    for row in rows:
        entry = by_type.setdefault(row["fee__fee_type"], {"collected": ZERO, "pending": ZERO})
        amount = row["amount"] or ZERO
        if row["status"] == "PAID":
            entry["collected"] += amount
        elif row["status"] in ("PENDING", "OVERDUE"):
            entry["pending"] += amount
    return [
        {
            "feeType": fee_type,
            "collected": money(entry["collected"]),
            "pending": money(entry["pending"]),
            "total": money(entry["collected"] + entry["pending"]),
            "collectionRate": metrics.decimal_share(
                entry["collected"], entry["collected"] + entry["pending"]
            ),
        }
        for fee_type, entry in sorted(by_type.items())
    ]


def class_revenue(payments) -> List[Dict[str, Any]]:
    revenue: Dict[Any, Decimal] = defaultdict(lambda: ZERO)
    students: Dict[Any, set] = defaultdict(set)
    names = {}
    for payment in payments:
        school_class = payment.student.school_class
        key = school_class.pk if school_class else None
        names[key] = str(school_class) if school_class else "Unassigned"
        revenue[key] += payment.amount_paid
        students[key].add(payment.student_id)
    rows = []
    for key, amount in revenue.items():
        count = len(students[key])
        rows.append(
            {
                "classId": key,
                "className": names[key],
                "revenue": money(amount),
                "students": count,
                "avgPerStudent": money(amount / count) if count else 0.0,
            }
        )
    rows.sort(key=lambda r: r["revenue"], reverse=True)
    return rows


def status_breakdown(rows) -> List[Dict[str, Any]]:
    return [
        {
            "status": row["status"],
            "count": row["n"],
            "amount": money(row["amount"] or ZERO),
            "color": status_color(row["status"]),
        }
        for row in rows
    ]


def finance_report(year: int) -> Dict[str, Any]:
    loaded = fan_out(
        payments=lambda: _paid_payments(year),
        expenses=lambda: _expenses(year),
        collections=lambda: _collections(year),
        statuses=lambda: _status_rows(year),
    )
    payments, expenses = loaded["payments"], loaded["expenses"]
    total_revenue = metrics.decimal_sum(p.amount_paid for p in payments)
    total_expenses = metrics.decimal_sum(e.amount for e in expenses)
    net_profit = total_revenue - total_expenses
    logger.debug("Finance report %s: %s payments, %s expenses", year, len(payments), len(expenses))
    return {
        "year": year,
        "summary": {
            "totalRevenue": money(total_revenue),
            "totalExpenses": money(total_expenses),
            "netProfit": money(net_profit),
            "profitMargin": metrics.decimal_share(net_profit, total_revenue),
            "paidPayments": len(payments),
        },
        "monthlyRevenue": monthly_revenue(payments),
        "expenseBreakdown": expense_breakdown(expenses),
        "monthlyTrends": monthly_trends(payments, expenses),
        "feeCollections": collections_by_type(loaded["collections"]),
        "classRevenue": class_revenue(payments),
        "paymentStatus": status_breakdown(loaded["statuses"]),
    }
