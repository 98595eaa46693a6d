"""
Formatting step between aggregates and templates/JSON.

All status colours live in this module so every page, badge and chart shows
the same palette for the same enum value.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

from django.conf import settings

NEUTRAL = "#6B7280"

STATUS_STYLES: Dict[str, Dict[str, str]] = {
    # payments / expenses / documents
    "PAID": {"color": "#10B981", "badge": "success", "label": "Paid"},
    "PENDING": {"color": "#F59E0B", "badge": "warning", "label": "Pending"},
    "OVERDUE": {"color": "#EF4444", "badge": "error", "label": "Overdue"},
    "CANCELLED": {"color": NEUTRAL, "badge": "muted", "label": "Cancelled"},
    "APPROVED": {"color": "#10B981", "badge": "success", "label": "Approved"},
    "REJECTED": {"color": "#EF4444", "badge": "error", "label": "Rejected"},
    # admissions
    "UNDER_REVIEW": {"color": "#3B82F6", "badge": "info", "label": "Under review"},
    "INTERVIEW_SCHEDULED": {"color": "#8B5CF6", "badge": "info", "label": "Interview scheduled"},
    "ACCEPTED": {"color": "#10B981", "badge": "success", "label": "Accepted"},
    "WAITLISTED": {"color": "#F97316", "badge": "warning", "label": "Waitlisted"},
    # attendance
    "PRESENT": {"color": "#10B981", "badge": "success", "label": "Present"},
    "ABSENT": {"color": "#EF4444", "badge": "error", "label": "Absent"},
    "LATE": {"color": "#F59E0B", "badge": "warning", "label": "Late"},
    "EXCUSED": {"color": "#3B82F6", "badge": "info", "label": "Excused"},
    # performance tiers
    "excellent": {"color": "#10B981", "badge": "success", "label": "Excellent"},
    "good": {"color": "#3B82F6", "badge": "info", "label": "Good"},
    "average": {"color": "#F59E0B", "badge": "warning", "label": "Average"},
    "needs_attention": {"color": "#EF4444", "badge": "error", "label": "Needs attention"},
    "needs_improvement": {"color": "#EF4444", "badge": "error", "label": "Needs improvement"},
    "insufficient_data": {"color": NEUTRAL, "badge": "muted", "label": "Insufficient data"},
    # activity feed
    "success": {"color": "#10B981", "badge": "success", "label": "Success"},
    "error": {"color": "#EF4444", "badge": "error", "label": "Error"},
    "info": {"color": "#3B82F6", "badge": "info", "label": "Info"},
    "warning": {"color": "#F59E0B", "badge": "warning", "label": "Warning"},
}

CATEGORY_COLORS: Dict[str, str] = {
    "SALARIES": "#3B82F6",
    "INFRASTRUCTURE": "#8B5CF6",
    "UTILITIES": "#F59E0B",
    "SUPPLIES": "#10B981",
    "MARKETING": "#EF4444",
    "MAINTENANCE": "#F97316",
    "TRANSPORT": "#06B6D4",
    "INSURANCE": "#84CC16",
    "TECHNOLOGY": "#EC4899",
    "OTHER": NEUTRAL,
}


def style_for(status: Optional[str]) -> Dict[str, str]:
    if status and status in STATUS_STYLES:
        return STATUS_STYLES[status]
    label = (status or "unknown").replace("_", " ").capitalize()
    return {"color": NEUTRAL, "badge": "muted", "label": label}


def status_color(status: Optional[str]) -> str:
    return style_for(status)["color"]


def category_color(category: Optional[str]) -> str:
    return CATEGORY_COLORS.get(category or "", NEUTRAL)


def money(amount) -> float:
    """Decimal -> float, only at the JSON/display edge."""
    if amount is None:
        return 0.0
    return float(Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_currency(amount) -> str:
    symbol = getattr(settings, "CURRENCY_SYMBOL", "$")
    value = Decimal(amount or 0).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    text = f"{abs(value):,.2f}"
    sign = "-" if value < 0 else ""
    if getattr(settings, "CURRENCY_POSITION", "before") == "after":
        return f"{sign}{text} {symbol}"
    return f"{sign}{symbol}{text}"


def format_percent(value, digits: int = 1) -> str:
    if value is None:
        return "N/A"
    return f"{float(value):.{digits}f}%"


def bar_width(value, maximum) -> int:
    """Width (0-100) of a proportional bar."""
    if not maximum or value is None:
        return 0
    return max(0, min(100, int(round(float(value) / float(maximum) * 100))))


def stat_card(label: str, value: Any, hint: str = "", status: Optional[str] = None) -> Dict[str, Any]:
    card = {"label": label, "value": value, "hint": hint}
    if status:
        card["style"] = style_for(status)
    return card
