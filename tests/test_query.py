import datetime

import pytest
from django.db import DatabaseError
from django.db.models import Q
from django.test import RequestFactory

from accounts.models import User
from reporting.query import MATCH_NOTHING, Page, exact_filters, fan_out, page_params, paginate, safe_load, search_q


def test_page_counts_pages():
    assert Page(total=0, limit=20).pages == 0
    assert Page(total=41, limit=20).pages == 3
    assert Page(items=[1], total=1, page=1, limit=20).pagination() == {
        "page": 1, "limit": 20, "total": 1, "pages": 1,
    }


def test_page_params_are_clamped(settings):
    settings.DEFAULT_PAGE_SIZE = 20
    settings.MAX_PAGE_SIZE = 100
    rf = RequestFactory()
    assert page_params(rf.get("/", {"page": "0", "limit": "500"})) == (1, 100)
    assert page_params(rf.get("/", {"page": "x"})) == (1, 20)
    assert page_params(rf.get("/", {"page": "3", "limit": "5"})) == (3, 5)


def test_search_and_exact_filters_skip_blanks():
    assert search_q("  ", ["name"]) == search_q(None, ["name"])
    assert exact_filters({"classId": "", "status": "all"}, {"classId": "school_class_id", "status": "status"}) == exact_filters({}, {})


def test_exact_filters_coerce_ids_numbers_and_dates():
    mapping = {"classId": "school_class_id", "year": "fiscal_year", "date": "date", "status": "status"}
    q = exact_filters({"classId": " 7 ", "year": "2025", "date": "2025-03-01", "status": "PAID"}, mapping)
    assert q == (
        Q(school_class_id=7) & Q(fiscal_year=2025) & Q(date=datetime.date(2025, 3, 1)) & Q(status="PAID")
    )


@pytest.mark.parametrize("params", [{"classId": "abc"}, {"year": "20x5"}, {"date": "2025-02-30"}, {"date": "soon"}])
def test_exact_filters_malformed_value_matches_nothing(params):
    mapping = {"classId": "school_class_id", "year": "fiscal_year", "date": "date"}
    assert exact_filters(params, mapping) == MATCH_NOTHING


@pytest.mark.django_db
def test_paginate_empty_match_is_an_empty_page():
    result = paginate(User.objects.filter(email="nobody@school.test"), 2, 10)
    assert result.items == []
    assert result.total == 0
    assert result.pages == 0


@pytest.mark.django_db
def test_paginate_slices(make_user):
    for _ in range(5):
        make_user(User.STUDENT)
    result = paginate(User.objects.students().order_by("id"), 2, 2)
    assert len(result.items) == 2
    assert result.total == 5
    assert result.pages == 3


def test_fan_out_returns_every_loader_result():
    loaded = fan_out(a=lambda: 1, b=lambda: "two", c=lambda: [3])
    assert loaded == {"a": 1, "b": "two", "c": [3]}


def test_fan_out_uses_threads_when_configured(settings):
    settings.REPORT_FANOUT_WORKERS = 3
    loaded = fan_out(a=lambda: sum(range(10)), b=lambda: max(4, 2))
    assert loaded == {"a": 45, "b": 4}


def test_fan_out_propagates_errors():
    def broken():
        raise ValueError("boom")

    with pytest.raises(ValueError):
        fan_out(ok=lambda: 1, broken=broken)


def test_safe_load_degrades_on_storage_errors():
    def broken():
        raise DatabaseError("down")

    assert safe_load(broken, {"rows": []}, "test") == {"rows": []}
    assert safe_load(lambda: 7, None) == 7
