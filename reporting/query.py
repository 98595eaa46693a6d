from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List

from django.conf import settings
from django.db import DatabaseError, connections
from django.db.models import Q, QuerySet
from django.utils.dateparse import parse_date

logger = logging.getLogger(__name__)


@dataclass
class Page:
    items: List[Any] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def pages(self) -> int:
        if self.total <= 0 or self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)

    def pagination(self) -> Dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "pages": self.pages,
        }


def _positive_int(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def page_params(request) -> tuple[int, int]:
    """Read ``page``/``limit`` from the query string, clamped to sane bounds."""
    default_limit = getattr(settings, "DEFAULT_PAGE_SIZE", 20)
    max_limit = getattr(settings, "MAX_PAGE_SIZE", 100)
    page = _positive_int(request.GET.get("page"), 1)
    limit = min(_positive_int(request.GET.get("limit"), default_limit), max_limit)
    return page, limit


def search_q(term: str | None, fields: Iterable[str]) -> Q:
    """OR together case-insensitive substring matches over ``fields``."""
    q = Q()
    term = (term or "").strip()
    if not term:
        return q
    for name in fields:
        q |= Q(**{f"{name}__icontains": term})
    return q


INTEGER_LOOKUPS = {"fiscal_year", "fiscal_month", "pay_year", "pay_month"}
MATCH_NOTHING = Q(pk__in=[])


def _coerce(lookup: str, value: str):
    if lookup.endswith("_id") or lookup in INTEGER_LOOKUPS:
        return int(value)
    if lookup == "date":
        parsed = parse_date(value)
        if parsed is None:
            raise ValueError(value)
        return parsed
    return value


def exact_filters(params, mapping: Dict[str, str]) -> Q:
    """Map query-string keys to exact foreign-key lookups, skipping blanks.

    A value that is not a valid id, number or date matches nothing, so a
    mistyped filter yields an empty page rather than an error.
    """
    q = Q()
    for param, lookup in mapping.items():
        value = params.get(param)
        if value in (None, "", "all"):
            continue
        try:
            value = _coerce(lookup, value.strip())
        except ValueError:
            logger.debug("Ignoring malformed %s filter %r", param, value)
            return MATCH_NOTHING
        q &= Q(**{lookup: value})
    return q


def paginate(qs: QuerySet, page: int, limit: int) -> Page:
    total = qs.count()
    offset = (page - 1) * limit
    items = list(qs[offset:offset + limit]) if total else []
    return Page(items=items, total=total, page=page, limit=limit)


def _run_isolated(loader: Callable[[], Any]) -> Any:
    try:
        return loader()
    finally:
        # worker threads open their own connections; release them here
        connections.close_all()


def fan_out(**loaders: Callable[[], Any]) -> Dict[str, Any]:
    """
    Run independent read loaders concurrently and wait for all of them.

    Returns a dict keyed like ``loaders``. With REPORT_FANOUT_WORKERS <= 1 the
    loaders run one after another in the calling thread.
    """
    workers = getattr(settings, "REPORT_FANOUT_WORKERS", 4)
    if workers <= 1 or len(loaders) <= 1:
        return {name: loader() for name, loader in loaders.items()}
    with ThreadPoolExecutor(max_workers=min(workers, len(loaders))) as pool:
        futures = {
            name: pool.submit(_run_isolated, loader)
            for name, loader in loaders.items()
        }
        return {name: future.result() for name, future in futures.items()}


def safe_load(loader: Callable[[], Any], default: Any, label: str = "") -> Any:
    """Page-boundary guard: storage failures degrade to ``default``."""
    try:
        return loader()
    except DatabaseError:
        logger.exception("Storage error while loading %s", label or "page data")
        return default
