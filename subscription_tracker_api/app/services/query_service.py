"""
Filtering, sorting and pagination of a user's subscriptions.

The steps always run in the same order: cycle filter, name search,
cost annotation, optional cost sort, count, then the page window.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from ..core.config import settings as default_settings
from ..schemas.subscription import (
    BillingCycle,
    SortOrder,
    Subscription,
    SubscriptionPage,
    SubscriptionRead,
)
from .subscription_service import with_cost

SORT_BY_COST = "cost"


@dataclass(frozen=True)
class SubscriptionQuery:
    """Normalized listing parameters.

    Build instances with :func:`build_query`, which applies the
    clamping and fallbacks; the fields here are already clean.
    """

    page: int = 1
    limit: int = 5
    cycle: Optional[BillingCycle] = None
    search: str = ""
    sort_by: Optional[str] = None
    order: SortOrder = SortOrder.ASC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _to_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return int(number)


def build_query(
    page: Any = None,
    limit: Any = None,
    cycle: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    order: Optional[str] = None,
    default_limit: Optional[int] = None,
    max_limit: Optional[int] = None,
) -> SubscriptionQuery:
    """Turn raw request parameters into a :class:`SubscriptionQuery`.

    - ``page`` below 1 becomes 1; ``limit`` is clamped to ``1..max_limit``.
      Values that are not numbers fall back to the defaults.
    - ``cycle`` is ignored unless it is exactly one of the billing cycles.
    - ``search`` is trimmed and lowercased.
    - ``sort_by`` is kept only when it is ``"cost"``.
    - ``order`` is ``desc`` only for ``"desc"`` (any case).
    """
    default_limit = default_limit or default_settings.default_page_size
    max_limit = max_limit or default_settings.max_page_size
    try:
        cycle_value = BillingCycle(cycle) if cycle else None
    except ValueError:
        cycle_value = None
    return SubscriptionQuery(
        page=max(1, _to_int(page, 1)),
        limit=min(max_limit, max(1, _to_int(limit, default_limit))),
        cycle=cycle_value,
        search=(search or "").strip().lower(),
        sort_by=SORT_BY_COST if sort_by == SORT_BY_COST else None,
        order=SortOrder.DESC if (order or "").lower() == SortOrder.DESC.value else SortOrder.ASC,
    )


def filter_and_sort(subscriptions: Iterable[Subscription], query: SubscriptionQuery) -> List[SubscriptionRead]:
    """Apply the filters and the sort, annotating every record with its cost."""
    items = list(subscriptions)
    if query.cycle is not None:
        items = [item for item in items if item.billing_cycle == query.cycle]
    if query.search:
        items = [item for item in items if query.search in item.name.lower()]
    annotated = [with_cost(item) for item in items]
    if query.sort_by == SORT_BY_COST:
        annotated.sort(key=lambda item: item.total_monthly_cost)
        if query.order == SortOrder.DESC:
            annotated.reverse()
    return annotated


def paginate(subscriptions: Iterable[Subscription], query: SubscriptionQuery) -> SubscriptionPage:
    """Return the requested page of the filtered and sorted listing.

    Pages past the end are empty, never an error.
    """
    matched = filter_and_sort(subscriptions, query)
    total = len(matched)
    start = query.offset
    end = start + query.limit
    return SubscriptionPage(
        items=matched[start:end],
        page=query.page,
        limit=query.limit,
        total=total,
        has_next_page=end < total,
        has_prev_page=start > 0,
    )
