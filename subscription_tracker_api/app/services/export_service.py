"""
CSV export of subscription listings.

The export follows the same filters and sort order as the listing.
With ``ExportScope.PAGE`` it contains exactly the page the listing
would return; with ``ExportScope.ALL`` every matching record.
"""

import csv
import io
import logging
from enum import Enum
from typing import Iterable, List, Mapping, Union

from ..schemas.subscription import ExportScope, Subscription, SubscriptionRead
from .query_service import SubscriptionQuery, filter_and_sort, paginate

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["name", "billing_cycle", "is_active", "base_cost", "tax_rate", "total_monthly_cost"]
CSV_FILENAME = "subscriptions.csv"


def _field(item: Union[SubscriptionRead, Mapping], column: str):
    if isinstance(item, Mapping):
        return item.get(column, "")
    return getattr(item, column)


def _format(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float) and value.is_integer():
        # 15.0 is written as 15
        return str(int(value))
    return str(value)


def render_csv(items: Iterable[Union[SubscriptionRead, Mapping]]) -> str:
    """Render rows as CSV with every value quoted.

    Accepts ``SubscriptionRead`` models or plain dicts (as decoded from
    the JSON API).  Embedded quotes are doubled and rows are separated
    by ``\\n``.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for item in items:
        writer.writerow([_format(_field(item, column)) for column in CSV_COLUMNS])
    # No trailing newline after the last row.
    return buffer.getvalue().rstrip("\n")


def export_rows(
    subscriptions: Iterable[Subscription],
    query: SubscriptionQuery,
    scope: ExportScope = ExportScope.PAGE,
) -> List[SubscriptionRead]:
    if scope == ExportScope.ALL:
        return filter_and_sort(subscriptions, query)
    return paginate(subscriptions, query).items


def export_csv(
    subscriptions: Iterable[Subscription],
    query: SubscriptionQuery,
    scope: ExportScope = ExportScope.PAGE,
) -> str:
    rows = export_rows(subscriptions, query, scope)
    logger.info("Exporting %d subscriptions (scope=%s)", len(rows), scope.value)
    return render_csv(rows)
