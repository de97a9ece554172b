"""
Subscription endpoints.

All routes require a session and only ever see the caller's own
subscriptions; an id owned by another user gets the same 404 as an id
that does not exist.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...core.config import Settings
from ...core.exceptions import NotFoundError
from ...schemas.subscription import ExportScope, SubscriptionCreate, SubscriptionPage, SubscriptionRead
from ...schemas.user import User
from ...services.export_service import CSV_FILENAME, export_csv
from ...services.query_service import SubscriptionQuery, build_query, paginate
from ...services.subscription_service import SubscriptionService, with_cost
from ..deps import get_current_user, get_settings, get_subscription_service

router = APIRouter()


def listing_query(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    cycle: Optional[str] = Query(None, description="Monthly, Quarterly or Annually; anything else is ignored"),
    sort_by: Optional[str] = Query(None, description="Only `cost` is recognized"),
    order: Optional[str] = Query(None, description="`asc` (default) or `desc`"),
    search: Optional[str] = Query(None, description="Case-insensitive substring of the name"),
    config: Settings = Depends(get_settings),
) -> SubscriptionQuery:
    """Parse the listing parameters leniently (clamp, ignore unknown values)."""
    return build_query(
        page=page,
        limit=limit,
        cycle=cycle,
        search=search,
        sort_by=sort_by,
        order=order,
        default_limit=config.default_page_size,
        max_limit=config.max_page_size,
    )


@router.get("", response_model=SubscriptionPage)
async def list_subscriptions(
    query: SubscriptionQuery = Depends(listing_query),
    user: User = Depends(get_current_user),
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionPage:
    """Filtered, sorted and paginated subscriptions of the current user.

    - **page** (default 1) and **limit** (default 5, at most 50).
    - **cycle** filters by billing cycle.
    - **search** matches the name, case‑insensitively.
    - **sort_by** `cost` sorts by total monthly cost, **order** `asc`/`desc`.
    """
    return paginate(subscriptions.list(user.id), query)


@router.get("/export")
async def export_subscriptions(
    scope: ExportScope = Query(ExportScope.PAGE),
    query: SubscriptionQuery = Depends(listing_query),
    user: User = Depends(get_current_user),
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> Response:
    """Download the listing as CSV.

    ``scope=page`` (default) exports the page the listing would return for
    the same parameters; ``scope=all`` exports every matching record.
    """
    content = export_csv(subscriptions.list(user.id), query, scope)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )


@router.post("", response_model=SubscriptionRead, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    payload: SubscriptionCreate,
    user: User = Depends(get_current_user),
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionRead:
    return with_cost(subscriptions.upsert(user.id, payload))


@router.get("/{subscription_id}", response_model=SubscriptionRead)
async def get_subscription(
    subscription_id: str,
    user: User = Depends(get_current_user),
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionRead:
    try:
        return with_cost(subscriptions.require(user.id, subscription_id))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e


@router.put("/{subscription_id}", response_model=SubscriptionRead)
async def update_subscription(
    subscription_id: str,
    payload: SubscriptionCreate,
    user: User = Depends(get_current_user),
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionRead:
    """Replace every mutable field; id and ``created_at`` are kept."""
    try:
        return with_cost(subscriptions.upsert(user.id, payload, subscription_id))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e


@router.delete("/{subscription_id}")
async def delete_subscription(
    subscription_id: str,
    user: User = Depends(get_current_user),
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> dict:
    if not subscriptions.delete(user.id, subscription_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscription not found")
    return {"ok": True}
