"""
Business logic for subscriptions.

Every operation is scoped to the owning user: a subscription id that
belongs to someone else behaves exactly like one that does not exist.
"""

import logging
from typing import List, Optional

from ..core.exceptions import NotFoundError
from ..core.storage import SubscriptionStore
from ..schemas.subscription import Subscription, SubscriptionBase, SubscriptionRead
from .cost import compute_monthly_cost, round_cost

logger = logging.getLogger(__name__)


def with_cost(subscription: Subscription) -> SubscriptionRead:
    """Attach ``total_monthly_cost`` (rounded to cents) to a record."""
    cost = compute_monthly_cost(subscription.base_cost, subscription.tax_rate, subscription.billing_cycle)
    return SubscriptionRead(**subscription.model_dump(), total_monthly_cost=round_cost(cost))


class SubscriptionService:
    def __init__(self, store: SubscriptionStore) -> None:
        self.store = store

    def upsert(self, user_id: str, data: SubscriptionBase, subscription_id: Optional[str] = None) -> Subscription:
        """Create a subscription, or replace the mutable fields of an existing one.

        Without ``subscription_id`` a new record is created.  With it, the
        record must already exist under ``user_id``; name, cycle, active
        flag, base cost and tax rate are replaced while id, owner and
        ``created_at`` are kept.

        Raises:
            NotFoundError: ``subscription_id`` is not owned by ``user_id``.
        """
        if subscription_id is None:
            created = self.store.add(user_id, data)
            logger.info("User %s created subscription %s", user_id, created.id)
            return created
        with self.store.lock_for(user_id):
            existing = self.store.get(user_id, subscription_id)
            if existing is None:
                raise NotFoundError("Subscription not found")
            updated = self.store.replace(existing.model_copy(update=data.model_dump()))
        logger.info("User %s updated subscription %s", user_id, subscription_id)
        return updated

    def get(self, user_id: str, subscription_id: str) -> Optional[Subscription]:
        return self.store.get(user_id, subscription_id)

    def require(self, user_id: str, subscription_id: str) -> Subscription:
        subscription = self.get(user_id, subscription_id)
        if subscription is None:
            raise NotFoundError("Subscription not found")
        return subscription

    def delete(self, user_id: str, subscription_id: str) -> bool:
        removed = self.store.delete(user_id, subscription_id)
        if removed:
            logger.info("User %s deleted subscription %s", user_id, subscription_id)
        return removed

    def list(self, user_id: str) -> List[Subscription]:
        return self.store.list_for_user(user_id)
