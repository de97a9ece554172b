"""
Storage interfaces and the in‑memory implementations.

The services only talk to ``UserStore`` and ``SubscriptionStore``.  The
in‑memory stores are process‑wide state held on the application
instance; a durable backend only has to implement the same abstract
methods.

Subscriptions are kept as ``{user_id: {subscription_id: Subscription}}``
so every lookup is scoped to an owner.  Mutations for one owner are
serialized with a per‑owner lock, which ``SubscriptionService`` also
holds across its read‑modify‑write sequences.
"""

import threading
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional

from ..schemas.subscription import Subscription, SubscriptionBase
from ..schemas.user import User
from .exceptions import DuplicateEmailError, NotFoundError


def normalize_email(email: str) -> str:
    return email.strip().lower()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class UserStore(ABC):
    """Identity records indexed by id and by normalized email."""

    @abstractmethod
    def create(self, email: str, password_hash: str) -> User:
        """Create a user.

        Raises:
            DuplicateEmailError: a user with the same normalized email exists.
        """

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Return the user with this email (case-insensitive), if any."""

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:
        """Return the user with this id, if any."""


class SubscriptionStore(ABC):
    """Subscriptions keyed by ``(user_id, subscription_id)``."""

    @abstractmethod
    def lock_for(self, user_id: str):
        """Context manager serializing mutations for one owner."""

    @abstractmethod
    def add(self, user_id: str, data: SubscriptionBase) -> Subscription:
        """Create a record with a fresh id and timestamp."""

    @abstractmethod
    def replace(self, subscription: Subscription) -> Subscription:
        """Overwrite an existing record (same owner and id)."""

    @abstractmethod
    def get(self, user_id: str, subscription_id: str) -> Optional[Subscription]:
        """Return the record if it exists under this owner."""

    @abstractmethod
    def delete(self, user_id: str, subscription_id: str) -> bool:
        """Remove the record; ``True`` if it existed under this owner."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> List[Subscription]:
        """All records owned by ``user_id``."""


class InMemoryUserStore(UserStore):
    def __init__(self) -> None:
        self._by_id: Dict[str, User] = {}
        self._by_email: Dict[str, User] = {}
        self._lock = threading.Lock()

    def create(self, email: str, password_hash: str) -> User:
        email = normalize_email(email)
        with self._lock:
            if email in self._by_email:
                raise DuplicateEmailError()
            user = User(id=new_id(), email=email, password_hash=password_hash, created_at=utc_now())
            self._by_email[email] = user
            self._by_id[user.id] = user
            return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self._by_email.get(normalize_email(email))

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._by_id.get(user_id)


class InMemorySubscriptionStore(SubscriptionStore):
    def __init__(self) -> None:
        self._by_user: Dict[str, Dict[str, Subscription]] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def _owner_lock(self, user_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.RLock()
            return lock

    @contextmanager
    def lock_for(self, user_id: str) -> Iterator[None]:
        with self._owner_lock(user_id):
            yield

    def add(self, user_id: str, data: SubscriptionBase) -> Subscription:
        subscription = Subscription(
            id=new_id(),
            user_id=user_id,
            created_at=utc_now(),
            **data.model_dump(),
        )
        with self.lock_for(user_id):
            self._by_user.setdefault(user_id, {})[subscription.id] = subscription
        return subscription

    def replace(self, subscription: Subscription) -> Subscription:
        with self.lock_for(subscription.user_id):
            bag = self._by_user.get(subscription.user_id, {})
            if subscription.id not in bag:
                raise NotFoundError("Subscription not found")
            bag[subscription.id] = subscription
        return subscription

    def get(self, user_id: str, subscription_id: str) -> Optional[Subscription]:
        return self._by_user.get(user_id, {}).get(subscription_id)

    def delete(self, user_id: str, subscription_id: str) -> bool:
        with self.lock_for(user_id):
            bag = self._by_user.get(user_id)
            if not bag:
                return False
            return bag.pop(subscription_id, None) is not None

    def list_for_user(self, user_id: str) -> List[Subscription]:
        with self.lock_for(user_id):
            return list(self._by_user.get(user_id, {}).values())
