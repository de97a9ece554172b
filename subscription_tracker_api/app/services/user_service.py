"""
Business logic for users.

``UserService`` validates credentials, hashes passwords and delegates
storage to a ``UserStore``.  Hashing is deliberately slow; async
handlers call these methods through ``run_in_threadpool``.
"""

import logging
from typing import Optional, Tuple

from ..core.exceptions import ValidationError
from ..core.security import hash_password, verify_password
from ..core.storage import UserStore, normalize_email
from ..schemas.user import User

logger = logging.getLogger(__name__)

# Stand-in hash for unknown emails: every login attempt runs scrypt once.
_UNKNOWN_USER_HASH = hash_password("unknown-user")


def clean_credentials(email: Optional[str], password: Optional[str]) -> Tuple[str, str]:
    """Normalize the email and require both fields to be non‑empty."""
    email = normalize_email(email or "")
    password = password or ""
    if not email or not password:
        raise ValidationError("Email and password required")
    return email, password


class UserService:
    def __init__(self, store: UserStore) -> None:
        self.store = store

    def register(self, email: Optional[str], password: Optional[str]) -> User:
        """Create a new user.

        Raises ``ValidationError`` for missing fields and
        ``DuplicateEmailError`` when the email is taken.
        """
        email, password = clean_credentials(email, password)
        user = self.store.create(email, hash_password(password))
        logger.info("Registered user %s", user.id)
        return user

    def authenticate(self, email: Optional[str], password: Optional[str]) -> Optional[User]:
        """Return the user if the credentials match, otherwise ``None``."""
        email, password = clean_credentials(email, password)
        user = self.store.get_by_email(email)
        stored_hash = _UNKNOWN_USER_HASH if user is None else user.password_hash
        if not verify_password(password, stored_hash) or user is None:
            logger.info("Failed login attempt")
            return None
        logger.info("User %s logged in", user.id)
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        return self.store.get_by_id(user_id)
