"""
FastAPI dependencies.

Stores and settings live on ``app.state`` (see ``create_app``), so
every dependency reads them from the request's application rather than
from module globals.
"""

from typing import Optional

from fastapi import Depends, Request

from ..core.config import Settings
from ..core.exceptions import AuthenticationError
from ..core.security import decode_session_token
from ..schemas.user import User
from ..services.subscription_service import SubscriptionService
from ..services.user_service import UserService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_service(request: Request) -> UserService:
    return UserService(request.app.state.user_store)


def get_subscription_service(request: Request) -> SubscriptionService:
    return SubscriptionService(request.app.state.subscription_store)


def get_optional_user(
    request: Request,
    config: Settings = Depends(get_settings),
    users: UserService = Depends(get_user_service),
) -> Optional[User]:
    """Return the user named by a valid session cookie, or ``None``.

    A missing cookie, a token that fails verification or has expired,
    and a token for a user that no longer exists all count as "no
    session".
    """
    token = request.cookies.get(config.session_cookie_name)
    if not token:
        return None
    claims = decode_session_token(token, config)
    if claims is None:
        return None
    return users.get_user(str(claims["sub"]))


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Like :func:`get_optional_user` but raises ``AuthenticationError`` (401) without a session."""
    if user is None:
        raise AuthenticationError()
    return user
