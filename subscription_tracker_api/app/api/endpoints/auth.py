"""
Authentication endpoints.

Registration and login both start a session: the response carries an
HTTP‑only ``session`` cookie holding a signed token valid for 7 days.
Logout overwrites the cookie with an expired one.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from fastapi.concurrency import run_in_threadpool

from ...core.config import Settings
from ...core.exceptions import AuthenticationError, DuplicateEmailError, ValidationError
from ...core.security import clear_session_cookie, create_session_token, set_session_cookie
from ...schemas.user import AuthStatus, Credentials, User, UserRead
from ...services.user_service import UserService
from ..deps import get_optional_user, get_settings, get_user_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _start_session(response: Response, user: User, config: Settings) -> UserRead:
    token = create_session_token(user.id, user.email, config=config)
    set_session_cookie(response, token, config)
    return UserRead.model_validate(user)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(
    response: Response,
    credentials: Optional[Credentials] = Body(None),
    config: Settings = Depends(get_settings),
    users: UserService = Depends(get_user_service),
) -> UserRead:
    """Register a new user and log them in.

    Responds 400 when the email or password is missing or the email is
    already registered (emails are compared case‑insensitively).
    """
    credentials = credentials or Credentials()
    try:
        user = await run_in_threadpool(users.register, credentials.email, credentials.password)
    except (ValidationError, DuplicateEmailError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return _start_session(response, user, config)


@router.post("/login", response_model=UserRead)
async def login(
    response: Response,
    credentials: Optional[Credentials] = Body(None),
    config: Settings = Depends(get_settings),
    users: UserService = Depends(get_user_service),
) -> UserRead:
    """Check email and password and start a session.

    400 for missing fields, 401 for an unknown email or wrong password.
    """
    credentials = credentials or Credentials()
    try:
        user = await run_in_threadpool(users.authenticate, credentials.email, credentials.password)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    if user is None:
        raise AuthenticationError("Invalid credentials")
    return _start_session(response, user, config)


@router.post("/logout")
async def logout(response: Response, config: Settings = Depends(get_settings)) -> dict:
    clear_session_cookie(response, config)
    return {"ok": True}


@router.get("/me", response_model=AuthStatus, response_model_exclude_none=True)
async def me(user: Optional[User] = Depends(get_optional_user)) -> AuthStatus:
    """Report whether the request carries a valid session."""
    if user is None:
        return AuthStatus(authenticated=False)
    return AuthStatus(authenticated=True, user=UserRead.model_validate(user))
