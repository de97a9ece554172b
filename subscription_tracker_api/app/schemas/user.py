"""
Pydantic models for user data.

``User`` is the stored identity record and carries the password hash;
it is never returned through the API.  ``UserRead`` is the public
representation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """Body of the register and login requests.

    Both fields are optional at the schema level so that a missing
    field is reported with the same message as an empty one; the check
    is done in ``UserService``.
    """

    email: Optional[str] = Field(None, examples=["user@example.com"])
    password: Optional[str] = Field(None, examples=["strongpassword"])


class User(BaseModel):
    """Stored user record."""

    id: str
    email: str
    password_hash: str
    created_at: datetime

    model_config = {"frozen": True}


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: str
    email: str

    model_config = {
        "from_attributes": True,
    }


class AuthStatus(BaseModel):
    """Response of ``GET /auth/me``."""

    authenticated: bool
    user: Optional[UserRead] = None
