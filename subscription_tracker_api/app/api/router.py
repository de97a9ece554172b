"""
Top‑level API router.

Aggregates the domain routers under their prefixes.  ``create_app``
includes this router, optionally under ``settings.api_prefix``.
"""

from fastapi import APIRouter

from .endpoints import auth, subscriptions

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(subscriptions.router, prefix="/subscriptions", tags=["subscriptions"])
