"""
Application package initializer.

The project is split into a few small pieces: ``core`` holds
configuration, security primitives, storage and logging; ``services``
holds the business logic (cost normalization, users, subscriptions,
queries and CSV export); ``schemas`` holds the Pydantic request and
response models; ``api`` exposes the HTTP routers.
"""

from .main import app, create_app  # noqa: F401
