"""
Main entrypoint for the Subscription Tracker API.

``create_app`` builds and configures the FastAPI application, which is
then instantiated at module import time as ``app``::

    uvicorn subscription_tracker_api.app.main:app --reload

The stores are created here and kept on ``app.state`` for the lifetime
of the process.  Pass your own ``UserStore``/``SubscriptionStore`` to
use a different backend, or a ``Settings`` instance to override the
environment.
"""

import logging
from typing import Optional

from fastapi import FastAPI

from .api.errors import register_exception_handlers
from .api.router import router as api_router
from .core.config import Settings, settings as default_settings
from .core.logging_config import setup_logging
from .core.storage import InMemorySubscriptionStore, InMemoryUserStore, SubscriptionStore, UserStore

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[Settings] = None,
    user_store: Optional[UserStore] = None,
    subscription_store: Optional[SubscriptionStore] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    config : Optional[Settings]
        Settings to use instead of the environment‑derived defaults.
    user_store, subscription_store : optional
        Storage backends.  Fresh in‑memory stores when omitted.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    config = config or default_settings
    setup_logging(config.log_level, config.log_file or None)

    app = FastAPI(title=config.project_name, version=config.api_version, debug=config.debug)
    app.state.settings = config
    app.state.user_store = user_store or InMemoryUserStore()
    app.state.subscription_store = subscription_store or InMemorySubscriptionStore()

    register_exception_handlers(app)
    app.include_router(api_router, prefix=config.api_prefix.rstrip("/"))

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"ok": True}

    logger.info("%s %s ready (environment=%s)", config.project_name, config.api_version, config.environment)
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
