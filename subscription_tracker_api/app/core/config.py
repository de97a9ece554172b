"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
application starts in a local development setup without any
configuration.  In a production deployment set at least
``ENVIRONMENT`` and ``SECRET_KEY``.
"""

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Subscription Tracker API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", ""))

    # ``development`` disables the ``Secure`` flag on the session cookie so
    # that the API can be used over plain HTTP on localhost.  Any other
    # value (``production``, ``staging``) marks the cookie secure.
    environment: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))

    # HMAC secret used to sign session tokens.  When left empty, a random
    # secret is generated once per process (see ``core.security``), which
    # means sessions do not survive a restart and cannot be shared between
    # several instances.
    secret_key: str = field(default_factory=lambda: os.getenv("SECRET_KEY", ""))
    session_cookie_name: str = field(default_factory=lambda: os.getenv("SESSION_COOKIE_NAME", "session"))
    session_max_age_days: int = field(default_factory=lambda: int(os.getenv("SESSION_MAX_AGE_DAYS", "7")))

    # Prefix for every route, e.g. ``/api``.  Empty by default so the
    # routes are served at ``/auth/...`` and ``/subscriptions``.
    api_prefix: str = field(default_factory=lambda: os.getenv("API_PREFIX", ""))

    default_page_size: int = field(default_factory=lambda: int(os.getenv("DEFAULT_PAGE_SIZE", "5")))
    max_page_size: int = field(default_factory=lambda: int(os.getenv("MAX_PAGE_SIZE", "50")))

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))

    @property
    def session_max_age_seconds(self) -> int:
        return self.session_max_age_days * 24 * 60 * 60

    @property
    def secure_cookies(self) -> bool:
        return self.environment.lower() != "development"


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module; tests build their own
# ``Settings`` instances and pass them to ``create_app``.
settings = Settings()
