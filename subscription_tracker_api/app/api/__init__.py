"""
HTTP layer.

``router`` aggregates the domain routers; ``deps`` provides the FastAPI
dependencies (settings, services, current user) and ``errors`` the
exception handlers that render every failure as ``{"error": ...}``.
"""
