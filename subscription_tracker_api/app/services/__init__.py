"""
Service layer.

Each service encapsulates business logic for a domain and works
against the store interfaces from ``core.storage``, so the in‑memory
stores can be swapped for a durable backend without touching the API
handlers.
"""
