"""
Top‑level package for the Subscription Tracker API.

This file makes ``subscription_tracker_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``subscription_tracker_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
