"""Subscription Tracker API client.

A small wrapper around the HTTP API built on ``requests``.  The
session cookie set by ``register``/``login`` is kept in the underlying
``requests.Session`` cookie jar, so subsequent calls are authenticated
automatically until ``logout``.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is ``None`` (or an empty value) and
``error`` is a dictionary with ``status_code`` and ``message``.

:meth:`SubscriptionTrackerClient.export_csv` reproduces the browser
export: it requests page 1 of the current query (with the current
limit) and renders that page as CSV.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import requests

from subscription_tracker_api.app.services.export_service import render_csv

logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class SubscriptionTrackerClient:
    """Client for the Subscription Tracker API."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the API, including any ``API_PREFIX``,
                e.g. ``http://localhost:8000``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request and decode the JSON response."""
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    message = exc.response.json().get("error", "")
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    @staticmethod
    def _query_params(query: Dict[str, Any]) -> Dict[str, Any]:
        """Drop unset parameters so the server applies its defaults."""
        return {key: value for key, value in query.items() if value not in (None, "")}

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def register(self, email: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/auth/register", json_body={"email": email, "password": password})

    def login(self, email: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/auth/login", json_body={"email": email, "password": password})

    def logout(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/auth/logout")

    def me(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", "/auth/me")

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def list_subscriptions(
        self,
        *,
        page: int = 1,
        limit: Optional[int] = None,
        cycle: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Fetch one page of subscriptions.

        Returns the page object (``items``, ``page``, ``limit``, ``total``,
        ``hasNextPage``, ``hasPrevPage``).
        """
        params = self._query_params(
            {"page": page, "limit": limit, "cycle": cycle, "search": search, "sort_by": sort_by, "order": order}
        )
        return self._request("GET", "/subscriptions", params=params)

    def get_subscription(self, subscription_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/subscriptions/{subscription_id}")

    def create_subscription(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create a subscription.

        Args:
            payload: ``name``, ``billing_cycle``, ``is_active``,
                ``base_cost`` and ``tax_rate``.
        """
        return self._request("POST", "/subscriptions", json_body=payload)

    def update_subscription(
        self, subscription_id: str, payload: Dict[str, Any]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("PUT", f"/subscriptions/{subscription_id}", json_body=payload)

    def delete_subscription(self, subscription_id: str) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"/subscriptions/{subscription_id}")
        return error is None, error

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def export_csv(
        self,
        path: Optional[str] = None,
        *,
        limit: Optional[int] = None,
        cycle: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> Tuple[Optional[str], Optional[Error]]:
        """Export the first page of the current query as CSV.

        Only page 1 is exported, with the same filters, sort and limit as
        the listing being viewed.  Use ``GET /subscriptions/export?scope=all``
        to export every matching record.

        Args:
            path: Optional file to write the CSV to.
        Returns:
            A tuple ``(csv_text, error)``.
        """
        data, error = self.list_subscriptions(
            page=1, limit=limit, cycle=cycle, search=search, sort_by=sort_by, order=order
        )
        if error:
            return None, error
        content = render_csv((data or {}).get("items", []))
        if path:
            Path(path).write_text(content, encoding="utf-8")
            logger.info("Wrote %s", path)
        return content, None
