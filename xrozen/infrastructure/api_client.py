"""
Remote workflow API client (read side).

Configuration (base URL, bearer token, timeout) is passed in at
construction time; the client never looks up credentials on its own.
Responses are wrapped as {"success": ..., "data": ...}; the client unwraps
"data" and returns raw dicts, which go through application.normalizer
before any arithmetic.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from xrozen.config import Settings

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """Remote API call failed (network error, non-2xx status or bad payload)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UnauthorizedError(ApiError):
    """HTTP 401 from the remote API."""


class RemoteApiClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings, token: Optional[str] = None) -> "RemoteApiClient":
        return cls(settings.API_BASE_URL, token=token, timeout=settings.API_TIMEOUT)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get(self, endpoint: str, params: Optional[dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        logger.debug("GET %s params=%s", url, params)
        try:
            resp = self.session.get(url, headers=self._headers(), params=params or None, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(f"GET {endpoint} failed: {e}") from e

        if resp.status_code == 401:
            raise UnauthorizedError("Unauthorized - please login again", status_code=401)
        if not resp.ok:
            message = f"HTTP {resp.status_code}"
            try:
                body = resp.json()
                if isinstance(body, dict) and body.get("message"):
                    message = str(body["message"])
            except ValueError:
                pass
            raise ApiError(f"GET {endpoint}: {message}", status_code=resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            raise ApiError(f"GET {endpoint}: response is not JSON", status_code=resp.status_code) from e

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    def _get_list(self, endpoint: str, params: Optional[dict[str, Any]] = None) -> list[dict]:
        data = self._get(endpoint, params)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ApiError(f"GET {endpoint}: expected a list, got {type(data).__name__}")
        return data

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def get_profile(self, user_id: Optional[str] = None) -> Optional[dict]:
        """Profile of user_id, or of the authenticated user ("/profiles/me")."""
        endpoint = f"/profiles/{user_id}" if user_id else "/profiles/me"
        return self._get(endpoint)

    def list_invoices(self, filters: Optional[dict[str, Any]] = None) -> list[dict]:
        return self._get_list("/invoices", filters)

    def list_invoice_items(self, invoice_id: str) -> list[dict]:
        return self._get_list(f"/invoices/{invoice_id}/items")

    def list_projects(self, filters: Optional[dict[str, Any]] = None) -> list[dict]:
        return self._get_list("/projects", filters)

    def list_shared_projects(self) -> list[dict]:
        return self._get_list("/my-shared-projects")

    def list_payments(self, filters: Optional[dict[str, Any]] = None) -> list[dict]:
        return self._get_list("/payments", filters)
