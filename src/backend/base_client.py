# src/backend/base_client.py

"""Shared HTTP plumbing for the hosted backend's REST and auth endpoints."""

import json
import logging
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings


class BackendError(Exception):
    """A remote call to the backend failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DealNotFoundError(BackendError):
    """An update or delete matched no deal."""


class BaseBackendClient:
    """Base class for the backend clients.

    Every request carries the project's anon key in the ``apikey`` header
    and a bearer token: the signed-in user's access token when one is
    given, otherwise the anon key itself. Requests are not retried; a
    failure surfaces as :class:`BackendError` on the first attempt.
    """

    def __init__(
        self,
        service_name: str,
        settings: Settings | None = None,
    ) -> None:
        self.service_name = service_name
        self.logger = logging.getLogger(
            f"steal_deals.backend.{service_name}"
        )
        self.settings = settings or Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._base_url = self.settings.BACKEND_URL.rstrip("/")
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _headers(
        self,
        access_token: str | None = None,
        prefer: str | None = None,
    ) -> dict[str, str]:
        """Build request headers for the given caller identity."""
        anon_key = self.settings.BACKEND_ANON_KEY
        headers: dict[str, str] = {
            **self.settings.DEFAULT_HEADERS,
            "apikey": anon_key,
            "Authorization": f"Bearer {access_token or anon_key}",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    @staticmethod
    def _error_message(resp: curl_requests.Response) -> str:
        """Pull the most specific error text out of an error response."""
        try:
            body: Any = resp.json()
        except (json.JSONDecodeError, ValueError):
            return resp.text.strip()[:200] or f"HTTP {resp.status_code}"
        if isinstance(body, dict):
            for key in ("msg", "message", "error_description", "error"):
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
        return f"HTTP {resp.status_code}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        payload: Any = None,
        access_token: str | None = None,
        prefer: str | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Empty bodies (``204 No Content``, ``return=minimal``) decode to
        ``None``.

        Raises:
            BackendError: on missing configuration, transport failure,
                a non-2xx status, or a body that is not JSON.
        """
        if not self._base_url:
            raise BackendError("Backend URL is not configured")

        url = f"{self._base_url}{path}"
        try:
            resp = self.session.request(
                method,
                url,
                params=params,
                json=payload,
                headers=self._headers(access_token, prefer),
                timeout=self._request_timeout,
            )
        except Exception as exc:
            self.logger.error(
                "[%s] %s %s failed: %s",
                self.service_name,
                method,
                path,
                exc,
                exc_info=True,
            )
            raise BackendError(f"Network error: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            message = self._error_message(resp)
            self.logger.warning(
                "[%s] %s %s returned HTTP %d: %s",
                self.service_name,
                method,
                path,
                resp.status_code,
                message,
            )
            raise BackendError(message, status_code=resp.status_code)

        self.logger.debug(
            "[%s] %s %s -> HTTP %d",
            self.service_name,
            method,
            path,
            resp.status_code,
        )
        if not resp.content:
            return None
        try:
            return resp.json()
        except (json.JSONDecodeError, ValueError) as exc:
            self.logger.error(
                "[%s] %s %s returned a non-JSON body",
                self.service_name,
                method,
                path,
            )
            raise BackendError(
                "Malformed backend response", status_code=resp.status_code
            ) from exc

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.session.close()
