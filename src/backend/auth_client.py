# src/backend/auth_client.py

"""Password auth, token refresh and role lookup on the hosted backend."""

import time
from typing import Any

from src.backend.base_client import BackendError, BaseBackendClient
from src.config.settings import Settings
from src.models.session import Session, User


def _parse_user(data: Any) -> User:
    """Build a :class:`User` from an auth ``user`` object."""
    if not isinstance(data, dict) or not data.get("id"):
        raise BackendError("Auth response is missing the user")
    return User(id=str(data["id"]), email=str(data.get("email") or ""))


def _parse_session(data: Any) -> Session:
    """Build a :class:`Session` from a token grant response."""
    if not isinstance(data, dict) or not data.get("access_token"):
        raise BackendError("Auth response is missing the access token")
    expires_at = data.get("expires_at")
    if expires_at is None:
        expires_at = time.time() + float(data.get("expires_in") or 3600)
    return Session(
        access_token=str(data["access_token"]),
        refresh_token=str(data.get("refresh_token") or ""),
        expires_at=float(expires_at),
        user=_parse_user(data.get("user")),
    )


class AuthClient(BaseBackendClient):
    """Thin client over the backend's auth endpoints and role table."""

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__("auth", settings)

    def sign_in_with_password(self, email: str, password: str) -> Session:
        """Exchange email and password for a session."""
        data = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            payload={"email": email, "password": password},
        )
        session = _parse_session(data)
        self.logger.info("Signed in as %s", session.user.email)
        return session

    def sign_up(self, email: str, password: str) -> Session | None:
        """Register an account.

        Returns a session when the backend confirms the account
        immediately, ``None`` when email confirmation is pending.
        """
        data = self._request(
            "POST",
            "/auth/v1/signup",
            payload={"email": email, "password": password},
        )
        if isinstance(data, dict) and data.get("access_token"):
            return _parse_session(data)
        self.logger.info("Sign-up for %s awaits confirmation", email)
        return None

    def refresh_session(self, refresh_token: str) -> Session:
        """Trade a refresh token for a fresh session."""
        data = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            payload={"refresh_token": refresh_token},
        )
        return _parse_session(data)

    def sign_out(self, access_token: str) -> None:
        """Revoke the session's tokens on the backend."""
        self._request(
            "POST",
            "/auth/v1/logout",
            access_token=access_token,
        )

    def has_role(self, user_id: str, role: str, access_token: str) -> bool:
        """True when the role table holds ``(user_id, role)``."""
        rows = self._request(
            "GET",
            f"/rest/v1/{self.settings.ROLES_TABLE}",
            params={
                "select": "role",
                "user_id": f"eq.{user_id}",
                "role": f"eq.{role}",
            },
            access_token=access_token,
        )
        return bool(rows)
