# src/models/session.py

"""Authenticated user and session records returned by the auth backend."""

import time
from dataclasses import dataclass
from enum import Enum


class AuthEvent(Enum):
    """Session changes broadcast to subscribers."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


@dataclass
class User:
    """The signed-in account."""

    id: str
    email: str = ""


@dataclass
class Session:
    """Access/refresh token pair for a signed-in user."""

    access_token: str
    refresh_token: str
    expires_at: float
    user: User

    def is_expired(self, margin: float = 0.0) -> bool:
        """True once ``expires_at`` is within ``margin`` seconds."""
        return time.time() >= self.expires_at - margin
