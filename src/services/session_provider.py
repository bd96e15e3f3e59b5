# src/services/session_provider.py

"""Owner of the signed-in session for the lifetime of the application."""

import asyncio
import logging
from collections.abc import Callable

from src.backend.auth_client import AuthClient
from src.backend.base_client import BackendError
from src.config.settings import Settings
from src.models.session import AuthEvent, Session, User

logger = logging.getLogger("steal_deals.session")

AuthListener = Callable[[AuthEvent, Session | None], None]


class AuthorizationError(Exception):
    """The caller lacks a session or the admin role."""

    def __init__(self, message: str, requires_login: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.requires_login = requires_login


class Subscription:
    """Handle returned by :meth:`SessionProvider.subscribe`."""

    def __init__(
        self,
        provider: "SessionProvider",
        listener: AuthListener,
    ) -> None:
        self._provider = provider
        self._listener = listener

    def unsubscribe(self) -> None:
        """Stop receiving auth events. Safe to call twice."""
        self._provider._remove_listener(self._listener)


class SessionProvider:
    """Holds the session in memory and broadcasts auth state changes.

    Created by the application, started on mount and closed on unmount.
    Blocking auth calls run in a worker thread; listeners are always
    invoked on the event loop.
    """

    def __init__(
        self,
        auth_client: AuthClient,
        settings: Settings | None = None,
    ) -> None:
        self.auth_client = auth_client
        self.settings = settings or Settings()
        self._session: Session | None = None
        self._listeners: list[AuthListener] = []

    @property
    def session(self) -> Session | None:
        """The current session without refreshing it."""
        return self._session

    def current_access_token(self) -> str | None:
        """Access token for outgoing requests, if signed in."""
        return self._session.access_token if self._session else None

    async def start(self) -> None:
        """Begin a provider lifetime with no session."""
        self._session = None
        logger.info("Session provider started")

    async def close(self) -> None:
        """Drop the session and listeners and release the HTTP client."""
        self._listeners.clear()
        self._session = None
        self.auth_client.close()
        logger.info("Session provider closed")

    def subscribe(self, listener: AuthListener) -> Subscription:
        """Register ``listener`` for sign-in, sign-out and refresh events."""
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _remove_listener(self, listener: AuthListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: AuthEvent) -> None:
        logger.debug("Auth event %s", event.value)
        for listener in list(self._listeners):
            listener(event, self._session)

    async def get_session(self) -> Session | None:
        """Current session, refreshed first if it is about to expire.

        A failed refresh ends the session and emits ``SIGNED_OUT``.
        """
        session = self._session
        if session is None:
            return None
        if not session.is_expired(self.settings.SESSION_REFRESH_MARGIN):
            return session

        try:
            refreshed = await asyncio.to_thread(
                self.auth_client.refresh_session,
                session.refresh_token,
            )
        except BackendError as exc:
            logger.warning(
                "Session refresh for %s failed: %s",
                session.user.email,
                exc,
            )
            self._session = None
            self._emit(AuthEvent.SIGNED_OUT)
            return None

        self._session = refreshed
        self._emit(AuthEvent.TOKEN_REFRESHED)
        return refreshed

    async def sign_in(self, email: str, password: str) -> Session:
        """Sign in with a password and broadcast ``SIGNED_IN``."""
        session = await asyncio.to_thread(
            self.auth_client.sign_in_with_password, email, password
        )
        self._session = session
        self._emit(AuthEvent.SIGNED_IN)
        return session

    async def sign_up(self, email: str, password: str) -> Session | None:
        """Create an account; signs in when the backend returns a session."""
        session = await asyncio.to_thread(
            self.auth_client.sign_up, email, password
        )
        if session is not None:
            self._session = session
            self._emit(AuthEvent.SIGNED_IN)
        return session

    async def sign_out(self) -> None:
        """Revoke the session remotely, then forget it locally.

        When the remote call fails the local session is kept and the
        :class:`BackendError` propagates.
        """
        session = self._session
        if session is None:
            return
        await asyncio.to_thread(
            self.auth_client.sign_out, session.access_token
        )
        self._session = None
        logger.info("Signed out %s", session.user.email)
        self._emit(AuthEvent.SIGNED_OUT)

    async def is_admin(self, user: User) -> bool:
        """Role lookup for ``user`` with the current access token."""
        token = self.current_access_token() or ""
        return await asyncio.to_thread(
            self.auth_client.has_role,
            user.id,
            self.settings.ADMIN_ROLE,
            token,
        )
