# src/ui/app.py

"""Terminal UI for the Steal Deals storefront and admin console."""

import logging

from textual.app import App
from textual.binding import Binding

from src.backend.auth_client import AuthClient
from src.backend.base_client import BackendError
from src.backend.deals_client import DealsClient
from src.config.settings import Settings
from src.services.session_provider import SessionProvider
from src.ui.admin import AdminScreen
from src.ui.dialogs import LoginScreen
from src.ui.storefront import StorefrontScreen

logger = logging.getLogger("steal_deals.ui")


class StealDealsApp(App[None]):
    """Terminal UI for the Steal Deals storefront and admin console.

    The app owns the session provider and the backend clients. The
    storefront is the bottom screen; the admin console and the sign-in
    screen are pushed on top of it.
    """

    CSS_PATH = "styles.tcss"
    TITLE = "Steal Deals"
    SUB_TITLE = "India"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        auth_client: AuthClient | None = None,
        deals_client: DealsClient | None = None,
        open_admin: bool = False,
    ) -> None:
        super().__init__()
        self.settings = Settings()
        self.sessions = SessionProvider(
            auth_client or AuthClient(self.settings), self.settings
        )
        self.deals_client = deals_client or DealsClient(
            self.settings, token_provider=self.sessions.current_access_token
        )
        self.open_admin = open_admin
        self.storefront: StorefrontScreen | None = None

    async def on_mount(self) -> None:
        """Start the session lifetime and show the storefront."""
        await self.sessions.start()
        self.storefront = StorefrontScreen(self.sessions, self.deals_client)
        self.push_screen(self.storefront)
        if self.open_admin:
            self.action_open_admin()

    async def on_unmount(self) -> None:
        """End the session lifetime and release HTTP clients."""
        await self.sessions.close()
        self.deals_client.close()
        logger.info("Steal Deals UI shutting down")

    def action_open_admin(self) -> None:
        """Open the admin console (gated on the admin role)."""
        self.push_screen(AdminScreen(self.sessions, self.deals_client))

    def action_login(self) -> None:
        """Open the sign-in screen."""
        self.push_screen(LoginScreen(self.sessions))

    async def action_sign_out(self) -> None:
        """Sign out and return to the storefront."""
        try:
            await self.sessions.sign_out()
        except BackendError:
            logger.error("Sign out failed", exc_info=True)
            self.notify(
                "Failed to log out", title="Error", severity="error"
            )
            return
        self.notify(
            "You have been successfully logged out", title="Logged out"
        )
        self._return_to_storefront()

    def _return_to_storefront(self) -> None:
        stack = self.screen_stack
        if self.storefront is None or self.storefront not in stack:
            return
        for _ in range(len(stack) - 1 - stack.index(self.storefront)):
            self.pop_screen()
