# src/ui/dialogs.py

"""Modal screens: delete confirmation and email/password sign-in."""

import logging

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Grid, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static

from src.backend.base_client import BackendError
from src.services.session_provider import SessionProvider

logger = logging.getLogger("steal_deals.ui")


class ConfirmDialog(ModalScreen[bool]):
    """Yes/no question; dismisses with ``True`` only on confirm."""

    BINDINGS = [
        Binding("y", "confirm", "Yes"),
        Binding("n,escape", "cancel", "No"),
    ]

    def __init__(self, question: str, confirm_label: str = "Delete") -> None:
        super().__init__()
        self.question = question
        self.confirm_label = confirm_label

    def compose(self) -> ComposeResult:
        yield Grid(
            Label(self.question, id="question"),
            Button(self.confirm_label, variant="error", id="confirm_yes"),
            Button("Cancel", variant="primary", id="confirm_no"),
            id="dialog",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm_yes")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class LoginScreen(ModalScreen[bool]):
    """Email/password sign-in and sign-up.

    Dismisses with ``True`` once a session exists, ``False`` on cancel.
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, sessions: SessionProvider) -> None:
        super().__init__()
        self.sessions = sessions

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("Sign in to Steal Deals", id="login_title"),
            Input(placeholder="you@example.com", id="email_input"),
            Input(
                placeholder="Password",
                password=True,
                id="password_input",
            ),
            Horizontal(
                Button("Sign in", variant="primary", id="sign_in_btn"),
                Button("Sign up", id="sign_up_btn"),
                Button("Cancel", id="login_cancel_btn"),
                id="login_buttons",
            ),
            id="login_box",
        )

    def _credentials(self) -> tuple[str, str] | None:
        email = self.query_one("#email_input", Input).value.strip()
        password = self.query_one("#password_input", Input).value
        if not email or not password:
            self.notify(
                "Email and password are required", severity="warning"
            )
            return None
        return email, password

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "sign_in_btn":
            self.run_worker(self.sign_in(), exclusive=True)
        elif event.button.id == "sign_up_btn":
            self.run_worker(self.sign_up(), exclusive=True)
        elif event.button.id == "login_cancel_btn":
            self.action_cancel()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in either field signs in."""
        self.run_worker(self.sign_in(), exclusive=True)

    async def sign_in(self) -> None:
        """Sign in with the entered credentials."""
        credentials = self._credentials()
        if credentials is None:
            return
        email, password = credentials
        try:
            await self.sessions.sign_in(email, password)
        except BackendError as exc:
            logger.warning("Sign in failed for %s: %s", email, exc)
            self.notify(str(exc), title="Sign in failed", severity="error")
            return
        self.notify(f"Signed in as {email}", title="Welcome back")
        self.dismiss(True)

    async def sign_up(self) -> None:
        """Create an account with the entered credentials."""
        credentials = self._credentials()
        if credentials is None:
            return
        email, password = credentials
        try:
            session = await self.sessions.sign_up(email, password)
        except BackendError as exc:
            logger.warning("Sign up failed for %s: %s", email, exc)
            self.notify(str(exc), title="Sign up failed", severity="error")
            return
        if session is None:
            self.notify(
                "Check your email to confirm your account",
                title="Account created",
            )
            return
        self.notify(f"Signed in as {email}", title="Account created")
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
