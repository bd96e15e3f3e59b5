# src/ui/storefront.py

"""Public storefront screen: trending deals, search, category filter."""

import logging
from typing import cast

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import Screen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Select,
    Static,
)

from src.backend.base_client import BackendError
from src.backend.deals_client import DealsClient
from src.config.settings import Settings
from src.models.deal import Category, Deal
from src.models.session import AuthEvent, Session
from src.services.click_tracker import ClickTracker
from src.services.deal_store import DealStore
from src.services.session_provider import SessionProvider, Subscription

logger = logging.getLogger("steal_deals.ui")

_TABLE_COLUMNS = ("Deal", "Price", "Was", "Off", "Category", "Grabbed", "")


def format_price(value: float) -> str:
    """Render a price like ``₹1,299`` or ``₹1,299.5``."""
    amount = f"{value:,.2f}".rstrip("0").rstrip(".")
    return f"{Settings.CURRENCY_SYMBOL}{amount}"


def _badges(deal: Deal) -> Text:
    """Trending and big-discount badges for a deal row."""
    badges = Text()
    if deal.is_trending:
        badges.append("🔥 Trending ", style="bold red")
    if deal.discount_percentage >= Settings.HOT_DISCOUNT_BADGE:
        badges.append(f"{deal.discount_percentage}% OFF", style="bold magenta")
    return badges


class StorefrontScreen(Screen[None]):
    """Lists deals and forwards buy-clicks, search and category changes."""

    BINDINGS = [
        Binding("r", "refresh", "Refresh"),
        Binding("c", "copy_url", "Copy URL"),
        Binding("l", "toggle_login", "Login/Logout"),
        Binding("a", "app.open_admin", "Admin"),
    ]

    def __init__(
        self,
        sessions: SessionProvider,
        deals_client: DealsClient,
    ) -> None:
        super().__init__()
        self.settings = Settings()
        self.sessions = sessions
        self.store = DealStore(deals_client)
        self.click_tracker = ClickTracker(deals_client)
        self.is_admin: bool = False
        self._subscription: Subscription | None = None
        self._rows: dict[str, list[Deal]] = {
            "trending_table": [],
            "deals_table": [],
        }

    def compose(self) -> ComposeResult:
        """Build the storefront widget tree."""
        categories = [self.settings.ALL_CATEGORIES] + [
            c.value for c in Category
        ]

        yield Header()
        yield Container(
            Horizontal(
                Static("🏷️ Steal Deals India", id="brand"),
                Input(placeholder="Search for deals...", id="search_input"),
                Select(
                    [(c, c) for c in categories],
                    value=self.settings.ALL_CATEGORIES,
                    allow_blank=False,
                    id="category_select",
                ),
                Static("Guest", id="user_label"),
                Button("Login", id="login_btn"),
                Button("Admin", variant="warning", id="admin_btn"),
                id="top_bar",
            ),
            Static(
                "Steal the Best Deals. Handpicked deals from "
                "Amazon, Flipkart, Myntra & more",
                id="hero",
            ),
            Static("🔥 Trending Deals", id="trending_heading"),
            DataTable(
                id="trending_table",
                zebra_stripes=True,
                cursor_type="row",
            ),
            Horizontal(
                Static("All Deals", id="results_heading"),
                Static("", id="results_count"),
                id="results_bar",
            ),
            Static("Loading amazing deals...", id="status"),
            DataTable(
                id="deals_table",
                zebra_stripes=True,
                cursor_type="row",
            ),
            Static(
                "Affiliate links help us keep this service free "
                "for everyone.",
                id="disclosure",
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure tables and follow the session."""
        for table_id in self._rows:
            table = self._table(table_id)
            table.add_columns(*_TABLE_COLUMNS)
        self._set_admin(False)
        self._show_user(self.sessions.session)
        self._subscription = self.sessions.subscribe(self._on_auth_change)
        if self.sessions.session is not None:
            self.run_worker(
                self.refresh_admin_status(self.sessions.session),
                group="auth",
            )

    def on_unmount(self) -> None:
        """Stop following the session."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def on_screen_resume(self) -> None:
        """Re-read deals whenever the storefront becomes active."""
        self.action_refresh()

    def _table(self, table_id: str) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one(f"#{table_id}", DataTable),
        )

    # ── Session ──────────────────────────────────────────

    def _on_auth_change(
        self, event: AuthEvent, session: Session | None
    ) -> None:
        logger.debug("Storefront saw auth event %s", event.value)
        self._show_user(session)
        if session is None:
            self._set_admin(False)
        else:
            self.run_worker(self.refresh_admin_status(session), group="auth")

    def _show_user(self, session: Session | None) -> None:
        label = self.query_one("#user_label", Static)
        login_btn = self.query_one("#login_btn", Button)
        if session is None:
            label.update("Guest")
            login_btn.label = "Login"
        else:
            label.update(session.user.email)
            login_btn.label = "Logout"

    def _set_admin(self, is_admin: bool) -> None:
        self.is_admin = is_admin
        self.query_one("#admin_btn", Button).display = is_admin

    async def refresh_admin_status(self, session: Session) -> None:
        """Show the Admin button only to administrators."""
        try:
            is_admin = await self.sessions.is_admin(session.user)
        except BackendError as exc:
            logger.warning("Admin status check failed: %s", exc)
            is_admin = False
        self._set_admin(is_admin)

    # ── Deals ────────────────────────────────────────────

    def action_refresh(self) -> None:
        """Fetch deals in the background."""
        self.run_worker(self.load_deals(), exclusive=True, group="deals")

    async def load_deals(self) -> None:
        """Fetch all deals and redraw both views."""
        self.query_one("#status", Static).update(
            "Loading amazing deals..."
        )
        try:
            await self.store.fetch()
        except BackendError:
            self.notify(
                "Failed to fetch deals", title="Error", severity="error"
            )
        self.populate_tables()

    def populate_tables(self) -> None:
        """Fill the trending and filtered tables from the store."""
        self._fill_table("trending_table", self.store.trending)
        has_trending = bool(self.store.trending)
        self.query_one("#trending_heading", Static).display = has_trending
        self._table("trending_table").display = has_trending

        self._fill_table("deals_table", self.store.filtered)
        self.query_one("#results_heading", Static).update(
            self.store.heading
        )
        self.query_one("#results_count", Static).update(
            self.store.count_label
        )
        self.query_one("#status", Static).update(
            ""
            if self.store.filtered
            else "No deals found. Try adjusting your filters!"
        )

    def _fill_table(self, table_id: str, deals: list[Deal]) -> None:
        table = self._table(table_id)
        table.clear()
        self._rows[table_id] = list(deals)
        for deal in deals:
            table.add_row(
                deal.title[:60],
                Text(format_price(deal.discounted_price), style="bold green"),
                Text(format_price(deal.original_price), style="strike dim"),
                f"{deal.discount_percentage}% off",
                deal.category.value,
                f"{deal.clicks} people grabbed this deal",
                _badges(deal),
            )

    def on_input_changed(self, event: Input.Changed) -> None:
        """Filter as the search term is typed."""
        if event.input.id == "search_input":
            self.store.set_search(event.value)
            self.populate_tables()

    def on_select_changed(self, event: Select.Changed) -> None:
        """Filter by the chosen category."""
        if event.select.id == "category_select" and isinstance(
            event.value, str
        ):
            self.store.set_category(event.value)
            self.populate_tables()

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Buy the selected deal."""
        rows = self._rows.get(event.data_table.id or "", [])
        if 0 <= event.cursor_row < len(rows):
            self.run_worker(self.buy_deal(rows[event.cursor_row]))

    async def buy_deal(self, deal: Deal) -> None:
        """Count the click, then open the affiliate link."""
        try:
            await self.click_tracker.record_click(deal)
        except BackendError:
            self.notify(
                "Could not update click count",
                title="Error",
                severity="error",
            )
            return
        self.notify("Opening deal in new tab", title="Redirecting...")
        self.populate_tables()

    def _selected_deal(self) -> Deal | None:
        focused = self.focused
        table_id = (
            focused.id
            if isinstance(focused, DataTable) and focused.id in self._rows
            else "deals_table"
        )
        rows = self._rows[table_id]
        row = self._table(table_id).cursor_row
        if 0 <= row < len(rows):
            return rows[row]
        return None

    def action_copy_url(self) -> None:
        """Copy the selected deal's affiliate URL to the clipboard."""
        deal = self._selected_deal()
        if deal is None:
            self.notify("No deal selected", severity="warning")
            return
        try:
            import pyperclip  # type: ignore[import-untyped]

            pyperclip.copy(deal.affiliate_url)
            self.notify("URL Copied")
        except Exception:
            logger.error(
                "Failed to copy URL to clipboard",
                exc_info=True,
            )
            self.notify("Clipboard unavailable", severity="warning")

    # ── Header buttons ───────────────────────────────────

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle header button clicks."""
        if event.button.id == "login_btn":
            await self.action_toggle_login()
        elif event.button.id == "admin_btn":
            await self.app.run_action("open_admin")

    async def action_toggle_login(self) -> None:
        """Open the sign-in screen, or sign out when signed in."""
        if self.sessions.session is None:
            await self.app.run_action("login")
        else:
            await self.app.run_action("sign_out")
