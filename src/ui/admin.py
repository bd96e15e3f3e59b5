# src/ui/admin.py

"""Admin console screen: deal form plus the list of existing deals."""

import logging
from typing import Any, cast

from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Select,
    Static,
    Switch,
)

from src.backend.base_client import BackendError
from src.backend.deals_client import DealsClient
from src.config.settings import Settings
from src.filters.deal_validator import DealValidationError, PriceRuleError
from src.models.deal import Category, Deal
from src.services.admin_editor import AdminDealEditor
from src.services.session_provider import AuthorizationError, SessionProvider
from src.ui.dialogs import ConfirmDialog, LoginScreen
from src.ui.storefront import format_price

logger = logging.getLogger("steal_deals.ui.admin")

_TEXT_FIELDS = (
    "title",
    "image_url",
    "original_price",
    "discounted_price",
    "affiliate_url",
)


class AdminScreen(Screen[None]):
    """Create, edit and delete deals. Only usable by administrators."""

    BINDINGS = [
        Binding("e", "edit_deal", "Edit"),
        Binding("d", "delete_deal", "Delete"),
        Binding("escape", "back", "Back"),
    ]

    def __init__(
        self,
        sessions: SessionProvider,
        deals_client: DealsClient,
    ) -> None:
        super().__init__()
        self.settings = Settings()
        self.sessions = sessions
        self.editor = AdminDealEditor(sessions, deals_client)

    def compose(self) -> ComposeResult:
        """Build the form and deal list."""
        symbol = self.settings.CURRENCY_SYMBOL

        yield Header()
        yield Container(
            Static("Loading...", id="admin_status"),
            Horizontal(
                Vertical(
                    Static("➕ Add New Deal", id="form_title"),
                    Static(
                        "Fill in the details to create a new deal",
                        id="form_description",
                    ),
                    Label("Product Title"),
                    Input(
                        placeholder="Amazing Product Name",
                        max_length=self.settings.TITLE_MAX_LENGTH,
                        id="title",
                    ),
                    Label("Image URL"),
                    Input(
                        placeholder="https://example.com/image.jpg",
                        id="image_url",
                    ),
                    Label(f"Original Price ({symbol})"),
                    Input(placeholder="999", id="original_price"),
                    Label(f"Discounted Price ({symbol})"),
                    Input(placeholder="499", id="discounted_price"),
                    Label("Affiliate URL"),
                    Input(
                        placeholder="https://affiliate-link.com",
                        id="affiliate_url",
                    ),
                    Label("Category"),
                    Select(
                        [(c.value, c.value) for c in Category],
                        prompt="Select category",
                        id="category",
                    ),
                    Horizontal(
                        Label("Mark as Trending"),
                        Switch(value=False, id="is_trending"),
                        id="trending_row",
                    ),
                    Horizontal(
                        Button("Add Deal", variant="primary", id="submit_btn"),
                        Button("Cancel", id="cancel_btn"),
                        id="form_buttons",
                    ),
                    id="deal_form",
                ),
                Vertical(
                    Static("Existing Deals (0)", id="list_title"),
                    DataTable(
                        id="admin_table",
                        zebra_stripes=True,
                        cursor_type="row",
                    ),
                    Static(
                        "No deals yet. Add your first deal!",
                        id="list_empty",
                    ),
                    id="deal_list",
                ),
                id="admin_body",
            ),
            id="admin_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Hide the console until the session passes the admin gate."""
        self._table().add_columns("Title", "Category", "Price", "Clicks")
        self.query_one("#admin_body").display = False
        self.query_one("#cancel_btn", Button).display = False
        self.run_worker(self.open_console(), exclusive=True, group="admin")

    def _table(self) -> DataTable[str]:
        return cast(
            DataTable[str],
            self.query_one("#admin_table", DataTable),
        )

    # ── Access gate ──────────────────────────────────────

    async def open_console(self) -> None:
        """Check the admin gate, then list deals."""
        try:
            await self.editor.authorize()
        except AuthorizationError as exc:
            self._deny(exc)
            return

        self.query_one("#admin_status", Static).display = False
        self.query_one("#admin_body").display = True
        await self.load_deals()

    def _deny(self, exc: AuthorizationError) -> None:
        """Leave the console after a failed gate check."""
        self.notify(exc.message, title="Access Denied", severity="error")
        self.app.pop_screen()
        if exc.requires_login:
            self.app.push_screen(LoginScreen(self.sessions))

    # ── Deal list ────────────────────────────────────────

    async def load_deals(self) -> None:
        """Re-read the deal list."""
        try:
            await self.editor.refresh()
        except BackendError:
            logger.error("Failed to fetch deals", exc_info=True)
            self.notify(
                "Failed to fetch deals", title="Error", severity="error"
            )
            return
        self.populate_table()

    def populate_table(self) -> None:
        """Redraw the deal list from the editor."""
        table = self._table()
        table.clear()
        for deal in self.editor.deals:
            table.add_row(
                deal.title[:40],
                deal.category.value,
                format_price(deal.discounted_price),
                str(deal.clicks),
            )
        count = len(self.editor.deals)
        self.query_one("#list_title", Static).update(
            f"Existing Deals ({count})"
        )
        self.query_one("#list_empty", Static).display = count == 0

    def _selected_deal(self) -> Deal | None:
        row = self._table().cursor_row
        if 0 <= row < len(self.editor.deals):
            return self.editor.deals[row]
        return None

    # ── Form ─────────────────────────────────────────────

    def read_form(self) -> dict[str, Any]:
        """Current form values; prices stay as typed text."""
        values: dict[str, Any] = {
            name: self.query_one(f"#{name}", Input).value
            for name in _TEXT_FIELDS
        }
        category = self.query_one("#category", Select).value
        values["category"] = category if isinstance(category, str) else ""
        values["is_trending"] = self.query_one("#is_trending", Switch).value
        return values

    def fill_form(self, values: dict[str, Any]) -> None:
        """Load a deal's values into the form."""
        for name in _TEXT_FIELDS:
            self.query_one(f"#{name}", Input).value = str(values[name])
        self.query_one("#category", Select).value = values["category"]
        self.query_one("#is_trending", Switch).value = bool(
            values["is_trending"]
        )

    def reset_form(self) -> None:
        """Blank the form and return to create mode."""
        for name in _TEXT_FIELDS:
            self.query_one(f"#{name}", Input).value = ""
        self.query_one("#category", Select).clear()
        self.query_one("#is_trending", Switch).value = False
        self.editor.cancel_edit()
        self._show_mode()

    def _show_mode(self) -> None:
        editing = self.editor.editing is not None
        self.query_one("#form_title", Static).update(
            "✏️ Edit Deal" if editing else "➕ Add New Deal"
        )
        self.query_one("#form_description", Static).update(
            "Update the deal details"
            if editing
            else "Fill in the details to create a new deal"
        )
        self.query_one("#submit_btn", Button).label = (
            "Update Deal" if editing else "Add Deal"
        )
        self.query_one("#cancel_btn", Button).display = editing

    async def submit_form(self) -> None:
        """Validate and save the form, then re-read the list."""
        submit_btn = self.query_one("#submit_btn", Button)
        submit_btn.disabled = True
        submit_btn.label = "Saving..."
        try:
            outcome = await self.editor.submit(self.read_form())
        except PriceRuleError as exc:
            self.notify(exc.message, title="Error", severity="error")
        except DealValidationError as exc:
            self.notify(
                exc.message, title="Validation Error", severity="error"
            )
        except AuthorizationError as exc:
            self._deny(exc)
            return
        except BackendError as exc:
            logger.error("Failed to save deal", exc_info=True)
            self.notify(
                str(exc) or "Failed to save deal",
                title="Error",
                severity="error",
            )
        else:
            self.notify(f"Deal {outcome} successfully", title="Success")
            self.reset_form()
            self.populate_table()
        submit_btn.disabled = False
        self._show_mode()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle form buttons."""
        if event.button.id == "submit_btn":
            self.run_worker(self.submit_form(), exclusive=True, group="admin")
        elif event.button.id == "cancel_btn":
            self.reset_form()

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Selecting a row opens it for editing."""
        self.action_edit_deal()

    def action_edit_deal(self) -> None:
        """Load the selected deal into the form."""
        deal = self._selected_deal()
        if deal is None:
            self.notify("Select a deal first", severity="warning")
            return
        self.fill_form(self.editor.begin_edit(deal))
        self._show_mode()

    @work(exclusive=True, group="admin-delete")
    async def action_delete_deal(self) -> None:
        """Ask for confirmation, then delete the selected deal."""
        deal = self._selected_deal()
        if deal is None:
            self.notify("Select a deal first", severity="warning")
            return
        confirmed = await self.app.push_screen_wait(
            ConfirmDialog("Are you sure you want to delete this deal?")
        )
        await self.delete_deal(deal, confirmed=bool(confirmed))

    async def delete_deal(self, deal: Deal, *, confirmed: bool) -> None:
        """Delete ``deal`` if confirmed and redraw the list."""
        was_editing = (
            self.editor.editing is not None
            and self.editor.editing.id == deal.id
        )
        try:
            deleted = await self.editor.delete(deal.id, confirmed=confirmed)
        except AuthorizationError as exc:
            self._deny(exc)
            return
        except BackendError:
            logger.error("Failed to delete deal %s", deal.id, exc_info=True)
            self.notify(
                "Failed to delete deal", title="Error", severity="error"
            )
            return
        if not deleted:
            return
        self.notify("Deal deleted successfully", title="Success")
        if was_editing:
            self.reset_form()
        self.populate_table()

    def action_back(self) -> None:
        """Return to the storefront."""
        self.app.pop_screen()
