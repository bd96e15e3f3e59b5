# src/services/admin_editor.py

"""Create, update and delete deals on behalf of an administrator."""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from src.backend.base_client import BackendError
from src.backend.deals_client import DealsClient
from src.filters.deal_validator import DealValidator
from src.models.deal import Deal
from src.models.session import Session
from src.services.session_provider import AuthorizationError, SessionProvider

logger = logging.getLogger("steal_deals.admin")


class AdminDealEditor:
    """Admin console state: the deal list and the deal being edited.

    The session and admin role are checked when the console opens and
    again before every write. After any successful write the list is
    re-read from the backend instead of being patched locally.
    """

    def __init__(
        self,
        sessions: SessionProvider,
        client: DealsClient,
    ) -> None:
        self.sessions = sessions
        self.client = client
        self.deals: list[Deal] = []
        self.editing: Deal | None = None

    async def authorize(self) -> Session:
        """Require a signed-in administrator.

        Raises:
            AuthorizationError: no session (``requires_login``), or the
                role lookup failed or found no admin role.
        """
        session = await self.sessions.get_session()
        if session is None:
            raise AuthorizationError(
                "Please sign in to continue", requires_login=True
            )

        try:
            is_admin = await self.sessions.is_admin(session.user)
        except BackendError as exc:
            logger.warning(
                "Role lookup for %s failed: %s", session.user.email, exc
            )
            is_admin = False

        if not is_admin:
            logger.warning(
                "Denied admin access to %s", session.user.email
            )
            raise AuthorizationError("You don't have admin privileges")
        return session

    async def refresh(self) -> list[Deal]:
        """Re-read every deal, newest first."""
        self.deals = await asyncio.to_thread(self.client.select_deals)
        return self.deals

    def begin_edit(self, deal: Deal) -> dict[str, Any]:
        """Enter edit mode for ``deal``; returns its values as form text."""
        self.editing = deal
        return {
            "title": deal.title,
            "image_url": deal.image_url,
            "original_price": f"{deal.original_price:g}",
            "discounted_price": f"{deal.discounted_price:g}",
            "affiliate_url": deal.affiliate_url,
            "category": deal.category.value,
            "is_trending": deal.is_trending,
        }

    def cancel_edit(self) -> None:
        """Leave edit mode without writing."""
        self.editing = None

    async def submit(self, data: Mapping[str, Any]) -> str:
        """Validate the form and create or fully replace a deal.

        Returns ``"created"`` or ``"updated"``.

        Raises:
            DealValidationError: a field failed schema validation.
            PriceRuleError: discounted price is not below the original.
            AuthorizationError: the admin re-check failed.
            BackendError: the write or the re-read failed.
        """
        form = DealValidator.validate_form(data)
        await self.authorize()

        row = form.to_row()
        editing = self.editing
        if editing is not None:
            await asyncio.to_thread(self.client.update_deal, editing.id, row)
            outcome = "updated"
        else:
            await asyncio.to_thread(self.client.insert_deal, row)
            outcome = "created"

        logger.info("Deal '%s' %s", form.title, outcome)
        self.editing = None
        await self.refresh()
        return outcome

    async def delete(self, deal_id: str, *, confirmed: bool) -> bool:
        """Delete a deal once the administrator has confirmed.

        Returns ``False`` (and sends nothing) when not confirmed.
        """
        if not confirmed:
            logger.info("Delete of deal %s cancelled", deal_id)
            return False

        await self.authorize()
        await asyncio.to_thread(self.client.delete_deal, deal_id)
        if self.editing is not None and self.editing.id == deal_id:
            self.editing = None
        await self.refresh()
        return True
