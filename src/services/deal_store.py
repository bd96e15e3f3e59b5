# src/services/deal_store.py

"""In-memory deal collection with its trending and filtered views."""

import asyncio
import logging

from src.backend.base_client import BackendError
from src.backend.deals_client import DealsClient
from src.config.settings import Settings
from src.filters.deal_filter import DealFilter
from src.models.deal import Deal

logger = logging.getLogger("steal_deals.store")


class DealStore:
    """Fetches all deals and keeps the derived views current.

    Both views are rebuilt synchronously whenever the collection, the
    search term or the category changes.
    """

    def __init__(
        self,
        client: DealsClient,
        settings: Settings | None = None,
    ) -> None:
        self.client = client
        self.settings = settings or Settings()
        self.deals: list[Deal] = []
        self.search_term: str = ""
        self.category: str = self.settings.ALL_CATEGORIES
        self.trending: list[Deal] = []
        self.filtered: list[Deal] = []
        self.loading: bool = False

    async def fetch(self) -> list[Deal]:
        """Replace the collection with a fresh newest-first read.

        On :class:`BackendError` the previous collection stays as it
        was and the error propagates to the caller.
        """
        self.loading = True
        try:
            deals = await asyncio.to_thread(self.client.select_deals)
        except BackendError as exc:
            logger.error(
                "Failed to fetch deals, keeping %d cached: %s",
                len(self.deals),
                exc,
                exc_info=True,
            )
            raise
        finally:
            self.loading = False

        self.deals = deals
        self._recompute()
        return deals

    def set_search(self, search_term: str) -> None:
        """Update the search term and rebuild the views."""
        self.search_term = search_term
        self._recompute()

    def set_category(self, category: str) -> None:
        """Select a category (or the "All" sentinel) and rebuild the views."""
        self.category = category
        self._recompute()

    @property
    def heading(self) -> str:
        """Section title for the filtered view."""
        if self.category == self.settings.ALL_CATEGORIES:
            return "All Deals"
        return f"{self.category} Deals"

    @property
    def count_label(self) -> str:
        """Result count line for the filtered view."""
        count = len(self.filtered)
        return f"{count} {'deal' if count == 1 else 'deals'} found"

    def _recompute(self) -> None:
        self.trending = DealFilter.trending(
            self.deals, self.settings.TRENDING_LIMIT
        )
        self.filtered = DealFilter.filtered(
            self.deals, self.category, self.search_term
        )
