# src/services/click_tracker.py

"""Record a visitor's buy-click and send them to the affiliate link."""

import asyncio
import logging
import webbrowser

from src.backend.base_client import BackendError
from src.backend.deals_client import DealsClient
from src.models.deal import Deal

logger = logging.getLogger("steal_deals.clicks")


class ClickTracker:
    """Count a click on the backend, then open the deal.

    The increment is awaited first. Only after it succeeds is the local
    counter bumped and the link opened, so a failed increment never
    opens the link and clicks are never overcounted locally.
    """

    def __init__(self, client: DealsClient) -> None:
        self.client = client

    async def record_click(self, deal: Deal) -> None:
        """Increment ``deal``'s clicks and open its affiliate URL.

        Raises:
            BackendError: the increment failed; nothing was opened.
        """
        try:
            await asyncio.to_thread(self.client.increment_clicks, deal.id)
        except BackendError:
            logger.error(
                "Failed to update click count for deal %s",
                deal.id,
                exc_info=True,
            )
            raise

        deal.clicks += 1
        webbrowser.open(deal.affiliate_url, new=2)
        logger.info(
            "Opened deal %s (%d clicks)", deal.id, deal.clicks
        )
