# src/filters/deal_filter.py

"""Category/search filtering and discount ranking of the in-memory deal list."""

import logging

from src.config.settings import Settings
from src.models.deal import Deal

logger = logging.getLogger("steal_deals.filters")


class DealFilter:
    """Derive the storefront's trending and filtered views from all deals."""

    @staticmethod
    def rank_by_discount(deals: list[Deal]) -> list[Deal]:
        """Return a new list sorted by descending discount.

        ``sorted`` is stable, so deals with equal discounts keep their
        input (newest first) order.
        """
        return sorted(deals, key=lambda d: d.discount_ratio, reverse=True)

    @staticmethod
    def filter_by_category(
        deals: list[Deal],
        category: str,
    ) -> list[Deal]:
        """Keep exact category matches; the "All" sentinel keeps everything."""
        if category == Settings.ALL_CATEGORIES:
            return list(deals)
        return [d for d in deals if d.category.value == category]

    @staticmethod
    def filter_by_search(
        deals: list[Deal],
        search_term: str,
    ) -> list[Deal]:
        """Keep deals whose title or category contains the term.

        Matching is a case-insensitive substring test on the term as
        typed, surrounding spaces included. A blank term returns the
        input unchanged.
        """
        if not search_term.strip():
            return list(deals)
        term = search_term.lower()
        return [
            d
            for d in deals
            if term in d.title.lower() or term in d.category.value.lower()
        ]

    @staticmethod
    def filtered(
        deals: list[Deal],
        category: str,
        search_term: str,
    ) -> list[Deal]:
        """Category filter, then search filter, then discount ranking."""
        kept = DealFilter.filter_by_category(deals, category)
        kept = DealFilter.filter_by_search(kept, search_term)
        logger.debug(
            "Filtered %d of %d deals (category=%s, search=%r)",
            len(kept),
            len(deals),
            category,
            search_term,
        )
        return DealFilter.rank_by_discount(kept)

    @staticmethod
    def trending(
        deals: list[Deal],
        limit: int = Settings.TRENDING_LIMIT,
    ) -> list[Deal]:
        """Top ``limit`` trending-flagged deals by discount."""
        flagged = [d for d in deals if d.is_trending]
        return DealFilter.rank_by_discount(flagged)[:limit]
