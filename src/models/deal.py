# src/models/deal.py

"""Deal data model shared by the storefront, the admin console and the backend client."""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import Field


class Category(str, Enum):
    """Fixed set of categories a deal can be listed under."""

    MOBILES = "Mobiles"
    ELECTRONICS = "Electronics"
    FASHION = "Fashion"
    HOME = "Home"
    BEAUTY = "Beauty"
    SPORTS = "Sports"
    BOOKS = "Books"


def discount_ratio(original_price: float, discounted_price: float) -> float:
    """Unrounded discount in percent; the ranking key for deal views."""
    return (original_price - discounted_price) / original_price * 100


@dataclass
class Deal:
    """A listed discounted product with pricing, category and engagement data.

    Prices are constrained to be positive so the discount can always be
    computed. ``discounted_price < original_price`` is only enforced when an
    administrator writes a deal, not when one is read back.
    """

    id: str
    title: str
    image_url: str
    original_price: Annotated[float, Field(gt=0, allow_inf_nan=False)]
    discounted_price: Annotated[float, Field(gt=0, allow_inf_nan=False)]
    affiliate_url: str
    category: Category
    is_trending: bool = False
    clicks: Annotated[int, Field(ge=0)] = 0
    created_at: datetime | None = None

    @property
    def discount_ratio(self) -> float:
        """Discount in percent without rounding."""
        return discount_ratio(self.original_price, self.discounted_price)

    @property
    def discount_percentage(self) -> int:
        """Discount in whole percent, rounded half up."""
        return math.floor(self.discount_ratio + 0.5)
