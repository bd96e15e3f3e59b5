# src/filters/deal_validator.py

"""Deal validation: admin form input before writes, backend rows after reads."""

import logging
from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    Field,
    StringConstraints,
    TypeAdapter,
    ValidationError,
)

from src.config.settings import Settings
from src.models.deal import Category, Deal

logger = logging.getLogger("steal_deals.filters")

_URL_ADAPTER = TypeAdapter(AnyUrl)
_DEAL_ADAPTER = TypeAdapter(Deal)

# Strictly positive and finite ("inf" and "nan" are rejected)
_Price = Annotated[float, Field(gt=0, allow_inf_nan=False)]

# Message shown for the first failing field of the admin form
_FIELD_MESSAGES: dict[str, str] = {
    "title": (
        f"Title must be between {Settings.TITLE_MIN_LENGTH} and "
        f"{Settings.TITLE_MAX_LENGTH} characters"
    ),
    "image_url": "Must be a valid URL",
    "affiliate_url": "Must be a valid URL",
    "original_price": "Price must be positive",
    "discounted_price": "Price must be positive",
    "category": "Category is required",
}


def _check_url(value: str) -> str:
    """Reject strings that do not parse as an absolute URL."""
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError as exc:
        raise ValueError("Must be a valid URL") from exc
    return value


class DealValidationError(ValueError):
    """The admin form failed schema validation."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class PriceRuleError(DealValidationError):
    """The discounted price is not below the original price."""

    def __init__(self) -> None:
        super().__init__(
            "discounted_price",
            "Discounted price must be less than original price",
        )


class DealForm(BaseModel):
    """Validated payload for creating or fully replacing a deal."""

    title: Annotated[
        str,
        StringConstraints(
            strip_whitespace=True,
            min_length=Settings.TITLE_MIN_LENGTH,
            max_length=Settings.TITLE_MAX_LENGTH,
        ),
    ]
    image_url: Annotated[str, AfterValidator(_check_url)]
    original_price: _Price
    discounted_price: _Price
    affiliate_url: Annotated[str, AfterValidator(_check_url)]
    category: Category
    is_trending: bool = False

    def to_row(self) -> dict[str, Any]:
        """Column values for an insert or a full-row update."""
        return self.model_dump(mode="json")


class DealValidator:
    """Validate deals entering or leaving the backend."""

    @staticmethod
    def validate_form(data: Mapping[str, Any]) -> DealForm:
        """Validate raw admin form values.

        Prices may be given as text; they are parsed as numbers.

        Raises:
            DealValidationError: the first failing field, with a
                user-facing message.
            PriceRuleError: the schema passed but the discounted price
                is not strictly below the original price.
        """
        try:
            form = DealForm.model_validate(dict(data))
        except ValidationError as exc:
            first = exc.errors()[0]
            field = str(first["loc"][0]) if first["loc"] else ""
            message = _FIELD_MESSAGES.get(field, first["msg"])
            logger.debug("Deal form rejected on %s: %s", field, first["msg"])
            raise DealValidationError(field, message) from exc

        if form.discounted_price >= form.original_price:
            logger.debug(
                "Deal form rejected: discounted %.2f >= original %.2f",
                form.discounted_price,
                form.original_price,
            )
            raise PriceRuleError()

        return form

    @staticmethod
    def validate_rows(
        rows: list[Any],
    ) -> tuple[list[Deal], int]:
        """Convert backend rows to deals, dropping rows that don't validate.

        Returns the valid deals (input order kept) and the count of
        dropped rows.
        """
        deals: list[Deal] = []
        dropped = 0

        for row in rows:
            try:
                deals.append(_DEAL_ADAPTER.validate_python(row))
            except ValidationError as exc:
                logger.debug(
                    "Dropped invalid deal row (id=%s): %s",
                    row.get("id") if isinstance(row, dict) else None,
                    exc.errors()[0]["msg"],
                )
                dropped += 1

        if dropped:
            logger.warning(
                "Validation dropped %d invalid deal rows",
                dropped,
            )

        return deals, dropped
