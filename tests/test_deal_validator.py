# tests/test_deal_validator.py

"""Tests for admin form validation and backend row validation."""

import unittest
from datetime import datetime
from typing import Any

from src.filters.deal_validator import (
    DealValidationError,
    DealValidator,
    PriceRuleError,
)
from src.models.deal import Category


def _form(**overrides: Any) -> dict[str, Any]:
    """A valid admin form, optionally overridden field by field."""
    data: dict[str, Any] = {
        "title": "Noise Cancelling Headphones",
        "image_url": "https://example.com/headphones.jpg",
        "original_price": "2999",
        "discounted_price": "1499",
        "affiliate_url": "https://amzn.example/abc?tag=steal-21",
        "category": "Electronics",
        "is_trending": True,
    }
    data.update(overrides)
    return data


def _row(**overrides: Any) -> dict[str, Any]:
    """A valid backend row, optionally overridden."""
    row: dict[str, Any] = {
        "id": "5f1c",
        "title": "Yoga Mat",
        "image_url": "https://example.com/mat.jpg",
        "original_price": 1200,
        "discounted_price": 600.5,
        "affiliate_url": "https://example.com/go/mat",
        "category": "Sports",
        "is_trending": False,
        "clicks": 4,
        "created_at": "2025-03-01T10:15:00+00:00",
        "updated_at": "2025-03-02T10:15:00+00:00",
    }
    row.update(overrides)
    return row


class TestValidateForm(unittest.TestCase):
    """DealValidator.validate_form behaviour."""

    def test_valid_form_parses_prices(self) -> None:
        """Text prices become floats and the category an enum."""
        form = DealValidator.validate_form(_form())
        self.assertEqual(form.original_price, 2999.0)
        self.assertEqual(form.discounted_price, 1499.0)
        self.assertEqual(form.category, Category.ELECTRONICS)
        self.assertTrue(form.is_trending)

    def test_title_is_trimmed(self) -> None:
        """Surrounding whitespace is stripped from the title."""
        form = DealValidator.validate_form(_form(title="  Kindle  "))
        self.assertEqual(form.title, "Kindle")

    def test_title_too_short(self) -> None:
        """Titles under three characters are rejected."""
        with self.assertRaises(DealValidationError) as ctx:
            DealValidator.validate_form(_form(title=" ab "))
        self.assertEqual(ctx.exception.field, "title")
        self.assertIn("between 3 and 200", ctx.exception.message)

    def test_title_too_long(self) -> None:
        """Titles over 200 characters are rejected."""
        with self.assertRaises(DealValidationError) as ctx:
            DealValidator.validate_form(_form(title="x" * 201))
        self.assertEqual(ctx.exception.field, "title")

    def test_invalid_image_url(self) -> None:
        """A bare word is not a URL."""
        with self.assertRaises(DealValidationError) as ctx:
            DealValidator.validate_form(_form(image_url="not a url"))
        self.assertEqual(ctx.exception.field, "image_url")
        self.assertEqual(ctx.exception.message, "Must be a valid URL")

    def test_invalid_affiliate_url(self) -> None:
        """A URL without a scheme is rejected."""
        with self.assertRaises(DealValidationError) as ctx:
            DealValidator.validate_form(_form(affiliate_url="example.com"))
        self.assertEqual(ctx.exception.field, "affiliate_url")

    def test_url_kept_verbatim(self) -> None:
        """Valid URLs are stored exactly as typed."""
        form = DealValidator.validate_form(
            _form(image_url="https://example.com")
        )
        self.assertEqual(form.image_url, "https://example.com")

    def test_non_numeric_price(self) -> None:
        """Prices that don't parse are rejected."""
        with self.assertRaises(DealValidationError) as ctx:
            DealValidator.validate_form(_form(original_price="abc"))
        self.assertEqual(ctx.exception.field, "original_price")
        self.assertEqual(ctx.exception.message, "Price must be positive")

    def test_zero_price(self) -> None:
        """Prices must be strictly positive."""
        with self.assertRaises(DealValidationError) as ctx:
            DealValidator.validate_form(_form(discounted_price="0"))
        self.assertEqual(ctx.exception.field, "discounted_price")

    def test_negative_price(self) -> None:
        """Negative prices are rejected."""
        with self.assertRaises(DealValidationError):
            DealValidator.validate_form(_form(original_price="-10"))

    def test_infinite_price(self) -> None:
        """Infinity parses as a float but is not an acceptable price."""
        for raw in ("inf", "1e309"):
            with self.subTest(raw=raw):
                with self.assertRaises(DealValidationError) as ctx:
                    DealValidator.validate_form(
                        _form(original_price=raw, discounted_price="500")
                    )
                self.assertNotIsInstance(ctx.exception, PriceRuleError)
                self.assertEqual(ctx.exception.field, "original_price")
                self.assertEqual(
                    ctx.exception.message, "Price must be positive"
                )

    def test_nan_price(self) -> None:
        """NaN never reaches the price comparison."""
        with self.assertRaises(DealValidationError) as ctx:
            DealValidator.validate_form(_form(discounted_price="nan"))
        self.assertEqual(ctx.exception.field, "discounted_price")

    def test_missing_category(self) -> None:
        """A blank category is reported as required."""
        with self.assertRaises(DealValidationError) as ctx:
            DealValidator.validate_form(_form(category=""))
        self.assertEqual(ctx.exception.field, "category")
        self.assertEqual(ctx.exception.message, "Category is required")

    def test_unknown_category(self) -> None:
        """Categories outside the fixed set are rejected."""
        with self.assertRaises(DealValidationError):
            DealValidator.validate_form(_form(category="Toys"))

    def test_equal_prices_break_price_rule(self) -> None:
        """Discounted equal to original is not a deal."""
        with self.assertRaises(PriceRuleError) as ctx:
            DealValidator.validate_form(
                _form(original_price="500", discounted_price="500")
            )
        self.assertIn("less than original", ctx.exception.message)

    def test_higher_discounted_price_breaks_rule(self) -> None:
        """Discounted above original is rejected."""
        with self.assertRaises(PriceRuleError):
            DealValidator.validate_form(
                _form(original_price="500", discounted_price="800")
            )

    def test_price_rule_is_distinct_error(self) -> None:
        """The price rule is a subclass but a separate type."""
        self.assertTrue(issubclass(PriceRuleError, DealValidationError))
        with self.assertRaises(DealValidationError) as ctx:
            DealValidator.validate_form(_form(title="ab"))
        self.assertNotIsInstance(ctx.exception, PriceRuleError)

    def test_schema_checked_before_price_rule(self) -> None:
        """A schema error wins over a price rule violation."""
        with self.assertRaises(DealValidationError) as ctx:
            DealValidator.validate_form(
                _form(
                    image_url="nope",
                    original_price="100",
                    discounted_price="200",
                )
            )
        self.assertNotIsInstance(ctx.exception, PriceRuleError)

    def test_to_row_is_json_ready(self) -> None:
        """The write payload carries plain values."""
        row = DealValidator.validate_form(_form()).to_row()
        self.assertEqual(row["category"], "Electronics")
        self.assertEqual(
            set(row),
            {
                "title",
                "image_url",
                "original_price",
                "discounted_price",
                "affiliate_url",
                "category",
                "is_trending",
            },
        )


class TestValidateRows(unittest.TestCase):
    """DealValidator.validate_rows behaviour."""

    def test_valid_row(self) -> None:
        """A complete row becomes a Deal; unknown columns are ignored."""
        deals, dropped = DealValidator.validate_rows([_row()])
        self.assertEqual(dropped, 0)
        deal = deals[0]
        self.assertEqual(deal.id, "5f1c")
        self.assertEqual(deal.category, Category.SPORTS)
        self.assertEqual(deal.original_price, 1200.0)
        self.assertEqual(deal.clicks, 4)
        self.assertIsInstance(deal.created_at, datetime)

    def test_drops_invalid_rows(self) -> None:
        """Rows with bad prices or categories are dropped and counted."""
        rows = [
            _row(id="ok"),
            _row(id="bad-price", original_price=0),
            _row(id="bad-cat", category="Toys"),
            _row(id="bad-clicks", clicks=-1),
        ]
        deals, dropped = DealValidator.validate_rows(rows)
        self.assertEqual([d.id for d in deals], ["ok"])
        self.assertEqual(dropped, 3)

    def test_drops_non_object_rows(self) -> None:
        """Rows that aren't objects are dropped, not raised."""
        deals, dropped = DealValidator.validate_rows(
            ["garbage", None, 42, _row(id="ok")]
        )
        self.assertEqual([d.id for d in deals], ["ok"])
        self.assertEqual(dropped, 3)

    def test_infinite_row_price_dropped(self) -> None:
        """A non-finite price read back from the backend is dropped."""
        deals, dropped = DealValidator.validate_rows(
            [_row(original_price=float("inf"))]
        )
        self.assertEqual((deals, dropped), ([], 1))

    def test_keeps_order(self) -> None:
        """Valid rows keep the backend's order."""
        rows = [_row(id="1"), _row(id="2"), _row(id="3")]
        deals, _ = DealValidator.validate_rows(rows)
        self.assertEqual([d.id for d in deals], ["1", "2", "3"])

    def test_empty(self) -> None:
        """No rows, no deals."""
        self.assertEqual(DealValidator.validate_rows([]), ([], 0))


if __name__ == "__main__":
    unittest.main()
