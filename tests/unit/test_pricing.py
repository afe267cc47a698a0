"""Unit tests for the pricing engine and input validation."""

import pytest

from order_pipeline.domain.pricing import (
    PriceBreakdown,
    calculate_price,
    lookup_unit_price,
    validate_order_input,
)


class TestCalculatePrice:
    """Test price computation."""

    def test_bulk_discount_applied_above_five_units(self):
        """Test laptop x6 gets the 10% discount."""
        price = calculate_price("laptop", 6)

        assert price == PriceBreakdown(unit_price=999.0, subtotal=5994.0, discount=599.4, total=5394.6)

    def test_no_discount_at_exactly_five_units(self):
        """Test the discount threshold is strictly greater than five."""
        price = calculate_price("phone", 5)

        assert price.subtotal == 2995.0
        assert price.discount == 0.0
        assert price.total == 2995.0

    def test_unknown_product_uses_fallback_price(self):
        """Test unknown products are priced at the flat fallback."""
        price = calculate_price("unknown", 1)

        assert price.unit_price == 99.0
        assert price.discount == 0.0
        assert price.total == 99.0

    def test_lookup_is_case_insensitive(self):
        """Test product names are matched case-insensitively."""
        assert lookup_unit_price("Laptop") == 999.0
        assert lookup_unit_price("MOUSE") == 49.0

    @pytest.mark.parametrize(
        "product,quantity",
        [("tablet", 1), ("monitor", 7), ("keyboard", 12), ("gizmo", 9)],
    )
    def test_total_is_subtotal_minus_discount(self, product, quantity):
        """Test the total invariant holds for any line."""
        price = calculate_price(product, quantity)

        assert price.total == round(price.subtotal - price.discount, 2)
        assert price.subtotal == round(price.unit_price * quantity, 2)


class TestValidateOrderInput:
    """Test order input validation."""

    def test_valid_input(self):
        """Test a well-formed request passes."""
        assert validate_order_input("laptop", 2, "a@b.com") is None

    @pytest.mark.parametrize("product", [None, "", "   ", 42])
    def test_missing_product(self, product):
        """Test product must be a non-blank string."""
        assert validate_order_input(product, 1, "a@b.com") == "Product is required"

    @pytest.mark.parametrize("quantity", [None, 0, -3, True, "2"])
    def test_invalid_quantity(self, quantity):
        """Test quantity must be a positive number."""
        assert validate_order_input("laptop", quantity, "a@b.com") == (
            "Quantity must be greater than 0"
        )

    @pytest.mark.parametrize("email", [None, "", "not-an-email"])
    def test_invalid_email(self, email):
        """Test email must contain an @."""
        assert validate_order_input("laptop", 1, email) == "Invalid email"

    def test_first_failure_wins(self):
        """Test the product check runs before the others."""
        assert validate_order_input("", 0, "bad") == "Product is required"
