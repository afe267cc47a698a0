"""Pricing engine and order input validation.

Pure functions with no I/O. Prices are looked up in a static table keyed by
the lower-cased product name; unknown products fall back to a flat price.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .constants import PricingDefaults


class PriceBreakdown(BaseModel):
    """Value object holding the computed price of an order line."""

    model_config = ConfigDict(frozen=True, strict=True)

    unit_price: float = Field(..., ge=0, description="Price of a single unit")
    subtotal: float = Field(..., ge=0, description="unit_price * quantity")
    discount: float = Field(..., ge=0, description="Bulk discount amount")
    total: float = Field(..., ge=0, description="subtotal - discount")


def _money(value: float) -> float:
    return round(value, 2)


def lookup_unit_price(product: str) -> float:
    """Return the unit price for a product, or the fallback price."""
    return float(
        PricingDefaults.PRODUCT_PRICES.get(product.lower(), PricingDefaults.DEFAULT_PRICE)
    )


def calculate_price(product: str, quantity: int) -> PriceBreakdown:
    """Compute unit price, subtotal, discount and total for an order line.

    A 10% discount applies when the quantity is strictly greater than five.
    Amounts are rounded to cents.
    """
    unit_price = lookup_unit_price(product)
    subtotal = _money(unit_price * quantity)

    has_discount = quantity > PricingDefaults.MIN_QUANTITY_FOR_DISCOUNT
    discount = _money(subtotal * PricingDefaults.DISCOUNT_PERCENTAGE) if has_discount else 0.0
    total = _money(subtotal - discount)

    return PriceBreakdown(
        unit_price=unit_price,
        subtotal=subtotal,
        discount=discount,
        total=total,
    )


def validate_order_input(product: Any, quantity: Any, email: Any) -> str | None:
    """Validate caller-supplied order fields.

    Returns:
        A human-readable reason when the input is rejected, otherwise None.
    """
    if not isinstance(product, str) or not product.strip():
        return "Product is required"
    if isinstance(quantity, bool) or not isinstance(quantity, int | float) or quantity < 1:
        return "Quantity must be greater than 0"
    if not isinstance(email, str) or "@" not in email:
        return "Invalid email"
    return None
