"""
Pricing Service for the Marketplace Domain

Margin arithmetic shared by products and order items.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from fashop.core.domain import ValidationException, to_decimal


@dataclass(frozen=True)
class MarginResult:
    """Result of a margin calculation."""

    margin: Decimal
    margin_percentage: Decimal

    @property
    def is_negative(self) -> bool:
        """Product sold below supplier price."""
        return self.margin < 0


def calculate_margin(
    supplier_price: Decimal | int | float | str,
    public_price: Decimal | int | float | str,
) -> MarginResult:
    """
    Compute the shop margin between supplier and public price.

    Args:
        supplier_price: What the shop pays the supplier
        public_price: What the customer pays

    Returns:
        MarginResult where ``margin_percentage`` is relative to the supplier
        price, rounded to one decimal, and 0 when the supplier price is 0.

    Raises:
        ValidationException: If either price is negative

    Example:
        ```python
        calculate_margin(100, 150)  # MarginResult(margin=50.00, margin_percentage=50.0)
        ```
    """
    supplier = to_decimal(supplier_price, field="supplier_price")
    public = to_decimal(public_price, field="public_price")

    if supplier < 0:
        raise ValidationException("Supplier price cannot be negative", field="supplier_price")
    if public < 0:
        raise ValidationException("Public price cannot be negative", field="public_price")

    margin = public - supplier
    if supplier == 0:
        percentage = Decimal("0.0")
    else:
        percentage = (margin / supplier * 100).quantize(Decimal("0.1"), ROUND_HALF_UP)

    return MarginResult(margin=margin, margin_percentage=percentage)
