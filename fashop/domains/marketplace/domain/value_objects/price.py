"""
Price Value Object for the Marketplace Domain

Represents a supplier or public price in the shop currency.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from fashop.core.domain import ValidationException, ValueObject, to_decimal


@dataclass(frozen=True)
class Price(ValueObject):
    """
    Price value object for catalog products.

    Example:
        ```python
        price = Price(amount=Decimal("150000"))
        line_total = price.multiply(2)  # 300000 GNF
        ```
    """

    amount: Decimal
    currency: str = "GNF"

    def _validate(self) -> None:
        """Validate price constraints."""
        object.__setattr__(self, "amount", to_decimal(self.amount, field="price"))
        if self.amount < 0:
            raise ValidationException("Price cannot be negative", field="price")

    def multiply(self, quantity: int) -> "Price":
        """Price of ``quantity`` units."""
        return Price(
            amount=(self.amount * quantity).quantize(Decimal("0.01"), ROUND_HALF_UP),
            currency=self.currency,
        )

    def __str__(self) -> str:
        return f"{self.amount:,.0f} {self.currency}"

    def __float__(self) -> float:
        return float(self.amount)

    @classmethod
    def zero(cls, currency: str = "GNF") -> "Price":
        """Create a zero price."""
        return cls(amount=Decimal("0"), currency=currency)

    @classmethod
    def of(cls, value: Decimal | int | float | str, currency: str = "GNF") -> "Price":
        """Create a price from any numeric input."""
        return cls(amount=to_decimal(value, field="price"), currency=currency)
