"""
Order Number Value Object

Human-facing order reference quoted by customers and suppliers in SMS.
"""

import re
import secrets
from dataclasses import dataclass

from fashop.core.domain import ValidationException, ValueObject

ORDER_NUMBER_PREFIX = "FA-"

# FA-123456 is what we generate; FASH-<digits> numbers exist on older orders
_ORDER_NUMBER_PATTERN = re.compile(r"^(FA-\d{6}|FASH-\d+)$")
ORDER_NUMBER_SEARCH = re.compile(r"\b(FA-\d{6}|FASH-\d+)\b", re.IGNORECASE)


@dataclass(frozen=True)
class OrderNumber(ValueObject):
    """Validated order number."""

    value: str

    def _validate(self) -> None:
        normalized = (self.value or "").strip().upper()
        if not _ORDER_NUMBER_PATTERN.match(normalized):
            raise ValidationException(f"Invalid order number: {self.value}", field="order_number")
        object.__setattr__(self, "value", normalized)

    @classmethod
    def generate(cls) -> "OrderNumber":
        """New random number in the 100000-999999 range."""
        return cls(f"{ORDER_NUMBER_PREFIX}{100000 + secrets.randbelow(900000)}")

    @staticmethod
    def is_valid(value: str) -> bool:
        return bool(_ORDER_NUMBER_PATTERN.match((value or "").strip().upper()))

    @staticmethod
    def find_in(text: str) -> "OrderNumber | None":
        """Extract the first order number quoted in free text."""
        match = ORDER_NUMBER_SEARCH.search(text or "")
        return OrderNumber(match.group(1)) if match else None

    def __str__(self) -> str:
        return self.value
