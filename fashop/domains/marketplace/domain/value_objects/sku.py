"""
SKU (Stock Keeping Unit) Value Object for the Marketplace Domain

Represents a unique product identifier with validation.
"""

import re
from dataclasses import dataclass

from fashop.core.domain import ValidationException, ValueObject


@dataclass(frozen=True)
class SKU(ValueObject):
    """
    SKU value object for product identification.

    SKUs are upper-cased and made of letters, digits, dashes and
    underscores (e.g. ``ROBE-WAX-001``).
    """

    value: str

    SKU_PATTERN = re.compile(r"^[A-Z0-9_-]+$")

    def _validate(self) -> None:
        """Validate SKU format."""
        normalized = (self.value or "").upper().strip()
        object.__setattr__(self, "value", normalized)

        if not self.value:
            raise ValidationException("SKU cannot be empty", field="sku")

        if len(self.value) > 50:
            raise ValidationException("SKU cannot exceed 50 characters", field="sku")

        if not self.SKU_PATTERN.match(self.value):
            raise ValidationException(
                f"Invalid SKU format: {self.value}. Only letters, digits, '-' and '_' are allowed",
                field="sku",
            )

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"SKU('{self.value}')"
