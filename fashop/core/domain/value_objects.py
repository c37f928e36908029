"""
Base Value Object Classes for Domain-Driven Design

Value Objects are immutable domain primitives that have no identity.
They are compared by their values, not by reference.
"""

import re
from abc import ABC
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Self

from fashop.core.domain.exceptions import ValidationException

CENTS = Decimal("0.01")


def to_decimal(value: Decimal | int | float | str, field: str = "amount") -> Decimal:
    """Coerce a numeric input to a Decimal rounded to cents."""
    if isinstance(value, bool):
        raise ValidationException(f"Invalid numeric value for {field}: {value!r}", field=field)
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationException(f"Invalid numeric value for {field}: {value!r}", field=field) from e
    if not result.is_finite():
        raise ValidationException(f"Invalid numeric value for {field}: {value!r}", field=field)
    return result.quantize(CENTS, ROUND_HALF_UP)


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for all value objects.

    Value objects are:
    - Immutable (frozen=True)
    - Compared by value (dataclass equality)
    - Have no identity
    """

    def __post_init__(self):
        """Override to add validation logic."""
        self._validate()

    def _validate(self) -> None:
        """Validate the value object. Override in subclasses."""
        pass


@dataclass(frozen=True)
class PhoneNumber(ValueObject):
    """
    Guinean mobile phone number.

    Accepts ``622123456``, ``224622123456`` and ``+224622123456`` (spaces and
    dashes allowed) and always stores the international ``+224`` form, so a
    number typed either way matches the same supplier.
    """

    number: str

    PATTERN = re.compile(r"^(?:\+224|224)?([6-7][0-9]{7,8})$")

    def _validate(self) -> None:
        cleaned = re.sub(r"[\s\-().]", "", self.number or "")
        match = self.PATTERN.match(cleaned)
        if not match:
            raise ValidationException(f"Invalid phone number: {self.number}", field="phone")
        object.__setattr__(self, "number", f"+224{match.group(1)}")

    def __str__(self) -> str:
        return self.number


class StatusEnum(str, Enum):
    """
    Base class for status enums.

    Provides common functionality for all status value objects.
    """

    @classmethod
    def values(cls) -> list[str]:
        """Get all possible values."""
        return [e.value for e in cls]

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create from string value (case-insensitive)."""
        for member in cls:
            if member.value.lower() == str(value).lower():
                return member
        raise ValidationException(
            f"Invalid {cls.__name__}: {value}. Expected one of {', '.join(cls.values())}",
            field=cls.__name__,
        )
