"""
Delivery Address Value Object
"""

from dataclasses import asdict, dataclass
from typing import Any

from fashop.core.domain import ValidationException, ValueObject

DEFAULT_CITY = "Conakry"


@dataclass(frozen=True)
class DeliveryAddress(ValueObject):
    """
    Where and to whom an order is delivered.

    Addresses in Conakry are located by commune and quartier plus a
    landmark rather than by street number.
    """

    first_name: str
    last_name: str
    phone: str
    address: str
    email: str | None = None
    city: str = DEFAULT_CITY
    commune: str | None = None
    quartier: str | None = None
    landmark: str | None = None
    instructions: str | None = None

    def _validate(self) -> None:
        for name in ("first_name", "last_name", "phone", "address"):
            if not (getattr(self, name) or "").strip():
                raise ValidationException(f"Delivery {name.replace('_', ' ')} is required", field=name)
        if not self.city:
            object.__setattr__(self, "city", DEFAULT_CITY)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeliveryAddress":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    def __str__(self) -> str:
        parts = [self.address, self.quartier, self.commune, self.city]
        return ", ".join(p for p in parts if p)
