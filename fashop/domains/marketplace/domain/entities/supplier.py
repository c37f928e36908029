"""
Supplier Entity for the Marketplace Domain

A local vendor that fulfils sub-orders and is scored on how it replies.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from fashop.core.domain import AggregateRoot, PhoneNumber, ValidationException

from ..services.supplier_scoring import compute_rating, next_average_response_time

DELIVERY_ZONES = ("Kaloum", "Dixinn", "Matam", "Ratoma", "Matoto")


@dataclass
class Supplier(AggregateRoot[UUID]):
    """
    Supplier aggregate root.

    ``rating`` is derived: it is recomputed by ``update_stats`` and never
    assigned by callers. Suppliers are deactivated, never deleted, so
    historic orders keep a valid reference.
    """

    name: str = ""
    phone: PhoneNumber | None = None
    email: str | None = None
    whatsapp: str | None = None
    address: str | None = None
    city: str = "Conakry"
    description: str | None = None
    categories: list[str] = field(default_factory=list)
    delivery_zones: list[str] = field(default_factory=list)

    rating: Decimal = Decimal("0")
    total_orders: int = 0
    successful_orders: int = 0
    average_response_time: Decimal | None = None  # minutes

    is_active: bool = True

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValidationException("Supplier name is required", field="name")
        if self.phone is None:
            raise ValidationException("Supplier phone is required", field="phone")
        unknown = [zone for zone in self.delivery_zones if zone not in DELIVERY_ZONES]
        if unknown:
            raise ValidationException(f"Unknown delivery zones: {', '.join(unknown)}", field="delivery_zones")

    @property
    def success_rate(self) -> int:
        """Share of successful orders, as a whole percentage."""
        if self.total_orders == 0:
            return 0
        return round(self.successful_orders / self.total_orders * 100)

    def update_stats(self, is_successful: bool, response_time_minutes: float | Decimal = 0) -> None:
        """
        Record the outcome of one sub-order.

        Args:
            is_successful: Whether the supplier confirmed
            response_time_minutes: Minutes between order creation and the
                reply; ignored for the average when not positive
        """
        self.total_orders += 1
        if is_successful:
            self.successful_orders += 1

        response_time = Decimal(str(response_time_minutes))
        if response_time > 0:
            self.average_response_time = next_average_response_time(
                self.average_response_time, response_time
            )

        self.rating = compute_rating(self.successful_orders, self.total_orders, self.average_response_time)
        self.touch()

    def deactivate(self) -> None:
        self.is_active = False
        self.touch()

    def activate(self) -> None:
        self.is_active = True
        self.touch()

    def update_profile(self, **changes) -> None:
        """
        Apply contact/profile edits; ``None`` values are ignored.

        Statistics and rating are not profile fields and are rejected.
        """
        protected = {"rating", "total_orders", "successful_orders", "average_response_time", "id", "version"}
        forbidden = protected.intersection(changes)
        if forbidden:
            raise ValidationException(f"Read-only supplier fields: {', '.join(sorted(forbidden))}")
        for attr, value in changes.items():
            if value is not None:
                setattr(self, attr, value)
        self.__post_init__()
        self.touch()
