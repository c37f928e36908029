"""
Status Value Objects for the Marketplace Domain

Lifecycle states of orders, payments, products and supplier replies.
"""

from fashop.core.domain import StatusEnum


class OrderStatus(StatusEnum):
    """
    Order lifecycle states.

    Conventional flow:
    - PENDING -> CONFIRMED, CANCELLED
    - CONFIRMED -> PREPARING, CANCELLED
    - PREPARING -> SHIPPED, CANCELLED
    - SHIPPED -> DELIVERED
    - DELIVERED -> REFUNDED
    - CANCELLED, REFUNDED (terminal)

    Administrators may still force any status; moves outside this graph
    are reported by ``can_transition_to`` and logged by the aggregate.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    def can_transition_to(self, new_status: "OrderStatus") -> bool:
        """
        Check if moving to new_status follows the conventional flow.

        Args:
            new_status: Target status

        Returns:
            True if transition is part of the conventional flow
        """
        return new_status.value in ORDER_TRANSITIONS.get(self.value, [])

    def get_valid_transitions(self) -> list["OrderStatus"]:
        """Get list of conventional next statuses."""
        return [OrderStatus(v) for v in ORDER_TRANSITIONS.get(self.value, [])]

    def is_terminal(self) -> bool:
        """Check if this is a terminal (final) state."""
        return len(ORDER_TRANSITIONS.get(self.value, [])) == 0

    def is_open(self) -> bool:
        """Check if order can still be modified."""
        return self.value == "pending"


# status -> statuses reachable in the conventional flow
ORDER_TRANSITIONS: dict[str, list[str]] = {
    "pending": ["confirmed", "cancelled"],
    "confirmed": ["preparing", "cancelled"],
    "preparing": ["shipped", "cancelled"],
    "shipped": ["delivered"],
    "delivered": ["refunded"],
    "cancelled": [],
    "refunded": [],
}


class PaymentStatus(StatusEnum):
    """Payment status for orders."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"

    def is_successful(self) -> bool:
        """Check if payment was successful."""
        return self.value == "paid"


class PaymentMethod(StatusEnum):
    """Accepted payment methods."""

    ORANGE_MONEY = "orange_money"
    CARD = "card"
    CASH = "cash"


class DeliveryMethod(StatusEnum):
    """How the customer receives the order."""

    STANDARD = "standard"
    EXPRESS = "express"
    PICKUP = "pickup"


class ProductStatus(StatusEnum):
    """Product availability status."""

    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"
    OUT_OF_STOCK = "out_of_stock"

    def is_available_for_sale(self) -> bool:
        """Check if product can be purchased."""
        return self.value == "active"


class SupplierResponse(StatusEnum):
    """Reply of a supplier to its sub-order."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"

    def is_final(self) -> bool:
        return self.value != "pending"
