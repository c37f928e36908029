"""
Order Entity for the Marketplace Domain

A customer order spanning one or more suppliers. The order owns its item
snapshots and one sub-order per supplier; supplier replies on the
sub-orders drive the order status.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from fashop.core.domain import (
    AggregateRoot,
    InvalidOperationException,
    SupplierNotInOrderException,
    ValidationException,
    to_decimal,
    utcnow,
)

from ..services.pricing_service import calculate_margin
from ..value_objects.delivery_address import DeliveryAddress
from ..value_objects.order_number import OrderNumber
from ..value_objects.order_status import (
    DeliveryMethod,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    SupplierResponse,
)
from .product import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderItem:
    """
    Snapshot of a product at the time it was ordered.

    Prices and margin are frozen here so later catalog edits never change
    what the customer agreed to pay.
    """

    product_id: UUID
    product_name: str
    sku: str
    quantity: int
    supplier_price: Decimal
    public_price: Decimal
    supplier_id: UUID
    supplier_name: str | None = None
    margin: Decimal = Decimal("0")
    margin_percentage: Decimal = Decimal("0")
    color: str | None = None
    size: str | None = None

    def __post_init__(self):
        if self.quantity < 1:
            raise ValidationException("Quantity must be at least 1", field="quantity")

    @property
    def total_price(self) -> Decimal:
        return self.public_price * self.quantity

    @property
    def total_margin(self) -> Decimal:
        return (self.public_price - self.supplier_price) * self.quantity

    @classmethod
    def from_product(
        cls,
        product: Product,
        quantity: int,
        color: str | None = None,
        size: str | None = None,
    ) -> "OrderItem":
        """Snapshot ``product`` for an order line."""
        if product.id is None or product.supplier_id is None:
            raise ValidationException(f"Product {product.name} is not persisted with a supplier")
        margin = calculate_margin(product.supplier_price.amount, product.public_price.amount)
        return cls(
            product_id=product.id,
            product_name=product.name,
            sku=str(product.sku) if product.sku else "",
            quantity=quantity,
            supplier_price=product.supplier_price.amount,
            public_price=product.public_price.amount,
            supplier_id=product.supplier_id,
            supplier_name=product.supplier_name,
            margin=margin.margin,
            margin_percentage=margin.margin_percentage,
            color=color,
            size=size,
        )

    def with_quantity(self, quantity: int) -> "OrderItem":
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict[str, Any]:
        """Serializable form, used for persistence and API responses."""
        return {
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "sku": self.sku,
            "quantity": self.quantity,
            "supplier_price": str(self.supplier_price),
            "public_price": str(self.public_price),
            "total_price": str(self.total_price),
            "margin": str(self.margin),
            "margin_percentage": str(self.margin_percentage),
            "supplier_id": str(self.supplier_id),
            "supplier_name": self.supplier_name,
            "color": self.color,
            "size": self.size,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderItem":
        return cls(
            product_id=UUID(str(data["product_id"])),
            product_name=data["product_name"],
            sku=data.get("sku") or "",
            quantity=int(data["quantity"]),
            supplier_price=to_decimal(data["supplier_price"]),
            public_price=to_decimal(data["public_price"]),
            supplier_id=UUID(str(data["supplier_id"])),
            supplier_name=data.get("supplier_name"),
            margin=to_decimal(data.get("margin", 0)),
            margin_percentage=Decimal(str(data.get("margin_percentage", "0"))),
            color=data.get("color"),
            size=data.get("size"),
        )


@dataclass
class SupplierSubOrder:
    """The part of an order one supplier has to fulfil."""

    supplier_id: UUID
    supplier_name: str
    supplier_phone: str
    items: list[UUID] = field(default_factory=list)
    notification_sent: bool = False
    response: SupplierResponse = SupplierResponse.PENDING
    response_time: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "supplier_id": str(self.supplier_id),
            "supplier_name": self.supplier_name,
            "supplier_phone": self.supplier_phone,
            "items": [str(product_id) for product_id in self.items],
            "notification_sent": self.notification_sent,
            "response": self.response.value,
            "response_time": self.response_time.isoformat() if self.response_time else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SupplierSubOrder":
        response_time = data.get("response_time")
        return cls(
            supplier_id=UUID(str(data["supplier_id"])),
            supplier_name=data.get("supplier_name") or "",
            supplier_phone=data.get("supplier_phone") or "",
            items=[UUID(str(product_id)) for product_id in data.get("items", [])],
            notification_sent=bool(data.get("notification_sent", False)),
            response=SupplierResponse.from_string(data.get("response") or "pending"),
            response_time=datetime.fromisoformat(response_time) if response_time else None,
        )


@dataclass(frozen=True)
class SupplierContact:
    """Name and phone used to open a sub-order."""

    supplier_id: UUID
    name: str
    phone: str


@dataclass
class Order(AggregateRoot[UUID]):
    """
    Order aggregate root.

    Invariants kept by every mutating method:
    - exactly one sub-order per distinct supplier among the items
    - ``subtotal``, ``total`` and ``total_margin`` match the items

    Example:
        ```python
        order = Order.create(
            order_number=OrderNumber.generate(),
            customer_email="client@example.com",
            customer_phone="622123456",
            delivery_address=address,
            items=[OrderItem.from_product(product, 2)],
            suppliers={supplier.id: SupplierContact(supplier.id, supplier.name, "622000000")},
            delivery_fee=Decimal("15000"),
        )
        order.process_supplier_response(supplier.id, SupplierResponse.CONFIRMED)
        ```
    """

    order_number: OrderNumber | None = None

    # Customer
    customer_id: UUID | None = None
    customer_email: str | None = None
    customer_phone: str = ""
    delivery_address: DeliveryAddress | None = None

    # Lines and fan-out
    items: list[OrderItem] = field(default_factory=list)
    suppliers: list[SupplierSubOrder] = field(default_factory=list)

    # Amounts
    subtotal: Decimal = Decimal("0")
    delivery_fee: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    total_margin: Decimal = Decimal("0")

    # Status tracking
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_reference: str | None = None
    delivery_method: DeliveryMethod = DeliveryMethod.STANDARD

    # Notes
    notes: str | None = None
    admin_notes: str | None = None

    @classmethod
    def create(
        cls,
        order_number: OrderNumber,
        customer_phone: str,
        delivery_address: DeliveryAddress,
        items: list[OrderItem],
        suppliers: dict[UUID, SupplierContact],
        delivery_fee: Decimal,
        customer_email: str | None = None,
        customer_id: UUID | None = None,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        delivery_method: DeliveryMethod = DeliveryMethod.STANDARD,
        notes: str | None = None,
    ) -> "Order":
        """
        Build a pending order and split it into per-supplier sub-orders.

        Args:
            suppliers: Contact of every supplier referenced by ``items``

        Raises:
            ValidationException: No items, or an item whose supplier is missing
                from ``suppliers``
        """
        if not items:
            raise ValidationException("An order needs at least one item", field="items")

        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            customer_email=customer_email,
            customer_phone=customer_phone,
            delivery_address=delivery_address,
            delivery_fee=to_decimal(delivery_fee, field="delivery_fee"),
            payment_method=payment_method,
            delivery_method=delivery_method,
            notes=notes,
        )
        for item in items:
            contact = suppliers.get(item.supplier_id)
            if contact is None:
                raise ValidationException(
                    f"No supplier contact for {item.product_name}", field="supplier_id"
                )
            order._append_item(item, contact)
        order.recalculate_totals()
        return order

    # Items

    def add_item(self, item: OrderItem, contact: SupplierContact | None = None) -> None:
        """
        Add a line to a pending order.

        A line for a product already in the order is merged into it.
        ``contact`` is required when the item brings a new supplier.
        """
        self._ensure_open("add_item")
        self._append_item(item, contact)
        self.recalculate_totals()
        self.touch()

    def remove_item(self, product_id: UUID) -> OrderItem:
        """Remove a product line from a pending order."""
        self._ensure_open("remove_item")
        item = next((i for i in self.items if i.product_id == product_id), None)
        if item is None:
            raise ValidationException(f"Product {product_id} is not in order {self.order_number}")
        if len(self.items) == 1:
            raise ValidationException("An order needs at least one item", field="items")

        self.items.remove(item)
        sub_order = self.get_sub_order(item.supplier_id)
        if sub_order is not None:
            sub_order.items = [pid for pid in sub_order.items if pid != product_id]
            if not sub_order.items:
                self.suppliers.remove(sub_order)

        self.recalculate_totals()
        self.touch()
        return item

    def _append_item(self, item: OrderItem, contact: SupplierContact | None) -> None:
        for index, existing in enumerate(self.items):
            if existing.product_id == item.product_id:
                self.items[index] = existing.with_quantity(existing.quantity + item.quantity)
                return

        self.items.append(item)
        sub_order = self.get_sub_order(item.supplier_id)
        if sub_order is None:
            if contact is None:
                raise ValidationException(
                    f"Supplier contact required to add {item.product_name}", field="supplier_id"
                )
            sub_order = SupplierSubOrder(
                supplier_id=item.supplier_id,
                supplier_name=contact.name,
                supplier_phone=contact.phone,
            )
            self.suppliers.append(sub_order)
        sub_order.items.append(item.product_id)

    def recalculate_totals(self) -> None:
        """Derive subtotal, total and margin from the items."""
        self.subtotal = sum((item.total_price for item in self.items), Decimal("0"))
        self.total_margin = sum((item.total_margin for item in self.items), Decimal("0"))
        self.total = self.subtotal + self.delivery_fee

    def _ensure_open(self, operation: str) -> None:
        if not self.status.is_open():
            raise InvalidOperationException(operation, self.status.value)

    # Status

    def update_status(self, new_status: OrderStatus, notes: str | None = None) -> OrderStatus:
        """
        Set the order status (administrative override).

        Any status may be set; moves outside the conventional flow are
        logged as warnings. ``notes`` replaces the admin notes when given.

        Returns:
            The previous status
        """
        previous = self.status
        if previous != new_status and not previous.can_transition_to(new_status):
            logger.warning(
                f"Order {self.order_number}: unconventional status change "
                f"{previous.value} -> {new_status.value}"
            )
        self.status = new_status
        if notes is not None:
            self.admin_notes = notes
        self.touch()
        return previous

    def confirm_payment(self, reference: str | None = None) -> None:
        """Mark the order paid; independent of the fulfilment status."""
        self.payment_status = PaymentStatus.PAID
        if reference:
            self.payment_reference = reference
        self.touch()

    # Supplier fan-out

    def get_sub_order(self, supplier_id: UUID) -> SupplierSubOrder | None:
        return next((s for s in self.suppliers if s.supplier_id == supplier_id), None)

    def mark_notification_sent(self, supplier_id: UUID) -> None:
        sub_order = self.get_sub_order(supplier_id)
        if sub_order is None:
            raise SupplierNotInOrderException(str(self.order_number), supplier_id)
        sub_order.notification_sent = True
        self.touch()

    def process_supplier_response(
        self,
        supplier_id: UUID,
        response: SupplierResponse,
        responded_at: datetime | None = None,
    ) -> SupplierResponse:
        """
        Record a supplier's reply and reduce all replies into the status.

        All sub-orders confirmed moves the order to confirmed; any rejected
        sub-order cancels it; otherwise the status is left alone.

        Returns:
            The sub-order's response before this call
        """
        if response == SupplierResponse.PENDING:
            raise ValidationException("A supplier reply must confirm or reject", field="response")

        sub_order = self.get_sub_order(supplier_id)
        if sub_order is None:
            raise SupplierNotInOrderException(str(self.order_number), supplier_id)

        previous = sub_order.response
        sub_order.response = response
        sub_order.response_time = responded_at or utcnow()

        responses = [s.response for s in self.suppliers]
        if all(r == SupplierResponse.CONFIRMED for r in responses):
            self.status = OrderStatus.CONFIRMED
        elif any(r == SupplierResponse.REJECTED for r in responses):
            self.status = OrderStatus.CANCELLED

        self.touch()
        return previous

    def minutes_since_creation(self, at: datetime | None = None) -> Decimal:
        elapsed = (at or utcnow()) - self.created_at
        return Decimal(str(round(elapsed.total_seconds() / 60, 2)))

    @property
    def supplier_ids(self) -> list[UUID]:
        return [s.supplier_id for s in self.suppliers]

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def __str__(self) -> str:
        return f"Order {self.order_number} ({self.status.value})"
