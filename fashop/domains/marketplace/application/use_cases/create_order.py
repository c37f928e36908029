"""
Create Order Use Case

Turns a multi-supplier cart into one persisted order with per-supplier
sub-orders, reserving stock in the same transaction.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from fashop.core.domain import (
    DuplicateEntityException,
    InsufficientStockException,
    OrderNotFoundException,
    OrderNumberExhaustedException,
    ProductNotFoundException,
    SupplierNotFoundException,
    ValidationException,
)
from fashop.domains.marketplace.application.ports import (
    IOrderRepository,
    IProductRepository,
    ISupplierRepository,
    ITransactionManager,
)
from fashop.domains.marketplace.application.services.notification_service import OrderNotificationService
from fashop.domains.marketplace.application.use_cases.base import retry_on_conflict
from fashop.domains.marketplace.domain.entities.order import Order, OrderItem, SupplierContact
from fashop.domains.marketplace.domain.entities.product import Product
from fashop.domains.marketplace.domain.value_objects.delivery_address import DeliveryAddress
from fashop.domains.marketplace.domain.value_objects.order_number import OrderNumber
from fashop.domains.marketplace.domain.value_objects.order_status import DeliveryMethod, PaymentMethod

logger = logging.getLogger(__name__)


@dataclass
class OrderLineInput:
    """Input for one cart line."""

    product_id: UUID
    quantity: int
    color: str | None = None
    size: str | None = None


@dataclass
class CreateOrderRequest:
    """Request for creating an order."""

    customer_phone: str
    delivery_address: DeliveryAddress
    items: list[OrderLineInput]
    customer_email: str | None = None
    customer_id: UUID | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    delivery_method: DeliveryMethod = DeliveryMethod.STANDARD
    notes: str | None = None


@dataclass
class CreateOrderResponse:
    """Response from order creation."""

    order: Order
    notified_suppliers: list[UUID] = field(default_factory=list)
    failed_notifications: list[UUID] = field(default_factory=list)


class CreateOrderUseCase:
    """
    Use Case: Create Order

    Steps:
    1. Validate every line (product exists, is sellable, has stock) before
       touching anything
    2. Snapshot products into order items
    3. Split items into one sub-order per supplier
    4. Compute totals and margin
    5. In one transaction, take stock with guarded decrements and insert the
       order; a colliding order number rolls back and retries with a new one
    6. Notify each supplier; failures are isolated per supplier
    7. Warn suppliers whose product dropped to its minimum stock
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        supplier_repository: ISupplierRepository,
        transaction_manager: ITransactionManager,
        notification_service: OrderNotificationService,
        delivery_fee: Decimal,
        order_number_attempts: int = 3,
        update_attempts: int = 3,
    ):
        """
        Initialize use case with dependencies.

        Args:
            order_repository: Repository for order persistence
            product_repository: Repository for product lookup and stock reservation
            supplier_repository: Repository for supplier contacts
            transaction_manager: Unit of work wrapping stock reservation and insert
            notification_service: Supplier fan-out
            delivery_fee: Flat fee added to every order
            order_number_attempts: Order number allocations before giving up
            update_attempts: Retries when saving notification flags conflicts
        """
        self.order_repository = order_repository
        self.product_repository = product_repository
        self.supplier_repository = supplier_repository
        self.transaction_manager = transaction_manager
        self.notification_service = notification_service
        self.delivery_fee = delivery_fee
        self.order_number_attempts = order_number_attempts
        self.update_attempts = update_attempts

    async def execute(self, request: CreateOrderRequest) -> CreateOrderResponse:
        """
        Create a new order.

        Raises:
            ValidationException: Empty cart or invalid quantity
            ProductNotFoundException: A product does not exist
            ProductUnavailableException: A product is not active or available
            InsufficientStockException: Not enough stock, at validation or reservation time
            SupplierNotFoundException: A product references a missing supplier
            OrderNumberExhaustedException: No free order number was found
        """
        lines = self._merge_lines(request.items)
        products = await self._load_products(lines)

        items = [
            OrderItem.from_product(products[line.product_id], line.quantity, line.color, line.size)
            for line in lines
        ]
        contacts = await self._load_supplier_contacts(items)

        order, remaining_stock = await self._persist(request, items, contacts)
        logger.info(
            f"Order created: {order.order_number} with {len(order.items)} items "
            f"across {len(order.suppliers)} suppliers, total={order.total}"
        )

        report = await self.notification_service.notify_suppliers_of_new_order(order)
        if report.sent:
            order = await self._record_notifications(order.id, report.sent)
        if report.failed:
            logger.warning(f"Order {order.order_number}: {len(report.failed)} supplier notifications failed")

        await self._alert_low_stock(products, remaining_stock, contacts)

        return CreateOrderResponse(
            order=order,
            notified_suppliers=report.sent,
            failed_notifications=report.failed,
        )

    def _merge_lines(self, lines: list[OrderLineInput]) -> list[OrderLineInput]:
        """Validate quantities and fold repeated products into one line."""
        if not lines:
            raise ValidationException("An order needs at least one item", field="items")

        merged: dict[UUID, OrderLineInput] = {}
        for line in lines:
            if line.quantity < 1:
                raise ValidationException(
                    f"Quantity must be at least 1 for product {line.product_id}", field="quantity"
                )
            if line.product_id in merged:
                existing = merged[line.product_id]
                merged[line.product_id] = OrderLineInput(
                    product_id=line.product_id,
                    quantity=existing.quantity + line.quantity,
                    color=existing.color or line.color,
                    size=existing.size or line.size,
                )
            else:
                merged[line.product_id] = line
        return list(merged.values())

    async def _load_products(self, lines: list[OrderLineInput]) -> dict[UUID, Product]:
        """Fail fast on the first line that cannot be served."""
        products: dict[UUID, Product] = {}
        for line in lines:
            product = await self.product_repository.get_by_id(line.product_id)
            if product is None:
                raise ProductNotFoundException(line.product_id)
            product.ensure_orderable(line.quantity)
            products[line.product_id] = product
        return products

    async def _load_supplier_contacts(self, items: list[OrderItem]) -> dict[UUID, SupplierContact]:
        supplier_ids = list(dict.fromkeys(item.supplier_id for item in items))
        suppliers = await self.supplier_repository.get_by_ids(supplier_ids)

        contacts: dict[UUID, SupplierContact] = {}
        for supplier_id in supplier_ids:
            supplier = suppliers.get(supplier_id)
            if supplier is None:
                raise SupplierNotFoundException(supplier_id)
            if not supplier.is_active:
                logger.warning(f"Ordering from inactive supplier {supplier.name} ({supplier_id})")
            contacts[supplier_id] = SupplierContact(
                supplier_id=supplier_id,
                name=supplier.name,
                phone=str(supplier.phone),
            )
        return contacts

    async def _persist(
        self,
        request: CreateOrderRequest,
        items: list[OrderItem],
        contacts: dict[UUID, SupplierContact],
    ) -> tuple[Order, dict[UUID, int]]:
        for attempt in range(1, self.order_number_attempts + 1):
            order = Order.create(
                order_number=OrderNumber.generate(),
                customer_phone=request.customer_phone,
                customer_email=request.customer_email,
                customer_id=request.customer_id,
                delivery_address=request.delivery_address,
                items=items,
                suppliers=contacts,
                delivery_fee=self.delivery_fee,
                payment_method=request.payment_method,
                delivery_method=request.delivery_method,
                notes=request.notes,
            )
            try:
                async with self.transaction_manager.atomic():
                    remaining = await self._reserve_stock(order)
                    saved = await self.order_repository.add(order)
                return saved, remaining
            except DuplicateEntityException as e:
                if e.field != "order_number":
                    raise
                logger.warning(
                    f"Order number {order.order_number} already taken "
                    f"(attempt {attempt}/{self.order_number_attempts})"
                )

        raise OrderNumberExhaustedException(self.order_number_attempts)

    async def _reserve_stock(self, order: Order) -> dict[UUID, int]:
        """Guarded decrement per line; any shortfall aborts the transaction."""
        remaining: dict[UUID, int] = {}
        for item in order.items:
            left = await self.product_repository.decrement_stock(item.product_id, item.quantity)
            if left is None:
                current = await self.product_repository.get_by_id(item.product_id)
                available = current.stock if current else 0
                logger.info(
                    f"Stock reservation lost for {item.product_name}: "
                    f"requested {item.quantity}, available {available}"
                )
                raise InsufficientStockException(
                    product_id=item.product_id,
                    requested=item.quantity,
                    available=available,
                    product_name=item.product_name,
                )
            remaining[item.product_id] = left
        return remaining

    async def _record_notifications(self, order_id: UUID, supplier_ids: list[UUID]) -> Order:
        async def mark_sent() -> Order:
            order = await self.order_repository.get_by_id(order_id)
            if order is None:
                raise OrderNotFoundException(order_id)
            for supplier_id in supplier_ids:
                order.mark_notification_sent(supplier_id)
            return await self.order_repository.save(order)

        async with self.transaction_manager.atomic():
            return await retry_on_conflict(mark_sent, self.update_attempts, f"order {order_id} notifications")

    async def _alert_low_stock(
        self,
        products: dict[UUID, Product],
        remaining_stock: dict[UUID, int],
        contacts: dict[UUID, SupplierContact],
    ) -> None:
        for product_id, left in remaining_stock.items():
            product = products[product_id]
            if left > product.min_stock or product.supplier_id is None:
                continue
            product.stock = left
            contact = contacts.get(product.supplier_id)
            if contact is not None:
                await self.notification_service.alert_low_stock(product, contact.phone)
