"""
Marketplace Application Ports

Interface definitions (ports) for the marketplace domain.
Uses Protocol for structural typing.
"""

from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from fashop.core.domain import StatusEnum
from fashop.domains.marketplace.domain.entities.order import Order
from fashop.domains.marketplace.domain.entities.product import Product
from fashop.domains.marketplace.domain.entities.supplier import Supplier
from fashop.domains.marketplace.domain.value_objects.order_status import (
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ProductStatus,
)


@dataclass
class ProductFilter:
    """Catalog listing criteria."""

    category: str | None = None
    status: ProductStatus | None = None
    supplier_id: UUID | None = None
    search: str | None = None
    in_stock: bool | None = None
    featured: bool | None = None


@dataclass
class SupplierFilter:
    active_only: bool = True
    search: str | None = None
    city: str | None = None


@dataclass
class OrderFilter:
    """Back-office order listing criteria."""

    status: OrderStatus | None = None
    payment_status: PaymentStatus | None = None
    payment_method: PaymentMethod | None = None
    supplier_id: UUID | None = None
    search: str | None = None  # order number, customer email or phone


@dataclass
class DashboardStats:
    total_orders: int = 0
    pending_orders: int = 0
    total_products: int = 0
    low_stock_products: int = 0
    active_suppliers: int = 0
    revenue: Decimal = Decimal("0")
    margin_revenue: Decimal = Decimal("0")
    top_suppliers: list[dict[str, Any]] = field(default_factory=list)


@runtime_checkable
class IProductRepository(Protocol):
    """
    Interface for product repository.

    Defines the contract for product data access.
    """

    async def get_by_id(self, product_id: UUID) -> Product | None:
        """Get product by ID"""
        ...

    async def get_by_sku(self, sku: str) -> Product | None:
        """Get product by SKU"""
        ...

    async def search(self, filters: ProductFilter, page: int = 1, limit: int = 20) -> tuple[list[Product], int]:
        """Get one page of products and the total count"""
        ...

    async def add(self, product: Product) -> Product:
        """Insert a new product (unique SKU)"""
        ...

    async def save(self, product: Product) -> Product:
        """Persist changes to an existing product (optimistic version check)"""
        ...

    async def decrement_stock(self, product_id: UUID, quantity: int) -> int | None:
        """
        Atomically take ``quantity`` units if at least that many are in stock.

        Returns the remaining stock, or None when the guard failed.
        """
        ...


@runtime_checkable
class ISupplierRepository(Protocol):
    """Interface for supplier repository."""

    async def get_by_id(self, supplier_id: UUID) -> Supplier | None:
        ...

    async def get_by_ids(self, supplier_ids: list[UUID]) -> dict[UUID, Supplier]:
        ...

    async def get_by_phone(self, phone: str) -> Supplier | None:
        ...

    async def search(self, filters: SupplierFilter, page: int = 1, limit: int = 20) -> tuple[list[Supplier], int]:
        ...

    async def add(self, supplier: Supplier) -> Supplier:
        ...

    async def save(self, supplier: Supplier) -> Supplier:
        ...


@runtime_checkable
class IOrderRepository(Protocol):
    """
    Interface for order repository.

    The order is stored as one aggregate: items and sub-orders are
    always loaded and saved together with it.
    """

    async def add(self, order: Order) -> Order:
        """Insert a new order; DuplicateEntityException on order number collision"""
        ...

    async def get_by_id(self, order_id: UUID) -> Order | None:
        ...

    async def get_by_number(self, order_number: str) -> Order | None:
        ...

    async def save(self, order: Order) -> Order:
        """Persist an existing order; ConcurrencyException if its version is stale"""
        ...

    async def search(self, filters: OrderFilter, page: int = 1, limit: int = 20) -> tuple[list[Order], int]:
        ...

    async def find_awaiting_reply(self, supplier_id: UUID) -> list[Order]:
        """Pending orders in which the supplier has not replied yet, oldest first"""
        ...


@runtime_checkable
class IStatsRepository(Protocol):
    async def dashboard(self, top_suppliers: int = 5) -> DashboardStats:
        ...


@runtime_checkable
class ITransactionManager(Protocol):
    """Unit-of-work boundary: commit on success, roll back on error."""

    def atomic(self) -> AbstractAsyncContextManager[None]:
        ...


class NotificationTemplate(StatusEnum):
    """Messages the shop sends."""

    NEW_ORDER = "new_order"
    ORDER_CONFIRMED = "order_confirmed"
    LOW_STOCK = "low_stock"


@dataclass
class NotificationResult:
    success: bool
    provider: str
    message_id: str | None = None
    error: str | None = None


@runtime_checkable
class INotificationGateway(Protocol):
    """Outbound notification channel (SMS)."""

    async def notify(
        self,
        recipient: str,
        template_type: NotificationTemplate,
        data: dict[str, Any],
    ) -> NotificationResult:
        """
        Render and send a templated message.

        Raises NotificationException when the channel itself fails.
        """
        ...


__all__ = [
    "IProductRepository",
    "ISupplierRepository",
    "IOrderRepository",
    "IStatsRepository",
    "ITransactionManager",
    "INotificationGateway",
    "NotificationTemplate",
    "NotificationResult",
    "ProductFilter",
    "SupplierFilter",
    "OrderFilter",
    "DashboardStats",
]
