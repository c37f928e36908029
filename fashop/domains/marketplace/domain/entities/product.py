"""
Product Entity for the Marketplace Domain

Represents a catalog product sourced from a single supplier.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from fashop.core.domain import (
    AggregateRoot,
    InsufficientStockException,
    ProductUnavailableException,
    ValidationException,
)

from ..services.pricing_service import MarginResult, calculate_margin
from ..value_objects.order_status import ProductStatus
from ..value_objects.price import Price
from ..value_objects.sku import SKU

logger = logging.getLogger(__name__)


@dataclass
class Product(AggregateRoot[UUID]):
    """
    Product aggregate root for the marketplace.

    Contains business logic for:
    - Margin derivation from supplier and public prices
    - Stock management and the stock-driven status flip
    - Product lifecycle (draft/active/inactive)

    Example:
        ```python
        product = Product.create(
            name="Robe wax",
            category="vetements",
            sku=SKU("ROBE-WAX-001"),
            supplier_id=supplier.id,
            supplier_price=Price.of(100000),
            public_price=Price.of(150000),
            stock=10,
        )
        product.apply_stock_delta(-3)
        ```
    """

    name: str = ""
    description: str | None = None
    category: str = ""
    sku: SKU | None = None

    supplier_id: UUID | None = None
    supplier_name: str | None = None

    supplier_price: Price = field(default_factory=Price.zero)
    public_price: Price = field(default_factory=Price.zero)
    margin: Decimal = Decimal("0")
    margin_percentage: Decimal = Decimal("0")

    stock: int = 0
    min_stock: int = 1

    status: ProductStatus = ProductStatus.DRAFT
    is_available: bool = True
    featured: bool = False

    def __post_init__(self):
        """Validate product after initialization."""
        if not self.name or not self.name.strip():
            raise ValidationException("Product name is required", field="name")
        if self.stock < 0:
            raise ValidationException("Stock cannot be negative", field="stock")
        if self.min_stock < 0:
            raise ValidationException("Minimum stock cannot be negative", field="min_stock")

    @classmethod
    def create(
        cls,
        name: str,
        category: str,
        sku: SKU,
        supplier_id: UUID,
        supplier_price: Price,
        public_price: Price,
        stock: int = 0,
        supplier_name: str | None = None,
        description: str | None = None,
        min_stock: int = 1,
        status: ProductStatus = ProductStatus.ACTIVE,
        featured: bool = False,
    ) -> "Product":
        """Build a new product with margin and availability derived."""
        product = cls(
            name=name,
            category=category,
            sku=sku,
            supplier_id=supplier_id,
            supplier_name=supplier_name,
            description=description,
            supplier_price=supplier_price,
            public_price=public_price,
            stock=stock,
            min_stock=min_stock,
            status=status,
            featured=featured,
        )
        product.recompute_margin()
        product.sync_stock_status()
        return product

    # Pricing

    def recompute_margin(self) -> MarginResult:
        """Derive margin fields from the current prices."""
        result = calculate_margin(self.supplier_price.amount, self.public_price.amount)
        self.margin = result.margin
        self.margin_percentage = result.margin_percentage
        if result.is_negative:
            logger.warning(
                f"Product {self.sku or self.name} sells below supplier price "
                f"(supplier={self.supplier_price}, public={self.public_price})"
            )
        return result

    def set_prices(self, supplier_price: Price | None = None, public_price: Price | None = None) -> None:
        """Update either price; the margin always follows."""
        if supplier_price is not None:
            self.supplier_price = supplier_price
        if public_price is not None:
            self.public_price = public_price
        self.recompute_margin()
        self.touch()

    # Stock Management

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.min_stock

    def is_orderable(self, quantity: int = 1) -> bool:
        """Active, flagged available and enough stock on hand."""
        return (
            self.status.is_available_for_sale()
            and self.is_available
            and self.stock >= quantity
        )

    def ensure_orderable(self, quantity: int) -> None:
        """
        Check the product can be ordered in the given quantity.

        Raises:
            ProductUnavailableException: Product is not active or not available
            InsufficientStockException: Not enough stock on hand
        """
        if not self.status.is_available_for_sale() or not self.is_available:
            raise ProductUnavailableException(self.id, self.name, self.status.value)
        if self.stock < quantity:
            raise InsufficientStockException(
                product_id=self.id,
                requested=quantity,
                available=self.stock,
                product_name=self.name,
            )

    def apply_stock_delta(self, delta: int) -> int:
        """
        Add (or remove, when negative) stock, clamped at zero.

        Returns:
            The new stock level
        """
        self.stock = max(0, self.stock + delta)
        self.sync_stock_status()
        self.touch()
        return self.stock

    def set_stock(self, quantity: int) -> int:
        """Overwrite the stock level (inventory count)."""
        if quantity < 0:
            raise ValidationException("Stock cannot be negative", field="stock")
        self.stock = quantity
        self.sync_stock_status()
        self.touch()
        return self.stock

    def sync_stock_status(self) -> None:
        """
        Keep status and availability consistent with stock.

        Only the active/out_of_stock pair flips; draft and inactive
        products keep their status whatever the stock.
        """
        if self.stock <= 0:
            self.is_available = False
            if self.status == ProductStatus.ACTIVE:
                self.status = ProductStatus.OUT_OF_STOCK
        else:
            if self.status == ProductStatus.OUT_OF_STOCK:
                self.status = ProductStatus.ACTIVE
            if self.status == ProductStatus.ACTIVE:
                self.is_available = True

    # Lifecycle

    def activate(self) -> None:
        """Publish the product in the catalog."""
        self.status = ProductStatus.ACTIVE
        self.sync_stock_status()
        self.touch()

    def deactivate(self) -> None:
        """Soft delete: hide from the catalog, keep order history intact."""
        self.status = ProductStatus.INACTIVE
        self.is_available = False
        self.touch()

    def __str__(self) -> str:
        return f"{self.name} ({self.sku})"
