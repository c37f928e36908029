"""
Update Product Use Cases

Catalog edits and soft deletion.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from fashop.core.domain import ProductNotFoundException, ValidationException
from fashop.domains.marketplace.application.ports import IProductRepository
from fashop.domains.marketplace.application.use_cases.base import retry_on_conflict
from fashop.domains.marketplace.domain.entities.product import Product
from fashop.domains.marketplace.domain.value_objects.order_status import ProductStatus
from fashop.domains.marketplace.domain.value_objects.price import Price

logger = logging.getLogger(__name__)


@dataclass
class UpdateProductRequest:
    """Partial update; ``None`` leaves a field unchanged."""

    product_id: UUID
    name: str | None = None
    description: str | None = None
    category: str | None = None
    supplier_price: Decimal | None = None
    public_price: Decimal | None = None
    min_stock: int | None = None
    status: ProductStatus | None = None
    featured: bool | None = None


class UpdateProductUseCase:
    """
    Use Case: Update Product

    Price changes always recompute the margin. Stock is not editable
    here; see AdjustStockUseCase.
    """

    def __init__(self, product_repository: IProductRepository, update_attempts: int = 3):
        self.product_repository = product_repository
        self.update_attempts = update_attempts

    async def execute(self, request: UpdateProductRequest) -> Product:
        async def apply() -> Product:
            product = await self.product_repository.get_by_id(request.product_id)
            if product is None:
                raise ProductNotFoundException(request.product_id)
            self._apply_changes(product, request)
            return await self.product_repository.save(product)

        product = await retry_on_conflict(apply, self.update_attempts, f"product {request.product_id}")
        logger.info(f"Product updated: {product.sku}")
        return product

    def _apply_changes(self, product: Product, request: UpdateProductRequest) -> None:
        if request.name is not None:
            if not request.name.strip():
                raise ValidationException("Product name is required", field="name")
            product.name = request.name
        if request.description is not None:
            product.description = request.description
        if request.category is not None:
            product.category = request.category
        if request.min_stock is not None:
            if request.min_stock < 0:
                raise ValidationException("Minimum stock cannot be negative", field="min_stock")
            product.min_stock = request.min_stock
        if request.featured is not None:
            product.featured = request.featured

        if request.supplier_price is not None or request.public_price is not None:
            product.set_prices(
                supplier_price=Price.of(request.supplier_price) if request.supplier_price is not None else None,
                public_price=Price.of(request.public_price) if request.public_price is not None else None,
            )

        if request.status is not None and request.status != product.status:
            if request.status == ProductStatus.ACTIVE:
                product.activate()
            elif request.status == ProductStatus.INACTIVE:
                product.deactivate()
            else:
                product.status = request.status
                product.sync_stock_status()
        product.touch()


class DeactivateProductUseCase:
    """Soft delete: the product leaves the catalog but stays referenced by orders."""

    def __init__(self, product_repository: IProductRepository, update_attempts: int = 3):
        self.product_repository = product_repository
        self.update_attempts = update_attempts

    async def execute(self, product_id: UUID) -> Product:
        async def apply() -> Product:
            product = await self.product_repository.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundException(product_id)
            product.deactivate()
            return await self.product_repository.save(product)

        product = await retry_on_conflict(apply, self.update_attempts, f"product {product_id}")
        logger.info(f"Product deactivated: {product.sku}")
        return product
