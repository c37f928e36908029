"""
Create Product Use Case
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from fashop.core.domain import DuplicateEntityException, SupplierNotFoundException, ValidationException
from fashop.domains.marketplace.application.ports import IProductRepository, ISupplierRepository
from fashop.domains.marketplace.domain.entities.product import Product
from fashop.domains.marketplace.domain.value_objects.order_status import ProductStatus
from fashop.domains.marketplace.domain.value_objects.price import Price
from fashop.domains.marketplace.domain.value_objects.sku import SKU

logger = logging.getLogger(__name__)


@dataclass
class CreateProductRequest:
    """Request for adding a product to the catalog."""

    name: str
    category: str
    sku: str
    supplier_id: UUID
    supplier_price: Decimal
    public_price: Decimal
    stock: int = 0
    min_stock: int = 1
    description: str | None = None
    status: ProductStatus = ProductStatus.ACTIVE
    featured: bool = False


class CreateProductUseCase:
    """
    Use Case: Create Product

    The SKU must be unique and the supplier must exist and be active.
    Margin and availability are derived on creation.
    """

    def __init__(self, product_repository: IProductRepository, supplier_repository: ISupplierRepository):
        self.product_repository = product_repository
        self.supplier_repository = supplier_repository

    async def execute(self, request: CreateProductRequest) -> Product:
        sku = SKU(request.sku)
        if await self.product_repository.get_by_sku(sku.value) is not None:
            raise DuplicateEntityException("Product", "sku", sku.value)

        supplier = await self.supplier_repository.get_by_id(request.supplier_id)
        if supplier is None:
            raise SupplierNotFoundException(request.supplier_id)
        if not supplier.is_active:
            raise ValidationException(f"Supplier {supplier.name} is inactive", field="supplier_id")

        product = Product.create(
            name=request.name,
            category=request.category,
            sku=sku,
            supplier_id=request.supplier_id,
            supplier_name=supplier.name,
            supplier_price=Price.of(request.supplier_price),
            public_price=Price.of(request.public_price),
            stock=request.stock,
            min_stock=request.min_stock,
            description=request.description,
            status=request.status,
            featured=request.featured,
        )
        created = await self.product_repository.add(product)
        logger.info(
            f"Product created: {created.sku} ({created.name}) margin={created.margin} "
            f"({created.margin_percentage}%)"
        )
        return created
