"""
Adjust Stock Use Case

Manual inventory corrections from the back office.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from fashop.core.domain import ProductNotFoundException, StatusEnum, ValidationException
from fashop.domains.marketplace.application.ports import IProductRepository, ISupplierRepository
from fashop.domains.marketplace.application.services.notification_service import OrderNotificationService
from fashop.domains.marketplace.application.use_cases.base import retry_on_conflict
from fashop.domains.marketplace.domain.entities.product import Product

logger = logging.getLogger(__name__)


class StockOperation(StatusEnum):
    SET = "set"
    ADD = "add"
    SUBTRACT = "subtract"


@dataclass
class AdjustStockRequest:
    product_id: UUID
    quantity: int
    operation: StockOperation = StockOperation.SET


@dataclass
class AdjustStockResponse:
    product: Product
    previous_stock: int
    low_stock_alert_sent: bool = False


class AdjustStockUseCase:
    """
    Use Case: Adjust Stock

    Subtracting more than is on hand clamps at zero. The product status
    follows the stock (active <-> out_of_stock) and the supplier is warned
    when the level falls to the product's minimum.
    """

    def __init__(
        self,
        product_repository: IProductRepository,
        supplier_repository: ISupplierRepository,
        notification_service: OrderNotificationService,
        update_attempts: int = 3,
    ):
        self.product_repository = product_repository
        self.supplier_repository = supplier_repository
        self.notification_service = notification_service
        self.update_attempts = update_attempts

    async def execute(self, request: AdjustStockRequest) -> AdjustStockResponse:
        if request.quantity < 0:
            raise ValidationException("Quantity cannot be negative", field="quantity")

        async def apply() -> tuple[Product, int]:
            product = await self.product_repository.get_by_id(request.product_id)
            if product is None:
                raise ProductNotFoundException(request.product_id)
            previous = product.stock
            if request.operation == StockOperation.SET:
                product.set_stock(request.quantity)
            elif request.operation == StockOperation.ADD:
                product.apply_stock_delta(request.quantity)
            else:
                product.apply_stock_delta(-request.quantity)
            return await self.product_repository.save(product), previous

        product, previous = await retry_on_conflict(apply, self.update_attempts, f"stock of {request.product_id}")
        logger.info(
            f"Stock {request.operation.value} {request.quantity} on {product.sku}: {previous} -> {product.stock}"
        )

        alert_sent = False
        if product.is_low_stock and product.stock < previous:
            alert_sent = await self._alert_supplier(product)
        return AdjustStockResponse(product=product, previous_stock=previous, low_stock_alert_sent=alert_sent)

    async def _alert_supplier(self, product: Product) -> bool:
        if product.supplier_id is None:
            return False
        supplier = await self.supplier_repository.get_by_id(product.supplier_id)
        if supplier is None or not supplier.is_active:
            return False
        result = await self.notification_service.alert_low_stock(product, str(supplier.phone))
        return result.success
