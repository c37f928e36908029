"""
Process Supplier Response Use Case

Applies a supplier's confirm/reject reply to its sub-order, reduces the
replies into the order status and updates the supplier's reputation.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from fashop.core.domain import utcnow
from fashop.domains.marketplace.application.ports import (
    IOrderRepository,
    ISupplierRepository,
    ITransactionManager,
)
from fashop.domains.marketplace.application.services.notification_service import OrderNotificationService
from fashop.domains.marketplace.application.use_cases.base import find_order, retry_on_conflict
from fashop.domains.marketplace.domain.entities.order import Order
from fashop.domains.marketplace.domain.value_objects.order_status import OrderStatus, SupplierResponse

logger = logging.getLogger(__name__)


@dataclass
class SupplierResponseRequest:
    order_ref: str | UUID
    supplier_id: UUID
    response: SupplierResponse
    responded_at: datetime | None = None


@dataclass
class SupplierResponseResult:
    order: Order
    previous_response: SupplierResponse
    previous_status: OrderStatus

    @property
    def is_first_reply(self) -> bool:
        return self.previous_response == SupplierResponse.PENDING

    @property
    def status_changed(self) -> bool:
        return self.previous_status != self.order.status


class ProcessSupplierResponseUseCase:
    """
    Use Case: Process Supplier Response

    Repeating a reply leaves the order in the same state and does not
    count twice in the supplier's statistics.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        supplier_repository: ISupplierRepository,
        transaction_manager: ITransactionManager,
        notification_service: OrderNotificationService,
        update_attempts: int = 3,
    ):
        self.order_repository = order_repository
        self.supplier_repository = supplier_repository
        self.transaction_manager = transaction_manager
        self.notification_service = notification_service
        self.update_attempts = update_attempts

    async def execute(self, request: SupplierResponseRequest) -> SupplierResponseResult:
        """
        Record the reply.

        Raises:
            OrderNotFoundException: Unknown order reference
            SupplierNotInOrderException: Supplier has no sub-order in the order
            ValidationException: Reply is neither confirmed nor rejected
            ConcurrencyException: Conflicts persisted past the retry budget
        """
        responded_at = request.responded_at or utcnow()

        async def apply_reply() -> SupplierResponseResult:
            order = await find_order(self.order_repository, request.order_ref)
            previous_status = order.status
            previous_response = order.process_supplier_response(
                request.supplier_id, request.response, responded_at
            )
            saved = await self.order_repository.save(order)
            return SupplierResponseResult(
                order=saved,
                previous_response=previous_response,
                previous_status=previous_status,
            )

        async with self.transaction_manager.atomic():
            result = await retry_on_conflict(
                apply_reply, self.update_attempts, f"supplier reply on {request.order_ref}"
            )
            if result.is_first_reply:
                await self._update_supplier_stats(result.order, request, responded_at)

        logger.info(
            f"Order {result.order.order_number}: supplier {request.supplier_id} "
            f"{request.response.value}, order status {result.previous_status.value} -> {result.order.status.value}"
        )

        if result.status_changed and result.order.status == OrderStatus.CONFIRMED:
            await self.notification_service.notify_customer_of_confirmation(result.order)

        return result

    async def _update_supplier_stats(
        self,
        order: Order,
        request: SupplierResponseRequest,
        responded_at: datetime,
    ) -> None:
        response_minutes = order.minutes_since_creation(responded_at)

        async def record() -> None:
            supplier = await self.supplier_repository.get_by_id(request.supplier_id)
            if supplier is None:
                logger.warning(f"Supplier {request.supplier_id} replied but no longer exists, stats skipped")
                return
            supplier.update_stats(
                is_successful=request.response == SupplierResponse.CONFIRMED,
                response_time_minutes=response_minutes,
            )
            await self.supplier_repository.save(supplier)

        await retry_on_conflict(record, self.update_attempts, f"supplier {request.supplier_id} stats")
