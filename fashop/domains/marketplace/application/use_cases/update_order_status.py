"""
Update Order Status Use Case

Administrative status override.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from fashop.domains.marketplace.application.ports import IOrderRepository, ITransactionManager
from fashop.domains.marketplace.application.use_cases.base import find_order, retry_on_conflict
from fashop.domains.marketplace.domain.entities.order import Order
from fashop.domains.marketplace.domain.value_objects.order_status import OrderStatus

logger = logging.getLogger(__name__)


@dataclass
class UpdateOrderStatusRequest:
    order_ref: str | UUID
    status: OrderStatus
    admin_notes: str | None = None


class UpdateOrderStatusUseCase:
    """
    Use Case: Update Order Status

    Any status can be set. Moves outside the conventional flow are logged
    by the aggregate, not refused.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        transaction_manager: ITransactionManager,
        update_attempts: int = 3,
    ):
        self.order_repository = order_repository
        self.transaction_manager = transaction_manager
        self.update_attempts = update_attempts

    async def execute(self, request: UpdateOrderStatusRequest) -> Order:
        async def apply() -> Order:
            order = await find_order(self.order_repository, request.order_ref)
            previous = order.update_status(request.status, request.admin_notes)
            saved = await self.order_repository.save(order)
            logger.info(f"Order {saved.order_number} status {previous.value} -> {saved.status.value}")
            return saved

        async with self.transaction_manager.atomic():
            return await retry_on_conflict(apply, self.update_attempts, f"status of order {request.order_ref}")
