"""
Confirm Payment Use Case
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from fashop.domains.marketplace.application.ports import IOrderRepository, ITransactionManager
from fashop.domains.marketplace.application.use_cases.base import find_order, retry_on_conflict
from fashop.domains.marketplace.domain.entities.order import Order

logger = logging.getLogger(__name__)


@dataclass
class ConfirmPaymentRequest:
    order_ref: str | UUID
    payment_reference: str | None = None


class ConfirmPaymentUseCase:
    """Marks an order paid. The fulfilment status is not touched."""

    def __init__(
        self,
        order_repository: IOrderRepository,
        transaction_manager: ITransactionManager,
        update_attempts: int = 3,
    ):
        self.order_repository = order_repository
        self.transaction_manager = transaction_manager
        self.update_attempts = update_attempts

    async def execute(self, request: ConfirmPaymentRequest) -> Order:
        async def apply() -> Order:
            order = await find_order(self.order_repository, request.order_ref)
            order.confirm_payment(request.payment_reference)
            return await self.order_repository.save(order)

        async with self.transaction_manager.atomic():
            order = await retry_on_conflict(apply, self.update_attempts, f"payment of order {request.order_ref}")

        logger.info(f"Order {order.order_number} paid (reference={order.payment_reference})")
        return order
