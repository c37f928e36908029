"""
Get Order Use Case
"""

from uuid import UUID

from fashop.domains.marketplace.application.ports import IOrderRepository
from fashop.domains.marketplace.application.use_cases.base import find_order
from fashop.domains.marketplace.domain.entities.order import Order


class GetOrderUseCase:
    """Look an order up by id or order number."""

    def __init__(self, order_repository: IOrderRepository):
        self.order_repository = order_repository

    async def execute(self, order_ref: str | UUID) -> Order:
        return await find_order(self.order_repository, order_ref)
