"""
List Orders Use Case

Back-office order listing with filters and pagination.
"""

from dataclasses import dataclass, field

from fashop.domains.marketplace.application.ports import IOrderRepository, OrderFilter
from fashop.domains.marketplace.application.use_cases.base import Page, clamp_pagination
from fashop.domains.marketplace.domain.entities.order import Order


@dataclass
class ListOrdersRequest:
    filters: OrderFilter = field(default_factory=OrderFilter)
    page: int = 1
    limit: int = 20


class ListOrdersUseCase:
    """Newest orders first."""

    def __init__(self, order_repository: IOrderRepository):
        self.order_repository = order_repository

    async def execute(self, request: ListOrdersRequest) -> Page[Order]:
        page, limit = clamp_pagination(request.page, request.limit)
        orders, total = await self.order_repository.search(request.filters, page=page, limit=limit)
        return Page(items=orders, total=total, page=page, limit=limit)
