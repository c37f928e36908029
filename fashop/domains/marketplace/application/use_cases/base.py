"""
Helpers shared by the marketplace use cases.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar
from uuid import UUID

from fashop.core.domain import ConcurrencyException, OrderNotFoundException
from fashop.domains.marketplace.application.ports import IOrderRepository
from fashop.domains.marketplace.domain.entities.order import Order

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_on_conflict(operation: Callable[[], Awaitable[T]], attempts: int, label: str) -> T:
    """
    Run a load-mutate-save ``operation`` until it stops hitting version conflicts.

    ``operation`` must reload the aggregate on every call so each attempt
    works on fresh state.

    Raises:
        ConcurrencyException: If the last attempt still conflicts
    """
    attempt = 1
    while True:
        try:
            return await operation()
        except ConcurrencyException as e:
            if attempt >= attempts:
                logger.error(f"{label}: giving up after {attempts} conflicting attempts")
                raise
            logger.info(f"{label}: version conflict ({e.message}), retrying ({attempt}/{attempts})")
            attempt += 1


async def find_order(order_repository: IOrderRepository, order_ref: str | UUID) -> Order:
    """
    Load an order by id or by order number.

    Raises:
        OrderNotFoundException: If neither matches
    """
    order: Order | None
    if isinstance(order_ref, UUID):
        order = await order_repository.get_by_id(order_ref)
    else:
        try:
            order_id = UUID(order_ref)
        except ValueError:
            order = await order_repository.get_by_number(order_ref.strip().upper())
        else:
            order = await order_repository.get_by_id(order_id)

    if order is None:
        raise OrderNotFoundException(order_ref)
    return order


MAX_PAGE_SIZE = 100


@dataclass
class Page(Generic[T]):
    """One page of results plus pagination metadata."""

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


def clamp_pagination(page: int, limit: int) -> tuple[int, int]:
    """Keep page >= 1 and 1 <= limit <= MAX_PAGE_SIZE."""
    return max(1, page), min(max(1, limit), MAX_PAGE_SIZE)
