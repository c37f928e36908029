"""
Order Repository Implementation

SQLAlchemy implementation of IOrderRepository. The aggregate is one row;
items, sub-orders and the delivery address are JSON documents.
"""

import logging
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fashop.core.domain import ConcurrencyException, OrderNotFoundException, generate_uuid
from fashop.domains.marketplace.application.ports import IOrderRepository, OrderFilter
from fashop.domains.marketplace.domain.entities.order import Order, OrderItem, SupplierSubOrder
from fashop.domains.marketplace.domain.value_objects import (
    DeliveryAddress,
    DeliveryMethod,
    OrderNumber,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    SupplierResponse,
)
from fashop.models.db import OrderModel

from .mapping import as_decimal, as_utc, duplicate_from_integrity_error

logger = logging.getLogger(__name__)


def _supplier_refs(order: Order) -> str:
    if not order.suppliers:
        return ""
    return "," + ",".join(str(s.supplier_id) for s in order.suppliers) + ","


class SQLAlchemyOrderRepository(IOrderRepository):
    """
    SQLAlchemy implementation of order repository.

    Handles order persistence with optimistic concurrency on ``version``.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def add(self, order: Order) -> Order:
        """
        Insert a new order.

        Raises:
            DuplicateEntityException: The order number is already taken
        """
        if order.id is None:
            order.id = generate_uuid()
        self.session.add(self._to_model(order))
        try:
            await self.session.flush()
        except IntegrityError as e:
            duplicate = duplicate_from_integrity_error(e, "Order", {"order_number": str(order.order_number)})
            if duplicate is None:
                raise
            raise duplicate from e
        return order

    async def get_by_id(self, order_id: UUID) -> Order | None:
        result = await self.session.execute(
            select(OrderModel).where(OrderModel.id == order_id).execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_number(self, order_number: str) -> Order | None:
        result = await self.session.execute(
            select(OrderModel)
            .where(OrderModel.order_number == order_number)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def save(self, order: Order) -> Order:
        """
        Persist the whole aggregate if nobody saved it since it was loaded.

        Raises:
            ConcurrencyException: Stored version differs from ``order.version``
            OrderNotFoundException: The order row no longer exists
        """
        if order.id is None:
            return await self.add(order)

        expected = order.version
        values = self._values(order)
        values["version"] = expected + 1
        result = await self.session.execute(
            update(OrderModel)
            .where(OrderModel.id == order.id, OrderModel.version == expected)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            actual = await self.session.scalar(select(OrderModel.version).where(OrderModel.id == order.id))
            if actual is None:
                raise OrderNotFoundException(order.id)
            raise ConcurrencyException("Order", order.id, expected, actual)

        order.version = expected + 1
        return order

    async def search(
        self, filters: OrderFilter, page: int = 1, limit: int = 20
    ) -> tuple[list[Order], int]:
        conditions = []
        if filters.status is not None:
            conditions.append(OrderModel.status == filters.status.value)
        if filters.payment_status is not None:
            conditions.append(OrderModel.payment_status == filters.payment_status.value)
        if filters.payment_method is not None:
            conditions.append(OrderModel.payment_method == filters.payment_method.value)
        if filters.supplier_id is not None:
            conditions.append(OrderModel.supplier_refs.like(f"%,{filters.supplier_id},%"))
        if filters.search:
            term = filters.search.strip()
            conditions.append(
                or_(
                    OrderModel.order_number == term.upper(),
                    func.lower(OrderModel.customer_email).like(f"%{term.lower()}%"),
                    OrderModel.customer_phone.like(f"%{term}%"),
                )
            )

        total = await self.session.scalar(select(func.count()).select_from(OrderModel).where(*conditions))
        result = await self.session.execute(
            select(OrderModel)
            .where(*conditions)
            .order_by(OrderModel.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()], total or 0

    async def find_awaiting_reply(self, supplier_id: UUID) -> list[Order]:
        """Pending orders whose sub-order for ``supplier_id`` has no reply, oldest first."""
        result = await self.session.execute(
            select(OrderModel)
            .where(
                OrderModel.status == OrderStatus.PENDING.value,
                OrderModel.supplier_refs.like(f"%,{supplier_id},%"),
            )
            .order_by(OrderModel.created_at.asc())
            .execution_options(populate_existing=True)
        )
        orders = [self._to_entity(m) for m in result.scalars().all()]
        return [
            order
            for order in orders
            if (sub_order := order.get_sub_order(supplier_id)) is not None
            and sub_order.response == SupplierResponse.PENDING
        ]

    # Mapping methods

    def _values(self, order: Order) -> dict:
        return {
            "order_number": str(order.order_number),
            "customer_id": order.customer_id,
            "customer_email": order.customer_email,
            "customer_phone": order.customer_phone,
            "delivery_address": order.delivery_address.to_dict() if order.delivery_address else {},
            "items": [item.to_dict() for item in order.items],
            "suppliers": [sub_order.to_dict() for sub_order in order.suppliers],
            "supplier_refs": _supplier_refs(order),
            "subtotal": order.subtotal,
            "delivery_fee": order.delivery_fee,
            "total": order.total,
            "total_margin": order.total_margin,
            "status": order.status.value,
            "payment_status": order.payment_status.value,
            "payment_method": order.payment_method.value,
            "payment_reference": order.payment_reference,
            "delivery_method": order.delivery_method.value,
            "notes": order.notes,
            "admin_notes": order.admin_notes,
            "updated_at": order.updated_at,
        }

    def _to_model(self, order: Order) -> OrderModel:
        return OrderModel(
            id=order.id,
            created_at=order.created_at,
            version=order.version,
            **self._values(order),
        )

    def _to_entity(self, model: OrderModel) -> Order:
        suppliers = [SupplierSubOrder.from_dict(data) for data in model.suppliers or []]
        for sub_order in suppliers:
            sub_order.response_time = as_utc(sub_order.response_time)

        return Order(
            id=model.id,
            order_number=OrderNumber(model.order_number),
            customer_id=model.customer_id,
            customer_email=model.customer_email,
            customer_phone=model.customer_phone,
            delivery_address=DeliveryAddress.from_dict(model.delivery_address) if model.delivery_address else None,
            items=[OrderItem.from_dict(data) for data in model.items or []],
            suppliers=suppliers,
            subtotal=as_decimal(model.subtotal),
            delivery_fee=as_decimal(model.delivery_fee),
            total=as_decimal(model.total),
            total_margin=as_decimal(model.total_margin),
            status=OrderStatus.from_string(model.status),
            payment_status=PaymentStatus.from_string(model.payment_status),
            payment_method=PaymentMethod.from_string(model.payment_method),
            payment_reference=model.payment_reference,
            delivery_method=DeliveryMethod.from_string(model.delivery_method),
            notes=model.notes,
            admin_notes=model.admin_notes,
            version=model.version or 0,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
