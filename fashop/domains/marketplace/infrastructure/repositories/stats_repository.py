"""
Dashboard Stats Repository

Aggregate queries over orders, products and suppliers.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fashop.domains.marketplace.application.ports import DashboardStats, IStatsRepository
from fashop.domains.marketplace.domain.value_objects import OrderStatus, PaymentStatus, ProductStatus
from fashop.models.db import OrderModel, ProductModel, SupplierModel

from .mapping import as_decimal


class SQLAlchemyStatsRepository(IStatsRepository):
    """Read-only counters for the back-office dashboard."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _count(self, model, *conditions) -> int:
        return await self.session.scalar(select(func.count()).select_from(model).where(*conditions)) or 0

    async def dashboard(self, top_suppliers: int = 5) -> DashboardStats:
        """
        Revenue and margin only count paid orders that were not cancelled
        or refunded.
        """
        revenue_row = (
            await self.session.execute(
                select(
                    func.coalesce(func.sum(OrderModel.total), 0),
                    func.coalesce(func.sum(OrderModel.total_margin), 0),
                ).where(
                    OrderModel.payment_status == PaymentStatus.PAID.value,
                    OrderModel.status.not_in([OrderStatus.CANCELLED.value, OrderStatus.REFUNDED.value]),
                )
            )
        ).one()

        suppliers = await self.session.execute(
            select(
                SupplierModel.id,
                SupplierModel.name,
                SupplierModel.rating,
                SupplierModel.total_orders,
                SupplierModel.successful_orders,
            )
            .where(SupplierModel.is_active.is_(True))
            .order_by(SupplierModel.rating.desc(), SupplierModel.total_orders.desc())
            .limit(top_suppliers)
        )

        return DashboardStats(
            total_orders=await self._count(OrderModel),
            pending_orders=await self._count(OrderModel, OrderModel.status == OrderStatus.PENDING.value),
            total_products=await self._count(ProductModel, ProductModel.status != ProductStatus.INACTIVE.value),
            low_stock_products=await self._count(
                ProductModel,
                ProductModel.status.in_([ProductStatus.ACTIVE.value, ProductStatus.OUT_OF_STOCK.value]),
                ProductModel.stock <= ProductModel.min_stock,
            ),
            active_suppliers=await self._count(SupplierModel, SupplierModel.is_active.is_(True)),
            revenue=as_decimal(revenue_row[0]).quantize(Decimal("0.01")),
            margin_revenue=as_decimal(revenue_row[1]).quantize(Decimal("0.01")),
            top_suppliers=[
                {
                    "id": str(row.id),
                    "name": row.name,
                    "rating": as_decimal(row.rating),
                    "total_orders": row.total_orders,
                    "successful_orders": row.successful_orders,
                }
                for row in suppliers.all()
            ],
        )
