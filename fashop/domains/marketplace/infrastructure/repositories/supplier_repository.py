"""
Supplier Repository Implementation

SQLAlchemy implementation of ISupplierRepository.
"""

import logging
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fashop.core.domain import ConcurrencyException, PhoneNumber, SupplierNotFoundException, generate_uuid
from fashop.domains.marketplace.application.ports import ISupplierRepository, SupplierFilter
from fashop.domains.marketplace.domain.entities.supplier import Supplier
from fashop.models.db import SupplierModel

from .mapping import as_decimal, as_utc, duplicate_from_integrity_error, to_scale

logger = logging.getLogger(__name__)


class SQLAlchemySupplierRepository(ISupplierRepository):
    """
    SQLAlchemy implementation of supplier repository.

    Updates are optimistic: a save only lands when the stored version
    still matches the entity's.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get_by_id(self, supplier_id: UUID) -> Supplier | None:
        result = await self.session.execute(
            select(SupplierModel)
            .where(SupplierModel.id == supplier_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_ids(self, supplier_ids: list[UUID]) -> dict[UUID, Supplier]:
        if not supplier_ids:
            return {}
        result = await self.session.execute(
            select(SupplierModel)
            .where(SupplierModel.id.in_(supplier_ids))
            .execution_options(populate_existing=True)
        )
        return {model.id: self._to_entity(model) for model in result.scalars().all()}

    async def get_by_phone(self, phone: str) -> Supplier | None:
        """Lookup by phone; accepts local or international form."""
        canonical = PhoneNumber(phone).number
        result = await self.session.execute(
            select(SupplierModel)
            .where(SupplierModel.phone == canonical)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def search(
        self, filters: SupplierFilter, page: int = 1, limit: int = 20
    ) -> tuple[list[Supplier], int]:
        conditions = []
        if filters.active_only:
            conditions.append(SupplierModel.is_active.is_(True))
        if filters.city:
            conditions.append(func.lower(SupplierModel.city) == filters.city.lower())
        if filters.search:
            pattern = f"%{filters.search.lower()}%"
            conditions.append(
                or_(
                    func.lower(SupplierModel.name).like(pattern),
                    func.lower(SupplierModel.description).like(pattern),
                    SupplierModel.phone.like(f"%{filters.search}%"),
                )
            )

        total = await self.session.scalar(select(func.count()).select_from(SupplierModel).where(*conditions))
        result = await self.session.execute(
            select(SupplierModel)
            .where(*conditions)
            .order_by(SupplierModel.rating.desc(), SupplierModel.name)
            .offset((page - 1) * limit)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()], total or 0

    async def add(self, supplier: Supplier) -> Supplier:
        if supplier.id is None:
            supplier.id = generate_uuid()
        self.session.add(self._to_model(supplier))
        try:
            await self.session.flush()
        except IntegrityError as e:
            duplicate = duplicate_from_integrity_error(e, "Supplier", {"phone": str(supplier.phone)})
            if duplicate is None:
                raise
            raise duplicate from e
        return supplier

    async def save(self, supplier: Supplier) -> Supplier:
        if supplier.id is None:
            return await self.add(supplier)

        expected = supplier.version
        values = self._values(supplier)
        values["version"] = expected + 1
        try:
            result = await self.session.execute(
                update(SupplierModel)
                .where(SupplierModel.id == supplier.id, SupplierModel.version == expected)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
        except IntegrityError as e:
            duplicate = duplicate_from_integrity_error(e, "Supplier", {"phone": str(supplier.phone)})
            if duplicate is None:
                raise
            raise duplicate from e

        if result.rowcount == 0:
            actual = await self.session.scalar(select(SupplierModel.version).where(SupplierModel.id == supplier.id))
            if actual is None:
                raise SupplierNotFoundException(supplier.id)
            raise ConcurrencyException("Supplier", supplier.id, expected, actual)

        supplier.version = expected + 1
        return supplier

    # Mapping methods

    def _values(self, supplier: Supplier) -> dict:
        return {
            "name": supplier.name,
            "phone": str(supplier.phone),
            "email": supplier.email,
            "whatsapp": supplier.whatsapp,
            "address": supplier.address,
            "city": supplier.city,
            "description": supplier.description,
            "categories": list(supplier.categories),
            "delivery_zones": list(supplier.delivery_zones),
            "rating": to_scale(supplier.rating, "0.01"),
            "total_orders": supplier.total_orders,
            "successful_orders": supplier.successful_orders,
            "average_response_time": to_scale(supplier.average_response_time, "0.0001"),
            "is_active": supplier.is_active,
            "updated_at": supplier.updated_at,
        }

    def _to_model(self, supplier: Supplier) -> SupplierModel:
        return SupplierModel(
            id=supplier.id,
            created_at=supplier.created_at,
            version=supplier.version,
            **self._values(supplier),
        )

    def _to_entity(self, model: SupplierModel) -> Supplier:
        return Supplier(
            id=model.id,
            name=model.name,
            phone=PhoneNumber(model.phone),
            email=model.email,
            whatsapp=model.whatsapp,
            address=model.address,
            city=model.city or "Conakry",
            description=model.description,
            categories=list(model.categories or []),
            delivery_zones=list(model.delivery_zones or []),
            rating=as_decimal(model.rating),
            total_orders=model.total_orders or 0,
            successful_orders=model.successful_orders or 0,
            average_response_time=(
                as_decimal(model.average_response_time) if model.average_response_time is not None else None
            ),
            is_active=bool(model.is_active),
            version=model.version or 0,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
