"""
Product Repository Implementation

SQLAlchemy implementation of IProductRepository, including the guarded
stock decrement used to reserve stock for orders.
"""

import logging
from uuid import UUID

from sqlalchemy import and_, case, false, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fashop.core.domain import ConcurrencyException, ProductNotFoundException, generate_uuid, utcnow
from fashop.domains.marketplace.application.ports import IProductRepository, ProductFilter
from fashop.domains.marketplace.domain.entities.product import Product
from fashop.domains.marketplace.domain.value_objects import SKU, Price, ProductStatus
from fashop.models.db import ProductModel

from .mapping import as_decimal, as_utc, duplicate_from_integrity_error

logger = logging.getLogger(__name__)


class SQLAlchemyProductRepository(IProductRepository):
    """
    SQLAlchemy implementation of product repository.

    ``save`` is optimistic (version checked); ``decrement_stock`` is a
    single conditional UPDATE so concurrent orders can never oversell.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get_by_id(self, product_id: UUID) -> Product | None:
        result = await self.session.execute(
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_sku(self, sku: str) -> Product | None:
        result = await self.session.execute(
            select(ProductModel)
            .where(ProductModel.sku == sku.strip().upper())
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def search(
        self, filters: ProductFilter, page: int = 1, limit: int = 20
    ) -> tuple[list[Product], int]:
        """Filtered page of products, featured first then newest."""
        conditions = []
        if filters.status is not None:
            conditions.append(ProductModel.status == filters.status.value)
        if filters.category:
            conditions.append(func.lower(ProductModel.category) == filters.category.lower())
        if filters.supplier_id is not None:
            conditions.append(ProductModel.supplier_id == filters.supplier_id)
        if filters.featured is not None:
            conditions.append(ProductModel.featured.is_(filters.featured))
        if filters.in_stock is True:
            conditions.append(ProductModel.stock > 0)
        elif filters.in_stock is False:
            conditions.append(ProductModel.stock <= 0)
        if filters.search:
            pattern = f"%{filters.search.lower()}%"
            conditions.append(
                or_(
                    func.lower(ProductModel.name).like(pattern),
                    func.lower(ProductModel.description).like(pattern),
                    func.lower(ProductModel.sku).like(pattern),
                )
            )

        total = await self.session.scalar(select(func.count()).select_from(ProductModel).where(*conditions))
        result = await self.session.execute(
            select(ProductModel)
            .where(*conditions)
            .order_by(ProductModel.featured.desc(), ProductModel.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()], total or 0

    async def add(self, product: Product) -> Product:
        if product.id is None:
            product.id = generate_uuid()
        self.session.add(self._to_model(product))
        try:
            await self.session.flush()
        except IntegrityError as e:
            duplicate = duplicate_from_integrity_error(e, "Product", {"sku": str(product.sku)})
            if duplicate is None:
                raise
            raise duplicate from e
        return product

    async def save(self, product: Product) -> Product:
        if product.id is None:
            return await self.add(product)

        expected = product.version
        values = self._values(product)
        values["version"] = expected + 1
        try:
            result = await self.session.execute(
                update(ProductModel)
                .where(ProductModel.id == product.id, ProductModel.version == expected)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
        except IntegrityError as e:
            duplicate = duplicate_from_integrity_error(e, "Product", {"sku": str(product.sku)})
            if duplicate is None:
                raise
            raise duplicate from e

        if result.rowcount == 0:
            actual = await self.session.scalar(select(ProductModel.version).where(ProductModel.id == product.id))
            if actual is None:
                raise ProductNotFoundException(product.id)
            raise ConcurrencyException("Product", product.id, expected, actual)

        product.version = expected + 1
        return product

    async def decrement_stock(self, product_id: UUID, quantity: int) -> int | None:
        """
        Take ``quantity`` units in one statement.

        The WHERE clause only matches while enough stock is left, so two
        concurrent orders cannot both take the last units. The status flip
        to out_of_stock happens in the same statement.

        Returns:
            Remaining stock, or None if the product lacked stock (or is gone)
        """
        new_stock = ProductModel.stock - quantity
        stmt = (
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(
                stock=new_stock,
                status=case(
                    (
                        and_(new_stock <= 0, ProductModel.status == ProductStatus.ACTIVE.value),
                        ProductStatus.OUT_OF_STOCK.value,
                    ),
                    else_=ProductModel.status,
                ),
                is_available=case((new_stock <= 0, false()), else_=ProductModel.is_available),
                version=ProductModel.version + 1,
                updated_at=utcnow(),
            )
            .returning(ProductModel.stock)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        if row is None:
            logger.debug(f"Stock guard rejected decrement of {quantity} on product {product_id}")
            return None
        return row[0]

    # Mapping methods

    def _values(self, product: Product) -> dict:
        return {
            "name": product.name,
            "description": product.description,
            "category": product.category,
            "sku": str(product.sku),
            "supplier_id": product.supplier_id,
            "supplier_name": product.supplier_name,
            "supplier_price": product.supplier_price.amount,
            "public_price": product.public_price.amount,
            "margin": product.margin,
            "margin_percentage": product.margin_percentage,
            "stock": product.stock,
            "min_stock": product.min_stock,
            "status": product.status.value,
            "is_available": product.is_available,
            "featured": product.featured,
            "updated_at": product.updated_at,
        }

    def _to_model(self, product: Product) -> ProductModel:
        return ProductModel(
            id=product.id,
            created_at=product.created_at,
            version=product.version,
            **self._values(product),
        )

    def _to_entity(self, model: ProductModel) -> Product:
        return Product(
            id=model.id,
            name=model.name,
            description=model.description,
            category=model.category,
            sku=SKU(model.sku),
            supplier_id=model.supplier_id,
            supplier_name=model.supplier_name,
            supplier_price=Price(as_decimal(model.supplier_price)),
            public_price=Price(as_decimal(model.public_price)),
            margin=as_decimal(model.margin),
            margin_percentage=as_decimal(model.margin_percentage),
            stock=model.stock or 0,
            min_stock=model.min_stock if model.min_stock is not None else 1,
            status=ProductStatus.from_string(model.status),
            is_available=bool(model.is_available),
            featured=bool(model.featured),
            version=model.version or 0,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
