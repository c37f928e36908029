"""
Integration tests for the SQLAlchemy repositories (SQLite).
"""

from datetime import timedelta
from decimal import Decimal

import pytest
import pytest_asyncio

from fashop.core.domain import (
    ConcurrencyException,
    DuplicateEntityException,
    ProductNotFoundException,
    generate_uuid,
    utcnow,
)
from fashop.domains.marketplace.application.ports import OrderFilter, ProductFilter, SupplierFilter
from fashop.domains.marketplace.domain.entities import Order, OrderItem, SupplierContact
from fashop.domains.marketplace.domain.value_objects import (
    OrderNumber,
    OrderStatus,
    ProductStatus,
    SupplierResponse,
)
from fashop.domains.marketplace.infrastructure.repositories import (
    SQLAlchemyOrderRepository,
    SQLAlchemyProductRepository,
    SQLAlchemyStatsRepository,
    SQLAlchemySupplierRepository,
)
from tests.factories import make_address, make_product, make_supplier

pytestmark = pytest.mark.integration


@pytest.fixture
def supplier_repo(db_session):
    return SQLAlchemySupplierRepository(db_session)


@pytest.fixture
def product_repo(db_session):
    return SQLAlchemyProductRepository(db_session)


@pytest.fixture
def order_repo(db_session):
    return SQLAlchemyOrderRepository(db_session)


@pytest_asyncio.fixture
async def stored_supplier(supplier_repo):
    return await supplier_repo.add(make_supplier())


@pytest_asyncio.fixture
async def stored_product(product_repo, stored_supplier):
    return await product_repo.add(make_product(stored_supplier, stock=10, min_stock=2))


def new_order(supplier, product, number="FA-100001", quantity=1) -> Order:
    return Order.create(
        order_number=OrderNumber(number),
        customer_phone="+224620000000",
        delivery_address=make_address(),
        items=[OrderItem.from_product(product, quantity)],
        suppliers={supplier.id: SupplierContact(supplier.id, supplier.name, str(supplier.phone))},
        delivery_fee=Decimal("15000"),
    )


class TestSupplierRepository:
    @pytest.mark.asyncio
    async def test_round_trip(self, supplier_repo, stored_supplier):
        loaded = await supplier_repo.get_by_id(stored_supplier.id)

        assert loaded.name == "Boutique Kaloum"
        assert str(loaded.phone) == "+224622000001"
        assert loaded.delivery_zones == ["Kaloum"]
        assert loaded.version == 0

    @pytest.mark.asyncio
    async def test_lookup_by_local_phone(self, supplier_repo, stored_supplier):
        loaded = await supplier_repo.get_by_phone("622 00 00 01")
        assert loaded.id == stored_supplier.id

    @pytest.mark.asyncio
    async def test_duplicate_phone(self, supplier_repo, stored_supplier):
        with pytest.raises(DuplicateEntityException) as exc_info:
            await supplier_repo.add(make_supplier("Autre boutique", "+224622000001"))
        assert exc_info.value.field == "phone"

    @pytest.mark.asyncio
    async def test_stale_save_conflicts(self, supplier_repo, stored_supplier):
        first = await supplier_repo.get_by_id(stored_supplier.id)
        second = await supplier_repo.get_by_id(stored_supplier.id)

        first.update_stats(is_successful=True, response_time_minutes=10)
        await supplier_repo.save(first)

        second.update_stats(is_successful=False, response_time_minutes=10)
        with pytest.raises(ConcurrencyException):
            await supplier_repo.save(second)

        reloaded = await supplier_repo.get_by_id(stored_supplier.id)
        assert reloaded.version == 1
        assert reloaded.successful_orders == 1

    @pytest.mark.asyncio
    async def test_stats_rounded_to_column_scale(self, supplier_repo, stored_supplier):
        supplier = await supplier_repo.get_by_id(stored_supplier.id)
        for minutes in (10, 15, 16, 20, 25):
            supplier.update_stats(is_successful=False, response_time_minutes=minutes)
        await supplier_repo.save(supplier)

        loaded = await supplier_repo.get_by_id(stored_supplier.id)

        assert loaded.average_response_time == Decimal("21.0625")
        assert loaded.rating == Decimal("2.86")

    @pytest.mark.asyncio
    async def test_search_orders_by_rating(self, supplier_repo, stored_supplier):
        rated = make_supplier("Atelier Ratoma", "622000002")
        rated.update_stats(is_successful=True, response_time_minutes=5)
        await supplier_repo.add(rated)
        inactive = make_supplier("Ancienne boutique", "622000003", is_active=False)
        await supplier_repo.add(inactive)

        suppliers, total = await supplier_repo.search(SupplierFilter())

        assert total == 2
        assert [s.name for s in suppliers] == ["Atelier Ratoma", "Boutique Kaloum"]


class TestProductRepository:
    @pytest.mark.asyncio
    async def test_round_trip(self, product_repo, stored_product):
        loaded = await product_repo.get_by_sku("robe-wax-001")

        assert loaded.id == stored_product.id
        assert loaded.public_price.amount == Decimal("150000.00")
        assert loaded.margin_percentage == Decimal("50.0")
        assert loaded.status == ProductStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_duplicate_sku(self, product_repo, stored_supplier, stored_product):
        with pytest.raises(DuplicateEntityException) as exc_info:
            await product_repo.add(make_product(stored_supplier, name="Copie"))
        assert exc_info.value.field == "sku"

    @pytest.mark.asyncio
    async def test_stale_save_conflicts(self, product_repo, stored_product):
        first = await product_repo.get_by_id(stored_product.id)
        second = await product_repo.get_by_id(stored_product.id)

        first.apply_stock_delta(1)
        await product_repo.save(first)

        second.apply_stock_delta(2)
        with pytest.raises(ConcurrencyException) as exc_info:
            await product_repo.save(second)
        assert exc_info.value.actual_version == 1

    @pytest.mark.asyncio
    async def test_save_missing_product(self, product_repo, stored_supplier):
        ghost = make_product(stored_supplier, sku="GHOST-1")
        ghost.id = stored_supplier.id

        with pytest.raises(ProductNotFoundException):
            await product_repo.save(ghost)

    @pytest.mark.asyncio
    async def test_decrement_stock_is_guarded(self, product_repo, stored_product):
        assert await product_repo.decrement_stock(stored_product.id, 4) == 6
        assert await product_repo.decrement_stock(stored_product.id, 7) is None
        assert await product_repo.decrement_stock(stored_product.id, 6) == 0

        loaded = await product_repo.get_by_id(stored_product.id)
        assert loaded.stock == 0
        assert loaded.status == ProductStatus.OUT_OF_STOCK
        assert not loaded.is_available
        assert loaded.version == 2

    @pytest.mark.asyncio
    async def test_search_filters(self, product_repo, stored_supplier, stored_product):
        await product_repo.add(
            make_product(stored_supplier, name="Sac cuir", sku="SAC-001", category="accessoires", featured=True)
        )
        await product_repo.add(make_product(stored_supplier, name="Pagne", sku="PAGNE-1", stock=0))

        active, total = await product_repo.search(ProductFilter(status=ProductStatus.ACTIVE))
        assert total == 2
        assert active[0].name == "Sac cuir"

        found, _ = await product_repo.search(ProductFilter(search="robe"))
        assert [p.id for p in found] == [stored_product.id]

        empty, total = await product_repo.search(ProductFilter(in_stock=False))
        assert total == 1
        assert empty[0].status == ProductStatus.OUT_OF_STOCK


class TestOrderRepository:
    @pytest.mark.asyncio
    async def test_round_trip(self, order_repo, stored_supplier, stored_product):
        order = await order_repo.add(new_order(stored_supplier, stored_product, quantity=2))

        loaded = await order_repo.get_by_number("FA-100001")

        assert loaded.id == order.id
        assert loaded.total == Decimal("315000.00")
        assert loaded.items == order.items
        assert loaded.delivery_address == order.delivery_address
        assert loaded.get_sub_order(stored_supplier.id).response == SupplierResponse.PENDING

    @pytest.mark.asyncio
    async def test_duplicate_order_number(self, order_repo, stored_supplier, stored_product):
        await order_repo.add(new_order(stored_supplier, stored_product))

        with pytest.raises(DuplicateEntityException) as exc_info:
            await order_repo.add(new_order(stored_supplier, stored_product))
        assert exc_info.value.field == "order_number"

    @pytest.mark.asyncio
    async def test_stale_save_conflicts(self, order_repo, stored_supplier, stored_product):
        order = await order_repo.add(new_order(stored_supplier, stored_product))
        first = await order_repo.get_by_id(order.id)
        second = await order_repo.get_by_id(order.id)

        first.process_supplier_response(stored_supplier.id, SupplierResponse.CONFIRMED)
        await order_repo.save(first)

        second.process_supplier_response(stored_supplier.id, SupplierResponse.REJECTED)
        with pytest.raises(ConcurrencyException):
            await order_repo.save(second)

        assert (await order_repo.get_by_id(order.id)).status == OrderStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_find_awaiting_reply_oldest_first(self, order_repo, stored_supplier, stored_product):
        newest = new_order(stored_supplier, stored_product, "FA-100003")
        oldest = new_order(stored_supplier, stored_product, "FA-100001")
        oldest.created_at = utcnow() - timedelta(hours=2)
        answered = new_order(stored_supplier, stored_product, "FA-100002")
        answered.created_at = utcnow() - timedelta(hours=3)
        answered.process_supplier_response(stored_supplier.id, SupplierResponse.CONFIRMED)
        for order in (newest, oldest, answered):
            await order_repo.add(order)

        waiting = await order_repo.find_awaiting_reply(stored_supplier.id)

        assert [str(o.order_number) for o in waiting] == ["FA-100001", "FA-100003"]

    @pytest.mark.asyncio
    async def test_search_by_supplier_and_status(self, order_repo, supplier_repo, stored_supplier, stored_product):
        other = await supplier_repo.add(make_supplier("Atelier Ratoma", "622000002"))
        sac = make_product(other, name="Sac cuir", sku="SAC-001", product_id=generate_uuid())
        await order_repo.add(new_order(stored_supplier, stored_product, "FA-100001"))
        await order_repo.add(new_order(other, sac, "FA-100002"))

        orders, total = await order_repo.search(OrderFilter(supplier_id=other.id))
        assert total == 1
        assert str(orders[0].order_number) == "FA-100002"

        _, total = await order_repo.search(OrderFilter(status=OrderStatus.PENDING, search="fa-100001"))
        assert total == 1


class TestStatsRepository:
    @pytest.mark.asyncio
    async def test_dashboard(self, db_session, order_repo, stored_supplier, stored_product):
        paid = new_order(stored_supplier, stored_product, "FA-100001")
        paid.confirm_payment("OM-1")
        await order_repo.add(paid)
        await order_repo.add(new_order(stored_supplier, stored_product, "FA-100002"))

        stats = await SQLAlchemyStatsRepository(db_session).dashboard()

        assert stats.total_orders == 2
        assert stats.pending_orders == 2
        assert stats.total_products == 1
        assert stats.low_stock_products == 0
        assert stats.active_suppliers == 1
        assert stats.revenue == Decimal("165000.00")
        assert stats.margin_revenue == Decimal("50000.00")
        assert stats.top_suppliers[0]["name"] == "Boutique Kaloum"
