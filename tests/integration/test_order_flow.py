"""
End-to-end order workflow against SQLite: checkout, stock reservation,
supplier replies by SMS and supplier statistics.
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from fashop.core.container import MarketplaceContainer
from fashop.core.domain import InsufficientStockException
from fashop.domains.marketplace.application.ports import NotificationTemplate
from fashop.domains.marketplace.application.use_cases import (
    CreateOrderRequest,
    OrderLineInput,
    SupplierSmsRequest,
)
from fashop.domains.marketplace.domain.value_objects import OrderStatus, ProductStatus, SupplierResponse
from fashop.domains.marketplace.infrastructure.repositories import (
    SQLAlchemyProductRepository,
    SQLAlchemySupplierRepository,
)
from fashop.models.db import OrderModel
from tests.factories import make_address, make_product, make_supplier

pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def catalog(async_session_factory):
    """Two suppliers with one product each, committed."""
    async with async_session_factory() as session:
        suppliers = SQLAlchemySupplierRepository(session)
        products = SQLAlchemyProductRepository(session)
        kaloum = await suppliers.add(make_supplier("Boutique Kaloum", "622000001"))
        ratoma = await suppliers.add(make_supplier("Atelier Ratoma", "622000002", delivery_zones=["Ratoma"]))
        robe = await products.add(make_product(kaloum, stock=5, min_stock=2))
        sac = await products.add(
            make_product(ratoma, name="Sac cuir", sku="SAC-001", supplier_price=50000, public_price=80000, stock=1)
        )
        await session.commit()
    return {"suppliers": (kaloum, ratoma), "products": (robe, sac)}


@pytest.fixture
def container(test_settings, gateway):
    return MarketplaceContainer(test_settings, gateway)


def checkout(*lines):
    return CreateOrderRequest(
        customer_phone="+224620000000",
        delivery_address=make_address(),
        items=[OrderLineInput(product_id=product_id, quantity=quantity) for product_id, quantity in lines],
    )


async def count_orders(session_factory) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(OrderModel))


class TestOrderFlow:
    @pytest.mark.asyncio
    async def test_checkout_then_supplier_replies(self, async_session_factory, container, catalog, gateway):
        robe, sac = catalog["products"]
        kaloum, ratoma = catalog["suppliers"]

        async with async_session_factory() as session:
            response = await container.create_create_order_use_case(session).execute(
                checkout((robe.id, 3), (sac.id, 1))
            )
        order = response.order
        number = str(order.order_number)

        assert order.total == Decimal("545000.00")
        assert set(response.notified_suppliers) == {kaloum.id, ratoma.id}
        assert len(gateway.messages(NotificationTemplate.NEW_ORDER)) == 2
        # robe 5 -> 2 (at minimum), sac 1 -> 0
        assert {data["sku"] for _, data in gateway.messages(NotificationTemplate.LOW_STOCK)} == {
            "ROBE-WAX-001",
            "SAC-001",
        }

        async with async_session_factory() as session:
            products = SQLAlchemyProductRepository(session)
            assert (await products.get_by_id(robe.id)).stock == 2
            sold_out = await products.get_by_id(sac.id)
            assert sold_out.stock == 0
            assert sold_out.status == ProductStatus.OUT_OF_STOCK

        async with async_session_factory() as session:
            result = await container.create_handle_supplier_sms_use_case(session).execute(
                SupplierSmsRequest(sender_phone="622000001", text=f"oui {number}")
            )
        assert result.order.status == OrderStatus.PENDING

        async with async_session_factory() as session:
            result = await container.create_handle_supplier_sms_use_case(session).execute(
                SupplierSmsRequest(sender_phone="+224622000002", text="1")
            )
        assert result.order.status == OrderStatus.CONFIRMED
        assert result.order.get_sub_order(ratoma.id).response == SupplierResponse.CONFIRMED
        assert [r for r, _ in gateway.messages(NotificationTemplate.ORDER_CONFIRMED)] == ["+224620000000"]

        async with async_session_factory() as session:
            stored = await SQLAlchemySupplierRepository(session).get_by_id(kaloum.id)
        assert stored.total_orders == 1
        assert stored.successful_orders == 1
        assert stored.rating > 0

    @pytest.mark.asyncio
    async def test_repeated_sms_counts_once(self, async_session_factory, container, catalog):
        robe, _ = catalog["products"]
        kaloum, _ = catalog["suppliers"]

        async with async_session_factory() as session:
            response = await container.create_create_order_use_case(session).execute(checkout((robe.id, 1)))
        number = str(response.order.order_number)

        for _ in range(2):
            async with async_session_factory() as session:
                await container.create_handle_supplier_sms_use_case(session).execute(
                    SupplierSmsRequest(sender_phone="622000001", text=f"OUI {number}")
                )

        async with async_session_factory() as session:
            stored = await SQLAlchemySupplierRepository(session).get_by_id(kaloum.id)
        assert stored.total_orders == 1

    @pytest.mark.asyncio
    async def test_stock_taken_between_validation_and_reservation(
        self, async_session_factory, container, catalog, gateway
    ):
        """
        Another checkout takes the last unit after this one validated stock:
        the reservation fails and nothing is written.
        """
        _, sac = catalog["products"]

        async with async_session_factory() as session:
            use_case = container.create_create_order_use_case(session)
            load_suppliers = use_case.supplier_repository.get_by_ids

            async def competing_checkout(supplier_ids):
                async with async_session_factory() as other:
                    assert await SQLAlchemyProductRepository(other).decrement_stock(sac.id, 1) == 0
                    await other.commit()
                return await load_suppliers(supplier_ids)

            use_case.supplier_repository.get_by_ids = competing_checkout

            with pytest.raises(InsufficientStockException) as exc_info:
                await use_case.execute(checkout((sac.id, 1)))

        assert exc_info.value.available == 0
        assert await count_orders(async_session_factory) == 0
        assert gateway.sent == []

        async with async_session_factory() as session:
            assert (await SQLAlchemyProductRepository(session).get_by_id(sac.id)).stock == 0

    @pytest.mark.asyncio
    async def test_insufficient_stock_leaves_nothing_behind(self, async_session_factory, container, catalog):
        robe, sac = catalog["products"]

        async with async_session_factory() as session:
            with pytest.raises(InsufficientStockException):
                await container.create_create_order_use_case(session).execute(checkout((robe.id, 1), (sac.id, 2)))

        assert await count_orders(async_session_factory) == 0
        async with async_session_factory() as session:
            assert (await SQLAlchemyProductRepository(session).get_by_id(robe.id)).stock == 5
