"""
API tests: the FastAPI app over SQLite with the notification gateway stubbed.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from fashop.config.settings import get_settings
from fashop.core.app_factory import create_app
from fashop.core.container import MarketplaceContainer
from fashop.database import get_async_db
from fashop.domains.marketplace.api.dependencies import get_marketplace_container

pytestmark = pytest.mark.integration

ADMIN = {"X-Admin-Token": "test-admin-token"}


@pytest.fixture
def app(test_settings, async_session_factory, gateway):
    application = create_app(test_settings)

    async def override_db():
        async with async_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_async_db] = override_db
    application.dependency_overrides[get_marketplace_container] = lambda: MarketplaceContainer(test_settings, gateway)
    application.dependency_overrides[get_settings] = lambda: test_settings
    return application


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def seeded(client):
    """One supplier and one product created through the admin API."""
    response = await client.post(
        "/api/v1/suppliers",
        json={"name": "Boutique Kaloum", "phone": "622000001", "delivery_zones": ["Kaloum"]},
        headers=ADMIN,
    )
    assert response.status_code == 201, response.text
    supplier = response.json()["data"]

    response = await client.post(
        "/api/v1/products",
        json={
            "name": "Robe wax",
            "category": "vetements",
            "sku": "robe-wax-001",
            "supplier_id": supplier["id"],
            "supplier_price": 100000,
            "public_price": 150000,
            "stock": 10,
        },
        headers=ADMIN,
    )
    assert response.status_code == 201, response.text
    return {"supplier": supplier, "product": response.json()["data"]}


def order_payload(product_id, quantity=2):
    return {
        "customer_phone": "+224620000000",
        "delivery_address": {
            "first_name": "Aissatou",
            "last_name": "Diallo",
            "phone": "+224620000000",
            "address": "Rue KA-020",
            "commune": "Kaloum",
        },
        "items": [{"product_id": product_id, "quantity": quantity}],
    }


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestAdminGuard:
    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get("/api/v1/suppliers")

        assert response.status_code == 401
        assert response.json()["success"] is False
        assert response.json()["error"]["code"] == "HTTP_401"

    @pytest.mark.asyncio
    async def test_wrong_token(self, client):
        response = await client.get("/api/v1/stats/dashboard", headers={"X-Admin-Token": "nope"})
        assert response.status_code == 403


class TestCatalogApi:
    @pytest.mark.asyncio
    async def test_created_product_is_listed_with_margin(self, client, seeded):
        product = seeded["product"]
        assert product["sku"] == "ROBE-WAX-001"
        assert product["margin"] == 50000
        assert product["margin_percentage"] == 50

        response = await client.get("/api/v1/products")

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["data"]["total"] == 1
        assert body["data"]["items"][0]["id"] == product["id"]

    @pytest.mark.asyncio
    async def test_duplicate_sku_conflicts(self, client, seeded):
        payload = {
            "name": "Copie",
            "category": "vetements",
            "sku": "ROBE-WAX-001",
            "supplier_id": seeded["supplier"]["id"],
            "supplier_price": 1,
            "public_price": 2,
        }
        response = await client.post("/api/v1/products", json=payload, headers=ADMIN)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_ENTITY"

    @pytest.mark.asyncio
    async def test_adjust_stock(self, client, seeded):
        product_id = seeded["product"]["id"]

        response = await client.put(
            f"/api/v1/products/{product_id}/stock",
            json={"quantity": 10, "operation": "subtract"},
            headers=ADMIN,
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["previous_stock"] == 10
        assert data["product"]["stock"] == 0
        assert data["product"]["status"] == "out_of_stock"
        assert data["low_stock_alert_sent"] is True

    @pytest.mark.asyncio
    async def test_unknown_product_is_404_envelope(self, client):
        response = await client.get("/api/v1/products/00000000-0000-0000-0000-000000000000")

        body = response.json()
        assert response.status_code == 404
        assert body["success"] is False
        assert body["error"]["code"] == "PRODUCT_NOT_FOUND"
        assert body["error"]["details"]["entity_type"] == "Product"


class TestOrdersApi:
    @pytest.mark.asyncio
    async def test_checkout_and_sms_confirmation(self, client, seeded, gateway):
        response = await client.post("/api/v1/orders", json=order_payload(seeded["product"]["id"]))

        assert response.status_code == 201, response.text
        data = response.json()["data"]
        order = data["order"]
        assert order["order_number"].startswith("FA-")
        assert order["total"] == 315000
        assert order["status"] == "pending"
        assert data["notified_suppliers"] == [seeded["supplier"]["id"]]

        response = await client.post(
            "/api/v1/webhooks/sms",
            json={"from": "+224 622 00 00 01", "text": f"OUI {order['order_number']}"},
        )
        assert response.status_code == 200, response.text
        assert response.json()["data"]["status_changed"] is True

        response = await client.get(f"/api/v1/orders/{order['order_number'].lower()}")
        assert response.json()["data"]["status"] == "confirmed"
        assert response.json()["data"]["suppliers"][0]["response"] == "confirmed"

    @pytest.mark.asyncio
    async def test_empty_cart_is_400(self, client):
        payload = order_payload("00000000-0000-0000-0000-000000000000")
        payload["items"] = []

        response = await client.post("/api/v1/orders", json=payload)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_not_enough_stock_is_409(self, client, seeded):
        response = await client.post("/api/v1/orders", json=order_payload(seeded["product"]["id"], quantity=11))

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INSUFFICIENT_STOCK"
        assert response.json()["error"]["details"]["available"] == 10

    @pytest.mark.asyncio
    async def test_unintelligible_sms_is_400(self, client, seeded):
        response = await client.post("/api/v1/webhooks/sms", json={"from": "622000001", "text": "peut-etre"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_admin_status_and_payment(self, client, seeded):
        created = await client.post("/api/v1/orders", json=order_payload(seeded["product"]["id"], quantity=1))
        number = created.json()["data"]["order"]["order_number"]

        response = await client.put(
            f"/api/v1/orders/{number}/status", json={"status": "shipped", "admin_notes": "Moto 3"}, headers=ADMIN
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "shipped"

        response = await client.put(
            f"/api/v1/orders/{number}/payment", json={"payment_reference": "OM-1"}, headers=ADMIN
        )
        assert response.json()["data"]["payment_status"] == "paid"

        response = await client.get("/api/v1/stats/dashboard", headers=ADMIN)
        stats = response.json()["data"]
        assert stats["total_orders"] == 1
        assert stats["revenue"] == 165000
        assert stats["margin_revenue"] == 50000

    @pytest.mark.asyncio
    async def test_unknown_order_is_404(self, client):
        response = await client.get("/api/v1/orders/FA-999999")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ORDER_NOT_FOUND"
