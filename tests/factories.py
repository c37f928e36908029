"""
Test data builders and a recording notification gateway.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from fashop.core.domain import NotificationException, PhoneNumber
from fashop.domains.marketplace.application.ports import (
    INotificationGateway,
    ITransactionManager,
    NotificationResult,
    NotificationTemplate,
)
from fashop.domains.marketplace.domain.entities import Product, Supplier
from fashop.domains.marketplace.domain.value_objects import SKU, DeliveryAddress, Price


class RecordingGateway(INotificationGateway):
    """In-memory gateway: records every message, fails for chosen recipients."""

    def __init__(self):
        self.sent: list[tuple[str, NotificationTemplate, dict[str, Any]]] = []
        self.failing: set[str] = set()
        self.raising: set[str] = set()

    async def notify(
        self,
        recipient: str,
        template_type: NotificationTemplate,
        data: dict[str, Any],
    ) -> NotificationResult:
        if recipient in self.raising:
            raise NotificationException("stub", f"Gateway down for {recipient}")
        if recipient in self.failing:
            return NotificationResult(success=False, provider="stub", error="rejected")
        self.sent.append((recipient, template_type, data))
        return NotificationResult(success=True, provider="stub", message_id=f"msg_{len(self.sent)}")

    def messages(self, template_type: NotificationTemplate) -> list[tuple[str, dict[str, Any]]]:
        return [(recipient, data) for recipient, t, data in self.sent if t == template_type]


def make_supplier(
    name: str = "Boutique Kaloum",
    phone: str = "622000001",
    supplier_id: UUID | None = None,
    **overrides: Any,
) -> Supplier:
    return Supplier(
        id=supplier_id,
        name=name,
        phone=PhoneNumber(phone),
        delivery_zones=overrides.pop("delivery_zones", ["Kaloum"]),
        **overrides,
    )


def make_product(
    supplier: Supplier,
    name: str = "Robe wax",
    sku: str = "ROBE-WAX-001",
    supplier_price: int = 100000,
    public_price: int = 150000,
    stock: int = 10,
    product_id: UUID | None = None,
    **overrides: Any,
) -> Product:
    product = Product.create(
        name=name,
        category=overrides.pop("category", "vetements"),
        sku=SKU(sku),
        supplier_id=supplier.id,
        supplier_name=supplier.name,
        supplier_price=Price.of(supplier_price),
        public_price=Price.of(public_price),
        stock=stock,
        **overrides,
    )
    product.id = product_id
    return product


def make_address(**overrides: Any) -> DeliveryAddress:
    data = {
        "first_name": "Aissatou",
        "last_name": "Diallo",
        "phone": "+224620000000",
        "address": "Rue KA-020",
        "commune": "Kaloum",
        "quartier": "Almamya",
    }
    data.update(overrides)
    return DeliveryAddress(**data)


class FakeTransactionManager(ITransactionManager):
    """Counts commits and rollbacks instead of touching a database."""

    def __init__(self):
        self.commits = 0
        self.rollbacks = 0

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        try:
            yield
        except Exception:
            self.rollbacks += 1
            raise
        self.commits += 1
