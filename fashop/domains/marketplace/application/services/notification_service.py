"""
Order Notification Service

Fans order events out to suppliers and customers through the
notification gateway. Delivery problems never fail the business
operation that triggered them: each recipient is tried independently
and failures are logged and reported back to the caller.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from fashop.core.domain import NotificationException
from fashop.core.shared.logger import get_service_logger
from fashop.domains.marketplace.application.ports import (
    INotificationGateway,
    NotificationResult,
    NotificationTemplate,
)
from fashop.domains.marketplace.domain.entities.order import Order, SupplierSubOrder
from fashop.domains.marketplace.domain.entities.product import Product

logger = get_service_logger("notifications")


@dataclass
class FanOutReport:
    """Which suppliers were reached for one order."""

    sent: list[UUID] = field(default_factory=list)
    failed: list[UUID] = field(default_factory=list)


class OrderNotificationService:
    """Builds message payloads and sends them recipient by recipient."""

    def __init__(self, gateway: INotificationGateway):
        self.gateway = gateway

    async def notify_suppliers_of_new_order(self, order: Order) -> FanOutReport:
        """
        Send one ``new_order`` message per sub-order not notified yet.

        Returns:
            Supplier ids reached and supplier ids that failed
        """
        report = FanOutReport()
        for sub_order in order.suppliers:
            if sub_order.notification_sent:
                continue
            result = await self._send(
                sub_order.supplier_phone,
                NotificationTemplate.NEW_ORDER,
                self._new_order_payload(order, sub_order),
                order_number=str(order.order_number),
                supplier_id=str(sub_order.supplier_id),
            )
            if result.success:
                report.sent.append(sub_order.supplier_id)
            else:
                report.failed.append(sub_order.supplier_id)
        return report

    async def notify_customer_of_confirmation(self, order: Order) -> NotificationResult:
        """Tell the customer every supplier confirmed the order."""
        return await self._send(
            order.customer_phone,
            NotificationTemplate.ORDER_CONFIRMED,
            {
                "order_number": str(order.order_number),
                "customer_name": order.delivery_address.first_name if order.delivery_address else "",
                "total": order.total,
            },
            order_number=str(order.order_number),
        )

    async def alert_low_stock(self, product: Product, supplier_phone: str) -> NotificationResult:
        """Ask the supplier to restock a product that reached its minimum."""
        return await self._send(
            supplier_phone,
            NotificationTemplate.LOW_STOCK,
            {
                "product_name": product.name,
                "sku": str(product.sku),
                "stock": product.stock,
                "min_stock": product.min_stock,
            },
            product_id=str(product.id),
        )

    def _new_order_payload(self, order: Order, sub_order: SupplierSubOrder) -> dict:
        product_ids = set(sub_order.items)
        items = [item for item in order.items if item.product_id in product_ids]
        return {
            "order_number": str(order.order_number),
            "supplier_name": sub_order.supplier_name,
            "items": [
                {"name": item.product_name, "quantity": item.quantity, "sku": item.sku} for item in items
            ],
            "amount": sum((item.supplier_price * item.quantity for item in items), Decimal("0")),
            "delivery_city": order.delivery_address.city if order.delivery_address else None,
        }

    async def _send(
        self,
        recipient: str,
        template: NotificationTemplate,
        data: dict,
        **context: str,
    ) -> NotificationResult:
        log = logger.with_context(template=template.value, recipient=recipient, **context)
        try:
            result = await self.gateway.notify(recipient, template, data)
        except NotificationException as e:
            log.error(f"Notification {template.value} failed: {e.message}", provider=e.provider)
            return NotificationResult(success=False, provider=e.provider, error=e.message)
        except Exception as e:
            log.exception(f"Notification {template.value} failed unexpectedly: {e}")
            return NotificationResult(success=False, provider="unknown", error=f"{type(e).__name__}: {e}")

        if result.success:
            log.info(f"Notification {template.value} sent", message_id=result.message_id, provider=result.provider)
        else:
            log.warning(f"Notification {template.value} not delivered: {result.error}", provider=result.provider)
        return result
