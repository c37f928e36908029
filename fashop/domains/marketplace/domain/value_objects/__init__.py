"""
Marketplace Domain Value Objects

Immutable value objects for the marketplace domain.
"""

from fashop.domains.marketplace.domain.value_objects.delivery_address import DeliveryAddress
from fashop.domains.marketplace.domain.value_objects.order_number import OrderNumber
from fashop.domains.marketplace.domain.value_objects.order_status import (
    ORDER_TRANSITIONS,
    DeliveryMethod,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ProductStatus,
    SupplierResponse,
)
from fashop.domains.marketplace.domain.value_objects.price import Price
from fashop.domains.marketplace.domain.value_objects.sku import SKU
from fashop.domains.marketplace.domain.value_objects.supplier_reply import (
    ConfirmedReply,
    InvalidReply,
    RejectedReply,
    SupplierReply,
    parse_supplier_reply,
)

__all__ = [
    "Price",
    "SKU",
    "OrderNumber",
    "DeliveryAddress",
    "OrderStatus",
    "ORDER_TRANSITIONS",
    "PaymentStatus",
    "PaymentMethod",
    "DeliveryMethod",
    "ProductStatus",
    "SupplierResponse",
    "SupplierReply",
    "ConfirmedReply",
    "RejectedReply",
    "InvalidReply",
    "parse_supplier_reply",
]
