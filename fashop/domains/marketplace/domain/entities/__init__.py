"""
Marketplace Domain Entities
"""

from fashop.domains.marketplace.domain.entities.order import (
    Order,
    OrderItem,
    SupplierContact,
    SupplierSubOrder,
)
from fashop.domains.marketplace.domain.entities.product import Product
from fashop.domains.marketplace.domain.entities.supplier import DELIVERY_ZONES, Supplier

__all__ = [
    "Order",
    "OrderItem",
    "SupplierContact",
    "SupplierSubOrder",
    "Product",
    "Supplier",
    "DELIVERY_ZONES",
]
