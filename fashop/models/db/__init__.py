"""
Database models package
"""

from .base import Base, JSONDocument, TimestampMixin
from .catalog import ProductModel, SupplierModel
from .orders import OrderModel

__all__ = [
    # Base
    "Base",
    "JSONDocument",
    "TimestampMixin",
    # Catalog
    "ProductModel",
    "SupplierModel",
    # Orders
    "OrderModel",
]
