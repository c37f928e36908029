"""
Marketplace repositories (SQLAlchemy)
"""

from .order_repository import SQLAlchemyOrderRepository
from .product_repository import SQLAlchemyProductRepository
from .stats_repository import SQLAlchemyStatsRepository
from .supplier_repository import SQLAlchemySupplierRepository
from .transaction_manager import SqlAlchemyTransactionManager

__all__ = [
    "SQLAlchemyOrderRepository",
    "SQLAlchemyProductRepository",
    "SQLAlchemyStatsRepository",
    "SQLAlchemySupplierRepository",
    "SqlAlchemyTransactionManager",
]
