"""
Catalog models: suppliers and the products they sell.
"""

import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)

from .base import Base, JSONDocument, TimestampMixin


class SupplierModel(Base, TimestampMixin):
    """Local vendors fulfilling sub-orders"""

    __tablename__ = "suppliers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False, index=True)
    phone = Column(String(20), nullable=False, unique=True)  # +224XXXXXXXXX
    email = Column(String(255))
    whatsapp = Column(String(20))
    address = Column(Text)
    city = Column(String(100), nullable=False, default="Conakry")
    description = Column(Text)
    categories = Column(JSONDocument, nullable=False, default=list)
    delivery_zones = Column(JSONDocument, nullable=False, default=list)

    # Reputation
    rating = Column(Numeric(3, 2), nullable=False, default=0)
    total_orders = Column(Integer, nullable=False, default=0)
    successful_orders = Column(Integer, nullable=False, default=0)
    average_response_time = Column(Numeric(12, 4))  # minutes, running average

    is_active = Column(Boolean, nullable=False, default=True)
    version = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_suppliers_active_rating", is_active, rating),
        CheckConstraint("rating >= 0 AND rating <= 5", name="check_supplier_rating_range"),
    )

    def __repr__(self):
        return f"<Supplier(name='{self.name}', phone='{self.phone}')>"


class ProductModel(Base, TimestampMixin):
    """Catalog products, each sourced from one supplier"""

    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    category = Column(String(100), nullable=False, index=True)
    sku = Column(String(50), nullable=False, unique=True)

    supplier_id = Column(Uuid, ForeignKey("suppliers.id"), nullable=False, index=True)
    supplier_name = Column(String(200))

    # Pricing (GNF)
    supplier_price = Column(Numeric(12, 2), nullable=False)
    public_price = Column(Numeric(12, 2), nullable=False)
    margin = Column(Numeric(12, 2), nullable=False, default=0)
    margin_percentage = Column(Numeric(7, 1), nullable=False, default=0)

    stock = Column(Integer, nullable=False, default=0)
    min_stock = Column(Integer, nullable=False, default=1)

    status = Column(String(20), nullable=False, default="draft")  # draft, active, inactive, out_of_stock
    is_available = Column(Boolean, nullable=False, default=True)
    featured = Column(Boolean, nullable=False, default=False)

    version = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_products_status_available", status, is_available),
        CheckConstraint("stock >= 0", name="check_product_stock_non_negative"),
        CheckConstraint("supplier_price >= 0 AND public_price >= 0", name="check_product_prices_non_negative"),
    )

    def __repr__(self):
        return f"<Product(sku='{self.sku}', stock={self.stock}, status='{self.status}')>"
