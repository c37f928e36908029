"""
Order models

An order is stored as one document-style row: items, supplier sub-orders
and the delivery address live in JSON columns next to the scalar fields.
"""

import uuid

from sqlalchemy import Column, Index, Integer, Numeric, String, Text, Uuid

from .base import Base, JSONDocument, TimestampMixin


class OrderModel(Base, TimestampMixin):
    """Customer orders"""

    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_number = Column(String(20), nullable=False, unique=True)

    # Customer
    customer_id = Column(Uuid)
    customer_email = Column(String(255))
    customer_phone = Column(String(20), nullable=False)
    delivery_address = Column(JSONDocument, nullable=False)

    # Aggregate parts
    items = Column(JSONDocument, nullable=False, default=list)
    suppliers = Column(JSONDocument, nullable=False, default=list)
    # ",<uuid>,<uuid>," used to filter orders by supplier without JSON operators
    supplier_refs = Column(Text, nullable=False, default="")

    # Amounts (GNF)
    subtotal = Column(Numeric(14, 2), nullable=False, default=0)
    delivery_fee = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(14, 2), nullable=False, default=0)
    total_margin = Column(Numeric(14, 2), nullable=False, default=0)

    # Status
    status = Column(String(20), nullable=False, default="pending")
    payment_status = Column(String(20), nullable=False, default="pending")
    payment_method = Column(String(20), nullable=False, default="cash")
    payment_reference = Column(String(100))
    delivery_method = Column(String(20), nullable=False, default="standard")

    # Notes
    notes = Column(Text)
    admin_notes = Column(Text)

    version = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_orders_status_created", status, "created_at"),
        Index("idx_orders_payment_status", payment_status),
        Index("idx_orders_customer_phone", customer_phone),
    )

    def __repr__(self):
        return f"<Order(number='{self.order_number}', status='{self.status}', total={self.total})>"
