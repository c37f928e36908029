"""
Marketplace API Schemas

Pydantic schemas for API request/response validation. Responses are
wrapped in the ``{success, data, message}`` envelope.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any, Generic, TypeVar
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PlainSerializer, field_validator

from fashop.domains.marketplace.application.ports import DashboardStats
from fashop.domains.marketplace.application.use_cases import Page, StockOperation
from fashop.domains.marketplace.domain.entities import Order, Product, Supplier
from fashop.domains.marketplace.domain.value_objects import (
    DeliveryMethod,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ProductStatus,
    SupplierResponse,
)

# Amounts travel as JSON numbers
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def _two_places(value: Decimal) -> float:
    return float(value.quantize(Decimal("0.01"), ROUND_HALF_UP))


# Ratings and response times are kept at full precision, shown with two decimals
Score = Annotated[Decimal, PlainSerializer(_two_places, return_type=float, when_used="json")]

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope."""

    success: bool = True
    data: T
    message: str | None = None


class PageData(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def build(cls, page: Page, items: list[T]) -> "PageData[T]":
        return cls(items=items, total=page.total, page=page.page, limit=page.limit, pages=page.pages)


# ==================== ORDERS ====================


class DeliveryAddressSchema(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=8, max_length=20)
    address: str = Field(..., min_length=1, max_length=500)
    email: str | None = None
    city: str = "Conakry"
    commune: str | None = None
    quartier: str | None = None
    landmark: str | None = None
    instructions: str | None = None


class OrderItemRequest(BaseModel):
    product_id: UUID
    quantity: int = Field(..., ge=1, le=1000)
    color: str | None = None
    size: str | None = None


class CreateOrderRequest(BaseModel):
    """Checkout payload."""

    customer_phone: str = Field(..., min_length=8, max_length=20)
    customer_email: str | None = None
    customer_id: UUID | None = None
    delivery_address: DeliveryAddressSchema
    items: list[OrderItemRequest] = Field(..., min_length=1)
    payment_method: PaymentMethod = PaymentMethod.CASH
    delivery_method: DeliveryMethod = DeliveryMethod.STANDARD
    notes: str | None = Field(None, max_length=1000)


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatus
    admin_notes: str | None = Field(None, max_length=2000)


class ConfirmPaymentRequest(BaseModel):
    payment_reference: str | None = Field(None, max_length=100)


class SupplierResponseRequest(BaseModel):
    supplier_id: UUID
    response: SupplierResponse

    @field_validator("response")
    @classmethod
    def validate_response(cls, v: SupplierResponse) -> SupplierResponse:
        if v == SupplierResponse.PENDING:
            raise ValueError("response must be 'confirmed' or 'rejected'")
        return v


class SmsWebhookRequest(BaseModel):
    """Inbound SMS as posted by the provider."""

    sender: str = Field(..., validation_alias=AliasChoices("from", "sender", "phone"))
    text: str = Field(..., validation_alias=AliasChoices("text", "message", "body"))


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: UUID
    product_name: str
    sku: str
    quantity: int
    supplier_price: Amount
    public_price: Amount
    total_price: Amount
    margin: Amount
    margin_percentage: Amount
    supplier_id: UUID
    supplier_name: str | None = None
    color: str | None = None
    size: str | None = None


class SubOrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    supplier_id: UUID
    supplier_name: str
    supplier_phone: str
    items: list[UUID]
    notification_sent: bool
    response: SupplierResponse
    response_time: datetime | None = None


class OrderResponse(BaseModel):
    id: UUID
    order_number: str
    customer_id: UUID | None = None
    customer_email: str | None = None
    customer_phone: str
    delivery_address: dict[str, Any] | None = None
    items: list[OrderItemResponse]
    suppliers: list[SubOrderResponse]
    subtotal: Amount
    delivery_fee: Amount
    total: Amount
    total_margin: Amount
    status: OrderStatus
    payment_status: PaymentStatus
    payment_method: PaymentMethod
    payment_reference: str | None = None
    delivery_method: DeliveryMethod
    notes: str | None = None
    admin_notes: str | None = None
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            order_number=str(order.order_number),
            customer_id=order.customer_id,
            customer_email=order.customer_email,
            customer_phone=order.customer_phone,
            delivery_address=order.delivery_address.to_dict() if order.delivery_address else None,
            items=[OrderItemResponse.model_validate(item) for item in order.items],
            suppliers=[SubOrderResponse.model_validate(sub_order) for sub_order in order.suppliers],
            subtotal=order.subtotal,
            delivery_fee=order.delivery_fee,
            total=order.total,
            total_margin=order.total_margin,
            status=order.status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            payment_reference=order.payment_reference,
            delivery_method=order.delivery_method,
            notes=order.notes,
            admin_notes=order.admin_notes,
            version=order.version,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class CreateOrderResult(BaseModel):
    order: OrderResponse
    notified_suppliers: list[UUID]
    failed_notifications: list[UUID]


class SupplierReplyResult(BaseModel):
    order: OrderResponse
    previous_status: OrderStatus
    status_changed: bool


# ==================== PRODUCTS ====================


class ProductCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    sku: str = Field(..., min_length=1, max_length=50)
    supplier_id: UUID
    supplier_price: Decimal = Field(..., ge=0)
    public_price: Decimal = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    min_stock: int = Field(1, ge=0)
    description: str | None = None
    status: ProductStatus = ProductStatus.ACTIVE
    featured: bool = False


class ProductUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(None, min_length=1, max_length=100)
    supplier_price: Decimal | None = Field(None, ge=0)
    public_price: Decimal | None = Field(None, ge=0)
    min_stock: int | None = Field(None, ge=0)
    status: ProductStatus | None = None
    featured: bool | None = None


class StockUpdateRequest(BaseModel):
    quantity: int = Field(..., ge=0)
    operation: StockOperation = StockOperation.SET


class ProductResponse(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    category: str
    sku: str
    supplier_id: UUID | None = None
    supplier_name: str | None = None
    supplier_price: Amount
    public_price: Amount
    margin: Amount
    margin_percentage: Amount
    stock: int
    min_stock: int
    is_low_stock: bool
    status: ProductStatus
    is_available: bool
    featured: bool
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            category=product.category,
            sku=str(product.sku),
            supplier_id=product.supplier_id,
            supplier_name=product.supplier_name,
            supplier_price=product.supplier_price.amount,
            public_price=product.public_price.amount,
            margin=product.margin,
            margin_percentage=product.margin_percentage,
            stock=product.stock,
            min_stock=product.min_stock,
            is_low_stock=product.is_low_stock,
            status=product.status,
            is_available=product.is_available,
            featured=product.featured,
            version=product.version,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class StockUpdateResult(BaseModel):
    product: ProductResponse
    previous_stock: int
    low_stock_alert_sent: bool


# ==================== SUPPLIERS ====================


class SupplierCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=8, max_length=20)
    email: str | None = None
    whatsapp: str | None = None
    address: str | None = None
    city: str = "Conakry"
    description: str | None = None
    categories: list[str] = Field(default_factory=list)
    delivery_zones: list[str] = Field(default_factory=list)


class SupplierUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    phone: str | None = Field(None, min_length=8, max_length=20)
    email: str | None = None
    whatsapp: str | None = None
    address: str | None = None
    city: str | None = None
    description: str | None = None
    categories: list[str] | None = None
    delivery_zones: list[str] | None = None


class SupplierActiveRequest(BaseModel):
    is_active: bool


class SupplierResponseModel(BaseModel):
    id: UUID
    name: str
    phone: str
    email: str | None = None
    whatsapp: str | None = None
    address: str | None = None
    city: str
    description: str | None = None
    categories: list[str]
    delivery_zones: list[str]
    rating: Score
    total_orders: int
    successful_orders: int
    success_rate: int
    average_response_time: Score | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, supplier: Supplier) -> "SupplierResponseModel":
        return cls(
            id=supplier.id,
            name=supplier.name,
            phone=str(supplier.phone),
            email=supplier.email,
            whatsapp=supplier.whatsapp,
            address=supplier.address,
            city=supplier.city,
            description=supplier.description,
            categories=supplier.categories,
            delivery_zones=supplier.delivery_zones,
            rating=supplier.rating,
            total_orders=supplier.total_orders,
            successful_orders=supplier.successful_orders,
            success_rate=supplier.success_rate,
            average_response_time=supplier.average_response_time,
            is_active=supplier.is_active,
            created_at=supplier.created_at,
            updated_at=supplier.updated_at,
        )


# ==================== STATS ====================


class TopSupplier(BaseModel):
    id: UUID
    name: str
    rating: Score
    total_orders: int
    successful_orders: int


class DashboardResponse(BaseModel):
    total_orders: int
    pending_orders: int
    total_products: int
    low_stock_products: int
    active_suppliers: int
    revenue: Amount
    margin_revenue: Amount
    top_suppliers: list[TopSupplier]

    @classmethod
    def from_stats(cls, stats: DashboardStats) -> "DashboardResponse":
        return cls(
            total_orders=stats.total_orders,
            pending_orders=stats.pending_orders,
            total_products=stats.total_products,
            low_stock_products=stats.low_stock_products,
            active_suppliers=stats.active_suppliers,
            revenue=stats.revenue,
            margin_revenue=stats.margin_revenue,
            top_suppliers=[TopSupplier(**row) for row in stats.top_suppliers],
        )
