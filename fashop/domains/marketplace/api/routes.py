"""
Marketplace API Routes

FastAPI routers for orders, the inbound SMS webhook, the catalog,
suppliers and dashboard statistics.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from fashop.domains.marketplace.api import schemas
from fashop.domains.marketplace.api.dependencies import (
    get_adjust_stock_use_case,
    get_confirm_payment_use_case,
    get_create_order_use_case,
    get_create_product_use_case,
    get_create_supplier_use_case,
    get_dashboard_stats_use_case,
    get_deactivate_product_use_case,
    get_get_order_use_case,
    get_get_product_use_case,
    get_get_supplier_use_case,
    get_handle_supplier_sms_use_case,
    get_list_orders_use_case,
    get_list_products_use_case,
    get_list_suppliers_use_case,
    get_process_supplier_response_use_case,
    get_set_supplier_active_use_case,
    get_update_order_status_use_case,
    get_update_product_use_case,
    get_update_supplier_use_case,
    require_admin,
)
from fashop.domains.marketplace.application.ports import OrderFilter, ProductFilter, SupplierFilter
from fashop.domains.marketplace.application.use_cases import (
    AdjustStockRequest,
    AdjustStockUseCase,
    ConfirmPaymentRequest,
    ConfirmPaymentUseCase,
    CreateOrderRequest,
    CreateOrderUseCase,
    CreateProductRequest,
    CreateProductUseCase,
    CreateSupplierRequest,
    CreateSupplierUseCase,
    DeactivateProductUseCase,
    GetDashboardStatsUseCase,
    GetOrderUseCase,
    GetProductUseCase,
    GetSupplierUseCase,
    HandleSupplierSmsUseCase,
    ListOrdersRequest,
    ListOrdersUseCase,
    ListProductsRequest,
    ListProductsUseCase,
    ListSuppliersRequest,
    ListSuppliersUseCase,
    OrderLineInput,
    ProcessSupplierResponseUseCase,
    SetSupplierActiveUseCase,
    SupplierResponseRequest,
    SupplierSmsRequest,
    UpdateOrderStatusRequest,
    UpdateOrderStatusUseCase,
    UpdateProductRequest,
    UpdateProductUseCase,
    UpdateSupplierRequest,
    UpdateSupplierUseCase,
)
from fashop.domains.marketplace.application.use_cases.base import MAX_PAGE_SIZE
from fashop.domains.marketplace.domain.value_objects import (
    DeliveryAddress,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ProductStatus,
)

logger = logging.getLogger(__name__)

orders_router = APIRouter(prefix="/orders", tags=["Orders"])
webhooks_router = APIRouter(prefix="/webhooks", tags=["Webhooks"])
products_router = APIRouter(prefix="/products", tags=["Products"])
suppliers_router = APIRouter(prefix="/suppliers", tags=["Suppliers"], dependencies=[Depends(require_admin)])
stats_router = APIRouter(prefix="/stats", tags=["Stats"], dependencies=[Depends(require_admin)])

AdminOnly = [Depends(require_admin)]


# ==================== ORDERS ====================


@orders_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.ApiResponse[schemas.CreateOrderResult],
)
async def create_order(
    request: schemas.CreateOrderRequest,
    use_case: CreateOrderUseCase = Depends(get_create_order_use_case),  # noqa: B008
):
    """Place a multi-supplier order; suppliers are notified by SMS."""
    result = await use_case.execute(
        CreateOrderRequest(
            customer_phone=request.customer_phone,
            customer_email=request.customer_email,
            customer_id=request.customer_id,
            delivery_address=DeliveryAddress(**request.delivery_address.model_dump()),
            items=[
                OrderLineInput(product_id=item.product_id, quantity=item.quantity, color=item.color, size=item.size)
                for item in request.items
            ],
            payment_method=request.payment_method,
            delivery_method=request.delivery_method,
            notes=request.notes,
        )
    )
    return schemas.ApiResponse(
        data=schemas.CreateOrderResult(
            order=schemas.OrderResponse.from_entity(result.order),
            notified_suppliers=result.notified_suppliers,
            failed_notifications=result.failed_notifications,
        ),
        message=f"Order {result.order.order_number} created",
    )


@orders_router.get(
    "",
    response_model=schemas.ApiResponse[schemas.PageData[schemas.OrderResponse]],
    dependencies=AdminOnly,
)
async def list_orders(
    status_filter: OrderStatus | None = Query(None, alias="status"),
    payment_status: PaymentStatus | None = Query(None),
    payment_method: PaymentMethod | None = Query(None),
    supplier_id: UUID | None = Query(None),
    search: str | None = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    use_case: ListOrdersUseCase = Depends(get_list_orders_use_case),  # noqa: B008
):
    """Back-office order listing, newest first."""
    result = await use_case.execute(
        ListOrdersRequest(
            filters=OrderFilter(
                status=status_filter,
                payment_status=payment_status,
                payment_method=payment_method,
                supplier_id=supplier_id,
                search=search,
            ),
            page=page,
            limit=limit,
        )
    )
    return schemas.ApiResponse(
        data=schemas.PageData.build(result, [schemas.OrderResponse.from_entity(o) for o in result.items])
    )


@orders_router.get("/{order_ref}", response_model=schemas.ApiResponse[schemas.OrderResponse])
async def get_order(
    order_ref: str,
    use_case: GetOrderUseCase = Depends(get_get_order_use_case),  # noqa: B008
):
    """Get an order by id or order number."""
    order = await use_case.execute(order_ref)
    return schemas.ApiResponse(data=schemas.OrderResponse.from_entity(order))


@orders_router.put(
    "/{order_ref}/status",
    response_model=schemas.ApiResponse[schemas.OrderResponse],
    dependencies=AdminOnly,
)
async def update_order_status(
    order_ref: str,
    request: schemas.UpdateOrderStatusRequest,
    use_case: UpdateOrderStatusUseCase = Depends(get_update_order_status_use_case),  # noqa: B008
):
    order = await use_case.execute(
        UpdateOrderStatusRequest(order_ref=order_ref, status=request.status, admin_notes=request.admin_notes)
    )
    return schemas.ApiResponse(
        data=schemas.OrderResponse.from_entity(order),
        message=f"Order {order.order_number} is now {order.status.value}",
    )


@orders_router.put(
    "/{order_ref}/payment",
    response_model=schemas.ApiResponse[schemas.OrderResponse],
    dependencies=AdminOnly,
)
async def confirm_payment(
    order_ref: str,
    request: schemas.ConfirmPaymentRequest,
    use_case: ConfirmPaymentUseCase = Depends(get_confirm_payment_use_case),  # noqa: B008
):
    order = await use_case.execute(
        ConfirmPaymentRequest(order_ref=order_ref, payment_reference=request.payment_reference)
    )
    return schemas.ApiResponse(data=schemas.OrderResponse.from_entity(order), message="Payment confirmed")


@orders_router.put(
    "/{order_ref}/supplier-response",
    response_model=schemas.ApiResponse[schemas.SupplierReplyResult],
    dependencies=AdminOnly,
)
async def record_supplier_response(
    order_ref: str,
    request: schemas.SupplierResponseRequest,
    use_case: ProcessSupplierResponseUseCase = Depends(get_process_supplier_response_use_case),  # noqa: B008
):
    """Record a supplier reply entered from the back office."""
    result = await use_case.execute(
        SupplierResponseRequest(order_ref=order_ref, supplier_id=request.supplier_id, response=request.response)
    )
    return schemas.ApiResponse(
        data=schemas.SupplierReplyResult(
            order=schemas.OrderResponse.from_entity(result.order),
            previous_status=result.previous_status,
            status_changed=result.status_changed,
        )
    )


# ==================== WEBHOOKS ====================


@webhooks_router.post("/sms", response_model=schemas.ApiResponse[schemas.SupplierReplyResult])
async def receive_supplier_sms(
    request: schemas.SmsWebhookRequest,
    use_case: HandleSupplierSmsUseCase = Depends(get_handle_supplier_sms_use_case),  # noqa: B008
):
    """Inbound supplier SMS ("OUI FA-123456", "0", ...)."""
    logger.info(f"Inbound SMS from {request.sender}")
    result = await use_case.execute(SupplierSmsRequest(sender_phone=request.sender, text=request.text))
    return schemas.ApiResponse(
        data=schemas.SupplierReplyResult(
            order=schemas.OrderResponse.from_entity(result.order),
            previous_status=result.previous_status,
            status_changed=result.status_changed,
        ),
        message=f"Reply recorded for order {result.order.order_number}",
    )


# ==================== PRODUCTS ====================


@products_router.get("", response_model=schemas.ApiResponse[schemas.PageData[schemas.ProductResponse]])
async def list_products(
    category: str | None = Query(None),
    status_filter: ProductStatus | None = Query(None, alias="status"),
    supplier_id: UUID | None = Query(None),
    search: str | None = Query(None, max_length=100),
    in_stock: bool | None = Query(None),
    featured: bool | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    use_case: ListProductsUseCase = Depends(get_list_products_use_case),  # noqa: B008
):
    """Catalog listing; only active products unless a status is asked for."""
    result = await use_case.execute(
        ListProductsRequest(
            filters=ProductFilter(
                category=category,
                status=status_filter or ProductStatus.ACTIVE,
                supplier_id=supplier_id,
                search=search,
                in_stock=in_stock,
                featured=featured,
            ),
            page=page,
            limit=limit,
        )
    )
    return schemas.ApiResponse(
        data=schemas.PageData.build(result, [schemas.ProductResponse.from_entity(p) for p in result.items])
    )


@products_router.get("/{product_id}", response_model=schemas.ApiResponse[schemas.ProductResponse])
async def get_product(
    product_id: UUID,
    use_case: GetProductUseCase = Depends(get_get_product_use_case),  # noqa: B008
):
    product = await use_case.execute(product_id)
    return schemas.ApiResponse(data=schemas.ProductResponse.from_entity(product))


@products_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.ApiResponse[schemas.ProductResponse],
    dependencies=AdminOnly,
)
async def create_product(
    request: schemas.ProductCreateRequest,
    use_case: CreateProductUseCase = Depends(get_create_product_use_case),  # noqa: B008
):
    product = await use_case.execute(CreateProductRequest(**request.model_dump()))
    return schemas.ApiResponse(data=schemas.ProductResponse.from_entity(product), message="Product created")


@products_router.put(
    "/{product_id}",
    response_model=schemas.ApiResponse[schemas.ProductResponse],
    dependencies=AdminOnly,
)
async def update_product(
    product_id: UUID,
    request: schemas.ProductUpdateRequest,
    use_case: UpdateProductUseCase = Depends(get_update_product_use_case),  # noqa: B008
):
    product = await use_case.execute(
        UpdateProductRequest(product_id=product_id, **request.model_dump(exclude_unset=True))
    )
    return schemas.ApiResponse(data=schemas.ProductResponse.from_entity(product), message="Product updated")


@products_router.delete(
    "/{product_id}",
    response_model=schemas.ApiResponse[schemas.ProductResponse],
    dependencies=AdminOnly,
)
async def deactivate_product(
    product_id: UUID,
    use_case: DeactivateProductUseCase = Depends(get_deactivate_product_use_case),  # noqa: B008
):
    """Soft delete."""
    product = await use_case.execute(product_id)
    return schemas.ApiResponse(data=schemas.ProductResponse.from_entity(product), message="Product deactivated")


@products_router.put(
    "/{product_id}/stock",
    response_model=schemas.ApiResponse[schemas.StockUpdateResult],
    dependencies=AdminOnly,
)
async def adjust_stock(
    product_id: UUID,
    request: schemas.StockUpdateRequest,
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),  # noqa: B008
):
    result = await use_case.execute(
        AdjustStockRequest(product_id=product_id, quantity=request.quantity, operation=request.operation)
    )
    return schemas.ApiResponse(
        data=schemas.StockUpdateResult(
            product=schemas.ProductResponse.from_entity(result.product),
            previous_stock=result.previous_stock,
            low_stock_alert_sent=result.low_stock_alert_sent,
        )
    )


# ==================== SUPPLIERS ====================


@suppliers_router.get("", response_model=schemas.ApiResponse[schemas.PageData[schemas.SupplierResponseModel]])
async def list_suppliers(
    active_only: bool = Query(True),
    search: str | None = Query(None, max_length=100),
    city: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    use_case: ListSuppliersUseCase = Depends(get_list_suppliers_use_case),  # noqa: B008
):
    result = await use_case.execute(
        ListSuppliersRequest(
            filters=SupplierFilter(active_only=active_only, search=search, city=city),
            page=page,
            limit=limit,
        )
    )
    return schemas.ApiResponse(
        data=schemas.PageData.build(result, [schemas.SupplierResponseModel.from_entity(s) for s in result.items])
    )


@suppliers_router.get("/{supplier_id}", response_model=schemas.ApiResponse[schemas.SupplierResponseModel])
async def get_supplier(
    supplier_id: UUID,
    use_case: GetSupplierUseCase = Depends(get_get_supplier_use_case),  # noqa: B008
):
    supplier = await use_case.execute(supplier_id)
    return schemas.ApiResponse(data=schemas.SupplierResponseModel.from_entity(supplier))


@suppliers_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.ApiResponse[schemas.SupplierResponseModel],
)
async def create_supplier(
    request: schemas.SupplierCreateRequest,
    use_case: CreateSupplierUseCase = Depends(get_create_supplier_use_case),  # noqa: B008
):
    supplier = await use_case.execute(CreateSupplierRequest(**request.model_dump()))
    return schemas.ApiResponse(data=schemas.SupplierResponseModel.from_entity(supplier), message="Supplier created")


@suppliers_router.put("/{supplier_id}", response_model=schemas.ApiResponse[schemas.SupplierResponseModel])
async def update_supplier(
    supplier_id: UUID,
    request: schemas.SupplierUpdateRequest,
    use_case: UpdateSupplierUseCase = Depends(get_update_supplier_use_case),  # noqa: B008
):
    supplier = await use_case.execute(
        UpdateSupplierRequest(supplier_id=supplier_id, **request.model_dump(exclude_unset=True))
    )
    return schemas.ApiResponse(data=schemas.SupplierResponseModel.from_entity(supplier), message="Supplier updated")


@suppliers_router.put("/{supplier_id}/activate", response_model=schemas.ApiResponse[schemas.SupplierResponseModel])
async def set_supplier_active(
    supplier_id: UUID,
    request: schemas.SupplierActiveRequest,
    use_case: SetSupplierActiveUseCase = Depends(get_set_supplier_active_use_case),  # noqa: B008
):
    supplier = await use_case.execute(supplier_id, request.is_active)
    return schemas.ApiResponse(data=schemas.SupplierResponseModel.from_entity(supplier))


@suppliers_router.delete("/{supplier_id}", response_model=schemas.ApiResponse[schemas.SupplierResponseModel])
async def deactivate_supplier(
    supplier_id: UUID,
    use_case: SetSupplierActiveUseCase = Depends(get_set_supplier_active_use_case),  # noqa: B008
):
    """Soft delete."""
    supplier = await use_case.execute(supplier_id, False)
    return schemas.ApiResponse(
        data=schemas.SupplierResponseModel.from_entity(supplier), message="Supplier deactivated"
    )


# ==================== STATS ====================


@stats_router.get("/dashboard", response_model=schemas.ApiResponse[schemas.DashboardResponse])
async def dashboard(
    top_suppliers: int = Query(5, ge=1, le=50),
    use_case: GetDashboardStatsUseCase = Depends(get_dashboard_stats_use_case),  # noqa: B008
):
    stats = await use_case.execute(top_suppliers=top_suppliers)
    return schemas.ApiResponse(data=schemas.DashboardResponse.from_stats(stats))


routers = [orders_router, webhooks_router, products_router, suppliers_router, stats_router]

__all__ = ["routers"]
