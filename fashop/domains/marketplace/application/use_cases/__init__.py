"""
Marketplace Domain - Use Cases

- Order lifecycle: creation, supplier replies (API and SMS), status, payment
- Catalog administration: products and stock
- Supplier administration
- Back-office queries and dashboard
"""

from fashop.domains.marketplace.application.use_cases.adjust_stock import (
    AdjustStockRequest,
    AdjustStockResponse,
    AdjustStockUseCase,
    StockOperation,
)
from fashop.domains.marketplace.application.use_cases.base import Page, find_order, retry_on_conflict
from fashop.domains.marketplace.application.use_cases.confirm_payment import (
    ConfirmPaymentRequest,
    ConfirmPaymentUseCase,
)
from fashop.domains.marketplace.application.use_cases.create_order import (
    CreateOrderRequest,
    CreateOrderResponse,
    CreateOrderUseCase,
    OrderLineInput,
)
from fashop.domains.marketplace.application.use_cases.create_product import (
    CreateProductRequest,
    CreateProductUseCase,
)
from fashop.domains.marketplace.application.use_cases.get_dashboard_stats import GetDashboardStatsUseCase
from fashop.domains.marketplace.application.use_cases.get_order import GetOrderUseCase
from fashop.domains.marketplace.application.use_cases.get_products import (
    GetProductUseCase,
    ListProductsRequest,
    ListProductsUseCase,
)
from fashop.domains.marketplace.application.use_cases.get_suppliers import (
    GetSupplierUseCase,
    ListSuppliersRequest,
    ListSuppliersUseCase,
)
from fashop.domains.marketplace.application.use_cases.handle_supplier_sms import (
    HandleSupplierSmsUseCase,
    SupplierSmsRequest,
)
from fashop.domains.marketplace.application.use_cases.list_orders import ListOrdersRequest, ListOrdersUseCase
from fashop.domains.marketplace.application.use_cases.manage_suppliers import (
    CreateSupplierRequest,
    CreateSupplierUseCase,
    SetSupplierActiveUseCase,
    UpdateSupplierRequest,
    UpdateSupplierUseCase,
)
from fashop.domains.marketplace.application.use_cases.process_supplier_response import (
    ProcessSupplierResponseUseCase,
    SupplierResponseRequest,
    SupplierResponseResult,
)
from fashop.domains.marketplace.application.use_cases.update_order_status import (
    UpdateOrderStatusRequest,
    UpdateOrderStatusUseCase,
)
from fashop.domains.marketplace.application.use_cases.update_product import (
    DeactivateProductUseCase,
    UpdateProductRequest,
    UpdateProductUseCase,
)

__all__ = [
    # Orders
    "OrderLineInput",
    "CreateOrderRequest",
    "CreateOrderResponse",
    "CreateOrderUseCase",
    "SupplierResponseRequest",
    "SupplierResponseResult",
    "ProcessSupplierResponseUseCase",
    "SupplierSmsRequest",
    "HandleSupplierSmsUseCase",
    "UpdateOrderStatusRequest",
    "UpdateOrderStatusUseCase",
    "ConfirmPaymentRequest",
    "ConfirmPaymentUseCase",
    "GetOrderUseCase",
    "ListOrdersRequest",
    "ListOrdersUseCase",
    # Products
    "CreateProductRequest",
    "CreateProductUseCase",
    "UpdateProductRequest",
    "UpdateProductUseCase",
    "DeactivateProductUseCase",
    "StockOperation",
    "AdjustStockRequest",
    "AdjustStockResponse",
    "AdjustStockUseCase",
    "GetProductUseCase",
    "ListProductsRequest",
    "ListProductsUseCase",
    # Suppliers
    "CreateSupplierRequest",
    "CreateSupplierUseCase",
    "UpdateSupplierRequest",
    "UpdateSupplierUseCase",
    "SetSupplierActiveUseCase",
    "GetSupplierUseCase",
    "ListSuppliersRequest",
    "ListSuppliersUseCase",
    # Stats
    "GetDashboardStatsUseCase",
    # Helpers
    "Page",
    "find_order",
    "retry_on_conflict",
]
