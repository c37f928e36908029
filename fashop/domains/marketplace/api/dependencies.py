"""
Marketplace API Dependencies

FastAPI dependencies: admin authentication and use case factories bound
to the request's database session.
"""

import hmac
import logging

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from fashop.config.settings import Settings, get_settings
from fashop.core.container import MarketplaceContainer, get_container
from fashop.database import get_async_db
from fashop.domains.marketplace.application.use_cases import (
    AdjustStockUseCase,
    ConfirmPaymentUseCase,
    CreateOrderUseCase,
    CreateProductUseCase,
    CreateSupplierUseCase,
    DeactivateProductUseCase,
    GetDashboardStatsUseCase,
    GetOrderUseCase,
    GetProductUseCase,
    GetSupplierUseCase,
    HandleSupplierSmsUseCase,
    ListOrdersUseCase,
    ListProductsUseCase,
    ListSuppliersUseCase,
    ProcessSupplierResponseUseCase,
    SetSupplierActiveUseCase,
    UpdateOrderStatusUseCase,
    UpdateProductUseCase,
    UpdateSupplierUseCase,
)

logger = logging.getLogger(__name__)


async def require_admin(
    x_admin_token: str | None = Header(None, alias="X-Admin-Token"),
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> None:
    """
    Guard for back-office routes.

    Without ADMIN_API_TOKEN configured the routes are open in development
    and closed everywhere else.
    """
    expected = settings.ADMIN_API_TOKEN
    if not expected:
        if settings.is_development:
            return
        logger.error("ADMIN_API_TOKEN not configured, refusing admin request")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access is not configured")

    if not x_admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-Admin-Token header")
    if not hmac.compare_digest(expected.encode(), x_admin_token.encode()):
        logger.warning("Invalid admin token")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid admin token")


def get_marketplace_container() -> MarketplaceContainer:
    return get_container()


# ==================== ORDERS ====================


def get_create_order_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> CreateOrderUseCase:
    return container.create_create_order_use_case(db)


def get_process_supplier_response_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> ProcessSupplierResponseUseCase:
    return container.create_process_supplier_response_use_case(db)


def get_handle_supplier_sms_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> HandleSupplierSmsUseCase:
    return container.create_handle_supplier_sms_use_case(db)


def get_update_order_status_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> UpdateOrderStatusUseCase:
    return container.create_update_order_status_use_case(db)


def get_confirm_payment_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> ConfirmPaymentUseCase:
    return container.create_confirm_payment_use_case(db)


def get_get_order_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> GetOrderUseCase:
    return container.create_get_order_use_case(db)


def get_list_orders_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> ListOrdersUseCase:
    return container.create_list_orders_use_case(db)


# ==================== PRODUCTS ====================


def get_create_product_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> CreateProductUseCase:
    return container.create_create_product_use_case(db)


def get_update_product_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> UpdateProductUseCase:
    return container.create_update_product_use_case(db)


def get_deactivate_product_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> DeactivateProductUseCase:
    return container.create_deactivate_product_use_case(db)


def get_adjust_stock_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> AdjustStockUseCase:
    return container.create_adjust_stock_use_case(db)


def get_get_product_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> GetProductUseCase:
    return container.create_get_product_use_case(db)


def get_list_products_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> ListProductsUseCase:
    return container.create_list_products_use_case(db)


# ==================== SUPPLIERS ====================


def get_create_supplier_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> CreateSupplierUseCase:
    return container.create_create_supplier_use_case(db)


def get_update_supplier_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> UpdateSupplierUseCase:
    return container.create_update_supplier_use_case(db)


def get_set_supplier_active_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> SetSupplierActiveUseCase:
    return container.create_set_supplier_active_use_case(db)


def get_get_supplier_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> GetSupplierUseCase:
    return container.create_get_supplier_use_case(db)


def get_list_suppliers_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> ListSuppliersUseCase:
    return container.create_list_suppliers_use_case(db)


# ==================== STATS ====================


def get_dashboard_stats_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: MarketplaceContainer = Depends(get_marketplace_container),  # noqa: B008
) -> GetDashboardStatsUseCase:
    return container.create_get_dashboard_stats_use_case(db)
