"""
Marketplace Dependency Container.

Single Responsibility: Wire repositories, the notification gateway and use
cases. Repositories are created per database session; the gateway is a
shared singleton.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from fashop.config.settings import Settings, get_settings
from fashop.domains.marketplace.application.ports import INotificationGateway
from fashop.domains.marketplace.application.services import OrderNotificationService
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
from fashop.domains.marketplace.infrastructure.notifications import SmsNotificationGateway
from fashop.domains.marketplace.infrastructure.repositories import (
    SQLAlchemyOrderRepository,
    SQLAlchemyProductRepository,
    SQLAlchemyStatsRepository,
    SQLAlchemySupplierRepository,
    SqlAlchemyTransactionManager,
)

logger = logging.getLogger(__name__)


class MarketplaceContainer:
    """
    Marketplace domain container.

    Example:
        container = get_container()
        use_case = container.create_create_order_use_case(db)
        response = await use_case.execute(request)
    """

    def __init__(self, settings: Settings | None = None, gateway: INotificationGateway | None = None):
        """
        Args:
            settings: Application settings (defaults to the cached instance)
            gateway: Notification gateway override (tests)
        """
        self.settings = settings or get_settings()
        self._gateway = gateway
        logger.info("MarketplaceContainer initialized")

    # ==================== SHARED ====================

    def get_notification_gateway(self) -> INotificationGateway:
        if self._gateway is None:
            self._gateway = SmsNotificationGateway(self.settings)
        return self._gateway

    def create_notification_service(self) -> OrderNotificationService:
        return OrderNotificationService(self.get_notification_gateway())

    # ==================== REPOSITORIES ====================

    def create_product_repository(self, db: AsyncSession) -> SQLAlchemyProductRepository:
        return SQLAlchemyProductRepository(session=db)

    def create_supplier_repository(self, db: AsyncSession) -> SQLAlchemySupplierRepository:
        return SQLAlchemySupplierRepository(session=db)

    def create_order_repository(self, db: AsyncSession) -> SQLAlchemyOrderRepository:
        return SQLAlchemyOrderRepository(session=db)

    def create_stats_repository(self, db: AsyncSession) -> SQLAlchemyStatsRepository:
        return SQLAlchemyStatsRepository(session=db)

    def create_transaction_manager(self, db: AsyncSession) -> SqlAlchemyTransactionManager:
        return SqlAlchemyTransactionManager(session=db)

    # ==================== ORDER USE CASES ====================

    def create_create_order_use_case(self, db: AsyncSession) -> CreateOrderUseCase:
        """Create CreateOrderUseCase with dependencies."""
        return CreateOrderUseCase(
            order_repository=self.create_order_repository(db),
            product_repository=self.create_product_repository(db),
            supplier_repository=self.create_supplier_repository(db),
            transaction_manager=self.create_transaction_manager(db),
            notification_service=self.create_notification_service(),
            delivery_fee=self.settings.ORDER_DELIVERY_FEE,
            order_number_attempts=self.settings.ORDER_NUMBER_MAX_ATTEMPTS,
            update_attempts=self.settings.ORDER_UPDATE_MAX_ATTEMPTS,
        )

    def create_process_supplier_response_use_case(self, db: AsyncSession) -> ProcessSupplierResponseUseCase:
        return ProcessSupplierResponseUseCase(
            order_repository=self.create_order_repository(db),
            supplier_repository=self.create_supplier_repository(db),
            transaction_manager=self.create_transaction_manager(db),
            notification_service=self.create_notification_service(),
            update_attempts=self.settings.ORDER_UPDATE_MAX_ATTEMPTS,
        )

    def create_handle_supplier_sms_use_case(self, db: AsyncSession) -> HandleSupplierSmsUseCase:
        return HandleSupplierSmsUseCase(
            order_repository=self.create_order_repository(db),
            supplier_repository=self.create_supplier_repository(db),
            process_response=self.create_process_supplier_response_use_case(db),
        )

    def create_update_order_status_use_case(self, db: AsyncSession) -> UpdateOrderStatusUseCase:
        return UpdateOrderStatusUseCase(
            order_repository=self.create_order_repository(db),
            transaction_manager=self.create_transaction_manager(db),
            update_attempts=self.settings.ORDER_UPDATE_MAX_ATTEMPTS,
        )

    def create_confirm_payment_use_case(self, db: AsyncSession) -> ConfirmPaymentUseCase:
        return ConfirmPaymentUseCase(
            order_repository=self.create_order_repository(db),
            transaction_manager=self.create_transaction_manager(db),
            update_attempts=self.settings.ORDER_UPDATE_MAX_ATTEMPTS,
        )

    def create_get_order_use_case(self, db: AsyncSession) -> GetOrderUseCase:
        return GetOrderUseCase(order_repository=self.create_order_repository(db))

    def create_list_orders_use_case(self, db: AsyncSession) -> ListOrdersUseCase:
        return ListOrdersUseCase(order_repository=self.create_order_repository(db))

    # ==================== CATALOG USE CASES ====================

    def create_create_product_use_case(self, db: AsyncSession) -> CreateProductUseCase:
        return CreateProductUseCase(
            product_repository=self.create_product_repository(db),
            supplier_repository=self.create_supplier_repository(db),
        )

    def create_update_product_use_case(self, db: AsyncSession) -> UpdateProductUseCase:
        return UpdateProductUseCase(
            product_repository=self.create_product_repository(db),
            update_attempts=self.settings.ORDER_UPDATE_MAX_ATTEMPTS,
        )

    def create_deactivate_product_use_case(self, db: AsyncSession) -> DeactivateProductUseCase:
        return DeactivateProductUseCase(
            product_repository=self.create_product_repository(db),
            update_attempts=self.settings.ORDER_UPDATE_MAX_ATTEMPTS,
        )

    def create_adjust_stock_use_case(self, db: AsyncSession) -> AdjustStockUseCase:
        return AdjustStockUseCase(
            product_repository=self.create_product_repository(db),
            supplier_repository=self.create_supplier_repository(db),
            notification_service=self.create_notification_service(),
            update_attempts=self.settings.ORDER_UPDATE_MAX_ATTEMPTS,
        )

    def create_get_product_use_case(self, db: AsyncSession) -> GetProductUseCase:
        return GetProductUseCase(product_repository=self.create_product_repository(db))

    def create_list_products_use_case(self, db: AsyncSession) -> ListProductsUseCase:
        return ListProductsUseCase(product_repository=self.create_product_repository(db))

    # ==================== SUPPLIER USE CASES ====================

    def create_create_supplier_use_case(self, db: AsyncSession) -> CreateSupplierUseCase:
        return CreateSupplierUseCase(supplier_repository=self.create_supplier_repository(db))

    def create_update_supplier_use_case(self, db: AsyncSession) -> UpdateSupplierUseCase:
        return UpdateSupplierUseCase(
            supplier_repository=self.create_supplier_repository(db),
            update_attempts=self.settings.ORDER_UPDATE_MAX_ATTEMPTS,
        )

    def create_set_supplier_active_use_case(self, db: AsyncSession) -> SetSupplierActiveUseCase:
        return SetSupplierActiveUseCase(
            supplier_repository=self.create_supplier_repository(db),
            update_attempts=self.settings.ORDER_UPDATE_MAX_ATTEMPTS,
        )

    def create_get_supplier_use_case(self, db: AsyncSession) -> GetSupplierUseCase:
        return GetSupplierUseCase(supplier_repository=self.create_supplier_repository(db))

    def create_list_suppliers_use_case(self, db: AsyncSession) -> ListSuppliersUseCase:
        return ListSuppliersUseCase(supplier_repository=self.create_supplier_repository(db))

    # ==================== STATS ====================

    def create_get_dashboard_stats_use_case(self, db: AsyncSession) -> GetDashboardStatsUseCase:
        return GetDashboardStatsUseCase(stats_repository=self.create_stats_repository(db))


_container: MarketplaceContainer | None = None


def get_container() -> MarketplaceContainer:
    """Get or create the global container instance."""
    global _container
    if _container is None:
        _container = MarketplaceContainer()
    return _container
