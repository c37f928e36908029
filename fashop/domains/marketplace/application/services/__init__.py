"""Application services for the marketplace domain."""

from fashop.domains.marketplace.application.services.notification_service import (
    FanOutReport,
    OrderNotificationService,
)

__all__ = [
    "FanOutReport",
    "OrderNotificationService",
]
