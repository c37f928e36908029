"""
Domain Exceptions for Domain-Driven Design

These exceptions represent business rule violations and domain-specific errors.
They are translated to HTTP responses in the API layer (see
``fashop.api.exception_handlers``).
"""

from typing import Any


class DomainException(Exception):
    """
    Base exception for all domain-related errors.

    Provides a standardized way to communicate business rule violations.
    """

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "INSUFFICIENT_STOCK")
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DomainException):
    """
    Raised when domain validation fails.

    Use for invalid entity states, value object creation failures, etc.
    """

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class EntityNotFoundException(DomainException):
    """
    Raised when an entity is not found.
    """

    def __init__(
        self,
        entity_type: str,
        entity_id: Any,
        message: str | None = None,
        code: str = "ENTITY_NOT_FOUND",
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        msg = message or f"{entity_type} with ID {entity_id} not found"
        super().__init__(
            msg,
            code,
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class ProductNotFoundException(EntityNotFoundException):
    """Raised when an ordered product does not exist."""

    def __init__(self, product_id: Any):
        super().__init__("Product", product_id, code="PRODUCT_NOT_FOUND")


class SupplierNotFoundException(EntityNotFoundException):
    """Raised when a supplier referenced by a product or reply does not exist."""

    def __init__(self, supplier_id: Any):
        super().__init__("Supplier", supplier_id, code="SUPPLIER_NOT_FOUND")


class OrderNotFoundException(EntityNotFoundException):
    def __init__(self, order_ref: Any):
        super().__init__("Order", order_ref, code="ORDER_NOT_FOUND")


class SupplierNotInOrderException(EntityNotFoundException):
    """Raised when a supplier replies to an order it has no sub-order in."""

    def __init__(self, order_number: str, supplier_id: Any):
        self.order_number = order_number
        super().__init__(
            "SupplierSubOrder",
            supplier_id,
            message=f"Supplier {supplier_id} is not part of order {order_number}",
            code="SUPPLIER_NOT_IN_ORDER",
        )
        self.details["order_number"] = order_number


class InsufficientStockException(DomainException):
    """Raised when there's not enough stock for an operation."""

    def __init__(self, product_id: Any, requested: int, available: int, product_name: str | None = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        label = product_name or product_id
        super().__init__(
            f"Insufficient stock for product {label}. Requested: {requested}, Available: {available}",
            "INSUFFICIENT_STOCK",
            {
                "product_id": str(product_id),
                "requested": requested,
                "available": available,
            },
        )


class ProductUnavailableException(DomainException):
    """Raised when an ordered product is not active or not available for sale."""

    def __init__(self, product_id: Any, product_name: str, status: str):
        self.product_id = product_id
        super().__init__(
            f"Product {product_name} is not available",
            "PRODUCT_UNAVAILABLE",
            {"product_id": str(product_id), "status": status},
        )


class InvalidOperationException(DomainException):
    """Raised when an operation is not valid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None):
        self.operation = operation
        self.current_state = current_state
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(
            msg,
            "INVALID_OPERATION",
            {"operation": operation, "current_state": current_state},
        )


class ConcurrencyException(DomainException):
    """Raised when there's a concurrency conflict (optimistic locking)."""

    def __init__(self, entity_type: str, entity_id: Any, expected_version: int, actual_version: int | None = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Concurrency conflict for {entity_type} {entity_id}. "
            f"Expected version {expected_version}, but found {actual_version}",
            "CONCURRENCY_CONFLICT",
            {
                "entity_type": entity_type,
                "entity_id": str(entity_id),
                "expected_version": expected_version,
                "actual_version": actual_version,
            },
        )


class DuplicateEntityException(DomainException):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: Any):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(
            f"{entity_type} with {field}='{value}' already exists",
            "DUPLICATE_ENTITY",
            {
                "entity_type": entity_type,
                "field": field,
                "value": str(value),
            },
        )


class OrderNumberExhaustedException(DomainException):
    """Raised when no free order number could be generated."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Could not allocate a unique order number after {attempts} attempts",
            "ORDER_NUMBER_EXHAUSTED",
            {"attempts": attempts},
        )


class NotificationException(DomainException):
    """Raised when an external notification channel fails."""

    def __init__(self, provider: str, message: str, original_error: Exception | None = None):
        self.provider = provider
        self.original_error = original_error
        details: dict[str, Any] = {"provider": provider}
        if original_error:
            details["original_error"] = str(original_error)
        super().__init__(message, "NOTIFICATION_ERROR", details)
