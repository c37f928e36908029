"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Exceptions: Domain-specific error handling
"""

from fashop.core.domain.entities import (
    AggregateRoot,
    Entity,
    generate_uuid,
    utcnow,
)
from fashop.core.domain.exceptions import (
    ConcurrencyException,
    DomainException,
    DuplicateEntityException,
    EntityNotFoundException,
    InsufficientStockException,
    InvalidOperationException,
    NotificationException,
    OrderNotFoundException,
    OrderNumberExhaustedException,
    ProductNotFoundException,
    ProductUnavailableException,
    SupplierNotFoundException,
    SupplierNotInOrderException,
    ValidationException,
)
from fashop.core.domain.value_objects import (
    PhoneNumber,
    StatusEnum,
    ValueObject,
    to_decimal,
)

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    "generate_uuid",
    "utcnow",
    # Value Objects
    "ValueObject",
    "PhoneNumber",
    "StatusEnum",
    "to_decimal",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "ProductNotFoundException",
    "SupplierNotFoundException",
    "OrderNotFoundException",
    "SupplierNotInOrderException",
    "InsufficientStockException",
    "ProductUnavailableException",
    "InvalidOperationException",
    "ConcurrencyException",
    "DuplicateEntityException",
    "OrderNumberExhaustedException",
    "NotificationException",
]
