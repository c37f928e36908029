"""
Unit tests for the domain exception to HTTP status mapping.
"""

import pytest

from fashop.api.exception_handlers import error_body, status_code_for
from fashop.core.domain import (
    ConcurrencyException,
    DuplicateEntityException,
    InsufficientStockException,
    InvalidOperationException,
    NotificationException,
    OrderNotFoundException,
    OrderNumberExhaustedException,
    ProductNotFoundException,
    ProductUnavailableException,
    SupplierNotInOrderException,
    ValidationException,
)


@pytest.mark.parametrize(
    "exc,expected",
    [
        (OrderNotFoundException("FA-123456"), 404),
        (ProductNotFoundException("x"), 404),
        (InsufficientStockException("x", requested=3, available=1), 409),
        (DuplicateEntityException("Product", "sku", "ROBE-1"), 409),
        (ConcurrencyException("Order", "x", 1, 2), 409),
        (OrderNumberExhaustedException(3), 409),
        (InvalidOperationException("modify_items", "confirmed"), 409),
        (SupplierNotInOrderException("FA-123456", "x"), 404),
        (NotificationException("local", "down"), 502),
        (ValidationException("bad", field="phone"), 400),
        (ProductUnavailableException("x", "Robe wax", "inactive"), 400),
    ],
)
def test_status_code_for(exc, expected):
    assert status_code_for(exc) == expected


def test_error_body_omits_empty_details():
    assert error_body("Not found", "ORDER_NOT_FOUND") == {
        "success": False,
        "error": {"message": "Not found", "code": "ORDER_NOT_FOUND"},
    }


def test_error_body_keeps_details():
    body = error_body("bad", "VALIDATION_ERROR", {"field": "phone"})
    assert body["error"]["details"] == {"field": "phone"}
