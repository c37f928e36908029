"""
Unit tests for the Product, Supplier and Order aggregates.
"""

import logging
from datetime import timedelta
from decimal import Decimal

import pytest

from fashop.core.domain import (
    InsufficientStockException,
    InvalidOperationException,
    ProductUnavailableException,
    SupplierNotInOrderException,
    ValidationException,
    generate_uuid,
)
from fashop.domains.marketplace.domain.entities import Order, OrderItem, SupplierContact
from fashop.domains.marketplace.domain.value_objects import (
    OrderNumber,
    OrderStatus,
    PaymentStatus,
    Price,
    ProductStatus,
    SupplierResponse,
)
from tests.factories import make_address, make_product, make_supplier


class TestProduct:
    def test_create_derives_margin(self, product):
        assert product.margin == Decimal("50000.00")
        assert product.margin_percentage == Decimal("50.0")
        assert product.status == ProductStatus.ACTIVE
        assert product.is_available

    def test_created_without_stock_is_out_of_stock(self, supplier):
        product = make_product(supplier, stock=0)

        assert product.status == ProductStatus.OUT_OF_STOCK
        assert not product.is_available

    def test_draft_keeps_status_whatever_the_stock(self, supplier):
        product = make_product(supplier, stock=0, status=ProductStatus.DRAFT)
        product.apply_stock_delta(5)

        assert product.status == ProductStatus.DRAFT

    def test_stock_delta_flips_status_both_ways(self, product):
        product.apply_stock_delta(-10)
        assert product.stock == 0
        assert product.status == ProductStatus.OUT_OF_STOCK
        assert not product.is_available

        product.apply_stock_delta(3)
        assert product.status == ProductStatus.ACTIVE
        assert product.is_available

    def test_stock_delta_clamps_at_zero(self, product):
        assert product.apply_stock_delta(-100) == 0

    def test_set_stock_rejects_negative(self, product):
        with pytest.raises(ValidationException):
            product.set_stock(-1)

    def test_low_stock_threshold_is_inclusive(self, supplier):
        product = make_product(supplier, stock=2, min_stock=2)
        assert product.is_low_stock

    def test_set_prices_recomputes_margin(self, product):
        product.set_prices(public_price=Price.of(120000))

        assert product.margin == Decimal("20000.00")
        assert product.margin_percentage == Decimal("20.0")

    def test_ensure_orderable(self, product):
        product.ensure_orderable(10)

        with pytest.raises(InsufficientStockException) as exc_info:
            product.ensure_orderable(11)
        assert exc_info.value.available == 10

        product.deactivate()
        with pytest.raises(ProductUnavailableException):
            product.ensure_orderable(1)

    def test_name_required(self, supplier):
        with pytest.raises(ValidationException):
            make_product(supplier, name=" ")


class TestSupplier:
    def test_update_stats(self, supplier):
        supplier.update_stats(is_successful=True, response_time_minutes=30)

        assert supplier.total_orders == 1
        assert supplier.successful_orders == 1
        assert supplier.average_response_time == Decimal("30.00")
        assert supplier.rating == Decimal("5.00")

        supplier.update_stats(is_successful=False, response_time_minutes=90)

        assert supplier.total_orders == 2
        assert supplier.success_rate == 50
        assert supplier.average_response_time == Decimal("60.00")
        assert supplier.rating == Decimal("4.10")

    def test_stats_keep_full_precision(self, supplier):
        for minutes in (10, 15, 16, 20, 25):
            supplier.update_stats(is_successful=False, response_time_minutes=minutes)

        # 10 -> 12.5 -> 14.25 -> 17.125 -> 21.0625
        assert supplier.average_response_time == Decimal("21.0625")
        assert supplier.rating == Decimal("1") + (Decimal("5") - Decimal("21.0625") / 60) * Decimal("0.4")

    def test_zero_response_time_does_not_move_average(self, supplier):
        supplier.update_stats(is_successful=True, response_time_minutes=0)
        assert supplier.average_response_time is None

    def test_update_profile_ignores_none(self, supplier):
        supplier.update_profile(name="Boutique Matam", email=None)

        assert supplier.name == "Boutique Matam"
        assert supplier.email is None

    def test_update_profile_rejects_statistics(self, supplier):
        with pytest.raises(ValidationException):
            supplier.update_profile(rating=Decimal("5"))

    def test_unknown_delivery_zone_rejected(self, supplier):
        with pytest.raises(ValidationException):
            supplier.update_profile(delivery_zones=["Kindia"])

    def test_blank_name_rejected_on_update(self, supplier):
        with pytest.raises(ValidationException):
            supplier.update_profile(name="")


def build_order(*suppliers_and_products, delivery_fee=Decimal("15000")) -> Order:
    items = []
    contacts = {}
    for supplier, product, quantity in suppliers_and_products:
        items.append(OrderItem.from_product(product, quantity))
        contacts[supplier.id] = SupplierContact(supplier.id, supplier.name, str(supplier.phone))
    return Order.create(
        order_number=OrderNumber("FA-123456"),
        customer_phone="+224620000000",
        delivery_address=make_address(),
        items=items,
        suppliers=contacts,
        delivery_fee=delivery_fee,
    )


@pytest.fixture
def two_supplier_order():
    first = make_supplier("Boutique Kaloum", "622000001", supplier_id=generate_uuid())
    second = make_supplier("Atelier Ratoma", "622000002", supplier_id=generate_uuid())
    robe = make_product(first, product_id=generate_uuid())
    sac = make_product(
        second, name="Sac cuir", sku="SAC-001", supplier_price=50000, public_price=80000, product_id=generate_uuid()
    )
    return build_order((first, robe, 2), (second, sac, 1)), first, second


class TestOrder:
    def test_split_and_totals(self, two_supplier_order):
        order, first, second = two_supplier_order

        assert order.supplier_ids == [first.id, second.id]
        assert order.subtotal == Decimal("380000.00")
        assert order.total == Decimal("395000.00")
        assert order.total_margin == Decimal("130000.00")
        assert order.item_count == 3
        assert order.status == OrderStatus.PENDING

    def test_item_snapshot(self, product):
        item = OrderItem.from_product(product, 2)
        product.set_prices(public_price=Price.of(999999))

        assert item.public_price == Decimal("150000.00")
        assert item.total_price == Decimal("300000.00")
        assert item.margin_percentage == Decimal("50.0")

    def test_item_dict_round_trip(self, product):
        item = OrderItem.from_product(product, 2, color="bleu")
        assert OrderItem.from_dict(item.to_dict()) == item

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationException):
            Order.create(
                order_number=OrderNumber("FA-123456"),
                customer_phone="+224620000000",
                delivery_address=make_address(),
                items=[],
                suppliers={},
                delivery_fee=Decimal("0"),
            )

    def test_all_confirmations_confirm_the_order(self, two_supplier_order):
        order, first, second = two_supplier_order

        order.process_supplier_response(first.id, SupplierResponse.CONFIRMED)
        assert order.status == OrderStatus.PENDING

        order.process_supplier_response(second.id, SupplierResponse.CONFIRMED)
        assert order.status == OrderStatus.CONFIRMED

    def test_any_rejection_cancels_the_order(self, two_supplier_order):
        order, first, second = two_supplier_order

        order.process_supplier_response(first.id, SupplierResponse.CONFIRMED)
        order.process_supplier_response(second.id, SupplierResponse.REJECTED)

        assert order.status == OrderStatus.CANCELLED

    def test_repeated_reply_is_idempotent(self, two_supplier_order):
        order, first, _ = two_supplier_order

        assert order.process_supplier_response(first.id, SupplierResponse.REJECTED) == SupplierResponse.PENDING
        assert order.process_supplier_response(first.id, SupplierResponse.REJECTED) == SupplierResponse.REJECTED
        assert order.status == OrderStatus.CANCELLED

    def test_pending_reply_rejected(self, two_supplier_order):
        order, first, _ = two_supplier_order
        with pytest.raises(ValidationException):
            order.process_supplier_response(first.id, SupplierResponse.PENDING)

    def test_unknown_supplier_reply(self, two_supplier_order):
        order, _, _ = two_supplier_order
        with pytest.raises(SupplierNotInOrderException):
            order.process_supplier_response(generate_uuid(), SupplierResponse.CONFIRMED)

    def test_unconventional_status_is_applied_and_logged(self, two_supplier_order, caplog):
        order, _, _ = two_supplier_order
        order.update_status(OrderStatus.DELIVERED)

        with caplog.at_level(logging.WARNING):
            previous = order.update_status(OrderStatus.PENDING, notes="reopened")

        assert previous == OrderStatus.DELIVERED
        assert order.status == OrderStatus.PENDING
        assert order.admin_notes == "reopened"
        assert "unconventional status change" in caplog.text

    def test_confirm_payment_keeps_status(self, two_supplier_order):
        order, _, _ = two_supplier_order
        order.confirm_payment("OM-42")

        assert order.payment_status == PaymentStatus.PAID
        assert order.payment_reference == "OM-42"
        assert order.status == OrderStatus.PENDING

    def test_add_item_merges_same_product(self, two_supplier_order):
        order, _, _ = two_supplier_order
        existing = order.items[0]

        order.add_item(existing.with_quantity(1))

        assert order.items[0].quantity == 3
        assert len(order.suppliers) == 2
        assert order.subtotal == Decimal("530000.00")

    def test_remove_item_drops_empty_sub_order(self, two_supplier_order):
        order, _, second = two_supplier_order
        order.remove_item(order.items[1].product_id)

        assert order.get_sub_order(second.id) is None
        assert order.total == Decimal("315000.00")

    def test_items_frozen_once_confirmed(self, two_supplier_order):
        order, first, second = two_supplier_order
        order.process_supplier_response(first.id, SupplierResponse.CONFIRMED)
        order.process_supplier_response(second.id, SupplierResponse.CONFIRMED)

        with pytest.raises(InvalidOperationException):
            order.remove_item(order.items[0].product_id)

    def test_minutes_since_creation(self, two_supplier_order):
        order, _, _ = two_supplier_order
        assert order.minutes_since_creation(order.created_at + timedelta(minutes=90)) == Decimal("90.0")
