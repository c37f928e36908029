"""
Unit tests for supplier replies, the SMS webhook use case and the
administrative order updates.
"""

import copy
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from fashop.core.domain import (
    ConcurrencyException,
    OrderNotFoundException,
    SupplierNotFoundException,
    SupplierNotInOrderException,
    ValidationException,
    generate_uuid,
)
from fashop.domains.marketplace.application.ports import NotificationTemplate
from fashop.domains.marketplace.application.services import OrderNotificationService
from fashop.domains.marketplace.application.use_cases import (
    ConfirmPaymentRequest,
    ConfirmPaymentUseCase,
    GetOrderUseCase,
    HandleSupplierSmsUseCase,
    ProcessSupplierResponseUseCase,
    SupplierResponseRequest,
    SupplierSmsRequest,
    UpdateOrderStatusRequest,
    UpdateOrderStatusUseCase,
    retry_on_conflict,
)
from fashop.domains.marketplace.domain.entities import Order, OrderItem, SupplierContact
from fashop.domains.marketplace.domain.value_objects import (
    OrderNumber,
    OrderStatus,
    PaymentStatus,
    SupplierResponse,
)
from tests.factories import FakeTransactionManager, make_address, make_product, make_supplier


@pytest.fixture
def suppliers():
    return [
        make_supplier("Boutique Kaloum", "622000001", supplier_id=generate_uuid()),
        make_supplier("Atelier Ratoma", "622000002", supplier_id=generate_uuid()),
    ]


@pytest.fixture
def order(suppliers):
    items = []
    for index, supplier in enumerate(suppliers):
        product = make_product(supplier, name=f"Article {index}", sku=f"ART-{index}", product_id=generate_uuid())
        items.append(OrderItem.from_product(product, 1))
    built = Order.create(
        order_number=OrderNumber("FA-123456"),
        customer_phone="+224620000000",
        delivery_address=make_address(),
        items=items,
        suppliers={s.id: SupplierContact(s.id, s.name, str(s.phone)) for s in suppliers},
        delivery_fee=Decimal("15000"),
    )
    built.id = generate_uuid()
    return built


@pytest.fixture
def order_repository(order):
    stored = {"order": order}
    repo = AsyncMock()

    def save(updated):
        updated.version += 1
        stored["order"] = updated
        return updated

    def lookup(_):
        return copy.deepcopy(stored["order"])

    repo.get_by_id.side_effect = lookup
    repo.get_by_number.side_effect = lambda number: lookup(number) if number == "FA-123456" else None
    repo.save.side_effect = save
    repo.stored = stored
    return repo


@pytest.fixture
def supplier_repository(suppliers):
    by_id = {s.id: s for s in suppliers}
    by_phone = {str(s.phone): s for s in suppliers}
    repo = AsyncMock()
    repo.get_by_id.side_effect = lambda supplier_id: by_id.get(supplier_id)
    repo.get_by_phone.side_effect = lambda phone: by_phone.get(phone)
    repo.save.side_effect = lambda supplier: supplier
    return repo


@pytest.fixture
def process_use_case(order_repository, supplier_repository, gateway):
    return ProcessSupplierResponseUseCase(
        order_repository=order_repository,
        supplier_repository=supplier_repository,
        transaction_manager=FakeTransactionManager(),
        notification_service=OrderNotificationService(gateway),
    )


class TestProcessSupplierResponseUseCase:
    @pytest.mark.asyncio
    async def test_last_confirmation_confirms_and_notifies_customer(self, process_use_case, order, suppliers, gateway):
        first, second = suppliers

        result = await process_use_case.execute(
            SupplierResponseRequest(order_ref=order.id, supplier_id=first.id, response=SupplierResponse.CONFIRMED)
        )
        assert result.order.status == OrderStatus.PENDING
        assert not result.status_changed
        assert gateway.messages(NotificationTemplate.ORDER_CONFIRMED) == []

        result = await process_use_case.execute(
            SupplierResponseRequest(order_ref=order.id, supplier_id=second.id, response=SupplierResponse.CONFIRMED)
        )
        assert result.order.status == OrderStatus.CONFIRMED
        assert result.status_changed

        confirmations = gateway.messages(NotificationTemplate.ORDER_CONFIRMED)
        assert len(confirmations) == 1
        assert confirmations[0][0] == "+224620000000"
        assert confirmations[0][1]["order_number"] == "FA-123456"

    @pytest.mark.asyncio
    async def test_rejection_cancels(self, process_use_case, order, suppliers):
        result = await process_use_case.execute(
            SupplierResponseRequest(
                order_ref="FA-123456", supplier_id=suppliers[0].id, response=SupplierResponse.REJECTED
            )
        )
        assert result.order.status == OrderStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_stats_updated_on_first_reply_only(self, process_use_case, order, suppliers, supplier_repository):
        first = suppliers[0]
        request = SupplierResponseRequest(
            order_ref=order.id, supplier_id=first.id, response=SupplierResponse.CONFIRMED
        )

        first_result = await process_use_case.execute(request)
        second_result = await process_use_case.execute(request)

        assert first_result.is_first_reply
        assert not second_result.is_first_reply
        assert first.total_orders == 1
        assert first.successful_orders == 1
        supplier_repository.save.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_supplier_not_in_order(self, process_use_case, order):
        with pytest.raises(SupplierNotInOrderException):
            await process_use_case.execute(
                SupplierResponseRequest(
                    order_ref=order.id, supplier_id=generate_uuid(), response=SupplierResponse.CONFIRMED
                )
            )

    @pytest.mark.asyncio
    async def test_unknown_order(self, process_use_case, suppliers):
        with pytest.raises(OrderNotFoundException):
            await process_use_case.execute(
                SupplierResponseRequest(
                    order_ref="FA-999999", supplier_id=suppliers[0].id, response=SupplierResponse.CONFIRMED
                )
            )

    @pytest.mark.asyncio
    async def test_version_conflict_is_retried_on_fresh_state(
        self, process_use_case, order, suppliers, order_repository
    ):
        save = order_repository.save.side_effect
        attempts = []

        def conflict_once(updated):
            attempts.append(updated.version)
            if len(attempts) == 1:
                raise ConcurrencyException("Order", updated.id, updated.version, updated.version + 1)
            return save(updated)

        order_repository.save.side_effect = conflict_once

        result = await process_use_case.execute(
            SupplierResponseRequest(
                order_ref=order.id, supplier_id=suppliers[0].id, response=SupplierResponse.CONFIRMED
            )
        )

        assert len(attempts) == 2
        assert order_repository.get_by_id.await_count == 2
        assert result.is_first_reply


class TestHandleSupplierSmsUseCase:
    @pytest.fixture
    def process_response(self):
        mock = AsyncMock()
        mock.execute.return_value = "processed"
        return mock

    @pytest.fixture
    def use_case(self, order_repository, supplier_repository, process_response):
        return HandleSupplierSmsUseCase(order_repository, supplier_repository, process_response)

    @pytest.mark.asyncio
    async def test_reply_with_order_number(self, use_case, suppliers, process_response):
        result = await use_case.execute(SupplierSmsRequest(sender_phone="622000001", text="OUI FA-123456"))

        assert result == "processed"
        request = process_response.execute.await_args.args[0]
        assert request.order_ref == "FA-123456"
        assert request.supplier_id == suppliers[0].id
        assert request.response == SupplierResponse.CONFIRMED

    @pytest.mark.asyncio
    async def test_bare_reply_goes_to_oldest_waiting_order(
        self, use_case, order, order_repository, process_response
    ):
        other = copy.deepcopy(order)
        other.id = generate_uuid()
        order_repository.find_awaiting_reply.return_value = [order, other]

        await use_case.execute(SupplierSmsRequest(sender_phone="+224 622 00 00 02", text="0"))

        request = process_response.execute.await_args.args[0]
        assert request.order_ref == order.id
        assert request.response == SupplierResponse.REJECTED

    @pytest.mark.asyncio
    async def test_bare_reply_without_waiting_order(self, use_case, order_repository):
        order_repository.find_awaiting_reply.return_value = []

        with pytest.raises(OrderNotFoundException):
            await use_case.execute(SupplierSmsRequest(sender_phone="622000001", text="1"))

    @pytest.mark.asyncio
    async def test_unknown_sender(self, use_case):
        with pytest.raises(SupplierNotFoundException):
            await use_case.execute(SupplierSmsRequest(sender_phone="622999999", text="1"))

    @pytest.mark.asyncio
    async def test_unrecognised_text(self, use_case, process_response):
        with pytest.raises(ValidationException) as exc_info:
            await use_case.execute(SupplierSmsRequest(sender_phone="622000001", text="demain peut-etre"))

        assert exc_info.value.details["raw_text"] == "demain peut-etre"
        process_response.execute.assert_not_called()


class TestAdministrativeOrderUpdates:
    @pytest.mark.asyncio
    async def test_update_status(self, order, order_repository):
        use_case = UpdateOrderStatusUseCase(order_repository, FakeTransactionManager())

        updated = await use_case.execute(
            UpdateOrderStatusRequest(order_ref="fa-123456", status=OrderStatus.SHIPPED, admin_notes="Moto 3")
        )

        assert updated.status == OrderStatus.SHIPPED
        assert updated.admin_notes == "Moto 3"
        order_repository.get_by_number.assert_awaited_with("FA-123456")

    @pytest.mark.asyncio
    async def test_confirm_payment(self, order, order_repository):
        use_case = ConfirmPaymentUseCase(order_repository, FakeTransactionManager())

        updated = await use_case.execute(ConfirmPaymentRequest(order_ref=str(order.id), payment_reference="OM-1"))

        assert updated.payment_status == PaymentStatus.PAID
        assert updated.payment_reference == "OM-1"
        assert updated.status == OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_get_order_not_found(self, order_repository):
        with pytest.raises(OrderNotFoundException):
            await GetOrderUseCase(order_repository).execute("FA-000001")


class TestRetryOnConflict:
    @pytest.mark.asyncio
    async def test_gives_up_after_attempts(self):
        operation = AsyncMock(side_effect=ConcurrencyException("Order", "x", 1, 2))

        with pytest.raises(ConcurrencyException):
            await retry_on_conflict(operation, attempts=3, label="test")

        assert operation.await_count == 3

    @pytest.mark.asyncio
    async def test_returns_first_success(self):
        operation = AsyncMock(side_effect=[ConcurrencyException("Order", "x", 1, 2), "done"])

        assert await retry_on_conflict(operation, attempts=3, label="test") == "done"
