"""
Handle Supplier SMS Use Case

Routes an inbound SMS from a supplier to the right sub-order.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from fashop.core.domain import (
    OrderNotFoundException,
    PhoneNumber,
    SupplierNotFoundException,
    ValidationException,
)
from fashop.domains.marketplace.application.ports import IOrderRepository, ISupplierRepository
from fashop.domains.marketplace.application.use_cases.process_supplier_response import (
    ProcessSupplierResponseUseCase,
    SupplierResponseRequest,
    SupplierResponseResult,
)
from fashop.domains.marketplace.domain.value_objects.supplier_reply import InvalidReply, parse_supplier_reply

logger = logging.getLogger(__name__)


@dataclass
class SupplierSmsRequest:
    sender_phone: str
    text: str


class HandleSupplierSmsUseCase:
    """
    Use Case: Handle Supplier SMS

    The reply text is resolved into a confirmed, rejected or invalid reply.
    When the text quotes an order number that order is used; otherwise the
    oldest pending order still waiting on this supplier is.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        supplier_repository: ISupplierRepository,
        process_response: ProcessSupplierResponseUseCase,
    ):
        self.order_repository = order_repository
        self.supplier_repository = supplier_repository
        self.process_response = process_response

    async def execute(self, request: SupplierSmsRequest) -> SupplierResponseResult:
        reply = parse_supplier_reply(request.text)
        if isinstance(reply, InvalidReply):
            logger.info(f"Unrecognised supplier reply from {request.sender_phone}: {reply.raw_text!r}")
            raise ValidationException(
                "Reply not understood. Answer 1 (OUI) to confirm or 0 (NON) to reject.",
                field="text",
                details={"raw_text": reply.raw_text},
            )

        phone = PhoneNumber(request.sender_phone)
        supplier = await self.supplier_repository.get_by_phone(phone.number)
        if supplier is None or supplier.id is None:
            raise SupplierNotFoundException(phone.number)

        order_ref: str | UUID
        if reply.order_number is not None:
            order_ref = reply.order_number.value
        else:
            waiting = await self.order_repository.find_awaiting_reply(supplier.id)
            if not waiting:
                raise OrderNotFoundException(f"pending order for supplier {supplier.name}")
            order_ref = waiting[0].id
            if len(waiting) > 1:
                logger.warning(
                    f"Supplier {supplier.name} replied without an order number while "
                    f"{len(waiting)} orders wait; applying to {waiting[0].order_number}"
                )

        return await self.process_response.execute(
            SupplierResponseRequest(
                order_ref=order_ref,
                supplier_id=supplier.id,
                response=reply.response,
            )
        )
