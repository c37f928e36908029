"""
Supplier Reply Value Objects

Suppliers answer new-order SMS with free text ("1", "OUI FA-123456",
"non"). The text is resolved once, at the boundary, into one of three
variants so the workflow never deals with raw strings.
"""

import re
from dataclasses import dataclass

from fashop.core.domain import ValueObject

from .order_number import OrderNumber, ORDER_NUMBER_SEARCH
from .order_status import SupplierResponse

CONFIRM_TOKENS = frozenset({"1", "oui", "yes", "ok", "confirmed", "confirme", "confirmé"})
REJECT_TOKENS = frozenset({"0", "non", "no", "rejected", "indisponible"})

_WORD = re.compile(r"\w+")


@dataclass(frozen=True)
class ConfirmedReply(ValueObject):
    order_number: OrderNumber | None = None

    @property
    def response(self) -> SupplierResponse:
        return SupplierResponse.CONFIRMED


@dataclass(frozen=True)
class RejectedReply(ValueObject):
    order_number: OrderNumber | None = None

    @property
    def response(self) -> SupplierResponse:
        return SupplierResponse.REJECTED


@dataclass(frozen=True)
class InvalidReply(ValueObject):
    """Text that is neither a confirmation nor a rejection."""

    raw_text: str
    order_number: OrderNumber | None = None


SupplierReply = ConfirmedReply | RejectedReply | InvalidReply


def parse_supplier_reply(text: str) -> SupplierReply:
    """
    Resolve a supplier's free-text reply.

    The first recognised keyword wins; an order number quoted anywhere in
    the text is kept so the reply can be routed without other context.

    Example:
        ```python
        parse_supplier_reply("OUI FA-123456")
        # ConfirmedReply(order_number=OrderNumber("FA-123456"))
        ```
    """
    raw = text or ""
    order_number = OrderNumber.find_in(raw)
    remainder = ORDER_NUMBER_SEARCH.sub(" ", raw).lower()

    for token in _WORD.findall(remainder):
        if token in CONFIRM_TOKENS:
            return ConfirmedReply(order_number=order_number)
        if token in REJECT_TOKENS:
            return RejectedReply(order_number=order_number)

    return InvalidReply(raw_text=raw, order_number=order_number)
