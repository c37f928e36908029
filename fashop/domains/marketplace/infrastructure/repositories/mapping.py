"""
Helpers shared by the SQLAlchemy repositories.
"""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.exc import IntegrityError

from fashop.core.domain import DuplicateEntityException


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; every domain timestamp is UTC-aware."""
    if value is None:
        return None
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def as_decimal(value, default: str = "0") -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal(default)


def to_scale(value: Decimal | None, places: str) -> Decimal | None:
    """Round to the column scale (e.g. ``"0.01"``) on the way into the database."""
    return value.quantize(Decimal(places), ROUND_HALF_UP) if value is not None else None


def duplicate_from_integrity_error(
    error: IntegrityError,
    entity_type: str,
    unique_fields: dict[str, str],
) -> DuplicateEntityException | None:
    """
    Translate a unique-constraint violation into a domain exception.

    Args:
        unique_fields: Column name -> offending value, checked in order

    Returns:
        The matching DuplicateEntityException, or None for other violations
    """
    message = str(error.orig)
    for column, value in unique_fields.items():
        if column in message:
            return DuplicateEntityException(entity_type, column, value)
    return None
