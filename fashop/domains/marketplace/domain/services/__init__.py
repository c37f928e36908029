"""
Marketplace Domain Services
"""

from fashop.domains.marketplace.domain.services.pricing_service import MarginResult, calculate_margin
from fashop.domains.marketplace.domain.services.supplier_scoring import (
    compute_rating,
    next_average_response_time,
    response_score,
)

__all__ = [
    "MarginResult",
    "calculate_margin",
    "compute_rating",
    "next_average_response_time",
    "response_score",
]
