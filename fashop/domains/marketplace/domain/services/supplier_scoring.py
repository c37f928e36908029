"""
Supplier Scoring

Reputation formulas applied to suppliers after each reply.
"""

from decimal import Decimal

MAX_RATING = Decimal("5")
DEFAULT_RESPONSE_SCORE = Decimal("3")


def next_average_response_time(current: Decimal | None, response_time_minutes: Decimal) -> Decimal:
    """
    Fold a new response time into the running average.

    Not an arithmetic mean: each new reply counts for half of the result.
    """
    if current is None or current == 0:
        return response_time_minutes
    return (current + response_time_minutes) / 2


def response_score(average_response_time: Decimal | None) -> Decimal:
    """5 for instant replies, losing a point per hour, floored at 0."""
    if not average_response_time:
        return DEFAULT_RESPONSE_SCORE
    return max(Decimal("0"), Decimal("5") - average_response_time / 60)


def compute_rating(successful_orders: int, total_orders: int, average_response_time: Decimal | None) -> Decimal:
    """
    Supplier rating in [0, 5].

    ``min(5, success_ratio * 3 + response_score * 0.4 + 1)``
    """
    if total_orders <= 0:
        return Decimal("0")
    success_ratio = Decimal(successful_orders) / Decimal(total_orders)
    rating = success_ratio * 3 + response_score(average_response_time) * Decimal("0.4") + 1
    return min(MAX_RATING, rating)
