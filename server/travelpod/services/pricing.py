"""Trip price arithmetic.

All amounts are integers in minor currency units (paise for INR).
"""

from dataclasses import asdict, dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..models.discount import DiscountType

MINOR_UNITS_PER_MAJOR = 100


def to_minor_units(major: int) -> int:
    """Convert a whole-rupee catalog price to minor units."""
    return major * MINOR_UNITS_PER_MAJOR


@dataclass(frozen=True)
class PriceBreakdown:
    """Per-category trip cost with the discount applied."""

    transportation: int
    accommodation: int
    attractions: int
    local_transport: int
    subtotal: int
    discount: int
    total: int
    currency: str

    def to_dict(self) -> dict:
        return asdict(self)


def trip_days(start: date, end: date) -> int:
    """Inclusive number of days covered by a trip."""
    if end < start:
        raise ValueError("end date must not be before start date")
    return (end - start).days + 1


def discount_amount(subtotal: int, discount_type: Optional[str], value: Optional[int]) -> int:
    """
    Amount taken off ``subtotal`` by a discount.

    Percentage values are clamped to 0..100 and the result is rounded half-up
    to a whole minor unit. Fixed values never take the total below zero.
    Unknown discount types take nothing off.
    """
    if subtotal <= 0 or value is None:
        return 0

    if discount_type == DiscountType.PERCENTAGE:
        percent = min(max(value, 0), 100)
        amount = (Decimal(subtotal) * Decimal(percent) / Decimal(100)).quantize(
            Decimal(1), rounding=ROUND_HALF_UP
        )
        return min(int(amount), subtotal)

    if discount_type == DiscountType.FIXED:
        return min(max(value, 0), subtotal)

    return 0


def apply_discount(subtotal: int, discount_type: Optional[str], value: Optional[int]) -> int:
    """Total after discount; never negative and never above the subtotal."""
    return subtotal - discount_amount(subtotal, discount_type, value)


def calculate_breakdown(
    travelers: int,
    days: int,
    transport_prices: Iterable[int] = (),
    accommodation_price: Optional[int] = None,
    attraction_prices: Iterable[int] = (),
    local_transport_price_per_day: Optional[int] = None,
    discount_type: Optional[str] = None,
    discount_value: Optional[int] = None,
    currency: str = "INR",
) -> PriceBreakdown:
    """
    Price a trip.

    Args:
        travelers: Number of travelers, at least 1
        days: Inclusive trip length in days, at least 1
        transport_prices: Per-person price of each selected leg
        accommodation_price: Nightly price of the selected hotel, if any
        attraction_prices: Per-person price of each selected attraction
        local_transport_price_per_day: Daily price of the selected local transport, if any
        discount_type: ``percentage`` or ``fixed``
        discount_value: Percentage, or amount in minor units
        currency: ISO 4217 code reported with the breakdown

    Returns:
        PriceBreakdown: Line totals, subtotal, discount and total
    """
    if travelers < 1:
        raise ValueError("travelers must be at least 1")
    if days < 1:
        raise ValueError("days must be at least 1")

    transportation = sum(price * travelers for price in transport_prices)
    accommodation = accommodation_price * days if accommodation_price is not None else 0
    attractions = sum(price * travelers for price in attraction_prices)
    local_transport = (
        local_transport_price_per_day * days if local_transport_price_per_day is not None else 0
    )

    subtotal = transportation + accommodation + attractions + local_transport
    discount = discount_amount(subtotal, discount_type, discount_value)

    return PriceBreakdown(
        transportation=transportation,
        accommodation=accommodation,
        attractions=attractions,
        local_transport=local_transport,
        subtotal=subtotal,
        discount=discount,
        total=subtotal - discount,
        currency=currency,
    )
