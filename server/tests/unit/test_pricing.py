"""Unit tests for trip price arithmetic."""

from datetime import date

import pytest

from travelpod.models.discount import DiscountType
from travelpod.services.pricing import (
    PriceBreakdown,
    apply_discount,
    calculate_breakdown,
    discount_amount,
    to_minor_units,
    trip_days,
)


def test_to_minor_units():
    assert to_minor_units(15000) == 1_500_000
    assert to_minor_units(0) == 0


def test_trip_days_is_inclusive():
    assert trip_days(date(2026, 11, 1), date(2026, 11, 5)) == 5
    assert trip_days(date(2026, 11, 1), date(2026, 11, 1)) == 1


def test_trip_days_rejects_reversed_range():
    with pytest.raises(ValueError):
        trip_days(date(2026, 11, 5), date(2026, 11, 1))


def test_percentage_discount_rounds_half_up():
    # 15% of 1,001 is 150.15, 15% of 1,010 is 151.5
    assert discount_amount(1_001, DiscountType.PERCENTAGE, 15) == 150
    assert discount_amount(1_010, DiscountType.PERCENTAGE, 15) == 152


def test_percentage_discount_is_clamped():
    assert discount_amount(10_000, DiscountType.PERCENTAGE, 150) == 10_000
    assert discount_amount(10_000, DiscountType.PERCENTAGE, -5) == 0


def test_fixed_discount_never_exceeds_subtotal():
    assert discount_amount(30_000, DiscountType.FIXED, 50_000) == 30_000
    assert apply_discount(30_000, DiscountType.FIXED, 50_000) == 0


def test_discount_accepts_plain_strings():
    assert discount_amount(10_000, "percentage", 10) == 1_000
    assert discount_amount(10_000, "fixed", 2_500) == 2_500


def test_unknown_or_missing_discount_takes_nothing():
    assert discount_amount(10_000, None, None) == 0
    assert discount_amount(10_000, "bogus", 10) == 0
    assert discount_amount(0, DiscountType.PERCENTAGE, 10) == 0


def test_calculate_breakdown_full_trip():
    """Two travelers, five days, every category selected with a 10% code."""
    breakdown = calculate_breakdown(
        travelers=2,
        days=5,
        transport_prices=[1_500_000, 2_000_000],
        accommodation_price=1_290_000,
        attraction_prices=[250_000, 170_000],
        local_transport_price_per_day=120_000,
        discount_type=DiscountType.PERCENTAGE,
        discount_value=10,
        currency="INR",
    )

    assert breakdown == PriceBreakdown(
        transportation=7_000_000,
        accommodation=6_450_000,
        attractions=840_000,
        local_transport=600_000,
        subtotal=14_890_000,
        discount=1_489_000,
        total=13_401_000,
        currency="INR",
    )


def test_calculate_breakdown_with_nothing_selected():
    breakdown = calculate_breakdown(travelers=3, days=4)

    assert breakdown.subtotal == 0
    assert breakdown.total == 0
    assert breakdown.discount == 0


def test_accommodation_is_not_multiplied_by_travelers():
    one = calculate_breakdown(travelers=1, days=3, accommodation_price=100_000)
    four = calculate_breakdown(travelers=4, days=3, accommodation_price=100_000)
    assert one.accommodation == four.accommodation == 300_000


@pytest.mark.parametrize("travelers,days", [(0, 1), (1, 0)])
def test_calculate_breakdown_rejects_invalid_counts(travelers, days):
    with pytest.raises(ValueError):
        calculate_breakdown(travelers=travelers, days=days)


def test_breakdown_to_dict():
    breakdown = calculate_breakdown(travelers=1, days=1, transport_prices=[500])
    data = breakdown.to_dict()
    assert data["transportation"] == 500
    assert data["total"] == 500
    assert data["currency"] == "INR"
    assert PriceBreakdown(**data) == breakdown
