"""Property-based tests for pricing and trip option invariants."""

from datetime import date, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from travelpod.models.discount import DiscountType
from travelpod.services import catalog
from travelpod.services.pricing import (
    apply_discount,
    calculate_breakdown,
    discount_amount,
    trip_days,
)

# Strategies for generating test data
amounts = st.integers(min_value=0, max_value=10_000_000)
traveler_counts = st.integers(min_value=1, max_value=10)
day_counts = st.integers(min_value=1, max_value=60)
discount_types = st.sampled_from([DiscountType.PERCENTAGE, DiscountType.FIXED, None])
discount_values = st.one_of(st.none(), st.integers(min_value=-50, max_value=20_000_000))
places = st.text(min_size=1, max_size=30, alphabet=st.characters(whitelist_categories=("L", "Zs")))
start_dates = st.dates(min_value=date(2020, 1, 1), max_value=date(2035, 12, 31))


@given(subtotal=amounts, discount_type=discount_types, value=discount_values)
def test_discount_never_exceeds_subtotal(subtotal, discount_type, value):
    """Test that a discount is between zero and the subtotal."""
    discount = discount_amount(subtotal, discount_type, value)

    assert 0 <= discount <= subtotal
    assert apply_discount(subtotal, discount_type, value) == subtotal - discount


@given(subtotal=amounts, percent=st.integers(min_value=0, max_value=100))
def test_percentage_discount_rounds_to_nearest_unit(subtotal, percent):
    discount = discount_amount(subtotal, DiscountType.PERCENTAGE, percent)

    # Within half a minor unit of the exact value
    assert abs(discount * 100 - subtotal * percent) <= 50


@given(
    travelers=traveler_counts,
    days=day_counts,
    transport_prices=st.lists(amounts, max_size=2),
    accommodation_price=st.one_of(st.none(), amounts),
    attraction_prices=st.lists(amounts, max_size=5),
    local_price=st.one_of(st.none(), amounts),
    discount_type=discount_types,
    discount_value=discount_values,
)
def test_breakdown_total_is_subtotal_minus_discount(
    travelers, days, transport_prices, accommodation_price, attraction_prices,
    local_price, discount_type, discount_value
):
    """Test that the line totals add up and the discount is taken off once."""
    breakdown = calculate_breakdown(
        travelers=travelers,
        days=days,
        transport_prices=transport_prices,
        accommodation_price=accommodation_price,
        attraction_prices=attraction_prices,
        local_transport_price_per_day=local_price,
        discount_type=discount_type,
        discount_value=discount_value,
    )

    assert breakdown.subtotal == (
        breakdown.transportation
        + breakdown.accommodation
        + breakdown.attractions
        + breakdown.local_transport
    )
    assert breakdown.total == breakdown.subtotal - breakdown.discount
    assert 0 <= breakdown.discount <= breakdown.subtotal
    assert breakdown.transportation == sum(transport_prices) * travelers
    assert breakdown.currency == "INR"


@given(travelers=traveler_counts, days=day_counts, price=amounts)
def test_accommodation_does_not_depend_on_travelers(travelers, days, price):
    one = calculate_breakdown(travelers=1, days=days, accommodation_price=price)
    many = calculate_breakdown(travelers=travelers, days=days, accommodation_price=price)

    assert one.accommodation == many.accommodation == price * days


@given(start=start_dates, length=st.integers(min_value=0, max_value=365))
def test_trip_days_is_inclusive(start, length):
    assert trip_days(start, start + timedelta(days=length)) == length + 1


@given(start=start_dates)
def test_trip_days_rejects_reversed_range(start):
    with pytest.raises(ValueError):
        trip_days(start, start - timedelta(days=1))


@given(
    origin=places,
    destination=places,
    is_international=st.booleans(),
    start=start_dates,
    length=st.integers(min_value=0, max_value=30),
)
def test_trip_options_are_deterministic(origin, destination, is_international, start, length):
    """Test that the same trip always gets the same options with unique IDs."""
    end = start + timedelta(days=length)

    first = catalog.generate_trip_options(origin, destination, is_international, start, end)
    second = catalog.generate_trip_options(origin, destination, is_international, start, end)

    assert first == second
    for options in first.values():
        ids = [option["id"] for option in options]
        assert len(ids) == len(set(ids))


@given(required=st.sets(st.sampled_from(catalog.AMENITIES)))
def test_amenity_filter_keeps_only_matching_hotels(required):
    options = catalog.generate_accommodation_options("Goa")

    filtered = catalog.filter_by_amenities(options, required)

    assert all(required.issubset(option["amenities"]) for option in filtered)
    assert len(filtered) == sum(1 for option in options if required.issubset(option["amenities"]))


@given(
    start=start_dates,
    length=st.integers(min_value=0, max_value=30),
    attraction_count=st.integers(min_value=0, max_value=5),
)
def test_itinerary_stays_within_trip(start, length, attraction_count):
    """Test that attractions never fall outside the trip dates."""
    end = start + timedelta(days=length)
    options = catalog.generate_trip_options("Mumbai", "Paris", True, start, end)
    outbound = options["transportation"][0]
    return_leg = options["transportation"][-1]
    attractions = options["attractions"][:attraction_count]

    itinerary = catalog.build_itinerary("Mumbai", "Paris", start, end, outbound, return_leg, attractions)

    assert len(itinerary) == attraction_count + 2
    assert itinerary[0]["date"] == start.isoformat()
    assert itinerary[-1]["date"] == end.isoformat()
    for item in itinerary[1:-1]:
        assert item["type"] == "attraction"
        assert start.isoformat() <= item["date"] <= end.isoformat()
        if length >= 2:
            # Longer trips keep the travel days free
            assert start.isoformat() < item["date"] < end.isoformat()
