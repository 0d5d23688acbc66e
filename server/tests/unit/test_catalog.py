"""Unit tests for wizard option generation and itinerary building."""

from datetime import date

from travelpod.services import catalog

START = date(2026, 11, 1)
END = date(2026, 11, 5)


def test_international_trips_offer_only_flights():
    options = catalog.generate_transportation_options("Mumbai", "Paris", True, START, END)

    assert {option["mode"] for option in options} == {"flight"}
    outbound = [option for option in options if option["direction"] == catalog.OUTBOUND]
    returns = [option for option in options if option["direction"] == catalog.RETURN]
    assert len(outbound) == len(returns) == 3


def test_domestic_trips_add_trains():
    options = catalog.generate_transportation_options("Mumbai", "Goa", False, START, END)

    assert {option["mode"] for option in options} == {"flight", "train"}
    assert "train-outbound-1" in {option["id"] for option in options}
    assert "train-return-2" in {option["id"] for option in options}


def test_legs_run_on_trip_dates_in_each_direction():
    options = catalog.generate_transportation_options("Mumbai", "Paris", True, START, END)

    for option in options:
        if option["direction"] == catalog.OUTBOUND:
            assert (option["origin"], option["destination"]) == ("Mumbai", "Paris")
            assert option["date"] == START.isoformat()
        else:
            assert (option["origin"], option["destination"]) == ("Paris", "Mumbai")
            assert option["date"] == END.isoformat()


def test_option_ids_are_stable():
    first = catalog.generate_trip_options("Mumbai", "Paris", True, START, END)
    second = catalog.generate_trip_options("Mumbai", "Paris", True, START, END)
    assert first == second
    assert set(first) == {"transportation", "accommodation", "attractions", "local_transport"}


def test_accommodation_options():
    options = catalog.generate_accommodation_options("Paris")

    assert [option["id"] for option in options] == [f"hotel-{n}" for n in range(1, 6)]
    assert all("Paris" in option["location"] for option in options)
    assert all(1 <= option["rating"] <= 5 for option in options)


def test_filter_by_amenities():
    options = catalog.generate_accommodation_options("Paris")

    with_pool = catalog.filter_by_amenities(options, ["pool"])
    assert with_pool
    assert all("pool" in option["amenities"] for option in with_pool)

    assert catalog.filter_by_amenities(options, ["WiFi", "Restaurant"]) == [
        option for option in options
        if {"wifi", "restaurant"}.issubset(option["amenities"])
    ]
    assert catalog.filter_by_amenities(options, []) == options
    assert catalog.filter_by_amenities(options, None) == options


def test_paris_gets_landmarks():
    names = [option["name"] for option in catalog.generate_attraction_options("Paris")]
    assert "Eiffel Tower" in names


def test_other_destinations_get_named_attractions():
    options = catalog.generate_attraction_options("Rome")
    assert options[0]["name"] == "Rome Museum of Art"
    assert [option["id"] for option in options] == [f"attraction-{n}" for n in range(1, 6)]


def test_local_transport_options():
    options = catalog.generate_local_transport_options()
    assert [option["vehicle_type"] for option in options] == ["cab", "van", "bike", "self-drive", "luxury"]
    assert all(option["price_per_day"] > 0 for option in options)


def test_build_itinerary_spreads_attractions():
    options = catalog.generate_trip_options("Mumbai", "Paris", True, START, END)
    outbound = options["transportation"][0]
    return_leg = options["transportation"][-1]
    attractions = options["attractions"][:5]

    itinerary = catalog.build_itinerary("Mumbai", "Paris", START, END, outbound, return_leg, attractions)

    assert itinerary[0]["type"] == "transport"
    assert itinerary[0]["date"] == START.isoformat()
    assert itinerary[-1]["type"] == "transport"
    assert itinerary[-1]["date"] == END.isoformat()

    # Four days between start and end leave three for five attractions: two per day
    visits = [item for item in itinerary if item["type"] == "attraction"]
    assert [item["date"] for item in visits] == [
        "2026-11-02", "2026-11-02", "2026-11-03", "2026-11-03", "2026-11-04"
    ]
    assert [item["time"] for item in visits] == ["09:00", "11:00", "09:00", "11:00", "09:00"]


def test_build_itinerary_for_same_day_trip():
    attractions = catalog.generate_attraction_options("Paris")[:2]

    itinerary = catalog.build_itinerary("Mumbai", "Paris", START, START, None, None, attractions)

    assert [item["date"] for item in itinerary] == ["2026-11-01", "2026-11-01"]
    assert [item["time"] for item in itinerary] == ["09:00", "11:00"]


def test_build_itinerary_without_selections():
    assert catalog.build_itinerary("Mumbai", "Paris", START, END, None, None, []) == []
