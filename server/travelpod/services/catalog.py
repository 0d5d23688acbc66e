"""Deterministic option generation and itinerary building for the trip wizard.

Options are plain JSON-serializable dictionaries so they can be stored on
the trip draft as generated. Prices are in minor currency units.
"""

import math
from datetime import date, timedelta
from typing import Any, Iterable, Optional

from .pricing import to_minor_units

OUTBOUND = "outbound"
RETURN = "return"

AMENITIES = ("wifi", "pool", "restaurant", "gym")

_AIRLINES = ("AirPod Airlines", "SkyWings", "Global Express")
_TRAIN_COMPANIES = ("Express Rail", "Coastal Line")

# name, location template, nightly price in rupees, rating, amenities
_HOTELS = (
    ("Grand Plaza Hotel", "Downtown {d}", 18900, 4, AMENITIES),
    ("Seaside Resort & Spa", "{d} Beach", 24900, 5, AMENITIES),
    ("City Center Inn", "Central {d}", 12900, 3, ("wifi", "restaurant")),
    ("Mountain View Lodge", "{d} Hills", 15900, 4, ("wifi", "pool")),
    ("Luxury Suites", "{d} Financial District", 29900, 5, AMENITIES),
)

_PARIS_ATTRACTIONS = (
    ("Eiffel Tower", "Champ de Mars, Paris", 2500,
     "Iconic iron tower with panoramic city views."),
    ("Louvre Museum", "Rue de Rivoli, Paris", 1700,
     "World's largest art museum & historic monument."),
    ("Notre-Dame Cathedral", "Île de la Cité, Paris", 0,
     "Medieval Catholic cathedral with Gothic architecture."),
    ("Seine River Cruise", "Various departure points, Paris", 1500,
     "Scenic boat tour along the Seine River."),
    ("Montmartre & Sacré-Cœur", "Montmartre, Paris", 0,
     "Historic district with stunning basilica."),
)

_GENERIC_ATTRACTIONS = (
    ("{d} Museum of Art", "Downtown {d}", 1500,
     "Extensive collection of local and international art."),
    ("{d} Historical Tour", "Old Town, {d}", 2500,
     "Guided walking tour of historical landmarks."),
    ("{d} Botanical Gardens", "{d} Park District", 1000,
     "Beautiful gardens featuring local and exotic plants."),
    ("{d} Adventure Park", "{d} Outskirts", 3500,
     "Outdoor activities including zip-lining and hiking."),
    ("{d} Culinary Experience", "{d} Food District", 4500,
     "Food tour featuring local cuisine and delicacies."),
)

# vehicle type, name, daily price in rupees, description
_LOCAL_TRANSPORT = (
    ("cab", "Premium Taxi Service", 3500,
     "24/7 on-call taxi service with professional drivers and comfortable vehicles."),
    ("van", "Family Van Rental", 5500,
     "Spacious van ideal for families or groups, with driver included."),
    ("bike", "Scooter/Bike Rental", 1200,
     "Freedom to explore at your own pace with our reliable scooters and bikes."),
    ("self-drive", "Self-Drive Car Rental", 2800,
     "Explore with privacy and convenience in our well-maintained rental cars."),
    ("luxury", "Luxury Car with Chauffeur", 7500,
     "Travel in style with our premium vehicles and professional chauffeurs."),
)


def _clock(hour: int, minute: int = 0) -> str:
    return f"{hour:02d}:{minute:02d}"


def _legs(mode: str, direction: str, origin: str, destination: str, travel_date: date) -> list[dict]:
    legs = []
    if mode == "flight":
        for index, company in enumerate(_AIRLINES):
            legs.append({
                "id": f"flight-{direction}-{index + 1}",
                "mode": mode,
                "direction": direction,
                "company": company,
                "origin": origin,
                "destination": destination,
                "date": travel_date.isoformat(),
                "departure_time": _clock(8 + index * 4),
                "arrival_time": _clock(10 + index * 4, 30),
                "price": to_minor_units(15000 + index * 5000),
            })
    else:
        for index, company in enumerate(_TRAIN_COMPANIES):
            legs.append({
                "id": f"train-{direction}-{index + 1}",
                "mode": mode,
                "direction": direction,
                "company": company,
                "origin": origin,
                "destination": destination,
                "date": travel_date.isoformat(),
                "departure_time": _clock(7 + index * 6),
                "arrival_time": _clock(11 + index * 6),
                "price": to_minor_units(8000 + index * 3000),
            })
    return legs


def generate_transportation_options(
    origin: str,
    destination: str,
    is_international: bool,
    start_date: date,
    end_date: date,
) -> list[dict]:
    """Outbound legs on the start date and return legs on the end date; trains only for domestic trips."""
    options = _legs("flight", OUTBOUND, origin, destination, start_date)
    if not is_international:
        options += _legs("train", OUTBOUND, origin, destination, start_date)

    options += _legs("flight", RETURN, destination, origin, end_date)
    if not is_international:
        options += _legs("train", RETURN, destination, origin, end_date)

    return options


def generate_accommodation_options(destination: str) -> list[dict]:
    return [
        {
            "id": f"hotel-{index + 1}",
            "name": name,
            "location": location.format(d=destination),
            "price_per_night": to_minor_units(price),
            "rating": rating,
            "amenities": list(amenities),
        }
        for index, (name, location, price, rating, amenities) in enumerate(_HOTELS)
    ]


def filter_by_amenities(options: Iterable[dict], amenities: Optional[Iterable[str]]) -> list[dict]:
    """Keep the hotels offering every requested amenity."""
    required = {amenity.lower() for amenity in amenities or ()}
    return [option for option in options if required.issubset(option["amenities"])]


def generate_attraction_options(destination: str) -> list[dict]:
    """Paris gets its landmarks; anywhere else gets a generic set named after the place."""
    catalog = _PARIS_ATTRACTIONS if "paris" in destination.lower() else _GENERIC_ATTRACTIONS
    return [
        {
            "id": f"attraction-{index + 1}",
            "name": name.format(d=destination),
            "location": location.format(d=destination),
            "price": to_minor_units(price),
            "description": description,
        }
        for index, (name, location, price, description) in enumerate(catalog)
    ]


def generate_local_transport_options() -> list[dict]:
    return [
        {
            "id": f"transport-{index + 1}",
            "vehicle_type": vehicle_type,
            "name": name,
            "price_per_day": to_minor_units(price),
            "description": description,
        }
        for index, (vehicle_type, name, price, description) in enumerate(_LOCAL_TRANSPORT)
    ]


def generate_trip_options(
    origin: str,
    destination: str,
    is_international: bool,
    start_date: date,
    end_date: date,
) -> dict[str, list[dict]]:
    """All option lists for a trip, keyed by wizard step."""
    return {
        "transportation": generate_transportation_options(
            origin, destination, is_international, start_date, end_date
        ),
        "accommodation": generate_accommodation_options(destination),
        "attractions": generate_attraction_options(destination),
        "local_transport": generate_local_transport_options(),
    }


def build_itinerary(
    origin: str,
    destination: str,
    start_date: date,
    end_date: date,
    outbound: Optional[dict],
    return_leg: Optional[dict],
    attractions: list[dict],
) -> list[dict[str, Any]]:
    """
    Day-by-day plan for a trip.

    The outbound journey sits on the start date and the return journey on the
    end date. Attractions fill the days in between starting the day after
    arrival, ``ceil(n / (span - 1))`` per day at two-hour intervals from 09:00.
    Attractions never go past the end date, so a same-day trip keeps them all
    on that day.
    """
    itinerary: list[dict[str, Any]] = []

    if outbound:
        itinerary.append({
            "type": "transport",
            "name": "Outbound Journey",
            "date": start_date.isoformat(),
            "time": outbound["departure_time"],
            "details": f"{outbound['company']} from {origin} to {destination}",
        })

    if attractions:
        span = (end_date - start_date).days
        per_day = math.ceil(len(attractions) / max(span - 1, 1))
        for index, attraction in enumerate(attractions):
            day = min(start_date + timedelta(days=1 + index // per_day), end_date)
            itinerary.append({
                "type": "attraction",
                "name": attraction["name"],
                "date": day.isoformat(),
                "time": _clock(9 + (index % per_day) * 2),
                "details": attraction.get("description"),
            })

    if return_leg:
        itinerary.append({
            "type": "transport",
            "name": "Return Journey",
            "date": end_date.isoformat(),
            "time": return_leg["departure_time"],
            "details": f"{return_leg['company']} from {destination} to {origin}",
        })

    return itinerary
