"""Models module exporting all database models."""

from .booking import Billing, Flight, Order, OrderStatus, Passenger, Resort
from .discount import Discount, DiscountType
from .idempotency import IdempotencyRecord
from .travel import Agency, Station, Travel, Vehicle
from .trip import STEP_ORDER, TripDraft, TripStatus, TripStep
from .user import Superadmin, User

__all__ = [
    # Accounts
    "User",
    "Superadmin",

    # Reference entities
    "Agency",
    "Station",
    "Vehicle",
    "Travel",

    # Booking entities
    "Flight",
    "Resort",
    "Passenger",
    "Order",
    "OrderStatus",
    "Billing",
    "Discount",
    "DiscountType",

    # Trip wizard
    "TripDraft",
    "TripStep",
    "TripStatus",
    "STEP_ORDER",

    # Idempotency entity
    "IdempotencyRecord",
]
