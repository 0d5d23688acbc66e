"""Service layer package."""

from .admin_service import AdminService
from .discount_service import DiscountService
from .idempotency_service import IdempotencyService
from .reference_service import ReferenceService
from .seed_service import SeedService
from .trip_service import TripService
from .user_service import UserService

__all__ = [
    "AdminService",
    "DiscountService",
    "IdempotencyService",
    "ReferenceService",
    "SeedService",
    "TripService",
    "UserService",
]
