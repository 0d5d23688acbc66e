"""Reference data lookups: flights, resorts, travels, agencies, stations, vehicles, passengers."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.exceptions import NotFoundError
from ..models.booking import Flight, Passenger, Resort
from ..models.travel import Agency, Station, Travel, Vehicle
from ..schemas.catalog import FlightLookupRequest, ResortLookupRequest, TravelSearchRequest

logger = logging.getLogger(__name__)

_TRAVEL_RELATIONS = (
    selectinload(Travel.agency),
    selectinload(Travel.station),
    selectinload(Travel.vehicle),
)


class ReferenceService:
    """Service for read-only catalog lookups."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_flights(self, request: FlightLookupRequest) -> list[Flight]:
        """Flights on a route, matched case-insensitively, earliest first."""
        stmt = (
            select(Flight)
            .where(
                func.lower(Flight.origin) == request.origin.strip().lower(),
                func.lower(Flight.destination) == request.destination.strip().lower(),
            )
            .order_by(Flight.date, Flight.departure_time, Flight.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def find_resorts(self, request: ResortLookupRequest) -> list[Resort]:
        """Resorts whose address contains the location, ignoring case."""
        stmt = (
            select(Resort)
            .where(Resort.address.ilike(f"%{request.location.strip()}%"))
            .order_by(Resort.price, Resort.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_travel_by_id(self, travel_id: int) -> Travel | None:
        stmt = select(Travel).where(Travel.id == travel_id).options(*_TRAVEL_RELATIONS)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_travel_by_id_or_raise(self, travel_id: int) -> Travel:
        """
        Get travel by ID with its agency, station and vehicle.

        Raises:
            NotFoundError: If travel not found
        """
        travel = await self.get_travel_by_id(travel_id)
        if not travel:
            raise NotFoundError(resource_type="travel", resource_id=str(travel_id))
        return travel

    async def search_travels(self, request: TravelSearchRequest) -> list[Travel]:
        """Travels matching every provided filter, newest first."""
        stmt = select(Travel).options(*_TRAVEL_RELATIONS)

        filters = request.model_dump(exclude={"limit"}, exclude_none=True)
        for field, value in filters.items():
            stmt = stmt.where(getattr(Travel, field) == value)

        stmt = stmt.order_by(Travel.created_at.desc(), Travel.id.desc()).limit(request.limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_agencies(self) -> list[Agency]:
        result = await self.db.execute(select(Agency).order_by(Agency.name, Agency.id))
        return list(result.scalars().all())

    async def list_stations(self) -> list[Station]:
        result = await self.db.execute(select(Station).order_by(Station.name, Station.id))
        return list(result.scalars().all())

    async def list_vehicles(self) -> list[Vehicle]:
        result = await self.db.execute(select(Vehicle).order_by(Vehicle.name, Vehicle.id))
        return list(result.scalars().all())

    async def list_passengers(self, travel_id: int, user_id: int | None = None) -> list[Passenger]:
        """
        Passenger records of a travel.

        Args:
            travel_id: Travel to list
            user_id: When given, only that user's records are returned
        """
        stmt = (
            select(Passenger)
            .where(Passenger.travel_id == travel_id)
            .options(selectinload(Passenger.user))
            .order_by(Passenger.id)
        )
        if user_id is not None:
            stmt = stmt.where(Passenger.user_id == user_id)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())
