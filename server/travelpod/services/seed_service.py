"""Seed service for loading sample reference data."""

import logging
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.security import hash_password
from ..models.booking import Passenger
from ..models.travel import Agency, Station, Travel, Vehicle
from ..models.user import User
from .pricing import to_minor_units

logger = logging.getLogger(__name__)

SAMPLE_AGENCIES = (
    "Sunshine Travels",
    "Global Adventures",
    "Exotic Journeys",
    "Luxury Escapes",
    "Wanderlust Agency",
)

SAMPLE_LOCATIONS = (
    "Paris",
    "London",
    "New York",
    "Tokyo",
    "Sydney",
    "Rome",
    "Barcelona",
    "Dubai",
    "Singapore",
    "Bangkok",
)

SAMPLE_USER_COUNT = 10
SAMPLE_TRAVEL_COUNT = 5
SAMPLE_TRAVEL_DAYS = 7


class SeedService:
    """Service for bulk-loading sample data, skipping rows that already exist."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _existing(self, column, values) -> set:
        result = await self.db.execute(select(column).where(column.in_(list(values))))
        return set(result.scalars().all())

    async def seed(self) -> dict[str, int]:
        """
        Insert the sample users, agencies and stations.

        Returns:
            Number of rows created per table
        """
        users = [
            {
                "username": f"user{i}",
                "password": f"password{i}",
                "email": f"user{i}@example.com",
                "first_name": f"First{i}",
                "last_name": f"Last{i}",
            }
            for i in range(1, SAMPLE_USER_COUNT + 1)
        ]
        existing_emails = await self._existing(User.email, [user["email"] for user in users])
        new_users = [
            User(
                username=user["username"],
                email=user["email"],
                password_hash=hash_password(user["password"]),
                first_name=user["first_name"],
                last_name=user["last_name"],
                verified=False,
            )
            for user in users
            if user["email"] not in existing_emails
        ]

        existing_agencies = await self._existing(Agency.name, SAMPLE_AGENCIES)
        new_agencies = [
            Agency(name=name, address=f"{100 + i} Main Street, City {i}")
            for i, name in enumerate(SAMPLE_AGENCIES, start=1)
            if name not in existing_agencies
        ]

        routes = []
        for i in range(len(SAMPLE_LOCATIONS)):
            origin = SAMPLE_LOCATIONS[i]
            destination = SAMPLE_LOCATIONS[(i + 5) % len(SAMPLE_LOCATIONS)]
            routes.append((f"{origin} to {destination}", origin, destination))
        existing_stations = await self._existing(Station.name, [name for name, _, _ in routes])
        new_stations = [
            Station(name=name, origin=origin, destination=destination)
            for name, origin, destination in routes
            if name not in existing_stations
        ]

        try:
            self.db.add_all(new_users + new_agencies + new_stations)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        created = {
            "users": len(new_users),
            "agencies": len(new_agencies),
            "stations": len(new_stations),
        }
        logger.info("Sample data seeded", extra=created)
        return created

    async def _first_or_create(self, model, order_column, **values):
        result = await self.db.execute(select(model).order_by(order_column).limit(1))
        row = result.scalar_one_or_none()
        if row is None:
            row = model(**values)
            self.db.add(row)
            await self.db.flush()
        return row

    async def add_travel_records(self, start: date | None = None) -> dict[str, int]:
        """
        Create weekly sample travels, each with two passenger records.

        One agency, station, vehicle and user are created first when the
        tables are empty.
        """
        start = start or date.today()

        try:
            agency = await self._first_or_create(
                Agency, Agency.id, name="Default Agency", address="123 Main St"
            )
            station = await self._first_or_create(
                Station, Station.id, name="Default Station", origin="Paris", destination="London"
            )
            vehicle = await self._first_or_create(
                Vehicle, Vehicle.id, name="Default Vehicle", vehicle_type="car"
            )
            user = await self._first_or_create(
                User,
                User.id,
                username="defaultuser",
                email="default@example.com",
                password_hash=hash_password("password"),
                first_name="Default",
                last_name="User",
                verified=False,
            )

            travels = []
            for i in range(SAMPLE_TRAVEL_COUNT):
                travel_date = start + timedelta(weeks=i)
                end_date = travel_date + timedelta(days=SAMPLE_TRAVEL_DAYS)
                travels.append(Travel(
                    duration=SAMPLE_TRAVEL_DAYS,
                    price=to_minor_units(50000 + i * 10000),
                    date=travel_date,
                    dates=f"{travel_date.isoformat()} to {end_date.isoformat()}",
                    agency_id=agency.id,
                    station_id=station.id,
                    vehicle_id=vehicle.id,
                ))
            self.db.add_all(travels)
            await self.db.flush()

            passengers = [
                Passenger(user_id=user.id, travel_id=travel.id, passengers_no=i + 1)
                for i, travel in enumerate(travels)
                for _ in range(2)
            ]
            self.db.add_all(passengers)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        created = {"travels": len(travels), "passengers": len(passengers)}
        logger.info("Sample travel records added", extra=created)
        return created
