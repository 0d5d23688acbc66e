"""Unit tests for admin and seed services."""

from datetime import date, datetime

import pytest
from sqlalchemy import func, select

from travelpod.core.config import settings
from travelpod.core.exceptions import AuthenticationError, AuthorizationError
from travelpod.core.security import ADMIN_ROLE, decode_access_token, verify_password
from travelpod.models.booking import Passenger
from travelpod.models.travel import Agency, Travel
from travelpod.models.user import User
from travelpod.schemas.admin import AdminLoginRequest
from travelpod.schemas.trip import (
    SelectAccommodationRequest,
    SelectAttractionsRequest,
    SelectLocalTransportRequest,
    SelectTransportationRequest,
    StartTripRequest,
)
from travelpod.services.admin_service import AdminService
from travelpod.services.seed_service import SeedService
from travelpod.services.trip_service import TripService


async def _paid_trip(session, user, data):
    service = TripService(session)
    trip = await service.start_trip(user.id, StartTripRequest(**data))
    await service.select_transportation(user.id, SelectTransportationRequest(
        trip_id=trip.id, outbound_id="flight-outbound-1", return_id="flight-return-1"
    ))
    await service.select_accommodation(user.id, SelectAccommodationRequest(trip_id=trip.id))
    await service.select_attractions(user.id, SelectAttractionsRequest(trip_id=trip.id))
    await service.select_local_transport(user.id, SelectLocalTransportRequest(
        trip_id=trip.id, option_id="transport-1"
    ))
    return await service.pay(user.id, trip.id)


@pytest.mark.asyncio
async def test_admin_login(test_session, admin_user, admin_password):
    admin, token, expires_at = await AdminService(test_session).login(
        AdminLoginRequest(user_id=admin_user.user_id, password=admin_password)
    )

    assert admin.id == admin_user.id
    assert ADMIN_ROLE in decode_access_token(token)["roles"]
    assert expires_at > datetime.utcnow()


@pytest.mark.asyncio
async def test_admin_login_wrong_password(test_session, admin_user):
    with pytest.raises(AuthenticationError):
        await AdminService(test_session).login(
            AdminLoginRequest(user_id=admin_user.user_id, password="nope")
        )


@pytest.mark.asyncio
async def test_admin_login_for_non_admin(test_session, test_user, admin_password):
    with pytest.raises(AuthenticationError):
        await AdminService(test_session).login(
            AdminLoginRequest(user_id=test_user.id, password=admin_password)
        )


@pytest.mark.asyncio
async def test_bootstrap_admin_on_empty_database(test_session):
    service = AdminService(test_session)
    assert await service.count_admins() == 0

    admin = await service.ensure_bootstrap_admin()

    assert await service.count_admins() == 1
    assert verify_password(settings.bootstrap_admin_password, admin.password_hash)
    user = await test_session.get(User, admin.user_id)
    assert user.username == "admin"


@pytest.mark.asyncio
async def test_bootstrap_admin_uses_first_user_and_is_repeatable(test_session, test_user):
    service = AdminService(test_session)

    first = await service.ensure_bootstrap_admin()
    second = await service.ensure_bootstrap_admin()

    assert first.user_id == second.user_id == test_user.id
    assert await service.count_admins() == 1


@pytest.mark.asyncio
async def test_bootstrap_admin_disabled_in_production(test_session, monkeypatch):
    monkeypatch.setattr(settings, "environment", "production")

    with pytest.raises(AuthorizationError):
        await AdminService(test_session).ensure_bootstrap_admin()


@pytest.mark.asyncio
async def test_dashboard(test_session, test_user, sample_trip_data):
    _, order, billing = await _paid_trip(test_session, test_user, sample_trip_data)

    dashboard = await AdminService(test_session).dashboard()

    assert dashboard["total_bookings"] == 1
    assert dashboard["total_users"] == 1
    assert dashboard["total_discounts"] == 0
    recent = dashboard["recent_bookings"][0]
    assert recent["billing_id"] == billing.id
    assert recent["order_id"] == order.id
    assert recent["user_email"] == "traveler@example.com"
    assert recent["user_name"] == "Asha Rao"
    assert recent["route"] == "Mumbai to Paris"


@pytest.mark.asyncio
async def test_reports(test_session, test_user, sample_trip_data):
    _, _, billing = await _paid_trip(test_session, test_user, sample_trip_data)
    await TripService(test_session).start_trip(
        test_user.id, StartTripRequest(**{**sample_trip_data, "destination": "Rome"})
    )

    reports = await AdminService(test_session).reports(year=billing.created_at.year)

    assert reports["total_bookings"] == 1
    assert reports["total_revenue"] == billing.amount_paid
    assert reports["currency"] == "INR"
    assert {item["destination"] for item in reports["top_destinations"]} == {"Paris", "Rome"}
    assert len(reports["bookings_by_month"]) == 12
    month = reports["bookings_by_month"][billing.created_at.month - 1]
    assert month["count"] == 1
    assert sum(item["count"] for item in reports["bookings_by_month"]) == 1


@pytest.mark.asyncio
async def test_reports_for_a_year_without_bookings(test_session):
    reports = await AdminService(test_session).reports(year=2001)

    assert reports["year"] == 2001
    assert reports["total_revenue"] == 0
    assert reports["bookings_by_month"][0] == {"month": 1, "label": "Jan", "count": 0}


@pytest.mark.asyncio
async def test_list_travels_includes_passengers(test_session, test_user, sample_trip_data):
    await TripService(test_session).start_trip(test_user.id, StartTripRequest(**sample_trip_data))

    travels = await AdminService(test_session).list_travels()

    assert len(travels) == 1
    assert len(travels[0].passengers) == 2
    assert travels[0].passengers[0].user.email == "traveler@example.com"


@pytest.mark.asyncio
async def test_seed_is_idempotent(test_session):
    service = SeedService(test_session)

    first = await service.seed()
    second = await service.seed()

    assert first == {"users": 10, "agencies": 5, "stations": 10}
    assert second == {"users": 0, "agencies": 0, "stations": 0}


@pytest.mark.asyncio
async def test_add_travel_records(test_session):
    created = await SeedService(test_session).add_travel_records(start=date(2026, 1, 5))

    assert created == {"travels": 5, "passengers": 10}
    result = await test_session.execute(select(Travel).order_by(Travel.date))
    travels = result.scalars().all()
    assert [travel.date for travel in travels][:2] == [date(2026, 1, 5), date(2026, 1, 12)]
    assert travels[0].price == 5_000_000
    assert travels[0].dates == "2026-01-05 to 2026-01-12"

    result = await test_session.execute(select(func.count(Agency.id)))
    assert result.scalar_one() == 1
    result = await test_session.execute(select(func.max(Passenger.passengers_no)))
    assert result.scalar_one() == 5
