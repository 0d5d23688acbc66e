"""Admin service: admin sessions, back-office listings, dashboard and reports."""

import calendar
import logging
from datetime import datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.config import settings
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..core.observability import metrics_collector
from ..core.security import create_admin_token, hash_password, verify_password
from ..models.booking import Billing, Order, Passenger
from ..models.discount import Discount
from ..models.travel import Station, Travel
from ..models.user import Superadmin, User
from ..schemas.admin import AdminLoginRequest

logger = logging.getLogger(__name__)

BOOTSTRAP_ADMIN_USERNAME = "admin"
BOOTSTRAP_ADMIN_EMAIL = "admin@travelpod.example.com"


class AdminService:
    """Service for admin-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def login(self, request: AdminLoginRequest) -> tuple[Superadmin, str, datetime]:
        """
        Check superadmin credentials and issue an admin session token.

        Returns:
            Tuple of (superadmin, token, expires_at)

        Raises:
            AuthenticationError: If no superadmin matches the credentials
        """
        result = await self.db.execute(
            select(Superadmin)
            .where(Superadmin.user_id == request.user_id)
            .options(selectinload(Superadmin.user))
        )
        admin = result.scalar_one_or_none()

        if admin is None or not verify_password(request.password, admin.password_hash):
            metrics_collector.record_admin_login("failure")
            logger.warning("Admin login failed", extra={"user_id": request.user_id})
            raise AuthenticationError(detail="Invalid admin credentials")

        email = admin.user.email if admin.user else None
        token = create_admin_token(admin.user_id, email=email)
        expires_at = datetime.utcnow() + timedelta(hours=settings.admin_session_ttl_hours)

        metrics_collector.record_admin_login("success")
        logger.info("Admin logged in", extra={"user_id": admin.user_id})
        return admin, token, expires_at

    async def count_admins(self) -> int:
        result = await self.db.execute(select(func.count(Superadmin.id)))
        return result.scalar_one()

    async def ensure_bootstrap_admin(self) -> Superadmin:
        """
        Create or reset the bootstrap superadmin.

        The admin is attached to the first user, creating an ``admin`` user
        when the table is empty, and given the configured bootstrap password.

        Raises:
            AuthorizationError: In production
        """
        if settings.is_production:
            raise AuthorizationError(detail="Bootstrapping an admin is disabled in production")

        result = await self.db.execute(select(User).order_by(User.id).limit(1))
        user = result.scalar_one_or_none()
        if user is None:
            user = User(
                username=BOOTSTRAP_ADMIN_USERNAME,
                email=BOOTSTRAP_ADMIN_EMAIL,
                password_hash=hash_password(settings.bootstrap_admin_password),
                verified=True,
            )
            self.db.add(user)
            await self.db.flush()

        result = await self.db.execute(select(Superadmin).where(Superadmin.user_id == user.id))
        admin = result.scalar_one_or_none()
        if admin is None:
            admin = Superadmin(user_id=user.id, password_hash="")
            self.db.add(admin)
        admin.password_hash = hash_password(settings.bootstrap_admin_password)

        await self.db.commit()

        logger.info("Bootstrap admin ensured", extra={"user_id": user.id})
        return admin

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())

    async def list_travels(self) -> list[Travel]:
        """All travels with agency, station, vehicle and passengers, newest first."""
        stmt = (
            select(Travel)
            .options(
                selectinload(Travel.agency),
                selectinload(Travel.station),
                selectinload(Travel.vehicle),
                selectinload(Travel.passengers).selectinload(Passenger.user),
            )
            .order_by(Travel.created_at.desc(), Travel.id.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _count(self, column) -> int:
        result = await self.db.execute(select(func.count(column)))
        return result.scalar_one()

    async def dashboard(self, recent_limit: int = 10) -> dict:
        """Totals and the most recent bookings with user, order and route."""
        total_bookings = await self._count(Billing.id)
        total_users = await self._count(User.id)
        total_discounts = await self._count(Discount.id)

        stmt = (
            select(Billing)
            .options(
                selectinload(Billing.user),
                selectinload(Billing.order)
                .selectinload(Order.passenger)
                .selectinload(Passenger.travel)
                .selectinload(Travel.station),
            )
            .order_by(Billing.created_at.desc(), Billing.id.desc())
            .limit(recent_limit)
        )
        result = await self.db.execute(stmt)

        recent = []
        for billing in result.scalars().all():
            order = billing.order
            travel = order.passenger.travel if order and order.passenger else None
            recent.append({
                "billing_id": billing.id,
                "amount_paid": billing.amount_paid,
                "is_paid": billing.is_paid,
                "created_at": billing.created_at,
                "user_id": billing.user_id,
                "user_name": billing.user.full_name or billing.user.username if billing.user else None,
                "user_email": billing.user.email if billing.user else None,
                "order_id": billing.order_id,
                "order_status": order.status if order else None,
                "route": travel.station.name if travel and travel.station else None,
            })

        return {
            "total_bookings": total_bookings,
            "total_users": total_users,
            "total_discounts": total_discounts,
            "recent_bookings": recent,
        }

    async def reports(self, year: int | None = None, top: int = 5) -> dict:
        """Booking count, revenue, top destinations and bookings per month of ``year``."""
        year = year or datetime.utcnow().year

        total_bookings = await self._count(Billing.id)
        result = await self.db.execute(select(func.coalesce(func.sum(Billing.amount_paid), 0)))
        total_revenue = int(result.scalar_one())

        destination_count = func.count(Travel.id)
        result = await self.db.execute(
            select(Station.destination, destination_count)
            .join(Travel, Travel.station_id == Station.id)
            .where(Station.destination.is_not(None))
            .group_by(Station.destination)
            .order_by(destination_count.desc(), Station.destination)
            .limit(top)
        )
        top_destinations = [
            {"destination": destination, "count": count}
            for destination, count in result.all()
        ]

        # Grouped in Python so the query stays portable across databases
        start = datetime(year, 1, 1)
        end = datetime(year + 1, 1, 1)
        result = await self.db.execute(
            select(Billing.created_at).where(Billing.created_at >= start, Billing.created_at < end)
        )
        per_month = [0] * 12
        for (created_at,) in result.all():
            per_month[created_at.month - 1] += 1

        return {
            "year": year,
            "total_bookings": total_bookings,
            "total_revenue": total_revenue,
            "currency": settings.currency,
            "top_destinations": top_destinations,
            "bookings_by_month": [
                {"month": month, "label": calendar.month_abbr[month], "count": per_month[month - 1]}
                for month in range(1, 13)
            ],
        }
