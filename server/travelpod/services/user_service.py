"""User service for accounts, authentication and a user's bookings."""

import logging
from datetime import datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.config import settings
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError
from ..core.security import create_access_token, hash_password, verify_password
from ..models.booking import Billing, Passenger
from ..models.travel import Travel
from ..models.user import User
from ..schemas.user import LoginRequest, RegisterRequest, UpdateUserRequest

logger = logging.getLogger(__name__)


class UserService:
    """Service for user-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_id(self, user_id: int) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_id_or_raise(self, user_id: int) -> User:
        """
        Get user by ID or raise NotFoundError.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.get_user_by_id(user_id)
        if not user:
            raise NotFoundError(resource_type="user", resource_id=str(user_id))
        return user

    async def get_user_by_email(self, email: str) -> User | None:
        """Look a user up by email, ignoring case."""
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def register(self, request: RegisterRequest) -> User:
        """
        Create an account.

        Raises:
            ConflictError: If the email is already registered
        """
        email = request.email.strip().lower()
        if await self.get_user_by_email(email):
            raise ConflictError(
                detail="An account with this email already exists",
                conflicting_resource={"email": email},
            )

        user = User(
            username=request.username.strip(),
            email=email,
            password_hash=hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            verified=False,
        )
        self.db.add(user)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(
                detail="An account with this email already exists",
                conflicting_resource={"email": email},
            ) from e

        logger.info("User registered", extra={"user_id": user.id})
        return user

    async def authenticate(self, request: LoginRequest) -> tuple[User, str, datetime]:
        """
        Check credentials and issue a bearer token.

        Returns:
            Tuple of (user, token, expires_at)

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        user = await self.get_user_by_email(request.email)
        if user is None or not verify_password(request.password, user.password_hash):
            logger.warning("Login failed", extra={"email": request.email})
            raise AuthenticationError(detail="Invalid email or password")

        ttl = timedelta(minutes=settings.access_token_ttl_minutes)
        token = create_access_token(subject=user.id, email=user.email, expires_delta=ttl)
        return user, token, datetime.utcnow() + ttl

    async def update_user(self, user_id: int, request: UpdateUserRequest) -> User:
        """Apply the provided profile fields to a user."""
        user = await self.get_user_by_id_or_raise(user_id)

        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        password = changes.pop("password", None)
        for field, value in changes.items():
            setattr(user, field, value)
        if password:
            user.password_hash = hash_password(password)

        await self.db.commit()

        logger.info("User updated", extra={"user_id": user_id, "fields": sorted(request.model_fields_set)})
        return user

    async def list_trips(self, user_id: int) -> list[tuple[Travel, int]]:
        """
        Travels the user holds passenger records on, newest first.

        Returns:
            List of (travel, travelers) pairs
        """
        stmt = (
            select(Travel, func.max(Passenger.passengers_no))
            .join(Passenger, Passenger.travel_id == Travel.id)
            .where(Passenger.user_id == user_id)
            .group_by(Travel.id)
            .options(selectinload(Travel.station))
            .order_by(Travel.date.desc(), Travel.id.desc())
        )
        result = await self.db.execute(stmt)
        return [(travel, travelers) for travel, travelers in result.all()]

    async def list_billings(self, user_id: int) -> list[Billing]:
        """The user's billings with their orders, newest first."""
        stmt = (
            select(Billing)
            .where(Billing.user_id == user_id)
            .options(selectinload(Billing.order))
            .order_by(Billing.created_at.desc(), Billing.id.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
