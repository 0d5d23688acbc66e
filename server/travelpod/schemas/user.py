"""User and authentication Pydantic schemas."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request schema for creating an account."""

    username: str = Field(..., min_length=1, max_length=150, description="Display name")
    email: EmailStr = Field(..., description="Login email, unique per account")
    password: str = Field(..., min_length=6, max_length=128, description="Account password")
    first_name: Optional[str] = Field(None, max_length=150, description="Given name")
    last_name: Optional[str] = Field(None, max_length=150, description="Family name")


class LoginRequest(BaseModel):
    """Request schema for exchanging credentials for a bearer token."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=1, max_length=128, description="Account password")


class UpdateUserRequest(BaseModel):
    """Request schema for updating the current user's profile."""

    username: Optional[str] = Field(None, min_length=1, max_length=150, description="New display name")
    first_name: Optional[str] = Field(None, max_length=150, description="New given name")
    last_name: Optional[str] = Field(None, max_length=150, description="New family name")
    password: Optional[str] = Field(None, min_length=6, max_length=128, description="New password")


class UserProfile(BaseModel):
    """User response schema."""

    id: int = Field(..., description="User ID")
    username: str = Field(..., description="Display name")
    email: str = Field(..., description="Login email")
    first_name: Optional[str] = Field(None, description="Given name")
    last_name: Optional[str] = Field(None, description="Family name")
    verified: bool = Field(..., description="Whether the email address is verified")
    created_at: datetime = Field(..., description="Account creation time (ISO 8601)")

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """Bearer token issued on login."""

    access_token: str = Field(..., description="Signed JWT")
    token_type: str = Field("bearer", description="Token type for the Authorization header")
    expires_at: datetime = Field(..., description="Token expiry time (ISO 8601)")
    user: UserProfile = Field(..., description="Authenticated user")


class UserTrip(BaseModel):
    """A travel the user is booked on."""

    travel_id: int = Field(..., description="Travel ID")
    route: Optional[str] = Field(None, description="Route name, e.g. 'Mumbai to Paris'")
    origin: Optional[str] = Field(None, description="Departure place")
    destination: Optional[str] = Field(None, description="Arrival place")
    start_date: date = Field(..., description="Travel start date")
    dates: Optional[str] = Field(None, description="Travel date range label")
    duration: int = Field(..., description="Trip length in days")
    travelers: int = Field(..., description="Number of travelers on the booking")


class UserTripList(BaseModel):
    """The current user's travels."""

    trips: list[UserTrip] = Field(default_factory=list, description="Travels, newest first")


class OrderSummary(BaseModel):
    """Order attached to a billing."""

    id: int = Field(..., description="Order ID")
    total_price: int = Field(..., description="Order total in minor units")
    status: str = Field(..., description="Order status")
    discount_id: Optional[int] = Field(None, description="Applied discount ID")

    class Config:
        from_attributes = True


class UserBilling(BaseModel):
    """Billing record with its order."""

    id: int = Field(..., description="Billing ID")
    amount_paid: int = Field(..., description="Amount paid in minor units")
    is_paid: bool = Field(..., description="Whether the billing is settled")
    created_at: datetime = Field(..., description="Billing time (ISO 8601)")
    order: Optional[OrderSummary] = Field(None, description="Order being billed")


class UserBillingList(BaseModel):
    """The current user's billings."""

    billings: list[UserBilling] = Field(default_factory=list, description="Billings, newest first")
    currency: str = Field(..., description="Currency of all amounts")
