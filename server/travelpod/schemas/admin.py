"""Admin Pydantic schemas."""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models.discount import DiscountType
from .catalog import Travel
from .common import SuccessResponse
from .passenger import Passenger
from .user import UserProfile


class AdminLoginRequest(BaseModel):
    """Request schema for admin login."""

    user_id: int = Field(..., ge=1, description="User ID of the superadmin")
    password: str = Field(..., min_length=1, max_length=128, description="Admin password")


class AdminSession(BaseModel):
    """Admin session token."""

    access_token: str = Field(..., description="Signed JWT carrying the admin role")
    token_type: str = Field("bearer", description="Token type for the Authorization header")
    expires_at: dt.datetime = Field(..., description="Session expiry time (ISO 8601)")
    user_id: int = Field(..., description="Superadmin user ID")


class UserList(BaseModel):
    users: list[UserProfile] = Field(default_factory=list, description="Users, newest first")


class Discount(BaseModel):
    """Discount response schema."""

    id: int = Field(..., description="Discount ID")
    code: str = Field(..., description="Upper-case discount code")
    discount_type: DiscountType = Field(..., description="percentage or fixed")
    amount: Optional[int] = Field(None, description="Percentage, or amount in minor units")
    expiry_date: Optional[dt.date] = Field(None, description="Last day the code is valid")
    is_active: bool = Field(..., description="Whether the code can be redeemed")
    created_at: dt.datetime = Field(..., description="Creation time (ISO 8601)")

    class Config:
        from_attributes = True


class DiscountList(BaseModel):
    discounts: list[Discount] = Field(default_factory=list, description="Discounts, newest first")


class CreateDiscountRequest(BaseModel):
    """Request schema for creating a discount code."""

    code: str = Field(..., min_length=1, max_length=50, description="Discount code, stored upper-case")
    discount_type: DiscountType = Field(..., description="percentage or fixed")
    amount: int = Field(..., gt=0, description="Percentage, or amount in minor units")
    expiry_date: Optional[dt.date] = Field(None, description="Last day the code is valid")
    is_active: bool = Field(True, description="Whether the code can be redeemed")

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("must not be blank")
        return v

    @model_validator(mode="after")
    def check_percentage(self) -> "CreateDiscountRequest":
        if self.discount_type == DiscountType.PERCENTAGE and self.amount > 100:
            raise ValueError("percentage discounts cannot exceed 100")
        return self


class DeleteDiscountRequest(BaseModel):
    """Request schema for deleting a discount code."""

    discount_id: int = Field(..., ge=1, description="Discount to delete")


class AdminTravel(Travel):
    """Travel with its passenger records."""

    passengers: list[Passenger] = Field(default_factory=list, description="Passenger records")


class AdminTravelList(BaseModel):
    travels: list[AdminTravel] = Field(default_factory=list, description="Travels, newest first")


class RecentBooking(BaseModel):
    """A billing shown on the dashboard."""

    billing_id: int = Field(..., description="Billing ID")
    amount_paid: int = Field(..., description="Amount paid in minor units")
    is_paid: bool = Field(..., description="Whether the billing is settled")
    created_at: dt.datetime = Field(..., description="Billing time (ISO 8601)")
    user_id: int = Field(..., description="Paying user")
    user_name: Optional[str] = Field(None, description="Paying user's name")
    user_email: Optional[str] = Field(None, description="Paying user's email")
    order_id: int = Field(..., description="Order ID")
    order_status: Optional[str] = Field(None, description="Order status")
    route: Optional[str] = Field(None, description="Route booked")


class Dashboard(BaseModel):
    """Admin dashboard totals and recent activity."""

    total_bookings: int = Field(..., description="Number of billings")
    total_users: int = Field(..., description="Number of users")
    total_discounts: int = Field(..., description="Number of discount codes")
    recent_bookings: list[RecentBooking] = Field(default_factory=list, description="Ten most recent billings")


class ReportsRequest(BaseModel):
    """Request schema for the reports view."""

    year: Optional[int] = Field(None, ge=2000, le=2100, description="Year for the monthly breakdown; defaults to the current year")


class DestinationCount(BaseModel):
    destination: str = Field(..., description="Destination")
    count: int = Field(..., description="Number of travels")


class MonthCount(BaseModel):
    month: int = Field(..., ge=1, le=12, description="Month number")
    label: str = Field(..., description="Short month name")
    count: int = Field(..., description="Number of bookings")


class Reports(BaseModel):
    """Aggregate booking reports."""

    year: int = Field(..., description="Year of the monthly breakdown")
    total_bookings: int = Field(..., description="Number of billings")
    total_revenue: int = Field(..., description="Sum of amounts paid in minor units")
    currency: str = Field(..., description="Currency of revenue")
    top_destinations: list[DestinationCount] = Field(default_factory=list, description="Five most booked destinations")
    bookings_by_month: list[MonthCount] = Field(default_factory=list, description="Bookings per month")


class AdminCheck(SuccessResponse):
    """Whether a superadmin exists."""

    admin_exists: bool = Field(..., description="At least one superadmin is configured")
    admin_count: int = Field(..., description="Number of superadmins")


class SeedResult(SuccessResponse):
    """Outcome of a seeding operation with the number of rows created per table."""

    created: dict[str, int] = Field(default_factory=dict, description="Rows created per table")
