"""Passenger Pydantic schemas."""

from typing import Optional

from pydantic import BaseModel, Field


class PassengerListRequest(BaseModel):
    """Request schema for listing the passengers of a travel."""

    travel_id: Optional[int] = Field(None, ge=1, description="Travel to list passengers for")


class PassengerUser(BaseModel):
    """User shown on a passenger record."""

    id: int = Field(..., description="User ID")
    username: str = Field(..., description="Display name")
    email: str = Field(..., description="Email")

    class Config:
        from_attributes = True


class Passenger(BaseModel):
    """Passenger response schema."""

    id: int = Field(..., description="Passenger record ID")
    user_id: int = Field(..., description="User ID")
    travel_id: int = Field(..., description="Travel ID")
    passengers_no: int = Field(..., description="Travelers on the booking")
    flight_id: Optional[int] = Field(None, description="Chosen flight")
    resort_id: Optional[int] = Field(None, description="Chosen resort")
    vehicle_id: Optional[int] = Field(None, description="Chosen local vehicle")
    user: Optional[PassengerUser] = Field(None, description="Passenger's user")

    class Config:
        from_attributes = True


class PassengerList(BaseModel):
    passengers: list[Passenger] = Field(default_factory=list)
