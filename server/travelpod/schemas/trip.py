"""Trip wizard Pydantic schemas."""

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models.trip import TripStatus, TripStep
from .catalog import AccommodationOption, AttractionOption, LocalTransportOption, TransportOption

# Steps that have option lists to choose from, with the schema of one option
OPTION_SCHEMAS = {
    TripStep.TRANSPORTATION: TransportOption,
    TripStep.ACCOMMODATION: AccommodationOption,
    TripStep.ATTRACTIONS: AttractionOption,
    TripStep.LOCAL_TRANSPORT: LocalTransportOption,
}
OPTION_STEPS = tuple(OPTION_SCHEMAS)


class StartTripRequest(BaseModel):
    """Request schema for the trip details step."""

    origin: str = Field(..., min_length=1, max_length=255, description="Departure place")
    destination: str = Field(..., min_length=1, max_length=255, description="Arrival place")
    start_date: dt.date = Field(..., description="First day of the trip")
    end_date: dt.date = Field(..., description="Last day of the trip")
    travelers: int = Field(..., ge=1, le=10, description="Number of travelers")
    is_international: Optional[bool] = Field(
        None,
        description="Whether the trip crosses a border; defaults to origin != destination"
    )

    @field_validator("origin", "destination")
    @classmethod
    def strip_place(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @model_validator(mode="after")
    def check_date_range(self) -> "StartTripRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class TripRequest(BaseModel):
    """Request schema addressing one trip draft."""

    trip_id: int = Field(..., ge=1, description="Trip draft ID")


class TripOptionsRequest(TripRequest):
    """Request schema for listing the options of a wizard step."""

    step: TripStep = Field(..., description="Wizard step to list options for")
    amenities: list[str] = Field(default_factory=list, description="Required hotel amenities")

    @field_validator("step")
    @classmethod
    def step_has_options(cls, v: TripStep) -> TripStep:
        if v not in OPTION_STEPS:
            raise ValueError(f"step must be one of: {[step.value for step in OPTION_STEPS]}")
        return v


class SelectTransportationRequest(TripRequest):
    """Request schema for choosing the outbound and return legs."""

    outbound_id: str = Field(..., min_length=1, description="Outbound option ID")
    return_id: str = Field(..., min_length=1, description="Return option ID")


class SelectAccommodationRequest(TripRequest):
    """Request schema for choosing a hotel; omit option_id to skip."""

    option_id: Optional[str] = Field(None, description="Hotel option ID, or null to skip")


class SelectAttractionsRequest(TripRequest):
    """Request schema for choosing attractions."""

    option_ids: list[str] = Field(default_factory=list, description="Attraction option IDs")


class SelectLocalTransportRequest(TripRequest):
    """Request schema for choosing local transport."""

    option_id: str = Field(..., min_length=1, description="Local transport option ID")


class ApplyDiscountRequest(TripRequest):
    """Request schema for applying a discount code."""

    code: str = Field(..., min_length=1, max_length=50, description="Discount code")


class PriceBreakdown(BaseModel):
    """Trip cost per category, in minor units."""

    transportation: int = Field(..., ge=0)
    accommodation: int = Field(..., ge=0)
    attractions: int = Field(..., ge=0)
    local_transport: int = Field(..., ge=0)
    subtotal: int = Field(..., ge=0)
    discount: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    currency: str = Field(..., min_length=3, max_length=3)


class ItineraryItem(BaseModel):
    """One entry of the trip plan."""

    type: str = Field(..., description="'transport' or 'attraction'")
    name: str = Field(..., description="What happens")
    date: dt.date = Field(..., description="Day")
    time: str = Field(..., description="Start time (HH:MM)")
    details: Optional[str] = Field(None, description="Extra information")


class TripDraft(BaseModel):
    """Trip draft response schema."""

    id: int = Field(..., description="Trip draft ID")
    status: TripStatus = Field(..., description="Draft status")
    current_step: TripStep = Field(..., description="Furthest step reached")
    travel_id: int = Field(..., description="Travel record for this trip")
    origin: str = Field(..., description="Departure place")
    destination: str = Field(..., description="Arrival place")
    is_international: bool = Field(..., description="Whether the trip crosses a border")
    start_date: dt.date = Field(..., description="First day")
    end_date: dt.date = Field(..., description="Last day")
    days: int = Field(..., description="Inclusive trip length")
    travelers: int = Field(..., description="Number of travelers")
    selections: dict[str, Any] = Field(default_factory=dict, description="Chosen option IDs per step")
    itinerary: list[ItineraryItem] = Field(default_factory=list, description="Trip plan")
    discount_code: Optional[str] = Field(None, description="Applied discount code")
    price: PriceBreakdown = Field(..., description="Current price")
    expires_at: dt.datetime = Field(..., description="When the draft is abandoned if untouched")


class TripOptions(BaseModel):
    """Option list for one wizard step."""

    trip_id: int = Field(..., description="Trip draft ID")
    step: TripStep = Field(..., description="Wizard step")
    options: list[dict[str, Any]] = Field(default_factory=list, description="Available options")


class TripConfirmation(BaseModel):
    """Summary of a paid trip."""

    booking_reference: int = Field(..., description="Order ID")
    billing_id: int = Field(..., description="Billing ID")
    trip_id: int = Field(..., description="Trip draft ID")
    travel_id: int = Field(..., description="Travel ID")
    status: TripStatus = Field(..., description="Draft status")
    route: str = Field(..., description="Route name")
    origin: str = Field(..., description="Departure place")
    destination: str = Field(..., description="Arrival place")
    start_date: dt.date = Field(..., description="First day")
    end_date: dt.date = Field(..., description="Last day")
    travelers: int = Field(..., description="Number of travelers")
    selections: dict[str, Any] = Field(default_factory=dict, description="Chosen option IDs per step")
    itinerary: list[ItineraryItem] = Field(default_factory=list, description="Trip plan")
    discount_code: Optional[str] = Field(None, description="Applied discount code")
    price: PriceBreakdown = Field(..., description="Final price")
    amount_paid: int = Field(..., description="Amount charged in minor units")
    paid_at: dt.datetime = Field(..., description="Payment time (ISO 8601)")
