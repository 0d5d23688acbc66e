"""Catalog Pydantic schemas: wizard options and reference lookups."""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field


# Wizard options

class TransportOption(BaseModel):
    """A flight or train leg offered for a trip."""

    id: str = Field(..., description="Option ID, e.g. 'flight-outbound-1'")
    mode: str = Field(..., description="'flight' or 'train'")
    direction: str = Field(..., description="'outbound' or 'return'")
    company: str = Field(..., description="Carrier name")
    origin: str = Field(..., description="Departure place")
    destination: str = Field(..., description="Arrival place")
    date: dt.date = Field(..., description="Travel date")
    departure_time: str = Field(..., description="Departure time (HH:MM)")
    arrival_time: str = Field(..., description="Arrival time (HH:MM)")
    price: int = Field(..., ge=0, description="Per-person price in minor units")


class AccommodationOption(BaseModel):
    """A hotel offered at the destination."""

    id: str = Field(..., description="Option ID, e.g. 'hotel-1'")
    name: str = Field(..., description="Hotel name")
    location: str = Field(..., description="Neighbourhood")
    price_per_night: int = Field(..., ge=0, description="Nightly price in minor units")
    rating: int = Field(..., ge=1, le=5, description="Star rating")
    amenities: list[str] = Field(default_factory=list, description="Available amenities")


class AttractionOption(BaseModel):
    """An attraction offered at the destination."""

    id: str = Field(..., description="Option ID, e.g. 'attraction-1'")
    name: str = Field(..., description="Attraction name")
    location: str = Field(..., description="Where it is")
    price: int = Field(..., ge=0, description="Per-person price in minor units")
    description: Optional[str] = Field(None, description="Short description")


class LocalTransportOption(BaseModel):
    """A local transport service priced per day."""

    id: str = Field(..., description="Option ID, e.g. 'transport-1'")
    vehicle_type: str = Field(..., description="cab, van, bike, self-drive or luxury")
    name: str = Field(..., description="Service name")
    price_per_day: int = Field(..., ge=0, description="Daily price in minor units")
    description: Optional[str] = Field(None, description="Short description")


# Reference lookups

class FlightLookupRequest(BaseModel):
    """Request schema for finding flights on a route."""

    origin: str = Field(..., min_length=1, max_length=255, description="Departure place")
    destination: str = Field(..., min_length=1, max_length=255, description="Arrival place")


class ResortLookupRequest(BaseModel):
    """Request schema for finding resorts by location."""

    location: str = Field(..., min_length=1, max_length=255, description="Substring of the resort address")


class GetTravelRequest(BaseModel):
    """Request schema for fetching one travel."""

    travel_id: int = Field(..., ge=1, description="Travel to retrieve")


class TravelSearchRequest(BaseModel):
    """Request schema for searching travels by exact field values."""

    agency_id: Optional[int] = Field(None, ge=1, description="Filter by agency")
    station_id: Optional[int] = Field(None, ge=1, description="Filter by station")
    vehicle_id: Optional[int] = Field(None, ge=1, description="Filter by vehicle")
    date: Optional[dt.date] = Field(None, description="Filter by start date")
    duration: Optional[int] = Field(None, ge=1, description="Filter by length in days")
    limit: int = Field(50, ge=1, le=200, description="Maximum results")


class Flight(BaseModel):
    """Flight response schema."""

    id: int = Field(..., description="Flight ID")
    name: str = Field(..., description="Carrier name")
    price: int = Field(..., description="Per-person price in minor units")
    origin: str = Field(..., description="Departure place")
    destination: str = Field(..., description="Arrival place")
    date: dt.date = Field(..., description="Travel date")
    departure_time: dt.time = Field(..., description="Departure time")
    arrival_time: dt.time = Field(..., description="Arrival time")

    class Config:
        from_attributes = True


class Resort(BaseModel):
    """Resort response schema."""

    id: int = Field(..., description="Resort ID")
    name: str = Field(..., description="Resort name")
    price: int = Field(..., description="Nightly price in minor units")
    address: Optional[str] = Field(None, description="Location")

    class Config:
        from_attributes = True


class Agency(BaseModel):
    """Agency response schema."""

    id: int = Field(..., description="Agency ID")
    name: str = Field(..., description="Agency name")
    address: Optional[str] = Field(None, description="Postal address")

    class Config:
        from_attributes = True


class Station(BaseModel):
    """Station response schema."""

    id: int = Field(..., description="Station ID")
    name: str = Field(..., description="Route name")
    origin: Optional[str] = Field(None, description="Departure place")
    destination: Optional[str] = Field(None, description="Arrival place")
    travel_id: Optional[int] = Field(None, description="Travel created for this route")

    class Config:
        from_attributes = True


class Vehicle(BaseModel):
    """Vehicle response schema."""

    id: int = Field(..., description="Vehicle ID")
    name: str = Field(..., description="Vehicle name")
    vehicle_type: Optional[str] = Field(None, description="Vehicle type")

    class Config:
        from_attributes = True


class Travel(BaseModel):
    """Travel response schema with its agency, station and vehicle."""

    id: int = Field(..., description="Travel ID")
    duration: int = Field(..., description="Length in days")
    price: int = Field(..., description="Base price in minor units")
    date: dt.date = Field(..., description="Start date")
    dates: Optional[str] = Field(None, description="Date range label")
    agency: Optional[Agency] = Field(None, description="Booking agency")
    station: Optional[Station] = Field(None, description="Route")
    vehicle: Optional[Vehicle] = Field(None, description="Vehicle")
    created_at: dt.datetime = Field(..., description="Creation time (ISO 8601)")

    class Config:
        from_attributes = True


class FlightList(BaseModel):
    flights: list[Flight] = Field(default_factory=list)


class ResortList(BaseModel):
    resorts: list[Resort] = Field(default_factory=list)


class TravelList(BaseModel):
    travels: list[Travel] = Field(default_factory=list)


class AgencyList(BaseModel):
    agencies: list[Agency] = Field(default_factory=list)


class StationList(BaseModel):
    stations: list[Station] = Field(default_factory=list)


class VehicleList(BaseModel):
    vehicles: list[Vehicle] = Field(default_factory=list)
