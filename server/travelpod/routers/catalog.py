"""Catalog router for reference data lookups."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..schemas.catalog import (
    Agency,
    AgencyList,
    Flight,
    FlightList,
    FlightLookupRequest,
    GetTravelRequest,
    Resort,
    ResortList,
    ResortLookupRequest,
    Station,
    StationList,
    Travel,
    TravelList,
    TravelSearchRequest,
    Vehicle,
    VehicleList,
)
from ..services.reference_service import ReferenceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/catalog", tags=["catalog"])

DB_DEPENDENCY = Depends(get_db)


@router.post("/flights", response_model=FlightList)
async def find_flights(
    request: FlightLookupRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Flights between two places."""
    flights = await ReferenceService(db).find_flights(request)
    response_data = FlightList(flights=[Flight.model_validate(flight) for flight in flights])
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.post("/resorts", response_model=ResortList)
async def find_resorts(
    request: ResortLookupRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Resorts near a location."""
    resorts = await ReferenceService(db).find_resorts(request)
    response_data = ResortList(resorts=[Resort.model_validate(resort) for resort in resorts])
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.post("/travel", response_model=Travel)
async def get_travel(
    request: GetTravelRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """One travel with its agency, station and vehicle."""
    travel = await ReferenceService(db).get_travel_by_id_or_raise(request.travel_id)
    return JSONResponse(
        status_code=200,
        content=Travel.model_validate(travel).model_dump(mode="json")
    )


@router.post("/travels", response_model=TravelList)
async def search_travels(
    request: TravelSearchRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Travels filtered by agency, station, vehicle, date or duration."""
    travels = await ReferenceService(db).search_travels(request)

    logger.info(
        "Travel search completed",
        extra={"filters": request.model_dump(mode="json", exclude_none=True), "result_count": len(travels)}
    )

    response_data = TravelList(travels=[Travel.model_validate(travel) for travel in travels])
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.post("/agencies", response_model=AgencyList)
async def list_agencies(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    agencies = await ReferenceService(db).list_agencies()
    response_data = AgencyList(agencies=[Agency.model_validate(agency) for agency in agencies])
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.post("/stations", response_model=StationList)
async def list_stations(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    stations = await ReferenceService(db).list_stations()
    response_data = StationList(stations=[Station.model_validate(station) for station in stations])
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.post("/vehicles", response_model=VehicleList)
async def list_vehicles(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    vehicles = await ReferenceService(db).list_vehicles()
    response_data = VehicleList(vehicles=[Vehicle.model_validate(vehicle) for vehicle in vehicles])
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))
