"""Trip router for the booking wizard."""

import logging
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_user, get_idempotency_key
from ..core.exceptions import InternalServerError, ProblemDetailsException
from ..models.booking import Billing, Order
from ..models.trip import TripDraft as TripDraftModel
from ..schemas.trip import (
    OPTION_SCHEMAS,
    ApplyDiscountRequest,
    ItineraryItem,
    PriceBreakdown,
    SelectAccommodationRequest,
    SelectAttractionsRequest,
    SelectLocalTransportRequest,
    SelectTransportationRequest,
    StartTripRequest,
    TripConfirmation,
    TripDraft,
    TripOptions,
    TripOptionsRequest,
    TripRequest,
)
from ..services.idempotency_service import IdempotencyService
from ..services.pricing import trip_days
from ..services.trip_service import TripService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/trip", tags=["trip"])

# Define dependencies to avoid B008 linting errors
DB_DEPENDENCY = Depends(get_db)
CURRENT_USER_DEPENDENCY = Depends(get_current_user)
IDEMPOTENCY_KEY_DEPENDENCY = Depends(get_idempotency_key)


async def _convert_trip_to_schema(trip_service: TripService, trip: TripDraftModel) -> TripDraft:
    """Convert trip draft model to schema."""
    breakdown, discount_code = await trip_service.quote(trip)
    return TripDraft(
        id=trip.id,
        status=trip.status,
        current_step=trip.current_step,
        travel_id=trip.travel_id,
        origin=trip.origin,
        destination=trip.destination,
        is_international=trip.is_international,
        start_date=trip.start_date,
        end_date=trip.end_date,
        days=trip_days(trip.start_date, trip.end_date),
        travelers=trip.travelers,
        selections=trip.selections,
        itinerary=[ItineraryItem(**item) for item in trip.itinerary or []],
        discount_code=discount_code,
        price=PriceBreakdown(**breakdown.to_dict()),
        expires_at=trip.expires_at,
    )


async def _convert_confirmation_to_schema(
    trip_service: TripService,
    trip: TripDraftModel,
    order: Order,
    billing: Billing,
) -> TripConfirmation:
    """Convert a paid trip to its confirmation schema."""
    breakdown, discount_code = await trip_service.quote(trip)
    return TripConfirmation(
        booking_reference=order.id,
        billing_id=billing.id,
        trip_id=trip.id,
        travel_id=trip.travel_id,
        status=trip.status,
        route=f"{trip.origin} to {trip.destination}",
        origin=trip.origin,
        destination=trip.destination,
        start_date=trip.start_date,
        end_date=trip.end_date,
        travelers=trip.travelers,
        selections={
            step: value for step, value in trip.selections.items() if step != "billing"
        },
        itinerary=[ItineraryItem(**item) for item in trip.itinerary or []],
        discount_code=discount_code,
        price=PriceBreakdown(**breakdown.to_dict()),
        amount_paid=billing.amount_paid,
        paid_at=billing.created_at,
    )


async def _run_step(
    operation_name: str,
    user_id: int,
    trip_id: int | None,
    operation: Callable[[TripService], Awaitable[TripDraftModel]],
    db: AsyncSession,
) -> JSONResponse:
    """Run one wizard operation and render the resulting draft."""
    trip_service = TripService(db)

    try:
        trip = await operation(trip_service)
        response_data = await _convert_trip_to_schema(trip_service, trip)
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            f"Unexpected error in {operation_name}",
            extra={"user_id": user_id, "trip_id": trip_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


async def _handle_idempotent_operation(
    method: str,
    idempotency_key: str,
    request_body: dict[str, Any],
    operation_func: Callable[[], Awaitable[dict[str, Any]]],
    db: AsyncSession
) -> JSONResponse:
    """Replay a stored response for a repeated key, otherwise run and store."""
    idempotency_service = IdempotencyService(db)

    cached_response = await idempotency_service.check_idempotency(
        idempotency_key=idempotency_key,
        method=method,
        request_body=request_body
    )

    if cached_response:
        status_code, response_body, response_headers = cached_response
        return JSONResponse(
            status_code=status_code,
            content=response_body,
            headers=response_headers or {}
        )

    try:
        response_dict = await operation_func()
    except ProblemDetailsException as e:
        # Client errors are replayed too; the session may hold a failed transaction
        await db.rollback()
        await idempotency_service.store_response(
            idempotency_key=idempotency_key,
            method=method,
            request_body=request_body,
            status_code=e.status_code,
            response_body=e.problem_details
        )
        raise

    await idempotency_service.store_response(
        idempotency_key=idempotency_key,
        method=method,
        request_body=request_body,
        status_code=200,
        response_body=response_dict
    )

    return JSONResponse(status_code=200, content=response_dict)


@router.post("/start", response_model=TripDraft)
async def start_trip(
    request: StartTripRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """
    Submit the trip details step.

    Creates the station, travel and passenger records and opens a draft at
    the transportation step.
    """
    user_id = current_user["user_id"]
    return await _run_step(
        "trip start",
        user_id,
        None,
        lambda service: service.start_trip(user_id, request),
        db,
    )


@router.post("/get", response_model=TripDraft)
async def get_trip(
    request: TripRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Current state of a trip draft."""
    user_id = current_user["user_id"]
    return await _run_step(
        "trip retrieval",
        user_id,
        request.trip_id,
        lambda service: service.get_trip_for_user_or_raise(request.trip_id, user_id),
        db,
    )


@router.post("/options", response_model=TripOptions)
async def list_options(
    request: TripOptionsRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Options available at a wizard step; hotels can be filtered by amenities."""
    trip_service = TripService(db)
    trip = await trip_service.get_trip_for_user_or_raise(request.trip_id, current_user["user_id"])

    option_schema = OPTION_SCHEMAS[request.step]
    options = trip_service.list_options(trip, request.step, request.amenities)

    response_data = TripOptions(
        trip_id=trip.id,
        step=request.step,
        options=[option_schema.model_validate(option).model_dump(mode="json") for option in options],
    )
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.post("/transportation", response_model=TripDraft)
async def select_transportation(
    request: SelectTransportationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Choose the outbound and return legs."""
    user_id = current_user["user_id"]
    return await _run_step(
        "transportation selection",
        user_id,
        request.trip_id,
        lambda service: service.select_transportation(user_id, request),
        db,
    )


@router.post("/accommodation", response_model=TripDraft)
async def select_accommodation(
    request: SelectAccommodationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Choose a hotel, or send a null option_id to skip accommodation."""
    user_id = current_user["user_id"]
    return await _run_step(
        "accommodation selection",
        user_id,
        request.trip_id,
        lambda service: service.select_accommodation(user_id, request),
        db,
    )


@router.post("/attractions", response_model=TripDraft)
async def select_attractions(
    request: SelectAttractionsRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Choose attractions; the itinerary is rebuilt from the selection."""
    user_id = current_user["user_id"]
    return await _run_step(
        "attraction selection",
        user_id,
        request.trip_id,
        lambda service: service.select_attractions(user_id, request),
        db,
    )


@router.post("/local-transport", response_model=TripDraft)
async def select_local_transport(
    request: SelectLocalTransportRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Choose local transport and move on to billing."""
    user_id = current_user["user_id"]
    return await _run_step(
        "local transport selection",
        user_id,
        request.trip_id,
        lambda service: service.select_local_transport(user_id, request),
        db,
    )


@router.post("/discount/apply", response_model=TripDraft)
async def apply_discount(
    request: ApplyDiscountRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Apply a discount code at billing."""
    user_id = current_user["user_id"]
    return await _run_step(
        "discount application",
        user_id,
        request.trip_id,
        lambda service: service.apply_discount(user_id, request.trip_id, request.code),
        db,
    )


@router.post("/discount/remove", response_model=TripDraft)
async def remove_discount(
    request: TripRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Remove the applied discount code."""
    user_id = current_user["user_id"]
    return await _run_step(
        "discount removal",
        user_id,
        request.trip_id,
        lambda service: service.remove_discount(user_id, request.trip_id),
        db,
    )


@router.post("/quote", response_model=PriceBreakdown)
async def quote(
    request: TripRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Price breakdown for the current selections."""
    trip_service = TripService(db)
    trip = await trip_service.get_trip_for_user_or_raise(request.trip_id, current_user["user_id"])
    breakdown, _ = await trip_service.quote(trip)
    return JSONResponse(status_code=200, content=breakdown.to_dict())


@router.post("/pay", response_model=TripConfirmation)
async def pay(
    request: TripRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY,
    idempotency_key: str = IDEMPOTENCY_KEY_DEPENDENCY
) -> JSONResponse:
    """
    Pay for a trip at the billing step.

    This operation is idempotent based on the Idempotency-Key header.
    """
    user_id = current_user["user_id"]
    trip_service = TripService(db)

    async def operation():
        trip, order, billing = await trip_service.pay(user_id, request.trip_id)
        response_data = await _convert_confirmation_to_schema(trip_service, trip, order, billing)

        logger.info(
            "Trip payment completed",
            extra={
                "trip_id": trip.id,
                "order_id": order.id,
                "amount_paid": billing.amount_paid,
                "idempotency_key": idempotency_key
            }
        )

        return response_data.model_dump(mode="json")

    try:
        return await _handle_idempotent_operation(
            # Keys are scoped per user so two users cannot collide
            method=f"trip/pay:{user_id}",
            idempotency_key=idempotency_key,
            request_body=request.model_dump(),
            operation_func=operation,
            db=db
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in trip payment",
            extra={
                "trip_id": request.trip_id,
                "user_id": user_id,
                "idempotency_key": idempotency_key,
                "error": str(e)
            },
            exc_info=True
        )
        raise InternalServerError() from e


@router.post("/confirmation", response_model=TripConfirmation)
async def confirmation(
    request: TripRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Summary of a paid trip."""
    trip_service = TripService(db)
    trip, order, billing = await trip_service.get_confirmation(current_user["user_id"], request.trip_id)
    response_data = await _convert_confirmation_to_schema(trip_service, trip, order, billing)
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))
