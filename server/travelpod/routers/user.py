"""User router: profile updates, trips and billings of the current user."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.database import get_db
from ..core.dependencies import get_current_user
from ..core.exceptions import InternalServerError, ProblemDetailsException
from ..schemas.user import (
    OrderSummary,
    UpdateUserRequest,
    UserBilling,
    UserBillingList,
    UserProfile,
    UserTrip,
    UserTripList,
)
from ..services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/user", tags=["user"])

DB_DEPENDENCY = Depends(get_db)
CURRENT_USER_DEPENDENCY = Depends(get_current_user)


@router.post("/update", response_model=UserProfile)
async def update_user(
    request: UpdateUserRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Update the current user's profile."""
    try:
        user = await UserService(db).update_user(current_user["user_id"], request)
        return JSONResponse(
            status_code=200,
            content=UserProfile.model_validate(user).model_dump(mode="json")
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error updating user",
            extra={"user_id": current_user["user_id"], "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.post("/trips", response_model=UserTripList)
async def list_trips(
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Travels the current user is booked on."""
    rows = await UserService(db).list_trips(current_user["user_id"])

    trips = [
        UserTrip(
            travel_id=travel.id,
            route=travel.station.name if travel.station else None,
            origin=travel.station.origin if travel.station else None,
            destination=travel.station.destination if travel.station else None,
            start_date=travel.date,
            dates=travel.dates,
            duration=travel.duration,
            travelers=travelers,
        )
        for travel, travelers in rows
    ]

    return JSONResponse(
        status_code=200,
        content=UserTripList(trips=trips).model_dump(mode="json")
    )


@router.post("/billings", response_model=UserBillingList)
async def list_billings(
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Billings of the current user with their orders."""
    billings = await UserService(db).list_billings(current_user["user_id"])

    response_data = UserBillingList(
        billings=[
            UserBilling(
                id=billing.id,
                amount_paid=billing.amount_paid,
                is_paid=billing.is_paid,
                created_at=billing.created_at,
                order=OrderSummary.model_validate(billing.order) if billing.order else None,
            )
            for billing in billings
        ],
        currency=settings.currency,
    )

    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))
