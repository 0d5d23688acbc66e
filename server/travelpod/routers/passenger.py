"""Passenger router."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_user
from ..core.exceptions import ValidationError
from ..core.security import ADMIN_ROLE
from ..schemas.passenger import Passenger, PassengerList, PassengerListRequest
from ..services.reference_service import ReferenceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/passenger", tags=["passenger"])

DB_DEPENDENCY = Depends(get_db)
CURRENT_USER_DEPENDENCY = Depends(get_current_user)


@router.post("/list", response_model=PassengerList)
async def list_passengers(
    request: PassengerListRequest,
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """
    Passenger records of a travel.

    Admins see every record; other users only their own.
    """
    if request.travel_id is None:
        raise ValidationError(
            detail="travel_id is required",
            errors={"travel_id": "Field required"}
        )

    user_id = None if ADMIN_ROLE in current_user["roles"] else current_user["user_id"]
    passengers = await ReferenceService(db).list_passengers(request.travel_id, user_id=user_id)

    response_data = PassengerList(
        passengers=[Passenger.model_validate(passenger) for passenger in passengers]
    )
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))
