"""Authentication router: registration, login and the current user."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_user
from ..core.exceptions import InternalServerError, ProblemDetailsException
from ..schemas.user import LoginRequest, RegisterRequest, TokenResponse, UserProfile
from ..services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/auth", tags=["auth"])

DB_DEPENDENCY = Depends(get_db)
CURRENT_USER_DEPENDENCY = Depends(get_current_user)


@router.post("/register", response_model=UserProfile, status_code=201)
async def register(
    request: RegisterRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Create a customer account."""
    try:
        user = await UserService(db).register(request)
        return JSONResponse(
            status_code=201,
            content=UserProfile.model_validate(user).model_dump(mode="json")
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error("Unexpected error in registration", extra={"error": str(e)}, exc_info=True)
        raise InternalServerError() from e


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Exchange email and password for a bearer token."""
    user, token, expires_at = await UserService(db).authenticate(request)

    response_data = TokenResponse(
        access_token=token,
        expires_at=expires_at,
        user=UserProfile.model_validate(user),
    )

    logger.info("User logged in", extra={"user_id": user.id})

    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.post("/me", response_model=UserProfile)
async def me(
    db: AsyncSession = DB_DEPENDENCY,
    current_user: dict = CURRENT_USER_DEPENDENCY
) -> JSONResponse:
    """Profile of the authenticated user."""
    user = await UserService(db).get_user_by_id_or_raise(current_user["user_id"])
    return JSONResponse(
        status_code=200,
        content=UserProfile.model_validate(user).model_dump(mode="json")
    )
