"""Admin router for the back-office surface."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_admin
from ..core.exceptions import InternalServerError, ProblemDetailsException
from ..schemas.admin import (
    AdminCheck,
    AdminLoginRequest,
    AdminSession,
    AdminTravel,
    AdminTravelList,
    CreateDiscountRequest,
    Dashboard,
    DeleteDiscountRequest,
    Discount,
    DiscountList,
    Reports,
    ReportsRequest,
    SeedResult,
    UserList,
)
from ..schemas.common import SuccessResponse
from ..schemas.user import UserProfile
from ..services.admin_service import AdminService
from ..services.discount_service import DiscountService
from ..services.seed_service import SeedService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/admin", tags=["admin"])

DB_DEPENDENCY = Depends(get_db)
ADMIN_DEPENDENCY = Depends(require_admin)


@router.post("/login", response_model=AdminSession)
async def login(
    request: AdminLoginRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Exchange superadmin credentials for an admin session token."""
    admin, token, expires_at = await AdminService(db).login(request)

    response_data = AdminSession(
        access_token=token,
        expires_at=expires_at,
        user_id=admin.user_id,
    )
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.get("/check", response_model=AdminCheck)
async def check_admin(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """Whether any superadmin is configured."""
    admin_count = await AdminService(db).count_admins()

    response_data = AdminCheck(
        success=True,
        message="Superadmin configured" if admin_count else "No superadmin configured",
        admin_exists=admin_count > 0,
        admin_count=admin_count,
    )
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.post("/check", response_model=AdminCheck)
async def bootstrap_admin(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """
    Create or reset the bootstrap superadmin.

    Disabled in production.
    """
    admin_service = AdminService(db)

    try:
        admin = await admin_service.ensure_bootstrap_admin()
        admin_count = await admin_service.count_admins()

        response_data = AdminCheck(
            success=True,
            message=f"Superadmin ready for user {admin.user_id}",
            admin_exists=True,
            admin_count=admin_count,
        )
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error("Unexpected error bootstrapping admin", extra={"error": str(e)}, exc_info=True)
        raise InternalServerError() from e


@router.post("/users", response_model=UserList)
async def list_users(
    db: AsyncSession = DB_DEPENDENCY,
    admin: dict = ADMIN_DEPENDENCY
) -> JSONResponse:
    users = await AdminService(db).list_users()
    response_data = UserList(users=[UserProfile.model_validate(user) for user in users])
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.post("/discounts", response_model=DiscountList)
async def list_discounts(
    db: AsyncSession = DB_DEPENDENCY,
    admin: dict = ADMIN_DEPENDENCY
) -> JSONResponse:
    discounts = await DiscountService(db).list_discounts()
    response_data = DiscountList(discounts=[Discount.model_validate(discount) for discount in discounts])
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.post("/discounts/create", response_model=Discount, status_code=201)
async def create_discount(
    request: CreateDiscountRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: dict = ADMIN_DEPENDENCY
) -> JSONResponse:
    """Create a discount code; codes are unique and stored upper-case."""
    try:
        discount = await DiscountService(db).create_discount(request)
        return JSONResponse(
            status_code=201,
            content=Discount.model_validate(discount).model_dump(mode="json")
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error creating discount",
            extra={"code": request.code, "admin_id": admin["user_id"], "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.post("/discounts/delete", response_model=SuccessResponse)
async def delete_discount(
    request: DeleteDiscountRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: dict = ADMIN_DEPENDENCY
) -> JSONResponse:
    try:
        await DiscountService(db).delete_discount(request.discount_id)

        response_data = SuccessResponse(
            success=True,
            message=f"Discount {request.discount_id} deleted",
        )
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error deleting discount",
            extra={"discount_id": request.discount_id, "admin_id": admin["user_id"], "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.post("/travels", response_model=AdminTravelList)
async def list_travels(
    db: AsyncSession = DB_DEPENDENCY,
    admin: dict = ADMIN_DEPENDENCY
) -> JSONResponse:
    """Every travel with its agency, station, vehicle and passengers."""
    travels = await AdminService(db).list_travels()
    response_data = AdminTravelList(travels=[AdminTravel.model_validate(travel) for travel in travels])
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.post("/dashboard", response_model=Dashboard)
async def dashboard(
    db: AsyncSession = DB_DEPENDENCY,
    admin: dict = ADMIN_DEPENDENCY
) -> JSONResponse:
    data = await AdminService(db).dashboard()
    return JSONResponse(status_code=200, content=Dashboard(**data).model_dump(mode="json"))


@router.post("/reports", response_model=Reports)
async def reports(
    request: Optional[ReportsRequest] = None,
    db: AsyncSession = DB_DEPENDENCY,
    admin: dict = ADMIN_DEPENDENCY
) -> JSONResponse:
    """Booking totals, revenue, top destinations and bookings per month."""
    year = request.year if request else None
    data = await AdminService(db).reports(year=year)
    return JSONResponse(status_code=200, content=Reports(**data).model_dump(mode="json"))


async def _run_seed(operation_name: str, operation, admin: dict) -> JSONResponse:
    try:
        created = await operation()

        response_data = SeedResult(
            success=True,
            message=f"{operation_name} completed",
            created=created,
        )
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            f"Unexpected error in {operation_name.lower()}",
            extra={"admin_id": admin["user_id"], "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.post("/seed", response_model=SeedResult)
async def seed(
    db: AsyncSession = DB_DEPENDENCY,
    admin: dict = ADMIN_DEPENDENCY
) -> JSONResponse:
    """Load sample users, agencies and stations; existing rows are skipped."""
    return await _run_seed("Seeding", SeedService(db).seed, admin)


@router.post("/add-travel-records", response_model=SeedResult)
async def add_travel_records(
    db: AsyncSession = DB_DEPENDENCY,
    admin: dict = ADMIN_DEPENDENCY
) -> JSONResponse:
    """Create weekly sample travels with passenger records."""
    return await _run_seed("Adding travel records", SeedService(db).add_travel_records, admin)
