"""Discount service for managing and redeeming discount codes."""

import logging
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, InvalidDiscountError, NotFoundError
from ..models.discount import Discount, DiscountType
from ..schemas.admin import CreateDiscountRequest

logger = logging.getLogger(__name__)

# Applied when a stored code carries no amount: 10 percent, or 500 rupees in paise
DEFAULT_PERCENTAGE = 10
DEFAULT_FIXED_AMOUNT = 50_000


def effective_amount(discount: Discount) -> int:
    """The amount a discount takes off, falling back to the type's default."""
    if discount.amount is not None:
        return discount.amount
    if discount.discount_type == DiscountType.PERCENTAGE:
        return DEFAULT_PERCENTAGE
    return DEFAULT_FIXED_AMOUNT


class DiscountService:
    """Service for discount-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_discount_by_id(self, discount_id: int) -> Discount | None:
        result = await self.db.execute(select(Discount).where(Discount.id == discount_id))
        return result.scalar_one_or_none()

    async def get_discount_by_code(self, code: str) -> Discount | None:
        """Look a code up ignoring case and surrounding whitespace."""
        result = await self.db.execute(
            select(Discount).where(func.upper(Discount.code) == code.strip().upper())
        )
        return result.scalar_one_or_none()

    async def get_redeemable_discount(self, code: str, today: date | None = None) -> Discount:
        """
        Resolve a code the customer typed at checkout.

        Raises:
            InvalidDiscountError: If the code is unknown, inactive or expired
        """
        today = today or date.today()
        discount = await self.get_discount_by_code(code)

        if discount is None:
            reason = "unknown"
        elif not discount.is_active:
            reason = "inactive"
        elif not discount.is_redeemable(today):
            reason = "expired"
        else:
            return discount

        logger.info("Discount code rejected", extra={"code": code, "reason": reason})
        raise InvalidDiscountError(code=code, reason=reason)

    async def list_discounts(self) -> list[Discount]:
        result = await self.db.execute(
            select(Discount).order_by(Discount.created_at.desc(), Discount.id.desc())
        )
        return list(result.scalars().all())

    async def create_discount(self, request: CreateDiscountRequest) -> Discount:
        """
        Create a discount code.

        Raises:
            ConflictError: If the code already exists
        """
        if await self.get_discount_by_code(request.code):
            raise ConflictError(
                detail=f"Discount code '{request.code}' already exists",
                conflicting_resource={"code": request.code},
            )

        discount = Discount(
            code=request.code,
            discount_type=request.discount_type,
            amount=request.amount,
            expiry_date=request.expiry_date,
            is_active=request.is_active,
        )
        self.db.add(discount)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(
                detail=f"Discount code '{request.code}' already exists",
                conflicting_resource={"code": request.code},
            ) from e

        logger.info(
            "Discount created",
            extra={
                "discount_id": discount.id,
                "code": discount.code,
                "discount_type": discount.discount_type,
                "amount": discount.amount,
            }
        )
        return discount

    async def delete_discount(self, discount_id: int) -> None:
        """
        Delete a discount code.

        Raises:
            NotFoundError: If the discount does not exist
        """
        discount = await self.get_discount_by_id(discount_id)
        if discount is None:
            raise NotFoundError(resource_type="discount", resource_id=str(discount_id))

        await self.db.delete(discount)
        await self.db.commit()

        logger.info("Discount deleted", extra={"discount_id": discount_id, "code": discount.code})
