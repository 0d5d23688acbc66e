"""Discount code model definition."""

import datetime as dt
from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, Date, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import expression

from ..core.database import Base


class DiscountType(str, Enum):
    """Discount type enumeration."""
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class Discount(Base):
    """
    Discount code redeemable at checkout.

    ``amount`` is a percentage for percentage discounts and a value in minor
    currency units for fixed discounts.
    """

    __tablename__ = "discounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    discount_type: Mapped[DiscountType] = mapped_column(String(20), nullable=False)
    amount: Mapped[int | None] = mapped_column(Integer, nullable=True)
    expiry_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=expression.true()
    )

    # Timestamps
    created_at: Mapped[dt.datetime] = mapped_column(
        nullable=False,
        default=dt.datetime.utcnow,
        server_default=func.now()
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        nullable=False,
        default=dt.datetime.utcnow,
        onupdate=dt.datetime.utcnow,
        server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("length(code) > 0", name="ck_discount_code_not_empty"),
        CheckConstraint("amount IS NULL OR amount > 0", name="ck_discount_amount_positive"),
        CheckConstraint(
            "discount_type IN ('percentage', 'fixed')",
            name="ck_discount_type_valid"
        ),
    )

    def is_redeemable(self, today: dt.date) -> bool:
        """Active and not past its expiry date."""
        if not self.is_active:
            return False
        return self.expiry_date is None or self.expiry_date >= today

    def __repr__(self) -> str:
        return (
            f"<Discount(id={self.id}, code='{self.code}', type={self.discount_type}, "
            f"amount={self.amount}, active={self.is_active})>"
        )
