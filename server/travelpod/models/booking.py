"""Flight, resort, passenger, order and billing model definitions."""

import datetime as dt
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Date, ForeignKey, Integer, String, Time, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import expression

from ..core.database import Base

if TYPE_CHECKING:
    from .discount import Discount
    from .travel import Travel, Vehicle
    from .user import User


class OrderStatus(str, Enum):
    """Order status enumeration."""
    COMPLETED = "completed"


class Flight(Base):
    """A transportation leg chosen for a trip."""

    __tablename__ = "flights"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    origin: Mapped[str] = mapped_column("from", String(255), nullable=False, index=True)
    destination: Mapped[str] = mapped_column("to", String(255), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    departure_time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    arrival_time: Mapped[dt.time] = mapped_column(Time, nullable=False)

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
        CheckConstraint("price >= 0", name="ck_flight_price_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"<Flight(id={self.id}, name='{self.name}', from='{self.origin}', "
            f"to='{self.destination}', date={self.date})>"
        )


class Resort(Base):
    """An accommodation chosen for a trip."""

    __tablename__ = "resorts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True, index=True)

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
        CheckConstraint("price >= 0", name="ck_resort_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Resort(id={self.id}, name='{self.name}', price={self.price})>"


class Passenger(Base):
    """Passenger record linking a user, a travel and the chosen services."""

    __tablename__ = "passengers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    travel_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("travels.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    passengers_no: Mapped[int] = mapped_column(Integer, nullable=False)

    # Optional selections
    flight_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("flights.id", ondelete="SET NULL"),
        nullable=True
    )
    resort_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("resorts.id", ondelete="SET NULL"),
        nullable=True
    )
    vehicle_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("vehicles.id", ondelete="SET NULL"),
        nullable=True
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
        CheckConstraint("passengers_no > 0", name="ck_passenger_count_positive"),
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="passengers")
    travel: Mapped["Travel"] = relationship("Travel", back_populates="passengers")
    flight: Mapped["Flight | None"] = relationship("Flight")
    resort: Mapped["Resort | None"] = relationship("Resort")
    vehicle: Mapped["Vehicle | None"] = relationship("Vehicle")

    def __repr__(self) -> str:
        return (
            f"<Passenger(id={self.id}, user_id={self.user_id}, travel_id={self.travel_id}, "
            f"passengers_no={self.passengers_no})>"
        )


class Order(Base):
    """A paid order for a trip."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    total_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[OrderStatus] = mapped_column(
        String(20),
        nullable=False,
        default=OrderStatus.COMPLETED,
        index=True
    )

    passenger_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("passengers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    discount_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("discounts.id", ondelete="SET NULL"),
        nullable=True
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
        CheckConstraint("total_price >= 0", name="ck_order_total_non_negative"),
    )

    # Relationships
    passenger: Mapped["Passenger"] = relationship("Passenger")
    discount: Mapped["Discount | None"] = relationship("Discount")
    billing: Mapped["Billing | None"] = relationship(
        "Billing",
        back_populates="order",
        uselist=False
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, total_price={self.total_price}, status={self.status})>"


class Billing(Base):
    """Payment record for an order."""

    __tablename__ = "billings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    amount_paid: Mapped[int] = mapped_column(BigInteger, nullable=False)
    is_paid: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false()
    )

    order_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Timestamps
    created_at: Mapped[dt.datetime] = mapped_column(
        nullable=False,
        default=dt.datetime.utcnow,
        server_default=func.now(),
        index=True
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        nullable=False,
        default=dt.datetime.utcnow,
        onupdate=dt.datetime.utcnow,
        server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("amount_paid >= 0", name="ck_billing_amount_non_negative"),
    )

    # Relationships
    order: Mapped["Order"] = relationship("Order", back_populates="billing")
    user: Mapped["User"] = relationship("User", back_populates="billings")

    def __repr__(self) -> str:
        return (
            f"<Billing(id={self.id}, order_id={self.order_id}, "
            f"amount_paid={self.amount_paid}, is_paid={self.is_paid})>"
        )
