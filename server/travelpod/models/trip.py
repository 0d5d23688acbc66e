"""Trip draft model: the persisted state of one trip wizard run."""

import datetime as dt
from enum import Enum
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, Date, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base


class TripStep(str, Enum):
    """Trip wizard steps, declared in wizard order."""
    TRIP_DETAILS = "trip_details"
    TRANSPORTATION = "transportation"
    ACCOMMODATION = "accommodation"
    ATTRACTIONS = "attractions"
    LOCAL_TRANSPORT = "local_transport"
    BILLING = "billing"
    CONFIRMATION = "confirmation"

    @property
    def position(self) -> int:
        return STEP_ORDER.index(self)

    def next(self) -> "TripStep":
        """The step that follows this one; confirmation is terminal."""
        position = self.position
        if position + 1 >= len(STEP_ORDER):
            return self
        return STEP_ORDER[position + 1]


STEP_ORDER: tuple[TripStep, ...] = tuple(TripStep)


class TripStatus(str, Enum):
    """Trip draft status enumeration."""
    IN_PROGRESS = "IN_PROGRESS"
    CONFIRMED = "CONFIRMED"
    ABANDONED = "ABANDONED"


class TripDraft(Base):
    """
    Server-side state of a trip wizard run.

    ``options`` holds the option lists generated when the trip starts,
    ``selections`` the option ids chosen at each step and ``itinerary`` the
    day-by-day plan built once attractions are chosen. The ``*_id`` columns
    point at the rows written to the booking tables as steps complete.
    """

    __tablename__ = "trip_drafts"

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

    # Wizard state
    status: Mapped[TripStatus] = mapped_column(
        String(20),
        nullable=False,
        default=TripStatus.IN_PROGRESS,
        index=True
    )
    current_step: Mapped[TripStep] = mapped_column(
        String(30),
        nullable=False,
        default=TripStep.TRANSPORTATION
    )

    # Trip details
    travelers: Mapped[int] = mapped_column(Integer, nullable=False)
    origin: Mapped[str] = mapped_column(String(255), nullable=False)
    destination: Mapped[str] = mapped_column(String(255), nullable=False)
    is_international: Mapped[bool] = mapped_column(Boolean, nullable=False)
    start_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    end_date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    # Generated options, chosen option ids and the derived itinerary
    options: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    selections: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    itinerary: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)

    # Rows written as steps complete
    outbound_flight_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("flights.id", ondelete="SET NULL"), nullable=True
    )
    return_flight_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("flights.id", ondelete="SET NULL"), nullable=True
    )
    resort_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("resorts.id", ondelete="SET NULL"), nullable=True
    )
    local_vehicle_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("vehicles.id", ondelete="SET NULL"), nullable=True
    )
    discount_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("discounts.id", ondelete="SET NULL"), nullable=True
    )
    order_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("orders.id", ondelete="SET NULL"), nullable=True
    )

    expires_at: Mapped[dt.datetime] = mapped_column(nullable=False, index=True)

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
        CheckConstraint("travelers >= 1", name="ck_trip_travelers_min"),
        CheckConstraint("travelers <= 10", name="ck_trip_travelers_max"),
        CheckConstraint("end_date >= start_date", name="ck_trip_date_range"),
    )

    @property
    def step(self) -> TripStep:
        return TripStep(self.current_step)

    @property
    def is_open(self) -> bool:
        return self.status == TripStatus.IN_PROGRESS

    def __repr__(self) -> str:
        return (
            f"<TripDraft(id={self.id}, user_id={self.user_id}, status={self.status}, "
            f"current_step={self.current_step})>"
        )
