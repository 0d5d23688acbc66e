"""Travel, station, agency and vehicle model definitions."""

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .booking import Passenger


class Agency(Base):
    """Travel agency that a travel is booked through."""

    __tablename__ = "agencies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)

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

    def __repr__(self) -> str:
        return f"<Agency(id={self.id}, name='{self.name}')>"


class Station(Base):
    """
    Route endpoint pair.

    The database columns are named ``from`` and ``to``; they are mapped to
    ``origin`` and ``destination`` on the Python side.
    """

    __tablename__ = "stations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    origin: Mapped[str | None] = mapped_column("from", String(255), nullable=True, index=True)
    destination: Mapped[str | None] = mapped_column("to", String(255), nullable=True, index=True)

    # Back-link to the travel created for this route
    travel_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("travels.id", ondelete="SET NULL", use_alter=True, name="fk_stations_travel_id"),
        nullable=True,
        index=True
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

    def __repr__(self) -> str:
        return f"<Station(id={self.id}, name='{self.name}', from='{self.origin}', to='{self.destination}')>"


class Vehicle(Base):
    """Vehicle used for a travel or chosen as local transport."""

    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    vehicle_type: Mapped[str | None] = mapped_column(String(50), nullable=True)

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

    def __repr__(self) -> str:
        return f"<Vehicle(id={self.id}, name='{self.name}', type='{self.vehicle_type}')>"


class Travel(Base):
    """A booked journey between two places over a date range."""

    __tablename__ = "travels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Travel details
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    dates: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Foreign keys
    agency_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("agencies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    station_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("stations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    vehicle_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("vehicles.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
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
        CheckConstraint("duration > 0", name="ck_travel_duration_positive"),
        CheckConstraint("price >= 0", name="ck_travel_price_non_negative"),
    )

    # Relationships
    agency: Mapped["Agency"] = relationship("Agency")
    station: Mapped["Station"] = relationship("Station", foreign_keys=[station_id])
    vehicle: Mapped["Vehicle"] = relationship("Vehicle")
    passengers: Mapped[list["Passenger"]] = relationship(
        "Passenger",
        back_populates="travel",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return (
            f"<Travel(id={self.id}, date={self.date}, duration={self.duration}, "
            f"price={self.price}, station_id={self.station_id})>"
        )
