"""Trip wizard service: the server-side booking workflow."""

import logging
from datetime import date, datetime, time, timedelta
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.exceptions import (
    NotFoundError,
    TripClosedError,
    ValidationError,
    WizardStepError,
)
from ..core.observability import metrics_collector
from ..models.booking import Billing, Flight, Order, OrderStatus, Passenger, Resort
from ..models.discount import Discount, DiscountType
from ..models.travel import Agency, Station, Travel, Vehicle
from ..models.trip import TripDraft, TripStatus, TripStep
from ..schemas.trip import (
    SelectAccommodationRequest,
    SelectAttractionsRequest,
    SelectLocalTransportRequest,
    SelectTransportationRequest,
    StartTripRequest,
)
from . import catalog
from .discount_service import DiscountService, effective_amount
from .pricing import PriceBreakdown, calculate_breakdown, trip_days

logger = logging.getLogger(__name__)

DEFAULT_AGENCY_NAME = "Default Travel Agency"
DEFAULT_AGENCY_ADDRESS = "123 Main Street"
DEFAULT_VEHICLE_NAME = "Standard Vehicle"
DEFAULT_VEHICLE_TYPE = "car"


class TripService:
    """Service driving a trip draft through the booking wizard."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.discount_service = DiscountService(db)

    # Lookups

    async def get_trip_by_id(self, trip_id: int) -> TripDraft | None:
        result = await self.db.execute(select(TripDraft).where(TripDraft.id == trip_id))
        return result.scalar_one_or_none()

    async def get_trip_for_user_or_raise(self, trip_id: int, user_id: int) -> TripDraft:
        """
        Get a trip draft owned by the user.

        Raises:
            NotFoundError: If the draft does not exist or belongs to someone else
        """
        trip = await self.get_trip_by_id(trip_id)
        if trip is None or trip.user_id != user_id:
            raise NotFoundError(resource_type="trip", resource_id=str(trip_id))
        return trip

    async def _get_or_create_default_agency(self) -> Agency:
        result = await self.db.execute(select(Agency).order_by(Agency.id).limit(1))
        agency = result.scalar_one_or_none()
        if agency is None:
            agency = Agency(name=DEFAULT_AGENCY_NAME, address=DEFAULT_AGENCY_ADDRESS)
            self.db.add(agency)
            await self.db.flush()
        return agency

    async def _get_or_create_default_vehicle(self) -> Vehicle:
        result = await self.db.execute(select(Vehicle).order_by(Vehicle.id).limit(1))
        vehicle = result.scalar_one_or_none()
        if vehicle is None:
            vehicle = Vehicle(name=DEFAULT_VEHICLE_NAME, vehicle_type=DEFAULT_VEHICLE_TYPE)
            self.db.add(vehicle)
            await self.db.flush()
        return vehicle

    # Wizard state helpers

    def _ensure_open(self, trip: TripDraft) -> None:
        if not trip.is_open:
            raise TripClosedError(trip.id, trip.status)
        if trip.expires_at <= datetime.utcnow():
            raise TripClosedError(trip.id, TripStatus.ABANDONED.value)

    def _ensure_step(self, trip: TripDraft, step: TripStep) -> None:
        """A step may be submitted once the draft has reached it."""
        self._ensure_open(trip)
        if trip.step.position < step.position:
            raise WizardStepError(trip.id, step.value, trip.step.value)

    def _complete_step(self, trip: TripDraft, step: TripStep) -> None:
        """Move past ``step`` without losing later progress, and refresh the expiry."""
        following = step.next()
        if following.position > trip.step.position:
            trip.current_step = following
        trip.expires_at = datetime.utcnow() + timedelta(hours=settings.trip_draft_ttl_hours)
        metrics_collector.record_step_completed(step.value)

    def _option(self, trip: TripDraft, step: TripStep, option_id: str) -> dict | None:
        for option in trip.options.get(step.value, []):
            if option["id"] == option_id:
                return option
        return None

    def _select(self, trip: TripDraft, step: TripStep, value: dict[str, Any]) -> None:
        # Reassign so the JSON column is flagged as changed
        trip.selections = {**trip.selections, step.value: value}

    async def _link_passengers(self, trip: TripDraft, **values: Any) -> None:
        await self.db.execute(
            update(Passenger)
            .where(Passenger.travel_id == trip.travel_id)
            .values(**values)
        )

    def _selected_legs(self, trip: TripDraft) -> tuple[dict | None, dict | None]:
        chosen = trip.selections.get(TripStep.TRANSPORTATION.value)
        if not chosen:
            return None, None
        return (
            self._option(trip, TripStep.TRANSPORTATION, chosen["outbound_id"]),
            self._option(trip, TripStep.TRANSPORTATION, chosen["return_id"]),
        )

    def _selected_attractions(self, trip: TripDraft) -> list[dict]:
        chosen = trip.selections.get(TripStep.ATTRACTIONS.value) or {}
        selected = []
        for option_id in chosen.get("option_ids", []):
            option = self._option(trip, TripStep.ATTRACTIONS, option_id)
            if option is not None:
                selected.append(option)
        return selected

    def _refresh_itinerary(self, trip: TripDraft) -> None:
        if TripStep.ATTRACTIONS.value not in trip.selections:
            return
        outbound, return_leg = self._selected_legs(trip)
        trip.itinerary = catalog.build_itinerary(
            origin=trip.origin,
            destination=trip.destination,
            start_date=trip.start_date,
            end_date=trip.end_date,
            outbound=outbound,
            return_leg=return_leg,
            attractions=self._selected_attractions(trip),
        )

    # Steps

    async def start_trip(self, user_id: int, request: StartTripRequest) -> TripDraft:
        """
        Record the trip details and open a draft at the transportation step.

        Writes the default agency and vehicle when none exist, then the
        station, the travel and one passenger record per traveler.
        """
        is_international = request.is_international
        if is_international is None:
            is_international = request.origin.lower() != request.destination.lower()

        days = trip_days(request.start_date, request.end_date)

        try:
            agency = await self._get_or_create_default_agency()
            vehicle = await self._get_or_create_default_vehicle()

            station = Station(
                name=f"{request.origin} to {request.destination}",
                origin=request.origin,
                destination=request.destination,
            )
            self.db.add(station)
            await self.db.flush()

            travel = Travel(
                duration=days,
                price=settings.default_travel_price,
                date=request.start_date,
                dates=f"{request.start_date.isoformat()} to {request.end_date.isoformat()}",
                agency_id=agency.id,
                station_id=station.id,
                vehicle_id=vehicle.id,
            )
            self.db.add(travel)
            await self.db.flush()

            station.travel_id = travel.id

            self.db.add_all([
                Passenger(user_id=user_id, travel_id=travel.id, passengers_no=request.travelers)
                for _ in range(request.travelers)
            ])

            trip = TripDraft(
                user_id=user_id,
                travel_id=travel.id,
                status=TripStatus.IN_PROGRESS,
                current_step=TripStep.TRIP_DETAILS,
                travelers=request.travelers,
                origin=request.origin,
                destination=request.destination,
                is_international=is_international,
                start_date=request.start_date,
                end_date=request.end_date,
                options=catalog.generate_trip_options(
                    request.origin,
                    request.destination,
                    is_international,
                    request.start_date,
                    request.end_date,
                ),
                selections={},
                itinerary=None,
                expires_at=datetime.utcnow(),
            )
            self._complete_step(trip, TripStep.TRIP_DETAILS)
            self.db.add(trip)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        metrics_collector.record_trip_started(is_international)
        logger.info(
            "Trip started",
            extra={
                "trip_id": trip.id,
                "user_id": user_id,
                "travel_id": travel.id,
                "station_id": station.id,
                "travelers": request.travelers,
                "is_international": is_international,
            }
        )
        return trip

    async def select_transportation(self, user_id: int, request: SelectTransportationRequest) -> TripDraft:
        """
        Choose the outbound and return legs.

        Raises:
            ValidationError: If a leg is unknown or runs in the wrong direction
        """
        trip = await self.get_trip_for_user_or_raise(request.trip_id, user_id)
        self._ensure_step(trip, TripStep.TRANSPORTATION)

        outbound = self._option(trip, TripStep.TRANSPORTATION, request.outbound_id)
        return_leg = self._option(trip, TripStep.TRANSPORTATION, request.return_id)

        errors = {}
        if outbound is None or outbound["direction"] != catalog.OUTBOUND:
            errors["outbound_id"] = f"'{request.outbound_id}' is not an outbound option for this trip"
        if return_leg is None or return_leg["direction"] != catalog.RETURN:
            errors["return_id"] = f"'{request.return_id}' is not a return option for this trip"
        if errors:
            raise ValidationError(detail="Invalid transportation selection", errors=errors)

        try:
            outbound_flight = await self._save_leg(trip.outbound_flight_id, outbound)
            return_flight = await self._save_leg(trip.return_flight_id, return_leg)
            trip.outbound_flight_id = outbound_flight.id
            trip.return_flight_id = return_flight.id

            await self._link_passengers(trip, flight_id=outbound_flight.id)

            self._select(trip, TripStep.TRANSPORTATION, {
                "outbound_id": request.outbound_id,
                "return_id": request.return_id,
            })
            self._refresh_itinerary(trip)
            self._complete_step(trip, TripStep.TRANSPORTATION)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Transportation selected",
            extra={
                "trip_id": trip.id,
                "outbound_flight_id": outbound_flight.id,
                "return_flight_id": return_flight.id,
            }
        )
        return trip

    async def _save_leg(self, flight_id: int | None, option: dict) -> Flight:
        flight = await self.db.get(Flight, flight_id) if flight_id else None
        if flight is None:
            flight = Flight()
            self.db.add(flight)

        flight.name = option["company"]
        flight.price = option["price"]
        flight.origin = option["origin"]
        flight.destination = option["destination"]
        flight.date = date.fromisoformat(option["date"])
        flight.departure_time = time.fromisoformat(option["departure_time"])
        flight.arrival_time = time.fromisoformat(option["arrival_time"])

        await self.db.flush()
        return flight

    async def select_accommodation(self, user_id: int, request: SelectAccommodationRequest) -> TripDraft:
        """
        Choose a hotel, or skip accommodation when no option is given.

        Raises:
            ValidationError: If the hotel is unknown
        """
        trip = await self.get_trip_for_user_or_raise(request.trip_id, user_id)
        self._ensure_step(trip, TripStep.ACCOMMODATION)

        option = None
        if request.option_id is not None:
            option = self._option(trip, TripStep.ACCOMMODATION, request.option_id)
            if option is None:
                raise ValidationError(
                    detail="Invalid accommodation selection",
                    errors={"option_id": f"'{request.option_id}' is not a hotel option for this trip"},
                )

        try:
            if option is None:
                previous_id = trip.resort_id
                trip.resort_id = None
                await self._link_passengers(trip, resort_id=None)
                if previous_id:
                    previous = await self.db.get(Resort, previous_id)
                    if previous is not None:
                        await self.db.delete(previous)
            else:
                resort = await self.db.get(Resort, trip.resort_id) if trip.resort_id else None
                if resort is None:
                    resort = Resort()
                    self.db.add(resort)
                resort.name = option["name"]
                resort.price = option["price_per_night"]
                resort.address = option["location"]
                await self.db.flush()

                trip.resort_id = resort.id
                await self._link_passengers(trip, resort_id=resort.id)

            self._select(trip, TripStep.ACCOMMODATION, {"option_id": request.option_id})
            self._complete_step(trip, TripStep.ACCOMMODATION)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Accommodation selected",
            extra={"trip_id": trip.id, "option_id": request.option_id, "resort_id": trip.resort_id}
        )
        return trip

    async def select_attractions(self, user_id: int, request: SelectAttractionsRequest) -> TripDraft:
        """
        Choose attractions and build the itinerary.

        Raises:
            ValidationError: If any attraction is unknown
        """
        trip = await self.get_trip_for_user_or_raise(request.trip_id, user_id)
        self._ensure_step(trip, TripStep.ATTRACTIONS)

        # Keep the caller's order, drop repeats
        option_ids = list(dict.fromkeys(request.option_ids))
        unknown = [
            option_id for option_id in option_ids
            if self._option(trip, TripStep.ATTRACTIONS, option_id) is None
        ]
        if unknown:
            raise ValidationError(
                detail="Invalid attraction selection",
                errors={"option_ids": unknown},
            )

        try:
            self._select(trip, TripStep.ATTRACTIONS, {"option_ids": option_ids})
            self._refresh_itinerary(trip)
            self._complete_step(trip, TripStep.ATTRACTIONS)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Attractions selected",
            extra={"trip_id": trip.id, "attraction_count": len(option_ids)}
        )
        return trip

    async def select_local_transport(self, user_id: int, request: SelectLocalTransportRequest) -> TripDraft:
        """
        Choose local transport.

        Raises:
            ValidationError: If the option is unknown
        """
        trip = await self.get_trip_for_user_or_raise(request.trip_id, user_id)
        self._ensure_step(trip, TripStep.LOCAL_TRANSPORT)

        option = self._option(trip, TripStep.LOCAL_TRANSPORT, request.option_id)
        if option is None:
            raise ValidationError(
                detail="Invalid local transport selection",
                errors={"option_id": f"'{request.option_id}' is not a local transport option for this trip"},
            )

        try:
            vehicle = await self.db.get(Vehicle, trip.local_vehicle_id) if trip.local_vehicle_id else None
            if vehicle is None:
                vehicle = Vehicle()
                self.db.add(vehicle)
            vehicle.name = option["name"]
            vehicle.vehicle_type = option["vehicle_type"]
            await self.db.flush()

            trip.local_vehicle_id = vehicle.id
            await self._link_passengers(trip, vehicle_id=vehicle.id)

            self._select(trip, TripStep.LOCAL_TRANSPORT, {"option_id": request.option_id})
            self._complete_step(trip, TripStep.LOCAL_TRANSPORT)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Local transport selected",
            extra={"trip_id": trip.id, "option_id": request.option_id, "vehicle_id": vehicle.id}
        )
        return trip

    # Billing

    async def apply_discount(self, user_id: int, trip_id: int, code: str) -> TripDraft:
        """
        Attach a discount code to a draft at the billing step.

        Raises:
            InvalidDiscountError: If the code is unknown, inactive or expired
        """
        trip = await self.get_trip_for_user_or_raise(trip_id, user_id)
        self._ensure_step(trip, TripStep.BILLING)

        discount = await self.discount_service.get_redeemable_discount(code)
        trip.discount_id = discount.id
        await self.db.commit()

        metrics_collector.record_discount_applied(DiscountType(discount.discount_type).value)
        logger.info(
            "Discount applied",
            extra={"trip_id": trip.id, "discount_id": discount.id, "code": discount.code}
        )
        return trip

    async def remove_discount(self, user_id: int, trip_id: int) -> TripDraft:
        trip = await self.get_trip_for_user_or_raise(trip_id, user_id)
        self._ensure_step(trip, TripStep.BILLING)

        trip.discount_id = None
        await self.db.commit()

        logger.info("Discount removed", extra={"trip_id": trip.id})
        return trip

    async def get_discount(self, trip: TripDraft) -> Discount | None:
        if trip.discount_id is None:
            return None
        return await self.discount_service.get_discount_by_id(trip.discount_id)

    def price(self, trip: TripDraft, discount: Discount | None = None) -> PriceBreakdown:
        """Price a draft from its current selections."""
        outbound, return_leg = self._selected_legs(trip)

        accommodation_price = None
        chosen_hotel = trip.selections.get(TripStep.ACCOMMODATION.value) or {}
        if chosen_hotel.get("option_id"):
            hotel = self._option(trip, TripStep.ACCOMMODATION, chosen_hotel["option_id"])
            if hotel is not None:
                accommodation_price = hotel["price_per_night"]

        local_price = None
        chosen_local = trip.selections.get(TripStep.LOCAL_TRANSPORT.value) or {}
        if chosen_local.get("option_id"):
            local = self._option(trip, TripStep.LOCAL_TRANSPORT, chosen_local["option_id"])
            if local is not None:
                local_price = local["price_per_day"]

        return calculate_breakdown(
            travelers=trip.travelers,
            days=trip_days(trip.start_date, trip.end_date),
            transport_prices=[leg["price"] for leg in (outbound, return_leg) if leg],
            accommodation_price=accommodation_price,
            attraction_prices=[option["price"] for option in self._selected_attractions(trip)],
            local_transport_price_per_day=local_price,
            discount_type=discount.discount_type if discount else None,
            discount_value=effective_amount(discount) if discount else None,
            currency=settings.currency,
        )

    async def quote(self, trip: TripDraft) -> tuple[PriceBreakdown, str | None]:
        """
        Current price of a draft.

        Confirmed drafts report the price they were paid at.

        Returns:
            Tuple of (price breakdown, applied discount code)
        """
        paid = trip.selections.get(TripStep.BILLING.value)
        if paid:
            return PriceBreakdown(**paid["price"]), paid.get("discount_code")

        discount = await self.get_discount(trip)
        return self.price(trip, discount), discount.code if discount else None

    async def pay(self, user_id: int, trip_id: int) -> tuple[TripDraft, Order, Billing]:
        """
        Pay for a draft at the billing step.

        The order, the billing and the draft's confirmation are committed
        together. Paying a confirmed draft returns the existing records.

        Raises:
            WizardStepError: If the draft has not reached billing
            TripClosedError: If the draft was abandoned
            InvalidDiscountError: If the applied code stopped being redeemable
        """
        trip = await self.get_trip_for_user_or_raise(trip_id, user_id)

        if trip.status == TripStatus.CONFIRMED:
            order, billing = await self._get_order_and_billing(trip)
            logger.info("Trip already paid", extra={"trip_id": trip.id, "order_id": order.id})
            return trip, order, billing

        self._ensure_step(trip, TripStep.BILLING)

        discount = None
        if trip.discount_id is not None:
            current = await self.get_discount(trip)
            code = current.code if current else ""
            # Re-check the code in case it was deactivated after being applied
            discount = await self.discount_service.get_redeemable_discount(code)

        breakdown = self.price(trip, discount)

        try:
            result = await self.db.execute(
                select(Passenger)
                .where(Passenger.travel_id == trip.travel_id, Passenger.user_id == user_id)
                .order_by(Passenger.id)
                .limit(1)
            )
            lead_passenger = result.scalar_one()

            order = Order(
                total_price=breakdown.total,
                status=OrderStatus.COMPLETED,
                passenger_id=lead_passenger.id,
                discount_id=discount.id if discount else None,
            )
            self.db.add(order)
            await self.db.flush()

            billing = Billing(
                amount_paid=breakdown.total,
                is_paid=True,
                order_id=order.id,
                user_id=user_id,
            )
            self.db.add(billing)
            await self.db.flush()

            trip.order_id = order.id
            trip.discount_id = discount.id if discount else None
            self._select(trip, TripStep.BILLING, {
                "price": breakdown.to_dict(),
                "discount_code": discount.code if discount else None,
            })
            self._complete_step(trip, TripStep.BILLING)
            trip.status = TripStatus.CONFIRMED

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error("Payment failed", extra={"trip_id": trip_id, "user_id": user_id}, exc_info=True)
            raise

        metrics_collector.record_booking_paid(breakdown.total, breakdown.currency)
        logger.info(
            "Trip paid",
            extra={
                "trip_id": trip.id,
                "order_id": order.id,
                "billing_id": billing.id,
                "total": breakdown.total,
                "discount_id": order.discount_id,
            }
        )
        return trip, order, billing

    async def _get_order_and_billing(self, trip: TripDraft) -> tuple[Order, Billing]:
        order = await self.db.get(Order, trip.order_id) if trip.order_id else None
        if order is None:
            raise NotFoundError(resource_type="order", detail=f"Trip {trip.id} has no order")

        result = await self.db.execute(select(Billing).where(Billing.order_id == order.id))
        billing = result.scalar_one_or_none()
        if billing is None:
            raise NotFoundError(resource_type="billing", detail=f"Order {order.id} has no billing")
        return order, billing

    async def get_confirmation(self, user_id: int, trip_id: int) -> tuple[TripDraft, Order, Billing]:
        """
        Records behind a paid trip.

        Raises:
            WizardStepError: If the trip has not been paid
        """
        trip = await self.get_trip_for_user_or_raise(trip_id, user_id)
        if trip.status != TripStatus.CONFIRMED:
            raise WizardStepError(trip.id, TripStep.CONFIRMATION.value, trip.step.value)

        order, billing = await self._get_order_and_billing(trip)
        return trip, order, billing

    # Options

    def list_options(self, trip: TripDraft, step: TripStep, amenities: list[str] | None = None) -> list[dict]:
        """Options generated for a step; hotels may be filtered by amenities."""
        options = list(trip.options.get(step.value, []))
        if step == TripStep.ACCOMMODATION and amenities:
            options = catalog.filter_by_amenities(options, amenities)
        return options

    # Housekeeping

    async def expire_stale_drafts(self, now: datetime | None = None) -> int:
        """Mark in-progress drafts past their expiry as abandoned."""
        now = now or datetime.utcnow()
        result = await self.db.execute(
            update(TripDraft)
            .where(TripDraft.status == TripStatus.IN_PROGRESS, TripDraft.expires_at <= now)
            .values(status=TripStatus.ABANDONED)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        expired = result.rowcount or 0
        metrics_collector.record_drafts_abandoned(expired)
        return expired
