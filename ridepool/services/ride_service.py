"""Ride service for Ridepool application."""

import math
import logging
from datetime import datetime
from typing import Dict, Any, Optional, List, Union

from ridepool.models.booking import BookingStatus, SUMMARY_STATUSES
from ridepool.models.ride import Ride, InvalidRideTransition
from ridepool.services.store import DataStore, StoreError, RecordNotFoundError

logger = logging.getLogger(__name__)


class RideServiceError(Exception):
    """Custom exception for ride service errors."""
    pass


class RideValidationError(RideServiceError):
    """Raised when ride input is rejected before any request is made."""
    pass


class RideService:
    """Service for a driver's rides and the bookings attached to them."""

    def __init__(self, store: Optional[DataStore] = None):
        self.store = store or DataStore()

    def get_driver_profile(self, user_id: str) -> Dict[str, Any]:
        """
        Get the driver profile belonging to a user.

        Raises:
            RecordNotFoundError: If the user has no driver profile
            StoreError: If the lookup fails
        """
        return self.store.single("drivers", {"user_id": user_id})

    def get_driver_rides(self, driver_id: str) -> List[Dict[str, Any]]:
        """Get all rides of a driver, most recently posted first."""
        return self.store.select("rides", {"driver_id": driver_id},
                                 order_by="created_at", descending=True)

    def get_earning_bookings(self, driver_id: str) -> List[Dict[str, Any]]:
        """
        Get the bookings of the driver's completed rides.

        Each booking is joined with its ride under the ``ride`` key. Bookings
        whose ride is not in the completed set are dropped, as in an inner
        join.
        """
        completed_rides = self.store.select(
            "rides", {"driver_id": driver_id, "is_ride_completed": True})
        rides_by_id = {ride["id"]: ride for ride in completed_rides}

        bookings = self.store.select("bookings", in_filters={"ride_id": rides_by_id.keys()})

        joined = []
        for booking in bookings:
            ride = rides_by_id.get(booking.get("ride_id"))
            if ride is None:
                continue
            booking["ride"] = {
                "id": ride["id"],
                "driver_id": ride["driver_id"],
                "price": ride["price"],
                "status": ride["status"],
                "is_ride_completed": ride["is_ride_completed"],
            }
            joined.append(booking)
        return joined

    def add_ride(self, driver: Dict[str, Any], from_location: str, to_location: str,
                 price: Union[str, float], total_seats: Union[str, int],
                 departure_time: Union[str, datetime]) -> Dict[str, Any]:
        """
        Post a new ride for a driver.

        Args:
            driver: Driver profile posting the ride
            from_location: Where the ride starts
            to_location: Where the ride ends
            price: Price per seat
            total_seats: Seats offered, all of them available at creation
            departure_time: When the ride leaves

        Returns:
            Dict: The stored ride

        Raises:
            RideValidationError: If a field is missing or not a number
            RideServiceError: If the ride cannot be stored
        """
        required = {
            "from location": from_location,
            "to location": to_location,
            "price": price,
            "total seats": total_seats,
            "departure time": departure_time,
        }
        missing = [name for name, value in required.items()
                   if value is None or (isinstance(value, str) and not value.strip())]
        if missing:
            raise RideValidationError(f"Please fill in: {', '.join(missing)}.")

        price = _parse_price(price)
        try:
            total_seats = int(total_seats)
        except (TypeError, ValueError):
            raise RideValidationError("Please enter a valid number of seats.")

        if isinstance(departure_time, datetime):
            departure_time = departure_time.isoformat()

        ride = Ride(
            driver_id=driver["id"],
            from_location=from_location.strip(),
            to_location=to_location.strip(),
            price=price,
            total_seats=total_seats,
            departure_time=departure_time
        )

        try:
            saved = self.store.insert("rides", ride.__dict__)
        except StoreError as e:
            raise RideServiceError(f"Failed to add ride: {str(e)}")

        logger.info(f"Driver {driver['id']} posted ride {ride.id}")
        return saved

    def complete_ride(self, driver: Dict[str, Any], ride_id: str) -> Dict[str, Any]:
        """
        Mark an active ride completed and count it for the driver.

        The ride update and the counter increment are separate requests. The
        counter is read and written back, so two completions racing each
        other can lose or double an increment.

        Returns:
            Dict: The updated ride

        Raises:
            RideServiceError: If the ride cannot be completed
        """
        ride = self._get_owned_ride(driver, ride_id)

        try:
            changes = ride.complete()
        except InvalidRideTransition as e:
            raise RideServiceError(str(e))

        try:
            updated = self.store.update("rides", ride_id, changes)

            current = self.store.get("drivers", driver["id"])
            completed_rides = (current.get("completed_rides") or 0) + 1
            self.store.update("drivers", driver["id"], {"completed_rides": completed_rides})
        except StoreError as e:
            raise RideServiceError(f"Failed to complete ride: {str(e)}")

        logger.info(f"Ride {ride_id} completed, driver {driver['id']} has {completed_rides} completed rides")
        return updated

    def cancel_ride(self, driver: Dict[str, Any], ride_id: str) -> Dict[str, Any]:
        """
        Cancel an active ride and all of its bookings.

        The ride cancellation is authoritative. If cancelling the bookings
        fails afterwards the error is logged and the ride stays cancelled.

        Returns:
            Dict: The updated ride

        Raises:
            RideServiceError: If the ride cannot be cancelled
        """
        ride = self._get_owned_ride(driver, ride_id)

        try:
            changes = ride.cancel()
        except InvalidRideTransition as e:
            raise RideServiceError(str(e))

        try:
            updated = self.store.update("rides", ride_id, changes)
        except StoreError as e:
            raise RideServiceError(f"Failed to cancel ride: {str(e)}")

        try:
            self.store.update_where("bookings", {"status": BookingStatus.CANCELLED.value},
                                    {"ride_id": ride_id})
        except StoreError as e:
            logger.error(f"Error cancelling bookings of ride {ride_id}: {str(e)}")

        return updated

    def edit_price(self, driver: Dict[str, Any], ride_id: str,
                   price: Union[str, float]) -> Dict[str, Any]:
        """
        Change the price per seat of an active ride.

        Earnings are not adjusted here; they are derived from the current
        price on the next refresh.

        Raises:
            RideValidationError: If the price is not a number, before any request
            RideServiceError: If the ride cannot be updated
        """
        price = _parse_price(price)
        ride = self._get_owned_ride(driver, ride_id)

        try:
            changes = ride.change_price(price)
        except InvalidRideTransition as e:
            raise RideServiceError(str(e))

        try:
            return self.store.update("rides", ride_id, changes)
        except StoreError as e:
            raise RideServiceError(f"Failed to update ride: {str(e)}")

    def get_booking_summary(self, driver: Dict[str, Any], ride_id: str) -> List[Dict[str, Any]]:
        """
        Get the confirmed and completed bookings of one of the driver's rides.

        Returns:
            List[Dict]: Booking ID, status, seats booked and customer phone per booking

        Raises:
            RideServiceError: If the ride is not the driver's or the bookings cannot be fetched
        """
        self._get_owned_ride(driver, ride_id)

        try:
            bookings = self.store.select("bookings", {"ride_id": ride_id},
                                         in_filters={"status": SUMMARY_STATUSES})
            customer_ids = {b["user_id"] for b in bookings if b.get("user_id")}
            customers = self.store.select("users", in_filters={"id": customer_ids})
        except StoreError as e:
            logger.error(f"Booking summary fetch error for ride {ride_id}: {str(e)}")
            raise RideServiceError(f"Failed to fetch booking summary: {str(e)}")

        phones = {user["id"]: user.get("phone") for user in customers}
        return [
            {
                "id": booking["id"],
                "user_id": booking.get("user_id"),
                "seats_booked": booking.get("seats_booked", 0),
                "status": booking.get("status"),
                "phone": phones.get(booking.get("user_id")),
            }
            for booking in bookings
        ]

    def _get_owned_ride(self, driver: Dict[str, Any], ride_id: str) -> Ride:
        try:
            record = self.store.get("rides", ride_id)
        except RecordNotFoundError:
            raise RideServiceError(f"Ride with ID {ride_id} not found")
        except StoreError as e:
            raise RideServiceError(f"Failed to retrieve ride: {str(e)}")

        if record.get("driver_id") != driver["id"]:
            raise RideServiceError("You can only manage your own rides.")
        return Ride.from_record(record)


def _parse_price(value: Union[str, float]) -> float:
    """Parse a price per seat, rejecting anything that is not a finite number."""
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise RideValidationError("Please enter a valid number for price.")
    if math.isnan(price) or math.isinf(price):
        raise RideValidationError("Please enter a valid number for price.")
    return price
