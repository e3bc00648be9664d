"""
Driver dashboard controller.

Holds what a driver sees on their dashboard: the profile, the rides and the
earnings derived from them. Every mutation goes to the store first and is
followed by a full refresh, so local state is never updated optimistically
and earnings are always re-derived from the store's current rows.
"""

import logging
from typing import Dict, Any, Optional, List

from ridepool.models.alert import DEFAULT_LOCATION
from ridepool.models.driver import vehicle_label
from ridepool.models.ride import RideStatus
from ridepool.models.user import UserType
from ridepool.services.alert_service import AlertService
from ridepool.services.auth_service import AuthError, Session
from ridepool.services.earnings import Earnings, derive_earnings
from ridepool.services.review_service import ReviewService
from ridepool.services.ride_service import RideService
from ridepool.services.store import StoreError, RecordNotFoundError

logger = logging.getLogger(__name__)


class DashboardError(Exception):
    """Raised when the dashboard data cannot be loaded."""
    pass


class DriverProfileNotFound(DashboardError):
    """Raised when the signed in user has no driver profile."""
    pass


class DriverDashboard:
    """Ride lifecycle and earnings manager for one signed in driver."""

    def __init__(self, session: Session, ride_service: Optional[RideService] = None,
                 review_service: Optional[ReviewService] = None,
                 alert_service: Optional[AlertService] = None):
        if session.role != UserType.DRIVER.value:
            raise AuthError("The driver dashboard requires a driver account.")

        self.session = session
        self.ride_service = ride_service or RideService()
        self.review_service = review_service or ReviewService()
        self.alert_service = alert_service or AlertService()

        self.driver: Optional[Dict[str, Any]] = None
        self.rides: List[Dict[str, Any]] = []
        self.earnings = Earnings()

    @property
    def loaded(self) -> bool:
        return self.driver is not None

    def refresh(self) -> None:
        """
        Reload the driver, their rides and the earnings.

        A failure fetching the earning bookings is logged and keeps the
        previous earnings.

        Raises:
            DriverProfileNotFound: If the user has no driver profile
            DashboardError: If the driver or the rides cannot be fetched
        """
        try:
            driver = self.ride_service.get_driver_profile(self.session.user_id)
        except RecordNotFoundError:
            self.driver = None
            raise DriverProfileNotFound("Driver profile not found")
        except StoreError as e:
            logger.error(f"Driver fetch error: {str(e)}")
            raise DashboardError("Failed to load dashboard data. Please refresh the page.")

        try:
            rides = self.ride_service.get_driver_rides(driver["id"])
        except StoreError as e:
            logger.error(f"Rides fetch error: {str(e)}")
            raise DashboardError("Failed to load dashboard data. Please refresh the page.")

        self.driver = driver
        self.rides = rides

        try:
            bookings = self.ride_service.get_earning_bookings(driver["id"])
        except StoreError as e:
            logger.error(f"Bookings fetch error: {str(e)}")
            return

        self.earnings = derive_earnings(rides, bookings)

    def _require_loaded(self) -> Dict[str, Any]:
        if self.driver is None:
            self.refresh()
        return self.driver

    def _refresh_after_write(self) -> None:
        """Reload after a successful write; a load failure here does not undo the write."""
        try:
            self.refresh()
        except DashboardError as e:
            logger.error(f"Dashboard refresh after update failed: {str(e)}")

    @property
    def total_rides(self) -> int:
        return len(self.rides)

    @property
    def active_rides(self) -> int:
        return sum(1 for ride in self.rides if ride.get("status") == RideStatus.ACTIVE.value)

    @property
    def total_earnings(self) -> float:
        return self.earnings.total

    @property
    def vehicle(self) -> str:
        return vehicle_label(self.driver or {})

    @property
    def is_verified(self) -> bool:
        return bool(self.driver and self.driver.get("is_verified"))

    def ride_earnings(self, ride: Dict[str, Any]) -> float:
        """Earnings of one ride, 0 unless it is completed."""
        return self.earnings.for_ride(ride)

    @staticmethod
    def booked_seats(ride: Dict[str, Any]) -> int:
        return ride.get("total_seats", 0) - ride.get("available_seats", 0)

    def add_ride(self, from_location, to_location, price, total_seats, departure_time) -> Dict[str, Any]:
        """Post a ride and refresh."""
        driver = self._require_loaded()
        ride = self.ride_service.add_ride(driver, from_location, to_location,
                                          price, total_seats, departure_time)
        self._refresh_after_write()
        return ride

    def complete_ride(self, ride_id: str) -> Dict[str, Any]:
        """Complete a ride and refresh."""
        ride = self.ride_service.complete_ride(self._require_loaded(), ride_id)
        self._refresh_after_write()
        return ride

    def cancel_ride(self, ride_id: str) -> Dict[str, Any]:
        """Cancel a ride with its bookings and refresh."""
        ride = self.ride_service.cancel_ride(self._require_loaded(), ride_id)
        self._refresh_after_write()
        return ride

    def edit_price(self, ride_id: str, price) -> Dict[str, Any]:
        """Change a ride's price per seat and refresh."""
        ride = self.ride_service.edit_price(self._require_loaded(), ride_id, price)
        self._refresh_after_write()
        return ride

    def booking_summary(self, ride_id: str) -> List[Dict[str, Any]]:
        """Confirmed and completed bookings of one of the driver's rides."""
        return self.ride_service.get_booking_summary(self._require_loaded(), ride_id)

    def submit_review(self, booking_id: str, rating: int, comment: str = "") -> Dict[str, Any]:
        """Review the customer of a booking and refresh."""
        review = self.review_service.submit_review(self._require_loaded(), booking_id,
                                                   rating, comment)
        self._refresh_after_write()
        return review

    def raise_sos(self, location: str = DEFAULT_LOCATION) -> Dict[str, Any]:
        """Send an SOS alert for the driver."""
        return self.alert_service.raise_sos(self._require_loaded(), location)
