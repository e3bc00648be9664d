"""Entity models for the Ridepool application."""
from ridepool.models.user import User, UserType
from ridepool.models.driver import Driver
from ridepool.models.ride import Ride, RideStatus, InvalidRideTransition
from ridepool.models.booking import BookingStatus
from ridepool.models.review import Review
from ridepool.models.alert import SOSAlert


__all__ = [
    'User',
    'UserType',
    'Driver',
    'Ride',
    'RideStatus',
    'InvalidRideTransition',
    'BookingStatus',
    'Review',
    'SOSAlert',
]
