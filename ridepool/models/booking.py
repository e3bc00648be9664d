"""Booking entity for the Ridepool application."""

from enum import Enum


class BookingStatus(Enum):
    """Possible statuses for a booking."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Bookings listed in a ride's booking summary
SUMMARY_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value)
