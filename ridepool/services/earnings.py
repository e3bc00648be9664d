"""Earnings derivation for a driver's rides."""

from dataclasses import dataclass, field
from typing import Dict, Any, List


@dataclass
class Earnings:
    """
    Earnings derived from the bookings of completed rides.

    Attributes:
        total: Sum over every earnings-eligible booking
        per_ride: The same sum grouped by ride ID, 0 for rides without eligible bookings
    """
    total: float = 0
    per_ride: Dict[str, float] = field(default_factory=dict)

    def for_ride(self, ride: Dict[str, Any]) -> float:
        """Earnings shown for a ride, always 0 unless the ride is completed."""
        if ride.get("is_ride_completed") is not True:
            return 0
        return self.per_ride.get(ride["id"], 0)


def is_earnings_eligible(booking: Dict[str, Any]) -> bool:
    """A booking earns only when its joined ride's completion flag is exactly True."""
    ride = booking.get("ride")
    return bool(ride) and ride.get("is_ride_completed") is True


def booking_amount(booking: Dict[str, Any]) -> float:
    """Seats booked times the current price per seat of the joined ride."""
    return booking.get("seats_booked", 0) * booking["ride"].get("price", 0)


def derive_earnings(rides: List[Dict[str, Any]], bookings: List[Dict[str, Any]]) -> Earnings:
    """
    Derive total and per-ride earnings from scratch.

    Args:
        rides: Every ride of the driver
        bookings: Bookings joined with their ride under the ``ride`` key

    Returns:
        Earnings: Totals; ``total`` always equals the sum of ``per_ride``
    """
    earnings = Earnings(per_ride={ride["id"]: 0 for ride in rides})

    for booking in bookings:
        if not is_earnings_eligible(booking):
            continue
        amount = booking_amount(booking)
        ride_id = booking["ride_id"]
        earnings.per_ride[ride_id] = earnings.per_ride.get(ride_id, 0) + amount
        earnings.total += amount

    return earnings
