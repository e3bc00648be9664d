"""Ride entity for the Ridepool application."""

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4


class RideStatus(Enum):
    """Possible statuses for a ride."""
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class InvalidRideTransition(Exception):
    """Raised when a ride is asked to leave a terminal status."""
    pass


@dataclass
class Ride:
    """
    Represents a ride offered by a driver.

    The status and the ``is_ride_completed`` flag always move together:

    ========== ==================
    status     is_ride_completed
    ========== ==================
    active     None
    completed  True
    cancelled  False
    ========== ==================

    Attributes:
        id: Unique identifier for the ride
        driver_id: ID of the driver offering the ride
        from_location: Where the ride starts
        to_location: Where the ride ends
        price: Price per seat
        total_seats: Seats offered
        available_seats: Seats not yet booked
        departure_time: ISO formatted departure time
        status: Current status of the ride
        is_ride_completed: Completion flag, True when earnings are eligible
        created_at: When the ride was posted
    """
    driver_id: str
    from_location: str
    to_location: str
    price: float
    total_seats: int
    departure_time: str
    id: str = None
    available_seats: Optional[int] = None
    status: str = RideStatus.ACTIVE.value
    is_ride_completed: Optional[bool] = None
    created_at: str = None

    def __post_init__(self):
        """Initialize default values."""
        if self.id is None:
            self.id = str(uuid4())
        if self.created_at is None:
            self.created_at = datetime.now().isoformat()
        if self.available_seats is None:
            self.available_seats = self.total_seats

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Ride":
        """Build a ride from a stored record, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in record.items() if k in known})

    @property
    def is_active(self) -> bool:
        """Check if the ride can still change status."""
        return self.status == RideStatus.ACTIVE.value

    def _require_active(self, action: str) -> None:
        if not self.is_active:
            raise InvalidRideTransition(
                f"Cannot {action} ride with status {self.status}.")

    def complete(self) -> Dict[str, Any]:
        """Mark the ride completed and return the changed fields."""
        self._require_active("complete")
        self.status = RideStatus.COMPLETED.value
        self.is_ride_completed = True
        return {"status": self.status, "is_ride_completed": True}

    def cancel(self) -> Dict[str, Any]:
        """Cancel the ride and return the changed fields."""
        self._require_active("cancel")
        self.status = RideStatus.CANCELLED.value
        self.is_ride_completed = False
        return {"status": self.status, "is_ride_completed": False}

    def change_price(self, price: float) -> Dict[str, Any]:
        """Set a new price per seat and return the changed fields."""
        self._require_active("edit")
        self.price = price
        return {"price": price}
