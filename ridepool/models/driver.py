"""Driver entity for the Ridepool application."""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import uuid4


@dataclass
class Driver:
    """
    Represents a driver profile attached to a user account.

    Attributes:
        id: Unique identifier for the driver profile
        user_id: ID of the user account owning the profile
        primary_phone: Driver's primary phone number
        address: Driver's postal address
        aadhaar_number: 12 digit Aadhaar identity number
        vehicle_number: Registration number of the vehicle
        car_make: Vehicle manufacturer
        car_model: Vehicle model
        photograph_url: Link to the driver's photograph
        driving_license_url: Link to the scanned driving license
        secondary_phone: Optional secondary phone number
        is_verified: Whether an admin has verified the driver
        total_earnings: Persisted earnings column, not maintained by the dashboard
        completed_rides: Number of rides the driver has marked completed
        created_at: When the profile was created
    """
    user_id: str
    primary_phone: str
    address: str
    aadhaar_number: str
    vehicle_number: str
    car_make: str
    car_model: str
    photograph_url: str = ""
    driving_license_url: str = ""
    secondary_phone: Optional[str] = None
    is_verified: bool = False
    total_earnings: float = 0.0
    completed_rides: int = 0
    id: str = None
    created_at: str = None

    def __post_init__(self):
        """Initialize default values."""
        if self.id is None:
            self.id = str(uuid4())
        if self.created_at is None:
            self.created_at = datetime.now().isoformat()

    @property
    def vehicle(self) -> str:
        """Get the vehicle description."""
        return vehicle_label(self.__dict__)


def vehicle_label(driver: dict) -> str:
    """Format make and model of a driver record as a single label."""
    return f"{driver.get('car_make', '')} {driver.get('car_model', '')}".strip()


def format_aadhaar(number: str) -> str:
    """Group a 12 digit Aadhaar number as ``1234 5678 9012``."""
    return re.sub(r"(\d{4})(\d{4})(\d{4})", r"\1 \2 \3", number or "")
