"""SOS alert entity for the Ridepool application."""

from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

DEFAULT_LOCATION = "Current Location"


@dataclass
class SOSAlert:
    """An emergency alert raised by a driver."""
    driver_id: str
    location: str = DEFAULT_LOCATION
    status: str = "active"
    id: str = None
    created_at: str = None

    def __post_init__(self):
        if self.id is None:
            self.id = str(uuid4())
        if self.created_at is None:
            self.created_at = datetime.now().isoformat()
