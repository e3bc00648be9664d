"""Driver review entity for the Ridepool application."""

from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class Review:
    """
    A driver's review of the customer behind a booking.

    Attributes:
        id: Unique identifier for the review
        driver_id: ID of the reviewing driver
        customer_id: ID of the reviewed customer
        booking_id: Booking the review is about, at most one review each
        rating: Rating from 1 to 5
        review: Free text comment
        created_at: When the review was written
    """
    driver_id: str
    customer_id: str
    booking_id: str
    rating: int
    review: str = ""
    id: str = None
    created_at: str = None

    def __post_init__(self):
        """Initialize default values."""
        if self.id is None:
            self.id = str(uuid4())
        if self.created_at is None:
            self.created_at = datetime.now().isoformat()
