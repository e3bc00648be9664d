"""Review service for Ridepool application."""

import logging
from typing import Dict, Any, Optional

from ridepool.models.review import Review, MIN_RATING, MAX_RATING
from ridepool.services.store import DataStore, StoreError, RecordNotFoundError, ConflictError

logger = logging.getLogger(__name__)

REVIEWS_COLLECTION = "driver_reviews"


class ReviewServiceError(Exception):
    """Custom exception for review service errors."""
    pass


class ReviewAlreadyExistsError(ReviewServiceError):
    """Raised when the booking has already been reviewed."""
    pass


class ReviewService:
    """Service for drivers reviewing their customers."""

    def __init__(self, store: Optional[DataStore] = None):
        self.store = store or DataStore()

    def submit_review(self, driver: Dict[str, Any], booking_id: str, rating: int,
                      comment: str = "") -> Dict[str, Any]:
        """
        Review the customer of one booking.

        A booking can be reviewed once. The existing-review lookup runs
        before the insert; a store that enforces uniqueness on the booking
        ID answers the insert with a conflict, which is reported the same
        way.

        Args:
            driver: Driver profile writing the review
            booking_id: Booking being reviewed
            rating: Rating value (1-5 stars)
            comment: Free text review

        Returns:
            Dict: The stored review

        Raises:
            ReviewAlreadyExistsError: If the booking already has a review
            ReviewServiceError: If the review cannot be stored
        """
        rating = _parse_rating(rating)

        try:
            booking = self.store.get("bookings", booking_id)
            ride = self.store.get("rides", booking["ride_id"])
        except RecordNotFoundError:
            raise ReviewServiceError(f"Booking with ID {booking_id} not found")
        except StoreError as e:
            raise ReviewServiceError(f"Failed to retrieve booking: {str(e)}")

        if ride.get("driver_id") != driver["id"]:
            raise ReviewServiceError("You can only review customers of your own rides.")

        try:
            existing = self.store.select(REVIEWS_COLLECTION, {"booking_id": booking_id})
            if existing:
                raise ReviewAlreadyExistsError(
                    "You have already reviewed this customer for this booking.")

            review = Review(
                driver_id=driver["id"],
                customer_id=booking.get("user_id"),
                booking_id=booking_id,
                rating=rating,
                review=comment or ""
            )
            saved = self.store.insert(REVIEWS_COLLECTION, review.__dict__)
        except ConflictError:
            raise ReviewAlreadyExistsError(
                "You have already reviewed this customer for this booking.")
        except StoreError as e:
            raise ReviewServiceError(f"Failed to submit review: {str(e)}")

        logger.info(f"Driver {driver['id']} reviewed booking {booking_id}")
        return saved


def _parse_rating(value: Any) -> int:
    """Parse a star rating, rejecting anything outside 1..5."""
    message = f"Rating must be between {MIN_RATING} and {MAX_RATING} stars."
    try:
        rating = int(value)
    except (TypeError, ValueError):
        raise ReviewServiceError(message)
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ReviewServiceError(message)
    return rating
