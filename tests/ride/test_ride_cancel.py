"""Tests for ride cancellation functionality in Ridepool."""

import logging

import pytest
import responses
from responses import matchers

from ridepool.models.ride import RideStatus
from ridepool.services.ride_service import RideService, RideServiceError
from conftest import TEST_BASE_URL, make_ride

TEST_RIDE_ID = "ride-67890"


@pytest.fixture
def ride_service():
    return RideService()


class TestRideCancel:
    """Test class for ride cancellation functionality."""

    @responses.activate
    def test_cancel_active_ride(self, ride_service, driver_record):
        """Cancelling sets the status and flag, then cancels the bookings."""
        ride = make_ride(TEST_RIDE_ID)
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides/{TEST_RIDE_ID}", json=ride, status=200)

        cancelled_ride = dict(ride, status="cancelled", is_ride_completed=False)
        responses.add(
            responses.PATCH,
            f"{TEST_BASE_URL}/rides/{TEST_RIDE_ID}",
            json=cancelled_ride,
            status=200,
            match=[matchers.json_params_matcher({"status": "cancelled", "is_ride_completed": False})]
        )
        responses.add(
            responses.PATCH,
            f"{TEST_BASE_URL}/bookings/query",
            json=[],
            status=200,
            match=[
                matchers.query_param_matcher({"ride_id": TEST_RIDE_ID}),
                matchers.json_params_matcher({"status": "cancelled"})
            ]
        )

        result = ride_service.cancel_ride(driver_record, TEST_RIDE_ID)

        assert result["status"] == RideStatus.CANCELLED.value
        assert result["is_ride_completed"] is False
        assert len(responses.calls) == 3  # GET ride, PATCH ride, PATCH bookings

    @responses.activate
    def test_booking_cleanup_failure_keeps_ride_cancelled(self, ride_service, driver_record, caplog):
        """A failed booking cancellation is logged and not raised."""
        ride = make_ride(TEST_RIDE_ID)
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides/{TEST_RIDE_ID}", json=ride, status=200)
        responses.add(
            responses.PATCH,
            f"{TEST_BASE_URL}/rides/{TEST_RIDE_ID}",
            json=dict(ride, status="cancelled", is_ride_completed=False),
            status=200
        )
        responses.add(
            responses.PATCH,
            f"{TEST_BASE_URL}/bookings/query",
            json={"error": "boom"},
            status=500
        )

        with caplog.at_level(logging.ERROR):
            result = ride_service.cancel_ride(driver_record, TEST_RIDE_ID)

        assert result["status"] == "cancelled"
        assert f"Error cancelling bookings of ride {TEST_RIDE_ID}" in caplog.text

    @responses.activate
    def test_cancel_ride_update_failure(self, ride_service, driver_record):
        """If the ride update fails the bookings are left alone."""
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides/{TEST_RIDE_ID}",
                      json=make_ride(TEST_RIDE_ID), status=200)
        responses.add(responses.PATCH, f"{TEST_BASE_URL}/rides/{TEST_RIDE_ID}",
                      json={"error": "boom"}, status=500)

        with pytest.raises(RideServiceError) as excinfo:
            ride_service.cancel_ride(driver_record, TEST_RIDE_ID)

        assert "Failed to cancel ride" in str(excinfo.value)
        assert len(responses.calls) == 2

    @responses.activate
    @pytest.mark.parametrize("status,flag", [("completed", True), ("cancelled", False)])
    def test_cannot_cancel_finished_ride(self, ride_service, driver_record, status, flag):
        """Completed and cancelled rides are terminal."""
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides/{TEST_RIDE_ID}",
                      json=make_ride(TEST_RIDE_ID, status=status, is_ride_completed=flag), status=200)

        with pytest.raises(RideServiceError) as excinfo:
            ride_service.cancel_ride(driver_record, TEST_RIDE_ID)

        assert f"Cannot cancel ride with status {status}" in str(excinfo.value)
        assert len(responses.calls) == 1

    @responses.activate
    def test_cancel_another_drivers_ride(self, ride_service, driver_record):
        """Drivers can only cancel their own rides."""
        ride = make_ride(TEST_RIDE_ID)
        ride["driver_id"] = "another-driver"
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides/{TEST_RIDE_ID}", json=ride, status=200)

        with pytest.raises(RideServiceError) as excinfo:
            ride_service.cancel_ride(driver_record, TEST_RIDE_ID)

        assert "your own rides" in str(excinfo.value)
        assert len(responses.calls) == 1

    @responses.activate
    def test_cancel_missing_ride(self, ride_service, driver_record):
        """A ride that does not exist cannot be cancelled."""
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides/{TEST_RIDE_ID}",
                      json={"error": "not found"}, status=404)

        with pytest.raises(RideServiceError) as excinfo:
            ride_service.cancel_ride(driver_record, TEST_RIDE_ID)

        assert "not found" in str(excinfo.value)
