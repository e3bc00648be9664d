"""Shared fixtures for the Ridepool tests."""

import pytest
import responses
from responses import matchers

from ridepool.services.auth_service import Session

TEST_BASE_URL = "http://localhost:3000"
TEST_USER_ID = "user-12345"
TEST_DRIVER_ID = "driver-12345"
TEST_PHONE = "9876543210"


@pytest.fixture
def driver_session():
    """Session of a signed in driver."""
    return Session(user_id=TEST_USER_ID, role="driver", phone=TEST_PHONE, token="test-token")


@pytest.fixture
def driver_record():
    """Fixture for a verified driver profile."""
    return {
        "id": TEST_DRIVER_ID,
        "user_id": TEST_USER_ID,
        "photograph_url": "",
        "primary_phone": TEST_PHONE,
        "secondary_phone": None,
        "address": "12 MG Road, Pune",
        "aadhaar_number": "123456789012",
        "driving_license_url": "",
        "vehicle_number": "MH12AB1234",
        "car_make": "Maruti",
        "car_model": "Swift",
        "is_verified": True,
        "total_earnings": 0,
        "completed_rides": 3,
        "created_at": "2024-01-01T10:00:00"
    }


def make_ride(ride_id, status="active", is_ride_completed=None, price=500, total_seats=4,
              available_seats=None, created_at="2024-06-01T10:00:00"):
    """Build a ride record owned by the test driver."""
    return {
        "id": ride_id,
        "driver_id": TEST_DRIVER_ID,
        "from_location": "Mumbai",
        "to_location": "Pune",
        "price": price,
        "total_seats": total_seats,
        "available_seats": total_seats if available_seats is None else available_seats,
        "departure_time": "2024-06-10T09:30:00",
        "status": status,
        "is_ride_completed": is_ride_completed,
        "created_at": created_at
    }


def make_booking(booking_id, ride_id, seats_booked, status="confirmed", user_id="customer-1"):
    """Build a booking record."""
    return {
        "id": booking_id,
        "ride_id": ride_id,
        "user_id": user_id,
        "seats_booked": seats_booked,
        "status": status,
        "created_at": "2024-06-02T10:00:00"
    }


@pytest.fixture
def mock_dashboard_load():
    """
    Register the requests a dashboard refresh makes.

    Must be used inside an active ``responses`` mock. Returns a function
    taking the driver record, every ride, and the bookings of completed
    rides.
    """
    def register(driver, rides, bookings=None):
        responses.add(
            responses.GET,
            f"{TEST_BASE_URL}/drivers/query",
            json=[driver] if driver else [],
            status=200,
            match=[matchers.query_param_matcher({"user_id": driver["user_id"] if driver else TEST_USER_ID})]
        )
        if driver is None:
            return

        responses.add(
            responses.GET,
            f"{TEST_BASE_URL}/rides/query",
            json=rides,
            status=200,
            match=[matchers.query_param_matcher(
                {"driver_id": driver["id"], "_sort": "created_at", "_order": "desc"})]
        )

        completed = [r for r in rides if r["is_ride_completed"] is True]
        responses.add(
            responses.GET,
            f"{TEST_BASE_URL}/rides/query",
            json=completed,
            status=200,
            match=[matchers.query_param_matcher(
                {"driver_id": driver["id"], "is_ride_completed": "true"})]
        )
        if completed:
            responses.add(
                responses.GET,
                f"{TEST_BASE_URL}/bookings/query",
                json=bookings or [],
                status=200,
                match=[matchers.query_param_matcher(
                    {"ride_id__in": ",".join(r["id"] for r in completed)})]
            )
    return register
