"""Tests for the ride commands of the CLI."""

import json
from unittest.mock import patch

import pytest
import responses
from click.testing import CliRunner

from ridepool.cli_module import utils
from ridepool.cli_module.cli import cli
from ridepool.services.auth_service import AuthService
from conftest import TEST_BASE_URL, TEST_DRIVER_ID, make_ride, make_booking


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def signed_in(tmp_path, monkeypatch, driver_session):
    """Store a token and accept it as the test driver's session."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"token": "test-token"}))
    monkeypatch.setattr(utils, "CONFIG_FILE", str(config_file))
    with patch.object(AuthService, "require_user_type", return_value=driver_session):
        yield driver_session


class TestRideCommands:
    """Test class for ride commands."""

    @responses.activate
    def test_list_rides(self, runner, signed_in, driver_record, mock_dashboard_load):
        completed = make_ride("ride-1", status="completed", is_ride_completed=True, price=500,
                              available_seats=1)
        active = make_ride("ride-2", price=350)
        mock_dashboard_load(driver_record, [completed, active], [
            make_booking("b-1", "ride-1", 2),
            make_booking("b-2", "ride-1", 1),
        ])

        result = runner.invoke(cli, ["ride", "list"])

        assert result.exit_code == 0
        assert "Mumbai → Pune" in result.output
        assert "₹1,500.00" in result.output
        assert "₹0.00" in result.output
        assert "ride-2" in result.output

    @responses.activate
    def test_list_without_rides(self, runner, signed_in, driver_record, mock_dashboard_load):
        mock_dashboard_load(driver_record, [])

        result = runner.invoke(cli, ["ride", "list"])

        assert result.exit_code == 0
        assert "No rides posted yet." in result.output

    def test_list_when_signed_out(self, runner, tmp_path, monkeypatch):
        monkeypatch.setattr(utils, "CONFIG_FILE", str(tmp_path / "missing.json"))

        result = runner.invoke(cli, ["ride", "list"])

        assert result.exit_code == 0
        assert "You are not signed in" in result.output

    @responses.activate
    def test_list_without_driver_profile(self, runner, signed_in, mock_dashboard_load):
        mock_dashboard_load(None, [])

        result = runner.invoke(cli, ["ride", "list"])

        assert "Driver profile not found" in result.output
        assert "ridepool auth login" in result.output

    @responses.activate
    def test_complete_with_confirm_flag(self, runner, signed_in, driver_record, mock_dashboard_load):
        ride = make_ride("ride-1", price=400)
        completed = dict(ride, status="completed", is_ride_completed=True)
        mock_dashboard_load(driver_record, [ride])
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides/ride-1", json=ride, status=200)
        responses.add(responses.PATCH, f"{TEST_BASE_URL}/rides/ride-1", json=completed, status=200)
        responses.add(responses.GET, f"{TEST_BASE_URL}/drivers/{TEST_DRIVER_ID}", json=driver_record,
                      status=200)
        responses.add(responses.PATCH, f"{TEST_BASE_URL}/drivers/{TEST_DRIVER_ID}",
                      json=dict(driver_record, completed_rides=4), status=200)
        mock_dashboard_load(dict(driver_record, completed_rides=4), [completed],
                            [make_booking("b-1", "ride-1", 3)])

        result = runner.invoke(cli, ["ride", "complete", "ride-1", "--confirm"])

        assert result.exit_code == 0
        assert "Ride marked as completed and driver stats updated!" in result.output
        assert "Earnings for this ride: ₹1,200.00" in result.output

    @responses.activate
    def test_declined_confirmation_changes_nothing(self, runner, signed_in, driver_record,
                                                   mock_dashboard_load):
        mock_dashboard_load(driver_record, [make_ride("ride-1")])

        result = runner.invoke(cli, ["ride", "cancel", "ride-1"], input="n\n")

        assert "Ride was not changed." in result.output
        assert not any("/rides/ride-1" in c.request.url for c in responses.calls)

    @responses.activate
    def test_unverified_driver_cannot_add_ride(self, runner, signed_in, driver_record,
                                               mock_dashboard_load):
        mock_dashboard_load(dict(driver_record, is_verified=False), [])

        result = runner.invoke(cli, [
            "ride", "add", "--from", "Mumbai", "--to", "Pune", "--price", "500",
            "--seats", "4", "--departure", "2024-06-10T09:30"
        ])

        assert "pending admin verification" in result.output
        assert not any(c.request.method == "POST" for c in responses.calls)

    def test_add_ride_rejects_too_many_seats(self, runner, signed_in):
        result = runner.invoke(cli, [
            "ride", "add", "--from", "Mumbai", "--to", "Pune", "--price", "500",
            "--seats", "12", "--departure", "2024-06-10T09:30"
        ])

        assert result.exit_code != 0
        assert "--seats" in result.output

    @responses.activate
    def test_edit_price_with_invalid_price(self, runner, signed_in, driver_record, mock_dashboard_load):
        mock_dashboard_load(driver_record, [make_ride("ride-1")])

        result = runner.invoke(cli, ["ride", "edit-price", "ride-1", "--price", "abc"])

        assert "Please enter a valid number for price." in result.output
        assert not any(c.request.method == "PATCH" for c in responses.calls)

    @responses.activate
    def test_booking_summary_table(self, runner, signed_in, driver_record, mock_dashboard_load):
        mock_dashboard_load(driver_record, [make_ride("ride-1")])
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides/ride-1", json=make_ride("ride-1"), status=200)
        responses.add(responses.GET, f"{TEST_BASE_URL}/bookings/query",
                      json=[make_booking("b-1", "ride-1", 2, user_id="customer-1")], status=200)
        responses.add(responses.GET, f"{TEST_BASE_URL}/users/query",
                      json=[{"id": "customer-1", "phone": "9000000001"}], status=200)

        result = runner.invoke(cli, ["ride", "bookings", "ride-1"])

        assert result.exit_code == 0
        assert "9000000001" in result.output
        assert "b-1" in result.output

    @responses.activate
    def test_bookings_of_another_drivers_ride(self, runner, signed_in, driver_record, mock_dashboard_load):
        ride = dict(make_ride("ride-9"), driver_id="another-driver")
        mock_dashboard_load(driver_record, [])
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides/ride-9", json=ride, status=200)

        result = runner.invoke(cli, ["ride", "bookings", "ride-9"])

        assert "You can only manage your own rides." in result.output
        assert not any("/bookings/" in c.request.url or "/users/" in c.request.url
                       for c in responses.calls)

    @responses.activate
    def test_complete_reports_success_when_reload_fails(self, runner, signed_in, driver_record,
                                                        mock_dashboard_load):
        """The ride was completed, so the success message is shown despite the reload error."""
        ride = make_ride("ride-1")
        mock_dashboard_load(driver_record, [ride])
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides/ride-1", json=ride, status=200)
        responses.add(responses.PATCH, f"{TEST_BASE_URL}/rides/ride-1",
                      json=dict(ride, status="completed", is_ride_completed=True), status=200)
        responses.add(responses.GET, f"{TEST_BASE_URL}/drivers/{TEST_DRIVER_ID}", json=driver_record,
                      status=200)
        responses.add(responses.PATCH, f"{TEST_BASE_URL}/drivers/{TEST_DRIVER_ID}",
                      json=dict(driver_record, completed_rides=4), status=200)
        responses.add(responses.GET, f"{TEST_BASE_URL}/drivers/query", json={"error": "boom"}, status=500)

        result = runner.invoke(cli, ["ride", "complete", "ride-1", "--confirm"])

        assert result.exit_code == 0
        assert "Ride marked as completed and driver stats updated!" in result.output
        assert "Failed to complete ride" not in result.output
