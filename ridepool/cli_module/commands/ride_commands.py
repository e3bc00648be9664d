"""Ride management commands for the Ridepool CLI."""

from datetime import datetime

import click
from tabulate import tabulate

from ridepool.models.ride import RideStatus
from ridepool.models.user import UserType
from ridepool.services.dashboard import DashboardError
from ridepool.services.ride_service import RideServiceError, RideValidationError
from ridepool.cli_module.utils import require_user_type, load_dashboard

DEPARTURE_FORMATS = ["%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"]


@click.group(name="ride")
def ride_group():
    """Post and manage your rides."""
    pass


def _format_time(value):
    """Render an ISO timestamp as a short readable string."""
    if not value:
        return "-"
    try:
        dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
        return dt.strftime('%Y-%m-%d %H:%M')
    except (ValueError, TypeError, AttributeError):
        return value


@ride_group.command(name="list")
@require_user_type([UserType.DRIVER.value])
def list_rides(session):
    """View your posted rides with their bookings and earnings."""
    dashboard = load_dashboard(session)
    if dashboard is None:
        return

    if not dashboard.rides:
        click.echo("No rides posted yet.")
        if dashboard.is_verified:
            click.echo("Post your first ride with: ridepool ride add")
        return

    table_data = []
    for ride in dashboard.rides:
        table_data.append([
            ride.get('id'),
            f"{ride.get('from_location')} → {ride.get('to_location')}",
            _format_time(ride.get('departure_time')),
            f"{ride.get('available_seats')}/{ride.get('total_seats')} available",
            f"₹{ride.get('price')} per seat",
            dashboard.booked_seats(ride),
            f"₹{dashboard.ride_earnings(ride):,.2f}",
            ride.get('status')
        ])

    click.echo("\n🚗 Your Rides:\n")
    click.echo(tabulate(
        table_data,
        headers=["Ride ID", "Route", "Departure", "Seats", "Price", "Booked", "Earnings", "Status"],
        tablefmt="grid"
    ))

    cancelled = [r for r in dashboard.rides if r.get('status') == RideStatus.CANCELLED.value]
    if cancelled:
        click.echo(f"\n{len(cancelled)} cancelled ride(s) - no earnings from those trips.")

    click.echo("\nTo complete a ride: ridepool ride complete <ride_id>")
    click.echo("To view bookings: ridepool ride bookings <ride_id>")


@ride_group.command(name="add")
@click.option("--from", "from_location", prompt="From location", help="Where the ride starts")
@click.option("--to", "to_location", prompt="To location", help="Where the ride ends")
@click.option("--price", prompt="Price per seat (₹)", help="Price per seat")
@click.option("--seats", type=click.IntRange(1, 8), prompt="Total seats", help="Seats offered (1-8)")
@click.option("--departure", type=click.DateTime(formats=DEPARTURE_FORMATS), prompt="Departure time",
              help="Departure time, e.g. 2025-01-31T09:30")
@require_user_type([UserType.DRIVER.value])
def add_ride(session, from_location, to_location, price, seats, departure):
    """Post a new ride."""
    dashboard = load_dashboard(session)
    if dashboard is None:
        return

    if not dashboard.is_verified:
        click.echo("Your account is pending admin verification. "
                   "You can view your profile but cannot post rides until verified.", err=True)
        return

    try:
        ride = dashboard.add_ride(from_location, to_location, price, seats, departure)
        click.echo("Ride added successfully!")
        click.echo(f"Ride ID: {ride['id']}")
    except RideValidationError as e:
        click.echo(str(e), err=True)
    except RideServiceError as e:
        click.echo(f"Failed to add ride. Please try again. ({str(e)})", err=True)
    except DashboardError as e:
        click.echo(str(e), err=True)


@ride_group.command(name="complete")
@click.argument('ride_id', required=True)
@click.option("--confirm", is_flag=True, help="Confirm completion without prompting")
@require_user_type([UserType.DRIVER.value])
def complete_ride(session, ride_id, confirm):
    """Mark one of your active rides as completed."""
    dashboard = load_dashboard(session)
    if dashboard is None:
        return

    if not confirm and not click.confirm("Are you sure you want to mark this ride as completed?"):
        click.echo("Ride was not changed.")
        return

    try:
        ride = dashboard.complete_ride(ride_id)
        click.echo("Ride marked as completed and driver stats updated!")
        click.echo(f"Earnings for this ride: ₹{dashboard.ride_earnings(ride):,.2f}")
        click.echo(f"Total earnings: ₹{dashboard.total_earnings:,.2f}")
    except RideServiceError as e:
        click.echo(f"Failed to complete ride. Please try again. ({str(e)})", err=True)
    except DashboardError as e:
        click.echo(str(e), err=True)


@ride_group.command(name="cancel")
@click.argument('ride_id', required=True)
@click.option("--confirm", is_flag=True, help="Confirm cancellation without prompting")
@require_user_type([UserType.DRIVER.value])
def cancel_ride(session, ride_id, confirm):
    """Cancel one of your active rides and all of its bookings."""
    dashboard = load_dashboard(session)
    if dashboard is None:
        return

    if not confirm and not click.confirm(
            "Are you sure you want to cancel this ride? This action cannot be undone."):
        click.echo("Ride was not changed.")
        return

    try:
        dashboard.cancel_ride(ride_id)
        click.echo("Ride cancelled successfully! All associated bookings have been cancelled.")
    except RideServiceError as e:
        click.echo(f"Failed to cancel ride. Please try again. ({str(e)})", err=True)
    except DashboardError as e:
        click.echo(str(e), err=True)


@ride_group.command(name="edit-price")
@click.argument('ride_id', required=True)
@click.option("--price", prompt="New price per seat (₹)", help="New price per seat")
@require_user_type([UserType.DRIVER.value])
def edit_price(session, ride_id, price):
    """Change the price per seat of one of your active rides."""
    dashboard = load_dashboard(session)
    if dashboard is None:
        return

    try:
        dashboard.edit_price(ride_id, price)
        click.echo("Ride updated successfully!")
    except RideValidationError as e:
        click.echo(str(e), err=True)
    except RideServiceError as e:
        click.echo(f"Failed to update ride. Please try again. ({str(e)})", err=True)
    except DashboardError as e:
        click.echo(str(e), err=True)


@ride_group.command(name="bookings")
@click.argument('ride_id', required=True)
@require_user_type([UserType.DRIVER.value])
def ride_bookings(session, ride_id):
    """View the confirmed and completed bookings of a ride."""
    dashboard = load_dashboard(session)
    if dashboard is None:
        return

    try:
        bookings = dashboard.booking_summary(ride_id)
    except RideServiceError as e:
        click.echo(f"Failed to fetch booking summary. ({str(e)})", err=True)
        return

    if not bookings:
        click.echo("No confirmed bookings for this ride yet.")
        return

    table_data = [
        [b['id'], b.get('phone') or 'N/A', b['seats_booked'], b.get('status')]
        for b in bookings
    ]
    click.echo("\n📋 Booking Summary:\n")
    click.echo(tabulate(
        table_data,
        headers=["Booking ID", "Customer Phone", "Seats", "Status"],
        tablefmt="grid"
    ))
    click.echo("\nTo review a customer: ridepool review submit <booking_id> --rating 5")
