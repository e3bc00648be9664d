"""Driver dashboard commands for the Ridepool CLI."""

import click
from tabulate import tabulate

from ridepool.models.alert import DEFAULT_LOCATION
from ridepool.models.driver import format_aadhaar
from ridepool.models.user import UserType
from ridepool.services.alert_service import AlertServiceError
from ridepool.cli_module.utils import require_user_type, load_dashboard


@click.group(name="driver")
def driver_group():
    """Driver dashboard commands."""
    pass


@driver_group.command(name="summary", help="Show your dashboard: rides, earnings and vehicle.")
@require_user_type([UserType.DRIVER.value])
def summary(session):
    """Show the dashboard overview."""
    dashboard = load_dashboard(session)
    if dashboard is None:
        return

    status = "Verified" if dashboard.is_verified else "Pending Verification"
    click.echo("\n🚗 Driver Dashboard\n")
    click.echo(f"Welcome back! Phone: {session.phone} [{status}]")

    if not dashboard.is_verified:
        click.echo("\nYour account is pending admin verification. "
                   "You can view your profile but cannot post rides until verified.")

    click.echo()
    click.echo(tabulate(
        [
            ["Total Rides", dashboard.total_rides],
            ["Active Rides", dashboard.active_rides],
            ["Total Earnings", f"₹{dashboard.total_earnings:,.2f}"],
            ["Completed Rides", dashboard.driver.get('completed_rides') or 0],
            ["Vehicle", dashboard.vehicle or "N/A"],
        ],
        tablefmt="simple"
    ))


@driver_group.command(name="profile", help="Show your driver and vehicle information.")
@require_user_type([UserType.DRIVER.value])
def profile(session):
    """Show the driver profile."""
    dashboard = load_dashboard(session)
    if dashboard is None:
        return

    driver = dashboard.driver
    click.echo("\n👤 Personal Information:")
    click.echo(f"   Primary Phone: {driver.get('primary_phone')}")
    if driver.get('secondary_phone'):
        click.echo(f"   Secondary Phone: {driver['secondary_phone']}")
    click.echo(f"   Address: {driver.get('address')}")
    click.echo(f"   Aadhaar Number: {format_aadhaar(driver.get('aadhaar_number'))}")

    click.echo("\n🚘 Vehicle Information:")
    click.echo(f"   Vehicle Number: {driver.get('vehicle_number')}")
    click.echo(f"   Car Make: {driver.get('car_make')}")
    click.echo(f"   Car Model: {driver.get('car_model')}")


@driver_group.command(name="sos", help="Send an SOS alert to emergency services.")
@click.option("--location", default=DEFAULT_LOCATION, help="Where you are")
@require_user_type([UserType.DRIVER.value])
def sos(session, location):
    """Raise an SOS alert."""
    dashboard = load_dashboard(session)
    if dashboard is None:
        return

    click.echo("Sending SOS...")
    try:
        dashboard.raise_sos(location)
        click.echo("🚨 SOS Alert sent! Emergency services have been notified.")
    except AlertServiceError:
        click.echo("Failed to send SOS alert. Please try calling emergency services directly.", err=True)
