"""Authentication commands for the Ridepool CLI."""

import click

from ridepool.services.auth_service import AuthService, AuthError
from ridepool.cli_module.utils import save_token, get_token, clear_token


@click.group(name="auth")
def auth_group():
    """Authentication commands."""
    pass


@auth_group.command(name="register")
@click.option("--phone", prompt=True, help="Your phone number, used to sign in")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Your password")
@click.option("--address", prompt=True, help="Your address")
@click.option("--aadhaar", prompt="Aadhaar number", help="Your 12 digit Aadhaar number")
@click.option("--vehicle-number", prompt=True, help="Registration number of your vehicle")
@click.option("--car-make", prompt=True, help="Make of your car")
@click.option("--car-model", prompt=True, help="Model of your car")
@click.option("--secondary-phone", default=None, help="Optional secondary phone number")
def register(phone, password, address, aadhaar, vehicle_number, car_make, car_model, secondary_phone):
    """Register as a driver."""
    try:
        result = AuthService.register_driver(
            phone, password, address, aadhaar, vehicle_number, car_make, car_model,
            secondary_phone=secondary_phone
        )
        save_token(result["token"])
        click.echo(f"Driver {phone} registered successfully!")
        click.echo("Your account requires verification before you can post rides.")
        click.echo("You are now logged in.")
    except AuthError as e:
        click.echo(f"Error during registration: {str(e)}", err=True)


@auth_group.command()
@click.option("--phone", prompt=True, help="Your phone number")
@click.option("--password", prompt=True, hide_input=True, help="Your password")
def login(phone, password):
    """Sign in to your account."""
    try:
        result = AuthService.login(phone, password)
        save_token(result["token"])
        click.echo(f"Signed in as {result['user']['phone']} ({result['user']['role']}).")
    except AuthError as e:
        click.echo(f"Error during login: {str(e)}", err=True)


@auth_group.command()
def logout():
    """Sign out and forget the stored session."""
    if clear_token():
        click.echo("You have been signed out.")
    else:
        click.echo("You are not signed in.")


@auth_group.command()
def whoami():
    """Show the signed in user."""
    token = get_token()
    if not token:
        click.echo("You are not signed in.")
        return

    try:
        session = AuthService.session_from_token(token)
        click.echo(f"Phone: {session.phone}")
        click.echo(f"Role: {session.role}")
    except AuthError as e:
        click.echo(f"Error: {str(e)}", err=True)
