"""Utility functions for the CLI interface."""

from functools import wraps
import os
import json
from typing import Optional, List

import click

from ridepool.services.auth_service import AuthService, AuthError, Session
from ridepool.services.dashboard import DriverDashboard, DashboardError, DriverProfileNotFound

# Config file to store auth token
CONFIG_DIR = os.path.expanduser("~/.ridepool")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")


def save_token(token: str) -> None:
    """Save auth token to config file."""
    config_dir = os.path.dirname(CONFIG_FILE)
    if not os.path.exists(config_dir):
        os.makedirs(config_dir)

    with open(CONFIG_FILE, 'w') as f:
        json.dump({"token": token}, f)


def get_token() -> Optional[str]:
    """Get auth token from config file."""
    if not os.path.exists(CONFIG_FILE):
        return None

    try:
        with open(CONFIG_FILE, 'r') as f:
            config = json.load(f)
            return config.get("token")
    except json.JSONDecodeError:
        return None


def clear_token() -> bool:
    """Remove the stored token. Returns False if there was none."""
    if not os.path.exists(CONFIG_FILE):
        return False
    os.remove(CONFIG_FILE)
    return True


def require_user_type(required_types: List[str]):
    """
    Decorator to require specific user types.

    The wrapped command receives the caller's ``Session`` as its first
    argument. Callers without a valid session of the right role are sent to
    the sign in command instead.
    """
    def decorator(f):
        @wraps(f)
        def wrapped(*args, **kwargs):
            token = get_token()
            if not token:
                click.echo("You are not signed in. Please sign in with 'ridepool auth login'.", err=True)
                return

            try:
                session = AuthService.require_user_type(token, required_types)
            except AuthError as e:
                click.echo(f"Access denied: {str(e)}", err=True)
                click.echo("Please sign in with 'ridepool auth login'.", err=True)
                return

            return f(session, *args, **kwargs)
        return wrapped
    return decorator


def load_dashboard(session: Session) -> Optional[DriverDashboard]:
    """Build and load the dashboard, reporting load failures to the user."""
    dashboard = DriverDashboard(session)
    try:
        dashboard.refresh()
    except DriverProfileNotFound as e:
        click.echo(str(e), err=True)
        click.echo("Go to login: ridepool auth login", err=True)
        return None
    except DashboardError as e:
        click.echo(str(e), err=True)
        return None
    return dashboard
