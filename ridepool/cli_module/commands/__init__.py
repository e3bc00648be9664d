"""Command modules for the Ridepool CLI."""

from ridepool.cli_module.commands.auth_commands import auth_group
from ridepool.cli_module.commands.driver_commands import driver_group
from ridepool.cli_module.commands.ride_commands import ride_group
from ridepool.cli_module.commands.review_commands import review_group

__all__ = [
    'auth_group',
    'driver_group',
    'ride_group',
    'review_group',
]
