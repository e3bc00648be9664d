"""Main CLI entry point for Ridepool application."""

import click

# Set context settings to properly display help for all commands
CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 120,
    "show_default": True
}

from ridepool.cli_module.commands import (
    auth_group,
    driver_group,
    ride_group,
    review_group,
)


@click.group(context_settings=CONTEXT_SETTINGS)
def cli():
    """Ridepool driver dashboard."""
    pass


# Register all command groups
cli.add_command(auth_group)
cli.add_command(driver_group)
cli.add_command(ride_group)
cli.add_command(review_group)


def main():
    """Entry point for the application."""
    cli()


if __name__ == '__main__':
    main()
