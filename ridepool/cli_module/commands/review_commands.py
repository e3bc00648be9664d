"""Customer review commands for the Ridepool CLI."""

import click

from ridepool.models.review import MIN_RATING, MAX_RATING
from ridepool.models.user import UserType
from ridepool.services.dashboard import DashboardError
from ridepool.services.review_service import ReviewServiceError, ReviewAlreadyExistsError
from ridepool.cli_module.utils import require_user_type, load_dashboard


@click.group(name="review")
def review_group():
    """Review the customers of your rides."""
    pass


@review_group.command(name="submit")
@click.argument('booking_id', required=True)
@click.option("--rating", type=click.IntRange(MIN_RATING, MAX_RATING), default=5,
              help="Rating from 1 to 5 stars")
@click.option("--comment", default="", help="Your review of the customer")
@require_user_type([UserType.DRIVER.value])
def submit_review(session, booking_id, rating, comment):
    """Review the customer of a booking."""
    dashboard = load_dashboard(session)
    if dashboard is None:
        return

    try:
        dashboard.submit_review(booking_id, rating, comment)
        click.echo("Review submitted successfully!")
    except ReviewAlreadyExistsError as e:
        click.echo(str(e), err=True)
    except ReviewServiceError as e:
        click.echo(f"Failed to submit review. Please try again. ({str(e)})", err=True)
    except DashboardError as e:
        click.echo(str(e), err=True)
