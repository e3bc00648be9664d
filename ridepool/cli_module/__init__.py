"""Command line interface for the Ridepool dashboard."""
