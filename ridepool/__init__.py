"""Ridepool: a driver dashboard for shared rides."""

__version__ = "0.1.0"
