"""Services talking to the Ridepool data store."""
