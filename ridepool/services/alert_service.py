"""SOS alert service for Ridepool application."""

import logging
from typing import Dict, Any, Optional

from ridepool.models.alert import SOSAlert, DEFAULT_LOCATION
from ridepool.services.store import DataStore, StoreError

logger = logging.getLogger(__name__)


class AlertServiceError(Exception):
    """Custom exception for SOS alert errors."""
    pass


class AlertService:
    """Service for raising emergency alerts."""

    def __init__(self, store: Optional[DataStore] = None):
        self.store = store or DataStore()

    def raise_sos(self, driver: Dict[str, Any], location: str = DEFAULT_LOCATION) -> Dict[str, Any]:
        """
        Record an active SOS alert for a driver.

        Raises:
            AlertServiceError: If the alert cannot be stored
        """
        alert = SOSAlert(driver_id=driver["id"], location=location or DEFAULT_LOCATION)
        try:
            saved = self.store.insert("sos_alerts", alert.__dict__)
        except StoreError as e:
            raise AlertServiceError(f"Failed to send SOS alert: {str(e)}")

        logger.warning(f"SOS alert {alert.id} raised by driver {driver['id']} at {alert.location}")
        return saved
