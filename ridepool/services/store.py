"""Client for the Ridepool JSON data store."""

import os
import logging
from typing import Dict, Any, Optional, List, Iterable

import requests
from dotenv import load_dotenv

load_dotenv()

# Set up logging
logging.basicConfig(level=os.getenv("RIDEPOOL_LOG_LEVEL", "WARNING"))
logger = logging.getLogger(__name__)

# Base URL for the data store
BASE_URL = os.getenv("RIDEPOOL_API_URL", "http://localhost:3000")

# Unset means no timeout, the same as a plain requests call
_timeout = os.getenv("RIDEPOOL_REQUEST_TIMEOUT")
REQUEST_TIMEOUT = float(_timeout) if _timeout else None


class StoreError(Exception):
    """Custom exception for data store errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RecordNotFoundError(StoreError):
    """Raised when a point lookup finds no row."""
    pass


class ConflictError(StoreError):
    """Raised when an insert violates a uniqueness constraint."""
    pass


def encode_value(value: Any) -> str:
    """
    Encode a filter value the way the store compares it.

    Booleans become ``true``/``false`` and None becomes ``null`` so that the
    tri-state completion flag can be filtered on.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class DataStore:
    """Query and mutation client for the data store collections."""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or BASE_URL).rstrip("/")

    def get(self, collection: str, record_id: str) -> Dict[str, Any]:
        """
        Fetch a single row by its ID.

        Raises:
            RecordNotFoundError: If no row has this ID
            StoreError: If the request fails
        """
        response = self._send("GET", f"{collection}/{record_id}")
        if response.status_code == 404:
            raise RecordNotFoundError(
                f"No {collection} record with ID {record_id}", 404)
        self._raise_for_status(response, f"Failed to fetch {collection}/{record_id}")
        return response.json()

    def select(self, collection: str, filters: Optional[Dict[str, Any]] = None,
               in_filters: Optional[Dict[str, Iterable[Any]]] = None,
               order_by: Optional[str] = None, descending: bool = False) -> List[Dict[str, Any]]:
        """
        Fetch the rows of a collection matching every filter.

        Args:
            collection: Collection to read
            filters: Field equality filters
            in_filters: Field inclusion filters, a row matches if its value is in the list
            order_by: Field to sort by
            descending: Sort from highest to lowest

        Returns:
            List[Dict]: Matching rows, empty if the collection does not exist
        """
        in_filters = {k: list(v) for k, v in (in_filters or {}).items()}
        if any(not values for values in in_filters.values()):
            # Nothing can be in an empty list
            return []

        params = {k: encode_value(v) for k, v in (filters or {}).items()}
        for key, values in in_filters.items():
            params[f"{key}__in"] = ",".join(encode_value(v) for v in values)
        if order_by:
            params["_sort"] = order_by
            params["_order"] = "desc" if descending else "asc"

        response = self._send("GET", f"{collection}/query", params=params)
        if response.status_code == 404:
            return []
        self._raise_for_status(response, f"Failed to query {collection}")
        return response.json() or []

    def single(self, collection: str, filters: Dict[str, Any]) -> Dict[str, Any]:
        """
        Fetch exactly one row matching the filters.

        Raises:
            RecordNotFoundError: If no row matches
        """
        rows = self.select(collection, filters)
        if not rows:
            described = ", ".join(f"{k}={v}" for k, v in filters.items())
            raise RecordNotFoundError(f"No {collection} record with {described}", 404)
        return rows[0]

    def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a row and return it as stored.

        Raises:
            ConflictError: If the row violates a uniqueness constraint
            StoreError: If the request fails
        """
        response = self._send("POST", collection, json=record)
        if response.status_code == 409:
            raise ConflictError(f"Duplicate {collection} record", 409)
        self._raise_for_status(response, f"Failed to insert into {collection}")
        return response.json()

    def update(self, collection: str, record_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Merge ``changes`` into one row and return the updated row."""
        response = self._send("PATCH", f"{collection}/{record_id}", json=changes)
        if response.status_code == 404:
            raise RecordNotFoundError(
                f"No {collection} record with ID {record_id}", 404)
        self._raise_for_status(response, f"Failed to update {collection}/{record_id}")
        return response.json()

    def update_where(self, collection: str, changes: Dict[str, Any],
                     filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Merge ``changes`` into every row matching the filters."""
        params = {k: encode_value(v) for k, v in filters.items()}
        response = self._send("PATCH", f"{collection}/query", params=params, json=changes)
        self._raise_for_status(response, f"Failed to update {collection}")
        return response.json() or []

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}/{path}"
        try:
            return requests.request(method, url, timeout=REQUEST_TIMEOUT, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {str(e)}")
            raise StoreError(f"Could not reach the data store: {str(e)}")

    @staticmethod
    def _raise_for_status(response: requests.Response, message: str) -> None:
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            logger.error(f"{message}: {str(e)}")
            raise StoreError(f"{message}: {str(e)}", response.status_code)
