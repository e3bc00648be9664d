"""User entity for the Ridepool application."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import uuid4


class UserType(Enum):
    """Roles a user account can hold."""
    DRIVER = "driver"
    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass
class User:
    """
    Represents a user account.

    Attributes:
        id: Unique identifier for the user
        phone: Phone number used to sign in
        password: Hashed password
        role: Role of the account (driver, customer or admin)
        created_at: When the account was created
    """
    phone: str
    password: str
    role: str
    id: str = None
    created_at: str = None

    def __post_init__(self):
        """Initialize default values."""
        if self.id is None:
            self.id = str(uuid4())
        if self.created_at is None:
            self.created_at = datetime.now().isoformat()

    @property
    def is_driver(self) -> bool:
        """Check if user is a driver."""
        return self.role == UserType.DRIVER.value
