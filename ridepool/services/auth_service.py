"""Authentication service for Ridepool application."""

import os
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional, List

import bcrypt
import jwt
from dotenv import load_dotenv

from ridepool.models.driver import Driver
from ridepool.models.user import User, UserType
from ridepool.services.store import DataStore, StoreError, RecordNotFoundError

load_dotenv()

logger = logging.getLogger(__name__)

# Signing secret, override with JWT_SECRET outside development
JWT_SECRET = os.getenv("JWT_SECRET", "ridepool_secret_key")
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = 24

_store = DataStore()


class AuthError(Exception):
    """Custom exception for authentication errors."""
    pass


@dataclass(frozen=True)
class Session:
    """
    The signed in user, handed to the dashboard at construction.

    Attributes:
        user_id: ID of the signed in user
        role: Role of the user (driver, customer or admin)
        phone: Phone number of the user
        token: JWT the session was built from
    """
    user_id: str
    role: str
    phone: str
    token: Optional[str] = None

    @property
    def is_driver(self) -> bool:
        """Check if the session belongs to a driver."""
        return self.role == UserType.DRIVER.value


class AuthService:
    """Service for handling user authentication."""

    @staticmethod
    def _hash_password(password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            str: Hashed password
        """
        password_bytes = password.encode('utf-8')
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password_bytes, salt)
        return hashed.decode('utf-8')

    @staticmethod
    def _verify_password(plain_password: str, hashed_password: str) -> bool:
        """Check a plain password against its bcrypt hash."""
        if not hashed_password:
            return False

        try:
            return bcrypt.checkpw(plain_password.encode('utf-8'),
                                  hashed_password.encode('utf-8'))
        except ValueError as e:
            logger.error(f"Password verification error: {str(e)}")
            return False

    @staticmethod
    def _generate_jwt(user_id: str, role: str) -> str:
        """
        Generate a JWT token for a user.

        Args:
            user_id: User ID to encode in the token
            role: Role of the user

        Returns:
            str: JWT token
        """
        now = datetime.now(timezone.utc)
        payload = {
            "user_id": user_id,
            "role": role,
            "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
            "iat": now
        }
        return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)

    @staticmethod
    def _verify_jwt(token: str) -> Dict[str, Any]:
        """
        Verify a JWT token and return its payload.

        Raises:
            AuthError: If token is invalid or expired
        """
        try:
            return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        except jwt.PyJWTError as e:
            raise AuthError(f"Invalid token: {str(e)}")

    @staticmethod
    def register_driver(phone: str, password: str, address: str, aadhaar_number: str,
                        vehicle_number: str, car_make: str, car_model: str,
                        secondary_phone: Optional[str] = None,
                        photograph_url: str = "", driving_license_url: str = "") -> Dict[str, Any]:
        """
        Register a new driver account and its driver profile.

        The profile starts unverified; an admin verifies it outside this
        application.

        Returns:
            Dict: User data, driver profile and token

        Raises:
            AuthError: If registration fails
        """
        try:
            if _store.select("users", {"phone": phone}):
                raise AuthError(f"User with phone {phone} already exists")

            user = User(
                phone=phone,
                password=AuthService._hash_password(password),
                role=UserType.DRIVER.value
            )
            logger.info(f"Creating new driver user: {phone}")
            saved_user = _store.insert("users", user.__dict__)

            driver = Driver(
                user_id=user.id,
                primary_phone=phone,
                secondary_phone=secondary_phone,
                address=address,
                aadhaar_number=aadhaar_number,
                vehicle_number=vehicle_number,
                car_make=car_make,
                car_model=car_model,
                photograph_url=photograph_url,
                driving_license_url=driving_license_url
            )
            saved_driver = _store.insert("drivers", driver.__dict__)

            saved_user.pop("password", None)
            return {
                "user": saved_user,
                "driver": saved_driver,
                "token": AuthService._generate_jwt(user.id, user.role)
            }

        except StoreError as e:
            raise AuthError(f"Registration failed: {str(e)}")

    @staticmethod
    def login(phone: str, password: str) -> Dict[str, Any]:
        """
        Login a user.

        Args:
            phone: User's phone number
            password: User's password

        Returns:
            Dict: User data with token

        Raises:
            AuthError: If login fails
        """
        try:
            users = _store.select("users", {"phone": phone})
        except StoreError as e:
            raise AuthError(f"Login failed: {str(e)}")

        if not users:
            raise AuthError(f"No user found with phone {phone}")

        user = users[0]
        if not AuthService._verify_password(password, user.get('password')):
            raise AuthError("Invalid password")

        token = AuthService._generate_jwt(user['id'], user['role'])
        user.pop('password', None)

        return {
            "user": user,
            "token": token
        }

    @staticmethod
    def verify_token(token: str) -> Dict[str, Any]:
        """
        Verify a token and return the associated user.

        Raises:
            AuthError: If token verification fails
        """
        payload = AuthService._verify_jwt(token)
        user_id = payload.get('user_id')

        if not user_id:
            raise AuthError("Invalid token payload")

        try:
            user = _store.get("users", user_id)
        except RecordNotFoundError:
            raise AuthError(f"User with ID {user_id} not found")
        except StoreError as e:
            raise AuthError(f"Token verification failed: {str(e)}")

        user.pop('password', None)
        return user

    @staticmethod
    def session_from_token(token: str) -> Session:
        """Build the session of the user a token belongs to."""
        user = AuthService.verify_token(token)
        return Session(
            user_id=user['id'],
            role=user.get('role'),
            phone=user.get('phone'),
            token=token
        )

    @staticmethod
    def require_user_type(token: str, required_types: List[str]) -> Session:
        """
        Verify that a user has one of the required roles.

        Args:
            token: JWT token for authentication
            required_types: List of allowed roles

        Returns:
            Session: Session of the authorized user

        Raises:
            AuthError: If user is not of the required role
        """
        payload = AuthService._verify_jwt(token)
        role = payload.get('role')

        if role not in required_types:
            allowed_types = ", ".join(required_types)
            raise AuthError(f"Access denied. This action requires one of these user types: {allowed_types}")

        return AuthService.session_from_token(token)
