"""
Authentication service for registration and login
"""
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import (DuplicateEmail, InternalError, InvalidCredentials,
                             ValidationError)
from app.core.logging_config import LoggingConfig
from app.core.metrics import auth_logins_total, auth_registrations_total
from app.core.security import TokenService, hash_password, verify_password
from app.repositories.user_repository import UserRepository

logger = LoggingConfig.get_logger(__name__)


def _require(email: Optional[str], password: Optional[str]):
    missing = [name for name, value in (("email", email), ("password", password))
               if not isinstance(value, str) or not value.strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


class AuthService:
    """Service for user registration and token-based login"""

    def __init__(self, db: Session, token_service: TokenService, token_lifetime_label: str = "24h"):
        self.db = db
        self.users = UserRepository(db)
        self.token_service = token_service
        self.token_lifetime_label = token_lifetime_label

    def register_user(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """
        Register a new user

        Args:
            email: Email address, stored exactly as given
            password: Plain text password

        Returns:
            Public user projection {id, email}

        Raises:
            ValidationError: If email or password is missing
            DuplicateEmail: If email already exists
        """
        try:
            _require(email, password)
            password_hash = hash_password(password)
        except ValidationError:
            auth_registrations_total.labels(status="invalid").inc()
            raise

        try:
            if self.users.get_by_email(email):
                auth_registrations_total.labels(status="duplicate").inc()
                raise DuplicateEmail()
            user = self.users.add(email=email, password_hash=password_hash)
        except IntegrityError as e:
            self.db.rollback()
            auth_registrations_total.labels(status="duplicate").inc()
            raise DuplicateEmail() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error registering user: {e}", exc_info=True)
            raise InternalError() from e

        auth_registrations_total.labels(status="success").inc()
        logger.info(f"Registered new user: {user.id}")
        return {"id": str(user.id), "email": user.email}

    def login(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """
        Authenticate a user and issue a session token

        Returns:
            Login payload with token, user projection and token lifetime

        Raises:
            ValidationError: If email or password is missing
            InvalidCredentials: Unknown email or wrong password
        """
        _require(email, password)

        try:
            user = self.users.get_by_email(email)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error looking up user for login: {e}", exc_info=True)
            raise InternalError() from e

        if not user:
            auth_logins_total.labels(status="failed").inc()
            logger.warning("Authentication failed: unknown email")
            raise InvalidCredentials()

        if not verify_password(password, user.password_hash):
            auth_logins_total.labels(status="failed").inc()
            logger.warning(f"Authentication failed: invalid password for user {user.id}")
            raise InvalidCredentials()

        token = self.token_service.issue(user.id, user.email)

        auth_logins_total.labels(status="success").inc()
        logger.info(f"User {user.id} authenticated successfully")
        return {
            "success": True,
            "message": "Login successful",
            "token": token,
            "user": {"id": str(user.id), "email": user.email},
            "expiresIn": self.token_lifetime_label,
        }
