"""
Error taxonomy shared by services and the HTTP layer

Every error carries the user-visible message and the HTTP status it maps to;
the exception handlers in main.py turn them into ``{"message": ...}`` bodies.
"""
from typing import Any, Dict


class ContactBookError(Exception):
    """Base class for errors that are reported to the client"""

    status_code: int = 500
    default_message: str = "An error occurred"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


class ValidationError(ContactBookError):
    """Missing or malformed input field"""
    status_code = 400
    default_message = "Invalid request"


class DuplicateConstraint(ContactBookError):
    """A uniqueness constraint would be violated"""
    status_code = 400
    default_message = "Resource already exists"


class DuplicateEmail(DuplicateConstraint):
    default_message = "User with this email already exists"


class DuplicatePhone(DuplicateConstraint):
    default_message = "Contact with this phone already exists"


class Unauthorized(ContactBookError):
    """Missing, malformed, invalid or expired bearer credential"""
    status_code = 401
    default_message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    default_message = "Invalid email or password"


class NotFound(ContactBookError):
    """Unknown resource, or one owned by someone else"""
    status_code = 404
    default_message = "Not found"


class InternalError(ContactBookError):
    """Store connectivity or unexpected failure"""
    status_code = 500


class ConfigurationError(RuntimeError):
    """Raised at startup when the service cannot run with the given settings"""


class TokenError(Exception):
    """Session token could not be accepted"""

    reason = "invalid"


class InvalidToken(TokenError):
    """Signature mismatch or otherwise unacceptable token"""
    reason = "invalid"


class ExpiredToken(TokenError):
    reason = "expired"


class MalformedToken(TokenError):
    """Token structure or claims could not be parsed"""
    reason = "malformed"
