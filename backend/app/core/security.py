"""
Password hashing and session token signing
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import bcrypt
import jwt

from app.core.errors import (ConfigurationError, ExpiredToken, InvalidToken,
                             MalformedToken, ValidationError)

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password using bcrypt with a fresh salt"""
    encoded = password.encode('utf-8')
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes"
        )
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against a hash; False on mismatch or unusable hash"""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed hash, or a password bcrypt refuses to process
        return False


@dataclass(frozen=True)
class TokenClaims:
    """Identity asserted by a verified session token"""
    user_id: UUID
    email: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issues and verifies signed, time-boxed session tokens.

    Built once at startup; holds only the signing secret and lifetime, so a
    single instance is safe to share between requests.
    """

    def __init__(
        self,
        secret: str,
        lifetime: timedelta = timedelta(hours=24),
        algorithm: str = "HS256",
    ):
        if not secret:
            raise ConfigurationError("Token signing secret is not configured")
        self._secret = secret
        self.lifetime = lifetime
        self.algorithm = algorithm

    def issue(self, user_id: UUID, email: str, issued_at: Optional[datetime] = None) -> str:
        """
        Sign a token for a user

        Args:
            user_id: User ID
            email: User email
            issued_at: Issue time (default: now)

        Returns:
            Compact signed token
        """
        issued_at = issued_at or datetime.now(timezone.utc)
        payload = {
            "user_id": str(user_id),
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.lifetime).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify a token and return its claims

        Raises:
            ExpiredToken: token is past its expiry
            InvalidToken: signature mismatch or token not yet valid
            MalformedToken: token or its claims cannot be parsed
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise ExpiredToken(str(e)) from e
        except jwt.InvalidSignatureError as e:
            raise InvalidToken(str(e)) from e
        except (jwt.DecodeError, jwt.MissingRequiredClaimError) as e:
            raise MalformedToken(str(e)) from e
        except jwt.InvalidTokenError as e:
            raise InvalidToken(str(e)) from e

        email = payload.get("email")
        try:
            user_id = UUID(str(payload.get("user_id")))
        except ValueError as e:
            raise MalformedToken("user_id claim is not a valid identifier") from e
        if not isinstance(email, str):
            raise MalformedToken("email claim is missing")

        return TokenClaims(
            user_id=user_id,
            email=email,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
