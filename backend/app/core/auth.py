"""
Identity resolution for protected endpoints
"""
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import InternalError, NotFound, TokenError, Unauthorized
from app.core.logging_config import LoggingConfig
from app.core.metrics import auth_token_rejections_total
from app.core.security import TokenService
from app.repositories.user_repository import UserRepository

logger = LoggingConfig.get_logger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Identity:
    """Resolved caller attached to the request"""
    user_id: UUID
    email: str


def get_token_service(request: Request) -> TokenService:
    """TokenService built at startup and stored on the application state"""
    return request.app.state.token_service


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Return the token of an ``Authorization: Bearer <token>`` header value

    The scheme must be exactly ``Bearer `` (case and single space included);
    anything else, or an empty token, yields None.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):]
    if not token.strip():
        return None
    return token


async def get_current_identity(
    request: Request,
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
) -> Identity:
    """
    Resolve the bearer token of a request to a live user

    Raises:
        Unauthorized: header missing or malformed, token invalid or expired
        NotFound: token is valid but its user no longer exists
    """
    token = extract_bearer_token(request.headers.get("authorization"))
    if token is None:
        auth_token_rejections_total.labels(reason="missing").inc()
        raise Unauthorized()

    try:
        claims = token_service.verify(token)
    except TokenError as e:
        auth_token_rejections_total.labels(reason=e.reason).inc()
        logger.info(f"Rejected bearer token ({e.reason}): {e}")
        raise Unauthorized() from e

    try:
        user = UserRepository(db).get_by_id(claims.user_id)
    except SQLAlchemyError as e:
        logger.error(f"Failed to resolve user for token: {e}", exc_info=True)
        raise InternalError() from e

    if user is None:
        auth_token_rejections_total.labels(reason="unknown_user").inc()
        raise NotFound("User not found.")

    identity = Identity(user_id=claims.user_id, email=claims.email)
    request.state.identity = identity
    LoggingConfig.set_context(user_id=str(identity.user_id))
    return identity
