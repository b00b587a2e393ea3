"""
Authentication API routes
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.core.auth import get_token_service
from app.core.config import get_settings
from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.core.security import TokenService
from app.services.auth_service import AuthService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


class CredentialsRequest(BaseModel):
    """Email/password pair used by register and login"""
    email: Optional[str] = None
    password: Optional[str] = None


def get_auth_service(
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(db, token_service, get_settings().token_lifetime_label)


@router.post("/register", status_code=status.HTTP_201_CREATED)
@router.post("/register/", status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def register(
    body: CredentialsRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register a new user"""
    user = auth_service.register_user(email=body.email, password=body.password)
    return {
        "message": "User registered successfully",
        "user": user,
    }


@router.post("/login")
@router.post("/login/", include_in_schema=False)
async def login(
    body: CredentialsRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Login and receive a bearer token"""
    return auth_service.login(email=body.email, password=body.password)
