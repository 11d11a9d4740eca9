"""
FastAPI dependencies for configuration, authentication and services.

These dependencies are used to protect endpoints and extract user context.
"""

import logging
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.config import TokenSettings
from app.core.database import get_db
from app.core.exceptions import InvalidTokenError, ServerMisconfiguredError, UnauthorizedError
from app.core.security import decode_token
from app.crud import user as user_crud
from app.models.user import User
from app.services.session_service import SessionService

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>)
# auto_error is off so a missing header becomes a 401, not a 403
security = HTTPBearer(auto_error=False)


def get_token_settings(request: Request) -> TokenSettings:
    """
    Return the signing configuration validated at startup.

    Raises:
        ServerMisconfiguredError: If the secrets were missing at startup
    """
    token_settings: Optional[TokenSettings] = getattr(request.app.state, "token_settings", None)
    if token_settings is None:
        raise ServerMisconfiguredError("JWT secrets are not configured")
    return token_settings


def get_session_service(
    db: Session = Depends(get_db),
    token_settings: TokenSettings = Depends(get_token_settings),
) -> SessionService:
    return SessionService(db, token_settings)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_settings: TokenSettings = Depends(get_token_settings),
    db: Session = Depends(get_db)
) -> User:
    """
    Extract and validate the current user from the access token.

    This dependency:
    1. Extracts the Bearer token from Authorization header
    2. Verifies the JWT against the access token secret
    3. Fetches the user from the database

    Raises:
        UnauthorizedError: If the header is missing or malformed, the token
            is invalid or expired, or the user no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Missing or invalid Authorization header")

    try:
        payload = decode_token(
            credentials.credentials,
            token_settings.access_secret,
            algorithm=token_settings.algorithm,
        )
    except InvalidTokenError:
        raise UnauthorizedError("Could not validate credentials")

    user = user_crud.get_by_id(db, payload.sub)
    if user is None:
        logger.info(f"Access token for unknown user {payload.sub}")
        raise UnauthorizedError("Could not validate credentials")

    return user
