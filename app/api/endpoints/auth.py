"""
Authentication endpoints: registration, login, logout and token refresh.

Implements JWT sessions with refresh-token rotation:
- POST /register: Create account, open a session
- POST /login: Authenticate, replace any existing session
- POST /refresh: Rotate the session (refresh token read from the cookie)
- POST /logout: End the session and clear the cookie

The refresh token is only ever sent and received as the HTTP-only
`refreshToken` cookie scoped to /auth/.
"""

import logging
from fastapi import APIRouter, Depends, Request, Response, status

from app.core.cookies import clear_refresh_cookie, read_refresh_cookie, set_refresh_cookie
from app.core.deps import get_session_service
from app.schemas.user import (
    AccessTokenResponse,
    TokenPairResponse,
    UserLoginRequest,
    UserRegisterRequest,
)
from app.services.session_service import SessionService

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AccessTokenResponse)
def register(
    request: UserRegisterRequest,
    response: Response,
    sessions: SessionService = Depends(get_session_service)
):
    """
    Register a new user account.

    Returns the access token; the refresh token is set as a cookie.
    """
    issued = sessions.register(request)
    set_refresh_cookie(response, issued.refresh_token)
    return AccessTokenResponse(access_token=issued.access_token)


@router.post("/login", response_model=AccessTokenResponse)
def login(
    request: UserLoginRequest,
    response: Response,
    sessions: SessionService = Depends(get_session_service)
):
    """
    Authenticate with email and password.

    Any refresh token issued before this login stops working.
    """
    issued = sessions.login(request)
    set_refresh_cookie(response, issued.refresh_token)
    return AccessTokenResponse(access_token=issued.access_token)


@router.post("/refresh", response_model=TokenPairResponse)
def refresh_tokens(
    request: Request,
    response: Response,
    sessions: SessionService = Depends(get_session_service)
):
    """
    Exchange the refresh token cookie for a new token pair.

    The presented refresh token is single-use: the session is rotated and
    the new refresh token replaces the cookie.
    """
    issued = sessions.refresh(read_refresh_cookie(request))
    set_refresh_cookie(response, issued.refresh_token)
    return TokenPairResponse(access_token=issued.access_token, refresh_token=issued.refresh_token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    request: Request,
    response: Response,
    sessions: SessionService = Depends(get_session_service)
):
    """
    End the current session and clear the refresh token cookie.
    """
    sessions.logout(read_refresh_cookie(request))
    clear_refresh_cookie(response)
    return None
