"""
Refresh token cookie helpers.

The refresh token only ever travels in an HTTP-only cookie scoped to the
auth routes; it is never read from a request body.
"""

from datetime import timedelta
from typing import Optional
from fastapi import Request, Response

from app.core.config import Settings, settings as default_settings

REFRESH_COOKIE_NAME = "refreshToken"
REFRESH_COOKIE_PATH = "/auth/"


def refresh_cookie_max_age(config: Settings = default_settings) -> int:
    """Cookie lifetime in seconds, matching the refresh token lifetime."""
    return int(timedelta(days=config.REFRESH_TOKEN_EXPIRE_DAYS).total_seconds())


def set_refresh_cookie(response: Response, refresh_token: str, config: Settings = default_settings) -> None:
    """Attach the refresh token to the response as an HTTP-only cookie."""
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=refresh_token,
        max_age=refresh_cookie_max_age(config),
        path=REFRESH_COOKIE_PATH,
        secure=config.REFRESH_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def clear_refresh_cookie(response: Response, config: Settings = default_settings) -> None:
    response.delete_cookie(
        key=REFRESH_COOKIE_NAME,
        path=REFRESH_COOKIE_PATH,
        secure=config.REFRESH_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def read_refresh_cookie(request: Request) -> Optional[str]:
    """Return the refresh token cookie, or None when absent or empty."""
    token = request.cookies.get(REFRESH_COOKIE_NAME)
    return token or None
