"""
Session protocol: registration, login, refresh-token rotation and logout.

A user's server-side session is the single RefreshToken row holding the
hash and jti of the newest refresh token. Every login replaces it and every
refresh rotates it, so a refresh token can be used exactly once and only
the most recently issued one is ever accepted.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import TokenSettings
from app.core.exceptions import (
    BadRequestError,
    ForbiddenError,
    InternalError,
    InvalidTokenError,
    NotFoundError,
    UnauthorizedError,
)
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    dummy_verify,
    generate_jti,
    get_password_hash,
    hash_secret,
    verify_password,
    verify_secret,
)
from app.crud import refresh_token as refresh_token_crud
from app.crud import user as user_crud
from app.models.refresh_token import SessionState
from app.schemas.user import UserLoginRequest, UserRegisterRequest

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Email or password are incorrect"
INVALID_REFRESH_TOKEN = "The refresh token is not valid"


@dataclass(frozen=True)
class IssuedTokens:
    """A freshly signed access/refresh token pair."""
    access_token: str
    refresh_token: str
    refresh_jti: str


class SessionService:
    """
    Orchestrates the session lifecycle for one request.

    Args:
        db: Database session of the current request
        token_settings: Validated signing configuration
    """

    def __init__(self, db: Session, token_settings: TokenSettings):
        self.db = db
        self.tokens = token_settings

    def register(self, command: UserRegisterRequest) -> IssuedTokens:
        """
        Create an account and open its first session.

        The user row is committed before the session is created; a later
        failure leaves the user in place without a session.

        Raises:
            BadRequestError: If the email or username is already registered
        """
        if user_crud.identity_taken(self.db, email=command.email, username=command.username):
            raise BadRequestError("Email or username already registered")

        hashed_password = get_password_hash(command.password)
        try:
            user = user_crud.create(self.db, command.username, command.email, hashed_password)
        except IntegrityError:
            # Lost a race with a concurrent registration
            self.db.rollback()
            raise BadRequestError("Email or username already registered")

        issued = self._issue_tokens(user.id)
        self._store_session(refresh_token_crud.create, user.id, issued)

        logger.info(f"User '{user.username}' has been registered (user_id: {user.id})")
        return issued

    def login(self, command: UserLoginRequest) -> IssuedTokens:
        """
        Authenticate by email and password and replace any existing session.

        Raises:
            UnauthorizedError: Unknown email or wrong password (same message)
        """
        user = user_crud.get_by_email(self.db, command.email)
        if user is None:
            dummy_verify()
            logger.info("Login rejected: unknown email")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not verify_password(command.password, user.hashed_password):
            logger.info(f"Login rejected: wrong password for user '{user.username}'")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        issued = self._issue_tokens(user.id)
        self._store_session(refresh_token_crud.upsert, user.id, issued)

        logger.info(f"User '{user.username}' logged in")
        return issued

    def refresh(self, refresh_token: Optional[str]) -> IssuedTokens:
        """
        Exchange a refresh token for a new token pair, rotating the session.

        Raises:
            UnauthorizedError: Token missing, badly signed or expired
            ForbiddenError: No session for the user, or the token is not
                the session's current token (hash or jti mismatch)
        """
        if not refresh_token:
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

        payload = self._verify_refresh_token(refresh_token)
        user_id = payload.sub

        record = refresh_token_crud.get_by_user_id(self.db, user_id)
        if record is None:
            logger.info(f"Refresh rejected: no active session for user {user_id}")
            raise ForbiddenError("The user has no active session")

        if not verify_secret(refresh_token, record.hash):
            logger.warning(f"Refresh rejected: stale or reused refresh token for user {user_id}")
            raise ForbiddenError(INVALID_REFRESH_TOKEN)

        if payload.jti != record.jti:
            logger.warning(f"Refresh rejected: jti mismatch for user {user_id}")
            raise ForbiddenError(INVALID_REFRESH_TOKEN)

        issued = self._issue_tokens(user_id)
        rotated = self._store_session(refresh_token_crud.rotate, user_id, issued)
        if rotated is None:
            # Logged out concurrently between the checks and the update
            raise ForbiddenError("The user has no active session")

        logger.info(f"New tokens generated for user {user_id}")
        return issued

    def logout(self, refresh_token: Optional[str]) -> str:
        """
        End the session the refresh token belongs to.

        Only the signature is checked: expiry is ignored and the token is
        not compared with the stored hash/jti, so any refresh token ever
        issued to the user can end the user's current session.

        Returns:
            The id of the user that was logged out

        Raises:
            BadRequestError: Token missing
            UnauthorizedError: Token not signed with the refresh secret
            NotFoundError: The user has no session to end
        """
        if not refresh_token:
            raise BadRequestError("Refresh token cookie is missing")

        payload = self._verify_refresh_token(refresh_token, verify_exp=False)
        user_id = payload.sub

        if refresh_token_crud.get_session_state(self.db, user_id) is SessionState.ABSENT:
            logger.info(f"Logout for user {user_id} found no active session")
            raise NotFoundError("No active session")

        refresh_token_crud.delete_by_user_id(self.db, user_id)
        logger.info(f"User {user_id} logged out")
        return user_id

    def _issue_tokens(self, user_id: str) -> IssuedTokens:
        access_token = create_access_token(
            user_id,
            generate_jti(),
            self.tokens.access_secret,
            expires_delta=self.tokens.access_token_ttl,
            algorithm=self.tokens.algorithm,
        )
        refresh_jti = generate_jti()
        refresh_token = create_refresh_token(
            user_id,
            refresh_jti,
            self.tokens.refresh_secret,
            expires_delta=self.tokens.refresh_token_ttl,
            algorithm=self.tokens.algorithm,
        )
        return IssuedTokens(access_token=access_token, refresh_token=refresh_token, refresh_jti=refresh_jti)

    def _verify_refresh_token(self, token: str, verify_exp: bool = True):
        try:
            return decode_token(
                token,
                self.tokens.refresh_secret,
                algorithm=self.tokens.algorithm,
                verify_exp=verify_exp,
            )
        except InvalidTokenError as e:
            logger.info(f"Refresh token rejected: {e.detail}")
            # Same message for every verification failure
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

    def _store_session(self, write, user_id: str, issued: IssuedTokens):
        """Persist the hash and jti of a newly issued refresh token."""
        try:
            return write(self.db, user_id, hash_secret(issued.refresh_token), issued.refresh_jti)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Could not store session for user {user_id}: {e}")
            raise InternalError("Failed to store session")
