"""
CRUD operations for the RefreshToken model (the session store).

Not-found contract: lookups return None, deletes return False. Nothing in
this module raises on absence; callers decide what absence means.
"""

import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.refresh_token import RefreshToken, SessionState

logger = logging.getLogger(__name__)


def get_by_user_id(db: Session, user_id: str) -> Optional[RefreshToken]:
    """Return the user's refresh token record, or None."""
    return db.query(RefreshToken).filter(RefreshToken.user_id == user_id).first()


def get_session_state(db: Session, user_id: str) -> SessionState:
    """Report whether the user currently has a server-side session."""
    exists = db.query(db.query(RefreshToken).filter(RefreshToken.user_id == user_id).exists()).scalar()
    return SessionState.ACTIVE if exists else SessionState.ABSENT


def create(db: Session, user_id: str, token_hash: str, jti: str) -> RefreshToken:
    """
    Create the refresh token record for a user without one.

    Raises:
        IntegrityError: If the user already has a record
    """
    record = RefreshToken(user_id=user_id, hash=token_hash, jti=jti)

    db.add(record)
    db.commit()
    db.refresh(record)

    return record


def upsert(db: Session, user_id: str, token_hash: str, jti: str) -> RefreshToken:
    """
    Create the user's record, or replace its hash and jti if one exists.

    Any previously issued refresh token for the user stops matching. When
    two logins race on the insert, the loser falls back to an update, so
    the last writer wins and exactly one record remains.
    """
    record = get_by_user_id(db, user_id)
    if record is not None:
        return _replace(db, record, token_hash, jti)

    try:
        return create(db, user_id, token_hash, jti)
    except IntegrityError:
        db.rollback()
        logger.warning(f"Concurrent session write for user {user_id}, retrying as update")
        record = get_by_user_id(db, user_id)
        if record is None:
            raise
        return _replace(db, record, token_hash, jti)


def rotate(db: Session, user_id: str, token_hash: str, jti: str) -> Optional[RefreshToken]:
    """
    Update the existing record in place with a new hash and jti.

    Returns:
        The updated record, or None if the user has no record
    """
    record = get_by_user_id(db, user_id)
    if record is None:
        return None
    return _replace(db, record, token_hash, jti)


def delete_by_user_id(db: Session, user_id: str) -> bool:
    """
    Delete the user's refresh token record.

    Returns:
        True if deleted, False if the user had no record
    """
    record = get_by_user_id(db, user_id)
    if record is None:
        return False

    db.delete(record)
    db.commit()

    return True


def _replace(db: Session, record: RefreshToken, token_hash: str, jti: str) -> RefreshToken:
    record.hash = token_hash
    record.jti = jti

    db.commit()
    db.refresh(record)

    return record
