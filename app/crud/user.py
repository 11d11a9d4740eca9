"""
CRUD operations for User model.
"""

from typing import Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.models.user import User


def get_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def identity_taken(db: Session, email: Optional[str] = None, username: Optional[str] = None, exclude_user_id: Optional[str] = None) -> bool:
    """
    Check whether an email or username is already used by another account.

    Args:
        db: Database session
        email: Email to look for
        username: Username to look for
        exclude_user_id: Ignore this user (the one being updated)

    Returns:
        True if any other user has the email or the username
    """
    clauses = []
    if email is not None:
        clauses.append(User.email == email)
    if username is not None:
        clauses.append(User.username == username)
    if not clauses:
        return False

    query = db.query(User).filter(or_(*clauses))
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return db.query(query.exists()).scalar()


def create(db: Session, username: str, email: str, hashed_password: str) -> User:
    """
    Create a new user.

    Args:
        db: Database session
        username: Unique username
        email: Unique email address
        hashed_password: Digest from the credential hasher

    Returns:
        Created User instance with id
    """
    db_user = User(username=username, email=email, hashed_password=hashed_password)

    db.add(db_user)
    db.commit()
    db.refresh(db_user)

    return db_user


def update_profile(db: Session, user: User, changes: dict) -> User:
    """
    Apply profile changes (firstname, email, username) to a user.

    Keys absent from changes are left untouched.
    """
    for field in ("firstname", "email", "username"):
        if field in changes:
            setattr(user, field, changes[field])

    db.commit()
    db.refresh(user)

    return user
