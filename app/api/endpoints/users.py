"""
Profile endpoints for the authenticated user.
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.exceptions import BadRequestError
from app.crud import user as user_crud
from app.models.user import User
from app.schemas.user import UserResponse, UserUpdateRequest

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """
    Get current authenticated user's profile.

    Requires valid JWT token in Authorization header.
    """
    return current_user


@router.patch("/me", response_model=UserResponse)
def update_me(
    request: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update firstname, email and/or username of the current user.
    """
    changes = request.model_dump(exclude_unset=True)
    # email and username are required columns
    for field in ("email", "username"):
        if field in changes and changes[field] is None:
            raise BadRequestError(f"{field} cannot be empty")

    if user_crud.identity_taken(
        db,
        email=changes.get("email"),
        username=changes.get("username"),
        exclude_user_id=current_user.id,
    ):
        raise BadRequestError("Email or username already registered")

    try:
        user = user_crud.update_profile(db, current_user, changes)
    except IntegrityError:
        # Lost a race with a concurrent registration or update
        db.rollback()
        raise BadRequestError("Email or username already registered")

    logger.info(f"'{user.username}' has updated their profile")
    return user
