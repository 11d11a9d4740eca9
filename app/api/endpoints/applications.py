import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.exceptions import NotFoundError
from app.crud import application as application_crud
from app.models.application import JobApplicationStatus
from app.models.user import User
from app.schemas.application import (
    JobApplicationCreateRequest,
    JobApplicationResponse,
    JobApplicationUpdateRequest,
)

router = APIRouter(prefix="/applications", tags=["Job Applications"])
logger = logging.getLogger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobApplicationResponse)
def create_application(
    request: JobApplicationCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Start tracking a new job application.
    """
    application = application_crud.create(db, current_user.id, request)
    logger.info(f"'{current_user.username}' has started tracking application {application.id}")
    return application


@router.get("", response_model=list[JobApplicationResponse])
def list_applications(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1),
    status: Optional[JobApplicationStatus] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List the current user's applications, newest first.

    Args:
        skip: Number of records to skip (default: 0)
        limit: Maximum number of records to return (default: 100, max: 100)
        status: Optional filter by application status
    """
    if limit > 100:
        limit = 100

    return application_crud.get_multi_for_user(db, current_user.id, skip=skip, limit=limit, status=status)


@router.get("/{application_id}", response_model=JobApplicationResponse)
def get_application(
    application_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    application = application_crud.get_for_user(db, current_user.id, application_id)

    if not application:
        raise NotFoundError("Job application not found")

    return application


@router.patch("/{application_id}", response_model=JobApplicationResponse)
def update_application(
    application_id: str,
    request: JobApplicationUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update some fields of an application (e.g. move it to INTERVIEW).
    """
    application = application_crud.update_for_user(
        db, current_user.id, application_id, request.model_dump(exclude_unset=True)
    )

    if not application:
        raise NotFoundError("Job application not found")

    logger.info(f"'{current_user.username}' has updated application {application_id}")
    return application


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_application(
    application_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    deleted = application_crud.delete_for_user(db, current_user.id, application_id)

    if not deleted:
        raise NotFoundError("Job application not found")

    logger.info(f"'{current_user.username}' has deleted application {application_id}")
    return None
