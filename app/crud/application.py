"""
CRUD operations for JobApplication model.

Every function takes the owning user's id and never returns or touches
rows belonging to another user.
"""

from typing import List, Optional
from sqlalchemy.orm import Session
from app.models.application import JobApplication, JobApplicationStatus
from app.schemas.application import JobApplicationCreateRequest


def create(db: Session, user_id: str, data: JobApplicationCreateRequest) -> JobApplication:
    """
    Create a new job application for a user.

    Args:
        db: Database session
        user_id: Owner of the application
        data: Validated application data

    Returns:
        Created JobApplication instance with id
    """
    db_application = JobApplication(
        company_name=data.company_name,
        job_title=data.job_title,
        work_model=data.work_model,
        salary=data.salary,
        status=data.status,
        user_id=user_id,
    )

    db.add(db_application)
    db.commit()
    db.refresh(db_application)

    return db_application


def get_for_user(db: Session, user_id: str, application_id: str) -> Optional[JobApplication]:
    """
    Retrieve one of the user's applications by its ID.

    Returns:
        JobApplication if it exists and belongs to the user, None otherwise
    """
    return db.query(JobApplication).filter(
        JobApplication.id == application_id,
        JobApplication.user_id == user_id,
    ).first()


def get_multi_for_user(
    db: Session,
    user_id: str,
    skip: int = 0,
    limit: int = 100,
    status: Optional[JobApplicationStatus] = None
) -> List[JobApplication]:
    """
    List a user's applications, newest first, with optional status filter.
    """
    query = db.query(JobApplication).filter(JobApplication.user_id == user_id)

    if status:
        query = query.filter(JobApplication.status == status)

    return query.order_by(JobApplication.created_at.desc()).offset(skip).limit(limit).all()


def update_for_user(db: Session, user_id: str, application_id: str, changes: dict) -> Optional[JobApplication]:
    """
    Apply a partial update to one of the user's applications.

    None values are ignored since every updatable column is required.

    Returns:
        Updated JobApplication if found, None otherwise
    """
    application = get_for_user(db, user_id, application_id)
    if not application:
        return None

    for field in ("company_name", "job_title", "work_model", "salary", "status"):
        value = changes.get(field)
        if value is not None:
            setattr(application, field, value)

    db.commit()
    db.refresh(application)

    return application


def delete_for_user(db: Session, user_id: str, application_id: str) -> bool:
    """
    Delete one of the user's applications.

    Returns:
        True if deleted, False if not found
    """
    application = get_for_user(db, user_id, application_id)
    if not application:
        return False

    db.delete(application)
    db.commit()

    return True
