"""
Database models package.
"""

from app.models.user import User
from app.models.refresh_token import RefreshToken, SessionState
from app.models.application import JobApplication, JobApplicationStatus, WorkModel

__all__ = [
    "User",
    "RefreshToken",
    "SessionState",
    "JobApplication",
    "JobApplicationStatus",
    "WorkModel",
]
