"""
User model for authentication.

Each User owns its job applications and at most one refresh token record.
"""

import uuid
from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.orm import relationship
from app.core.database import Base


def _uuid_str() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Registered account. Never deleted in this service."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid_str, index=True)

    # Authentication credentials
    email = Column(String, unique=True, nullable=False, index=True)
    username = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    # Optional display name
    firstname = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    refresh_token = relationship("RefreshToken", back_populates="user", uselist=False, cascade="all, delete-orphan")
    applications = relationship("JobApplication", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
