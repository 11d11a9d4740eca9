"""
Refresh token model.

Stores only the bcrypt hash and the jti of the user's current refresh
token. The unique constraint on user_id keeps at most one live session
per user: logging in or refreshing replaces the row's contents.
"""

import enum
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class SessionState(str, enum.Enum):
    """
    Server-side session state of a user.

    - ABSENT: no refresh token record (never logged in, or logged out)
    - ACTIVE: a refresh token record exists
    """
    ABSENT = "ABSENT"
    ACTIVE = "ACTIVE"


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    hash = Column(String, unique=True, nullable=False)
    jti = Column(String(36), unique=True, nullable=False)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="refresh_token")

    def __repr__(self):
        return f"<RefreshToken(user_id={self.user_id}, jti={self.jti})>"
