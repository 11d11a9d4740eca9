import enum
import uuid
from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class JobApplicationStatus(str, enum.Enum):
    """Where a tracked application currently stands."""
    PENDING = "PENDING"
    APPLIED = "APPLIED"
    SHORTLISTED = "SHORTLISTED"
    INTERVIEW = "INTERVIEW"
    REJECTED = "REJECTED"
    NO_RESPONSE = "NO_RESPONSE"
    WITHDRAWN = "WITHDRAWN"
    OFFER = "OFFER"


class WorkModel(str, enum.Enum):
    ONSITE = "ONSITE"
    HYBRID = "HYBRID"
    REMOTE = "REMOTE"


class JobApplication(Base):
    """
    A job application tracked by a user.

    Every query on this table must filter by user_id.
    """
    __tablename__ = "job_applications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    company_name = Column(String, nullable=False)
    job_title = Column(String, nullable=False)
    salary = Column(Integer, nullable=False)
    status = Column(Enum(JobApplicationStatus), default=JobApplicationStatus.PENDING, nullable=False, index=True)
    work_model = Column(Enum(WorkModel), nullable=False)

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="applications")

    def __repr__(self):
        return f"<JobApplication(id={self.id}, company='{self.company_name}', status={self.status.value})>"
