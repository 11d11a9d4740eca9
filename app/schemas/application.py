from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from app.models.application import JobApplicationStatus, WorkModel


class JobApplicationCreateRequest(BaseModel):
    """Schema for tracking a new job application"""
    model_config = ConfigDict(populate_by_name=True)

    company_name: str = Field(..., min_length=1, max_length=200, alias="companyName")
    job_title: str = Field(..., min_length=1, max_length=200, alias="jobTitle")
    work_model: WorkModel = Field(..., alias="workModel")
    salary: int = Field(..., ge=0)
    status: JobApplicationStatus = JobApplicationStatus.PENDING


class JobApplicationUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their value"""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    company_name: Optional[str] = Field(None, min_length=1, max_length=200, alias="companyName")
    job_title: Optional[str] = Field(None, min_length=1, max_length=200, alias="jobTitle")
    work_model: Optional[WorkModel] = Field(None, alias="workModel")
    salary: Optional[int] = Field(None, ge=0)
    status: Optional[JobApplicationStatus] = None


class JobApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    company_name: str = Field(..., serialization_alias="companyName")
    job_title: str = Field(..., serialization_alias="jobTitle")
    work_model: WorkModel = Field(..., serialization_alias="workModel")
    salary: int
    status: JobApplicationStatus
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(None, serialization_alias="updatedAt")
