from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator

class JobStatus(str, Enum):
    active = "active"
    inactive = "inactive"

class JobType(str, Enum):
    work_from_home = "Work From Home"
    work_from_office = "Work From Office"
    hybrid = "Hybrid"

class JobPostRequest(BaseModel):
    title: str
    description: str
    location: str
    job_type: JobType = JobType.work_from_office
    experience_required: Optional[str] = None
    department: Optional[str] = None
    salary_min: Optional[int] = None  # min <= max is not enforced
    salary_max: Optional[int] = None
    status: JobStatus = JobStatus.active

class JobUpdateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[JobType] = None
    experience_required: Optional[str] = None
    department: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    status: Optional[JobStatus] = None

    @field_validator("title", "description", "location", "job_type", "status")
    @classmethod
    def not_null(cls, v):
        # Only salary and department columns are nullable.
        if v is None:
            raise ValueError("field cannot be null")
        return v
