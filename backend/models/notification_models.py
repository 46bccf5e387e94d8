from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

class StatusEmailRequest(BaseModel):
    """Flat record accepted by the status email dispatcher."""
    model_config = ConfigDict(populate_by_name=True)

    to: Optional[str] = None
    candidate_name: str = Field(default="Candidate", alias="candidateName")
    job_title: str = Field(default="", alias="jobTitle")
    status: str
    assignment_name: Optional[str] = Field(default=None, alias="assignmentName")
    assignment_link: Optional[str] = Field(default=None, alias="assignmentLink")

class NotificationResult(BaseModel):
    success: bool = True
