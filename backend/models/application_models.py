from enum import Enum
from typing import Dict, NamedTuple, Optional

from pydantic import BaseModel, Field, field_validator

class ApplicationStatus(str, Enum):
    applied = "applied"
    shortlisted = "shortlisted"
    assignment = "assignment"
    technical_interview = "technical_interview"
    hr_interview = "hr_interview"
    verification = "verification"
    hired = "hired"
    rejected = "rejected"

class StatusDisplay(NamedTuple):
    label: str
    color: str

STATUS_DISPLAY: Dict[ApplicationStatus, StatusDisplay] = {
    ApplicationStatus.applied: StatusDisplay("Applied", "blue"),
    ApplicationStatus.shortlisted: StatusDisplay("Shortlisted", "purple"),
    ApplicationStatus.assignment: StatusDisplay("Assignment Round", "yellow"),
    ApplicationStatus.technical_interview: StatusDisplay("Technical Interview", "orange"),
    ApplicationStatus.hr_interview: StatusDisplay("HR Interview", "indigo"),
    ApplicationStatus.verification: StatusDisplay("Verification", "cyan"),
    ApplicationStatus.hired: StatusDisplay("Hired", "green"),
    ApplicationStatus.rejected: StatusDisplay("Rejected", "red"),
}

# Older candidate-facing rows used "technical".
STATUS_ALIASES = {"technical": ApplicationStatus.technical_interview}

DEFAULT_DISPLAY = StatusDisplay("Unknown", "muted")

def parse_status(value) -> Optional[ApplicationStatus]:
    """Return the enum member for ``value`` or None when it is not recognised."""
    if isinstance(value, ApplicationStatus):
        return value
    if not value:
        return None
    key = str(value).strip().lower()
    if key in STATUS_ALIASES:
        return STATUS_ALIASES[key]
    try:
        return ApplicationStatus(key)
    except ValueError:
        return None

def status_display(value) -> Dict[str, str]:
    """
    Display metadata for a stored status. Unknown values keep their raw text
    as the label; missing values get the default label.
    """
    status = parse_status(value)
    if status is not None:
        meta = STATUS_DISPLAY[status]
        return {"status": status.value, "label": meta.label, "color": meta.color}
    if value:
        return {"status": str(value), "label": str(value), "color": DEFAULT_DISPLAY.color}
    return {"status": "", "label": DEFAULT_DISPLAY.label, "color": DEFAULT_DISPLAY.color}

class ApplicationRequest(BaseModel):
    resume_link: str
    cover_letter: Optional[str] = None

    @field_validator("resume_link")
    @classmethod
    def resume_link_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("resume_link is required")
        return v.strip()

class StatusUpdateRequest(BaseModel):
    status: ApplicationStatus
    assignment_name: Optional[str] = None
    assignment_link: Optional[str] = None

class NotesUpdateRequest(BaseModel):
    notes: str = Field(default="")
