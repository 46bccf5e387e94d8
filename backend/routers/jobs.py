from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from models.application_models import ApplicationStatus, status_display
from models.shared_schemas import StatusDisplayOut
from routers.dependencies import get_job_service
from services.job_service import JobService

router = APIRouter(tags=["jobs"])

@router.get("")
def list_jobs(
    search: Optional[str] = Query(default=None),
    location: Optional[str] = Query(default=None),
    job_type: Optional[str] = Query(default=None),
    service: JobService = Depends(get_job_service),
):
    """Active jobs only, newest first."""
    return {"ok": True, "data": service.list_active_jobs(search=search, location=location, job_type=job_type)}

@router.get("/application-statuses", response_model=List[StatusDisplayOut])
def application_statuses():
    return [status_display(s) for s in ApplicationStatus]

@router.get("/{job_id}")
def get_job(job_id: str, service: JobService = Depends(get_job_service)):
    return {"ok": True, "data": service.get_job(job_id)}
