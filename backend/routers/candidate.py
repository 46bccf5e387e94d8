from fastapi import APIRouter, Depends

from models.application_models import ApplicationRequest
from models.profile_models import CandidateProfileRequest
from routers.dependencies import get_application_service, get_profile_service
from services.application_service import ApplicationService
from services.profile_service import ProfileService
from utils_others.security import require_candidate
from utils_others.session_manager import SessionContext

router = APIRouter(tags=["candidate"])

@router.get("/profile")
def get_profile(
    session: SessionContext = Depends(require_candidate),
    service: ProfileService = Depends(get_profile_service),
):
    return {"ok": True, "data": service.get_profile(session.user_id)}

@router.put("/profile")
def update_profile(
    payload: CandidateProfileRequest,
    session: SessionContext = Depends(require_candidate),
    service: ProfileService = Depends(get_profile_service),
):
    data = service.update_candidate_profile(session, payload.model_dump(exclude_unset=True))
    return {"ok": True, "data": data}

@router.post("/jobs/{job_id}/apply")
def apply_job(
    job_id: str,
    payload: ApplicationRequest,
    session: SessionContext = Depends(require_candidate),
    service: ApplicationService = Depends(get_application_service),
):
    data = service.apply(session, job_id, resume_link=payload.resume_link, cover_letter=payload.cover_letter)
    return {"ok": True, "data": data}

@router.get("/jobs/{job_id}/applied")
def has_applied(
    job_id: str,
    session: SessionContext = Depends(require_candidate),
    service: ApplicationService = Depends(get_application_service),
):
    return {"ok": True, "data": {"applied": service.has_applied(session, job_id)}}

@router.get("/applications")
def my_applications(
    session: SessionContext = Depends(require_candidate),
    service: ApplicationService = Depends(get_application_service),
):
    return {"ok": True, "data": service.list_for_candidate(session)}
