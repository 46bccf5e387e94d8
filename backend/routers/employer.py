from fastapi import APIRouter, Depends, File, Form, UploadFile

from models.application_models import NotesUpdateRequest, StatusUpdateRequest
from models.job_models import JobPostRequest, JobUpdateRequest
from models.profile_models import EmployerProfileRequest
from routers.dependencies import get_application_service, get_job_service, get_profile_service
from services.application_service import ApplicationService
from services.job_service import JobService
from services.profile_service import ProfileService
from utils_others.security import require_employer
from utils_others.session_manager import SessionContext

router = APIRouter(tags=["employer"])

@router.post("/jobs")
def post_job(
    payload: JobPostRequest,
    session: SessionContext = Depends(require_employer),
    service: JobService = Depends(get_job_service),
):
    return {"ok": True, "data": service.post_job(session, payload.model_dump(mode="json"))}

@router.get("/jobs")
def list_my_jobs(
    session: SessionContext = Depends(require_employer),
    service: JobService = Depends(get_job_service),
):
    """Own jobs with per-job application counts and dashboard totals."""
    return {"ok": True, "data": service.list_employer_jobs(session)}

@router.put("/jobs/{job_id}")
def update_job(
    job_id: str,
    payload: JobUpdateRequest,
    session: SessionContext = Depends(require_employer),
    service: JobService = Depends(get_job_service),
):
    data = service.update_job(session, job_id, payload.model_dump(mode="json", exclude_unset=True))
    return {"ok": True, "data": data}

@router.get("/jobs/{job_id}/applications")
def list_applications(
    job_id: str,
    session: SessionContext = Depends(require_employer),
    service: ApplicationService = Depends(get_application_service),
):
    return {"ok": True, "data": service.list_for_job(session, job_id)}

@router.patch("/applications/{application_id}/status")
def update_application_status(
    application_id: str,
    payload: StatusUpdateRequest,
    session: SessionContext = Depends(require_employer),
    service: ApplicationService = Depends(get_application_service),
):
    result = service.update_status(
        session,
        application_id,
        payload.status,
        assignment_name=payload.assignment_name,
        assignment_link=payload.assignment_link,
    )
    if result["notification_sent"]:
        message = "Application status updated and email sent to candidate."
    else:
        message = "Application status updated, but the email could not be sent."
    return {"ok": True, "data": result, "message": message}

@router.patch("/applications/{application_id}/notes")
def update_application_notes(
    application_id: str,
    payload: NotesUpdateRequest,
    session: SessionContext = Depends(require_employer),
    service: ApplicationService = Depends(get_application_service),
):
    return {"ok": True, "data": service.update_notes(session, application_id, payload.notes)}

@router.get("/profile/{profile_id}")
def get_employer_profile(
    profile_id: str,
    session: SessionContext = Depends(require_employer),
    service: ProfileService = Depends(get_profile_service),
):
    profile = service.get_employer_profile(profile_id)
    can_edit = session.user_id == profile_id or session.is_admin
    return {"ok": True, "data": {"profile": profile, "can_edit": can_edit}}

@router.put("/profile/{profile_id}")
def update_employer_profile(
    profile_id: str,
    payload: EmployerProfileRequest,
    session: SessionContext = Depends(require_employer),
    service: ProfileService = Depends(get_profile_service),
):
    data = service.update_employer_profile(session, profile_id, payload.model_dump(exclude_unset=True))
    return {"ok": True, "data": data}

@router.post("/profile/{profile_id}/image")
async def upload_profile_image(
    profile_id: str,
    kind: str = Form(...),
    image: UploadFile = File(...),
    session: SessionContext = Depends(require_employer),
    service: ProfileService = Depends(get_profile_service),
):
    content = await image.read()
    data = service.upload_image(
        session,
        profile_id,
        kind=kind,
        filename=str(image.filename or "image.png"),
        content=content,
        content_type=image.content_type,
    )
    return {"ok": True, "data": data}
