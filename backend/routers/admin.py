from typing import Optional

from fastapi import APIRouter, Depends, Query

from models.profile_models import CreateEmployerRequest
from routers.dependencies import get_profile_service
from services.profile_service import ProfileService
from utils_others.security import require_admin
from utils_others.session_manager import SessionContext

router = APIRouter(tags=["admin"])

@router.get("/employers")
def list_employers(
    search: Optional[str] = Query(default=None),
    session: SessionContext = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    return {"ok": True, "data": service.list_employers(search)}

@router.post("/employers")
def create_employer(
    payload: CreateEmployerRequest,
    session: SessionContext = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    data = service.create_employer(payload.model_dump())
    return {"ok": True, "data": data, "message": f"Employer account created for {payload.email}"}
