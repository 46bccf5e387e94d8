from fastapi import APIRouter, Depends

from models.auth_models import LoginRequest, SignupRequest
from routers.dependencies import get_auth_service
from services.auth_service import AuthService
from utils_others.security import get_current_session
from utils_others.session_manager import SessionContext

router = APIRouter(tags=["auth"])

@router.post("/signup")
def signup(payload: SignupRequest, service: AuthService = Depends(get_auth_service)):
    """Register a candidate or employer. Admin accounts are never created here."""
    result = service.signup(
        full_name=payload.full_name,
        email=payload.email,
        password=payload.password,
        role=payload.role.value,
        company_name=payload.company_name,
    )
    return {"ok": True, "data": result, "message": "Account created! You can now log in with your credentials."}

@router.post("/login")
def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)):
    return {"ok": True, "data": service.login(payload.email, payload.password)}

@router.post("/logout")
def logout(
    session: SessionContext = Depends(get_current_session),
    service: AuthService = Depends(get_auth_service),
):
    service.logout(session)
    return {"ok": True}

@router.get("/session")
def current_session(session: SessionContext = Depends(get_current_session)):
    return {"ok": True, "data": session.to_dict()}
