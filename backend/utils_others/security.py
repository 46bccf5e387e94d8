import logging
from typing import Callable, Optional

from fastapi import Depends, Header
from supabase import Client

from services.supabase_client import execute, first_row, get_supabase
from utils_others.error_handler import ForbiddenError, UnauthorizedError
from utils_others.session_manager import SessionContext, create_session_context

log = logging.getLogger(__name__)

def get_bearer_token(authorization: Optional[str]) -> str:
    """
    Accepts either a full Authorization header value ("Bearer <token>") or a raw token string.
    """
    if not authorization:
        raise UnauthorizedError("Missing or invalid Authorization header")
    if authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    else:
        token = authorization.strip()
    if not token:
        raise UnauthorizedError("Missing or invalid Authorization header")
    return token

def get_user_from_bearer(token: str, supabase: Client) -> SessionContext:
    """Validates the token with Supabase auth and loads the caller's profile and admin flag."""
    try:
        res = supabase.auth.get_user(token)
    except Exception as e:
        log.info("Token validation failed: %s", e)
        raise UnauthorizedError("Invalid or expired token")
    user = getattr(res, "user", None)
    if not user:
        raise UnauthorizedError("Invalid or expired token")

    profile = first_row(execute(
        supabase.table("profiles").select("id, role, full_name, email").eq("id", user.id).limit(1),
        "Profile fetch",
    ))
    admin_row = first_row(execute(
        supabase.table("user_roles").select("role").eq("user_id", user.id).eq("role", "admin").limit(1),
        "Role fetch",
    ))
    return create_session_context(user, profile, is_admin=bool(admin_row), token=token)

def get_current_session(
    authorization: Optional[str] = Header(default=None),
    supabase: Client = Depends(get_supabase),
) -> SessionContext:
    token = get_bearer_token(authorization)
    return get_user_from_bearer(token, supabase)

def ensure_role(session: SessionContext, *roles: str) -> None:
    """
    Checks if a user has one of the required roles and raises if not.
    """
    if not session.has_role(*roles):
        raise ForbiddenError("Forbidden: insufficient role.")

def require_role(*roles: str) -> Callable[..., SessionContext]:
    def dependency(session: SessionContext = Depends(get_current_session)) -> SessionContext:
        ensure_role(session, *roles)
        return session
    return dependency

require_candidate = require_role("candidate")
require_employer = require_role("employer", "admin")

def require_admin(session: SessionContext = Depends(get_current_session)) -> SessionContext:
    if not session.is_admin:
        raise ForbiddenError("Admin access required")
    return session
