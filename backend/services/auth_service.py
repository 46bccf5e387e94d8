import logging
import os
from typing import Any, Dict, Optional

from supabase import Client

from services.supabase_client import get_client
from utils_others.error_handler import ConflictError, UnauthorizedError, ValidationError
from utils_others.session_manager import SessionContext, get_dashboard_path

log = logging.getLogger(__name__)

class AuthService:
    def __init__(self, client: Optional[Client] = None) -> None:
        self.supabase = client or get_client()
        self.redirect_url = os.getenv("FRONTEND_BASE_URL", "http://localhost:3000") + "/"

    def signup(
        self,
        full_name: str,
        email: str,
        password: str,
        role: str,
        company_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        if role == "employer" and not (company_name or "").strip():
            raise ValidationError("Company name is required for employer signup")

        log.info("Attempting to create user %s in Supabase", email)
        try:
            auth_res = self.supabase.auth.sign_up({
                "email": email,
                "password": password,
                "options": {
                    "email_redirect_to": self.redirect_url,
                    "data": {
                        "full_name": full_name,
                        "role": role,
                        "company_name": company_name if role == "employer" else None,
                    },
                },
            })
        except Exception as ce:
            msg = str(ce)
            if "User already registered" in msg or "already exists" in msg:
                raise ConflictError("User already registered")
            raise ValidationError(f"Signup failed: {msg}", status_code=400)

        user = getattr(auth_res, "user", None)
        if not user:
            raise ValidationError("Signup failed", status_code=400)
        # The profiles row is created by a database trigger from the user metadata.
        return {"user_id": user.id, "email": email, "role": role}

    def login(self, email: str, password: str) -> Dict[str, Any]:
        try:
            res = self.supabase.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except Exception as e:
            log.info("Login failed for %s: %s", email, e)
            raise UnauthorizedError("Invalid credentials")
        session = getattr(res, "session", None)
        if not session:
            raise UnauthorizedError("Invalid credentials")
        user = getattr(res, "user", None)
        metadata = getattr(user, "user_metadata", None) or {}
        role = metadata.get("role", "candidate")
        return {
            "access_token": session.access_token,
            "refresh_token": getattr(session, "refresh_token", None),
            "user_id": getattr(user, "id", None),
            "role": role,
            "dashboard": get_dashboard_path(role),
        }

    def logout(self, session: SessionContext) -> None:
        try:
            self.supabase.auth.admin.sign_out(session.access_token)
        except Exception as e:
            # Token may already be invalid; the client discards it either way.
            log.warning("Sign out for %s failed: %s", session.user_id, e)
