import logging
import time
from typing import Any, Dict, List, Optional

from supabase import Client

from services.supabase_client import execute, first_row, get_client
from utils_others.error_handler import ConflictError, ForbiddenError, NotFoundError, ValidationError
from utils_others.file_upload import (
    ALLOWED_IMAGE_TYPES,
    PROFILE_IMAGES_BUCKET,
    get_public_url,
    upload_to_bucket,
)
from utils_others.session_manager import SessionContext

log = logging.getLogger(__name__)

IMAGE_FIELDS = {"profile": "profile_image_url", "logo": "company_logo_url"}

class ProfileService:
    def __init__(self, client: Optional[Client] = None):
        self.supabase = client or get_client()

    def get_profile(self, profile_id: str) -> Dict[str, Any]:
        res = execute(self.supabase.table("profiles").select("*").eq("id", profile_id).limit(1), "Get profile")
        profile = first_row(res)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def _update(self, profile_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        res = execute(
            self.supabase.table("profiles").update(update_data).eq("id", profile_id),
            "Profile update",
        )
        profile = first_row(res)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def update_candidate_profile(self, session: SessionContext, update_data: Dict[str, Any]) -> Dict[str, Any]:
        if "skills" in update_data and update_data["skills"] is not None:
            update_data["skills"] = [s.strip() for s in update_data["skills"] if s and s.strip()]
        return self._update(session.user_id, update_data)

    def _ensure_can_edit(self, session: SessionContext, profile_id: str) -> None:
        if session.user_id != profile_id and not session.is_admin:
            raise ForbiddenError("You cannot edit this profile")

    def get_employer_profile(self, profile_id: str) -> Dict[str, Any]:
        profile = self.get_profile(profile_id)
        if profile.get("role") != "employer":
            raise NotFoundError("Employer profile not found")
        return profile

    def update_employer_profile(self, session: SessionContext, profile_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        self._ensure_can_edit(session, profile_id)
        return self._update(profile_id, update_data)

    def upload_image(
        self,
        session: SessionContext,
        profile_id: str,
        kind: str,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Store a profile image or company logo and return its public URL (the profile row is not updated)."""
        self._ensure_can_edit(session, profile_id)
        if kind not in IMAGE_FIELDS:
            raise ValidationError("kind must be 'profile' or 'logo'")
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise ValidationError("Only image uploads are allowed")

        ext = filename.rsplit(".", 1)[-1] if "." in (filename or "") else "png"
        path = f"{profile_id}/{kind}-{int(time.time() * 1000)}.{ext}"
        upload_to_bucket(self.supabase, PROFILE_IMAGES_BUCKET, path, content, content_type)
        url = get_public_url(self.supabase, PROFILE_IMAGES_BUCKET, path)
        log.info("Uploaded %s image for profile %s", kind, profile_id)
        return {"path": path, "public_url": url, "field": IMAGE_FIELDS[kind]}

    def list_employers(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        res = execute(
            self.supabase.table("profiles").select("*").eq("role", "employer").order("created_at", desc=True),
            "Employer list",
        )
        employers = res.data or []
        if search:
            term = search.lower()
            employers = [
                e for e in employers
                if term in (e.get("company_name") or "").lower()
                or term in (e.get("full_name") or "").lower()
                or term in (e.get("email") or "").lower()
            ]
        return employers

    def create_employer(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a confirmed employer account through the auth admin API and fill its profile."""
        try:
            res = self.supabase.auth.admin.create_user({
                "email": payload["email"],
                "password": payload["password"],
                "email_confirm": True,
                "user_metadata": {
                    "full_name": payload["full_name"],
                    "role": "employer",
                    "company_name": payload["company_name"],
                },
            })
        except Exception as e:
            msg = str(e)
            if "already" in msg.lower():
                raise ConflictError("User already registered")
            raise ValidationError(f"Could not create employer: {msg}", status_code=400)
        user = getattr(res, "user", None)
        if not user:
            raise ValidationError("Could not create employer", status_code=400)

        profile = {
            "id": user.id,
            "email": payload["email"],
            "role": "employer",
            "full_name": payload["full_name"],
            "company_name": payload["company_name"],
            "company_description": payload.get("company_description"),
            "company_website": payload.get("company_website"),
            "company_address": payload.get("company_address"),
            "phone": payload.get("phone"),
        }
        out = execute(self.supabase.table("profiles").upsert(profile, on_conflict="id"), "Profile save")
        log.info("Created employer account %s", payload["email"])
        return first_row(out) or profile
