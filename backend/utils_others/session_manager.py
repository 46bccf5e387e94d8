from dataclasses import dataclass
from typing import Any, Dict, Optional

@dataclass(frozen=True)
class SessionContext:
    """Authenticated caller, resolved once per request and passed to services."""
    user_id: str
    email: Optional[str]
    role: str
    is_admin: bool = False
    access_token: Optional[str] = None
    full_name: Optional[str] = None

    def has_role(self, *roles: str) -> bool:
        if self.is_admin and "admin" in roles:
            return True
        # Admin rights come only from the user_roles table.
        return self.role != "admin" and self.role in roles

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "role": self.role,
            "is_admin": self.is_admin,
            "full_name": self.full_name,
            "dashboard": get_dashboard_path(self.role),
        }

def create_session_context(user: Any, profile: Optional[Dict[str, Any]], is_admin: bool, token: Optional[str] = None) -> SessionContext:
    """
    Build the session from a Supabase auth user and its profiles row.

    The role is read from the profiles row only. User metadata is writable by
    the user and is used for the display name alone.
    """
    metadata = getattr(user, "user_metadata", None) or {}
    profile = profile or {}
    role = profile.get("role") or "candidate"
    return SessionContext(
        user_id=str(user.id),
        email=profile.get("email") or getattr(user, "email", None),
        role=role,
        is_admin=is_admin,
        access_token=token,
        full_name=profile.get("full_name") or metadata.get("full_name"),
    )

def get_dashboard_path(role: str) -> str:
    if role in ("employer", "admin"):
        return "/employer/dashboard"
    return "/candidate/dashboard"
