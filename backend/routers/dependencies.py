from typing import Optional

from fastapi import Depends
from supabase import Client

from services.application_service import ApplicationService
from services.auth_service import AuthService
from services.job_service import JobService
from services.notification_service import NotificationService
from services.profile_service import ProfileService
from services.supabase_client import get_supabase

_notification_service: Optional[NotificationService] = None

def get_notification_service() -> NotificationService:
    global _notification_service
    if _notification_service is None:
        _notification_service = NotificationService()
    return _notification_service

def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)

def get_job_service(supabase: Client = Depends(get_supabase)) -> JobService:
    return JobService(supabase)

def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)

def get_application_service(
    supabase: Client = Depends(get_supabase),
    notifier: NotificationService = Depends(get_notification_service),
) -> ApplicationService:
    return ApplicationService(supabase, notifier)
