from fastapi import APIRouter, Depends

from models.notification_models import NotificationResult, StatusEmailRequest
from routers.dependencies import get_notification_service
from services.notification_service import NotificationService
from utils_others.security import require_employer
from utils_others.session_manager import SessionContext

router = APIRouter(tags=["notification"])

@router.post("/send-application-email", response_model=NotificationResult)
def send_application_email(
    payload: StatusEmailRequest,
    notifier: NotificationService = Depends(get_notification_service),
    session: SessionContext = Depends(require_employer),
):
    """Send one status email. Missing recipient -> 400, transport failure -> 502."""
    return notifier.dispatch(payload)
