import logging
from typing import Any, Dict, Optional

from models.notification_models import StatusEmailRequest
from utils_others.email_templates import EmailTemplates
from utils_others.email_transport import EmailError, get_transport, send_email
from utils_others.error_handler import MissingRecipientError, NotificationError

log = logging.getLogger(__name__)

class NotificationService:
    """
    Renders and sends application status emails. One attempt per call; the
    transport is picked from configuration unless one is injected.
    """

    def __init__(self, transport=None, templates: Optional[EmailTemplates] = None):
        self._transport = transport
        self.templates = templates or EmailTemplates()

    @property
    def transport(self):
        if self._transport is None:
            try:
                self._transport = get_transport()
            except EmailError as e:
                raise NotificationError(str(e)) from e
        return self._transport

    def render_status_email(self, request: StatusEmailRequest) -> str:
        return self.templates.application_status(
            candidate_name=request.candidate_name or "Candidate",
            job_title=request.job_title,
            status=request.status,
            assignment_name=request.assignment_name,
            assignment_link=request.assignment_link,
        )

    def dispatch(self, request: StatusEmailRequest) -> Dict[str, Any]:
        to = (request.to or "").strip()
        if not to:
            log.error("Recipient email is missing")
            raise MissingRecipientError()

        html = self.render_status_email(request)
        subject = self.templates.application_status_subject(request.job_title)
        log.info("Sending status email to %s (status=%s)", to, request.status)
        try:
            send_email(to=to, subject=subject, html=html, transport=self.transport)
        except EmailError as e:
            raise NotificationError(f"Email delivery failed: {e}") from e
        return {"success": True}
