import logging
from typing import Any, Dict, List, Optional, Tuple

from supabase import Client

from models.application_models import ApplicationStatus, parse_status, status_display
from models.notification_models import StatusEmailRequest
from services.notification_service import NotificationService
from services.supabase_client import execute, first_row, get_client
from utils_others.error_handler import ConflictError, ForbiddenError, NotFoundError
from utils_others.session_manager import SessionContext

log = logging.getLogger(__name__)

# Columns the candidate may see on their own applications; notes are employer-only.
CANDIDATE_COLUMNS = (
    "id, job_id, candidate_id, resume_link, cover_letter, status, "
    "assignment_name, assignment_link, created_at"
)

class ApplicationService:
    def __init__(self, client: Optional[Client] = None, notifier: Optional[NotificationService] = None):
        self.supabase = client or get_client()
        self.notifier = notifier or NotificationService()

    # Lookups

    def _get_application(self, application_id: str) -> Dict[str, Any]:
        res = execute(
            self.supabase.table("applications").select("*").eq("id", application_id).limit(1),
            "Get application",
        )
        application = first_row(res)
        if not application:
            raise NotFoundError("Application not found")
        return application

    def _get_job(self, job_id: str) -> Dict[str, Any]:
        res = execute(
            self.supabase.table("jobs").select("*").eq("id", job_id).limit(1),
            "Get job",
        )
        job = first_row(res)
        if not job:
            raise NotFoundError("Job not found")
        return job

    def _get_profile(self, profile_id: str) -> Dict[str, Any]:
        res = execute(
            self.supabase.table("profiles").select("id, full_name, email, phone").eq("id", profile_id).limit(1),
            "Get profile",
        )
        return first_row(res) or {}

    def _profiles_by_id(self, ids: List[str], columns: str) -> Dict[str, Dict[str, Any]]:
        if not ids:
            return {}
        res = execute(
            self.supabase.table("profiles").select(columns).in_("id", sorted(set(ids))),
            "Get profiles",
        )
        return {p["id"]: p for p in (res.data or [])}

    def _ensure_job_owner(self, session: SessionContext, job: Dict[str, Any]) -> None:
        if session.is_admin:
            return
        if job.get("employer_id") != session.user_id:
            raise ForbiddenError("You do not manage this job")

    def _load_owned(self, session: SessionContext, application_id: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        application = self._get_application(application_id)
        job = self._get_job(application["job_id"])
        self._ensure_job_owner(session, job)
        return application, job

    # Candidate side

    def apply(self, session: SessionContext, job_id: str, resume_link: str, cover_letter: Optional[str] = None) -> Dict[str, Any]:
        job = self._get_job(job_id)
        if job.get("status") != "active":
            raise NotFoundError("Job is not accepting applications")
        if self.has_applied(session, job_id):
            raise ConflictError("You have already applied for this position")

        payload = {
            "job_id": job_id,
            "candidate_id": session.user_id,
            "resume_link": resume_link,
            "cover_letter": cover_letter,
            "status": ApplicationStatus.applied.value,
        }
        res = execute(self.supabase.table("applications").insert(payload), "Application")
        log.info("Candidate %s applied to job %s", session.user_id, job_id)
        return first_row(res) or payload

    def has_applied(self, session: SessionContext, job_id: str) -> bool:
        res = execute(
            self.supabase.table("applications")
            .select("id")
            .eq("job_id", job_id)
            .eq("candidate_id", session.user_id)
            .limit(1),
            "Application lookup",
        )
        return first_row(res) is not None

    def list_for_candidate(self, session: SessionContext) -> Dict[str, Any]:
        res = execute(
            self.supabase.table("applications")
            .select(CANDIDATE_COLUMNS)
            .eq("candidate_id", session.user_id)
            .order("created_at", desc=True),
            "Application list",
        )
        applications = res.data or []

        jobs: Dict[str, Dict[str, Any]] = {}
        job_ids = sorted({a["job_id"] for a in applications})
        if job_ids:
            jobs_res = execute(
                self.supabase.table("jobs").select("id, title, location, job_type, employer_id").in_("id", job_ids),
                "Job list",
            )
            jobs = {j["id"]: j for j in (jobs_res.data or [])}
        employers = self._profiles_by_id(
            [j["employer_id"] for j in jobs.values() if j.get("employer_id")], "id, company_name"
        )

        items = []
        for application in applications:
            application.pop("notes", None)
            job = dict(jobs.get(application["job_id"]) or {})
            if job:
                job["company_name"] = (employers.get(job.get("employer_id")) or {}).get("company_name")
            items.append({**application, "job": job or None, "status_display": status_display(application.get("status"))})

        statuses = [parse_status(a.get("status")) for a in applications]
        stats = {
            "total": len(applications),
            "in_progress": sum(
                1 for s in statuses
                if s not in (ApplicationStatus.applied, ApplicationStatus.hired, ApplicationStatus.rejected)
            ),
            "hired": sum(1 for s in statuses if s == ApplicationStatus.hired),
        }
        return {"applications": items, "stats": stats}

    # Employer side

    def list_for_job(self, session: SessionContext, job_id: str) -> Dict[str, Any]:
        job = self._get_job(job_id)
        self._ensure_job_owner(session, job)
        res = execute(
            self.supabase.table("applications")
            .select("*")
            .eq("job_id", job_id)
            .order("created_at", desc=True),
            "Application list",
        )
        applications = res.data or []
        candidates = self._profiles_by_id(
            [a["candidate_id"] for a in applications], "id, full_name, email, phone"
        )
        items = [
            {
                **a,
                "candidate": candidates.get(a["candidate_id"]),
                "status_display": status_display(a.get("status")),
            }
            for a in applications
        ]
        return {"job": job, "applications": items}

    def update_status(
        self,
        session: SessionContext,
        application_id: str,
        status: ApplicationStatus,
        assignment_name: Optional[str] = None,
        assignment_link: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Persist a status change and then notify the candidate.

        The database write decides success. Notification is attempted only
        after the write succeeded, and any failure there is logged and
        reported as ``notification_sent: False``.
        """
        application, job = self._load_owned(session, application_id)
        status = ApplicationStatus(status)

        update_data: Dict[str, Any] = {"status": status.value}
        if status == ApplicationStatus.assignment:
            if assignment_name is not None:
                update_data["assignment_name"] = assignment_name
            if assignment_link is not None:
                update_data["assignment_link"] = assignment_link

        res = execute(
            self.supabase.table("applications").update(update_data).eq("id", application_id),
            "Update status",
        )
        updated = first_row(res) or {**application, **update_data}
        log.info("Application %s moved from %s to %s", application_id, application.get("status"), status.value)

        notification_sent = self._notify_status_change(updated, job, status)
        return {"application": updated, "notification_sent": notification_sent}

    def _notify_status_change(self, application: Dict[str, Any], job: Dict[str, Any], status: ApplicationStatus) -> bool:
        try:
            candidate = self._get_profile(application["candidate_id"])
            request = StatusEmailRequest(
                to=candidate.get("email"),
                candidate_name=candidate.get("full_name") or "Candidate",
                job_title=job.get("title") or "",
                status=status.value,
            )
            if status == ApplicationStatus.assignment:
                request.assignment_name = application.get("assignment_name")
                request.assignment_link = application.get("assignment_link")
            self.notifier.dispatch(request)
            return True
        except Exception:
            log.exception("Status email for application %s failed", application.get("id"))
            return False

    def update_notes(self, session: SessionContext, application_id: str, notes: str) -> Dict[str, Any]:
        self._load_owned(session, application_id)
        res = execute(
            self.supabase.table("applications").update({"notes": notes}).eq("id", application_id),
            "Update notes",
        )
        return first_row(res) or {"id": application_id, "notes": notes}
