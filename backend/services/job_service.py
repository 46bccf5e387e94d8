from typing import Any, Dict, List, Optional

from supabase import Client

from services.supabase_client import execute, first_row, get_client
from utils_others.error_handler import NotFoundError
from utils_others.session_manager import SessionContext

def filter_jobs(
    jobs: List[Dict[str, Any]],
    search: Optional[str] = None,
    location: Optional[str] = None,
    job_type: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Title/description search and location match are case-insensitive substrings; type is exact."""
    filtered = jobs
    if search:
        term = search.lower()
        filtered = [
            j for j in filtered
            if term in (j.get("title") or "").lower() or term in (j.get("description") or "").lower()
        ]
    if location and location != "all":
        loc = location.lower()
        filtered = [j for j in filtered if loc in (j.get("location") or "").lower()]
    if job_type and job_type != "all":
        filtered = [j for j in filtered if j.get("job_type") == job_type]
    return filtered

class JobService:
    def __init__(self, client: Optional[Client] = None):
        self.supabase = client or get_client()

    def post_job(self, session: SessionContext, job_data: Dict[str, Any]) -> Dict[str, Any]:
        payload = {**job_data, "employer_id": session.user_id}
        res = execute(self.supabase.table("jobs").insert(payload), "Job post")
        return first_row(res) or payload

    def get_job(self, job_id: str) -> Dict[str, Any]:
        res = execute(self.supabase.table("jobs").select("*").eq("id", job_id).limit(1), "Get job")
        job = first_row(res)
        if not job:
            raise NotFoundError("Job not found")
        employer = first_row(execute(
            self.supabase.table("profiles").select("id, company_name, full_name").eq("id", job.get("employer_id")).limit(1),
            "Get employer",
        )) or {}
        return {**job, "company_name": employer.get("company_name"), "employer_name": employer.get("full_name")}

    def update_job(self, session: SessionContext, job_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        query = self.supabase.table("jobs").update(update_data).eq("id", job_id)
        if not session.is_admin:
            query = query.eq("employer_id", session.user_id)
        res = execute(query, "Update job")
        job = first_row(res)
        if not job:
            raise NotFoundError("Job not found")
        return job

    def list_active_jobs(
        self,
        search: Optional[str] = None,
        location: Optional[str] = None,
        job_type: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        res = execute(
            self.supabase.table("jobs").select("*").eq("status", "active").order("created_at", desc=True),
            "Job list",
        )
        jobs = filter_jobs(res.data or [], search=search, location=location, job_type=job_type)
        employer_ids = sorted({j["employer_id"] for j in jobs if j.get("employer_id")})
        companies: Dict[str, Any] = {}
        if employer_ids:
            prof = execute(
                self.supabase.table("profiles").select("id, company_name").in_("id", employer_ids),
                "Get employers",
            )
            companies = {p["id"]: p.get("company_name") for p in (prof.data or [])}
        return [{**j, "company_name": companies.get(j.get("employer_id"))} for j in jobs]

    def list_employer_jobs(self, session: SessionContext) -> Dict[str, Any]:
        res = execute(
            self.supabase.table("jobs").select("*").eq("employer_id", session.user_id).order("created_at", desc=True),
            "Job list",
        )
        jobs = res.data or []
        counts: Dict[str, int] = {}
        job_ids = [j["id"] for j in jobs]
        if job_ids:
            apps = execute(
                self.supabase.table("applications").select("id, job_id, status").in_("job_id", job_ids),
                "Application list",
            )
            for a in apps.data or []:
                counts[a["job_id"]] = counts.get(a["job_id"], 0) + 1

        items = [{**j, "application_count": counts.get(j["id"], 0)} for j in jobs]
        stats = {
            "total_jobs": len(jobs),
            "active_jobs": sum(1 for j in jobs if j.get("status") == "active"),
            "total_applications": sum(counts.values()),
        }
        return {"jobs": items, "stats": stats}
