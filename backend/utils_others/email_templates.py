from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from jinja2 import Environment, FileSystemLoader, select_autoescape

from models.application_models import status_display

TEMPLATE_DIR = Path(__file__).parent / "templates"
LINK_SCHEMES = ("http", "https")

def safe_link(url: Optional[str]) -> Optional[str]:
    """Returns the url if it is an absolute http(s) link, else None."""
    if not url:
        return None
    parsed = urlparse(url.strip())
    if parsed.scheme.lower() not in LINK_SCHEMES or not parsed.netloc:
        return None
    return url.strip()

class EmailTemplates:
    def __init__(self, template_dir: Optional[Path] = None):
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir or TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
        )

    def application_status(
        self,
        candidate_name: str,
        job_title: str,
        status: str,
        assignment_name: Optional[str] = None,
        assignment_link: Optional[str] = None,
    ) -> str:
        """Generate the application status update email"""
        template = self.env.get_template("application_status.html")
        return template.render(
            candidate_name=candidate_name,
            job_title=job_title,
            status_label=status_display(status)["label"],
            assignment_name=assignment_name,
            assignment_link=assignment_link,
            assignment_url=safe_link(assignment_link),
        )

    @staticmethod
    def application_status_subject(job_title: str) -> str:
        title = " ".join((job_title or "").split())
        return f"Application Update - {title}"
