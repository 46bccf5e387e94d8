import logging
import os
import smtplib
import ssl
from email.message import EmailMessage
from typing import List, Optional, Union

import resend

log = logging.getLogger(__name__)

class EmailError(Exception):
    """Custom exception for email sending errors."""
    pass

def _clean_header(value: str) -> str:
    return " ".join((value or "").splitlines()).strip()

class ResendTransport:
    """Sends mail through the Resend HTTP API."""

    name = "resend"

    def __init__(self, api_key: Optional[str] = None, from_addr: Optional[str] = None):
        self.api_key = api_key or os.getenv("RESEND_API_KEY")
        self.from_addr = from_addr or os.getenv("EMAIL_FROM", "no-reply@jobportal.local")

    def send(self, to: Union[str, List[str]], subject: str, html: str) -> dict:
        if not self.api_key:
            raise EmailError("Missing RESEND_API_KEY")
        resend.api_key = self.api_key

        if isinstance(to, str):
            to = [to]

        try:
            return resend.Emails.send({
                "from": self.from_addr,
                "to": to,
                "subject": _clean_header(subject),
                "html": html,
            })
        except Exception as e:
            raise EmailError(str(e)) from e

class SmtpTransport:
    """
    Sends mail over SMTP. ``security`` is either ``starttls`` (plain connect,
    then upgrade) or ``ssl`` (implicit TLS, usually port 465).
    """

    name = "smtp"

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        from_addr: Optional[str] = None,
        security: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.host = host or os.getenv("SMTP_HOST", "localhost")
        self.port = port or int(os.getenv("SMTP_PORT", "587"))
        self.user = user or os.getenv("SMTP_USER")
        self.password = password or os.getenv("SMTP_PASSWORD")
        self.from_addr = from_addr or os.getenv("SMTP_FROM_EMAIL") or self.user
        self.security = (security or os.getenv("SMTP_SECURITY", "starttls")).lower()
        self.timeout = timeout or float(os.getenv("SMTP_TIMEOUT", "30"))
        if self.security not in ("starttls", "ssl"):
            raise EmailError(f"Unsupported SMTP_SECURITY: {self.security}")

    def build_message(self, to: Union[str, List[str]], subject: str, html: str) -> EmailMessage:
        recipients = [to] if isinstance(to, str) else list(to)
        msg = EmailMessage()
        msg["From"] = self.from_addr
        msg["To"] = ", ".join(_clean_header(r) for r in recipients)
        msg["Subject"] = _clean_header(subject)
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")
        return msg

    def _connect(self) -> smtplib.SMTP:
        context = ssl.create_default_context()
        if self.security == "ssl":
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context)
        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        server.ehlo()
        server.starttls(context=context)
        server.ehlo()
        return server

    def send(self, to: Union[str, List[str]], subject: str, html: str) -> dict:
        if not self.from_addr:
            raise EmailError("Missing SMTP_FROM_EMAIL")
        msg = self.build_message(to, subject, html)
        try:
            with self._connect() as server:
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise EmailError(str(e)) from e
        return {"id": msg.get("Message-ID"), "to": msg["To"]}

_TRANSPORTS = {
    ResendTransport.name: ResendTransport,
    SmtpTransport.name: SmtpTransport,
}

def get_transport(name: Optional[str] = None):
    """Build the transport selected by ``EMAIL_TRANSPORT`` (default: resend)."""
    name = (name or os.getenv("EMAIL_TRANSPORT", "resend")).strip().lower()
    try:
        transport_cls = _TRANSPORTS[name]
    except KeyError:
        raise EmailError(f"Unknown email transport: {name}")
    return transport_cls()

def send_email(
    to: Union[str, List[str]],
    subject: str,
    html: str,
    transport=None,
) -> dict:
    """
    Send one email through ``transport`` (or the configured one).
    Raises EmailError on failure. No retries.
    """
    transport = transport or get_transport()
    result = transport.send(to, subject, html)
    log.info("Email sent via %s to %s | subject=%s", transport.name, to, _clean_header(subject))
    return result
