import smtplib

import pytest

from utils_others import email_transport
from utils_others.email_transport import (
    EmailError,
    ResendTransport,
    SmtpTransport,
    get_transport,
    send_email,
)

class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None, context=None):
        self.host = host
        self.port = port
        self.calls = []
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.calls.append("quit")
        return False

    def ehlo(self):
        self.calls.append("ehlo")

    def starttls(self, context=None):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user))

    def send_message(self, msg):
        self.sent.append(msg)

@pytest.fixture(autouse=True)
def reset_fake_smtp():
    FakeSMTP.instances = []

def make_smtp(**overrides):
    options = dict(host="smtp.test", port=587, user="mailer", password="pw", from_addr="jobs@portal.test")
    options.update(overrides)
    return SmtpTransport(**options)

def test_get_transport_uses_environment(monkeypatch):
    monkeypatch.setenv("EMAIL_TRANSPORT", "smtp")
    assert isinstance(get_transport(), SmtpTransport)
    monkeypatch.delenv("EMAIL_TRANSPORT")
    assert isinstance(get_transport(), ResendTransport)

def test_get_transport_unknown():
    with pytest.raises(EmailError):
        get_transport("pigeon")

def test_smtp_rejects_unknown_security():
    with pytest.raises(EmailError):
        make_smtp(security="plaintext")

def test_smtp_starttls_flow(monkeypatch):
    monkeypatch.setattr(email_transport.smtplib, "SMTP", FakeSMTP)
    make_smtp(security="starttls").send("casey@example.test", "Application Update - Backend Engineer", "<p>Hi</p>")

    [server] = FakeSMTP.instances
    assert (server.host, server.port) == ("smtp.test", 587)
    assert server.calls[:3] == ["ehlo", "starttls", "ehlo"]
    assert ("login", "mailer") in server.calls
    [msg] = server.sent
    assert msg["To"] == "casey@example.test"
    assert msg["From"] == "jobs@portal.test"
    assert msg["Subject"] == "Application Update - Backend Engineer"
    assert "<p>Hi</p>" in msg.get_body(preferencelist=("html",)).get_content()

def test_smtp_implicit_tls(monkeypatch):
    monkeypatch.setattr(email_transport.smtplib, "SMTP_SSL", FakeSMTP)
    make_smtp(port=465, security="ssl").send("casey@example.test", "Subject", "<p>Hi</p>")
    [server] = FakeSMTP.instances
    assert server.port == 465
    assert "starttls" not in server.calls

def test_smtp_errors_become_email_errors(monkeypatch):
    def refuse(*args, **kwargs):
        raise smtplib.SMTPConnectError(421, "busy")
    monkeypatch.setattr(email_transport.smtplib, "SMTP", refuse)
    with pytest.raises(EmailError):
        make_smtp().send("casey@example.test", "Subject", "<p>Hi</p>")

def test_smtp_message_strips_header_line_breaks():
    msg = make_smtp().build_message("casey@example.test", "Hello\r\nBcc: someone@else.test", "<p>Hi</p>")
    assert msg["Subject"] == "Hello Bcc: someone@else.test"
    assert msg["Bcc"] is None

def test_resend_requires_api_key(monkeypatch):
    monkeypatch.delenv("RESEND_API_KEY", raising=False)
    with pytest.raises(EmailError):
        ResendTransport().send("casey@example.test", "Subject", "<p>Hi</p>")

def test_resend_sends_payload(monkeypatch):
    captured = {}

    def fake_send(params):
        captured.update(params)
        return {"id": "re_123"}

    monkeypatch.setattr(email_transport.resend.Emails, "send", fake_send)
    result = ResendTransport(api_key="re_key", from_addr="jobs@portal.test").send(
        "casey@example.test", "Subject", "<p>Hi</p>"
    )
    assert result == {"id": "re_123"}
    assert captured["to"] == ["casey@example.test"]
    assert captured["from"] == "jobs@portal.test"

def test_send_email_uses_given_transport():
    class Recorder:
        name = "recorder"
        def __init__(self):
            self.sent = []
        def send(self, to, subject, html):
            self.sent.append(to)
            return {"id": "1"}

    recorder = Recorder()
    assert send_email("casey@example.test", "Subject", "<p>Hi</p>", transport=recorder) == {"id": "1"}
    assert recorder.sent == ["casey@example.test"]
