import copy
import itertools
import os
import uuid
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from main import create_app
from routers.dependencies import get_notification_service
from services.notification_service import NotificationService
from services.supabase_client import get_supabase
from utils_others.email_transport import EmailError

EMPLOYER_ID = "employer-1"
OTHER_EMPLOYER_ID = "employer-2"
CANDIDATE_ID = "candidate-1"
ADMIN_ID = "admin-1"
JOB_ID = "job-1"
APPLICATION_ID = "application-1"

TOKENS = {
    "employer-token": EMPLOYER_ID,
    "other-employer-token": OTHER_EMPLOYER_ID,
    "candidate-token": CANDIDATE_ID,
    "admin-token": ADMIN_ID,
}

class FakeQuery:
    """Just enough of the supabase-py query builder for the services under test."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = None
        self.payload = None
        self.on_conflict = "id"
        self.filters = []
        self.order_by = None
        self.limit_to = None

    def select(self, columns="*"):
        self.op = "select"
        cols = [c.strip() for c in columns.split(",")]
        self.columns = None if "*" in cols else cols
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def upsert(self, payload, on_conflict="id"):
        self.op, self.payload, self.on_conflict = "upsert", payload, on_conflict
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.limit_to = count
        return self

    def _matches(self, row):
        return all(f(row) for f in self.filters)

    def _project(self, row):
        if self.columns is None:
            return copy.deepcopy(row)
        return {c: copy.deepcopy(row.get(c)) for c in self.columns}

    def execute(self):
        if (self.table, self.op) in self.db.failures:
            raise Exception(f"{self.op} on {self.table} failed")
        self.db.calls.append((self.table, self.op))
        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            new_rows = self.payload if isinstance(self.payload, list) else [self.payload]
            out = []
            for r in new_rows:
                row = {"id": str(uuid.uuid4()), "created_at": self.db.now(), **r}
                rows.append(row)
                out.append(copy.deepcopy(row))
            return SimpleNamespace(data=out, error=None)

        if self.op == "upsert":
            key = self.payload[self.on_conflict]
            existing = next((r for r in rows if r.get(self.on_conflict) == key), None)
            if existing:
                existing.update(self.payload)
                row = existing
            else:
                row = {"created_at": self.db.now(), **self.payload}
                rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)], error=None)

        matched = [r for r in rows if self._matches(r)]
        if self.op == "update":
            for r in matched:
                r.update(copy.deepcopy(self.payload))
            return SimpleNamespace(data=copy.deepcopy(matched), error=None)
        if self.op == "delete":
            self.db.tables[self.table] = [r for r in rows if r not in matched]
            return SimpleNamespace(data=copy.deepcopy(matched), error=None)

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda r: r.get(column) or "", reverse=desc)
        if self.limit_to is not None:
            matched = matched[: self.limit_to]
        return SimpleNamespace(data=[self._project(r) for r in matched], error=None)

class FakeAuthAdmin:
    def __init__(self, db):
        self.db = db
        self.signed_out = []

    def create_user(self, attributes):
        email = attributes["email"]
        if any(u.email == email for u in self.db.users.values()):
            raise Exception("A user with this email address has already been registered")
        user = self.db.add_user(str(uuid.uuid4()), email, attributes.get("user_metadata") or {})
        return SimpleNamespace(user=user)

    def sign_out(self, jwt, scope="global"):
        self.signed_out.append(jwt)

class FakeAuth:
    def __init__(self, db):
        self.db = db
        self.admin = FakeAuthAdmin(db)
        self.passwords = {}

    def get_user(self, token):
        user_id = self.db.tokens.get(token)
        if not user_id:
            raise Exception("invalid JWT")
        return SimpleNamespace(user=self.db.users[user_id])

    def sign_up(self, credentials):
        email = credentials["email"]
        if any(u.email == email for u in self.db.users.values()):
            raise Exception("User already registered")
        metadata = credentials.get("options", {}).get("data", {})
        user = self.db.add_user(str(uuid.uuid4()), email, metadata)
        self.passwords[email] = credentials["password"]
        return SimpleNamespace(user=user, session=None)

    def sign_in_with_password(self, credentials):
        email = credentials["email"]
        if self.passwords.get(email) != credentials["password"]:
            raise Exception("Invalid login credentials")
        user = next(u for u in self.db.users.values() if u.email == email)
        token = f"token-{user.id}"
        self.db.tokens[token] = user.id
        return SimpleNamespace(user=user, session=SimpleNamespace(access_token=token, refresh_token="refresh"))

class FakeBucket:
    def __init__(self, db, name):
        self.db = db
        self.name = name

    def upload(self, path, content, file_options=None):
        self.db.objects[(self.name, path)] = content
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://fake.supabase.co/storage/v1/object/public/{self.name}/{path}?"

class FakeStorage:
    def __init__(self, db):
        self.db = db

    def from_(self, bucket):
        return FakeBucket(self.db, bucket)

class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.users = {}
        self.tokens = {}
        self.objects = {}
        self.failures = set()
        self.calls = []
        self._clock = itertools.count(1)
        self.auth = FakeAuth(self)
        self.storage = FakeStorage(self)

    def now(self):
        return f"2024-06-01T00:00:{next(self._clock):02d}+00:00"

    def add_user(self, user_id, email, metadata):
        user = SimpleNamespace(id=user_id, email=email, user_metadata=metadata)
        self.users[user_id] = user
        return user

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, op):
        self.failures.add((table, op))

    def row(self, table, row_id):
        return next((r for r in self.tables.get(table, []) if r.get("id") == row_id), None)

class RecordingTransport:
    name = "recording"

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to, subject, html):
        if self.fail:
            raise EmailError("SMTP connection refused")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"id": f"msg-{len(self.sent)}"}

def seed(db):
    profiles = [
        {"id": EMPLOYER_ID, "role": "employer", "full_name": "Erin Employer", "email": "erin@acme.test",
         "company_name": "Acme Corp", "created_at": "2024-01-01"},
        {"id": OTHER_EMPLOYER_ID, "role": "employer", "full_name": "Omar Other", "email": "omar@globex.test",
         "company_name": "Globex", "created_at": "2024-01-02"},
        {"id": CANDIDATE_ID, "role": "candidate", "full_name": "Casey Candidate", "email": "casey@example.test",
         "phone": "555-0100", "created_at": "2024-01-03"},
        {"id": ADMIN_ID, "role": "candidate", "full_name": "Ada Admin", "email": "ada@portal.test",
         "created_at": "2024-01-04"},
    ]
    for p in profiles:
        db.add_user(p["id"], p["email"], {"role": p["role"], "full_name": p["full_name"]})
    db.tables["profiles"] = profiles
    db.tables["user_roles"] = [{"user_id": ADMIN_ID, "role": "admin"}]
    db.tables["jobs"] = [
        {"id": JOB_ID, "employer_id": EMPLOYER_ID, "title": "Backend Engineer",
         "description": "Build APIs in Python", "location": "Bangalore", "job_type": "Hybrid",
         "status": "active", "created_at": "2024-02-01"},
        {"id": "job-2", "employer_id": EMPLOYER_ID, "title": "Data Analyst",
         "description": "SQL and dashboards", "location": "Mumbai", "job_type": "Work From Office",
         "status": "active", "created_at": "2024-02-02"},
        {"id": "job-3", "employer_id": OTHER_EMPLOYER_ID, "title": "Frontend Engineer",
         "description": "React and TypeScript", "location": "Remote - Pune", "job_type": "Work From Home",
         "status": "active", "created_at": "2024-02-03"},
        {"id": "job-4", "employer_id": EMPLOYER_ID, "title": "Old Backend Role",
         "description": "Closed position", "location": "Bangalore", "job_type": "Hybrid",
         "status": "inactive", "created_at": "2024-01-15"},
    ]
    db.tables["applications"] = [
        {"id": APPLICATION_ID, "job_id": JOB_ID, "candidate_id": CANDIDATE_ID,
         "resume_link": "https://cv.example.test/casey.pdf", "cover_letter": None,
         "status": "applied", "assignment_name": None, "assignment_link": None,
         "notes": "Strong Python background", "created_at": "2024-03-01"},
    ]
    db.tokens.update(TOKENS)

@pytest.fixture
def fake_db():
    db = FakeSupabase()
    seed(db)
    return db

@pytest.fixture
def transport():
    return RecordingTransport()

@pytest.fixture
def notifier(transport):
    return NotificationService(transport=transport)

@pytest.fixture
def app(fake_db, notifier):
    app = create_app()
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_notification_service] = lambda: notifier
    return app

@pytest.fixture
def client(app):
    return TestClient(app)

def auth_header(token):
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def employer_auth():
    return auth_header("employer-token")

@pytest.fixture
def other_employer_auth():
    return auth_header("other-employer-token")

@pytest.fixture
def candidate_auth():
    return auth_header("candidate-token")

@pytest.fixture
def admin_auth():
    return auth_header("admin-token")

@pytest.fixture(scope="session")
def base_url() -> str:
    url = os.getenv("JOBPORTAL_BASE_URL")
    if not url:
        pytest.skip("JOBPORTAL_BASE_URL not set; skipping live API tests")
    return url.rstrip("/")
