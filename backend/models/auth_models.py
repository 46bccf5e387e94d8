from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr

class SignupRole(str, Enum):
    candidate = "candidate"
    employer = "employer"

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class SignupRequest(BaseModel):
    full_name: str
    email: EmailStr
    password: str
    role: SignupRole = SignupRole.candidate
    company_name: Optional[str] = None  # required for employers
