from typing import Any, Dict, List, Optional

from pydantic import BaseModel, EmailStr, field_validator

class CandidateProfileRequest(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    resume_link: Optional[str] = None
    education: Optional[List[Dict[str, Any]]] = None
    experience: Optional[List[Dict[str, Any]]] = None
    projects: Optional[List[Dict[str, Any]]] = None
    achievements: Optional[List[Dict[str, Any]]] = None

    @field_validator("full_name")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("full_name cannot be null")
        return v

class EmployerProfileRequest(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    company_name: Optional[str] = None
    company_description: Optional[str] = None
    company_website: Optional[str] = None
    company_address: Optional[str] = None
    company_logo_url: Optional[str] = None
    profile_image_url: Optional[str] = None

    @field_validator("full_name", "company_name")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v

class CreateEmployerRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: str
    company_name: str
    company_description: Optional[str] = None
    company_website: Optional[str] = None
    company_address: Optional[str] = None
    phone: Optional[str] = None
