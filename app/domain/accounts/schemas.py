"""Account schemas - sign-up and login payloads"""

from typing import Optional

from pydantic import BaseModel


class PsychiatristSignup(BaseModel):
    name: Optional[str] = None
    specialty: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    availability: Optional[str] = None


class PatientSignup(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Login for patients and psychiatrists; role picks which table is checked"""

    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class AdminLoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str
    subject_id: str
    email: str
