"""Psychiatrist domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class PsychiatristUpdate(BaseModel):
    """Profile fields the owning psychiatrist may change"""

    name: Optional[str] = None
    specialty: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    availability: Optional[str] = None


class PsychiatristResponse(BaseModel):
    """Public directory profile"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    specialty: str
    location: str
    bio: str
    email: str
    availability: Optional[str] = None
    rating: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
