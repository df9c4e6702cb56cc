"""Appointment request schemas - Pydantic models for payloads and responses"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import blank_to_none

APPOINTMENT_TYPES = ("in-person", "virtual", "either")
TIME_WINDOWS = (
    "Weekday mornings",
    "Weekday afternoons",
    "Weekday evenings",
    "Weekends",
    "Flexible",
)
WORK_ON_GOALS = (
    "Anxiety or stress",
    "Depression or low mood",
    "Medication management",
    "Relationships or family",
    "Not sure yet",
)
OTHER_GOAL_PREFIX = "Other"
SPOKEN_BEFORE_OPTIONS = ("yes", "no", "prefer-not-to-say")

LEGACY_FIELDS = ("preferred_date", "preferred_time", "message")
CURRENT_FIELDS = (
    "preferred_appointment_type",
    "preferred_times",
    "what_brings_you",
    "hoping_to_work_on",
    "other_work_on",
    "spoken_before",
    "anything_else",
)
CURRENT_REQUIRED_FIELDS = (
    "preferred_appointment_type",
    "preferred_times",
    "what_brings_you",
    "hoping_to_work_on",
    "spoken_before",
)

# Fields a requester may patch after submission
UPDATABLE_FIELDS = ("patient_name", "patient_email") + CURRENT_FIELDS


class LegacyIntake(BaseModel):
    """Free-form intake from the first version of the request form"""

    preferred_date: Optional[date] = None
    preferred_time: Optional[str] = None
    message: Optional[str] = None


class CurrentIntake(BaseModel):
    """Structured intake questionnaire"""

    preferred_appointment_type: str
    preferred_times: list[str]
    what_brings_you: str
    hoping_to_work_on: list[str]
    other_work_on: Optional[str] = None
    spoken_before: str
    anything_else: Optional[str] = None


class AppointmentCreate(BaseModel):
    """
    Inbound appointment request.

    Everything is optional at the schema level so that missing fields are
    reported together by the mapping layer rather than field by field.
    Unknown keys (including status) are ignored.
    """

    psychiatrist_id: Optional[str] = None
    patient_name: Optional[str] = None
    patient_email: Optional[str] = None
    status: Optional[str] = None

    preferred_date: Optional[date] = None
    preferred_time: Optional[str] = None
    message: Optional[str] = None

    preferred_appointment_type: Optional[str] = None
    preferred_times: Optional[list[str]] = None
    what_brings_you: Optional[str] = None
    hoping_to_work_on: Optional[list[str]] = None
    other_work_on: Optional[str] = None
    spoken_before: Optional[str] = None
    anything_else: Optional[str] = None

    @field_validator("preferred_date", "preferred_time", "message", mode="before")
    @classmethod
    def empty_legacy_to_none(cls, v):
        return blank_to_none(v)

    def uses_current_fields(self) -> bool:
        return any(getattr(self, name) is not None for name in CURRENT_FIELDS)


class AppointmentUpdate(BaseModel):
    """Partial update from the requester; status and psychiatrist are not accepted here"""

    patient_name: Optional[str] = None
    patient_email: Optional[str] = None
    preferred_appointment_type: Optional[str] = None
    preferred_times: Optional[list[str]] = None
    what_brings_you: Optional[str] = None
    hoping_to_work_on: Optional[list[str]] = None
    other_work_on: Optional[str] = None
    spoken_before: Optional[str] = None
    anything_else: Optional[str] = None


class StatusUpdate(BaseModel):
    """Body of PUT /appointments/update"""

    id: Optional[str] = None
    status: Optional[str] = None


class AppointmentResponse(BaseModel):
    """A stored appointment request, flattened the way the table stores it"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    psychiatrist_id: str
    patient_name: str
    patient_email: str
    status: str
    preferred_date: Optional[date] = None
    preferred_time: Optional[str] = None
    message: Optional[str] = None
    preferred_appointment_type: Optional[str] = None
    preferred_times: Optional[list[str]] = None
    what_brings_you: Optional[str] = None
    hoping_to_work_on: Optional[list[str]] = None
    other_work_on: Optional[str] = None
    spoken_before: Optional[str] = None
    anything_else: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
