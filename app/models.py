import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .database import Base

APPOINTMENT_STATUSES = ("pending", "approved", "declined", "completed")


def generate_id():
    """Generate an opaque identifier for a new row"""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Psychiatrist(Base):
    __tablename__ = "psychiatrists"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    specialty = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    bio = Column(Text, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)  # Login -> profile link
    availability = Column(Text, nullable=True)  # Free-form, e.g. "Mon-Wed afternoons"
    rating = Column(Float, nullable=True)
    password_hash = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)

    appointment_requests = relationship("AppointmentRequest", back_populates="psychiatrist")


class Patient(Base):
    __tablename__ = "patients"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)


class AppointmentRequest(Base):
    __tablename__ = "appointment_requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'declined', 'completed')",
            name="ck_appointment_requests_status",
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    psychiatrist_id = Column(
        String(36), ForeignKey("psychiatrists.id"), nullable=False, index=True
    )
    patient_name = Column(String(255), nullable=False)
    patient_email = Column(String(255), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")

    # Legacy intake fields
    preferred_date = Column(Date, nullable=True)
    preferred_time = Column(String(50), nullable=True)
    message = Column(Text, nullable=True)

    # Structured intake fields
    preferred_appointment_type = Column(String(20), nullable=True)  # in-person, virtual, either
    preferred_times = Column(JSON, nullable=True)  # list of time-window labels
    what_brings_you = Column(Text, nullable=True)
    hoping_to_work_on = Column(JSON, nullable=True)  # list of goal labels
    other_work_on = Column(Text, nullable=True)
    spoken_before = Column(String(20), nullable=True)  # yes, no, prefer-not-to-say
    anything_else = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow)

    psychiatrist = relationship("Psychiatrist", back_populates="appointment_requests")
