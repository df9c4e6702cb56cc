"""Appointment router - FastAPI endpoints for appointment requests"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ... import config
from ...auth import SessionContext, get_session_context
from ...database import get_db
from ...rate_limiter import create_rate_limiter
from ...shared.responses import envelope
from .schemas import AppointmentCreate, AppointmentResponse, AppointmentUpdate, StatusUpdate
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

rate_limit_intake = create_rate_limiter(
    limit=config.INTAKE_RATE_LIMIT,
    window_seconds=config.RATE_LIMIT_WINDOW_SECONDS,
    key_prefix="appointment_intake",
)


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


def to_response(request) -> dict:
    return AppointmentResponse.model_validate(request).model_dump(mode="json")


@router.post("")
async def create_appointment_request(
    data: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service),
    _: None = Depends(rate_limit_intake),
):
    """Submit an appointment request; it always starts as pending"""
    request = service.create_request(data)
    return envelope(to_response(request), status_code=201)


@router.get("")
async def list_appointment_requests(
    psychiatrist_id: Optional[str] = Query(None, alias="psychiatristId"),
    patient_email: Optional[str] = Query(None, alias="patientEmail"),
    session: Optional[SessionContext] = Depends(get_session_context),
    service: AppointmentService = Depends(get_appointment_service),
):
    """List a psychiatrist's (or a requester's) appointment requests, newest first"""
    requests = service.list_requests(session, psychiatrist_id, patient_email)
    return envelope([to_response(r) for r in requests])


# Registered before /{request_id} so "update" is not taken as an id
@router.put("/update")
async def update_appointment_status(
    data: StatusUpdate,
    session: Optional[SessionContext] = Depends(get_session_context),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Move a request to pending, approved, declined or completed"""
    request = service.set_status(data.id, data.status, session)
    return envelope(to_response(request))


@router.put("/{request_id}")
async def update_appointment_request(
    request_id: str,
    data: AppointmentUpdate,
    session: Optional[SessionContext] = Depends(get_session_context),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Patch the descriptive fields of a request"""
    request = service.update_request(request_id, data, session)
    return envelope(to_response(request))


@router.delete("/{request_id}")
async def delete_appointment_request(
    request_id: str,
    session: Optional[SessionContext] = Depends(get_session_context),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Cancel (hard delete) a request"""
    service.delete_request(request_id, session)
    return {"success": True}
