"""Appointment service - Business logic for appointment requests and their status"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...auth import SessionContext, authorize_psychiatrist, authorize_requester
from ...errors import MissingFieldError, NotFoundError
from ...models import AppointmentRequest
from .mapping import map_create_payload, map_update_payload, normalize_email, validate_status
from .repository import AppointmentRepository
from .schemas import AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)


class AppointmentService:
    """Service layer for appointment request business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()

    def get_request(self, request_id: str) -> AppointmentRequest:
        request = self.repo.get_request_by_id(self.db, request_id)
        if not request:
            raise NotFoundError("Appointment request not found")
        return request

    def create_request(self, data: AppointmentCreate) -> AppointmentRequest:
        """Validate an intake form and store it as a pending request"""
        record = map_create_payload(data)
        if data.status is not None and data.status != "pending":
            logger.info(f"ℹ️ Ignoring client-supplied status '{data.status}' on new request")

        if not self.repo.psychiatrist_exists(self.db, record["psychiatrist_id"]):
            raise NotFoundError("Psychiatrist not found")

        request = self.repo.create_request(self.db, **record)
        logger.info(
            f"📥 Appointment request {request.id} created for psychiatrist {request.psychiatrist_id}"
        )
        return request

    def list_requests(
        self,
        session: Optional[SessionContext],
        psychiatrist_id: Optional[str] = None,
        patient_email: Optional[str] = None,
    ) -> list[AppointmentRequest]:
        """List requests for one psychiatrist or one requester email, newest first"""
        if psychiatrist_id:
            authorize_psychiatrist(session, psychiatrist_id)
            return self.repo.list_by_psychiatrist(self.db, psychiatrist_id)

        if patient_email:
            email = normalize_email(patient_email)
            authorize_requester(session, email)
            return self.repo.list_by_requester_email(self.db, email)

        raise MissingFieldError(["psychiatristId"])

    def update_request(
        self, request_id: str, data: AppointmentUpdate, session: Optional[SessionContext]
    ) -> AppointmentRequest:
        """Patch descriptive fields; only fields present in the payload are written"""
        request = self.get_request(request_id)
        authorize_requester(session, request.patient_email)

        updates = map_update_payload(
            data,
            existing_other_work_on=request.other_work_on,
            existing_goals=request.hoping_to_work_on,
        )
        request = self.repo.update_request(self.db, request, **updates)
        logger.info(f"✏️ Appointment request {request_id} updated: {sorted(updates)}")
        return request

    def set_status(
        self, request_id: Optional[str], status: Optional[str], session: Optional[SessionContext]
    ) -> AppointmentRequest:
        """
        Move a request to another status.

        Any status may move to any other. The previous value is overwritten;
        no history is kept.
        """
        # Either one missing reports both, as the status form always sends the pair
        if not request_id or not status:
            raise MissingFieldError(["id", "status"])
        validate_status(status)

        request = self.get_request(request_id)
        authorize_psychiatrist(session, request.psychiatrist_id)

        previous = request.status
        request = self.repo.update_request(self.db, request, status=status)
        logger.info(f"🔄 Appointment request {request_id} status: {previous} → {status}")
        return request

    def delete_request(self, request_id: str, session: Optional[SessionContext]) -> None:
        """
        Hard delete a request.

        An id that matches nothing is reported as success, same as a real
        delete; the zero-row case is only logged.
        """
        request = self.repo.get_request_by_id(self.db, request_id)
        if request is not None:
            authorize_requester(session, request.patient_email)

        deleted = self.repo.delete_by_id(self.db, request_id)
        if deleted == 0:
            logger.warning(f"⚠️ Delete of appointment request {request_id} matched no rows")
        else:
            logger.info(f"🗑️ Appointment request {request_id} deleted")
