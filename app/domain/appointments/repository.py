"""Appointment request repository - Database operations for appointment requests"""

from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import AppointmentRequest, Psychiatrist, utcnow
from ...shared.datastore import datastore_errors


class AppointmentRepository:
    """Repository for appointment request database operations"""

    @staticmethod
    def get_request_by_id(db: Session, request_id: str) -> Optional[AppointmentRequest]:
        with datastore_errors(db, "loading appointment request"):
            return db.query(AppointmentRequest).filter(AppointmentRequest.id == request_id).first()

    @staticmethod
    def psychiatrist_exists(db: Session, psychiatrist_id: str) -> bool:
        with datastore_errors(db, "looking up psychiatrist"):
            return (
                db.query(Psychiatrist.id).filter(Psychiatrist.id == psychiatrist_id).first()
                is not None
            )

    @staticmethod
    def list_by_psychiatrist(db: Session, psychiatrist_id: str) -> list[AppointmentRequest]:
        """Requests addressed to one psychiatrist, newest first"""
        with datastore_errors(db, "listing appointment requests"):
            return (
                db.query(AppointmentRequest)
                .filter(AppointmentRequest.psychiatrist_id == psychiatrist_id)
                .order_by(AppointmentRequest.created_at.desc())
                .all()
            )

    @staticmethod
    def list_by_requester_email(db: Session, email: str) -> list[AppointmentRequest]:
        """Requests submitted from one email address, newest first"""
        with datastore_errors(db, "listing appointment requests"):
            return (
                db.query(AppointmentRequest)
                .filter(func.lower(AppointmentRequest.patient_email) == email.lower())
                .order_by(AppointmentRequest.created_at.desc())
                .all()
            )

    @staticmethod
    def create_request(db: Session, **fields: Any) -> AppointmentRequest:
        """Insert exactly one appointment request"""
        with datastore_errors(db, "creating appointment request"):
            request = AppointmentRequest(**fields)
            db.add(request)
            db.commit()
            db.refresh(request)
            return request

    @staticmethod
    def update_request(
        db: Session, request: AppointmentRequest, **updates: Any
    ) -> AppointmentRequest:
        """Write the given columns (None included) and refresh updated_at"""
        with datastore_errors(db, "updating appointment request"):
            for key, value in updates.items():
                setattr(request, key, value)
            request.updated_at = utcnow()
            db.commit()
            db.refresh(request)
            return request

    @staticmethod
    def delete_by_id(db: Session, request_id: str) -> int:
        """Hard delete by id; returns the number of rows removed"""
        with datastore_errors(db, "deleting appointment request"):
            deleted = (
                db.query(AppointmentRequest)
                .filter(AppointmentRequest.id == request_id)
                .delete(synchronize_session=False)
            )
            db.commit()
            return deleted
