"""Patient repository - Database operations for patient accounts"""

from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Patient
from ...shared.datastore import datastore_errors


class PatientRepository:
    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[Patient]:
        with datastore_errors(db, "loading patient"):
            return db.query(Patient).filter(func.lower(Patient.email) == email.lower()).first()

    @staticmethod
    def get_by_id(db: Session, patient_id: str) -> Optional[Patient]:
        with datastore_errors(db, "loading patient"):
            return db.query(Patient).filter(Patient.id == patient_id).first()

    @staticmethod
    def create_patient(db: Session, **fields: Any) -> Patient:
        with datastore_errors(db, "creating patient"):
            patient = Patient(**fields)
            db.add(patient)
            db.commit()
            db.refresh(patient)
            return patient
