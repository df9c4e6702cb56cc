"""Psychiatrist repository - Database operations for psychiatrist profiles"""

from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Psychiatrist, utcnow
from ...shared.datastore import datastore_errors


class PsychiatristRepository:
    """Repository for psychiatrist database operations"""

    @staticmethod
    def list_psychiatrists(db: Session) -> list[Psychiatrist]:
        """Directory listing, ordered by name"""
        with datastore_errors(db, "listing psychiatrists"):
            return db.query(Psychiatrist).order_by(Psychiatrist.name.asc()).all()

    @staticmethod
    def get_by_id(db: Session, psychiatrist_id: str) -> Optional[Psychiatrist]:
        with datastore_errors(db, "loading psychiatrist"):
            return db.query(Psychiatrist).filter(Psychiatrist.id == psychiatrist_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[Psychiatrist]:
        with datastore_errors(db, "loading psychiatrist"):
            return (
                db.query(Psychiatrist)
                .filter(func.lower(Psychiatrist.email) == email.lower())
                .first()
            )

    @staticmethod
    def create_psychiatrist(db: Session, **fields: Any) -> Psychiatrist:
        with datastore_errors(db, "creating psychiatrist"):
            psychiatrist = Psychiatrist(**fields)
            db.add(psychiatrist)
            db.commit()
            db.refresh(psychiatrist)
            return psychiatrist

    @staticmethod
    def update_psychiatrist(db: Session, psychiatrist: Psychiatrist, **updates: Any) -> Psychiatrist:
        """Write the given columns (None included) and refresh updated_at"""
        with datastore_errors(db, "updating psychiatrist"):
            for key, value in updates.items():
                setattr(psychiatrist, key, value)
            psychiatrist.updated_at = utcnow()
            db.commit()
            db.refresh(psychiatrist)
            return psychiatrist
