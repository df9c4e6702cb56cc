"""Psychiatrist service - Directory and profile business logic"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...auth import SessionContext, authorize_psychiatrist
from ...errors import MissingFieldError, NotFoundError
from ...models import Psychiatrist
from ...shared.validators import blank_to_none, is_blank
from .repository import PsychiatristRepository
from .schemas import PsychiatristUpdate

logger = logging.getLogger(__name__)

REQUIRED_PROFILE_FIELDS = ("name", "specialty", "location", "bio")


class PsychiatristService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = PsychiatristRepository()

    def list_psychiatrists(self) -> list[Psychiatrist]:
        return self.repo.list_psychiatrists(self.db)

    def get_psychiatrist(self, psychiatrist_id: str) -> Psychiatrist:
        psychiatrist = self.repo.get_by_id(self.db, psychiatrist_id)
        if not psychiatrist:
            raise NotFoundError("Psychiatrist not found")
        return psychiatrist

    def update_profile(
        self, psychiatrist_id: str, data: PsychiatristUpdate, session: Optional[SessionContext]
    ) -> Psychiatrist:
        """Only the owning psychiatrist (or an admin) may edit a profile"""
        psychiatrist = self.get_psychiatrist(psychiatrist_id)
        authorize_psychiatrist(session, psychiatrist_id, enforce=True)

        changes = data.model_dump(exclude_unset=True)
        cleared = [
            name for name in REQUIRED_PROFILE_FIELDS if name in changes and is_blank(changes[name])
        ]
        if cleared:
            raise MissingFieldError(cleared)

        # An explicit null clears an optional field
        updates = {
            key: blank_to_none(value.strip() if value is not None else None)
            for key, value in changes.items()
        }
        psychiatrist = self.repo.update_psychiatrist(self.db, psychiatrist, **updates)
        logger.info(f"✏️ Psychiatrist {psychiatrist_id} updated profile: {sorted(updates)}")
        return psychiatrist
