"""Psychiatrist router - public directory and profile editing"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import SessionContext, get_session_context
from ...database import get_db
from ...shared.responses import envelope
from .schemas import PsychiatristResponse, PsychiatristUpdate
from .service import PsychiatristService

router = APIRouter(prefix="/psychiatrists", tags=["Psychiatrists"])


def get_psychiatrist_service(db: Session = Depends(get_db)) -> PsychiatristService:
    """Dependency injection for PsychiatristService"""
    return PsychiatristService(db)


def to_response(psychiatrist) -> dict:
    return PsychiatristResponse.model_validate(psychiatrist).model_dump(mode="json")


@router.get("")
async def list_psychiatrists(service: PsychiatristService = Depends(get_psychiatrist_service)):
    """Browse all psychiatrists, ordered by name"""
    return envelope([to_response(p) for p in service.list_psychiatrists()])


@router.get("/{psychiatrist_id}")
async def get_psychiatrist(
    psychiatrist_id: str,
    service: PsychiatristService = Depends(get_psychiatrist_service),
):
    return envelope(to_response(service.get_psychiatrist(psychiatrist_id)))


@router.put("/{psychiatrist_id}")
async def update_psychiatrist(
    psychiatrist_id: str,
    data: PsychiatristUpdate,
    session: Optional[SessionContext] = Depends(get_session_context),
    service: PsychiatristService = Depends(get_psychiatrist_service),
):
    """Edit your own profile"""
    psychiatrist = service.update_profile(psychiatrist_id, data, session)
    return envelope(to_response(psychiatrist))
