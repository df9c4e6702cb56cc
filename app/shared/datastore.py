"""Translate database failures into DatastoreError"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import DatastoreError

logger = logging.getLogger(__name__)


@contextmanager
def datastore_errors(db: Session, action: str):
    """
    Roll back and re-raise any SQLAlchemy error as DatastoreError.

    The driver's message is passed through unchanged; nothing is retried.
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        message = str(getattr(e, "orig", None) or e)
        logger.error(f"❌ Datastore error while {action}: {message}")
        raise DatastoreError(message, original=e) from e
