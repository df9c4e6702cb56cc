"""Account service - sign-up, login and admin sessions"""

import hmac
import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ... import config
from ...auth import (
    ROLE_ADMIN,
    ROLE_PATIENT,
    ROLE_PSYCHIATRIST,
    SessionContext,
    create_access_token,
    hash_password,
    verify_password,
)
from ...errors import (
    AuthenticationError,
    ConflictError,
    DatastoreError,
    InvalidEnumValueError,
    MissingFieldError,
    NotFoundError,
    WeakPasswordError,
)
from ...shared.validators import is_blank
from ..appointments.mapping import normalize_email
from ..psychiatrists.repository import PsychiatristRepository
from .repository import PatientRepository
from .schemas import (
    AdminLoginRequest,
    LoginRequest,
    PatientSignup,
    PsychiatristSignup,
    SessionResponse,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
ADMIN_SUBJECT_ID = "admin"


def _require(data, fields: tuple[str, ...]) -> None:
    missing = [name for name in fields if is_blank(getattr(data, name))]
    if missing:
        raise MissingFieldError(missing)


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError()


@contextmanager
def _email_conflicts():
    """A concurrent sign-up that wins the unique email index is a conflict, not a 500"""
    try:
        yield
    except DatastoreError as e:
        if isinstance(e.original, IntegrityError):
            logger.warning(f"⚠️ Sign-up lost a race on a registered email: {e.message}")
            raise ConflictError("This email is already registered") from e
        raise


def _session_for(subject_id: str, email: str, role: str) -> SessionResponse:
    return SessionResponse(
        access_token=create_access_token(subject_id, email, role),
        role=role,
        subject_id=subject_id,
        email=email,
    )


class AccountService:
    def __init__(self, db: Session):
        self.db = db
        self.psychiatrists = PsychiatristRepository()
        self.patients = PatientRepository()

    def signup_psychiatrist(self, data: PsychiatristSignup) -> SessionResponse:
        """Create a psychiatrist profile with login credentials"""
        _require(data, ("name", "specialty", "location", "bio", "email", "password"))
        email = normalize_email(data.email)
        _check_password(data.password)

        if self.psychiatrists.get_by_email(self.db, email):
            raise ConflictError("This email is already registered")

        with _email_conflicts():
            psychiatrist = self.psychiatrists.create_psychiatrist(
                self.db,
                name=data.name.strip(),
                specialty=data.specialty.strip(),
                location=data.location.strip(),
                bio=data.bio.strip(),
                email=email,
                availability=data.availability,
                password_hash=hash_password(data.password),
            )
        logger.info(f"🆕 Psychiatrist account created: {psychiatrist.id}")
        return _session_for(psychiatrist.id, psychiatrist.email, ROLE_PSYCHIATRIST)

    def signup_patient(self, data: PatientSignup) -> SessionResponse:
        _require(data, ("name", "email", "password"))
        email = normalize_email(data.email)
        _check_password(data.password)

        if self.patients.get_by_email(self.db, email):
            raise ConflictError("This email is already registered")

        with _email_conflicts():
            patient = self.patients.create_patient(
                self.db,
                name=data.name.strip(),
                email=email,
                password_hash=hash_password(data.password),
            )
        logger.info(f"🆕 Patient account created: {patient.id}")
        return _session_for(patient.id, patient.email, ROLE_PATIENT)

    def login(self, data: LoginRequest) -> SessionResponse:
        _require(data, ("email", "password", "role"))
        if data.role not in (ROLE_PATIENT, ROLE_PSYCHIATRIST):
            raise InvalidEnumValueError("role", data.role, (ROLE_PATIENT, ROLE_PSYCHIATRIST))

        email = data.email.strip().lower()
        repo = self.patients if data.role == ROLE_PATIENT else self.psychiatrists
        account = repo.get_by_email(self.db, email)
        if not account or not verify_password(data.password, account.password_hash):
            logger.warning(f"⚠️ Failed {data.role} login for {email}")
            raise AuthenticationError("Invalid email or password")

        logger.info(f"✅ {data.role} {account.id} logged in")
        return _session_for(account.id, account.email, data.role)

    def admin_login(self, data: AdminLoginRequest) -> SessionResponse:
        """Check the fixed admin credentials from the environment"""
        _require(data, ("email", "password"))
        if not config.ADMIN_PASSWORD:
            logger.error("❌ ADMIN_PASSWORD not configured; admin login disabled")
            raise AuthenticationError("Admin login is not configured")

        email_ok = hmac.compare_digest(
            data.email.strip().lower(), config.ADMIN_EMAIL.strip().lower()
        )
        password_ok = hmac.compare_digest(data.password, config.ADMIN_PASSWORD)
        if not (email_ok and password_ok):
            logger.warning("⚠️ Failed admin login attempt")
            raise AuthenticationError("Invalid email or password")

        logger.info("✅ Admin logged in")
        return _session_for(ADMIN_SUBJECT_ID, config.ADMIN_EMAIL, ROLE_ADMIN)

    def current_profile(self, session: SessionContext) -> dict:
        """Resolve the signed-in account to its profile row"""
        profile = None
        if session.role == ROLE_PSYCHIATRIST:
            profile = self.psychiatrists.get_by_id(self.db, session.subject_id)
        elif session.role == ROLE_PATIENT:
            profile = self.patients.get_by_id(self.db, session.subject_id)
        elif session.is_admin:
            return {"role": ROLE_ADMIN, "email": session.email, "profile": None}

        if profile is None:
            raise NotFoundError("Account not found")
        return {
            "role": session.role,
            "email": profile.email,
            "profile": {"id": profile.id, "name": profile.name, "email": profile.email},
        }
