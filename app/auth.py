"""
Session tokens, password hashing and role checks.

Role is taken only from a server-signed token; nothing the client stores is
trusted as an authority. Services receive an explicit SessionContext (or None
for anonymous callers) instead of reading ambient state.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from jose import jwt as jose_jwt
from passlib.context import CryptContext

from . import config
from .errors import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

ROLE_PATIENT = "patient"
ROLE_PSYCHIATRIST = "psychiatrist"
ROLE_ADMIN = "admin"
ROLES = (ROLE_PATIENT, ROLE_PSYCHIATRIST, ROLE_ADMIN)

security = HTTPBearer(auto_error=False)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class SessionContext:
    """Identity of the caller, decoded from a verified session token"""

    subject_id: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify password against bcrypt hash"""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


def create_access_token(
    subject_id: str, email: str, role: str, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed session token

    Args:
        subject_id: Psychiatrist/patient id, or "admin"
        email: Email the session belongs to
        role: One of ROLES
        expires_delta: Token lifetime (default ACCESS_TOKEN_EXPIRE_MINUTES)
    """
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}")

    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode: dict[str, Any] = {"sub": subject_id, "email": email, "role": role, "exp": expire}
    return jose_jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> SessionContext:
    """Verify a session token and return the caller's context"""
    try:
        payload = jose_jwt.decode(token, config.SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"⚠️ Session token verification failed: {e}")
        raise AuthenticationError("Invalid or expired session token") from e

    subject_id = payload.get("sub")
    role = payload.get("role")
    if not subject_id or role not in ROLES:
        logger.warning(f"⚠️ Session token has invalid claims: {list(payload.keys())}")
        raise AuthenticationError("Invalid session token claims")

    return SessionContext(subject_id=subject_id, email=payload.get("email") or "", role=role)


async def get_session_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[SessionContext]:
    """Decode the bearer token if one was sent; anonymous callers get None"""
    if not credentials:
        return None
    session = decode_access_token(credentials.credentials)
    logger.debug(f"✅ Session resolved: role={session.role}, sub={session.subject_id}")
    return session


async def require_session(
    session: Optional[SessionContext] = Depends(get_session_context),
) -> SessionContext:
    if session is None:
        raise AuthenticationError()
    return session


def _enforced(enforce: Optional[bool]) -> bool:
    return config.AUTH_REQUIRED if enforce is None else enforce


def authorize_psychiatrist(
    session: Optional[SessionContext], psychiatrist_id: str, enforce: Optional[bool] = None
) -> None:
    """Allow the psychiatrist who owns psychiatrist_id, or an admin"""
    if not _enforced(enforce):
        return
    if session is None:
        raise AuthenticationError()
    if session.is_admin:
        return
    if session.role == ROLE_PSYCHIATRIST and session.subject_id == psychiatrist_id:
        return
    logger.warning(
        f"🚫 {session.role} {session.subject_id} denied access to psychiatrist {psychiatrist_id}"
    )
    raise AuthorizationError()


def authorize_requester(
    session: Optional[SessionContext], patient_email: str, enforce: Optional[bool] = None
) -> None:
    """Allow the patient whose email submitted the request, or an admin"""
    if not _enforced(enforce):
        return
    if session is None:
        raise AuthenticationError()
    if session.is_admin:
        return
    if session.role == ROLE_PATIENT and session.email.lower() == (patient_email or "").lower():
        return
    logger.warning(f"🚫 {session.role} {session.subject_id} denied access to requester records")
    raise AuthorizationError()
