"""Account router - sign-up and login endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ... import config
from ...auth import SessionContext, require_session
from ...database import get_db
from ...rate_limiter import create_rate_limiter
from ...shared.responses import envelope
from .schemas import AdminLoginRequest, LoginRequest, PatientSignup, PsychiatristSignup
from .service import AccountService

router = APIRouter(prefix="/auth", tags=["Authentication"])

rate_limit_login = create_rate_limiter(
    limit=config.LOGIN_RATE_LIMIT,
    window_seconds=config.RATE_LIMIT_WINDOW_SECONDS,
    key_prefix="login",
)


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(db)


@router.post("/psychiatrists/signup")
async def signup_psychiatrist(
    data: PsychiatristSignup,
    service: AccountService = Depends(get_account_service),
    _: None = Depends(rate_limit_login),
):
    return envelope(service.signup_psychiatrist(data).model_dump(), status_code=201)


@router.post("/patients/signup")
async def signup_patient(
    data: PatientSignup,
    service: AccountService = Depends(get_account_service),
    _: None = Depends(rate_limit_login),
):
    return envelope(service.signup_patient(data).model_dump(), status_code=201)


@router.post("/login")
async def login(
    data: LoginRequest,
    service: AccountService = Depends(get_account_service),
    _: None = Depends(rate_limit_login),
):
    """Patient or psychiatrist login"""
    return envelope(service.login(data).model_dump())


@router.post("/admin/login")
async def admin_login(
    data: AdminLoginRequest,
    service: AccountService = Depends(get_account_service),
    _: None = Depends(rate_limit_login),
):
    return envelope(service.admin_login(data).model_dump())


@router.get("/me")
async def me(
    session: SessionContext = Depends(require_session),
    service: AccountService = Depends(get_account_service),
):
    """Who am I: role plus the profile the session belongs to"""
    return envelope(service.current_profile(session))
