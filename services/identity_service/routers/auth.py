"""Account, login, OTP and profile endpoints."""

from fastapi import APIRouter, Depends, Request, Response, status
from libs.auth.dependencies import SESSION_COOKIE, get_current_user
from libs.auth.models import AuthUser
from libs.auth.roles import default_home
from libs.common.config import get_settings
from libs.common.rate_limit import auth_limit
from libs.db.session import get_async_db
from services.identity_service.models import User
from services.identity_service.schemas import (
    AuthResponse,
    LoginRequest,
    OtpSendRequest,
    OtpSendResponse,
    OtpVerifyRequest,
    OtpVerifyResponse,
    PasswordResetRequest,
    PasswordResetResponse,
    ProfileUpdate,
    SignupRequest,
    UserResponse,
)
from services.identity_service.services import otp_ops, user_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(response: Response, user: User, token: str) -> AuthResponse:
    settings = get_settings()
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        max_age=settings.SESSION_TOKEN_TTL_DAYS * 24 * 3600,
        httponly=True,
        secure=settings.ENVIRONMENT == "production",
        samesite="lax",
    )
    return AuthResponse(
        access_token=token,
        user=UserResponse.model_validate(user),
        redirect_to=default_home(user.role),
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@auth_limit
async def signup(
    request: Request,
    response: Response,
    body: SignupRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Create an account. A verification code is emailed to the new user."""
    user, token = await user_ops.signup(
        db,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        phone=body.phone,
        role=body.role,
    )
    return _auth_response(response, user, token)


@router.post("/login", response_model=AuthResponse)
@auth_limit
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: AsyncSession = Depends(get_async_db),
):
    user, token = await user_ops.login(db, email=body.email, password=body.password)
    return _auth_response(response, user, token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE)


@router.post("/otp/send", response_model=OtpSendResponse)
@auth_limit
async def send_otp(
    request: Request,
    body: OtpSendRequest,
    db: AsyncSession = Depends(get_async_db),
):
    await otp_ops.send_otp(db, email=body.email, purpose=body.purpose)
    return OtpSendResponse(expires_in_minutes=get_settings().OTP_EXPIRY_MINUTES)


@router.post("/otp/verify", response_model=OtpVerifyResponse)
@auth_limit
async def verify_otp(
    request: Request,
    body: OtpVerifyRequest,
    db: AsyncSession = Depends(get_async_db),
):
    otp = await otp_ops.verify_otp(
        db, email=body.email, code=body.code, purpose=body.purpose
    )
    return OtpVerifyResponse(verified=otp.verified, purpose=otp.purpose)


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Profile of the signed-in user."""
    return await user_ops.get_user(db, current_user.user_id)


@router.put("/me", response_model=UserResponse)
async def update_me(
    body: ProfileUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Edit name and phone. Email and role are not editable here."""
    return await user_ops.update_profile(
        db, current_user.user_id, body.model_dump(exclude_unset=True)
    )


@router.post("/password/reset", response_model=PasswordResetResponse)
@auth_limit
async def reset_password(
    request: Request,
    body: PasswordResetRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Set a new password using a code sent with purpose ``password_reset``."""
    await user_ops.reset_password(
        db, email=body.email, code=body.code, new_password=body.new_password
    )
    return PasswordResetResponse()
