"""Accounts: signup, password login, profile edits and password reset."""

import asyncio
import uuid
from typing import Optional

import httpx
from libs.auth.passwords import hash_password, verify_password
from libs.auth.roles import UserRole
from libs.auth.tokens import create_session_token
from libs.common import service_client
from libs.common.config import get_settings
from libs.common.exceptions import UpstreamServiceError
from libs.common.logging import get_logger
from services.identity_service.exceptions import (
    InvalidCredentialsError,
    UserAlreadyExistsError,
    UserNotFoundError,
    WeakPasswordError,
)
from services.identity_service.models import OtpPurpose, User
from services.identity_service.services.otp_ops import send_otp, verify_otp
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

CALLING_SERVICE = "identity"
MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> str:
    return email.strip().lower()


def session_token_for(user: User) -> str:
    return create_session_token(
        str(user.id), user.email, user.role.value, name=user.full_name
    )


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id) -> User:
    try:
        key = user_id if isinstance(user_id, uuid.UUID) else uuid.UUID(str(user_id))
    except ValueError:
        raise UserNotFoundError() from None
    user = await db.get(User, key)
    if user is None:
        raise UserNotFoundError()
    return user


async def _provision_wallet(user: User) -> None:
    settings = get_settings()
    try:
        await service_client.create_wallet_for_user(
            str(user.id),
            initial_balance=settings.WELCOME_BONUS_CREDITS,
            calling_service=CALLING_SERVICE,
        )
    except (UpstreamServiceError, httpx.HTTPError):
        # The account stays usable; the wallet can be created later via
        # POST /wallet/create.
        logger.exception("Wallet provisioning failed for user %s", user.id)


async def signup(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    phone: Optional[str] = None,
    role: UserRole = UserRole.PHOTOGRAPHER,
) -> tuple[User, str]:
    """Create an account, its starting wallet and a signup code.

    Returns the new user and a session token.
    """
    email = normalize_email(email)
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError()

    if await get_user_by_email(db, email) is not None:
        raise UserAlreadyExistsError()

    password_hash = await asyncio.to_thread(hash_password, password)
    user = User(
        email=email,
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        role=UserRole(role),
    )
    try:
        db.add(user)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise UserAlreadyExistsError() from None
    except Exception:
        await db.rollback()
        raise

    logger.info("Created %s account %s", user.role.value, user.id)
    await _provision_wallet(user)
    await send_otp(db, email=email, purpose=OtpPurpose.SIGNUP)
    return user, session_token_for(user)


async def login(db: AsyncSession, *, email: str, password: str) -> tuple[User, str]:
    """Check credentials. Unknown email and wrong password look the same."""
    user = await get_user_by_email(db, email)
    if user is None or not user.is_active:
        raise InvalidCredentialsError()

    matches = await asyncio.to_thread(verify_password, password, user.password_hash)
    if not matches:
        raise InvalidCredentialsError()
    return user, session_token_for(user)


async def update_profile(db: AsyncSession, user_id, changes: dict) -> User:
    """Apply ``changes`` (first_name, last_name, phone) to the account."""
    user = await get_user(db, user_id)
    for field in ("first_name", "last_name", "phone"):
        if field in changes:
            value = changes[field]
            setattr(user, field, (value.strip() or None) if value else None)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(user)
    return user


async def reset_password(
    db: AsyncSession, *, email: str, code: str, new_password: str
) -> User:
    """Set a new password once a PASSWORD_RESET code is verified.

    The strength check runs first so a weak password does not use up the code.
    """
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError()
    user = await get_user_by_email(db, email)
    if user is None or not user.is_active:
        raise UserNotFoundError()

    await verify_otp(db, email=email, code=code, purpose=OtpPurpose.PASSWORD_RESET)

    user.password_hash = await asyncio.to_thread(hash_password, new_password)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Password reset for user %s", user.id)
    return user
