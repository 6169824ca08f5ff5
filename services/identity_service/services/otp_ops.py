"""One-time passcode issuance and verification.

Requests are limited per ``(email, purpose)`` with a fixed window counted in
``otp_request_windows``. The counter row is locked and bumped in the same
transaction that writes the new code, so concurrent requests cannot both slip
under the limit.
"""

import asyncio
import secrets
from datetime import datetime, timedelta, timezone
from math import ceil

from libs.auth.passwords import hash_password, verify_password
from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now
from libs.common.emails.auth import send_otp_email
from libs.common.logging import get_logger
from services.identity_service.exceptions import (
    InvalidOtpError,
    OtpAttemptsExceededError,
    OtpNotFoundError,
    OtpRateLimitedError,
    UserNotFoundError,
)
from services.identity_service.models import (
    OtpCode,
    OtpPurpose,
    OtpRequestWindow,
    User,
)
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

OTP_LENGTH = 6
# bcrypt minimum cost.
OTP_HASH_ROUNDS = 4

_EXISTING_USER_PURPOSES = {OtpPurpose.LOGIN, OtpPurpose.PASSWORD_RESET}
_VERIFYING_PURPOSES = {OtpPurpose.SIGNUP, OtpPurpose.EMAIL_VERIFICATION}


def generate_otp_code() -> str:
    return "".join(secrets.choice("0123456789") for _ in range(OTP_LENGTH))


def window_start_for(now: datetime, window_seconds: int) -> datetime:
    epoch = int(now.timestamp())
    return datetime.fromtimestamp(epoch - epoch % window_seconds, tz=timezone.utc)


async def _count_request(
    db: AsyncSession, *, identifier: str, purpose: OtpPurpose, now: datetime
) -> None:
    settings = get_settings()
    start = window_start_for(now, settings.OTP_WINDOW_SECONDS)

    result = await db.execute(
        select(OtpRequestWindow)
        .where(
            OtpRequestWindow.identifier == identifier,
            OtpRequestWindow.purpose == purpose,
            OtpRequestWindow.window_start == start,
        )
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    window = result.scalar_one_or_none()
    if window is None:
        db.add(
            OtpRequestWindow(
                identifier=identifier, purpose=purpose, window_start=start, count=1
            )
        )
        await db.flush()
        return

    if window.count >= settings.OTP_MAX_PER_WINDOW:
        window_end = start + timedelta(seconds=settings.OTP_WINDOW_SECONDS)
        retry_after = max(1, ceil((window_end - now).total_seconds()))
        raise OtpRateLimitedError(retry_after=retry_after)
    window.count += 1


async def send_otp(
    db: AsyncSession, *, email: str, purpose: OtpPurpose
) -> tuple[OtpCode, str]:
    """Issue a new code for ``email`` and mail it.

    Returns the stored row and the clear code. Earlier unverified codes for
    the same email and purpose stop being valid.
    """
    settings = get_settings()
    email = email.strip().lower()
    purpose = OtpPurpose(purpose)

    if purpose in _EXISTING_USER_PURPOSES:
        result = await db.execute(select(User.id).where(User.email == email))
        if result.scalar_one_or_none() is None:
            raise UserNotFoundError()

    code = generate_otp_code()
    code_hash = await asyncio.to_thread(hash_password, code, OTP_HASH_ROUNDS)
    now = utc_now()

    # A concurrent request may insert this window's counter row first; the
    # retry then finds and locks it.
    for attempt in range(2):
        try:
            await _count_request(db, identifier=email, purpose=purpose, now=now)
            await db.execute(
                update(OtpCode)
                .where(
                    OtpCode.email == email,
                    OtpCode.purpose == purpose,
                    OtpCode.verified.is_(False),
                    OtpCode.expires_at > now,
                )
                .values(expires_at=now)
                .execution_options(synchronize_session=False)
            )
            otp = OtpCode(
                email=email,
                code_hash=code_hash,
                purpose=purpose,
                expires_at=now + timedelta(minutes=settings.OTP_EXPIRY_MINUTES),
                created_at=now,
            )
            db.add(otp)
            await db.commit()
            break
        except IntegrityError:
            await db.rollback()
            if attempt:
                raise
        except Exception:
            await db.rollback()
            raise

    sent = await send_otp_email(
        email, code, purpose.value, settings.OTP_EXPIRY_MINUTES
    )
    if not sent:
        logger.warning("OTP email for %s (%s) was not delivered", email, purpose.value)
    return otp, code


async def verify_otp(
    db: AsyncSession, *, email: str, code: str, purpose: OtpPurpose
) -> OtpCode:
    """Check ``code`` against the latest live code for ``email``."""
    settings = get_settings()
    email = email.strip().lower()
    purpose = OtpPurpose(purpose)
    now = utc_now()

    try:
        result = await db.execute(
            select(OtpCode)
            .where(
                OtpCode.email == email,
                OtpCode.purpose == purpose,
                OtpCode.verified.is_(False),
                OtpCode.expires_at > now,
            )
            .order_by(OtpCode.created_at.desc())
            .limit(1)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        otp = result.scalar_one_or_none()
        if otp is None:
            raise OtpNotFoundError()

        if otp.attempts >= settings.OTP_MAX_ATTEMPTS:
            otp.expires_at = now
            await db.commit()
            raise OtpAttemptsExceededError()

        otp.attempts += 1
        matches = await asyncio.to_thread(verify_password, code, otp.code_hash)
        if not matches:
            remaining = max(0, settings.OTP_MAX_ATTEMPTS - otp.attempts)
            await db.commit()
            raise InvalidOtpError(remaining_attempts=remaining)

        otp.verified = True
        otp.expires_at = now
        if purpose in _VERIFYING_PURPOSES:
            await db.execute(
                update(User).where(User.email == email).values(is_verified=True)
            )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("OTP verified for %s (%s)", email, purpose.value)
    return otp
