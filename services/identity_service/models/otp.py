"""One-time passcodes and the per-identifier request windows that limit them."""

import uuid
from datetime import datetime

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.identity_service.models.enums import OtpPurpose, enum_values
from sqlalchemy import Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

_PURPOSE_ENUM = SAEnum(
    OtpPurpose,
    name="otp_purpose_enum",
    values_callable=enum_values,
    validate_strings=True,
)


class OtpCode(Base):
    """A hashed 6-digit code. Never stored in clear."""

    __tablename__ = "otp_codes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String, nullable=False)
    code_hash: Mapped[str] = mapped_column(String, nullable=False)
    purpose: Mapped[OtpPurpose] = mapped_column(_PURPOSE_ENUM, nullable=False)
    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (
        Index("ix_otp_codes_email_purpose_created", "email", "purpose", "created_at"),
    )


class OtpRequestWindow(Base):
    """How many codes an identifier requested for a purpose in one window."""

    __tablename__ = "otp_request_windows"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    identifier: Mapped[str] = mapped_column(String, nullable=False)
    purpose: Mapped[OtpPurpose] = mapped_column(_PURPOSE_ENUM, nullable=False)
    window_start: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "identifier", "purpose", "window_start", name="uq_otp_request_window"
        ),
    )
