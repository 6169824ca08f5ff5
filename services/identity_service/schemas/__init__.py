"""Identity Service schemas package."""

from services.identity_service.schemas.auth import (  # noqa: F401
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

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "OtpSendRequest",
    "OtpSendResponse",
    "OtpVerifyRequest",
    "OtpVerifyResponse",
    "PasswordResetRequest",
    "PasswordResetResponse",
    "ProfileUpdate",
    "SignupRequest",
    "UserResponse",
]
