"""Signup, login, OTP, profile and password reset schemas."""

import uuid
from datetime import datetime
from typing import Literal, Optional

from libs.auth.roles import UserRole
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from services.identity_service.models import OtpPurpose


class SignupRequest(BaseModel):
    email: EmailStr
    # Length is checked by user_ops so the error carries WEAK_PASSWORD.
    password: str = Field(..., max_length=128)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=32)
    # Admins are never self-registered.
    role: Literal["photographer", "client"] = "photographer"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: uuid.UUID
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    is_verified: bool
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    redirect_to: str


class OtpSendRequest(BaseModel):
    email: EmailStr
    purpose: OtpPurpose


class OtpSendResponse(BaseModel):
    sent: bool = True
    expires_in_minutes: int


class OtpVerifyRequest(BaseModel):
    email: EmailStr
    code: str = Field(..., min_length=6, max_length=6, pattern=r"^\d{6}$")
    purpose: OtpPurpose


class OtpVerifyResponse(BaseModel):
    verified: bool
    purpose: OtpPurpose


class ProfileUpdate(BaseModel):
    """Fields sent replace the stored ones; null clears them."""

    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=32)


class PasswordResetRequest(BaseModel):
    email: EmailStr
    code: str = Field(..., min_length=6, max_length=6, pattern=r"^\d{6}$")
    new_password: str = Field(..., max_length=128)


class PasswordResetResponse(BaseModel):
    reset: bool = True
