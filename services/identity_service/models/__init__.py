"""Identity Service models package.

IMPORTANT: Every model class AND enum must be listed here.
"""

from services.identity_service.models.enums import OtpPurpose  # noqa: F401
from services.identity_service.models.otp import OtpCode, OtpRequestWindow  # noqa: F401
from services.identity_service.models.user import User  # noqa: F401

__all__ = [
    "OtpPurpose",
    "OtpCode",
    "OtpRequestWindow",
    "User",
]
