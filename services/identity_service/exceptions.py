"""Identity Service errors."""

from libs.common.exceptions import AppError


class UserAlreadyExistsError(AppError):
    status_code = 409
    code = "USER_EXISTS"
    detail = "An account with this email already exists"


class UserNotFoundError(AppError):
    status_code = 404
    code = "USER_NOT_FOUND"
    detail = "No account found for this email"


class WeakPasswordError(AppError):
    status_code = 400
    code = "WEAK_PASSWORD"
    detail = "Password must be at least 6 characters"


class InvalidCredentialsError(AppError):
    status_code = 401
    code = "INVALID_CREDENTIALS"
    detail = "Invalid email or password"


class OtpNotFoundError(AppError):
    status_code = 404
    code = "OTP_NOT_FOUND"
    detail = "No valid code found. Please request a new one."


class InvalidOtpError(AppError):
    status_code = 400
    code = "INVALID_OTP"
    detail = "Invalid code"

    def __init__(self, remaining_attempts: int) -> None:
        super().__init__(
            f"Invalid code. {remaining_attempts} attempt(s) remaining.",
            remaining_attempts=remaining_attempts,
        )
        self.remaining_attempts = remaining_attempts


class OtpAttemptsExceededError(AppError):
    status_code = 429
    code = "MAX_ATTEMPTS_EXCEEDED"
    detail = "Too many failed attempts. Please request a new code."


class OtpRateLimitedError(AppError):
    status_code = 429
    code = "OTP_RATE_LIMITED"
    detail = "Too many codes requested. Please try again later."

    def __init__(self, retry_after: int) -> None:
        super().__init__(retry_after=retry_after)
        self.retry_after = retry_after
