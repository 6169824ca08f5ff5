"""Base error type for domain failures surfaced to API callers.

Each service subclasses :class:`AppError` with a fixed status, a stable
machine-readable ``code`` and a user-safe default ``detail``. The handlers in
``libs.common.error_handler`` render them as
``{"detail": ..., "code": ..., **extra}``.
"""

from typing import Any, Optional


class AppError(Exception):
    """Base class for errors that map to a specific HTTP response."""

    status_code: int = 400
    code: str = "APP_ERROR"
    detail: str = "Request could not be completed"

    def __init__(self, detail: Optional[str] = None, **extra: Any) -> None:
        if detail is not None:
            self.detail = detail
        self.extra = extra
        super().__init__(self.detail)

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.detail, "code": self.code, **self.extra}


class UpstreamServiceError(AppError):
    """Error relayed from another service's JSON error response."""

    status_code = 502
    code = "UPSTREAM_ERROR"
    detail = "A dependent service failed"

    def __init__(
        self,
        status_code: int,
        code: Optional[str] = None,
        detail: Optional[str] = None,
        **extra: Any,
    ) -> None:
        self.status_code = status_code
        if code:
            self.code = code
        super().__init__(detail, **extra)
