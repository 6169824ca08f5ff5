"""Gallery Service errors: albums, photos, CRM records and share access."""

from libs.common.exceptions import AppError


class AlbumNotFoundError(AppError):
    status_code = 404
    code = "ALBUM_NOT_FOUND"
    detail = "Album not found"


class AlbumAccessDeniedError(AppError):
    status_code = 403
    code = "ALBUM_ACCESS_DENIED"
    detail = "You do not have access to this album"


class PhotoNotFoundError(AppError):
    status_code = 404
    code = "PHOTO_NOT_FOUND"
    detail = "Photo not found"


class ClientNotFoundError(AppError):
    status_code = 404
    code = "CLIENT_NOT_FOUND"
    detail = "Client not found"


class DuplicateClientError(AppError):
    status_code = 409
    code = "CLIENT_EXISTS"
    detail = "Client with this email already exists"


class EventNotFoundError(AppError):
    status_code = 404
    code = "EVENT_NOT_FOUND"
    detail = "Event not found"


class InvalidEventError(AppError):
    status_code = 400
    code = "INVALID_EVENT"
    detail = "Event must end after it starts"


class ShareError(AppError):
    """Base class for share access failures."""


class ShareNotFoundError(ShareError):
    status_code = 404
    code = "SHARE_NOT_FOUND"
    detail = "Invalid or expired share link"


class ShareExpiredError(ShareError):
    status_code = 410
    code = "SHARE_EXPIRED"
    detail = "Share link has expired"


class PasswordRequiredError(ShareError):
    status_code = 403
    code = "PASSWORD_REQUIRED"
    detail = "Password verification required"

    def __init__(self, detail=None) -> None:
        super().__init__(detail, requires_password=True)


class InvalidPasswordError(ShareError):
    status_code = 401
    code = "INVALID_PASSWORD"
    detail = "Invalid password"


class SharePermissionError(ShareError):
    status_code = 403
    code = "SHARE_PERMISSION_DENIED"
    detail = "This action is not enabled for this album"


class InvalidShareRequestError(AppError):
    status_code = 400
    code = "INVALID_SHARE_REQUEST"
    detail = "Invalid share request"
