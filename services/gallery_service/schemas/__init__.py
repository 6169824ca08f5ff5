"""Gallery Service schemas package.

IMPORTANT: Every schema class must be listed here.
"""

from services.gallery_service.schemas.album import (  # noqa: F401
    AddPhotosRequest,
    AlbumCreate,
    AlbumListResponse,
    AlbumResponse,
    AlbumUpdate,
    AlbumWithPhotos,
    DeletePhotosRequest,
    DeletePhotosResponse,
    PhotoCreate,
    PhotoListResponse,
    PhotoResponse,
)
from services.gallery_service.schemas.crm import (  # noqa: F401
    ClientCreate,
    ClientListResponse,
    ClientResponse,
    ClientUpdate,
    EventCreate,
    EventListResponse,
    EventResponse,
    EventUpdate,
)
from services.gallery_service.schemas.share import (  # noqa: F401
    RevokeSharesResponse,
    ShareCreateRequest,
    ShareCreateResponse,
    ShareListResponse,
    SharePermissions,
    SharePermissionsUpdate,
    ShareRecipient,
    ShareResponse,
    ShareUpdateRequest,
)
from services.gallery_service.schemas.shared import (  # noqa: F401
    ClientIdentityRequest,
    ClientIdentityResponse,
    CommentCreateRequest,
    CommentListResponse,
    CommentResponse,
    DownloadRequest,
    DownloadResponse,
    FavoriteRequest,
    FavoriteResponse,
    InteractionRecord,
    InteractionRequest,
    InteractionResponse,
    PhotoActivity,
    ShareAnalyticsResponse,
    SharedAlbumInfo,
    SharedAlbumResponse,
    SharedPhoto,
    VerifyPasswordRequest,
    VerifyPasswordResponse,
)

__all__ = [
    "AddPhotosRequest",
    "AlbumCreate",
    "AlbumListResponse",
    "AlbumResponse",
    "AlbumUpdate",
    "AlbumWithPhotos",
    "DeletePhotosRequest",
    "DeletePhotosResponse",
    "PhotoCreate",
    "PhotoListResponse",
    "PhotoResponse",
    "ClientCreate",
    "ClientListResponse",
    "ClientResponse",
    "ClientUpdate",
    "EventCreate",
    "EventListResponse",
    "EventResponse",
    "EventUpdate",
    "RevokeSharesResponse",
    "ShareCreateRequest",
    "ShareCreateResponse",
    "ShareListResponse",
    "SharePermissions",
    "SharePermissionsUpdate",
    "ShareRecipient",
    "ShareResponse",
    "ShareUpdateRequest",
    "ClientIdentityRequest",
    "ClientIdentityResponse",
    "CommentCreateRequest",
    "CommentListResponse",
    "CommentResponse",
    "DownloadRequest",
    "DownloadResponse",
    "FavoriteRequest",
    "FavoriteResponse",
    "InteractionRecord",
    "InteractionRequest",
    "InteractionResponse",
    "PhotoActivity",
    "ShareAnalyticsResponse",
    "SharedAlbumInfo",
    "SharedAlbumResponse",
    "SharedPhoto",
    "VerifyPasswordRequest",
    "VerifyPasswordResponse",
]
