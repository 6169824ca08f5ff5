"""Admin wallet management endpoints."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.wallet_service.schemas import WalletResponse
from services.wallet_service.services.wallet_ops import (
    deactivate_wallet,
    reactivate_wallet,
)
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/admin/wallet", tags=["admin-wallet"])


@router.post("/{user_id}/deactivate", response_model=WalletResponse)
async def admin_deactivate_wallet(
    user_id: str,
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Soft-delete a user's wallet."""
    wallet = await deactivate_wallet(db, user_id)
    logger.info("Admin %s deactivated wallet of %s", admin.user_id, user_id)
    return wallet


@router.post("/{user_id}/reactivate", response_model=WalletResponse)
async def admin_reactivate_wallet(
    user_id: str,
    admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    wallet = await reactivate_wallet(db, user_id)
    logger.info("Admin %s reactivated wallet of %s", admin.user_id, user_id)
    return wallet
