"""Internal service-to-service wallet endpoints.

These endpoints are called by other Shutterbox services via service-role JWT,
not by frontend clients directly.
"""

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_service_role
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.wallet_service.schemas import (
    BalanceCheckRequest,
    BalanceCheckResponse,
    BalanceResponse,
    CreditRequest,
    DebitRequest,
    InternalDebitCreditResponse,
    WalletCreateRequest,
    WalletResponse,
)
from services.wallet_service.services.wallet_ops import (
    add_credits,
    create_wallet,
    deduct_credits,
    get_wallet,
)
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/internal/wallet", tags=["internal-wallet"])


@router.post(
    "/create", response_model=WalletResponse, status_code=status.HTTP_201_CREATED
)
async def internal_create_wallet(
    body: WalletCreateRequest,
    _service: AuthUser = Depends(require_service_role),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a wallet at signup, optionally funded with a welcome bonus."""
    return await create_wallet(
        db, user_id=body.user_id, initial_balance=body.initial_balance
    )


@router.post("/debit", response_model=InternalDebitCreditResponse)
async def internal_debit(
    body: DebitRequest,
    _service: AuthUser = Depends(require_service_role),
    db: AsyncSession = Depends(get_async_db),
):
    """Deduct credits for a paid action (e.g. album creation)."""
    wallet, txn = await deduct_credits(
        db,
        user_id=body.user_id,
        amount=body.amount,
        category=body.category,
        description=body.description,
        metadata=body.metadata,
    )
    return InternalDebitCreditResponse(
        success=True, transaction_id=txn.id, balance_after=wallet.balance
    )


@router.post("/credit", response_model=InternalDebitCreditResponse)
async def internal_credit(
    body: CreditRequest,
    _service: AuthUser = Depends(require_service_role),
    db: AsyncSession = Depends(get_async_db),
):
    """Credit a wallet (refund, bonus)."""
    wallet, txn = await add_credits(
        db,
        user_id=body.user_id,
        amount=body.amount,
        category=body.category,
        description=body.description,
        metadata=body.metadata,
    )
    return InternalDebitCreditResponse(
        success=True, transaction_id=txn.id, balance_after=wallet.balance
    )


@router.get("/balance/{user_id}", response_model=BalanceResponse)
async def internal_balance(
    user_id: str,
    _service: AuthUser = Depends(require_service_role),
    db: AsyncSession = Depends(get_async_db),
):
    wallet = await get_wallet(db, user_id)
    return BalanceResponse(
        wallet_id=wallet.id,
        user_id=wallet.user_id,
        balance=wallet.balance,
        currency=wallet.currency,
    )


@router.post("/check-balance", response_model=BalanceCheckResponse)
async def internal_check_balance(
    body: BalanceCheckRequest,
    _service: AuthUser = Depends(require_service_role),
    db: AsyncSession = Depends(get_async_db),
):
    """Check if a user has enough credits for a paid action."""
    wallet = await get_wallet(db, body.user_id)
    return BalanceCheckResponse(
        sufficient=wallet.balance >= body.required_amount,
        current_balance=wallet.balance,
        required_amount=body.required_amount,
    )
