"""User-facing wallet endpoints."""

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.wallet_service.models import TransactionCategory
from services.wallet_service.schemas import (
    AddCreditsRequest,
    AddCreditsResponse,
    BalanceCheckResponse,
    TransactionListResponse,
    TransactionResponse,
    WalletResponse,
)
from services.wallet_service.services.wallet_ops import (
    add_credits,
    create_wallet,
    get_balance,
    get_transaction_history,
    get_wallet,
    has_sufficient_credits,
)
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/wallet", tags=["wallet"])


@router.get("/me", response_model=WalletResponse)
async def get_my_wallet(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Get current user's wallet."""
    return await get_wallet(db, current_user.user_id)


@router.post(
    "/create", response_model=WalletResponse, status_code=status.HTTP_201_CREATED
)
async def create_my_wallet(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Create wallet for current user (also done automatically at signup)."""
    return await create_wallet(db, user_id=current_user.user_id)


@router.post("/add-credits", response_model=AddCreditsResponse)
async def add_my_credits(
    body: AddCreditsRequest,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    wallet, txn = await add_credits(
        db,
        user_id=current_user.user_id,
        amount=body.amount,
        category=TransactionCategory.MANUAL_ADD,
        description=body.description,
    )
    return AddCreditsResponse(
        wallet=WalletResponse.model_validate(wallet),
        transaction=TransactionResponse.model_validate(txn),
    )


@router.get("/transactions", response_model=TransactionListResponse)
async def list_my_transactions(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """List current user's transactions, newest first."""
    transactions, total = await get_transaction_history(
        db, current_user.user_id, limit=limit, skip=skip
    )
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        total=total,
        skip=skip,
        limit=limit,
        has_more=skip + len(transactions) < total,
    )


@router.get("/balance/check", response_model=BalanceCheckResponse)
async def check_my_balance(
    amount: int = Query(..., ge=0),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Check whether the current user can afford ``amount`` credits."""
    return BalanceCheckResponse(
        sufficient=await has_sufficient_credits(db, current_user.user_id, amount),
        current_balance=await get_balance(db, current_user.user_id),
        required_amount=amount,
    )
