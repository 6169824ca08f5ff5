"""Core wallet operations: atomic credit/debit under a row-level lock.

Every mutation reads the wallet with ``SELECT ... FOR UPDATE`` (on SQLite the
engine opens each transaction with ``BEGIN IMMEDIATE`` instead), writes the new
balance together with exactly one ledger row, and commits once. Any failure
rolls the session back before the error propagates.
"""

from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.wallet_service.exceptions import (
    DuplicateWalletError,
    InsufficientCreditsError,
    InvalidAmountError,
    WalletNotFoundError,
)
from services.wallet_service.models import (
    TransactionCategory,
    TransactionDirection,
    TransactionStatus,
    Wallet,
    WalletTransaction,
)
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

DEFAULT_CURRENCY = "CREDITS"


def _validate_amount(amount) -> None:
    # bool is an int subclass; True is not "1 credit".
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountError()


async def _lock_active_wallet(db: AsyncSession, user_id: str) -> Wallet:
    result = await db.execute(
        select(Wallet)
        .where(Wallet.user_id == user_id, Wallet.is_active.is_(True))
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    wallet = result.scalar_one_or_none()
    if wallet is None:
        raise WalletNotFoundError()
    return wallet


# ---------------------------------------------------------------------------
# Wallet creation / lookup
# ---------------------------------------------------------------------------


async def create_wallet(
    db: AsyncSession,
    *,
    user_id: str,
    initial_balance: int = 0,
    currency: str = DEFAULT_CURRENCY,
) -> Wallet:
    """Create the wallet of ``user_id``.

    A positive ``initial_balance`` is recorded as a ``signup_bonus`` credit in
    the same commit. Raises :class:`DuplicateWalletError` if the user already
    has a wallet.
    """
    if isinstance(initial_balance, bool) or initial_balance < 0:
        raise InvalidAmountError("Initial balance cannot be negative")

    try:
        result = await db.execute(select(Wallet.id).where(Wallet.user_id == user_id))
        if result.scalar_one_or_none() is not None:
            raise DuplicateWalletError()

        wallet = Wallet(
            user_id=user_id,
            balance=initial_balance,
            currency=currency.upper(),
            is_active=True,
        )
        db.add(wallet)
        await db.flush()

        if initial_balance > 0:
            db.add(
                WalletTransaction(
                    user_id=user_id,
                    wallet_id=wallet.id,
                    direction=TransactionDirection.CREDIT,
                    amount=initial_balance,
                    balance_before=0,
                    balance_after=initial_balance,
                    category=TransactionCategory.SIGNUP_BONUS,
                    description="Welcome bonus credits",
                    status=TransactionStatus.COMPLETED,
                )
            )

        await db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent create for the same user.
        await db.rollback()
        raise DuplicateWalletError() from exc
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Created wallet %s for user %s (balance=%d)",
        wallet.id,
        user_id,
        wallet.balance,
    )
    return wallet


async def get_wallet(db: AsyncSession, user_id: str) -> Wallet:
    """Return the active wallet of ``user_id`` or raise WalletNotFoundError."""
    result = await db.execute(
        select(Wallet).where(Wallet.user_id == user_id, Wallet.is_active.is_(True))
    )
    wallet = result.scalar_one_or_none()
    if wallet is None:
        raise WalletNotFoundError()
    return wallet


async def get_balance(db: AsyncSession, user_id: str) -> int:
    """Current balance of the active wallet; 0 when the user has none."""
    result = await db.execute(
        select(Wallet.balance).where(
            Wallet.user_id == user_id, Wallet.is_active.is_(True)
        )
    )
    balance = result.scalar_one_or_none()
    return balance or 0


async def has_sufficient_credits(db: AsyncSession, user_id: str, amount: int) -> bool:
    try:
        return await get_balance(db, user_id) >= amount
    except Exception:
        logger.exception("Balance check failed for user %s", user_id)
        return False


# ---------------------------------------------------------------------------
# Credit / debit (atomic)
# ---------------------------------------------------------------------------


async def _apply(
    db: AsyncSession,
    *,
    user_id: str,
    amount: int,
    direction: TransactionDirection,
    category: TransactionCategory,
    description: str,
    metadata: Optional[dict],
) -> tuple[Wallet, WalletTransaction]:
    _validate_amount(amount)
    try:
        wallet = await _lock_active_wallet(db, user_id)

        balance_before = wallet.balance
        if direction == TransactionDirection.DEBIT:
            balance_after = balance_before - amount
            if balance_after < 0:
                raise InsufficientCreditsError(required=amount, available=balance_before)
        else:
            balance_after = balance_before + amount

        txn = WalletTransaction(
            user_id=user_id,
            wallet_id=wallet.id,
            direction=direction,
            amount=amount,
            balance_before=balance_before,
            balance_after=balance_after,
            category=TransactionCategory(category),
            description=description[:500],
            txn_metadata=metadata,
            status=TransactionStatus.COMPLETED,
        )
        db.add(txn)

        wallet.balance = balance_after
        wallet.updated_at = utc_now()

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "%s %d %s wallet %s (%s), balance %d->%d",
        direction.value.capitalize(),
        amount,
        "to" if direction == TransactionDirection.CREDIT else "from",
        wallet.id,
        txn.category.value,
        balance_before,
        balance_after,
    )
    return wallet, txn


async def add_credits(
    db: AsyncSession,
    *,
    user_id: str,
    amount: int,
    category: TransactionCategory = TransactionCategory.MANUAL_ADD,
    description: str = "Credits added",
    metadata: Optional[dict] = None,
) -> tuple[Wallet, WalletTransaction]:
    """Credit ``amount`` to the user's wallet. Returns ``(wallet, txn)``."""
    return await _apply(
        db,
        user_id=user_id,
        amount=amount,
        direction=TransactionDirection.CREDIT,
        category=category,
        description=description,
        metadata=metadata,
    )


async def deduct_credits(
    db: AsyncSession,
    *,
    user_id: str,
    amount: int,
    category: TransactionCategory,
    description: str,
    metadata: Optional[dict] = None,
) -> tuple[Wallet, WalletTransaction]:
    """Debit ``amount`` from the user's wallet. Returns ``(wallet, txn)``.

    Raises :class:`InsufficientCreditsError` without writing anything when the
    balance would go negative.
    """
    return await _apply(
        db,
        user_id=user_id,
        amount=amount,
        direction=TransactionDirection.DEBIT,
        category=category,
        description=description,
        metadata=metadata,
    )


# ---------------------------------------------------------------------------
# History / lifecycle
# ---------------------------------------------------------------------------


async def get_transaction_history(
    db: AsyncSession, user_id: str, *, limit: int = 50, skip: int = 0
) -> tuple[list[WalletTransaction], int]:
    """Return ``(transactions, total)`` for the user, newest first."""
    total = (
        await db.execute(
            select(func.count())
            .select_from(WalletTransaction)
            .where(WalletTransaction.user_id == user_id)
        )
    ).scalar_one()
    result = await db.execute(
        select(WalletTransaction)
        .where(WalletTransaction.user_id == user_id)
        .order_by(WalletTransaction.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def _set_active(db: AsyncSession, user_id: str, is_active: bool) -> Wallet:
    try:
        result = await db.execute(
            select(Wallet)
            .where(Wallet.user_id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        wallet = result.scalar_one_or_none()
        if wallet is None:
            raise WalletNotFoundError()
        wallet.is_active = is_active
        wallet.updated_at = utc_now()
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Wallet %s for user %s %s",
        wallet.id,
        user_id,
        "reactivated" if is_active else "deactivated",
    )
    return wallet


async def deactivate_wallet(db: AsyncSession, user_id: str) -> Wallet:
    """Soft-delete: the wallet stops accepting credits and debits."""
    return await _set_active(db, user_id, False)


async def reactivate_wallet(db: AsyncSession, user_id: str) -> Wallet:
    return await _set_active(db, user_id, True)
