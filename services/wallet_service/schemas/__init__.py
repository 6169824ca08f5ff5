"""Wallet Service schemas package.

Re-exports all schemas so that
``from services.wallet_service.schemas import WalletResponse`` works.

IMPORTANT: Every schema class must be listed here.
"""

from services.wallet_service.schemas.balance import (  # noqa: F401
    BalanceCheckRequest,
    BalanceCheckResponse,
    BalanceResponse,
)
from services.wallet_service.schemas.transaction import (  # noqa: F401
    AddCreditsRequest,
    AddCreditsResponse,
    CreditRequest,
    DebitRequest,
    InternalDebitCreditResponse,
    TransactionListResponse,
    TransactionResponse,
)
from services.wallet_service.schemas.wallet import (  # noqa: F401
    WalletCreateRequest,
    WalletResponse,
)

__all__ = [
    "AddCreditsRequest",
    "AddCreditsResponse",
    "BalanceCheckRequest",
    "BalanceCheckResponse",
    "BalanceResponse",
    "CreditRequest",
    "DebitRequest",
    "InternalDebitCreditResponse",
    "TransactionListResponse",
    "TransactionResponse",
    "WalletCreateRequest",
    "WalletResponse",
]
