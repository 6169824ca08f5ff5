"""Wallet Service models package.

Re-exports all models and enums so that:
  - ``from services.wallet_service.models import Wallet`` works
  - Alembic env.py imports see every table
  - SQLAlchemy's mapper registry sees every model class on import

IMPORTANT: Every model class AND enum must be listed here.
"""

from services.wallet_service.models.enums import (  # noqa: F401
    TransactionCategory,
    TransactionDirection,
    TransactionStatus,
)
from services.wallet_service.models.transaction import WalletTransaction  # noqa: F401
from services.wallet_service.models.wallet import Wallet  # noqa: F401

__all__ = [
    "TransactionCategory",
    "TransactionDirection",
    "TransactionStatus",
    "Wallet",
    "WalletTransaction",
]
