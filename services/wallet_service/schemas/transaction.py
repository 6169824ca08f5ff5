"""Transaction request/response schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from services.wallet_service.models.enums import (
    TransactionCategory,
    TransactionDirection,
    TransactionStatus,
)
from services.wallet_service.schemas.wallet import WalletResponse


class TransactionResponse(BaseModel):
    id: uuid.UUID
    wallet_id: uuid.UUID
    user_id: str
    direction: TransactionDirection
    amount: int
    balance_before: int
    balance_after: int
    category: TransactionCategory
    description: str
    txn_metadata: Optional[dict] = Field(None, serialization_alias="metadata")
    status: TransactionStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionListResponse(BaseModel):
    transactions: list[TransactionResponse]
    total: int
    skip: int
    limit: int
    has_more: bool


class AddCreditsRequest(BaseModel):
    """Member top-up of their own wallet."""

    amount: int
    description: str = Field("Credits added", max_length=500)


class AddCreditsResponse(BaseModel):
    wallet: WalletResponse
    transaction: TransactionResponse


class DebitRequest(BaseModel):
    """Request from another service to debit a user's wallet."""

    user_id: str
    amount: int
    category: TransactionCategory = TransactionCategory.OTHER
    description: str = Field(..., max_length=500)
    metadata: Optional[dict] = None


class CreditRequest(BaseModel):
    """Request from another service to credit a user's wallet."""

    user_id: str
    amount: int
    category: TransactionCategory = TransactionCategory.REFUND
    description: str = Field(..., max_length=500)
    metadata: Optional[dict] = None


class InternalDebitCreditResponse(BaseModel):
    success: bool
    transaction_id: uuid.UUID
    balance_after: int
