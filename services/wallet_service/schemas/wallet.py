"""Wallet request/response schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class WalletResponse(BaseModel):
    id: uuid.UUID
    user_id: str
    balance: int
    currency: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WalletCreateRequest(BaseModel):
    """Used by the identity service to create a wallet at signup."""

    user_id: str = Field(..., min_length=1)
    initial_balance: int = Field(0, ge=0)
