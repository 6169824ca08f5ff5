"""Balance check schemas."""

import uuid

from pydantic import BaseModel


class BalanceCheckRequest(BaseModel):
    user_id: str
    required_amount: int


class BalanceCheckResponse(BaseModel):
    sufficient: bool
    current_balance: int
    required_amount: int


class BalanceResponse(BaseModel):
    wallet_id: uuid.UUID
    user_id: str
    balance: int
    currency: str
