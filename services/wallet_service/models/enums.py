"""Enums for the Wallet Service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class TransactionDirection(str, enum.Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class TransactionCategory(str, enum.Enum):
    SIGNUP_BONUS = "signup_bonus"
    MANUAL_ADD = "manual_add"
    ALBUM_CREATION = "album_creation"
    REFUND = "refund"
    OTHER = "other"
