"""Wallet Service errors."""

from libs.common.exceptions import AppError


class WalletError(AppError):
    """Base class for wallet failures."""


class WalletNotFoundError(WalletError):
    status_code = 404
    code = "WALLET_NOT_FOUND"
    detail = "Wallet not found"


class InsufficientCreditsError(WalletError):
    status_code = 402
    code = "INSUFFICIENT_CREDITS"
    detail = "Insufficient credits"

    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            f"Insufficient credits. You need {required} credits but have {available}.",
            required=required,
            available=available,
        )
        self.required = required
        self.available = available


class DuplicateWalletError(WalletError):
    status_code = 409
    code = "DUPLICATE_WALLET"
    detail = "Wallet already exists for this user"


class InvalidAmountError(WalletError):
    status_code = 400
    code = "INVALID_AMOUNT"
    detail = "Amount must be a positive whole number of credits"
