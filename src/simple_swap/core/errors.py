from typing import Optional


class SimpleSwapError(ValueError):
    """
    Base class for every rejected pool operation.

    Each subclass carries a short ``reason`` that doubles as the default
    message. A raised error always means the operation left no trace on the
    reserves, share balances or asset ledgers.
    """

    reason = "Rejected"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.reason)


# Input validation
class ZeroAddress(SimpleSwapError):
    reason = "Zero address"


class SameToken(SimpleSwapError):
    reason = "Same token"


class InvalidPath(SimpleSwapError):
    reason = "Invalid path"


class ZeroAmount(SimpleSwapError):
    reason = "Zero amount"


# Liquidity state
class InvalidReserves(SimpleSwapError):
    reason = "Invalid reserves"


class NoLiquidity(SimpleSwapError):
    reason = "No liquidity"


class LowLiquidity(SimpleSwapError):
    reason = "Low liquidity"


# Slippage guards
class LowAmountA(SimpleSwapError):
    reason = "Low amountA"


class LowAmountB(SimpleSwapError):
    reason = "Low amountB"


class LowOutput(SimpleSwapError):
    reason = "Low output"


class Expired(SimpleSwapError):
    reason = "Expired"


# Ledgers
class InsufficientBalance(SimpleSwapError):
    reason = "Insufficient balance"


class InsufficientAllowance(SimpleSwapError):
    reason = "Insufficient allowance"


class Unauthorized(SimpleSwapError):
    reason = "Unauthorized account"


class TransferFailed(SimpleSwapError):
    reason = "Transfer failed"


class UnsupportedPair(SimpleSwapError):
    reason = "Unsupported pair"
