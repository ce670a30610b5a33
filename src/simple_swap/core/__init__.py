from simple_swap.core.errors import (
    Expired,
    InsufficientAllowance,
    InsufficientBalance,
    InvalidPath,
    InvalidReserves,
    LowAmountA,
    LowAmountB,
    LowLiquidity,
    LowOutput,
    NoLiquidity,
    SameToken,
    SimpleSwapError,
    TransferFailed,
    Unauthorized,
    UnsupportedPair,
    ZeroAddress,
    ZeroAmount,
)
