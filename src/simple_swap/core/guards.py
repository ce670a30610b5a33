"""
Stateless validators shared by every mutating pool operation.

Composite checks run in a fixed order: address validity, then same-token or
path shape, then the deadline. None of them touch state.
"""

from typing import Any, Optional, Sequence

from simple_swap.core.errors import Expired, InvalidPath, SameToken, ZeroAddress, ZeroAmount

ZERO_ADDRESS = "0x" + "0" * 40


def is_zero_address(identifier: Optional[str]) -> bool:
    """Return True for the null identifier, ``None`` or an empty string."""
    if not identifier:
        return True
    return identifier == ZERO_ADDRESS


def require_non_zero(identifier: Optional[str]) -> None:
    if is_zero_address(identifier):
        raise ZeroAddress()


def require_distinct(asset_a: str, asset_b: str) -> None:
    if asset_a == asset_b:
        raise SameToken()


def require_not_expired(deadline: int, now: int) -> None:
    if now > deadline:
        raise Expired(f"Expired: deadline {deadline} is before {now}")


def require_path_shape(path: Sequence[Any]) -> None:
    # Single hop only.
    if path is None or len(path) != 2:
        raise InvalidPath()


def require_non_negative(*amounts: int) -> None:
    """Reject negative amounts. They raise ``ZeroAmount``, the same rejection as a missing amount."""
    for amount in amounts:
        if amount < 0:
            raise ZeroAmount(f"Negative amount: {amount}")


def check_pair_call(asset_a: str, asset_b: str, to: str, deadline: int, now: int) -> None:
    """Guards for ``add_liquidity`` and ``remove_liquidity``."""
    require_non_zero(asset_a)
    require_non_zero(asset_b)
    require_non_zero(to)
    require_distinct(asset_a, asset_b)
    require_not_expired(deadline, now)


def check_swap_call(path: Sequence[str], to: str, deadline: int, now: int) -> None:
    """Guards for ``swap_exact_tokens_for_tokens``."""
    for asset in path or ():
        require_non_zero(asset)
    require_non_zero(to)
    require_path_shape(path)
    require_distinct(path[0], path[1])
    require_not_expired(deadline, now)
