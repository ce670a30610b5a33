"""
Pure pricing functions over reserve snapshots.

All arithmetic is on Python integers and truncates toward zero, so rounding
never favours the trader.
"""

from simple_swap.core.errors import InvalidReserves, ZeroAmount
from simple_swap.utils.math_helpers import mul_div

# 0.3% of every input stays in the pool.
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

# Fixed-point scale for spot prices.
PRICE_SCALE = 10 ** 18


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """
    Output of a swap under the constant-product rule with the input fee
    deducted first:

        amount_in_with_fee = amount_in * 997
        amount_out = amount_in_with_fee * reserve_out
                     // (reserve_in * 1000 + amount_in_with_fee)

    Args:
        amount_in (int): Amount of the input asset sent to the pool.
        reserve_in (int): Pool reserve of the input asset.
        reserve_out (int): Pool reserve of the output asset.

    Returns:
        int: Amount of the output asset, always strictly below ``reserve_out``.

    Raises:
        ZeroAmount: If ``amount_in`` is not positive.
        InvalidReserves: If either reserve is zero.
    """
    if amount_in <= 0:
        raise ZeroAmount()
    if reserve_in <= 0 or reserve_out <= 0:
        raise InvalidReserves()

    amount_in_with_fee = amount_in * FEE_NUMERATOR
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * FEE_DENOMINATOR + amount_in_with_fee
    return numerator // denominator


def get_price(reserve_of: int, reserve_against: int) -> int:
    """Spot price of one unit of the first asset, scaled by ``PRICE_SCALE``."""
    if reserve_of <= 0:
        raise InvalidReserves()
    return mul_div(reserve_against, PRICE_SCALE, reserve_of)


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Amount of B matching ``amount_a`` at the current reserve ratio."""
    if reserve_a <= 0 or reserve_b <= 0:
        raise InvalidReserves()
    return mul_div(amount_a, reserve_b, reserve_a)
