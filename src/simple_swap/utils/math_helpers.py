import math
from decimal import Decimal
from typing import Union


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    Compute ``a * b // denominator`` on exact integers.

    The product is formed before dividing, so no precision is lost to an
    intermediate truncation.

    Parameters
    ----------
    a : int
        First factor.
    b : int
        Second factor.
    denominator : int
        Divisor, must be non-zero.

    Returns
    -------
    int
        The floored quotient.

    Raises
    ------
    ZeroDivisionError
        If ``denominator`` is zero.
    """
    if denominator == 0:
        raise ZeroDivisionError("mul_div denominator is zero")
    return (a * b) // denominator


def integer_sqrt(n: int) -> int:
    """
    Return the floor of the square root of a non-negative integer.

    Parameters
    ----------
    n : int
        Value whose root is taken.

    Returns
    -------
    int
        ``floor(sqrt(n))``, computed without floating point.

    Raises
    ------
    ValueError
        If ``n`` is negative.
    """
    if n < 0:
        raise ValueError(f"Cannot take the square root of a negative value: {n}")
    return math.isqrt(n)


def to_base_units(amount: Union[int, float, str, Decimal], decimals: int = 18) -> int:
    """
    Convert a human-readable token amount into integer base units.

    Parameters
    ----------
    amount : int, float, str or Decimal
        Amount in whole tokens (e.g. ``"1.5"``).
    decimals : int
        Token decimals (18 for most ERC-20 tokens).

    Returns
    -------
    int
        ``amount * 10 ** decimals``, truncated toward zero.

    Notes
    -----
    Floats go through ``str`` first so ``0.1`` becomes exactly ``10**17``.
    """
    value = Decimal(str(amount)) * (Decimal(10) ** decimals)
    return int(value)


def from_base_units(amount: int, decimals: int = 18) -> float:
    """Convert integer base units back to whole tokens (for display and plots)."""
    return float(Decimal(amount) / (Decimal(10) ** decimals))
