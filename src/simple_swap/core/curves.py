from abc import ABC, abstractmethod
from typing import Tuple

from simple_swap.core.pricing import FEE_DENOMINATOR, FEE_NUMERATOR, get_amount_out
from simple_swap.utils.math_helpers import integer_sqrt, mul_div


class BaseCurve(ABC):
    """
    Abstract base class for pool pricing curves.

    A curve is pure: it reads reserve snapshots and returns amounts, the
    managers decide what to commit. Subclasses implement:
    - compute_swap
    - compute_deposit_lp
    - compute_withdraw_lp
    """

    @abstractmethod
    def compute_swap(self, amount_in: int, reserve_in: int, reserve_out: int) -> Tuple[int, int]:
        """
        Calculate the output amount and the fee kept by the pool.

        Args:
            amount_in (int): Amount of input token provided.
            reserve_in (int): Current reserve of the input token.
            reserve_out (int): Current reserve of the output token.

        Returns:
            Tuple[int, int]: Output amount of the other token, fee charged on the input.
        """

    @abstractmethod
    def compute_deposit_lp(
        self,
        reserve_x: int,
        reserve_y: int,
        total_lp_supply: int,
        amount_x: int,
        amount_y: int,
    ) -> int:
        """
        Determine pool shares to mint for a deposit.

        Args:
            reserve_x (int): Reserve of token X before the deposit.
            reserve_y (int): Reserve of token Y before the deposit.
            total_lp_supply (int): Share supply before the deposit.
            amount_x (int): Amount of token X deposited.
            amount_y (int): Amount of token Y deposited.

        Returns:
            int: Shares to mint (may be zero for negligible deposits).
        """

    @abstractmethod
    def compute_withdraw_lp(
        self,
        reserve_x: int,
        reserve_y: int,
        total_lp_supply: int,
        lp_tokens: int,
    ) -> Tuple[int, int]:
        """
        Determine token amounts released when shares are burned.

        Args:
            reserve_x (int): Reserve of token X.
            reserve_y (int): Reserve of token Y.
            total_lp_supply (int): Share supply before the burn.
            lp_tokens (int): Shares to burn.

        Returns:
            Tuple[int, int]: Amounts of token X and Y to release.
        """


class ConstantProductCurve(BaseCurve):
    """
    Constant product curve x * y = k on exact integers, with the 0.3% input fee.
    """

    def compute_swap(self, amount_in: int, reserve_in: int, reserve_out: int) -> Tuple[int, int]:
        amount_out = get_amount_out(amount_in, reserve_in, reserve_out)
        fee = amount_in - mul_div(amount_in, FEE_NUMERATOR, FEE_DENOMINATOR)
        return amount_out, fee

    def compute_deposit_lp(
        self,
        reserve_x: int,
        reserve_y: int,
        total_lp_supply: int,
        amount_x: int,
        amount_y: int,
    ) -> int:
        # First deposit: geometric mean of both amounts.
        if reserve_x == 0 and reserve_y == 0:
            return integer_sqrt(amount_x * amount_y)

        return min(
            mul_div(amount_x, total_lp_supply, reserve_x),
            mul_div(amount_y, total_lp_supply, reserve_y),
        )

    def compute_withdraw_lp(
        self,
        reserve_x: int,
        reserve_y: int,
        total_lp_supply: int,
        lp_tokens: int,
    ) -> Tuple[int, int]:
        if lp_tokens <= 0 or total_lp_supply <= 0:
            return 0, 0

        amount_x = mul_div(lp_tokens, reserve_x, total_lp_supply)
        amount_y = mul_div(lp_tokens, reserve_y, total_lp_supply)
        return amount_x, amount_y
