"""
Deposits and withdrawals of paired liquidity.

Every method validates and computes first, settles custody transfers second
and commits reserves and shares last, so a rejected call changes nothing.
"""

import logging
from typing import Callable, Optional, Tuple

from simple_swap.core.curves import BaseCurve
from simple_swap.core.custody import Custody
from simple_swap.core.errors import (
    InsufficientBalance,
    LowAmountA,
    LowAmountB,
    LowLiquidity,
    NoLiquidity,
    ZeroAmount,
)
from simple_swap.core.guards import check_pair_call, require_non_negative, require_non_zero
from simple_swap.core.pricing import quote
from simple_swap.core.reserves import ReserveLedger
from simple_swap.core.shares import PoolShareLedger

logger = logging.getLogger(__name__)


class LiquidityManager:
    """
    Mints pool shares against deposits and burns them against withdrawals.

    Attributes:
        reserves (ReserveLedger): Pair reserves.
        shares (PoolShareLedger): Liquidity-provider shares.
        custody (Custody): Pool account on the asset ledgers.
        curve (BaseCurve): Share minting and burning rules.
        clock (Callable[[], int]): Current timestamp for deadline checks.
    """

    def __init__(
        self,
        reserves: ReserveLedger,
        shares: PoolShareLedger,
        custody: Custody,
        curve: BaseCurve,
        clock: Callable[[], int],
    ):
        self.reserves = reserves
        self.shares = shares
        self.custody = custody
        self.curve = curve
        self.clock = clock

    def deposit_amounts(
        self,
        reserve_a: int,
        reserve_b: int,
        amount_a_desired: int,
        amount_b_desired: int,
    ) -> Tuple[int, int]:
        """
        Pick the amounts actually deposited.

        An empty pool takes both desired amounts as they are. Otherwise the
        side whose optimal counter-amount fits inside its own desired amount
        binds, which keeps the reserve ratio unchanged.
        """
        if reserve_a == 0 and reserve_b == 0:
            return amount_a_desired, amount_b_desired

        amount_b_optimal = quote(amount_a_desired, reserve_a, reserve_b)
        if amount_b_optimal <= amount_b_desired:
            return amount_a_desired, amount_b_optimal

        amount_a_optimal = quote(amount_b_desired, reserve_b, reserve_a)
        return amount_a_optimal, amount_b_desired

    def add_liquidity(
        self,
        asset_a: str,
        asset_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
        sender: Optional[str] = None,
    ) -> Tuple[int, int, int]:
        """
        Deposit both assets and mint shares to ``to``.

        Args:
            asset_a (str): First asset identifier.
            asset_b (str): Second asset identifier.
            amount_a_desired (int): Most of asset A the caller is willing to deposit.
            amount_b_desired (int): Most of asset B the caller is willing to deposit.
            amount_a_min (int): Least of asset A the caller accepts depositing.
            amount_b_min (int): Least of asset B the caller accepts depositing.
            to (str): Recipient of the minted shares.
            deadline (int): Last timestamp at which the call may execute.
            sender (str): Account the assets are pulled from; defaults to ``to``.

        Returns:
            Tuple[int, int, int]: Deposited amount of A, of B, and shares minted.
        """
        check_pair_call(asset_a, asset_b, to, deadline, self.clock())
        sender = to if sender is None else sender
        require_non_zero(sender)
        require_non_negative(amount_a_desired, amount_b_desired, amount_a_min, amount_b_min)
        pair = self.custody.pair_for(asset_a, asset_b)

        reserve_a, reserve_b = self.reserves.get_reserves(asset_a, asset_b)
        amount_a, amount_b = self.deposit_amounts(reserve_a, reserve_b, amount_a_desired, amount_b_desired)
        if amount_a < amount_a_min:
            raise LowAmountA(f"Low amountA: {amount_a} < {amount_a_min}")
        if amount_b < amount_b_min:
            raise LowAmountB(f"Low amountB: {amount_b} < {amount_b_min}")

        liquidity = self.curve.compute_deposit_lp(
            reserve_x=reserve_a,
            reserve_y=reserve_b,
            total_lp_supply=self.shares.total_supply(),
            amount_x=amount_a,
            amount_y=amount_b,
        )
        if liquidity <= 0:
            raise LowLiquidity()

        self.custody.settle(pulls=[(asset_a, sender, amount_a), (asset_b, sender, amount_b)])
        self.reserves.apply_delta(pair, *pair.deltas_for(asset_a, amount_a, amount_b))
        self.shares.mint(to, liquidity)

        logger.info(
            "Deposited %d %s + %d %s from %s, minted %d shares to %s",
            amount_a, asset_a, amount_b, asset_b, sender, liquidity, to,
        )
        return amount_a, amount_b, liquidity

    def remove_liquidity(
        self,
        asset_a: str,
        asset_b: str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
        sender: Optional[str] = None,
    ) -> Tuple[int, int]:
        """
        Burn ``liquidity`` shares held by ``sender`` and release the
        proportional reserves to ``to``.

        Returns:
            Tuple[int, int]: Released amounts of A and B.
        """
        check_pair_call(asset_a, asset_b, to, deadline, self.clock())
        sender = to if sender is None else sender
        require_non_zero(sender)
        require_non_negative(liquidity, amount_a_min, amount_b_min)
        pair = self.custody.pair_for(asset_a, asset_b)

        if liquidity == 0:
            raise ZeroAmount()
        total_supply = self.shares.total_supply()
        if total_supply == 0:
            raise NoLiquidity()
        held = self.shares.balance_of(sender)
        if held < liquidity:
            raise InsufficientBalance(f"Insufficient balance: {sender} holds {held} shares, burning {liquidity}")

        reserve_a, reserve_b = self.reserves.get_reserves(asset_a, asset_b)
        amount_a, amount_b = self.curve.compute_withdraw_lp(
            reserve_x=reserve_a,
            reserve_y=reserve_b,
            total_lp_supply=total_supply,
            lp_tokens=liquidity,
        )
        if amount_a < amount_a_min:
            raise LowAmountA(f"Low amountA: {amount_a} < {amount_a_min}")
        if amount_b < amount_b_min:
            raise LowAmountB(f"Low amountB: {amount_b} < {amount_b_min}")

        self.custody.settle(pushes=[(asset_a, to, amount_a), (asset_b, to, amount_b)])
        self.shares.burn(sender, liquidity)
        self.reserves.apply_delta(pair, *pair.deltas_for(asset_a, -amount_a, -amount_b))

        logger.info(
            "Burned %d shares of %s, released %d %s + %d %s to %s",
            liquidity, sender, amount_a, asset_a, amount_b, asset_b, to,
        )
        return amount_a, amount_b
