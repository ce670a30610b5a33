from mesa import Agent
from typing import List, Optional
import logging

from simple_swap.core.errors import SimpleSwapError

logger = logging.getLogger(__name__)

BPS = 10_000


class LiquidityProviderAgent(Agent):
    """
    Deposits a fixed amount of both assets once, and optionally withdraws every
    share at a later step.

    Attributes:
        account (str): Account holding the provider's tokens and shares.
        pool (PoolAgent): Pool to provide liquidity to.
        amount_a (int): Desired deposit of token A, in base units.
        amount_b (int): Desired deposit of token B, in base units.
        slippage_bps (int): Tolerated shortfall on each leg, in basis points.
        deadline_window (int): Seconds added to the chain time to form deadlines.
        withdraw_at_step (Optional[int]): Model step at which all shares are withdrawn.
        deposited (bool): Whether the deposit has been made.
        rejections (List[str]): Reasons of rejected pool calls.
    """

    def __init__(
        self,
        model,
        pool,
        amount_a: int,
        amount_b: int,
        account: Optional[str] = None,
        slippage_bps: int = 50,
        deadline_window: int = 60,
        withdraw_at_step: Optional[int] = None,
    ):
        super().__init__(model)
        self.account = account or f"lp-{self.unique_id}"
        self.pool = pool
        self.amount_a = int(amount_a)
        self.amount_b = int(amount_b)
        self.slippage_bps = int(slippage_bps)
        self.deadline_window = int(deadline_window)
        self.withdraw_at_step = withdraw_at_step
        self.deposited = False
        self.withdrawn = False
        self.rejections: List[str] = []

    def _deadline(self) -> int:
        return self.pool.blockchain.get_timestamp() + self.deadline_window

    def _with_slippage(self, amount: int) -> int:
        return amount * (BPS - self.slippage_bps) // BPS

    def shares(self) -> int:
        return self.pool.engine.balance_of(self.account)

    def deposit(self) -> None:
        """Approve the pool and add liquidity with slippage-adjusted minimums."""
        engine = self.pool.engine
        token_a, token_b = self.pool.token_a, self.pool.token_b
        reserve_a, reserve_b = self.pool.get_reserves()
        expected_a, expected_b = engine.liquidity.deposit_amounts(
            reserve_a, reserve_b, self.amount_a, self.amount_b
        )

        token_a.approve(self.account, engine.address, self.amount_a)
        token_b.approve(self.account, engine.address, self.amount_b)
        try:
            amount_a, amount_b, liquidity = engine.add_liquidity(
                token_a.address,
                token_b.address,
                self.amount_a,
                self.amount_b,
                self._with_slippage(expected_a),
                self._with_slippage(expected_b),
                self.account,
                self._deadline(),
            )
        except SimpleSwapError as exc:
            logger.debug("%s deposit rejected: %s", self.account, exc)
            self.rejections.append(exc.reason)
            return
        self.deposited = True
        logger.info(
            "Provider %s deposited %d/%d for %d shares", self.account, amount_a, amount_b, liquidity
        )

    def withdraw(self) -> None:
        """Burn every share held, accepting the slippage-adjusted proportional amounts."""
        engine = self.pool.engine
        liquidity = self.shares()
        if liquidity == 0:
            return
        reserve_a, reserve_b = self.pool.get_reserves()
        expected_a, expected_b = engine.curve.compute_withdraw_lp(
            reserve_a, reserve_b, engine.total_supply(), liquidity
        )
        try:
            amount_a, amount_b = engine.remove_liquidity(
                self.pool.token_a.address,
                self.pool.token_b.address,
                liquidity,
                self._with_slippage(expected_a),
                self._with_slippage(expected_b),
                self.account,
                self._deadline(),
            )
        except SimpleSwapError as exc:
            logger.debug("%s withdrawal rejected: %s", self.account, exc)
            self.rejections.append(exc.reason)
            return
        self.withdrawn = True
        logger.info("Provider %s withdrew %d/%d", self.account, amount_a, amount_b)

    def step(self):
        if not self.deposited:
            self.deposit()
        elif (
            not self.withdrawn
            and self.withdraw_at_step is not None
            and self.model.steps >= self.withdraw_at_step
        ):
            self.withdraw()
