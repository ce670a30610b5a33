from mesa import Agent
import pandas as pd
import numpy as np
from typing import List, Optional, Union
from enum import Enum
import logging

from simple_swap.core.errors import SimpleSwapError
from simple_swap.utils.math_helpers import to_base_units

logger = logging.getLogger(__name__)

BPS = 10_000
A_TO_B = "a_to_b"
B_TO_A = "b_to_a"


class TradeMode(str, Enum):
    """
    How a trader picks its next order.
    - RANDOM: random direction and a random fraction of the input balance.
    - CSV: replay a scripted list of trades, one row per step.
    """
    RANDOM = "random"
    CSV = "csv"


class TraderAgent(Agent):
    """
    Trader swapping against the pool with a slippage guard and a deadline.

    Each trade approves the pool for the input, quotes the output from live
    reserves, sets ``amount_out_min`` from ``slippage_bps`` and submits the
    swap. Rejected swaps are recorded, never raised.

    Attributes:
        account (str): Account holding the trader's tokens.
        pool (PoolAgent): Pool to trade against.
        mode (TradeMode): Order generation mode.
        trade_fraction (float): Mean fraction of the input balance traded (RANDOM).
        trades (pd.DataFrame): Scripted trades with ``direction`` and ``amount`` columns (CSV).
        slippage_bps (int): Tolerated output shortfall versus the quote, in basis points.
        deadline_window (int): Seconds added to the chain time to form deadlines.
        history (List[dict]): One record per attempted trade.
        _rng (np.random.Generator): Random number generator for RANDOM mode.
    """

    def __init__(
        self,
        model,
        pool,
        account: Optional[str] = None,
        mode: Union[str, TradeMode] = TradeMode.RANDOM,
        trade_fraction: float = 0.05,
        trades: Optional[pd.DataFrame] = None,
        slippage_bps: int = 100,
        deadline_window: int = 60,
        seed: Optional[int] = None,
    ):
        super().__init__(model)
        self.account = account or f"trader-{self.unique_id}"
        self.pool = pool
        self.mode = TradeMode(mode)
        self.trade_fraction = float(trade_fraction)
        self.slippage_bps = int(slippage_bps)
        self.deadline_window = int(deadline_window)
        self.history: List[dict] = []

        if self.mode == TradeMode.CSV:
            if trades is None:
                raise ValueError("CSV mode requires a trades table.")
            missing = {"direction", "amount"} - set(trades.columns)
            if missing:
                raise ValueError(f"Trades table is missing columns: {sorted(missing)}")
            self.trades = trades.reset_index(drop=True)
        else:
            self.trades = None

        self._row = 0
        self._rng = np.random.default_rng(seed if seed is not None else self.model.random.getrandbits(32))

    @staticmethod
    def load_trades(path: str) -> pd.DataFrame:
        """Read a scripted trades CSV."""
        df = pd.read_csv(path)
        df["direction"] = df["direction"].str.strip().str.lower()
        return df

    @property
    def failed_swaps(self) -> int:
        return sum(1 for record in self.history if record["status"] != "ok")

    def trade_log(self) -> pd.DataFrame:
        """Return the trade history as a DataFrame."""
        return pd.DataFrame(
            self.history,
            columns=["step", "direction", "amount_in", "amount_out", "status"],
        )

    def _tokens(self, direction: str):
        if direction == A_TO_B:
            return self.pool.token_a, self.pool.token_b
        if direction == B_TO_A:
            return self.pool.token_b, self.pool.token_a
        raise ValueError(f"Unknown trade direction: {direction}")

    def _next_random_order(self):
        direction = A_TO_B if self._rng.random() < 0.5 else B_TO_A
        token_in, _ = self._tokens(direction)
        balance = token_in.balance_of(self.account)
        fraction_bps = int(self.trade_fraction * self._rng.uniform(0.5, 1.5) * BPS)
        return direction, balance * fraction_bps // BPS

    def _next_scripted_order(self):
        if self._row >= len(self.trades):
            return None
        row = self.trades.iloc[self._row]
        self._row += 1
        direction = str(row["direction"])
        token_in, _ = self._tokens(direction)
        return direction, to_base_units(row["amount"], token_in.decimals)

    def swap(self, direction: str, amount_in: int) -> Optional[int]:
        """Submit one guarded swap; returns the output or None if rejected."""
        engine = self.pool.engine
        token_in, token_out = self._tokens(direction)
        record = {
            "step": self.model.steps,
            "direction": direction,
            "amount_in": amount_in,
            "amount_out": 0,
            "status": "ok",
        }
        try:
            expected = engine.quote(amount_in, token_in.address, token_out.address)
            token_in.approve(self.account, engine.address, amount_in)
            amount_out = engine.swap_exact_tokens_for_tokens(
                amount_in,
                expected * (BPS - self.slippage_bps) // BPS,
                [token_in.address, token_out.address],
                self.account,
                self.pool.blockchain.get_timestamp() + self.deadline_window,
            )
        except SimpleSwapError as exc:
            logger.debug("%s swap of %d rejected: %s", self.account, amount_in, exc)
            record["status"] = exc.reason
            self.history.append(record)
            return None

        record["amount_out"] = amount_out
        self.history.append(record)
        return amount_out

    def step(self):
        if self.mode == TradeMode.CSV:
            order = self._next_scripted_order()
        else:
            order = self._next_random_order()
        if order is None:
            return
        direction, amount_in = order
        if amount_in <= 0:
            return
        self.swap(direction, amount_in)
