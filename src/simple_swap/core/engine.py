import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Mapping, Optional, Sequence, Tuple

from simple_swap.core.assets import AssetLedger
from simple_swap.core.curves import BaseCurve, ConstantProductCurve
from simple_swap.core.custody import Custody
from simple_swap.core.errors import SimpleSwapError
from simple_swap.core.guards import require_non_zero
from simple_swap.core.liquidity import LiquidityManager
from simple_swap.core.pricing import get_amount_out, get_price
from simple_swap.core.reserves import ReserveLedger
from simple_swap.core.shares import PoolShareLedger
from simple_swap.core.swap import SwapExecutor

logger = logging.getLogger(__name__)

DEFAULT_POOL_ADDRESS = "0x5151515151515151515151515151515151515151"


def wall_clock() -> int:
    return int(time.time())


class SimpleSwap:
    """
    Constant-product pool for one asset pair, with its own share token.

    Owns the reserve ledger, the share ledger and the pool's custody account
    on the two asset ledgers. Every mutating call holds the pair lock for its
    whole duration, hooks included; reads do not lock. A hook that raises is
    logged and does not fail the committed operation.

    Attributes:
        address (str): Pool account on the asset ledgers.
        reserves (ReserveLedger): Pair reserves.
        shares (PoolShareLedger): Liquidity-provider share token.
        custody (Custody): Asset movements in and out of the pool.
        clock (Callable[[], int]): Source of the current timestamp.
        on_swap (Callable): Optional hook ``(pool, amount_in, amount_out, path)``.
        on_deposit (Callable): Optional hook ``(pool, provider, (amount_a, amount_b, liquidity))``.
        on_withdraw (Callable): Optional hook ``(pool, provider, (amount_a, amount_b))``.
    """

    def __init__(
        self,
        ledgers: Mapping[str, AssetLedger],
        address: str = DEFAULT_POOL_ADDRESS,
        clock: Optional[Callable[[], int]] = None,
        curve: Optional[BaseCurve] = None,
        share_name: str = "SimpleSwap LP",
        share_symbol: str = "SSLP",
        on_swap: Optional[Callable] = None,
        on_deposit: Optional[Callable] = None,
        on_withdraw: Optional[Callable] = None,
    ):
        self.address = address
        self.clock = clock if clock is not None else wall_clock
        self.curve = curve if curve is not None else ConstantProductCurve()
        self.reserves = ReserveLedger()
        self.shares = PoolShareLedger(name=share_name, symbol=share_symbol)
        self.custody = Custody(address, ledgers)
        self.liquidity = LiquidityManager(self.reserves, self.shares, self.custody, self.curve, self._now)
        self.swapper = SwapExecutor(self.reserves, self.custody, self.curve, self._now)

        self.on_swap = on_swap
        self.on_deposit = on_deposit
        self.on_withdraw = on_withdraw

        # One pair per engine, so one lock.
        self._lock = threading.RLock()

    def _now(self) -> int:
        return int(self.clock())

    @contextmanager
    def _exclusive(self, operation: str):
        with self._lock:
            try:
                yield
            except SimpleSwapError as exc:
                logger.debug("%s rejected: %s", operation, exc)
                raise

    def _notify(self, hook: Optional[Callable], *args) -> None:
        # Runs after the commit, under the lock. Hook errors are logged only.
        if hook is None:
            return
        try:
            hook(self, *args)
        except Exception:
            logger.exception("Hook %r failed", hook)

    @property
    def pair(self):
        return self.custody.pair

    # ----------------------------------------
    # Liquidity
    # ----------------------------------------

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
        """Deposit liquidity; see :meth:`LiquidityManager.add_liquidity`."""
        with self._exclusive("add_liquidity"):
            result = self.liquidity.add_liquidity(
                asset_a, asset_b, amount_a_desired, amount_b_desired,
                amount_a_min, amount_b_min, to, deadline, sender=sender,
            )
            self._notify(self.on_deposit, sender or to, result)
        return result

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
        """Withdraw liquidity; see :meth:`LiquidityManager.remove_liquidity`."""
        with self._exclusive("remove_liquidity"):
            result = self.liquidity.remove_liquidity(
                asset_a, asset_b, liquidity, amount_a_min, amount_b_min, to, deadline, sender=sender,
            )
            self._notify(self.on_withdraw, sender or to, result)
        return result

    # ----------------------------------------
    # Swaps
    # ----------------------------------------

    def swap_exact_tokens_for_tokens(
        self,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        to: str,
        deadline: int,
        sender: Optional[str] = None,
    ) -> int:
        """Swap an exact input; see :meth:`SwapExecutor.swap_exact_tokens_for_tokens`."""
        with self._exclusive("swap_exact_tokens_for_tokens"):
            amount_out = self.swapper.swap_exact_tokens_for_tokens(
                amount_in, amount_out_min, path, to, deadline, sender=sender,
            )
            self._notify(self.on_swap, amount_in, amount_out, tuple(path))
        return amount_out

    # ----------------------------------------
    # Read-only queries
    # ----------------------------------------

    @staticmethod
    def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
        return get_amount_out(amount_in, reserve_in, reserve_out)

    def get_reserves(self, asset_a: str, asset_b: str) -> Tuple[int, int]:
        return self.reserves.get_reserves(asset_a, asset_b)

    def get_price(self, asset_a: str, asset_b: str) -> int:
        """Price of one unit of ``asset_a`` in ``asset_b``, scaled by 10**18."""
        reserve_a, reserve_b = self.get_reserves(asset_a, asset_b)
        return get_price(reserve_a, reserve_b)

    def quote(self, amount_in: int, asset_in: str, asset_out: str) -> int:
        """Output a swap of ``amount_in`` would receive at the current reserves."""
        reserve_in, reserve_out = self.get_reserves(asset_in, asset_out)
        return get_amount_out(amount_in, reserve_in, reserve_out)

    # ----------------------------------------
    # Share token surface
    # ----------------------------------------

    def balance_of(self, account: str) -> int:
        return self.shares.balance_of(account)

    def total_supply(self) -> int:
        return self.shares.total_supply()

    def allowance(self, owner: str, spender: str) -> int:
        return self.shares.allowance(owner, spender)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        with self._exclusive("approve"):
            return self.shares.approve(owner, spender, amount)

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        with self._exclusive("transfer"):
            return self.shares.transfer(sender, to, amount)

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        require_non_zero(spender)
        with self._exclusive("transfer_from"):
            return self.shares.transfer_from(spender, owner, to, amount)

    # External names kept for callers written against the contract ABI.
    addLiquidity = add_liquidity
    removeLiquidity = remove_liquidity
    swapExactTokensForTokens = swap_exact_tokens_for_tokens
    getAmountOut = get_amount_out
    getReserves = get_reserves
    getPrice = get_price
    balanceOf = balance_of
    totalSupply = total_supply
    transferFrom = transfer_from

    def __repr__(self) -> str:
        reserve0, reserve1 = self.reserves.get_pair_reserves(self.pair)
        return (
            f"SimpleSwap({self.pair.token0}/{self.pair.token1}, "
            f"reserves=({reserve0}, {reserve1}), supply={self.shares.total_supply()})"
        )
