import logging
from typing import Callable, Optional, Sequence

from simple_swap.core.curves import BaseCurve
from simple_swap.core.custody import Custody
from simple_swap.core.errors import LowOutput, NoLiquidity
from simple_swap.core.guards import check_swap_call, require_non_negative, require_non_zero
from simple_swap.core.reserves import ReserveLedger

logger = logging.getLogger(__name__)


class SwapExecutor:
    """Single-hop exchange of an exact input amount against the pool reserves."""

    def __init__(
        self,
        reserves: ReserveLedger,
        custody: Custody,
        curve: BaseCurve,
        clock: Callable[[], int],
    ):
        self.reserves = reserves
        self.custody = custody
        self.curve = curve
        self.clock = clock

    def swap_exact_tokens_for_tokens(
        self,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        to: str,
        deadline: int,
        sender: Optional[str] = None,
    ) -> int:
        """
        Swap exactly ``amount_in`` of ``path[0]`` for at least
        ``amount_out_min`` of ``path[1]``, paid to ``to``.

        Args:
            amount_in (int): Exact input amount pulled from ``sender``.
            amount_out_min (int): Slippage guard on the output.
            path (Sequence[str]): ``[asset_in, asset_out]``.
            to (str): Recipient of the output.
            deadline (int): Last timestamp at which the call may execute.
            sender (str): Account the input is pulled from; defaults to ``to``.

        Returns:
            int: Output amount sent to ``to``.
        """
        check_swap_call(path, to, deadline, self.clock())
        sender = to if sender is None else sender
        require_non_zero(sender)
        require_non_negative(amount_out_min)
        asset_in, asset_out = path[0], path[1]
        pair = self.custody.pair_for(asset_in, asset_out)

        reserve_in, reserve_out = self.reserves.get_reserves(asset_in, asset_out)
        if reserve_in == 0 or reserve_out == 0:
            raise NoLiquidity()

        amount_out, fee = self.curve.compute_swap(amount_in, reserve_in, reserve_out)
        if amount_out < amount_out_min:
            raise LowOutput(f"Low output: {amount_out} < {amount_out_min}")

        self.custody.settle(
            pulls=[(asset_in, sender, amount_in)],
            pushes=[(asset_out, to, amount_out)],
        )
        self.reserves.apply_delta(pair, *pair.deltas_for(asset_in, amount_in, -amount_out))

        logger.info(
            "Swapped %d %s for %d %s (fee %d), %s -> %s",
            amount_in, asset_in, amount_out, asset_out, fee, sender, to,
        )
        return amount_out
