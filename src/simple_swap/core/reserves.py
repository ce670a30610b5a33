"""
Reserve bookkeeping for canonical asset pairs.
"""

from typing import Dict, NamedTuple, Tuple

from simple_swap.core.errors import InvalidReserves, SameToken
from simple_swap.core.guards import require_non_zero


class Pair(NamedTuple):
    """Two asset identifiers in canonical (ascending) order."""

    token0: str
    token1: str

    @classmethod
    def of(cls, asset_a: str, asset_b: str) -> "Pair":
        if asset_a == asset_b:
            raise SameToken()
        if asset_a < asset_b:
            return cls(asset_a, asset_b)
        return cls(asset_b, asset_a)

    def orient(self, asset_a: str, value0: int, value1: int) -> Tuple[int, int]:
        """Reorder canonical ``(value0, value1)`` so ``asset_a``'s value comes first."""
        if asset_a == self.token0:
            return value0, value1
        return value1, value0

    def deltas_for(self, asset_a: str, delta_a: int, delta_b: int) -> Tuple[int, int]:
        """Inverse of :meth:`orient`: map per-argument deltas to canonical order."""
        return self.orient(asset_a, delta_a, delta_b)


class ReserveLedger:
    """
    Paired reserve amounts keyed by canonical pair.

    Attributes:
        _reserves (Dict[Pair, Tuple[int, int]]): Stored ``(reserve0, reserve1)`` per pair.
    """

    def __init__(self) -> None:
        self._reserves: Dict[Pair, Tuple[int, int]] = {}

    def get_reserves(self, asset_a: str, asset_b: str) -> Tuple[int, int]:
        """Return ``(reserve_a, reserve_b)`` in argument order, ``(0, 0)`` if never funded."""
        require_non_zero(asset_a)
        require_non_zero(asset_b)
        pair = Pair.of(asset_a, asset_b)
        reserve0, reserve1 = self._reserves.get(pair, (0, 0))
        return pair.orient(asset_a, reserve0, reserve1)

    def get_pair_reserves(self, pair: Pair) -> Tuple[int, int]:
        return self._reserves.get(pair, (0, 0))

    def apply_delta(self, pair: Pair, delta0: int, delta1: int) -> Tuple[int, int]:
        """
        Add signed deltas to a pair's reserves.

        Callers validate sufficiency beforehand; this only refuses to write a
        state that breaks the both-zero-or-both-positive rule.

        Returns:
            Tuple[int, int]: The new canonical reserves.
        """
        reserve0, reserve1 = self._reserves.get(pair, (0, 0))
        new0 = reserve0 + delta0
        new1 = reserve1 + delta1
        if new0 < 0 or new1 < 0:
            raise InvalidReserves(f"Invalid reserves: delta would leave ({new0}, {new1})")
        if (new0 == 0) != (new1 == 0):
            raise InvalidReserves(f"Invalid reserves: partially empty pair ({new0}, {new1})")
        self._reserves[pair] = (new0, new1)
        return new0, new1

    def __repr__(self) -> str:
        return f"ReserveLedger({len(self._reserves)} pairs)"
