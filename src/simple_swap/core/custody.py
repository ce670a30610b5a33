"""
Movement of traded assets in and out of pool custody.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Tuple

from simple_swap.core.assets import AssetLedger
from simple_swap.core.errors import SameToken, TransferFailed, UnsupportedPair
from simple_swap.core.guards import require_non_zero
from simple_swap.core.reserves import Pair

logger = logging.getLogger(__name__)

# (asset, counterparty, amount)
Leg = Tuple[str, str, int]


class Custody:
    """
    The pool's account on the two external asset ledgers.

    Transfers run in one ``settle`` call: every pull first, then every push.
    A failed leg restores both ledgers to their state before the first leg
    and is raised as ``TransferFailed``.

    Attributes:
        address (str): Account the pool holds assets under.
        pair (Pair): The single pair this custody serves.
    """

    def __init__(self, address: str, ledgers: Mapping[str, AssetLedger]):
        require_non_zero(address)
        if len(ledgers) != 2:
            raise UnsupportedPair(f"Unsupported pair: expected two asset ledgers, got {len(ledgers)}")
        for asset in ledgers:
            require_non_zero(asset)
        self.address = address
        self._ledgers: Dict[str, AssetLedger] = dict(ledgers)
        asset_a, asset_b = self._ledgers
        self.pair = Pair.of(asset_a, asset_b)

    def pair_for(self, asset_a: str, asset_b: str) -> Pair:
        """Return the canonical pair, rejecting assets this pool does not trade."""
        if asset_a == asset_b:
            raise SameToken()
        if Pair.of(asset_a, asset_b) != self.pair:
            raise UnsupportedPair(f"Unsupported pair: {asset_a}/{asset_b}")
        return self.pair

    def ledger_for(self, asset: str) -> AssetLedger:
        try:
            return self._ledgers[asset]
        except KeyError:
            raise UnsupportedPair(f"Unsupported pair: unknown asset {asset}") from None

    def held(self, asset: str) -> int:
        """Amount of ``asset`` the pool currently holds on its ledger."""
        return self.ledger_for(asset).balance_of(self.address)

    def settle(self, pulls: Iterable[Leg] = (), pushes: Iterable[Leg] = ()) -> None:
        """
        Pull ``(asset, owner, amount)`` legs into custody, then push
        ``(asset, recipient, amount)`` legs out of it.

        Both ledgers are snapshotted before the first leg. If any leg fails,
        both are restored, so no pull or push outlives the failure.

        Raises:
            TransferFailed: If any leg fails.
        """
        pulls = [leg for leg in pulls if leg[2] > 0]
        pushes = [leg for leg in pushes if leg[2] > 0]
        for asset, _, amount in pushes:
            available = self.held(asset)
            if available < amount:
                raise TransferFailed(
                    f"Transfer failed: pool holds {available} of {asset}, cannot release {amount}"
                )

        snapshots = {asset: ledger.snapshot() for asset, ledger in self._ledgers.items()}
        try:
            for asset, owner, amount in pulls:
                self._call(asset, "transfer_from", self.address, owner, self.address, amount)
            for asset, recipient, amount in pushes:
                self._call(asset, "transfer", self.address, recipient, amount)
        except TransferFailed:
            self._restore(snapshots)
            raise

    def _restore(self, snapshots: Dict[str, Any]) -> None:
        for asset, state in snapshots.items():
            logger.warning("Restoring %s ledger after a failed transfer", asset)
            self._ledgers[asset].restore(state)

    def _call(self, asset: str, method: str, *args) -> None:
        ledger = self.ledger_for(asset)
        try:
            ok = getattr(ledger, method)(*args)
        except Exception as exc:
            raise TransferFailed(f"Transfer failed: {asset}.{method}: {exc}") from exc
        if ok is False:
            raise TransferFailed(f"Transfer failed: {asset}.{method} returned False")
