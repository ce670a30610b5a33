"""
Asset-ledger interface consumed by the pool, plus an in-memory reference token.
"""

import logging
from typing import Any, Protocol, runtime_checkable

from simple_swap.core.errors import Unauthorized
from simple_swap.core.fungible import FungibleLedger
from simple_swap.core.guards import require_non_zero

logger = logging.getLogger(__name__)


@runtime_checkable
class AssetLedger(Protocol):
    """
    Balance ledger of one traded asset.

    The pool moves custody through ``transfer`` and ``transfer_from``, whose
    first argument is the calling account. Any exception they raise aborts
    the pool operation, and the ledger is put back to the state captured by
    ``snapshot`` before the first transfer.
    """

    def balance_of(self, account: str) -> int:
        ...

    def allowance(self, owner: str, spender: str) -> int:
        ...

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        ...

    def snapshot(self) -> Any:
        ...

    def restore(self, state: Any) -> None:
        ...


class MintableToken(FungibleLedger):
    """
    Ownable ERC-20 style token used as a traded asset in tests and simulations.

    Attributes:
        address (str): Identifier the pool knows the asset by.
        owner (str): Only account allowed to mint.
    """

    def __init__(self, address: str, name: str, symbol: str, owner: str, decimals: int = 18):
        require_non_zero(address)
        require_non_zero(owner)
        super().__init__(name=name, symbol=symbol, decimals=decimals)
        self.address = address
        self.owner = owner

    def mint(self, caller: str, to: str, amount: int) -> None:
        """Mint ``amount`` to ``to``; only the owner may call this."""
        if caller != self.owner:
            raise Unauthorized(f"Unauthorized account: {caller} is not the owner of {self.symbol}")
        self._mint(to, amount)
        logger.info("Minted %d %s to %s", amount, self.symbol, to)

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        if caller != self.owner:
            raise Unauthorized(f"Unauthorized account: {caller} is not the owner of {self.symbol}")
        require_non_zero(new_owner)
        self.owner = new_owner
