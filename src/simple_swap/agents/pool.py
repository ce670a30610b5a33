from mesa import Agent
from typing import Optional, Tuple

from simple_swap.agents.blockchain import BlockchainAgent
from simple_swap.core.assets import MintableToken
from simple_swap.core.engine import DEFAULT_POOL_ADDRESS, SimpleSwap
from simple_swap.core.pricing import PRICE_SCALE


class PoolAgent(Agent):
    """
    Puts a SimpleSwap pool on the simulated chain.

    The engine is clocked by the chain timestamp and its hooks write
    ``Swap``, ``Deposit`` and ``Withdraw`` events into the chain log.

    Attributes:
        blockchain (BlockchainAgent): Chain providing the clock and event log.
        token_a (MintableToken): First traded asset.
        token_b (MintableToken): Second traded asset.
        engine (SimpleSwap): The pool itself.
        swap_count (int): Swaps committed so far.
        volume_a (int): Total input of token A across swaps.
        volume_b (int): Total input of token B across swaps.
    """

    def __init__(
        self,
        model,
        blockchain: BlockchainAgent,
        token_a: MintableToken,
        token_b: MintableToken,
        address: str = DEFAULT_POOL_ADDRESS,
    ):
        super().__init__(model)
        self.blockchain = blockchain
        self.token_a = token_a
        self.token_b = token_b
        self.engine = SimpleSwap(
            ledgers={token_a.address: token_a, token_b.address: token_b},
            address=address,
            clock=blockchain.get_timestamp,
            on_swap=self._on_swap,
            on_deposit=self._on_deposit,
            on_withdraw=self._on_withdraw,
        )
        blockchain.register_contract(address, self.engine)

        self.swap_count = 0
        self.volume_a = 0
        self.volume_b = 0

    @property
    def address(self) -> str:
        return self.engine.address

    def get_reserves(self) -> Tuple[int, int]:
        """Return current reserves of token A and token B."""
        return self.engine.get_reserves(self.token_a.address, self.token_b.address)

    def get_k(self) -> int:
        """Return the constant-product invariant k = reserve_a * reserve_b."""
        reserve_a, reserve_b = self.get_reserves()
        return reserve_a * reserve_b

    def get_price(self) -> Optional[float]:
        """Price of token A in token B as a float, or None while the pool is empty."""
        reserve_a, _ = self.get_reserves()
        if reserve_a == 0:
            return None
        return self.engine.get_price(self.token_a.address, self.token_b.address) / PRICE_SCALE

    def _on_swap(self, pool, amount_in, amount_out, path):
        self.swap_count += 1
        if path[0] == self.token_a.address:
            self.volume_a += amount_in
        else:
            self.volume_b += amount_in
        self.blockchain.log_event(
            "Swap", {"path": path, "amount_in": amount_in, "amount_out": amount_out}
        )

    def _on_deposit(self, pool, provider, result):
        amount_a, amount_b, liquidity = result
        self.blockchain.log_event(
            "Deposit",
            {"provider": provider, "amount_a": amount_a, "amount_b": amount_b, "liquidity": liquidity},
        )

    def _on_withdraw(self, pool, provider, result):
        amount_a, amount_b = result
        self.blockchain.log_event(
            "Withdraw", {"provider": provider, "amount_a": amount_a, "amount_b": amount_b}
        )

    def step(self):
        """Pools are reactive; no internal logic on each step."""
        pass
