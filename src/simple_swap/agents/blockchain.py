from mesa import Agent
from typing import Any, Callable, Dict, List, Optional, Tuple


class BlockchainAgent(Agent):
    """
    Chain clock and registry for a pool simulation.

    Supports:
        - Block height and integer timestamps (the pool's deadline clock)
        - Registration of asset ledgers by address
        - Per-block event logging
        - New-block subscriptions

    Attributes:
        current_block (int): Height of the latest block.
        timestamp (int): Timestamp of the latest block, in seconds.
        block_time (int): Seconds added per block.
        contracts (Dict[str, Any]): Registered ledgers and pools by address.
        event_logs (Dict[int, List[Tuple[str, Any]]]): Events per block.
    """

    def __init__(self, model, block_time: int = 12, genesis_timestamp: int = 0):
        """Initialize the chain at block 0."""
        super().__init__(model)
        self.current_block: int = 0
        self.block_time: int = int(block_time)
        self.timestamp: int = int(genesis_timestamp)
        self.contracts: Dict[str, Any] = {}
        self.event_logs: Dict[int, List[Tuple[str, Any]]] = {}
        self._new_block_listeners: List[Callable[[int, int], None]] = []

    def register_contract(self, address: str, contract: Any) -> None:
        """Register a ledger or pool under its address."""
        if address in self.contracts:
            raise ValueError(f"Address already registered: {address}")
        self.contracts[address] = contract

    def get_contract(self, address: str) -> Any:
        try:
            return self.contracts[address]
        except KeyError:
            raise ValueError(f"No contract registered at {address}") from None

    def log_event(self, event_name: str, payload: Any) -> None:
        """Store an event in the current block's log."""
        self.event_logs.setdefault(self.current_block, []).append((event_name, payload))

    def get_events(self, block: Optional[int] = None, name: Optional[str] = None) -> List[Tuple[str, Any]]:
        """Get events from one block or the whole chain, optionally filtered by name."""
        if block is None:
            events = [ev for ev_list in self.event_logs.values() for ev in ev_list]
        else:
            events = list(self.event_logs.get(block, []))
        if name is not None:
            events = [ev for ev in events if ev[0] == name]
        return events

    def subscribe_new_block(self, callback: Callable[[int, int], None]) -> None:
        """Register a callback run with ``(block, timestamp)`` on every new block."""
        self._new_block_listeners.append(callback)

    def get_current_block(self) -> int:
        return self.current_block

    def get_timestamp(self) -> int:
        """Return the latest block timestamp; used as the pool clock."""
        return self.timestamp

    def step(self) -> None:
        """Advance the chain one block forward."""
        self.current_block += 1
        self.timestamp += self.block_time
        for callback in self._new_block_listeners:
            callback(self.current_block, self.timestamp)
