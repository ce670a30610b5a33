from typing import Dict, Tuple

from simple_swap.core.errors import InsufficientAllowance, InsufficientBalance, ZeroAmount
from simple_swap.core.guards import require_non_zero

# (balances, allowances, total supply)
LedgerState = Tuple[Dict[str, int], Dict[Tuple[str, str], int], int]


class FungibleLedger:
    """
    In-memory ERC-20 style balance table.

    Balances, allowances and total supply are exact integers. Zero balances
    and zero allowances are dropped from their tables, so the tables only
    list live positions. The first argument of every mutating method is the
    account performing the call.

    Attributes:
        name (str): Display name.
        symbol (str): Ticker.
        decimals (int): Display decimals.
        _balances (Dict[str, int]): Account balances.
        _allowances (Dict[Tuple[str, str], int]): (owner, spender) approvals.
        _total_supply (int): Sum of all balances.
    """

    def __init__(self, name: str, symbol: str, decimals: int = 18):
        self.name = name
        self.symbol = symbol
        self.decimals = int(decimals)
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._total_supply = 0

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def total_supply(self) -> int:
        return self._total_supply

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """Set ``spender``'s allowance over ``owner``'s balance (replaces any previous value)."""
        require_non_zero(owner)
        require_non_zero(spender)
        if amount < 0:
            raise ZeroAmount(f"Negative allowance: {amount}")
        if amount == 0:
            self._allowances.pop((owner, spender), None)
        else:
            self._allowances[(owner, spender)] = amount
        return True

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        self._move(sender, to, amount)
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        """Move ``amount`` from ``owner`` to ``to`` using ``spender``'s allowance."""
        current = self.allowance(owner, spender)
        if current < amount:
            raise InsufficientAllowance(
                f"Insufficient allowance: {spender} may move {current} of {owner}'s {self.symbol}, needs {amount}"
            )
        self._move(owner, to, amount)
        self._set_allowance(owner, spender, current - amount)
        return True

    def _move(self, frm: str, to: str, amount: int) -> None:
        require_non_zero(frm)
        require_non_zero(to)
        if amount < 0:
            raise ZeroAmount(f"Negative transfer: {amount}")
        balance = self.balance_of(frm)
        if balance < amount:
            raise InsufficientBalance(
                f"Insufficient balance: {frm} holds {balance} {self.symbol}, needs {amount}"
            )
        self._set_balance(frm, balance - amount)
        self._set_balance(to, self.balance_of(to) + amount)

    def _mint(self, to: str, amount: int) -> None:
        require_non_zero(to)
        if amount <= 0:
            raise ZeroAmount()
        self._set_balance(to, self.balance_of(to) + amount)
        self._total_supply += amount

    def _burn(self, frm: str, amount: int) -> None:
        require_non_zero(frm)
        if amount <= 0:
            raise ZeroAmount()
        balance = self.balance_of(frm)
        if balance < amount:
            raise InsufficientBalance(
                f"Insufficient balance: {frm} holds {balance} {self.symbol}, cannot burn {amount}"
            )
        self._set_balance(frm, balance - amount)
        self._total_supply -= amount

    def _set_balance(self, account: str, amount: int) -> None:
        if amount == 0:
            self._balances.pop(account, None)
        else:
            self._balances[account] = amount

    def _set_allowance(self, owner: str, spender: str, amount: int) -> None:
        if amount == 0:
            self._allowances.pop((owner, spender), None)
        else:
            self._allowances[(owner, spender)] = amount

    def snapshot(self) -> LedgerState:
        """Copy of the full ledger state, for ``restore``."""
        return dict(self._balances), dict(self._allowances), self._total_supply

    def restore(self, state: LedgerState) -> None:
        """Put back a state taken with ``snapshot``."""
        balances, allowances, total_supply = state
        self._balances = dict(balances)
        self._allowances = dict(allowances)
        self._total_supply = total_supply

    def holders(self) -> Dict[str, int]:
        """Return a copy of all non-zero balances."""
        return dict(self._balances)

    def verify_supply(self) -> bool:
        """Check that total supply equals the sum of balances and nothing is negative."""
        return (
            all(amount > 0 for amount in self._balances.values())
            and sum(self._balances.values()) == self._total_supply
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.symbol}, supply={self._total_supply}, holders={len(self._balances)})"
