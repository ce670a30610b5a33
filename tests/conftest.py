import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from simple_swap.core.assets import MintableToken
from simple_swap.core.engine import SimpleSwap

E18 = 10 ** 18
NOW = 1_700_000_000

OWNER = "0x" + "0" * 39 + "1"
USER = "0x" + "0" * 39 + "2"
OTHER = "0x" + "0" * 39 + "3"
TOKEN_A = "0x" + "a" * 40
TOKEN_B = "0x" + "b" * 40
POOL = "0x" + "5" * 40


class FakeClock:
    """Settable clock standing in for the block timestamp."""

    def __init__(self, now: int = NOW):
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_a():
    token = MintableToken(address=TOKEN_A, name="Token A", symbol="TKA", owner=OWNER)
    token.mint(OWNER, OWNER, 1_000 * E18)
    return token


@pytest.fixture
def token_b():
    token = MintableToken(address=TOKEN_B, name="Token B", symbol="TKB", owner=OWNER)
    token.mint(OWNER, OWNER, 1_000 * E18)
    return token


@pytest.fixture
def pool(token_a, token_b, clock):
    return SimpleSwap({TOKEN_A: token_a, TOKEN_B: token_b}, address=POOL, clock=clock)


def deposit(pool, token_a, token_b, amount_a, amount_b, account=OWNER, amount_a_min=0, amount_b_min=0):
    """Approve and add liquidity from ``account``; returns the pool result."""
    token_a.approve(account, pool.address, amount_a)
    token_b.approve(account, pool.address, amount_b)
    return pool.add_liquidity(
        TOKEN_A, TOKEN_B, amount_a, amount_b, amount_a_min, amount_b_min, account, NOW + 1_000
    )


@pytest.fixture
def funded_pool(pool, token_a, token_b):
    """Pool holding 100 A / 200 B, all shares owned by OWNER."""
    deposit(pool, token_a, token_b, 100 * E18, 200 * E18)
    return pool


def snapshot(pool, token_a, token_b, *accounts):
    """Everything a rejected call must leave untouched."""
    return (
        pool.get_reserves(TOKEN_A, TOKEN_B),
        pool.total_supply(),
        pool.shares.holders(),
        tuple(token_a.balance_of(acct) for acct in accounts + (pool.address,)),
        tuple(token_b.balance_of(acct) for acct in accounts + (pool.address,)),
    )


class RefusingToken(MintableToken):
    """Token whose ledger reports failure for transfers to one account."""

    def __init__(self, refused: str, **kwargs):
        super().__init__(**kwargs)
        self.refused = refused

    def transfer(self, sender, to, amount):
        if to == self.refused:
            return False
        return super().transfer(sender, to, amount)


@pytest.fixture
def refusing_b():
    token = RefusingToken(USER, address=TOKEN_B, name="Token B", symbol="TKB", owner=OWNER)
    token.mint(OWNER, OWNER, 1_000 * E18)
    return token


@pytest.fixture
def refusing_pool(token_a, refusing_b, clock):
    """100 A / 200 B pool whose B ledger never pays out to USER."""
    pool = SimpleSwap({TOKEN_A: token_a, TOKEN_B: refusing_b}, address=POOL, clock=clock)
    deposit(pool, token_a, refusing_b, 100 * E18, 200 * E18)
    return pool
