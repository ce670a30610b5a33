import pytest

from simple_swap.core.errors import (
    Expired,
    InsufficientBalance,
    LowAmountA,
    LowAmountB,
    LowLiquidity,
    NoLiquidity,
    SameToken,
    TransferFailed,
    UnsupportedPair,
    ZeroAddress,
    ZeroAmount,
)
from simple_swap.core.guards import ZERO_ADDRESS

from conftest import E18, NOW, OTHER, OWNER, POOL, TOKEN_A, TOKEN_B, USER, deposit, snapshot


@pytest.fixture
def user_funds(token_a, token_b):
    token_a.transfer(OWNER, USER, 500 * E18)
    token_b.transfer(OWNER, USER, 500 * E18)


def test_first_deposit_sets_reserves_and_mints_geometric_mean(pool, token_a, token_b):
    amount_a, amount_b, liquidity = deposit(pool, token_a, token_b, 100 * E18, 200 * E18)

    assert (amount_a, amount_b) == (100 * E18, 200 * E18)
    assert liquidity == 141421356237309504880
    assert pool.get_reserves(TOKEN_A, TOKEN_B) == (100 * E18, 200 * E18)
    assert pool.balance_of(OWNER) == liquidity == pool.total_supply()
    assert token_a.balance_of(pool.address) == 100 * E18
    assert token_b.balance_of(pool.address) == 200 * E18


def test_first_deposit_accepts_any_ratio(pool, token_a, token_b):
    deposit(pool, token_a, token_b, 1 * E18, 900 * E18)
    assert pool.get_reserves(TOKEN_A, TOKEN_B) == (1 * E18, 900 * E18)


def test_first_deposit_with_arguments_reversed(pool, token_a, token_b):
    token_a.approve(OWNER, pool.address, 100 * E18)
    token_b.approve(OWNER, pool.address, 200 * E18)
    pool.add_liquidity(TOKEN_B, TOKEN_A, 200 * E18, 100 * E18, 0, 0, OWNER, NOW)

    assert pool.get_reserves(TOKEN_A, TOKEN_B) == (100 * E18, 200 * E18)
    assert pool.get_reserves(TOKEN_B, TOKEN_A) == (200 * E18, 100 * E18)


def test_deposit_binds_on_b_side(funded_pool, token_a, token_b, user_funds):
    supply = funded_pool.total_supply()
    amount_a, amount_b, liquidity = deposit(
        funded_pool, token_a, token_b, 50 * E18, 150 * E18, account=USER
    )
    assert (amount_a, amount_b) == (50 * E18, 100 * E18)
    assert liquidity == supply // 2
    assert funded_pool.get_reserves(TOKEN_A, TOKEN_B) == (150 * E18, 300 * E18)
    # Unused allowance stays with the provider.
    assert token_b.balance_of(USER) == 400 * E18


def test_deposit_binds_on_a_side(funded_pool, token_a, token_b, user_funds):
    amount_a, amount_b, _ = deposit(funded_pool, token_a, token_b, 50 * E18, 80 * E18, account=USER)
    assert (amount_a, amount_b) == (40 * E18, 80 * E18)
    assert funded_pool.get_reserves(TOKEN_A, TOKEN_B) == (140 * E18, 280 * E18)


def test_deposit_below_amount_a_min(funded_pool, token_a, token_b, user_funds):
    before = snapshot(funded_pool, token_a, token_b, OWNER, USER)
    with pytest.raises(LowAmountA):
        deposit(funded_pool, token_a, token_b, 50 * E18, 80 * E18, account=USER, amount_a_min=60 * E18)
    assert snapshot(funded_pool, token_a, token_b, OWNER, USER) == before


def test_deposit_below_amount_b_min(funded_pool, token_a, token_b, user_funds):
    before = snapshot(funded_pool, token_a, token_b, OWNER, USER)
    with pytest.raises(LowAmountB):
        deposit(funded_pool, token_a, token_b, 50 * E18, 150 * E18, account=USER, amount_b_min=120 * E18)
    assert snapshot(funded_pool, token_a, token_b, OWNER, USER) == before


def test_deposit_within_minimums(funded_pool, token_a, token_b, user_funds):
    amount_a, amount_b, _ = deposit(
        funded_pool, token_a, token_b, 50 * E18, 100 * E18,
        account=USER, amount_a_min=45 * E18, amount_b_min=95 * E18,
    )
    assert (amount_a, amount_b) == (50 * E18, 100 * E18)


def test_deposit_keeps_price(funded_pool, token_a, token_b, user_funds):
    price = funded_pool.get_price(TOKEN_A, TOKEN_B)
    deposit(funded_pool, token_a, token_b, 37 * E18, 500 * E18, account=USER)
    assert funded_pool.get_price(TOKEN_A, TOKEN_B) == price


def test_zero_deposit_mints_nothing(pool, token_a, token_b):
    with pytest.raises(LowLiquidity):
        deposit(pool, token_a, token_b, 0, 0)
    with pytest.raises(LowLiquidity):
        deposit(pool, token_a, token_b, 0, 10 * E18)
    assert pool.get_reserves(TOKEN_A, TOKEN_B) == (0, 0)
    assert pool.total_supply() == 0


def test_dust_deposit_into_funded_pool(funded_pool, token_a, token_b):
    with pytest.raises(LowLiquidity):
        deposit(funded_pool, token_a, token_b, 0, 0)
    _, _, liquidity = deposit(funded_pool, token_a, token_b, 1, 2)
    assert liquidity == 1


def test_negative_amounts_rejected(pool, token_a, token_b):
    with pytest.raises(ZeroAmount):
        pool.add_liquidity(TOKEN_A, TOKEN_B, -1, 10, 0, 0, OWNER, NOW)
    with pytest.raises(ZeroAmount):
        pool.add_liquidity(TOKEN_A, TOKEN_B, 10, 10, -5, 0, OWNER, NOW)


def test_deposit_argument_checks(pool):
    with pytest.raises(ZeroAddress):
        pool.add_liquidity(ZERO_ADDRESS, TOKEN_B, 1, 1, 0, 0, OWNER, NOW)
    with pytest.raises(ZeroAddress):
        pool.add_liquidity(TOKEN_A, TOKEN_B, 1, 1, 0, 0, ZERO_ADDRESS, NOW)
    with pytest.raises(SameToken):
        pool.add_liquidity(TOKEN_A, TOKEN_A, 1, 1, 0, 0, OWNER, NOW)
    with pytest.raises(UnsupportedPair):
        pool.add_liquidity(TOKEN_A, OTHER, 1, 1, 0, 0, OWNER, NOW)


def test_expired_deposit_changes_nothing(funded_pool, token_a, token_b, clock):
    before = snapshot(funded_pool, token_a, token_b, OWNER)
    clock.now = NOW + 1_001
    with pytest.raises(Expired):
        deposit(funded_pool, token_a, token_b, 10 * E18, 20 * E18)
    assert snapshot(funded_pool, token_a, token_b, OWNER) == before


def test_deposit_at_deadline_succeeds(pool, token_a, token_b, clock):
    clock.now = NOW + 1_000
    deposit(pool, token_a, token_b, 10 * E18, 20 * E18)
    assert pool.total_supply() > 0


def test_deposit_without_allowance_changes_nothing(funded_pool, token_a, token_b):
    before = snapshot(funded_pool, token_a, token_b, OWNER)
    token_a.approve(OWNER, funded_pool.address, 10 * E18)
    # Asset B is not approved, so the second pull fails.
    with pytest.raises(TransferFailed):
        funded_pool.add_liquidity(TOKEN_A, TOKEN_B, 10 * E18, 20 * E18, 0, 0, OWNER, NOW)
    assert snapshot(funded_pool, token_a, token_b, OWNER) == before


def test_deposit_beyond_balance_changes_nothing(funded_pool, token_a, token_b):
    before = snapshot(funded_pool, token_a, token_b, USER)
    with pytest.raises(TransferFailed):
        deposit(funded_pool, token_a, token_b, 10 * E18, 20 * E18, account=USER)
    assert snapshot(funded_pool, token_a, token_b, USER) == before


def test_sender_funds_shares_for_recipient(pool, token_a, token_b):
    token_a.approve(OWNER, pool.address, 10 * E18)
    token_b.approve(OWNER, pool.address, 10 * E18)
    _, _, liquidity = pool.add_liquidity(
        TOKEN_A, TOKEN_B, 10 * E18, 10 * E18, 0, 0, USER, NOW, sender=OWNER
    )
    assert pool.balance_of(USER) == liquidity
    assert pool.balance_of(OWNER) == 0
    assert token_a.balance_of(OWNER) == 990 * E18


def test_full_withdrawal_empties_pool(funded_pool, token_a, token_b):
    liquidity = funded_pool.balance_of(OWNER)
    amount_a, amount_b = funded_pool.remove_liquidity(TOKEN_A, TOKEN_B, liquidity, 0, 0, OWNER, NOW)

    assert (amount_a, amount_b) == (100 * E18, 200 * E18)
    assert funded_pool.get_reserves(TOKEN_A, TOKEN_B) == (0, 0)
    assert funded_pool.total_supply() == 0
    assert token_a.balance_of(OWNER) == 1_000 * E18
    assert token_b.balance_of(OWNER) == 1_000 * E18


def test_round_trip_never_returns_more(funded_pool, token_a, token_b, user_funds):
    amount_a, amount_b, liquidity = deposit(funded_pool, token_a, token_b, 33 * E18 + 7, 70 * E18, account=USER)
    out_a, out_b = funded_pool.remove_liquidity(TOKEN_A, TOKEN_B, liquidity, 0, 0, USER, NOW)

    assert 0 < out_a <= amount_a
    assert 0 < out_b <= amount_b
    assert funded_pool.balance_of(USER) == 0


def test_withdrawal_in_reversed_order(funded_pool):
    liquidity = funded_pool.balance_of(OWNER) // 4
    amount_b, amount_a = funded_pool.remove_liquidity(TOKEN_B, TOKEN_A, liquidity, 0, 0, OWNER, NOW)
    assert 0 < amount_a <= 25 * E18
    assert abs(amount_b - 2 * amount_a) <= 1


def test_withdrawal_minimums(funded_pool, token_a, token_b):
    liquidity = funded_pool.balance_of(OWNER) // 2
    before = snapshot(funded_pool, token_a, token_b, OWNER)
    with pytest.raises(LowAmountA):
        funded_pool.remove_liquidity(TOKEN_A, TOKEN_B, liquidity, 60 * E18, 0, OWNER, NOW)
    with pytest.raises(LowAmountB):
        funded_pool.remove_liquidity(TOKEN_A, TOKEN_B, liquidity, 0, 120 * E18, OWNER, NOW)
    assert snapshot(funded_pool, token_a, token_b, OWNER) == before


def test_withdraw_zero_shares(funded_pool):
    with pytest.raises(ZeroAmount):
        funded_pool.remove_liquidity(TOKEN_A, TOKEN_B, 0, 0, 0, OWNER, NOW)


def test_withdraw_from_empty_pool(pool):
    with pytest.raises(NoLiquidity):
        pool.remove_liquidity(TOKEN_A, TOKEN_B, 1, 0, 0, OWNER, NOW)


def test_withdraw_more_than_held(funded_pool):
    with pytest.raises(InsufficientBalance):
        funded_pool.remove_liquidity(TOKEN_A, TOKEN_B, 1, 0, 0, USER, NOW)
    with pytest.raises(InsufficientBalance):
        funded_pool.remove_liquidity(
            TOKEN_A, TOKEN_B, funded_pool.balance_of(OWNER) + 1, 0, 0, OWNER, NOW
        )


def test_expired_withdrawal_changes_nothing(funded_pool, token_a, token_b, clock):
    before = snapshot(funded_pool, token_a, token_b, OWNER)
    clock.now = NOW + 5
    with pytest.raises(Expired):
        funded_pool.remove_liquidity(TOKEN_A, TOKEN_B, 10, 0, 0, OWNER, NOW)
    assert snapshot(funded_pool, token_a, token_b, OWNER) == before


def test_withdrawal_to_another_recipient(funded_pool, token_a, token_b):
    liquidity = funded_pool.balance_of(OWNER) // 2
    amount_a, amount_b = funded_pool.remove_liquidity(
        TOKEN_A, TOKEN_B, liquidity, 0, 0, OTHER, NOW, sender=OWNER
    )
    assert token_a.balance_of(OTHER) == amount_a
    assert token_b.balance_of(OTHER) == amount_b
    assert funded_pool.balance_of(OWNER) == funded_pool.total_supply()


def test_withdrawal_with_refused_second_payout_changes_nothing(refusing_pool, token_a, refusing_b):
    before = snapshot(refusing_pool, token_a, refusing_b, OWNER, USER)
    half = refusing_pool.balance_of(OWNER) // 2
    # A is paid out first, then B is refused; repeated attempts must not drain A.
    for _ in range(3):
        with pytest.raises(TransferFailed):
            refusing_pool.remove_liquidity(TOKEN_A, TOKEN_B, half, 0, 0, USER, NOW, sender=OWNER)
    assert snapshot(refusing_pool, token_a, refusing_b, OWNER, USER) == before
    assert token_a.balance_of(POOL) == 100 * E18

    refusing_pool.remove_liquidity(TOKEN_A, TOKEN_B, half, 0, 0, OTHER, NOW, sender=OWNER)
    assert token_a.balance_of(OTHER) == 50 * E18
