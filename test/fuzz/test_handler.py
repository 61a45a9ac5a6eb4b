import pytest
from hypothesis import given
from hypothesis import strategies as st

from dscsim.engine import get_engine
from dscsim.fuzz import Handler, bound, check_invariants, run_campaign
from dscsim.metrics import StateLog

UINT256_MAX = 2**256 - 1


def test_bound_keeps_values_in_range():
    assert bound(5, 1, 10) == 5
    assert bound(1, 1, 10) == 1
    assert bound(10, 1, 10) == 10
    assert bound(11, 1, 10) == 1
    assert bound(0, 1, 10) == 10
    assert bound(7, 3, 3) == 3


def test_bound_rejects_empty_range():
    with pytest.raises(AssertionError):
        bound(1, 2, 1)


@given(
    x=st.integers(min_value=-(2**256), max_value=2**256),
    low=st.integers(min_value=0, max_value=2**128),
    size=st.integers(min_value=0, max_value=2**128),
)
def test_bound_is_deterministic(x, low, size):
    high = low + size
    result = bound(x, low, high)
    assert low <= result <= high
    assert result == bound(x, low, high)
    if low <= x <= high:
        assert result == x


@pytest.fixture
def handler(instance):
    return Handler(instance)


def test_deposit_collateral(handler, instance):
    handler.deposit_collateral(1, UINT256_MAX, user_seed=7)
    wbtc = instance.collateral_tokens[1]
    user = handler.users[7 % len(handler.users)]
    deposited = instance.engine.get_collateral_balance_of_user(user, wbtc.address)
    assert 1 <= deposited <= handler.max_deposit_size
    assert handler.users_with_collateral_deposited == [user]
    assert handler.calls["deposit_collateral"] == 1


def test_mint_needs_collateral(handler, instance):
    handler.mint_dsc(10**18, 0)
    assert handler.times_mint_is_called == 0
    assert instance.dsc.totalSupply == 0


def test_mint_is_bounded_by_collateral(handler, instance):
    handler.deposit_collateral(0, 10**18)
    handler.mint_dsc(400 * 10**18, 0)
    assert handler.times_mint_is_called == 1

    handler.mint_dsc(UINT256_MAX, 0)
    user = handler.users_with_collateral_deposited[0]
    assert instance.engine.get_health_factor(user) >= 10**18
    assert instance.dsc.totalSupply <= 1000 * 10**18


def test_redeem_keeps_position_healthy(handler, instance):
    handler.deposit_collateral(0, 10 * 10**18)
    handler.mint_dsc(5000 * 10**18, 0)
    for amount in (UINT256_MAX, 3 * 10**18, 10**18 + 1):
        handler.redeem_collateral(0, amount)
        check_invariants(instance, handler.users)
    user = handler.users_with_collateral_deposited[0]
    assert instance.engine.get_health_factor(user) >= 10**18


def test_burn_repays_debt(handler, instance):
    handler.deposit_collateral(0, 10 * 10**18)
    handler.mint_dsc(100 * 10**18, 0)
    handler.burn_dsc(100 * 10**18, 3)
    user = handler.users_with_collateral_deposited[0]
    assert instance.engine.get_account_information(user)[0] == 0
    handler.burn_dsc(1, 0)
    assert handler.calls["burn_dsc"] == 1


def test_update_collateral_price(handler, instance):
    handler.update_collateral_price(0, 0)
    answer = instance.price_feeds[0].latest_answer()
    assert handler.min_price <= answer <= handler.max_price


def test_liquidate_unhealthy_user(handler, instance):
    engine = instance.engine
    handler.deposit_collateral(0, 10 * 10**18)
    handler.mint_dsc(10000 * 10**18, 0)
    user = handler.users_with_collateral_deposited[0]
    assert handler.liquidate(0, 0, 1) is None

    instance.price_feeds[0].update_answer(1500 * 10**8)
    user_, starting, ending = handler.liquidate(0, 0, 4000 * 10**18)
    assert user_ == user
    assert ending > starting
    assert engine.get_account_information(user)[0] == 6000 * 10**18
    assert engine.get_health_factor(handler.liquidator) >= 10**18
    assert handler.calls["liquidate"] == 1
    check_invariants(instance, handler.users + [handler.liquidator], solvency=False)


def test_run_campaign_replays():
    first = run_campaign(seed=3, steps=40)
    second = run_campaign(seed=3, steps=40)
    assert first.call_summary() == second.call_summary()
    assert sum(first.calls.values()) <= 40


def test_run_campaign_with_price_moves():
    instance = get_engine()
    handler = run_campaign(seed=11, steps=60, price_moves=True, instance=instance)
    assert handler.instance is instance
    check_invariants(instance, handler.users, solvency=False)


def test_state_log():
    instance = get_engine()
    state_log = StateLog(instance)
    run_campaign(seed=5, steps=20, instance=instance, state_log=state_log)

    logs = state_log.get_logs()
    state_data = logs["state_data"]
    assert len(state_data) == 20
    assert list(state_data["step"]) == list(range(20))
    assert {"operation", "total_supply", "collateral_value", "min_health_factor"} <= set(
        state_data.columns
    )
    assert (state_data["collateral_value"] >= state_data["total_supply"]).all()
    assert len(logs["events"]) == len(instance.engine.events)
    assert state_data["n_events"].iloc[-1] == len(instance.engine.events)
