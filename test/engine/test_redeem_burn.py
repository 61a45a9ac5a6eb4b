import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from dscsim.engine import get_engine
from dscsim.engine.dsc.events import CollateralRedeemed, DSCBurned
from dscsim.engine.dsc.exceptions import (
    AssetNotAllowed,
    HealthFactorBroken,
    InsufficientBalance,
    InvalidAmount,
    TransferFailed,
)

AMOUNT_COLLATERAL = 10 * 10**18
AMOUNT_TO_MINT = 100 * 10**18


def test_can_redeem_collateral(engine, weth, deposited_collateral):
    user = deposited_collateral
    engine.redeem_collateral(user, weth.address, AMOUNT_COLLATERAL)
    assert weth.balanceOf[user] == AMOUNT_COLLATERAL
    assert weth.balanceOf[engine.address] == 0
    assert engine.get_collateral_balance_of_user(user, weth.address) == 0
    assert engine.events[-1] == CollateralRedeemed(user, user, weth.address, AMOUNT_COLLATERAL)


def test_redeem_reverts_if_amount_zero(engine, weth, deposited_collateral):
    with pytest.raises(InvalidAmount):
        engine.redeem_collateral(deposited_collateral, weth.address, 0)


def test_redeem_reverts_with_unapproved_collateral(engine, deposited_collateral):
    with pytest.raises(AssetNotAllowed):
        engine.redeem_collateral(deposited_collateral, "ran_address", 1)


def test_redeem_more_than_deposited(engine, weth, wbtc, deposited_collateral):
    user = deposited_collateral
    n_events = len(engine.events)
    with pytest.raises(InsufficientBalance):
        engine.redeem_collateral(user, weth.address, AMOUNT_COLLATERAL + 1)
    with pytest.raises(InsufficientBalance):
        engine.redeem_collateral(user, wbtc.address, 1)

    assert engine.get_collateral_balance_of_user(user, weth.address) == AMOUNT_COLLATERAL
    assert weth.balanceOf[engine.address] == AMOUNT_COLLATERAL
    assert weth.balanceOf[user] == 0
    assert len(engine.events) == n_events


def test_redeem_reverts_if_health_factor_breaks(engine, dsc, weth, deposited_collateral_and_minted_dsc):
    user = deposited_collateral_and_minted_dsc
    # $200 of collateral backs the 100 DSC minted, one wei more breaks it
    removable = AMOUNT_COLLATERAL - engine.get_token_amount_from_usd(weth.address, 200 * 10**18)
    with pytest.raises(HealthFactorBroken):
        engine.redeem_collateral(user, weth.address, removable + 1)

    assert engine.get_collateral_balance_of_user(user, weth.address) == AMOUNT_COLLATERAL
    assert weth.balanceOf[user] == 0

    engine.redeem_collateral(user, weth.address, removable)
    assert engine.get_health_factor(user) == 10**18
    assert weth.balanceOf[user] == removable


def test_can_burn_dsc(engine, dsc, deposited_collateral_and_minted_dsc):
    user = deposited_collateral_and_minted_dsc
    engine.burn_dsc(user, AMOUNT_TO_MINT)
    assert dsc.balanceOf[user] == 0
    assert dsc.balanceOf[engine.address] == 0
    assert dsc.totalSupply == 0
    assert engine.get_account_information(user)[0] == 0
    assert engine.events[-1] == DSCBurned(user, user, AMOUNT_TO_MINT)


def test_burn_reverts_if_amount_zero(engine, deposited_collateral_and_minted_dsc):
    with pytest.raises(InvalidAmount):
        engine.burn_dsc(deposited_collateral_and_minted_dsc, 0)


def test_cant_burn_more_than_user_has(engine, dsc, deposited_collateral_and_minted_dsc, accounts):
    user = deposited_collateral_and_minted_dsc
    with pytest.raises(InsufficientBalance):
        engine.burn_dsc(user, AMOUNT_TO_MINT + 1)
    with pytest.raises(InsufficientBalance):
        engine.burn_dsc(accounts[2], 1)
    assert dsc.totalSupply == AMOUNT_TO_MINT


def test_burn_without_holding_dsc_fails(engine, dsc, deposited_collateral_and_minted_dsc, accounts):
    user = deposited_collateral_and_minted_dsc
    dsc.transfer(user, accounts[1], AMOUNT_TO_MINT)
    with pytest.raises(TransferFailed):
        engine.burn_dsc(user, AMOUNT_TO_MINT)
    assert engine.get_account_information(user)[0] == AMOUNT_TO_MINT
    assert dsc.balanceOf[accounts[1]] == AMOUNT_TO_MINT


def test_can_redeem_collateral_for_dsc(engine, dsc, weth, deposited_collateral_and_minted_dsc):
    user = deposited_collateral_and_minted_dsc
    engine.redeem_collateral_for_dsc(user, weth.address, AMOUNT_COLLATERAL, AMOUNT_TO_MINT)
    assert weth.balanceOf[user] == AMOUNT_COLLATERAL
    assert dsc.balanceOf[user] == 0
    assert engine.get_account_information(user) == (0, 0)
    assert [type(e) for e in engine.events[-2:]] == [DSCBurned, CollateralRedeemed]


def test_redeem_collateral_for_dsc_is_atomic(engine, dsc, weth, deposited_collateral_and_minted_dsc):
    user = deposited_collateral_and_minted_dsc
    # burning half the debt still leaves too little collateral
    with pytest.raises(HealthFactorBroken):
        engine.redeem_collateral_for_dsc(
            user, weth.address, AMOUNT_COLLATERAL, AMOUNT_TO_MINT // 2
        )
    assert dsc.balanceOf[user] == AMOUNT_TO_MINT
    assert dsc.totalSupply == AMOUNT_TO_MINT
    assert engine.get_account_information(user)[0] == AMOUNT_TO_MINT
    assert engine.get_collateral_balance_of_user(user, weth.address) == AMOUNT_COLLATERAL


@given(
    redeem=st.integers(min_value=1, max_value=AMOUNT_COLLATERAL),
    burn=st.integers(min_value=1, max_value=AMOUNT_TO_MINT),
)
@settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
def test_redeem_lowers_and_burn_raises_health_factor(accounts, redeem, burn):
    engine, dsc, (weth, _), _ = get_engine()
    user = accounts[0]
    weth._mint(user, AMOUNT_COLLATERAL)
    engine.deposit_collateral_and_mint_dsc(user, weth.address, AMOUNT_COLLATERAL, AMOUNT_TO_MINT)

    health_factor = engine.get_health_factor(user)
    try:
        engine.redeem_collateral(user, weth.address, redeem)
    except HealthFactorBroken:
        assert engine.get_health_factor(user) == health_factor
    else:
        assert engine.get_health_factor(user) <= health_factor

    health_factor = engine.get_health_factor(user)
    engine.burn_dsc(user, burn)
    assert engine.get_health_factor(user) >= health_factor
