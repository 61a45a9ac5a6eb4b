"""
Properties that must hold after any sequence of handler operations.
"""
from typing import Iterable

from dscsim.engine import EngineInstance
from dscsim.engine.dsc.conf import MAX_HEALTH_FACTOR


def total_collateral_value(instance: EngineInstance) -> int:
    """USD value of every collateral token held by the engine."""
    engine = instance.engine
    return sum(
        engine.get_usd_value(token.address, token.balanceOf[engine.address])
        for token in instance.collateral_tokens
    )


def protocol_must_have_more_value_than_total_supply(instance: EngineInstance):
    total_supply = instance.dsc.totalSupply
    total_value = total_collateral_value(instance)
    assert total_value >= total_supply, (
        "Collateral worth %d backs %d DSC" % (total_value, total_supply)
    )


def ledgers_non_negative(instance: EngineInstance):
    engine = instance.engine
    for (user, token), amount in engine.collateral_ledger.deposited.items():
        assert amount >= 0, "%s has %d of %s deposited" % (user, amount, token)
    for user, amount in engine.credit_ledger.minted.items():
        assert amount >= 0, "%s has minted %d" % (user, amount)


def ledgers_match_balances(instance: EngineInstance):
    engine = instance.engine
    for token in instance.collateral_tokens:
        assert engine.collateral_ledger.total(token.address) == token.balanceOf[engine.address]
    assert engine.credit_ledger.total() == instance.dsc.totalSupply


def getters_should_not_revert(instance: EngineInstance, users: Iterable[str] = ()):
    engine = instance.engine
    engine.get_precision()
    engine.get_additional_feed_precision()
    engine.get_liquidation_threshold()
    engine.get_liquidation_bonus()
    engine.get_liquidation_precision()
    engine.get_min_health_factor()
    engine.get_dsc()
    engine.users_to_liquidate()
    for token in engine.get_collateral_tokens():
        engine.get_collateral_token_price_feed(token)
        engine.get_usd_value(token, 10**18)
        engine.get_token_amount_from_usd(token, 10**18)
    for user in users:
        minted, collateral_value = engine.get_account_information(user)
        engine.get_account_collateral_value(user)
        health_factor = engine.get_health_factor(user)
        assert health_factor == engine.calculate_health_factor(minted, collateral_value)
        if minted == 0:
            assert health_factor == MAX_HEALTH_FACTOR
        for token in engine.get_collateral_tokens():
            engine.get_collateral_balance_of_user(user, token)


def check_invariants(instance: EngineInstance, users: Iterable[str] = (), solvency: bool = True):
    """
    Assert every standing property of the engine.

    Parameters
    ----------
    instance : EngineInstance
        Engine bundle under test
    users : Iterable[str]
        Accounts whose per-user queries are exercised
    solvency : bool
        Whether to check global solvency, which price drops can break
    """
    users = list(users)
    ledgers_non_negative(instance)
    ledgers_match_balances(instance)
    getters_should_not_revert(instance, users)
    if solvency:
        protocol_must_have_more_value_than_total_supply(instance)
