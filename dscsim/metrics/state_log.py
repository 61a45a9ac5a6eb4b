"""
Module to house the `StateLog`, a class to record changing engine states
during fuzz campaigns.
"""
from pandas import DataFrame

from dscsim.engine import EngineInstance
from dscsim.engine.dsc.conf import MAX_HEALTH_FACTOR


def get_engine_state(instance: EngineInstance):
    """Returns engine-wide state."""
    engine = instance.engine
    collateral_value = 0
    for token in instance.collateral_tokens:
        collateral_value += engine.get_usd_value(
            token.address, token.balanceOf[engine.address]
        )
    return {
        "total_supply": instance.dsc.totalSupply,
        "collateral_value": collateral_value,
        "n_events": len(engine.events),
    }


def get_user_state(instance: EngineInstance):
    """Returns the lowest health factor among users with debt."""
    engine = instance.engine
    health = [
        engine.get_health_factor(user)
        for user in engine.credit_ledger.users()
        if engine.credit_ledger.balance_of(user) > 0
    ]
    min_health = min(health) if health else MAX_HEALTH_FACTOR
    return {
        "n_debtors": len(health),
        "min_health_factor": min_health / 1e18 if health else float("inf"),
    }


class StateLog:
    """
    Logger that records engine state after each step of a campaign.
    """

    __slots__ = [
        "instance",
        "state_per_step",
    ]

    def __init__(self, instance: EngineInstance):
        self.instance = instance
        self.state_per_step = []

    def update(self, **kwargs):
        """Records engine state and any keyword arguments provided."""
        self.state_per_step.append(
            {
                **kwargs,
                **get_engine_state(self.instance),
                **get_user_state(self.instance),
            }
        )

    def get_events(self):
        """Returns the engine's events, one row per event."""
        rows = [
            {"event": type(event).__name__, **event._asdict()}
            for event in self.instance.engine.events
        ]
        return DataFrame(rows)

    def get_logs(self):
        """Returns the accumulated log data."""
        return {
            "state_data": DataFrame(self.state_per_step),
            "events": self.get_events(),
        }
