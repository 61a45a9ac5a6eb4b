"""
Seeded random campaigns over the handler, used from the command line.
"""
from random import Random

from curvesim.logging import get_logger

from dscsim.engine import get_engine

from .handler import Handler
from .invariants import check_invariants

logger = get_logger(__name__)

SOLVENT_OPERATIONS = ("deposit_collateral", "mint_dsc", "redeem_collateral", "burn_dsc")
PRICE_OPERATIONS = ("update_collateral_price", "liquidate")

N_ARGS = {
    "deposit_collateral": 3,
    "mint_dsc": 2,
    "redeem_collateral": 3,
    "burn_dsc": 2,
    "update_collateral_price": 2,
    "liquidate": 3,
}


def run_campaign(seed=0, steps=100, price_moves=False, instance=None, state_log=None):
    """
    Drive a handler with `steps` random operations and check the
    invariants after each one.

    Parameters
    ----------
    seed : int
        Seed of the random generator, equal seeds replay equal campaigns.
    steps : int
        Number of operations.
    price_moves : bool
        Also move prices and liquidate; global solvency is then not checked.
    instance : EngineInstance, optional
        Engine bundle to drive, a fresh one by default.
    state_log : StateLog, optional
        Updated after every step.

    Returns
    -------
    Handler
    """
    rng = Random(seed)
    instance = instance or get_engine()
    handler = Handler(instance)
    operations = SOLVENT_OPERATIONS + (PRICE_OPERATIONS if price_moves else ())

    logger.info("Running campaign: seed=%s steps=%s price_moves=%s", seed, steps, price_moves)
    for step in range(steps):
        name = rng.choice(operations)
        args = [rng.getrandbits(256) for _ in range(N_ARGS[name])]
        getattr(handler, name)(*args)
        check_invariants(
            instance, users=handler.users + [handler.liquidator], solvency=not price_moves
        )
        if state_log is not None:
            state_log.update(step=step, operation=name)

    handler.call_summary()
    return handler
