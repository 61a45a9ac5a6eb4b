from .conf import (
    LIQUIDATION_PRECISION,
    LIQUIDATION_THRESHOLD,
    MAX_HEALTH_FACTOR,
    MIN_HEALTH_FACTOR,
    PRECISION,
)


def calculate_health_factor(total_dsc_minted: int, collateral_value_in_usd: int) -> int:
    """
    Ratio of threshold-adjusted collateral value to debt, in 18 decimals.

    Parameters
    ----------
    total_dsc_minted : int
        Outstanding DSC of the user
    collateral_value_in_usd : int
        USD value of the user's collateral

    Returns
    -------
    int
        Health factor, 10**18 is 1.0. A position without debt returns
        MAX_HEALTH_FACTOR.
    """
    if total_dsc_minted == 0:
        return MAX_HEALTH_FACTOR
    collateral_adjusted_for_threshold = (
        collateral_value_in_usd * LIQUIDATION_THRESHOLD // LIQUIDATION_PRECISION
    )
    return collateral_adjusted_for_threshold * PRECISION // total_dsc_minted


def is_healthy(health_factor: int) -> bool:
    return health_factor >= MIN_HEALTH_FACTOR
