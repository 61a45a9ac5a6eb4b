"""
Events emitted by the engine, one record per completed state change.
"""
from collections import namedtuple

__all__ = [
    "CollateralDeposited",
    "CollateralRedeemed",
    "DSCMinted",
    "DSCBurned",
    "Liquidated",
]

CollateralDeposited = namedtuple("CollateralDeposited", ["user", "token", "amount"])

CollateralRedeemed = namedtuple(
    "CollateralRedeemed", ["redeemed_from", "redeemed_to", "token", "amount"]
)

DSCMinted = namedtuple("DSCMinted", ["user", "amount"])

DSCBurned = namedtuple("DSCBurned", ["on_behalf_of", "dsc_from", "amount"])

Liquidated = namedtuple(
    "Liquidated",
    ["liquidator", "user", "token", "debt_covered", "collateral_seized"],
)
