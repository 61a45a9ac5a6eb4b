"""
Submodule for the Decentralized Stablecoin engine.
"""

__all__ = [
    "DSCEngine",
    "DecentralizedStableCoin",
    "PriceFeed",
    "OracleLib",
    "ERC20",
]

from .engine import DSCEngine
from .stablecoin import DecentralizedStableCoin
from .price_oracle import OracleLib, PriceFeed
from .utils import ERC20
