__all__ = [
    "PriceFeed",
    "OracleLib",
]

from .price_oracle import PriceFeed
from .oracle_lib import OracleLib
