"""
Conversion between collateral token amounts and USD value.

USD values use the engine's 18-decimal fixed point. Conversions round down,
so a position is never valued above what the oracle price supports and a
liquidator never receives more collateral than the covered debt is worth.
"""
from typing import Dict

from curvesim.exceptions import CalculationError

from .conf import PRECISION
from .ledger import CollateralLedger
from .price_oracle import OracleLib, PriceFeed


def feed_precision(feed: PriceFeed) -> int:
    """Multiplier lifting a feed answer to 18 decimals."""
    return 10 ** (18 - feed.decimals)


class ValuationEngine:
    """
    Prices collateral with the feed registered for each token.

    Parameters
    ----------
    price_feeds : Dict[str, PriceFeed]
        Token address to price feed
    oracle : OracleLib
        Checked reader applied to every feed read
    clock : BlocktimestampMixins
        Source of the current block timestamp
    """

    def __init__(self, price_feeds: Dict[str, PriceFeed], oracle: OracleLib, clock):
        self.price_feeds = price_feeds
        self.oracle = oracle
        self.clock = clock

    def price(self, token: str) -> int:
        """Current price of `token` in 18 decimals."""
        feed = self.price_feeds[token]
        answer = self.oracle.price(feed, self.clock.block_timestamp)
        return answer * feed_precision(feed)

    def usd_value(self, token: str, amount: int) -> int:
        return self.price(token) * amount // PRECISION

    def token_amount_from_usd(self, token: str, usd_amount_in_wei: int) -> int:
        price = self.price(token)
        if price == 0:
            raise CalculationError(f"Cannot convert USD to {token} at a zero price")
        return usd_amount_in_wei * PRECISION // price

    def account_collateral_value(self, ledger: CollateralLedger, user: str) -> int:
        """
        Total USD value of everything `user` has deposited.

        Tokens the user holds none of are skipped without reading their feed.
        """
        total_collateral_value_in_usd = 0
        for token in self.price_feeds:
            amount = ledger.balance_of(user, token)
            if amount > 0:
                total_collateral_value_in_usd += self.usd_value(token, amount)
        return total_collateral_value_in_usd
