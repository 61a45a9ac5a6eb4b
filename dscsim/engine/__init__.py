from copy import deepcopy
from typing import Dict, List, Sequence

from curvesim.exceptions import CurvesimValueError
from curvesim.logging import get_logger

from dscsim.engine.dsc.conf import (
    COLLATERAL_CONF,
    ENGINE_CONF,
    FEED_DECIMALS,
    PRICE_FEED_CONF,
)
from dscsim.engine.dsc.engine import DSCEngine
from dscsim.engine.dsc.price_oracle import OracleLib, PriceFeed
from dscsim.engine.dsc.stablecoin import DecentralizedStableCoin
from dscsim.engine.dsc.utils.ERC20 import ERC20

__all__ = [
    "DSCEngine",
    "get_engine",
    "EngineInstance",
    "get",
]

logger = get_logger(__name__)


class EngineInstance:
    def __init__(
        self,
        engine: DSCEngine,
        dsc: DecentralizedStableCoin,
        collateral_tokens: List[ERC20],
        price_feeds: List[PriceFeed],
    ):
        self.engine = engine
        self.dsc = dsc
        self.collateral_tokens = collateral_tokens
        self.price_feeds = price_feeds

    def __iter__(self):
        return iter((
            self.engine,
            self.dsc,
            self.collateral_tokens,
            self.price_feeds,
        ))

    def copy(self):
        # one deepcopy so tokens and feeds stay shared with the engine copy
        new_engine, new_dsc, new_tokens, new_feeds = deepcopy(
            (self.engine, self.dsc, self.collateral_tokens, self.price_feeds)
        )
        return EngineInstance(new_engine, new_dsc, new_tokens, new_feeds)

    def feed_for(self, token: str) -> PriceFeed:
        return self.engine.get_collateral_token_price_feed(token)

    def time_travel(self, seconds: int):
        """Advance the clocks of the engine and every price feed."""
        self.engine._increment_timestamp(timedelta=seconds)
        for feed in self.price_feeds:
            feed._increment_timestamp(timedelta=seconds)


def _create_collateral(symbol: str) -> ERC20:
    conf = COLLATERAL_CONF.get(symbol.lower())
    if conf is None:
        conf = {
            "address": "%s_address" % symbol.lower(),
            "name": symbol,
            "symbol": symbol.upper(),
            "decimals": 18,
        }
    return ERC20(**conf)


def get_engine(
    collateral: Sequence[str] = ("weth", "wbtc"),
    prices: Dict[str, int] = None,
    *,
    owner: str = ENGINE_CONF["owner"],
    oracle_timeout=ENGINE_CONF["oracle_timeout"],
    feed_decimals: int = FEED_DECIMALS,
):
    """
    Factory function creating a DSCEngine with its stablecoin, collateral
    tokens and price feeds.

    Parameters
    ----------
    collateral : Sequence[str]
        Symbols of the collateral tokens, e.g. ("weth", "wbtc").
    prices : Dict[str, int], optional
        Initial feed answer per symbol, with `feed_decimals` decimals.
        Defaults to PRICE_FEED_CONF.
    owner : str
        Deployer of the stablecoin; ownership is handed to the engine.
    oracle_timeout : int or None
        Seconds before a feed answer is stale, None disables the check.
    feed_decimals : int
        Decimals of every price feed.

    Returns
    -------
    :class:`dscsim.engine.EngineInstance`

    Examples
    --------
    >>> import dscsim
    >>> engine, dsc, tokens, feeds = dscsim.engine.get(prices={"weth": 2000 * 10**8})
    """
    if len(collateral) == 0:
        raise CurvesimValueError("At least one collateral token is required.")

    prices = prices or {}
    tokens = []
    feeds = []
    for symbol in collateral:
        token = _create_collateral(symbol)
        answer = prices.get(symbol, PRICE_FEED_CONF.get(symbol.lower()))
        if answer is None:
            raise CurvesimValueError("No initial price for collateral `%s`." % symbol)
        feeds.append(
            PriceFeed(answer, decimals=feed_decimals, description="%s / USD" % token.symbol)
        )
        tokens.append(token)

    dsc = DecentralizedStableCoin(owner=owner)
    engine = DSCEngine(tokens, feeds, dsc, oracle=OracleLib(oracle_timeout))
    dsc.transfer_ownership(owner, engine.address)
    logger.debug("Engine created with collateral %s", [t.symbol for t in tokens])

    return EngineInstance(engine, dsc, tokens, feeds)


get = get_engine
