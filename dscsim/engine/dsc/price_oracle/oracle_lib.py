"""
Checks applied to every price read made by the engine.
"""
from typing import Optional, Tuple

from ..conf import ORACLE_TIMEOUT
from ..exceptions import InvalidPrice, StalePrice
from .price_oracle import PriceFeed


class OracleLib:
    """
    Reads a feed and rejects stale or negative answers.

    If a feed stops updating, every action that needs its price fails;
    positions valued with it are frozen until the feed recovers.

    Parameters
    ----------
    timeout : int, optional
        Maximum age in seconds of an answer. `None` disables the check.
    """

    def __init__(self, timeout: Optional[int] = ORACLE_TIMEOUT):
        self.timeout = timeout

    def stale_check_latest_round_data(
        self, feed: PriceFeed, now: int
    ) -> Tuple[int, int, int, int, int]:
        round_data = feed.latest_round_data()
        (_, answer, _, updated_at, _) = round_data

        if self.timeout is not None and now - updated_at > self.timeout:
            raise StalePrice(
                f"Price of {feed.description or feed} is {now - updated_at}s old"
            )
        if answer < 0:
            raise InvalidPrice(f"Price feed {feed.description or feed} answered {answer}")

        return round_data

    def price(self, feed: PriceFeed, now: int) -> int:
        return self.stale_check_latest_round_data(feed, now)[1]
