from typing import Tuple

from ..conf import FEED_DECIMALS
from ..utils import BlocktimestampMixins


class PriceFeed(BlocktimestampMixins):
    """
    Aggregator-style USD price feed for one collateral token.

    Answers are integers with `decimals` decimals, e.g. 2000 * 10**8 for a
    price of $2000 with the default 8 decimals.
    """

    def __init__(self, answer: int, decimals: int = FEED_DECIMALS, description: str = ""):
        super().__init__()
        self.decimals = decimals
        self.description = description
        self.round_id = 0
        self._answer = 0
        self.updated_at = 0
        self.started_at = 0
        self.update_answer(answer)

    def update_answer(self, answer: int):
        self.round_id += 1
        self._answer = answer
        self.updated_at = self._block_timestamp
        self.started_at = self._block_timestamp

    def update_round_data(
        self, round_id: int, answer: int, timestamp: int, started_at: int
    ):
        self.round_id = round_id
        self._answer = answer
        self.updated_at = timestamp
        self.started_at = started_at

    def latest_round_data(self) -> Tuple[int, int, int, int, int]:
        """
        Returns
        -------
        (round_id, answer, started_at, updated_at, answered_in_round)
        """
        return (
            self.round_id,
            self._answer,
            self.started_at,
            self.updated_at,
            self.round_id,
        )

    def latest_price(self) -> Tuple[int, int]:
        return self._answer, self.updated_at

    def latest_answer(self) -> int:
        return self._answer
