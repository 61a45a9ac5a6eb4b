"""
Block clock carried by the engine and by every price feed.

Staleness is judged by comparing the engine's timestamp with the time a
feed last answered, so each side keeps its own clock and advances it
explicitly.
"""
from datetime import datetime
from time import time

BLOCK_TIME = 12  # seconds


def _get_unix_timestamp():
    """Get the timestamp in Unix time."""
    return int(time())


def _to_unix(timestamp) -> int:
    if isinstance(timestamp, datetime):
        return int(timestamp.timestamp())
    return int(timestamp)


class BlocktimestampMixins:
    """Mimics `block.timestamp`, starting at the current Unix time."""

    def __init__(self, timestamp=None):
        if timestamp is None:
            timestamp = _get_unix_timestamp()
        self._block_timestamp = _to_unix(timestamp)

    @property
    def block_timestamp(self) -> int:
        return self._block_timestamp

    def _increment_timestamp(self, timestamp=None, timedelta=None, blocks=1):
        """
        Set the clock to `timestamp`, or move it forward by `timedelta`
        seconds, or by `blocks` blocks of BLOCK_TIME seconds.
        """
        if timestamp is not None:
            self._block_timestamp = _to_unix(timestamp)
        elif timedelta is not None:
            if hasattr(timedelta, "total_seconds"):
                timedelta = timedelta.total_seconds()
            self._block_timestamp += int(timedelta)
        else:
            self._block_timestamp += BLOCK_TIME * blocks
