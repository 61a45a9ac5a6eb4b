__all__ = [
    "_get_unix_timestamp",
    "BlocktimestampMixins",
    "ERC20",
]

from .ERC20 import ERC20
from .BlocktimestampMixins import _get_unix_timestamp, BlocktimestampMixins
