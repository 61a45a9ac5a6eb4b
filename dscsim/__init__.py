"""Package to simulate a decentralized, overcollateralized stablecoin engine."""
__all__ = ["get_engine", "run_campaign", "__version__"]

from .engine import get_engine
from .fuzz import run_campaign
from .version import __version__
