"""
Property-based harness for the engine: a handler mapping raw random
inputs onto valid actions and the invariants checked after each of them.
"""

__all__ = [
    "Handler",
    "bound",
    "check_invariants",
    "run_campaign",
]

from .handler import Handler, bound
from .invariants import check_invariants
from .campaign import run_campaign
