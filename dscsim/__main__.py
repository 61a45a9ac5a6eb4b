"""
Simple health check for the package.

Runs a seeded fuzz campaign against a fresh engine and checks its
invariants after every step. Also provides version info from the
command-line.
"""
import argparse
import platform
import time

from .engine import get_engine
from .fuzz import run_campaign
from .metrics import StateLog
from .version import __version__


def hello_world(seed=0, steps=200, price_moves=False):
    """Simple campaign run as a health check."""
    t = time.time()
    instance = get_engine()
    state_log = StateLog(instance)
    handler = run_campaign(
        seed=seed,
        steps=steps,
        price_moves=price_moves,
        instance=instance,
        state_log=state_log,
    )
    elapsed = time.time() - t
    logs = state_log.get_logs()
    print("Elapsed time:", elapsed)
    print("Calls:", handler.call_summary())
    print(logs["state_data"].tail())
    return logs


def _python_info():
    """
    Return formatted string for python implementation and version.

    Returns
    --------
    str:
        Implementation name, version, and platform
    """
    impl = platform.python_implementation()
    version = platform.python_version()
    system = platform.system()
    return f"{impl} {version} on {system}"


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        prog="dscsim",
        description="Fuzz a decentralized stablecoin engine in Python",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}, {_python_info()}",
    )
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--steps", type=int, default=200)
    parser.add_argument("--price-moves", action="store_true")
    args = parser.parse_args()

    res = hello_world(seed=args.seed, steps=args.steps, price_moves=args.price_moves)
