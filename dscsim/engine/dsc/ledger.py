"""
Per-user bookkeeping of deposited collateral and minted DSC.

The ledgers only add and subtract; solvency is checked by the engine.
"""
from collections import defaultdict
from typing import Dict, List

from .exceptions import InsufficientBalance, InvalidAmount


def _check_amount(amount: int):
    if amount < 0:
        raise InvalidAmount(f"Ledger amounts must be non-negative, got {amount}")


class CollateralLedger:
    """Deposited amount per (user, token address)."""

    __slots__ = ("deposited",)

    def __init__(self, deposited: Dict = None):
        self.deposited = defaultdict(int)
        if deposited:
            self.deposited.update(deposited)

    def balance_of(self, user: str, token: str) -> int:
        return self.deposited.get((user, token), 0)

    def increase(self, user: str, token: str, amount: int):
        _check_amount(amount)
        self.deposited[(user, token)] += amount

    def decrease(self, user: str, token: str, amount: int):
        _check_amount(amount)
        balance = self.balance_of(user, token)
        if amount > balance:
            raise InsufficientBalance(
                f"{user} has {balance} of {token} deposited, cannot remove {amount}"
            )
        self.deposited[(user, token)] = balance - amount

    def total(self, token: str) -> int:
        return sum(v for (_, t), v in self.deposited.items() if t == token)

    def users(self) -> List[str]:
        return list(dict.fromkeys(user for user, _ in self.deposited))

    def copy(self):
        return CollateralLedger(self.deposited)


class CreditLedger:
    """Minted DSC per user."""

    __slots__ = ("minted",)

    def __init__(self, minted: Dict = None):
        self.minted = defaultdict(int)
        if minted:
            self.minted.update(minted)

    def balance_of(self, user: str) -> int:
        return self.minted.get(user, 0)

    def increase(self, user: str, amount: int):
        _check_amount(amount)
        self.minted[user] += amount

    def decrease(self, user: str, amount: int):
        _check_amount(amount)
        balance = self.balance_of(user)
        if amount > balance:
            raise InsufficientBalance(
                f"{user} has minted {balance} DSC, cannot burn {amount}"
            )
        self.minted[user] = balance - amount

    def total(self) -> int:
        return sum(self.minted.values())

    def users(self) -> List[str]:
        return list(self.minted)

    def copy(self):
        return CreditLedger(self.minted)
