"""
Handler narrowing unbounded fuzz inputs into valid engine actions.

Each operation takes raw integers (seeds and amounts, any size or sign)
and maps them deterministically onto an allowed token, a known user and an
amount the engine will accept, so random exploration spends its steps on
reachable states instead of trivially rejected calls.
"""
from collections import Counter

from curvesim.logging import get_logger

from dscsim.engine import EngineInstance
from dscsim.engine.dsc.conf import (
    HANDLER_CONF,
    LIQUIDATION_PRECISION,
    LIQUIDATION_THRESHOLD,
)
from dscsim.engine.dsc.exceptions import HealthFactorNotImproved

logger = get_logger(__name__)


def bound(x: int, min_value: int, max_value: int) -> int:
    """
    Wrap `x` into [min_value, max_value].

    Values already in range are returned unchanged, others wrap around
    modulo the size of the range.
    """
    assert min_value <= max_value, "bound: max is less than min"
    if min_value <= x <= max_value:
        return x
    size = max_value - min_value + 1
    return min_value + (x - min_value) % size


class Handler:
    """
    Drives an engine with bounded random operations.

    Parameters
    ----------
    instance : EngineInstance
        Engine, stablecoin, collateral tokens and feeds to drive
    n_users : int
        Number of user accounts operations are spread over
    max_deposit_size : int
        Upper bound of a single collateral deposit
    """

    def __init__(
        self,
        instance: EngineInstance,
        n_users: int = HANDLER_CONF["n_users"],
        max_deposit_size: int = HANDLER_CONF["max_deposit_size"],
        liquidator: str = HANDLER_CONF["liquidator"],
        min_price: int = HANDLER_CONF["min_price"],
        max_price: int = HANDLER_CONF["max_price"],
    ):
        self.instance = instance
        self.engine = instance.engine
        self.dsc = instance.dsc
        self.users = ["user_%d" % i for i in range(n_users)]
        self.liquidator = liquidator
        self.max_deposit_size = max_deposit_size
        self.min_price = min_price
        self.max_price = max_price

        self.users_with_collateral_deposited = []
        self.times_mint_is_called = 0
        self.calls = Counter()

    def _get_collateral_from_seed(self, collateral_seed: int):
        tokens = self.instance.collateral_tokens
        return tokens[collateral_seed % len(tokens)]

    def _pick(self, candidates, seed: int):
        return candidates[seed % len(candidates)]

    def deposit_collateral(self, collateral_seed: int, amount_collateral: int, user_seed: int = 0):
        collateral = self._get_collateral_from_seed(collateral_seed)
        amount_collateral = bound(amount_collateral, 1, self.max_deposit_size)
        user = self._pick(self.users, user_seed)

        collateral._mint(user, amount_collateral)
        self.engine.deposit_collateral(user, collateral.address, amount_collateral)

        if user not in self.users_with_collateral_deposited:
            self.users_with_collateral_deposited.append(user)
        self.calls["deposit_collateral"] += 1

    def mint_dsc(self, amount: int, address_seed: int):
        if not self.users_with_collateral_deposited:
            return
        sender = self._pick(self.users_with_collateral_deposited, address_seed)

        total_dsc_minted, collateral_value_in_usd = self.engine.get_account_information(sender)
        max_dsc_to_mint = (
            collateral_value_in_usd * LIQUIDATION_THRESHOLD // LIQUIDATION_PRECISION
            - total_dsc_minted
        )
        if max_dsc_to_mint <= 0:
            return
        amount = bound(amount, 0, max_dsc_to_mint)
        if amount == 0:
            return

        self.engine.mint_dsc(sender, amount)
        self.times_mint_is_called += 1
        self.calls["mint_dsc"] += 1

    def redeem_collateral(self, collateral_seed: int, amount_collateral: int, address_seed: int = 0):
        if not self.users_with_collateral_deposited:
            return
        user = self._pick(self.users_with_collateral_deposited, address_seed)
        collateral = self._get_collateral_from_seed(collateral_seed)

        max_collateral = self.engine.get_collateral_balance_of_user(user, collateral.address)
        total_dsc_minted, collateral_value_in_usd = self.engine.get_account_information(user)
        if total_dsc_minted > 0:
            # keep 2x the debt plus rounding dust deposited
            removable_value = collateral_value_in_usd - 2 * total_dsc_minted - 2
            if removable_value <= 0:
                return
            max_collateral = min(
                max_collateral,
                self.engine.get_token_amount_from_usd(collateral.address, removable_value),
            )
        amount_collateral = bound(amount_collateral, 0, max_collateral)
        if amount_collateral == 0:
            return

        self.engine.redeem_collateral(user, collateral.address, amount_collateral)
        self.calls["redeem_collateral"] += 1

    def burn_dsc(self, amount: int, address_seed: int):
        debtors = [u for u in self.users if self.engine.credit_ledger.balance_of(u) > 0]
        if not debtors:
            return
        user = self._pick(debtors, address_seed)
        max_to_burn = min(
            self.engine.credit_ledger.balance_of(user), self.dsc.balanceOf[user]
        )
        amount = bound(amount, 0, max_to_burn)
        if amount == 0:
            return

        self.engine.burn_dsc(user, amount)
        self.calls["burn_dsc"] += 1

    def update_collateral_price(self, collateral_seed: int, new_price: int):
        """
        Move a feed to a bounded new price.

        Prices falling faster than liquidations can follow break global
        solvency, so runs that check it leave this operation out.
        """
        collateral = self._get_collateral_from_seed(collateral_seed)
        new_price = bound(new_price, self.min_price, self.max_price)
        self.instance.feed_for(collateral.address).update_answer(new_price)
        self.calls["update_collateral_price"] += 1

    def _fund_liquidator(self, collateral, amount: int):
        """Give the liquidator `amount` DSC while keeping its own position healthy."""
        shortfall = max(0, amount - self.dsc.balanceOf[self.liquidator])
        debt, collateral_value = self.engine.get_account_information(self.liquidator)
        missing_value = 2 * (debt + shortfall) - collateral_value
        if missing_value > 0:
            collateral_needed = (
                self.engine.get_token_amount_from_usd(collateral.address, missing_value) + 1
            )
            collateral._mint(self.liquidator, collateral_needed)
            self.engine.deposit_collateral(self.liquidator, collateral.address, collateral_needed)
        if shortfall > 0:
            self.engine.mint_dsc(self.liquidator, shortfall)

    def liquidate(self, collateral_seed: int, address_seed: int, debt_to_cover: int):
        """
        Liquidate an unhealthy user, funding the liquidator first.

        Returns
        -------
        (user, starting_health_factor, ending_health_factor) or None when
        nothing was liquidated.
        """
        candidates = [
            p.user for p in self.engine.users_to_liquidate() if p.user != self.liquidator
        ]
        if not candidates:
            return None
        user = self._pick(candidates, address_seed)
        collateral = self._get_collateral_from_seed(collateral_seed)
        debt = self.engine.credit_ledger.balance_of(user)
        debt_to_cover = bound(debt_to_cover, 1, debt)

        self._fund_liquidator(self.instance.collateral_tokens[0], debt_to_cover)
        starting_health_factor = self.engine.get_health_factor(user)
        try:
            self.engine.liquidate(self.liquidator, user, collateral.address, debt_to_cover)
        except HealthFactorNotImproved:
            # position is worth less than 110% of the covered debt
            self.calls["liquidate_not_improved"] += 1
            return None
        self.calls["liquidate"] += 1
        return user, starting_health_factor, self.engine.get_health_factor(user)

    def call_summary(self):
        logger.info("Handler calls: %s", dict(self.calls))
        return dict(self.calls)
