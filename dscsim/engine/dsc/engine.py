"""
Mainly a module to house the `DSCEngine`, the collateral and debt
accounting core of the Decentralized Stablecoin.

Users deposit allowed collateral tokens and mint DSC against them. Every
position must keep a health factor of at least 1.0, meaning its collateral,
counted at `LIQUIDATION_THRESHOLD` percent of its USD value, covers its
debt. Positions below that can be liquidated by anyone who burns DSC on
their behalf in exchange for their collateral plus a bonus.

Actions are atomic: a failing check anywhere in an action restores the
ledgers, token balances and events to what they were before it started.
"""
from functools import wraps
from typing import Dict, List, Tuple

from curvesim.exceptions import CurvesimValueError
from curvesim.logging import get_logger
from curvesim.pool.snapshot import SnapshotMixin

from dscsim.engine.snapshot import EngineSnapshot

from .conf import (
    ADDITIONAL_FEED_PRECISION,
    ENGINE_CONF,
    LIQUIDATION_BONUS,
    LIQUIDATION_PRECISION,
    LIQUIDATION_THRESHOLD,
    MAX_HEALTH_FACTOR,
    MIN_HEALTH_FACTOR,
    PRECISION,
)
from .events import (
    CollateralDeposited,
    CollateralRedeemed,
    DSCBurned,
    DSCMinted,
    Liquidated,
)
from .exceptions import (
    AssetNotAllowed,
    HealthFactorBroken,
    HealthFactorNotImproved,
    HealthFactorOk,
    InvalidAmount,
    MintFailed,
    Reentrancy,
    TokenAddressesAndPriceFeedsLengthMismatch,
    TransferFailed,
)
from .health import calculate_health_factor, is_healthy
from .ledger import CollateralLedger, CreditLedger
from .price_oracle import OracleLib, PriceFeed
from .stablecoin import DecentralizedStableCoin
from .utils import BlocktimestampMixins, ERC20
from .valuation import ValuationEngine

logger = get_logger(__name__)


class Position:
    def __init__(self, user: str, collateral_value: int, debt: int, health: int):
        self.user = user
        self.collateral_value = collateral_value
        self.debt = debt
        self.health = health

    def __repr__(self):
        return "Position(%s, collateral_value=%d, debt=%d, health=%d)" % (
            self.user,
            self.collateral_value,
            self.debt,
            self.health,
        )


def action(method):
    """
    Run an engine action atomically and without re-entry.

    A snapshot is taken before the action runs and restored if it raises.
    """

    @wraps(method)
    def wrapper(self, *args, **kwargs):
        if self._entered:
            raise Reentrancy(
                "%s called while another action is in progress" % method.__name__
            )
        self._entered = True
        snapshot = self.get_snapshot()
        try:
            return method(self, *args, **kwargs)
        except Exception as e:
            logger.debug("%s reverted: %r", method.__name__, e)
            self.revert_to_snapshot(snapshot)
            raise
        finally:
            self._entered = False

    return wrapper


class DSCEngine(SnapshotMixin, BlocktimestampMixins):
    """DSCEngine implementation in Python."""

    snapshot_class = EngineSnapshot

    def __init__(
        self,
        token_addresses: List[ERC20],
        price_feeds: List[PriceFeed],
        dsc: DecentralizedStableCoin,
        oracle: OracleLib = None,
        address: str = ENGINE_CONF["address"],
    ):
        """
        Parameters
        ----------
        token_addresses : List[ERC20]
            Collateral tokens accepted by the engine
        price_feeds : List[PriceFeed]
            USD price feed of each token, in the same order
        dsc : DecentralizedStableCoin
            The stablecoin; the engine must own it to mint and burn
        oracle : OracleLib, optional
            Checked feed reader, defaults to a 3 hour staleness timeout
        address : str
            Address of the engine, holds deposited collateral
        """
        BlocktimestampMixins.__init__(self)

        if len(token_addresses) != len(price_feeds):
            raise TokenAddressesAndPriceFeedsLengthMismatch(
                "%d collateral tokens but %d price feeds"
                % (len(token_addresses), len(price_feeds))
            )

        self.address = address
        self.collateral_tokens: Dict[str, ERC20] = {}
        self.price_feeds: Dict[str, PriceFeed] = {}
        for token, feed in zip(token_addresses, price_feeds):
            if token.address in self.collateral_tokens:
                raise CurvesimValueError("Duplicate collateral token %s" % token.address)
            self.collateral_tokens[token.address] = token
            self.price_feeds[token.address] = feed

        self.DSC = dsc
        self.oracle = oracle if oracle is not None else OracleLib(ENGINE_CONF["oracle_timeout"])
        self.valuation = ValuationEngine(self.price_feeds, self.oracle, self)

        self.collateral_ledger = CollateralLedger()
        self.credit_ledger = CreditLedger()
        self.events = []
        self._entered = False

    # Checks

    def _more_than_zero(self, amount: int):
        if amount <= 0:
            raise InvalidAmount("Amount must be more than zero, got %s" % amount)

    def _is_allowed_token(self, token: str):
        if token not in self.price_feeds:
            raise AssetNotAllowed("%s is not an allowed collateral token" % token)

    def _revert_if_health_factor_is_broken(self, user: str):
        health_factor = self._health_factor(user)
        if not is_healthy(health_factor):
            raise HealthFactorBroken(health_factor)

    # Token movements

    def _transfer_from(self, token: ERC20, _from: str, _to: str, amount: int):
        try:
            success = token.transferFrom(_from, _to, amount)
        except AssertionError as e:
            raise TransferFailed("%r transferFrom %s: %s" % (token, _from, e)) from e
        if not success:
            raise TransferFailed("%r transferFrom %s returned False" % (token, _from))

    def _transfer(self, token: ERC20, _from: str, _to: str, amount: int):
        try:
            success = token.transfer(_from, _to, amount)
        except AssertionError as e:
            raise TransferFailed("%r transfer to %s: %s" % (token, _to, e)) from e
        if not success:
            raise TransferFailed("%r transfer to %s returned False" % (token, _to))

    # Internal actions

    def _deposit_collateral(self, user: str, token: str, amount: int):
        self.collateral_ledger.increase(user, token, amount)
        self.events.append(CollateralDeposited(user, token, amount))
        self._transfer_from(self.collateral_tokens[token], user, self.address, amount)
        logger.debug("%s deposited %d of %s", user, amount, token)

    def _mint_dsc(self, user: str, amount: int):
        self.credit_ledger.increase(user, amount)
        self._revert_if_health_factor_is_broken(user)
        try:
            minted = self.DSC.mint(self.address, user, amount)
        except AssertionError as e:
            raise MintFailed(str(e)) from e
        if not minted:
            raise MintFailed("DSC mint of %d to %s returned False" % (amount, user))
        self.events.append(DSCMinted(user, amount))
        logger.debug("%s minted %d DSC", user, amount)

    def _redeem_collateral(self, token: str, amount: int, _from: str, _to: str):
        self.collateral_ledger.decrease(_from, token, amount)
        self.events.append(CollateralRedeemed(_from, _to, token, amount))
        self._transfer(self.collateral_tokens[token], self.address, _to, amount)
        logger.debug("%d of %s redeemed from %s to %s", amount, token, _from, _to)

    def _burn_dsc(self, amount: int, on_behalf_of: str, dsc_from: str):
        """
        Burn `amount` DSC held by `dsc_from` against the debt of `on_behalf_of`.
        Health factor is not checked, burning can only improve it.
        """
        self.credit_ledger.decrease(on_behalf_of, amount)
        self._transfer_from(self.DSC, dsc_from, self.address, amount)
        try:
            self.DSC.burn(self.address, amount)
        except AssertionError as e:
            raise TransferFailed("DSC burn: %s" % e) from e
        self.events.append(DSCBurned(on_behalf_of, dsc_from, amount))
        logger.debug("%s burned %d DSC for %s", dsc_from, amount, on_behalf_of)

    # Actions

    @action
    def deposit_collateral(self, user: str, token_collateral_address: str, amount_collateral: int):
        """
        Deposit collateral.

        Parameters
        ----------
        user : str
            Address of the depositor (msg.sender)
        token_collateral_address : str
            Address of the collateral token
        amount_collateral : int
            Amount to deposit
        """
        self._more_than_zero(amount_collateral)
        self._is_allowed_token(token_collateral_address)
        self._deposit_collateral(user, token_collateral_address, amount_collateral)

    @action
    def mint_dsc(self, user: str, amount_dsc_to_mint: int):
        """
        Mint DSC against already deposited collateral.

        Parameters
        ----------
        user : str
            Address of the minter (msg.sender)
        amount_dsc_to_mint : int
            Amount of DSC to mint
        """
        self._more_than_zero(amount_dsc_to_mint)
        self._mint_dsc(user, amount_dsc_to_mint)

    @action
    def deposit_collateral_and_mint_dsc(
        self,
        user: str,
        token_collateral_address: str,
        amount_collateral: int,
        amount_dsc_to_mint: int,
    ):
        """
        Deposit collateral and mint DSC in one action.

        Parameters
        ----------
        user : str
            Address of the depositor (msg.sender)
        token_collateral_address : str
            Address of the collateral token
        amount_collateral : int
            Amount to deposit
        amount_dsc_to_mint : int
            Amount of DSC to mint
        """
        self._more_than_zero(amount_collateral)
        self._more_than_zero(amount_dsc_to_mint)
        self._is_allowed_token(token_collateral_address)
        self._deposit_collateral(user, token_collateral_address, amount_collateral)
        self._mint_dsc(user, amount_dsc_to_mint)

    @action
    def redeem_collateral(self, user: str, token_collateral_address: str, amount_collateral: int):
        """
        Withdraw deposited collateral, keeping the position healthy.

        Parameters
        ----------
        user : str
            Address of the owner (msg.sender)
        token_collateral_address : str
            Address of the collateral token
        amount_collateral : int
            Amount to withdraw
        """
        self._more_than_zero(amount_collateral)
        self._is_allowed_token(token_collateral_address)
        self._redeem_collateral(token_collateral_address, amount_collateral, user, user)
        self._revert_if_health_factor_is_broken(user)

    @action
    def burn_dsc(self, user: str, amount: int):
        """
        Repay DSC debt with the user's own DSC.

        Parameters
        ----------
        user : str
            Address of the debtor (msg.sender)
        amount : int
            Amount of DSC to burn
        """
        self._more_than_zero(amount)
        self._burn_dsc(amount, user, user)

    @action
    def redeem_collateral_for_dsc(
        self,
        user: str,
        token_collateral_address: str,
        amount_collateral: int,
        amount_dsc_to_burn: int,
    ):
        """
        Burn DSC and withdraw collateral in one action.

        Parameters
        ----------
        user : str
            Address of the owner (msg.sender)
        token_collateral_address : str
            Address of the collateral token
        amount_collateral : int
            Amount to withdraw
        amount_dsc_to_burn : int
            Amount of DSC to burn
        """
        self._more_than_zero(amount_collateral)
        self._more_than_zero(amount_dsc_to_burn)
        self._is_allowed_token(token_collateral_address)
        self._burn_dsc(amount_dsc_to_burn, user, user)
        self._redeem_collateral(token_collateral_address, amount_collateral, user, user)
        self._revert_if_health_factor_is_broken(user)

    @action
    def liquidate(self, liquidator: str, user: str, collateral: str, debt_to_cover: int):
        """
        Cover part or all of an unhealthy user's debt for their collateral.

        The liquidator burns `debt_to_cover` of their own DSC and receives
        the equivalent amount of `collateral` plus LIQUIDATION_BONUS percent,
        capped at what the user has deposited. The bonus can only be paid
        while the position is worth more than its debt; once collateral
        value falls to 100% of debt or below, liquidating stops paying.

        Parameters
        ----------
        liquidator : str
            Address of the liquidator (msg.sender)
        user : str
            Address of the user to liquidate
        collateral : str
            Address of the collateral token to seize
        debt_to_cover : int
            Amount of DSC to burn against the user's debt
        """
        self._more_than_zero(debt_to_cover)
        self._is_allowed_token(collateral)

        starting_user_health_factor = self._health_factor(user)
        if is_healthy(starting_user_health_factor):
            raise HealthFactorOk(
                "Health factor of %s is %d" % (user, starting_user_health_factor)
            )

        token_amount_from_debt_covered = self.valuation.token_amount_from_usd(
            collateral, debt_to_cover
        )
        bonus_collateral = (
            token_amount_from_debt_covered * LIQUIDATION_BONUS // LIQUIDATION_PRECISION
        )
        total_collateral_to_redeem = min(
            token_amount_from_debt_covered + bonus_collateral,
            self.collateral_ledger.balance_of(user, collateral),
        )

        self._redeem_collateral(collateral, total_collateral_to_redeem, user, liquidator)
        self._burn_dsc(debt_to_cover, user, liquidator)

        ending_user_health_factor = self._health_factor(user)
        if ending_user_health_factor <= starting_user_health_factor:
            raise HealthFactorNotImproved(
                "Health factor of %s went from %d to %d"
                % (user, starting_user_health_factor, ending_user_health_factor)
            )
        self._revert_if_health_factor_is_broken(liquidator)

        self.events.append(
            Liquidated(liquidator, user, collateral, debt_to_cover, total_collateral_to_redeem)
        )
        logger.debug(
            "%s liquidated %s: covered %d DSC, seized %d of %s",
            liquidator,
            user,
            debt_to_cover,
            total_collateral_to_redeem,
            collateral,
        )

    # Read-only

    def _get_account_information(self, user: str) -> Tuple[int, int]:
        total_dsc_minted = self.credit_ledger.balance_of(user)
        collateral_value_in_usd = self.get_account_collateral_value(user)
        return total_dsc_minted, collateral_value_in_usd

    def _health_factor(self, user: str) -> int:
        total_dsc_minted = self.credit_ledger.balance_of(user)
        if total_dsc_minted == 0:
            return MAX_HEALTH_FACTOR
        collateral_value_in_usd = self.get_account_collateral_value(user)
        return calculate_health_factor(total_dsc_minted, collateral_value_in_usd)

    def calculate_health_factor(self, total_dsc_minted: int, collateral_value_in_usd: int) -> int:
        return calculate_health_factor(total_dsc_minted, collateral_value_in_usd)

    def get_health_factor(self, user: str) -> int:
        """
        Health factor of `user` normalized to 1e18; below 1e18 the position
        can be liquidated.
        """
        return self._health_factor(user)

    def get_account_information(self, user: str) -> Tuple[int, int]:
        """
        Returns
        -------
        (total_dsc_minted, collateral_value_in_usd)
        """
        return self._get_account_information(user)

    def get_account_collateral_value(self, user: str) -> int:
        return self.valuation.account_collateral_value(self.collateral_ledger, user)

    def get_usd_value(self, token: str, amount: int) -> int:
        self._is_allowed_token(token)
        return self.valuation.usd_value(token, amount)

    def get_token_amount_from_usd(self, token: str, usd_amount_in_wei: int) -> int:
        self._is_allowed_token(token)
        return self.valuation.token_amount_from_usd(token, usd_amount_in_wei)

    def get_collateral_balance_of_user(self, user: str, token: str) -> int:
        return self.collateral_ledger.balance_of(user, token)

    def get_collateral_tokens(self) -> List[str]:
        return list(self.collateral_tokens)

    def get_collateral_token_price_feed(self, token: str) -> PriceFeed:
        self._is_allowed_token(token)
        return self.price_feeds[token]

    def get_dsc(self) -> DecentralizedStableCoin:
        return self.DSC

    def get_precision(self) -> int:
        return PRECISION

    def get_additional_feed_precision(self) -> int:
        return ADDITIONAL_FEED_PRECISION

    def get_liquidation_threshold(self) -> int:
        return LIQUIDATION_THRESHOLD

    def get_liquidation_bonus(self) -> int:
        return LIQUIDATION_BONUS

    def get_liquidation_precision(self) -> int:
        return LIQUIDATION_PRECISION

    def get_min_health_factor(self) -> int:
        return MIN_HEALTH_FACTOR

    def users_to_liquidate(self) -> List[Position]:
        """
        Returns the positions that can currently be liquidated.
        This method is designed for convenience of liquidation bots.
        """
        positions = []
        for user in self.credit_ledger.users():
            debt, collateral_value = self._get_account_information(user)
            if debt == 0:
                continue
            health = calculate_health_factor(debt, collateral_value)
            if not is_healthy(health):
                positions.append(Position(user, collateral_value, debt, health))
        return positions
