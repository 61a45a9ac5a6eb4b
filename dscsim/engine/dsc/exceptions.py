"""
Errors raised by the DSC engine.

Every error aborts the whole action it was raised in; the engine restores
its ledgers and token balances before the error reaches the caller.
"""
from curvesim.exceptions import CurvesimException, CurvesimValueError


class DSCEngineError(CurvesimException):
    """Base exception class for engine actions."""


class InvalidAmount(DSCEngineError):
    """Raised when a zero or negative amount is given where a positive one is required."""


class AssetNotAllowed(DSCEngineError):
    """Raised when a token is not in the engine's collateral registry."""


class InsufficientBalance(DSCEngineError):
    """Raised when a redeem or burn exceeds the recorded ledger balance."""


class TransferFailed(DSCEngineError):
    """Raised when a token transfer reports failure."""


class MintFailed(DSCEngineError):
    """Raised when the stablecoin refuses to mint."""


class HealthFactorBroken(DSCEngineError):
    """Raised when an action would leave a user below the minimum health factor."""

    def __init__(self, health_factor):
        super().__init__(f"Health factor broken: {health_factor}")
        self.health_factor = health_factor


class HealthFactorOk(DSCEngineError):
    """Raised when liquidating a position that is not eligible for liquidation."""


class HealthFactorNotImproved(DSCEngineError):
    """Raised when a liquidation does not raise the target's health factor."""


class Reentrancy(DSCEngineError):
    """Raised when an action is entered while another one is in progress."""


class TokenAddressesAndPriceFeedsLengthMismatch(DSCEngineError, CurvesimValueError):
    """Raised when the engine is built with unequal token and feed lists."""


class StalePrice(DSCEngineError):
    """Raised when a price feed has not been updated within the oracle timeout."""


class InvalidPrice(DSCEngineError):
    """Raised when a price feed reports a negative answer."""
