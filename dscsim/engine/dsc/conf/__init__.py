__all__ = [
    "DSC_TOKEN_CONF",
    "COLLATERAL_CONF",
    "PRICE_FEED_CONF",
    "ENGINE_CONF",
    "HANDLER_CONF",
    "PRECISION",
    "ADDITIONAL_FEED_PRECISION",
    "FEED_DECIMALS",
    "LIQUIDATION_THRESHOLD",
    "LIQUIDATION_BONUS",
    "LIQUIDATION_PRECISION",
    "MIN_HEALTH_FACTOR",
    "MAX_HEALTH_FACTOR",
    "ORACLE_TIMEOUT",
    "ZERO_ADDRESS",
]


PRECISION = 10**18
FEED_DECIMALS = 8
ADDITIONAL_FEED_PRECISION = 10 ** (18 - FEED_DECIMALS)

LIQUIDATION_THRESHOLD = 50  # 200% overcollateralized
LIQUIDATION_BONUS = 10  # 10% bonus
LIQUIDATION_PRECISION = 100
MIN_HEALTH_FACTOR = 10**18
MAX_HEALTH_FACTOR = 2**256 - 1

ORACLE_TIMEOUT = 3 * 60 * 60  # 3 hours

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

DSC_TOKEN_CONF = {
    "address": "0x5fbdb2315678afecb367f032d93f642f64180aa3",
    "symbol": "DSC",
    "name": "DecentralizedStableCoin",
    "decimals": 18,
}

COLLATERAL_CONF = {
    "weth": {
        "address": "weth_address",
        "name": "Wrapped Ether",
        "symbol": "WETH",
        "decimals": 18,
    },
    "wbtc": {
        "address": "wbtc_address",
        "name": "Wrapped BTC",
        "symbol": "WBTC",
        "decimals": 18,
    },
}

PRICE_FEED_CONF = {
    "decimals": FEED_DECIMALS,
    "weth": 2000 * 10**FEED_DECIMALS,
    "wbtc": 1000 * 10**FEED_DECIMALS,
}

ENGINE_CONF = {
    "address": "DSCEngine",
    "owner": "DSC_DEPLOYER",
    "oracle_timeout": ORACLE_TIMEOUT,
}

HANDLER_CONF = {
    "max_deposit_size": 2**96 - 1,
    "n_users": 5,
    "liquidator": "LIQUIDATOR",
    "min_price": 1 * 10**FEED_DECIMALS,
    "max_price": 10**6 * 10**FEED_DECIMALS,
}
