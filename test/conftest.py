import pytest

from dscsim.engine import get_engine
from dscsim.engine.dsc.engine import DSCEngine
from dscsim.engine.dsc.price_oracle import OracleLib, PriceFeed
from dscsim.engine.dsc.stablecoin import DecentralizedStableCoin
from dscsim.engine.dsc.utils.ERC20 import ERC20

ETH_USD_PRICE = 2000 * 10**8
BTC_USD_PRICE = 1000 * 10**8

AMOUNT_COLLATERAL = 10 * 10**18
AMOUNT_TO_MINT = 100 * 10**18
STARTING_USER_BALANCE = 10 * 10**18

DEPLOYER = "DEPLOYER"


def create_engine(tokens, prices, dsc=None, timeout=None):
    """Build an engine over explicit tokens, e.g. mocks that misbehave."""
    feeds = [PriceFeed(p, description="%s / USD" % t.symbol) for t, p in zip(tokens, prices)]
    dsc = dsc if dsc is not None else DecentralizedStableCoin(owner=DEPLOYER)
    engine = DSCEngine(tokens, feeds, dsc, oracle=OracleLib(timeout))
    dsc.transfer_ownership(dsc.owner, engine.address)
    return engine, dsc, feeds


def create_collateral(symbol="WETH", cls=ERC20):
    return cls(
        address="%s_address" % symbol.lower(),
        name=symbol,
        symbol=symbol,
        decimals=18,
    )


@pytest.fixture(scope="module")
def accounts():
    return ["user_address_%d" % i for i in range(5)]


@pytest.fixture
def instance():
    return get_engine(prices={"weth": ETH_USD_PRICE, "wbtc": BTC_USD_PRICE})


@pytest.fixture
def engine(instance):
    return instance.engine


@pytest.fixture
def dsc(instance):
    return instance.dsc


@pytest.fixture
def weth(instance):
    return instance.collateral_tokens[0]


@pytest.fixture
def wbtc(instance):
    return instance.collateral_tokens[1]


@pytest.fixture
def eth_usd(instance):
    return instance.price_feeds[0]


@pytest.fixture
def user(accounts, weth):
    user = accounts[0]
    weth._mint(user, STARTING_USER_BALANCE)
    return user


@pytest.fixture
def deposited_collateral(engine, weth, user):
    engine.deposit_collateral(user, weth.address, AMOUNT_COLLATERAL)
    return user


@pytest.fixture
def deposited_collateral_and_minted_dsc(engine, weth, user):
    engine.deposit_collateral_and_mint_dsc(user, weth.address, AMOUNT_COLLATERAL, AMOUNT_TO_MINT)
    return user


@pytest.fixture(scope="module")
def make_engine():
    return create_engine


@pytest.fixture(scope="module")
def make_collateral():
    return create_collateral
