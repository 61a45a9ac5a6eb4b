"""
Fungible token used for collateral and as the base of the stablecoin.

Amounts are integers in the token's smallest unit. A failing call raises
`AssertionError` with a reason, the way a reverting token call would.
Allowances are not modelled: every holder has approved the engine.
"""
from collections import defaultdict

from curvesim.pool.snapshot import SnapshotMixin

from dscsim.engine.snapshot import ERC20Snapshot


class ERC20(SnapshotMixin):
    snapshot_class = ERC20Snapshot

    __slots__ = (
        "address",
        "name",
        "symbol",
        "decimals",
        "balanceOf",
        "totalSupply",
    )

    def __init__(self, address: str, name: str, symbol: str, decimals: int = 18):
        self.address = address
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.balanceOf = defaultdict(int)
        self.totalSupply = 0

    def __repr__(self):
        return "%s(%s)" % (self.__class__.__name__, self.symbol)

    def _move(self, _from: str, _to: str, _value: int):
        assert _value >= 0, "negative amount"
        assert self.balanceOf[_from] >= _value, "insufficient balance"
        self.balanceOf[_from] -= _value
        self.balanceOf[_to] += _value

    def transfer(self, _from: str, _to: str, _value: int) -> bool:
        """
        Send `_value` of the caller's own tokens.

        Parameters
        ----------
        _from : str
            Caller and holder of the tokens
        _to : str
            Receiver
        _value : int
            Amount to send

        Returns
        -------
        bool
            True once sent
        """
        self._move(_from, _to, _value)
        return True

    def transferFrom(self, _from: str, _to: str, _value: int) -> bool:
        """
        Pull `_value` of `_from`'s tokens to `_to` on the caller's behalf.

        Returns
        -------
        bool
            True once sent
        """
        self._move(_from, _to, _value)
        return True

    def _mint(self, _to: str, _value: int):
        self.balanceOf[_to] += _value
        self.totalSupply += _value

    def _burn(self, _from: str, _value: int):
        assert self.balanceOf[_from] >= _value, "insufficient balance"
        self.balanceOf[_from] -= _value
        self.totalSupply -= _value

    def burnFrom(self, _from: str, _value: int) -> bool:
        self._burn(_from, _value)
        return True
