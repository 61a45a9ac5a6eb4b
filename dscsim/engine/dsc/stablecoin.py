"""
DecentralizedStableCoin, the credit unit minted by the engine.

Minting and burning are restricted to the owner, which is the engine once
ownership has been transferred to it.
"""
from .conf import DSC_TOKEN_CONF, ZERO_ADDRESS

from dscsim.engine.dsc.utils.ERC20 import ERC20


class DecentralizedStableCoin(ERC20):
    __slots__ = ("owner",)

    def __init__(
        self,
        owner: str,
        address: str = DSC_TOKEN_CONF["address"],
        name: str = DSC_TOKEN_CONF["name"],
        symbol: str = DSC_TOKEN_CONF["symbol"],
        decimals: int = DSC_TOKEN_CONF["decimals"],
    ):
        ERC20.__init__(self, address, name, symbol, decimals)
        self.owner = owner

    def _only_owner(self, _sender: str):
        assert _sender == self.owner, "Ownable: caller is not the owner"

    def transfer_ownership(self, _sender: str, new_owner: str):
        self._only_owner(_sender)
        assert new_owner != ZERO_ADDRESS, "Ownable: new owner is the zero address"
        self.owner = new_owner

    def mint(self, _sender: str, _to: str, _amount: int) -> bool:
        """
        Mint `_amount` to `_to`.

        Parameters
        ----------
        _sender : str
            Caller, must be the owner
        _to : str
            Receiver of the new coins
        _amount : int
            Amount to mint

        Returns
        -------
        bool
            True once minted
        """
        self._only_owner(_sender)
        assert _to != ZERO_ADDRESS, "DecentralizedStableCoin: not zero address"
        assert _amount > 0, "DecentralizedStableCoin: must be more than zero"
        self._mint(_to, _amount)
        return True

    def burn(self, _sender: str, _amount: int):
        """
        Burn `_amount` out of the owner's own balance.

        Parameters
        ----------
        _sender : str
            Caller, must be the owner
        _amount : int
            Amount to burn
        """
        self._only_owner(_sender)
        assert _amount > 0, "DecentralizedStableCoin: must be more than zero"
        assert (
            self.balanceOf[_sender] >= _amount
        ), "DecentralizedStableCoin: burn amount exceeds balance"
        self._burn(_sender, _amount)
