from curvesim.pool.snapshot import Snapshot


class ERC20Snapshot(Snapshot):
    """Snapshot that saves ERC20 supply and balances."""

    def __init__(self, balanceOf, totalSupply):
        self.balanceOf = balanceOf
        self.totalSupply = totalSupply

    @classmethod
    def create(cls, erc20):
        balanceOf = erc20.balanceOf.copy()
        totalSupply = erc20.totalSupply
        return cls(balanceOf, totalSupply)

    def restore(self, erc20):
        erc20.balanceOf = self.balanceOf.copy()
        erc20.totalSupply = self.totalSupply


class EngineSnapshot(Snapshot):
    """Snapshot that saves engine ledgers, events and the balances of every token it moves."""

    def __init__(
        self,
        collateral_ledger,
        credit_ledger,
        n_events,
        dsc_snapshot,
        collateral_snapshots,
    ):
        self.collateral_ledger = collateral_ledger
        self.credit_ledger = credit_ledger
        self.n_events = n_events
        self.dsc_snapshot = dsc_snapshot
        self.collateral_snapshots = collateral_snapshots

    @classmethod
    def create(cls, engine):
        collateral_ledger = engine.collateral_ledger.copy()
        credit_ledger = engine.credit_ledger.copy()
        n_events = len(engine.events)
        dsc_snapshot = engine.DSC.get_snapshot()
        collateral_snapshots = {
            address: token.get_snapshot()
            for address, token in engine.collateral_tokens.items()
        }
        return cls(
            collateral_ledger,
            credit_ledger,
            n_events,
            dsc_snapshot,
            collateral_snapshots,
        )

    def restore(self, engine):
        engine.collateral_ledger = self.collateral_ledger.copy()
        engine.credit_ledger = self.credit_ledger.copy()
        del engine.events[self.n_events :]
        engine.DSC.revert_to_snapshot(self.dsc_snapshot)
        for address, snapshot in self.collateral_snapshots.items():
            engine.collateral_tokens[address].revert_to_snapshot(snapshot)
