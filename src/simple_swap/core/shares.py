from simple_swap.core.fungible import FungibleLedger


class PoolShareLedger(FungibleLedger):
    """
    Liquidity-provider shares of the pool.

    Holders trade shares through the inherited token surface. ``mint`` and
    ``burn`` are only reached from the liquidity manager, the engine does not
    expose them.
    """

    def __init__(self, name: str = "SimpleSwap LP", symbol: str = "SSLP", decimals: int = 18):
        super().__init__(name=name, symbol=symbol, decimals=decimals)

    def mint(self, to: str, amount: int) -> None:
        self._mint(to, amount)

    def burn(self, frm: str, amount: int) -> None:
        self._burn(frm, amount)
