# src/simple_swap/models/swap_model.py

from mesa import Model
from mesa.datacollection import DataCollector

from simple_swap.agents.blockchain import BlockchainAgent
from simple_swap.agents.liquidity_provider import LiquidityProviderAgent
from simple_swap.agents.pool import PoolAgent
from simple_swap.agents.trader import TraderAgent, TradeMode
from simple_swap.core.assets import MintableToken
from simple_swap.core.engine import DEFAULT_POOL_ADDRESS
from simple_swap.utils.math_helpers import from_base_units, to_base_units

DEFAULT_DEPLOYER = "deployer"


class SwapModel(Model):
    """
    Mesa 3.0+ model of one SimpleSwap pool with providers and traders.

    - The chain steps first each tick, so every agent sees the new timestamp.
    - Pool, providers and traders then act in shuffled order.
    - Amounts in the config are whole tokens; the pool works in base units.
    """

    def __init__(self, config: dict):
        sim_cfg = config.get("simulation", {})
        seed = sim_cfg.get("seed", None)
        super().__init__(seed=seed)

        self.num_steps = sim_cfg.get("steps", 100)

        # --- Chain ---
        chain_cfg = config.get("chain", {})
        self.blockchain = BlockchainAgent(
            self,
            block_time=int(chain_cfg.get("block_time", 12)),
            genesis_timestamp=int(chain_cfg.get("genesis_timestamp", 0)),
        )

        # --- Tokens ---
        pool_cfg = config.get("pool", {})
        self.deployer = pool_cfg.get("owner", DEFAULT_DEPLOYER)
        self.token_a, self.token_b = [self._init_token(cfg) for cfg in config.get("tokens", [])]

        # --- Pool ---
        self.pool = PoolAgent(
            self,
            blockchain=self.blockchain,
            token_a=self.token_a,
            token_b=self.token_b,
            address=pool_cfg.get("address", DEFAULT_POOL_ADDRESS),
        )

        # --- Participants ---
        self.faucet_amount = config.get("faucet", {}).get("amount", 1_000)
        self.providers = [self._init_provider(cfg) for cfg in config.get("liquidity_providers", [])]
        self.traders = [self._init_trader(cfg) for cfg in config.get("traders", [])]

        # --- DataCollector ---
        self.datacollector = DataCollector(
            model_reporters={
                "Reserve_A": lambda m: from_base_units(m.pool.get_reserves()[0], m.token_a.decimals),
                "Reserve_B": lambda m: from_base_units(m.pool.get_reserves()[1], m.token_b.decimals),
                "Price": lambda m: m.pool.get_price(),
                "LP_Supply": lambda m: from_base_units(m.pool.engine.total_supply()),
                "K": lambda m: from_base_units(m.pool.get_k(), m.token_a.decimals + m.token_b.decimals),
                "Swaps": lambda m: m.pool.swap_count,
                "Failed_Swaps": lambda m: sum(t.failed_swaps for t in m.traders),
            }
        )

    def _init_token(self, token_cfg: dict) -> MintableToken:
        """Deploy a token owned by the deployer and register it on the chain."""
        token = MintableToken(
            address=token_cfg["address"],
            name=token_cfg.get("name", token_cfg["address"]),
            symbol=token_cfg.get("symbol", "TKN"),
            owner=self.deployer,
            decimals=int(token_cfg.get("decimals", 18)),
        )
        self.blockchain.register_contract(token.address, token)
        return token

    def fund(self, account: str, amount=None) -> None:
        """Mint ``amount`` whole tokens (default: the faucet amount) of both assets to ``account``."""
        amount = self.faucet_amount if amount is None else amount
        for token in (self.token_a, self.token_b):
            token.mint(self.deployer, account, to_base_units(amount, token.decimals))

    def _init_provider(self, cfg: dict) -> LiquidityProviderAgent:
        provider = LiquidityProviderAgent(
            self,
            pool=self.pool,
            account=cfg.get("account"),
            amount_a=to_base_units(cfg.get("amount_a", 0), self.token_a.decimals),
            amount_b=to_base_units(cfg.get("amount_b", 0), self.token_b.decimals),
            slippage_bps=int(cfg.get("slippage_bps", 50)),
            deadline_window=int(cfg.get("deadline_window", 60)),
            withdraw_at_step=cfg.get("withdraw_at_step"),
        )
        self.fund(provider.account, cfg.get("funding"))
        return provider

    def _init_trader(self, cfg: dict) -> TraderAgent:
        mode = TradeMode(cfg.get("mode", "random"))
        trades = None
        if mode == TradeMode.CSV:
            trades = TraderAgent.load_trades(cfg["trades_csv"])
        trader = TraderAgent(
            self,
            pool=self.pool,
            account=cfg.get("account"),
            mode=mode,
            trade_fraction=float(cfg.get("trade_fraction", 0.05)),
            trades=trades,
            slippage_bps=int(cfg.get("slippage_bps", 100)),
            deadline_window=int(cfg.get("deadline_window", 60)),
            seed=cfg.get("seed"),
        )
        self.fund(trader.account, cfg.get("funding"))
        return trader

    def step(self):
        """
        Advance the model one tick:
          1. Mesa auto-increments self.steps.
          2. Mine a block so deadlines are checked against the new timestamp.
          3. Activate the remaining agents in random order.
          4. Collect data via DataCollector.
        """
        self.blockchain.step()
        self.agents.select(lambda a: a is not self.blockchain).shuffle_do("step")
        self.datacollector.collect(self)
