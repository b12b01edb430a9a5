"""
Galaxy economy simulation.

Owns the economic state of every star system and advances it through
time. Each sub-step runs three passes:

1. Trade: every jump edge relaxes its two systems toward a shared price
2. Production/consumption: planets restock or drain each system
3. Price refresh: displayed prices are recomputed from state

Per-system state lives in numpy arrays with one row per system (in galaxy
order) and one column per simulated commodity (in EconomyIndex order).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from starlane.core.commodities import EconomyIndex
from starlane.core.config import EconomyConfig
from starlane.core.errors import SimulationStateError, UnknownCommodityError
from starlane.core.galaxy import Galaxy
from starlane.core.pricing import price_factor, production_delta

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Read-only view of one system
# ---------------------------------------------------------------------------
@dataclass
class SystemEconomy:
    """Snapshot of one system's economic state, keyed by commodity name."""
    system_id: int
    name: str
    currency: float
    stockpiles: dict[str, float]
    production: dict[str, float]
    prices: dict[str, float]
    last_traded: dict[str, float]


# ---------------------------------------------------------------------------
# Simulation aggregate
# ---------------------------------------------------------------------------
class EconomySimulation:
    """
    Economic state of a whole galaxy.

    Construct with a config, an EconomyIndex and a Galaxy, then call
    ``initialize()``. ``advance(elapsed)`` runs whole sub-steps of
    ``config.tick_quantum`` time units; any remainder is dropped.

    Trade visits edges sequentially: an edge sees the state already
    updated by every edge processed before it in the same pass, and within
    an edge each commodity sees the currency moved by the previous one.
    The tuning constants assume these dynamics.
    """

    def __init__(
        self,
        config: EconomyConfig,
        index: EconomyIndex,
        galaxy: Galaxy,
    ):
        config.validate()
        self.config = config
        self.index = index
        self.galaxy = galaxy

        # State (allocated by initialize)
        self.credits: np.ndarray | None = None
        self.stockpiles: np.ndarray | None = None
        self.production_mods: np.ndarray | None = None
        self.prices: np.ndarray | None = None
        self.last_traded: np.ndarray | None = None

        self.substeps_run = 0
        self._edges: list[tuple[int, int]] = []
        self._n_systems = 0
        self._initialized = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Allocate and reset all per-system state. No-op if initialized."""
        if self._initialized:
            return

        shape = (len(self.galaxy), self.index.count)
        self.credits = np.full(len(self.galaxy), self.config.starting_credits, dtype=np.float64)
        self.stockpiles = np.full(shape, self.config.starting_goods, dtype=np.float64)
        self.production_mods = np.zeros(shape, dtype=np.float64)
        self.prices = np.zeros(shape, dtype=np.float64)
        self.last_traded = np.zeros(shape, dtype=np.float64)
        self._edges = self.galaxy.trade_edges()
        self._n_systems = len(self.galaxy)
        self.substeps_run = 0
        self._initialized = True

        self.refresh_production_modifiers()
        self.refresh_prices()
        logger.debug(
            "Economy initialized: %d systems, %d goods, %d trade edges",
            shape[0], shape[1], len(self._edges),
        )

    def teardown(self) -> None:
        """Release all per-system state. No-op if not initialized."""
        if not self._initialized:
            return
        self.credits = None
        self.stockpiles = None
        self.production_mods = None
        self.prices = None
        self.last_traded = None
        self._edges = []
        self._initialized = False
        logger.debug("Economy torn down")

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise SimulationStateError("Economy simulation is not initialized")
        if len(self.galaxy) != self._n_systems:
            raise SimulationStateError(
                f"Galaxy changed size from {self._n_systems} to {len(self.galaxy)} "
                "systems; re-initialize the economy"
            )

    # ------------------------------------------------------------------
    # Production modifiers
    # ------------------------------------------------------------------
    def refresh_production_modifiers(self) -> None:
        """Recompute every system's production modifiers from its planets.

        Must be called whenever planetary production data changes.
        """
        self._require_initialized()
        self.production_mods[:] = 0.0
        unknown: set[str] = set()

        for row, sys in enumerate(self.galaxy):
            for planet in sys.planets:
                if planet.production is None:
                    logger.warning(
                        "Planet '%s' in %s has no production data; treating as zero",
                        planet.name, sys.name,
                    )
                    continue
                for name, mod in planet.production.items():
                    if not self.index.contains(name):
                        unknown.add(name)
                        continue
                    self.production_mods[row, self.index.index_of(name)] += mod

        for name in sorted(unknown):
            logger.warning("Planet production references unsimulated commodity '%s'", name)

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------
    def produce_consume(self) -> None:
        """Every system produces and consumes its goods for one sub-step."""
        self._require_initialized()
        cfg = self.config
        delta = production_delta(
            self.production_mods,
            self.stockpiles,
            production_modifier=cfg.production_modifier,
            production_scale=cfg.production_scale,
            consumption_scale=cfg.consumption_scale,
        )
        self.stockpiles += delta
        np.maximum(self.stockpiles, cfg.min_stockpile, out=self.stockpiles)

    def trade_edge(self, a: int, b: int) -> None:
        """Relax one pair of systems (given as array rows) toward equilibrium.

        For each good, trades at the joint price of both systems' combined
        currency and stock. ``trade_modifier`` of the trade that would make
        both local prices equal actually clears. Currency and goods are
        conserved across the pair.
        """
        credits = self.credits
        stock = self.stockpiles
        bought = self.last_traded
        tm = self.config.trade_modifier
        floor = self.config.min_joint_stockpile

        for good in range(self.index.count):
            ca, cb = credits[a], credits[b]
            sa, sb = stock[a, good], stock[b, good]

            joint_stock = sa + sb
            if joint_stock <= floor:
                logger.debug("Skipping empty edge (%d, %d) for good %d", a, b, good)
                continue

            price = (ca + cb) / joint_stock
            denom = price * joint_stock + ca + cb
            if not np.isfinite(price) or denom <= 0:
                continue

            trade = tm * (ca * sb - cb * sa) / denom

            credits[a] -= price * trade
            credits[b] += price * trade
            stock[a, good] += trade
            stock[b, good] -= trade
            bought[a, good] += trade
            bought[b, good] -= trade

    def trade_update(self) -> None:
        """Trade across every jump edge once."""
        self._require_initialized()
        self.last_traded[:] = 0.0
        # Jumps may be added between existing systems after initialize()
        self._edges = self.galaxy.trade_edges()
        for a, b in self._edges:
            self.trade_edge(a, b)

    def refresh_prices(self) -> None:
        """Recompute displayed prices from current currency and stockpiles."""
        self._require_initialized()
        self.prices[:] = self.index.base_prices[np.newaxis, :] * price_factor(
            self.credits[:, np.newaxis], self.stockpiles, self.config.price_scale,
        )

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------
    def advance(self, elapsed: int) -> int:
        """Advance the economy by ``elapsed`` time units.

        Runs ``elapsed // tick_quantum`` sub-steps; the remainder is
        truncated, not carried over. Returns the number of sub-steps run.
        """
        self._require_initialized()
        if elapsed < 0:
            raise ValueError(f"elapsed must not be negative, got {elapsed}")

        self.refresh_prices()
        n_steps = int(elapsed) // self.config.tick_quantum
        for _ in range(n_steps):
            self.trade_update()
            self.produce_consume()
            self.refresh_prices()
        self.substeps_run += n_steps
        logger.debug("Advanced economy %d sub-steps (total %d)", n_steps, self.substeps_run)
        return n_steps

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_unit_price(self, commodity: str, system_id: int) -> float | None:
        """Displayed unit price of a commodity in a system.

        Returns ``None`` (and logs a warning) for commodities that are not
        simulated. Raises KeyError for an unknown system.
        """
        self._require_initialized()
        row = self.galaxy.row_of(system_id)
        try:
            good = self.index.index_of(commodity)
        except UnknownCommodityError:
            logger.warning("Price for commodity '%s' not known", commodity)
            return None
        return float(self.prices[row, good])

    def system_state(self, system_id: int) -> SystemEconomy:
        self._require_initialized()
        row = self.galaxy.row_of(system_id)
        sys = self.galaxy.systems[row]
        names = self.index.names()

        def _row(arr: np.ndarray) -> dict[str, float]:
            return {n: float(arr[row, i]) for i, n in enumerate(names)}

        return SystemEconomy(
            system_id=sys.id,
            name=sys.name,
            currency=float(self.credits[row]),
            stockpiles=_row(self.stockpiles),
            production=_row(self.production_mods),
            prices=_row(self.prices),
            last_traded=_row(self.last_traded),
        )

    def price_table(self) -> dict[str, dict[str, float]]:
        """System name -> commodity name -> displayed price."""
        self._require_initialized()
        names = self.index.names()
        return {
            sys.name: {n: float(self.prices[row, i]) for i, n in enumerate(names)}
            for row, sys in enumerate(self.galaxy)
        }

    def price_spread(self) -> dict[str, float]:
        """Max minus min displayed price across systems, per commodity."""
        self._require_initialized()
        if len(self.galaxy) == 0:
            return {n: 0.0 for n in self.index.names()}
        spread = self.prices.max(axis=0) - self.prices.min(axis=0)
        return {n: float(spread[i]) for i, n in enumerate(self.index.names())}

    def total_credits(self) -> float:
        self._require_initialized()
        return float(self.credits.sum())

    def total_stock(self) -> dict[str, float]:
        self._require_initialized()
        totals = self.stockpiles.sum(axis=0)
        return {n: float(totals[i]) for i, n in enumerate(self.index.names())}

    def summary(self) -> dict[str, Any]:
        return {
            "initialized": self._initialized,
            "systems": len(self.galaxy),
            "commodities": self.index.names(),
            "trade_edges": len(self._edges),
            "substeps_run": self.substeps_run,
        }

    def __repr__(self) -> str:
        return (
            f"EconomySimulation(systems={len(self.galaxy)}, "
            f"goods={self.index.count}, initialized={self._initialized})"
        )
