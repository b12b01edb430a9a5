#!/usr/bin/env python3
"""Run a baseline Starlane economy and print how prices settle."""

from starlane.core.commodities import EconomyIndex, default_catalog
from starlane.core.config import EconomyConfig
from starlane.core.economy import EconomySimulation
from starlane.core.galaxy_generators import generate_from_config
from starlane.core.pricing import format_credits
from starlane.metrics.collector import MetricsCollector


def main():
    config = EconomyConfig(experiment_name="baseline", random_seed=42)
    index = EconomyIndex(default_catalog())
    galaxy = generate_from_config(config.galaxy_config, index.names(), seed=config.random_seed)

    print(f"=== Starlane: {config.experiment_name} ===")
    print(f"Galaxy: {galaxy}")
    print(f"Commodities: {', '.join(index.names())}")
    print(f"Trade modifier: {config.trade_modifier}  "
          f"Production modifier: {config.production_modifier}")
    print()

    sim = EconomySimulation(config, index, galaxy)
    sim.initialize()
    collector = MetricsCollector()
    collector.collect(sim)

    for _ in range(25):
        sim.advance(config.tick_quantum)
        collector.collect(sim)

    header = f"{'Step':>4} {'Credits':>9} {'MinStock':>10} " + " ".join(
        f"{name[:10]:>10}" for name in index.names()
    )
    print("Price spread across systems")
    print(header)
    print("-" * len(header))
    for snap in collector.metrics_history:
        print(
            f"{snap.substep:4d} {format_credits(snap.total_credits, 2):>9} "
            f"{snap.min_stockpile:10.1f} "
            + " ".join(f"{snap.price_spread[n]:10.2f}" for n in index.names())
        )

    print()
    print("=== Final prices ===")
    for system, prices in sim.price_table().items():
        row = " ".join(f"{p:10.2f}" for p in prices.values())
        print(f"  {system:14s} {row}")


if __name__ == "__main__":
    main()
