"""
Procedural galaxy generators.

Each generator produces a fully populated Galaxy: star systems with
positions, planets carrying production data for the given commodities,
and jump routes. The galaxy is always connected.

All generators use seeded numpy RNG for deterministic reproduction.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

import numpy as np

from starlane.core.galaxy import Galaxy, Jump, Planet, StarSystem


_SYSTEM_NAMES = [
    "Arcturus", "Bellatrix", "Capella", "Deneb", "Eltanin", "Fomalhaut",
    "Gienah", "Hadar", "Izar", "Kochab", "Lesath", "Mirach", "Nunki",
    "Pollux", "Rigel", "Sabik", "Thuban", "Unuk", "Vega", "Wezen",
]

_NUMERALS = ["I", "II", "III", "IV", "V", "VI", "VII", "VIII"]


def _system_name(index: int) -> str:
    name = _SYSTEM_NAMES[index % len(_SYSTEM_NAMES)]
    cycle = index // len(_SYSTEM_NAMES)
    return name if cycle == 0 else f"{name} {cycle + 1}"


def _generate_planets(
    system_name: str,
    commodities: Sequence[str],
    rng: np.random.Generator,
    planets_per_system: Sequence[int] = (1, 3),
    production_range: Sequence[float] = (-50.0, 50.0),
    inert_probability: float = 0.3,
) -> list[Planet]:
    """Generate planets with random production for one system.

    Args:
        system_name: Name of the owning system (planets are numbered after it).
        commodities: Commodity names planets may produce or consume.
        rng: Seeded random number generator.
        planets_per_system: Inclusive [min, max] planet count.
        production_range: [low, high] range for each production modifier.
        inert_probability: Chance a planet ignores a given commodity.

    Returns:
        List of planets.
    """
    lo, hi = int(planets_per_system[0]), int(planets_per_system[1])
    n_planets = int(rng.integers(lo, hi + 1))
    planets: list[Planet] = []
    for p in range(n_planets):
        production: dict[str, float] = {}
        for name in commodities:
            if rng.random() < inert_probability:
                continue
            production[name] = round(float(rng.uniform(*production_range)), 2)
        numeral = _NUMERALS[p % len(_NUMERALS)]
        planets.append(Planet(name=f"{system_name} {numeral}", production=production))
    return planets


def _build_systems(
    positions: np.ndarray,
    commodities: Sequence[str],
    rng: np.random.Generator,
    **planet_kwargs: Any,
) -> list[StarSystem]:
    systems = []
    for i, (x, y) in enumerate(positions):
        name = _system_name(i)
        systems.append(StarSystem(
            id=i,
            name=name,
            planets=_generate_planets(name, commodities, rng, **planet_kwargs),
            position=(round(float(x), 4), round(float(y), 4)),
        ))
    return systems


def _link(systems: list[StarSystem], a: int, b: int) -> None:
    if b not in systems[a].jump_targets():
        systems[a].jumps.append(Jump(target_id=b))
        systems[b].jumps.append(Jump(target_id=a))


def generate_chain(
    commodities: Sequence[str],
    n_systems: int = 8,
    seed: int | None = None,
    **planet_kwargs: Any,
) -> Galaxy:
    """Systems strung along a single jump line.

    Args:
        commodities: Commodity names planets may produce or consume.
        n_systems: Number of star systems.
        seed: Random seed for deterministic generation.

    Returns:
        A populated Galaxy.
    """
    rng = np.random.default_rng(seed)
    xs = np.linspace(0.0, 1.0, n_systems) if n_systems > 1 else np.zeros(n_systems)
    positions = np.column_stack([xs, rng.uniform(0.4, 0.6, size=n_systems)])
    systems = _build_systems(positions, commodities, rng, **planet_kwargs)
    for i in range(n_systems - 1):
        _link(systems, i, i + 1)
    return Galaxy(systems)


def generate_ring(
    commodities: Sequence[str],
    n_systems: int = 8,
    seed: int | None = None,
    **planet_kwargs: Any,
) -> Galaxy:
    """Systems arranged on a closed loop of jumps.

    Args:
        commodities: Commodity names planets may produce or consume.
        n_systems: Number of star systems.
        seed: Random seed for deterministic generation.

    Returns:
        A populated Galaxy.
    """
    rng = np.random.default_rng(seed)
    angles = np.linspace(0.0, 2 * np.pi, n_systems, endpoint=False)
    positions = np.column_stack([
        0.5 + 0.45 * np.cos(angles), 0.5 + 0.45 * np.sin(angles),
    ])
    systems = _build_systems(positions, commodities, rng, **planet_kwargs)
    for i in range(n_systems - 1):
        _link(systems, i, i + 1)
    if n_systems > 2:
        _link(systems, n_systems - 1, 0)
    return Galaxy(systems)


def generate_cluster(
    commodities: Sequence[str],
    n_systems: int = 12,
    seed: int | None = None,
    max_jump_distance: float = 0.35,
    **planet_kwargs: Any,
) -> Galaxy:
    """Systems scattered in the unit square.

    A minimum spanning tree over distances keeps the galaxy connected;
    every other pair closer than ``max_jump_distance`` also gets a jump.

    Args:
        commodities: Commodity names planets may produce or consume.
        n_systems: Number of star systems.
        seed: Random seed for deterministic generation.
        max_jump_distance: Extra jumps are added below this distance.

    Returns:
        A populated Galaxy.
    """
    rng = np.random.default_rng(seed)
    positions = rng.uniform(0.0, 1.0, size=(n_systems, 2))
    systems = _build_systems(positions, commodities, rng, **planet_kwargs)
    if n_systems < 2:
        return Galaxy(systems)

    diff = positions[:, np.newaxis, :] - positions[np.newaxis, :, :]
    dist = np.sqrt((diff ** 2).sum(axis=-1))

    # Prim's algorithm
    in_tree = np.zeros(n_systems, dtype=bool)
    in_tree[0] = True
    best = dist[0].copy()
    parent = np.zeros(n_systems, dtype=int)
    for _ in range(n_systems - 1):
        candidates = np.where(in_tree, np.inf, best)
        nxt = int(np.argmin(candidates))
        _link(systems, int(parent[nxt]), nxt)
        in_tree[nxt] = True
        closer = dist[nxt] < best
        best = np.where(closer, dist[nxt], best)
        parent = np.where(closer, nxt, parent)

    for a in range(n_systems):
        for b in range(a + 1, n_systems):
            if dist[a, b] < max_jump_distance:
                _link(systems, a, b)

    return Galaxy(systems)


# Registry of available galaxy generators.
GALAXY_GENERATORS: dict[str, Callable[..., Galaxy]] = {
    "chain": generate_chain,
    "ring": generate_ring,
    "cluster": generate_cluster,
}


def generate_galaxy(
    name: str,
    commodities: Sequence[str],
    seed: int | None = None,
    **kwargs: Any,
) -> Galaxy:
    """Factory function to generate a galaxy by name.

    Args:
        name: Name of the generator (must be in GALAXY_GENERATORS).
        commodities: Commodity names planets may produce or consume.
        seed: Random seed for deterministic generation.
        **kwargs: Generator parameters, e.g. ``n_systems``.

    Returns:
        A populated Galaxy.

    Raises:
        KeyError: If the generator name is not found.
    """
    if name not in GALAXY_GENERATORS:
        raise KeyError(
            f"Unknown galaxy generator '{name}'. "
            f"Available: {list(GALAXY_GENERATORS.keys())}"
        )
    if name != "cluster":
        kwargs.pop("max_jump_distance", None)
    return GALAXY_GENERATORS[name](commodities, seed=seed, **kwargs)


def generate_from_config(galaxy_config: dict[str, Any], commodities: Sequence[str],
                         seed: int | None = None) -> Galaxy:
    """Generate a galaxy from an ``EconomyConfig.galaxy_config`` dict."""
    params = dict(galaxy_config)
    name = params.pop("generator", "cluster")
    return generate_galaxy(name, commodities, seed=seed, **params)
