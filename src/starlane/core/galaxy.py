"""
Galaxy topology consumed by the economy.

Star systems are the nodes, jumps are directed adjacency entries. The
economy only reads this model: it iterates jump pairs for trade and sums
planetary production for each system.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from starlane.core.errors import ConfigurationError


@dataclass
class Planet:
    """A planet and its per-commodity production contribution.

    ``production`` maps commodity name to a modifier (positive produces,
    negative consumes). ``None`` marks production data that was never
    initialized.
    """
    name: str
    production: dict[str, float] | None = field(default_factory=dict)


@dataclass
class Jump:
    """A jump route to another system."""
    target_id: int


@dataclass
class StarSystem:
    """A node in the galaxy graph."""
    id: int
    name: str
    planets: list[Planet] = field(default_factory=list)
    jumps: list[Jump] = field(default_factory=list)
    position: tuple[float, float] | None = None

    def jump_targets(self) -> list[int]:
        return [j.target_id for j in self.jumps]


class Galaxy:
    """Ordered collection of star systems with jump adjacency."""

    def __init__(self, systems: Iterable[StarSystem] = ()):
        self.systems: list[StarSystem] = list(systems)
        self._row: dict[int, int] = {}
        self._reindex()
        self.validate()

    def _reindex(self) -> None:
        self._row = {}
        for row, sys in enumerate(self.systems):
            if sys.id in self._row:
                raise ConfigurationError(f"Duplicate star system id {sys.id}")
            self._row[sys.id] = row

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_dicts(cls, records: Iterable[dict[str, Any]]) -> Galaxy:
        """Build a galaxy from plain records.

        Each record: ``{"id", "name", "planets": [{"name", "production"}],
        "jumps": [target_id, ...]}``.
        """
        systems: list[StarSystem] = []
        for i, rec in enumerate(records):
            if "id" not in rec:
                raise ConfigurationError(f"Star system record {i} has no id")
            sys_id = rec["id"]
            if isinstance(sys_id, bool) or not isinstance(sys_id, int):
                raise ConfigurationError(f"Star system record {i} has non-integer id")
            planets = []
            for p in rec.get("planets", []):
                if "name" not in p:
                    raise ConfigurationError(f"Planet in system {sys_id} has no name")
                production = p.get("production", {})
                if production is not None:
                    production = {str(k): float(v) for k, v in production.items()}
                planets.append(Planet(name=p["name"], production=production))
            position = rec.get("position")
            systems.append(StarSystem(
                id=sys_id,
                name=rec.get("name") or f"System {sys_id}",
                planets=planets,
                jumps=[Jump(target_id=int(t)) for t in rec.get("jumps", [])],
                position=tuple(position) if position is not None else None,
            ))
        return cls(systems)

    def to_dicts(self) -> list[dict[str, Any]]:
        return [
            {
                "id": s.id,
                "name": s.name,
                "planets": [
                    {"name": p.name, "production": p.production} for p in s.planets
                ],
                "jumps": s.jump_targets(),
                "position": list(s.position) if s.position is not None else None,
            }
            for s in self.systems
        ]

    def add_system(self, system: StarSystem) -> None:
        if system.id in self._row:
            raise ConfigurationError(f"Duplicate star system id {system.id}")
        self._row[system.id] = len(self.systems)
        self.systems.append(system)

    def connect(self, a: int, b: int) -> None:
        """Add a jump in both directions between two systems."""
        if a == b:
            raise ConfigurationError(f"System {a} cannot jump to itself")
        sys_a = self.system(a)
        sys_b = self.system(b)
        if b not in sys_a.jump_targets():
            sys_a.jumps.append(Jump(target_id=b))
        if a not in sys_b.jump_targets():
            sys_b.jumps.append(Jump(target_id=a))

    def validate(self) -> None:
        """Raise ConfigurationError on malformed jumps (self, duplicate, dangling)."""
        for sys in self.systems:
            targets = sys.jump_targets()
            if len(set(targets)) != len(targets):
                raise ConfigurationError(f"System {sys.id} has duplicate jumps")
            for jump in sys.jumps:
                if jump.target_id == sys.id:
                    raise ConfigurationError(f"System {sys.id} jumps to itself")
                if jump.target_id not in self._row:
                    raise ConfigurationError(
                        f"System {sys.id} jumps to unknown system {jump.target_id}"
                    )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def system(self, system_id: int) -> StarSystem:
        row = self._row.get(system_id)
        if row is None:
            raise KeyError(f"Unknown star system: {system_id}")
        return self.systems[row]

    def row_of(self, system_id: int) -> int:
        """Row of a system in the simulation's per-system arrays."""
        row = self._row.get(system_id)
        if row is None:
            raise KeyError(f"Unknown star system: {system_id}")
        return row

    def has_system(self, system_id: int) -> bool:
        return system_id in self._row

    def trade_edges(self) -> list[tuple[int, int]]:
        """Row pairs to trade across, each undirected edge once.

        A jump is kept only when its origin id is numerically less than its
        target id. Order follows system order, then jump order; a jump
        listed twice still yields one edge.
        """
        edges: list[tuple[int, int]] = []
        seen: set[tuple[int, int]] = set()
        for row, sys in enumerate(self.systems):
            for jump in sys.jumps:
                if sys.id < jump.target_id:
                    edge = (row, self._row[jump.target_id])
                    if edge not in seen:
                        seen.add(edge)
                        edges.append(edge)
        return edges

    def neighbours(self, system_id: int) -> list[StarSystem]:
        return [self.system(t) for t in self.system(system_id).jump_targets()]

    def __iter__(self) -> Iterator[StarSystem]:
        return iter(self.systems)

    def __len__(self) -> int:
        return len(self.systems)

    def __repr__(self) -> str:
        n_edges = len(self.trade_edges())
        return f"Galaxy(systems={len(self)}, edges={n_edges})"
