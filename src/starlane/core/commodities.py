"""
Commodity catalog and the economy index derived from it.

The catalog is the ordered list of every tradable good. Only goods with a
base price above zero take part in the simulation; the EconomyIndex assigns
them dense indices in catalog order. Array widths are NEVER hardcoded;
always use economy_index.count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

import numpy as np

from starlane.core.errors import ConfigurationError, UnknownCommodityError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Built-in catalog, used when no catalog is supplied
# ---------------------------------------------------------------------------
DEFAULT_COMMODITIES: list[dict[str, Any]] = [
    {"name": "Food",             "price": 100, "description": "Foodstuffs and agricultural produce"},
    {"name": "Ore",              "price": 200, "description": "Raw unrefined minerals"},
    {"name": "Industrial Goods", "price": 350, "description": "Machine parts and tooling"},
    {"name": "Medicine",         "price": 500, "description": "Medical supplies"},
    {"name": "Luxury Goods",     "price": 800, "description": "Art, fine wines and other luxuries"},
    {"name": "Relics",           "price": 0,   "description": "Curiosities with no market value"},
]

_RECORD_KEYS = {"name", "price", "description"}


@dataclass(frozen=True)
class Commodity:
    """A tradable good with a static base price."""

    name: str
    price: float
    description: str = ""

    @property
    def simulated(self) -> bool:
        """Only goods with a positive base price take part in the economy."""
        return self.price > 0


class CommodityCatalog:
    """Ordered, stable list of commodities."""

    def __init__(self, commodities: Iterable[Commodity]):
        self._commodities: tuple[Commodity, ...] = tuple(commodities)
        self._by_name: dict[str, Commodity] = {}
        for com in self._commodities:
            if com.name in self._by_name:
                raise ConfigurationError(f"Duplicate commodity '{com.name}'")
            self._by_name[com.name] = com
        logger.debug(
            "Loaded %d %s", len(self._commodities),
            "commodity" if len(self._commodities) == 1 else "commodities",
        )

    @classmethod
    def from_dicts(cls, records: Iterable[dict[str, Any]]) -> CommodityCatalog:
        """Build a catalog from plain records, validating each one."""
        commodities: list[Commodity] = []
        for i, rec in enumerate(records):
            if not isinstance(rec, dict):
                raise ConfigurationError(f"Commodity record {i} is not a mapping")
            name = rec.get("name")
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"Commodity record {i} has invalid or no name")
            for key in sorted(rec.keys() - _RECORD_KEYS):
                logger.warning("Commodity '%s' has unknown field '%s'", name, key)
            price = rec.get("price", 0)
            if isinstance(price, bool) or not isinstance(price, (int, float)):
                raise ConfigurationError(f"Commodity '{name}' has non-numeric price")
            if price < 0 or not np.isfinite(price):
                raise ConfigurationError(f"Commodity '{name}' has invalid price {price}")
            commodities.append(Commodity(
                name=name,
                price=float(price),
                description=str(rec.get("description") or ""),
            ))
        return cls(commodities)

    def get(self, name: str, warn: bool = True) -> Commodity | None:
        """Look up a commodity by name; ``None`` if it does not exist."""
        com = self._by_name.get(name)
        if com is None and warn:
            logger.warning("Commodity '%s' not found in catalog", name)
        return com

    def sorted_by_price(self) -> list[Commodity]:
        """Most expensive first, ties broken by name."""
        return sorted(self._commodities, key=lambda c: (-c.price, c.name))

    def names(self) -> list[str]:
        return [c.name for c in self._commodities]

    def to_dicts(self) -> list[dict[str, Any]]:
        return [
            {"name": c.name, "price": c.price, "description": c.description}
            for c in self._commodities
        ]

    def __iter__(self) -> Iterator[Commodity]:
        return iter(self._commodities)

    def __len__(self) -> int:
        return len(self._commodities)

    def __repr__(self) -> str:
        return f"CommodityCatalog(count={len(self)})"


def default_catalog() -> CommodityCatalog:
    """The built-in catalog."""
    return CommodityCatalog.from_dicts(DEFAULT_COMMODITIES)


class EconomyIndex:
    """
    Dense index of the simulated commodities.

    Established once from a catalog and immutable afterwards. A catalog
    change that alters which goods simulate requires a new index and a
    re-initialized simulation.
    """

    def __init__(self, catalog: CommodityCatalog):
        self.commodities: tuple[Commodity, ...] = tuple(
            c for c in catalog if c.simulated
        )
        self.count = len(self.commodities)
        self._name_to_index: dict[str, int] = {
            c.name: i for i, c in enumerate(self.commodities)
        }
        self._base_prices = np.array(
            [c.price for c in self.commodities], dtype=np.float64
        )
        self._base_prices.setflags(write=False)

    @property
    def base_prices(self) -> np.ndarray:
        """Base price vector. Shape (count,), read-only."""
        return self._base_prices

    def index_of(self, name: str) -> int:
        """Get the dense index of a simulated commodity."""
        idx = self._name_to_index.get(name)
        if idx is None:
            raise UnknownCommodityError(name)
        return idx

    def contains(self, name: str) -> bool:
        return name in self._name_to_index

    def commodity(self, index: int) -> Commodity:
        if 0 <= index < self.count:
            return self.commodities[index]
        raise IndexError(f"Economy index {index} out of range [0, {self.count})")

    def names(self) -> list[str]:
        """Simulated commodity names in index order."""
        return [c.name for c in self.commodities]

    def __repr__(self) -> str:
        return f"EconomyIndex(count={self.count})"
