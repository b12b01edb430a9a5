"""
Session manager for economy simulations.

Each session wraps an EconomySimulation + MetricsCollector over its own
catalog and galaxy. Sessions live in memory only; nothing is saved.

The API server handles requests on a thread pool, so every mutation of a
session's simulation runs under that session's lock: an advance either
completes or has not started when another request reads prices.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any

from starlane.core.commodities import CommodityCatalog, EconomyIndex, default_catalog
from starlane.core.config import EconomyConfig
from starlane.core.economy import EconomySimulation
from starlane.core.galaxy import Galaxy
from starlane.core.galaxy_generators import generate_from_config
from starlane.metrics.collector import MetricsCollector

logger = logging.getLogger(__name__)


@dataclass
class EconomySession:
    """A live economy simulation session."""

    id: str
    name: str
    config: EconomyConfig
    catalog: CommodityCatalog
    simulation: EconomySimulation
    collector: MetricsCollector
    status: str = "created"  # created | running | torn_down
    elapsed: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class SessionManager:
    """Manages multiple in-memory economy sessions."""

    def __init__(self) -> None:
        self.sessions: dict[str, EconomySession] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create_session(
        self,
        config: EconomyConfig | None = None,
        name: str | None = None,
        catalog: CommodityCatalog | None = None,
        galaxy: Galaxy | None = None,
    ) -> EconomySession:
        """Create and initialize a new economy session.

        Without an explicit catalog the built-in one is used; without an
        explicit galaxy one is generated from ``config.galaxy_config``.
        """
        if config is None:
            config = EconomyConfig()
        config.validate()
        if catalog is None:
            catalog = default_catalog()
        index = EconomyIndex(catalog)
        if galaxy is None:
            galaxy = generate_from_config(
                config.galaxy_config, index.names(), seed=config.random_seed,
            )

        simulation = EconomySimulation(config, index, galaxy)
        simulation.initialize()
        collector = MetricsCollector()
        collector.collect(simulation)

        session = EconomySession(
            id=uuid.uuid4().hex[:8],
            name=name or config.experiment_name,
            config=config,
            catalog=catalog,
            simulation=simulation,
            collector=collector,
        )
        self.sessions[session.id] = session
        logger.info(
            "Created session %s (%d systems, %d goods)",
            session.id, len(galaxy), index.count,
        )
        return session

    def get_session(self, session_id: str) -> EconomySession:
        """Get a session by ID. Raises KeyError if not found."""
        if session_id in self.sessions:
            return self.sessions[session_id]
        raise KeyError(f"Session '{session_id}' not found")

    def list_sessions(self) -> list[dict[str, Any]]:
        return [
            {
                "id": s.id,
                "name": s.name,
                "status": s.status,
                "elapsed": s.elapsed,
                "substeps_run": s.simulation.substeps_run,
                "n_systems": len(s.simulation.galaxy),
            }
            for s in self.sessions.values()
        ]

    def delete_session(self, session_id: str) -> None:
        session = self.get_session(session_id)
        with session.lock:
            session.simulation.teardown()
        del self.sessions[session_id]

    def advance(self, session_id: str, elapsed: int) -> EconomySession:
        """Advance a session's economy by ``elapsed`` time units."""
        session = self.get_session(session_id)
        with session.lock:
            if not session.simulation.is_initialized:
                session.simulation.initialize()
            session.simulation.advance(elapsed)
            session.collector.collect(session.simulation)
            session.elapsed += elapsed
            session.status = "running"
        return session

    def refresh_production(self, session_id: str) -> EconomySession:
        """Re-read planetary production data for a session."""
        session = self.get_session(session_id)
        with session.lock:
            session.simulation.refresh_production_modifiers()
            session.simulation.refresh_prices()
        return session

    def teardown_session(self, session_id: str) -> EconomySession:
        """Release a session's economic state but keep the session."""
        session = self.get_session(session_id)
        with session.lock:
            session.simulation.teardown()
            session.status = "torn_down"
        return session

    def reset_session(self, session_id: str) -> EconomySession:
        """Tear down and re-initialize a session's economy from scratch."""
        session = self.get_session(session_id)
        with session.lock:
            session.simulation.teardown()
            session.simulation.initialize()
            session.collector = MetricsCollector()
            session.collector.collect(session.simulation)
            session.elapsed = 0
            session.status = "created"
        return session
