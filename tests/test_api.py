"""Integration tests for the Starlane economy REST API."""

import threading

import pytest
from fastapi.testclient import TestClient

from starlane.api.app import create_app

PAIR_CATALOG = [{"name": "Fuel", "price": 10}, {"name": "Relics", "price": 0}]
PAIR_GALAXY = [
    {"id": 0, "name": "Sol", "planets": [{"name": "Earth", "production": {"Fuel": 20}}],
     "jumps": [1]},
    {"id": 1, "name": "Tau", "planets": [{"name": "Tau I", "production": {"Fuel": -20}}],
     "jumps": [0]},
]


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


def _create(client, **body) -> dict:
    resp = client.post("/api/simulation/sessions", json=body)
    assert resp.status_code == 200, resp.text
    return resp.json()


def _create_pair(client) -> dict:
    return _create(client, catalog=PAIR_CATALOG, galaxy=PAIR_GALAXY)


class _TeardownOnAcquire:
    """Session lock that tears the economy down just before it is taken."""

    def __init__(self, session):
        self.session = session
        self._lock = threading.Lock()

    def __enter__(self):
        self.session.simulation.teardown()
        self._lock.acquire()
        return self

    def __exit__(self, *exc):
        self._lock.release()
        return False


class TestHealthCheck:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestSessionLifecycle:
    def test_create_session_defaults(self, client):
        data = _create(client)
        assert data["status"] == "created"
        assert data["initialized"] is True
        assert data["substeps_run"] == 0
        assert data["n_systems"] == 12
        # Relics has no base price and is not simulated
        assert data["commodities"] == [
            "Food", "Ore", "Industrial Goods", "Medicine", "Luxury Goods",
        ]
        assert data["trade_edges"] >= 11

    def test_create_session_with_config(self, client):
        data = _create(client, config={
            "random_seed": 3,
            "galaxy_config": {"generator": "ring", "n_systems": 5},
        })
        assert data["n_systems"] == 5
        assert data["trade_edges"] == 5
        assert data["config"]["random_seed"] == 3

    def test_create_session_from_preset(self, client):
        data = _create(client, preset="austerity")
        assert data["config"]["experiment_name"] == "austerity"
        assert data["name"] == "austerity"
        assert data["n_systems"] == 8

    def test_create_session_explicit_world(self, client):
        data = _create_pair(client)
        assert data["commodities"] == ["Fuel"]
        assert data["n_systems"] == 2
        assert data["trade_edges"] == 1

    def test_unknown_preset(self, client):
        resp = client.post("/api/simulation/sessions", json={"preset": "nope"})
        assert resp.status_code == 404

    def test_invalid_trade_modifier(self, client):
        resp = client.post(
            "/api/simulation/sessions", json={"config": {"trade_modifier": 2.0}},
        )
        assert resp.status_code == 422
        assert "trade_modifier" in resp.json()["detail"]

    def test_unknown_config_key(self, client):
        resp = client.post("/api/simulation/sessions", json={"config": {"warp": 9}})
        assert resp.status_code == 422

    def test_dangling_jump(self, client):
        galaxy = [{"id": 0, "jumps": [7]}]
        resp = client.post(
            "/api/simulation/sessions", json={"catalog": PAIR_CATALOG, "galaxy": galaxy},
        )
        assert resp.status_code == 422

    def test_duplicate_jump(self, client):
        galaxy = [{"id": 0, "jumps": [1, 1]}, {"id": 1, "jumps": [0]}]
        resp = client.post(
            "/api/simulation/sessions", json={"catalog": PAIR_CATALOG, "galaxy": galaxy},
        )
        assert resp.status_code == 422

    def test_list_and_delete(self, client):
        sid = _create_pair(client)["id"]
        listed = client.get("/api/simulation/sessions").json()
        assert [s["id"] for s in listed] == [sid]

        assert client.delete(f"/api/simulation/sessions/{sid}").json() == {"deleted": True}
        assert client.get(f"/api/simulation/sessions/{sid}").status_code == 404
        assert client.delete(f"/api/simulation/sessions/{sid}").status_code == 404

    def test_missing_session(self, client):
        assert client.get("/api/simulation/sessions/nope").status_code == 404
        resp = client.post("/api/simulation/sessions/nope/advance", json={})
        assert resp.status_code == 404


class TestAdvance:
    def test_advance_default_one_jump(self, client):
        sid = _create_pair(client)["id"]
        data = client.post(f"/api/simulation/sessions/{sid}/advance", json={}).json()
        assert data["substeps_run"] == 1
        assert data["status"] == "running"
        assert data["elapsed"] == 10_000_000

    def test_advance_jumps(self, client):
        sid = _create_pair(client)["id"]
        data = client.post(
            f"/api/simulation/sessions/{sid}/advance", json={"jumps": 3},
        ).json()
        assert data["substeps_run"] == 3

    def test_advance_remainder_dropped(self, client):
        sid = _create_pair(client)["id"]
        data = client.post(
            f"/api/simulation/sessions/{sid}/advance", json={"elapsed": 25_000_000},
        ).json()
        assert data["substeps_run"] == 2
        assert data["elapsed"] == 25_000_000

    def test_negative_elapsed_rejected(self, client):
        sid = _create_pair(client)["id"]
        resp = client.post(
            f"/api/simulation/sessions/{sid}/advance", json={"elapsed": -1},
        )
        assert resp.status_code == 422

    def test_teardown_then_advance_reinitializes(self, client):
        sid = _create_pair(client)["id"]
        torn = client.post(f"/api/simulation/sessions/{sid}/teardown").json()
        assert torn["status"] == "torn_down"
        assert torn["initialized"] is False

        data = client.post(f"/api/simulation/sessions/{sid}/advance", json={}).json()
        assert data["initialized"] is True
        assert data["substeps_run"] == 1

    def test_refresh_production_after_teardown(self, client):
        sid = _create_pair(client)["id"]
        client.post(f"/api/simulation/sessions/{sid}/teardown")
        resp = client.post(f"/api/simulation/sessions/{sid}/refresh-production")
        assert resp.status_code == 409

    def test_reset(self, client):
        sid = _create_pair(client)["id"]
        client.post(f"/api/simulation/sessions/{sid}/advance", json={"jumps": 4})
        data = client.post(f"/api/simulation/sessions/{sid}/reset").json()
        assert data["status"] == "created"
        assert data["substeps_run"] == 0
        assert data["elapsed"] == 0
        history = client.get(f"/api/markets/{sid}/history").json()["history"]
        assert len(history) == 1

    def test_galaxy(self, client):
        sid = _create_pair(client)["id"]
        data = client.get(f"/api/simulation/sessions/{sid}/galaxy").json()
        assert [s["name"] for s in data["systems"]] == ["Sol", "Tau"]
        assert data["edges"] == [[0, 1]]


class TestMarkets:
    def test_system_markets(self, client):
        sid = _create_pair(client)["id"]
        data = client.get(f"/api/markets/{sid}/systems").json()
        assert [s["name"] for s in data] == ["Sol", "Tau"]
        sol = data[0]
        assert sol["currency"] == 100_000_000.0
        assert sol["currency_display"] == "100.00M"
        assert sol["production"] == {"Fuel": 20.0}
        assert sol["prices"] == {"Fuel": 10.0}

    def test_single_system(self, client):
        sid = _create_pair(client)["id"]
        assert client.get(f"/api/markets/{sid}/systems/1").json()["name"] == "Tau"
        assert client.get(f"/api/markets/{sid}/systems/42").status_code == 404

    def test_producer_becomes_cheaper(self, client):
        sid = _create_pair(client)["id"]
        client.post(f"/api/simulation/sessions/{sid}/advance", json={"jumps": 10})
        sol = client.get(f"/api/markets/{sid}/systems/0/price/Fuel").json()
        tau = client.get(f"/api/markets/{sid}/systems/1/price/Fuel").json()
        assert sol["known"] is True
        assert sol["price"] < tau["price"]

    def test_unit_price_display(self, client):
        sid = _create_pair(client)["id"]
        data = client.get(f"/api/markets/{sid}/systems/0/price/Fuel").json()
        assert data == {
            "commodity": "Fuel", "system_id": 0, "known": True,
            "price": 10.0, "display": "10",
        }

    def test_unit_price_unknown_commodity(self, client):
        sid = _create_pair(client)["id"]
        for name in ("Gossip", "Relics"):
            data = client.get(f"/api/markets/{sid}/systems/0/price/{name}").json()
            assert data["known"] is False
            assert data["price"] is None

    def test_unit_price_unknown_system(self, client):
        sid = _create_pair(client)["id"]
        resp = client.get(f"/api/markets/{sid}/systems/9/price/Fuel")
        assert resp.status_code == 404

    def test_spread_and_history(self, client):
        sid = _create_pair(client)["id"]
        client.post(f"/api/simulation/sessions/{sid}/advance", json={"jumps": 2})
        spread = client.get(f"/api/markets/{sid}/spread").json()
        assert spread["substep"] == 2
        assert spread["spread"]["Fuel"] > 0
        history = client.get(f"/api/markets/{sid}/history").json()["history"]
        assert [h["substep"] for h in history] == [0, 2]

    def test_markets_after_teardown(self, client):
        sid = _create_pair(client)["id"]
        client.post(f"/api/simulation/sessions/{sid}/teardown")
        assert client.get(f"/api/markets/{sid}/systems").status_code == 409
        assert client.get(f"/api/markets/{sid}/spread").status_code == 409

    def test_markets_missing_session(self, client):
        assert client.get("/api/markets/nope/systems").status_code == 404

    def test_format_credits(self, client):
        resp = client.post("/api/markets/format-credits", json={"credits": 2_500_000})
        assert resp.json() == {"display": "2.5M"}
        resp = client.post(
            "/api/markets/format-credits", json={"credits": 1234, "decimals": -1},
        )
        assert resp.json() == {"display": "1234"}

    @pytest.mark.parametrize("path", [
        "systems", "systems/0", "systems/0/price/Fuel", "spread", "history",
    ])
    def test_teardown_while_waiting_for_lock(self, client, path):
        sid = _create_pair(client)["id"]
        session = client.app.state.session_manager.get_session(sid)
        session.lock = _TeardownOnAcquire(session)
        resp = client.get(f"/api/markets/{sid}/{path}")
        assert resp.status_code == 409
