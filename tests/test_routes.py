"""HTTP surface tests: cookie sessions, selection endpoints and views."""

import pytest
from fastapi.testclient import TestClient

from app.core.auth import SESSION_COOKIE
from app.core.errors import NetworkError
from app.main import app
from app.services.sessions import SessionRegistry
from app.services.sync import SyncController

from conftest import make_league


@pytest.fixture
def registry(sleeper, store, local_cache, clock, config):
    def factory(session_id):
        return SyncController(
            sleeper, store, local_cache, namespace=f"session-{session_id}", clock=clock.now, config=config
        )

    return SessionRegistry(sleeper, store, local_cache, controller_factory=factory)


@pytest.fixture
def client(registry):
    # lifespan is skipped without the context manager; wire the registry directly
    app.state.registry = registry
    return TestClient(app)


@pytest.fixture
def logged_in(client):
    resp = client.post("/session/login", json={"handle": "alice"})
    assert resp.status_code == 200
    return client


class TestSessionRoutes:
    def test_login_sets_cookie(self, client, registry):
        resp = client.post("/session/login", json={"handle": "alice"})
        body = resp.json()
        assert resp.status_code == 200
        assert SESSION_COOKIE in resp.cookies
        assert body["session"]["status"] == "ready"
        assert body["session"]["current_league"]["league_id"] == "L1"
        assert body["partial_error"] is None
        assert len(registry) == 1

    def test_login_unknown_handle(self, client, registry):
        resp = client.post("/session/login", json={"handle": "nobody"})
        assert resp.status_code == 404
        assert len(registry) == 0

    def test_login_partial(self, client, sleeper):
        sleeper.fail["get_players"] = NetworkError("down", status=500)
        body = client.post("/session/login", json={"handle": "alice"}).json()
        assert body["failed"] == ["players"]
        assert body["session"]["status"] == "degraded"

    def test_relogin_reuses_session(self, logged_in, registry):
        logged_in.post("/session/login", json={"handle": "alice"})
        assert len(registry) == 1

    def test_session_requires_cookie(self, client):
        assert client.get("/session").status_code == 401

    def test_forged_cookie_rejected(self, client):
        client.cookies.set(SESSION_COOKIE, "forged.token")
        assert client.get("/session").status_code == 401

    def test_snapshot(self, logged_in):
        body = logged_in.get("/session").json()
        assert body["user"]["username"] == "alice"
        assert body["player_count"] == 4

    def test_select_week(self, logged_in):
        assert logged_in.post("/session/week", json={"week": 2}).json()["selected_week"] == 2
        assert logged_in.post("/session/week", json={"week": 30}).status_code == 400

    def test_select_season_without_leagues(self, logged_in):
        body = logged_in.post("/session/season", json={"season": "2019"}).json()
        assert body["empty_result"] is True
        assert body["current_league"] is None
        assert body["last_error"] is None

    def test_select_season_validates_year(self, logged_in):
        assert logged_in.post("/session/season", json={"season": "19"}).status_code == 422

    def test_select_league_outside_list(self, logged_in, sleeper):
        sleeper.leagues["L2"] = make_league("L2", "Side", "2025")
        body = logged_in.post("/session/league", json={"league_id": "L2"}).json()
        assert body["current_league"]["league_id"] == "L2"

    def test_select_unknown_league(self, logged_in, sleeper):
        sleeper.fail[("get_league", "L9")] = NetworkError("nope", status=404)
        assert logged_in.post("/session/league", json={"league_id": "L9"}).status_code == 404

        body = logged_in.get("/session").json()
        assert body["status"] == "ready"
        assert body["failed"] == []
        assert body["last_error"] is None
        assert body["current_league"]["league_id"] == "L1"

    def test_retry(self, client, sleeper):
        sleeper.fail["get_players"] = NetworkError("down", status=500)
        client.post("/session/login", json={"handle": "alice"})
        del sleeper.fail["get_players"]

        body = client.post("/session/retry").json()
        assert body["retried"] == ["players"]
        assert body["session"]["status"] == "ready"

    def test_logout(self, logged_in, registry, store):
        assert logged_in.post("/session/logout").json() == {"ok": True}
        assert len(registry) == 0
        assert logged_in.get("/session").status_code == 401
        assert store.get_user("1") is not None


class TestPlayerRoutes:
    def test_catalog_cache_header(self, logged_in):
        resp = logged_in.get("/players")
        assert resp.status_code == 200
        assert resp.headers["X-Cache"] == "HIT"
        assert resp.json()["p1a"]["full_name"] == "Player p1a"

    def test_stats_default_to_selection(self, logged_in):
        body = logged_in.get("/players/stats").json()
        assert body["season"] == "2025"
        assert body["week"] == 1
        assert body["items"]["p1a"]["pts_ppr"] == 12.5

    def test_future_week_is_empty(self, logged_in, sleeper):
        before = sleeper.calls["get_player_stats"]
        body = logged_in.get("/players/stats", params={"season": "2025", "week": 9}).json()
        assert body["items"] == {}
        assert sleeper.calls["get_player_stats"] == before

    def test_week_bounds(self, logged_in):
        assert logged_in.get("/players/stats", params={"week": 0}).status_code == 400


class TestLeagueRoutes:
    def test_standings(self, logged_in):
        body = logged_in.get("/league/current/standings").json()
        assert body["league_id"] == "L1"
        assert [row["rank"] for row in body["items"]] == [1, 2]

    def test_roster(self, logged_in):
        body = logged_in.get("/league/current/rosters/1").json()
        assert body["starters"][0]["player_id"] == "p1a"
        assert body["starters"][0]["points"] == 12.5
        assert [p["player_id"] for p in body["bench"]] == ["p1b"]

    def test_missing_roster(self, logged_in):
        assert logged_in.get("/league/current/rosters/99").status_code == 404

    def test_draft_picks(self, logged_in):
        body = logged_in.get("/league/current/draft-picks").json()
        assert [p["pick_no"] for p in body] == [1, 2]

    def test_no_league_selected(self, logged_in):
        logged_in.post("/session/league", json={"league_id": None})
        assert logged_in.get("/league/current/standings").status_code == 404

    def test_league_detail(self, logged_in):
        assert logged_in.get("/league/L1").json()["name"] == "Dynasty"

    def test_league_detail_upstream_failure(self, logged_in, sleeper):
        sleeper.fail[("get_league", "L5")] = NetworkError("bad gateway", status=502)
        assert logged_in.get("/league/L5").status_code == 502
        assert logged_in.get("/session").json()["status"] == "ready"

    def test_league_detail_unknown(self, logged_in):
        # Sleeper answers 200 null for ids it does not know
        assert logged_in.get("/league/L9").status_code == 404
        assert logged_in.get("/session").json()["status"] == "ready"


def test_health(client):
    body = client.get("/health").json()
    assert body["ok"] is True
    assert body["sessions"] == 0
