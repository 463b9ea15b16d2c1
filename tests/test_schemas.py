"""Tests for payload validation at the client boundary."""

import pytest
from pydantic import ValidationError

from app.schemas.league import League, LeagueStatus
from app.schemas.player import PlayerStats
from app.schemas.roster import Roster
from app.schemas.user import User


class TestRoster:
    def _roster(self, **kw):
        base = {"roster_id": 1, "league_id": "L1", "players": ["a", "b", "c", "d"]}
        base.update(kw)
        return Roster.model_validate(base)

    def test_bench_is_derived(self):
        r = self._roster(starters=["a"], reserve=["b"], taxi=["c"])
        assert r.bench == ["d"]
        assert r.slot_of("a") == "starter"
        assert r.slot_of("b") == "ir"
        assert r.slot_of("c") == "taxi"
        assert r.slot_of("d") == "bench"
        assert r.slot_of("z") is None

    def test_player_in_two_groups_rejected(self):
        with pytest.raises(ValidationError):
            self._roster(starters=["a"], reserve=["a"])

    def test_starter_not_on_roster_rejected(self):
        with pytest.raises(ValidationError):
            self._roster(starters=["zz"])

    def test_empty_slot_placeholder_ignored(self):
        r = self._roster(starters=["a", "0", "0"])
        assert r.slot_of("0") is None

    def test_nulls_become_empty(self):
        r = Roster.model_validate({"roster_id": 2, "league_id": "L1", "players": None, "taxi": None, "settings": None})
        assert r.players == [] and r.taxi == []
        assert r.settings.wins == 0

    def test_points_combine_decimal(self):
        r = self._roster(settings={"fpts": 1234, "fpts_decimal": 56, "fpts_against": 1000, "fpts_against_decimal": 5})
        assert r.points_for == pytest.approx(1234.56)
        assert r.points_against == pytest.approx(1000.05)


class TestLeague:
    def test_season_coerced_and_extras_kept(self):
        league = League.model_validate({
            "league_id": "L1",
            "name": "Dynasty",
            "season": 2025,
            "status": "in_season",
            "settings": {"num_teams": 12, "waiver_budget": 100},
            "roster_positions": ["QB", "RB", "FLEX", "BN", "IR"],
        })
        assert league.season == "2025"
        assert league.status == LeagueStatus.IN_SEASON
        assert league.settings.num_teams == 12
        assert league.settings.model_extra["waiver_budget"] == 100
        assert league.starter_slots == ["QB", "RB", "FLEX"]

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            League.model_validate({"league_id": "L1", "name": "x", "season": "2025", "status": "paused"})


class TestUserAndStats:
    def test_handle_fallbacks(self):
        assert User(user_id="1", username="alice").handle == "alice"
        assert User(user_id="1", display_name="Al").handle == "Al"
        assert User(user_id="1").handle == "1"

    def test_points_by_scoring(self):
        line = PlayerStats(pts_ppr=10.0, pts_half_ppr=8.0, pts_std=6.0)
        assert line.points("half_ppr") == 8.0
        assert line.points("std") == 6.0
        assert PlayerStats().points() == 0.0
