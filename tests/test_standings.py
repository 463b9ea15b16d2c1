"""Tests for the standings and roster views."""

import pytest

from app.services.standings import build_roster_breakdown, build_standings, scoring_for, win_percentage

from conftest import make_catalog, make_roster, make_stats, make_user


def _record(roster_id, wins, losses, fpts, ties=0, owner="1"):
    return make_roster(roster_id, "L1", owner, settings={"wins": wins, "losses": losses, "ties": ties, "fpts": fpts})


class TestStandings:
    def test_ordered_by_wins_then_points(self):
        rosters = [_record(1, 5, 3, 900), _record(2, 6, 2, 800), _record(3, 5, 3, 950)]
        table = build_standings("L1", "2025", rosters, [])
        assert [row.roster_id for row in table.items] == [2, 3, 1]
        assert [row.rank for row in table.items] == [1, 2, 3]

    def test_percentage_counts_ties_as_half(self):
        assert win_percentage(5, 2, 1) == pytest.approx(0.6875)
        assert win_percentage(0, 0, 0) is None

    def test_team_names(self):
        alice = make_user("1", "alice", metadata={"team_name": "Gridiron Gang"})
        bob = make_user("2", "bob")
        rosters = [
            _record(1, 1, 0, 100, owner="1"),
            _record(2, 0, 1, 90, owner="2"),
            _record(3, 0, 1, 80, owner=None),
        ]
        names = {row.roster_id: row.team_name for row in build_standings("L1", "2025", rosters, [alice, bob]).items}
        assert names == {1: "Gridiron Gang", 2: "bob", 3: "Team 3"}


class TestRosterBreakdown:
    def test_groups_and_points(self):
        roster = make_roster(
            1, "L1", "1",
            players=["p1a", "p1b", "p2a", "p2b"],
            starters=["p1a", "0", "p2a"],
            reserve=["p2b"],
        )
        view = build_roster_breakdown(
            roster,
            make_user("1", "alice"),
            make_catalog(),
            make_stats(p1a=12.5, p2a=7.25, p1b=30.0),
            season="2025",
            week=1,
        )
        assert [p.player_id if p else None for p in view.starters] == ["p1a", None, "p2a"]
        assert [p.player_id for p in view.bench] == ["p1b"]
        assert [p.player_id for p in view.reserve] == ["p2b"]
        assert view.starter_points == 19.75
        assert view.starters[0].name == "Player p1a"
        assert view.reserve[0].points is None

    def test_unknown_player_falls_back_to_id(self):
        roster = make_roster(1, "L1", "1", players=["x9"], starters=["x9"])
        view = build_roster_breakdown(roster, None, {}, {}, season="2025", week=2)
        assert view.starters[0].name == "x9"
        assert view.team_name == "Team 1"


@pytest.mark.parametrize("rec, expected", [(None, "ppr"), (1.0, "ppr"), (0.5, "half_ppr"), (0.0, "std")])
def test_scoring_for(rec, expected):
    settings = {} if rec is None else {"rec": rec}
    assert scoring_for(settings) == expected
