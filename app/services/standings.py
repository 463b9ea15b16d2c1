from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from app.schemas.player import PlayerCatalog, StatsMap
from app.schemas.roster import EMPTY_SLOT, Roster
from app.schemas.standings import RosterBreakdown, RosterPlayer, StandingRow, Standings
from app.schemas.user import User


def win_percentage(wins: int, losses: int, ties: int) -> Optional[float]:
    games = wins + losses + ties
    return ((wins + 0.5 * ties) / games) if games > 0 else None


def team_label(roster: Roster, owner: Optional[User]) -> str:
    """Roster metadata name, then the owner's team name, then the owner's handle."""
    if roster.team_name:
        return roster.team_name
    if owner is not None:
        return owner.team_name or owner.display_name or owner.handle
    return f"Team {roster.roster_id}"


def build_standings(league_id: str, season: str, rosters: Iterable[Roster], users: Iterable[User]) -> Standings:
    """
    Orders teams by wins, then points for. Ties (same record and points) keep
    roster order so the result is stable across calls.
    """
    owners: Dict[str, User] = {u.user_id: u for u in users}
    rows: List[StandingRow] = []
    for roster in rosters:
        owner = owners.get(roster.owner_id) if roster.owner_id else None
        s = roster.settings
        rows.append(StandingRow(
            rank=0,
            roster_id=roster.roster_id,
            owner_id=roster.owner_id,
            team_name=team_label(roster, owner),
            manager=owner.display_name or owner.handle if owner else None,
            wins=s.wins,
            losses=s.losses,
            ties=s.ties,
            percentage=win_percentage(s.wins, s.losses, s.ties),
            points_for=round(roster.points_for, 2),
            points_against=round(roster.points_against, 2),
        ))

    rows.sort(key=lambda r: (-r.wins, -r.points_for, r.roster_id))
    for i, row in enumerate(rows, start=1):
        row.rank = i
    return Standings(league_id=league_id, season=str(season), items=rows)


def _player_row(player_id: str, players: PlayerCatalog, stats: StatsMap, scoring: str) -> RosterPlayer:
    p = players.get(player_id)
    line = stats.get(player_id)
    return RosterPlayer(
        player_id=player_id,
        name=p.name if p else player_id,
        position=p.position if p else None,
        team=p.team if p else None,
        injury_status=p.injury_status if p else None,
        points=line.points(scoring) if line else None,
    )


def build_roster_breakdown(
    roster: Roster,
    owner: Optional[User],
    players: PlayerCatalog,
    stats: StatsMap,
    *,
    season: str,
    week: int,
    scoring: str = "ppr",
) -> RosterBreakdown:
    def rows(ids: Iterable[str]) -> List[RosterPlayer]:
        return [_player_row(pid, players, stats, scoring) for pid in ids]

    starters = [None if pid == EMPTY_SLOT else _player_row(pid, players, stats, scoring) for pid in roster.starters]
    starter_points = sum(r.points or 0.0 for r in starters if r is not None)

    return RosterBreakdown(
        roster_id=roster.roster_id,
        owner_id=roster.owner_id,
        team_name=team_label(roster, owner),
        season=str(season),
        week=week,
        starters=starters,
        bench=rows(roster.bench),
        reserve=rows(roster.reserve),
        taxi=rows(roster.taxi),
        starter_points=round(starter_points, 2),
    )


def scoring_for(league_settings: Dict[str, float]) -> str:
    """Maps the league's reception scoring onto the stat-line fields Sleeper precomputes."""
    rec = league_settings.get("rec")
    if rec is None or rec >= 1:
        return "ppr"
    if rec >= 0.5:
        return "half_ppr"
    return "std"
