# app/api/routes_league.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.deps import get_controller
from app.schemas.draft import DraftPick
from app.schemas.league import League
from app.schemas.standings import RosterBreakdown, Standings
from app.services.standings import build_roster_breakdown, build_standings, scoring_for
from app.services.sync import SyncController

router = APIRouter(prefix="/league", tags=["league"])


def _require_league(controller: SyncController) -> League:
    league = controller.state.current_league
    if league is None:
        raise HTTPException(status_code=404, detail="No league selected")
    return league


# ---------------- current league views ----------------
@router.get("/current/standings", response_model=Standings)
def current_standings(controller: SyncController = Depends(get_controller)):
    """
    Standings for the selected league from its cached rosters: wins first, then points for.
    """
    league = _require_league(controller)
    return build_standings(league.league_id, league.season, controller.state.rosters, controller.state.users)


@router.get("/current/rosters/{roster_id}", response_model=RosterBreakdown)
async def current_roster(roster_id: int, controller: SyncController = Depends(get_controller)):
    """
    One roster split into starters / bench / IR / taxi, with each player's
    points for the selected week.
    """
    league = _require_league(controller)
    state = controller.state
    roster = next((r for r in state.rosters if r.roster_id == roster_id), None)
    if roster is None:
        raise HTTPException(status_code=404, detail=f"Roster {roster_id} not found in league {league.league_id}")

    players = state.players or await controller.get_player_catalog()
    stats = await controller.get_player_stats(state.selected_season, state.selected_week)
    owner = next((u for u in state.users if u.user_id == roster.owner_id), None)
    return build_roster_breakdown(
        roster,
        owner,
        players,
        stats,
        season=state.selected_season,
        week=state.selected_week,
        scoring=scoring_for(league.scoring_settings),
    )


@router.get("/current/draft-picks", response_model=List[DraftPick])
async def current_draft_picks(controller: SyncController = Depends(get_controller)):
    _require_league(controller)
    return await controller.load_draft_picks()


# ---------------- league detail ----------------
@router.get("/{league_id}", response_model=League)
async def league_detail(league_id: str, controller: SyncController = Depends(get_controller)):
    """League document, from the cache store when present."""
    league = await controller.get_league(league_id)
    if league is None:
        raise HTTPException(status_code=404, detail=f"League {league_id} not found")
    return league
