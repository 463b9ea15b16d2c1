from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel


class StandingRow(BaseModel):
    rank: int
    roster_id: int
    owner_id: Optional[str] = None
    team_name: str
    manager: Optional[str] = None
    wins: int = 0
    losses: int = 0
    ties: int = 0
    percentage: Optional[float] = None   # None before any games are played
    points_for: float = 0.0
    points_against: float = 0.0


class Standings(BaseModel):
    league_id: str
    season: str
    items: List[StandingRow] = []


class RosterPlayer(BaseModel):
    player_id: str
    name: str
    position: Optional[str] = None
    team: Optional[str] = None
    injury_status: Optional[str] = None
    points: Optional[float] = None       # selected week, None when no stat line


class RosterBreakdown(BaseModel):
    roster_id: int
    owner_id: Optional[str] = None
    team_name: str
    season: str
    week: int
    starters: List[Optional[RosterPlayer]] = []   # None marks an empty lineup slot
    bench: List[RosterPlayer] = []
    reserve: List[RosterPlayer] = []
    taxi: List[RosterPlayer] = []
    starter_points: float = 0.0
