from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.draft import DraftPick
from app.schemas.league import League
from app.schemas.roster import Roster
from app.schemas.user import User


class StatsPeriod(BaseModel):
    season: str
    week: int


class SessionSnapshot(BaseModel):
    """Read-only view of one session for the UI. The player catalog is served separately."""

    model_config = ConfigDict(frozen=True)

    status: str
    user: Optional[User] = None
    leagues: List[League] = []
    current_league: Optional[League] = None
    rosters: List[Roster] = []
    users: List[User] = []
    selected_season: str
    selected_week: int
    player_count: int = 0
    stats_period: Optional[StatsPeriod] = None
    draft_picks: List[DraftPick] = []
    last_error: Optional[str] = None
    failed: List[str] = []
    empty_result: bool = False
    generation: int = 0


# ---- request / response bodies ----

class LoginRequest(BaseModel):
    handle: str = Field(..., min_length=1, description="Sleeper username")


class LoginResponse(BaseModel):
    session: SessionSnapshot
    partial_error: Optional[str] = None
    failed: List[str] = []


class SelectLeagueRequest(BaseModel):
    league_id: Optional[str] = None


class SelectSeasonRequest(BaseModel):
    season: str = Field(..., pattern=r"^\d{4}$")


class SelectWeekRequest(BaseModel):
    week: int


class RetryResponse(BaseModel):
    retried: List[str]
    session: SessionSnapshot
