from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, field_validator


class LeagueStatus(str, Enum):
    PRE_DRAFT = "pre_draft"
    DRAFTING = "drafting"
    IN_SEASON = "in_season"
    COMPLETE = "complete"
    OFF_SEASON = "off_season"


class LeagueSettings(BaseModel):
    # Sleeper ships ~40 numeric knobs; keep the ones we read typed and the rest as extras
    model_config = ConfigDict(extra="allow")

    num_teams: Optional[int] = None
    playoff_teams: Optional[int] = None
    playoff_week_start: Optional[int] = None
    trade_deadline: Optional[int] = None
    taxi_slots: Optional[int] = None
    reserve_slots: Optional[int] = None
    bench_slots: Optional[int] = None
    start_week: Optional[int] = None
    draft_rounds: Optional[int] = None


class League(BaseModel):
    model_config = ConfigDict(extra="ignore")

    league_id: str
    name: str
    season: str
    status: LeagueStatus = LeagueStatus.PRE_DRAFT
    sport: Optional[str] = None
    total_rosters: Optional[int] = None
    roster_positions: List[str] = []
    settings: LeagueSettings = LeagueSettings()
    scoring_settings: Dict[str, float] = {}
    previous_league_id: Optional[str] = None
    draft_id: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("season", mode="before")
    @classmethod
    def _season_str(cls, v):
        # natural key is string-typed even when the payload sends a number
        return str(v) if v is not None else v

    @field_validator("roster_positions", mode="before")
    @classmethod
    def _none_list(cls, v):
        return v or []

    @field_validator("settings", "scoring_settings", mode="before")
    @classmethod
    def _none_settings(cls, v):
        return v or {}

    @property
    def starter_slots(self) -> List[str]:
        return [p for p in self.roster_positions if p not in ("BN", "IR", "TAXI")]
