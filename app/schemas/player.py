from __future__ import annotations
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator


class Player(BaseModel):
    model_config = ConfigDict(extra="ignore")

    player_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    position: Optional[str] = None
    fantasy_positions: List[str] = []
    team: Optional[str] = None          # pro team abbreviation, None for free agents
    status: Optional[str] = None        # Active / Inactive / Injured Reserve ...
    injury_status: Optional[str] = None # Questionable / Out / IR ...
    active: Optional[bool] = None

    @field_validator("fantasy_positions", mode="before")
    @classmethod
    def _none_list(cls, v):
        return v or []

    @property
    def name(self) -> str:
        if self.full_name:
            return self.full_name
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or self.player_id


class PlayerStats(BaseModel):
    # per-week stat line; dozens of raw counters ride along as extras
    model_config = ConfigDict(extra="allow")

    pts_ppr: Optional[float] = None
    pts_half_ppr: Optional[float] = None
    pts_std: Optional[float] = None
    projected_pts: Optional[float] = None

    def points(self, scoring: str = "ppr") -> float:
        value = {
            "ppr": self.pts_ppr,
            "half_ppr": self.pts_half_ppr,
            "std": self.pts_std,
        }.get(scoring)
        return float(value or 0.0)


PlayerCatalog = Dict[str, Player]
StatsMap = Dict[str, PlayerStats]

catalog_adapter = TypeAdapter(PlayerCatalog)
stats_adapter = TypeAdapter(StatsMap)
