from __future__ import annotations
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# Sleeper fills unset starter slots with "0"
EMPTY_SLOT = "0"


class RosterSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    wins: int = 0
    losses: int = 0
    ties: int = 0
    fpts: int = 0
    fpts_decimal: int = 0
    fpts_against: int = 0
    fpts_against_decimal: int = 0


class Roster(BaseModel):
    model_config = ConfigDict(extra="ignore")

    roster_id: int
    league_id: str
    owner_id: Optional[str] = None
    starters: List[str] = []
    players: List[str] = []
    reserve: List[str] = []   # injured reserve
    taxi: List[str] = []
    settings: RosterSettings = RosterSettings()
    metadata: Dict[str, Any] = {}

    @field_validator("starters", "players", "reserve", "taxi", mode="before")
    @classmethod
    def _none_list(cls, v):
        return [str(p) for p in v] if v else []

    @field_validator("settings", "metadata", mode="before")
    @classmethod
    def _none_dict(cls, v):
        return v or {}

    @model_validator(mode="after")
    def _check_slots(self) -> "Roster":
        starters = {p for p in self.starters if p != EMPTY_SLOT}
        groups = {"starters": starters, "reserve": set(self.reserve), "taxi": set(self.taxi)}
        seen: Dict[str, str] = {}
        for group, ids in groups.items():
            for pid in ids:
                if pid in seen:
                    raise ValueError(
                        f"roster {self.roster_id}: player {pid} is in both {seen[pid]} and {group}"
                    )
                seen[pid] = group
        missing = starters - set(self.players)
        if missing:
            raise ValueError(f"roster {self.roster_id}: starters not on roster: {sorted(missing)}")
        return self

    @property
    def bench(self) -> List[str]:
        taken = set(self.starters) | set(self.reserve) | set(self.taxi)
        return [p for p in self.players if p not in taken]

    def slot_of(self, player_id: str) -> Optional[str]:
        if player_id in self.starters and player_id != EMPTY_SLOT:
            return "starter"
        if player_id in self.reserve:
            return "ir"
        if player_id in self.taxi:
            return "taxi"
        if player_id in self.players:
            return "bench"
        return None

    @property
    def team_name(self) -> Optional[str]:
        name = self.metadata.get("team_name")
        return str(name) if name else None

    @property
    def points_for(self) -> float:
        return self.settings.fpts + self.settings.fpts_decimal / 100

    @property
    def points_against(self) -> float:
        return self.settings.fpts_against + self.settings.fpts_against_decimal / 100
