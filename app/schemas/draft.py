from __future__ import annotations
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, field_validator


class DraftPick(BaseModel):
    model_config = ConfigDict(extra="ignore")

    draft_id: str
    player_id: str
    picked_by: Optional[str] = None
    roster_id: Optional[int] = None
    round: int
    pick_no: int
    draft_slot: Optional[int] = None
    is_keeper: Optional[bool] = None
    metadata: Dict[str, Any] = {}
    # stamped by the sync layer, not part of the Sleeper payload
    league_id: Optional[str] = None
    season: Optional[str] = None

    @field_validator("draft_id", "player_id", mode="before")
    @classmethod
    def _as_str(cls, v):
        return str(v) if v is not None else v

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_metadata(cls, v):
        return v or {}
