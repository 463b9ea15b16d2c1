from __future__ import annotations
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, field_validator


class User(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: str
    username: Optional[str] = None      # the login handle; league member payloads may omit it
    display_name: Optional[str] = None
    avatar: Optional[str] = None        # Sleeper avatar id, not a URL
    metadata: Dict[str, Any] = {}

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_metadata(cls, v):
        return v or {}

    @property
    def handle(self) -> str:
        return self.username or self.display_name or self.user_id

    @property
    def team_name(self) -> Optional[str]:
        name = self.metadata.get("team_name")
        return str(name) if name else None
