# app/core/config.py
from __future__ import annotations

import json
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


EnvType = Literal["local", "dev", "staging", "prod"]

_DEV_SECRET = "change_me_dev_only"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    APP_NAME: str = "SleeperDashboardAPI"
    APP_ENV: EnvType = "local"
    SECRET_KEY: str = Field(default=_DEV_SECRET, description="Used for session signing")

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None  # file logging off when unset

    # CORS
    CORS_ORIGINS: str | List[str] = Field(
        default='["http://localhost:3000","http://127.0.0.1:3000"]',
        description='JSON list or comma-separated origins',
    )

    # DB (persistent cache store)
    DATABASE_URL: Optional[str] = None

    # Browser-local cache files; in-memory only when unset
    LOCAL_CACHE_DIR: Optional[str] = None

    # Sleeper
    SLEEPER_API_BASE: str = "https://api.sleeper.app/v1"
    SLEEPER_SPORT: str = "nfl"

    # Cache windows
    PLAYER_CATALOG_TTL_SECONDS: int = 24 * 60 * 60
    PLAYER_STATS_TTL_SECONDS: int = 60 * 60

    # Bounded waits
    FETCH_TIMEOUT_SECONDS: float = 5.0
    BOOTSTRAP_TIMEOUT_SECONDS: float = 15.0

    # Season calendar (approximation: weeks counted from this date)
    SEASON_START_MONTH: int = 9
    SEASON_START_DAY: int = 1
    MAX_WEEK: int = 18
    DEFAULT_SEASON: Optional[str] = None

    # Derived / convenience flags
    @property
    def IS_LOCAL(self) -> bool:
        return self.APP_ENV == "local"

    @property
    def COOKIE_SECURE(self) -> bool:
        # Secure cookies in any non-local environment
        return not self.IS_LOCAL

    # ---------- Validators ----------

    @field_validator("CORS_ORIGINS")
    @classmethod
    def _parse_cors(cls, v):
        # Accept JSON list or comma-separated string
        if isinstance(v, list):
            return v
        s = str(v).strip()
        if not s:
            return []
        try:
            parsed = json.loads(s)
            if isinstance(parsed, list):
                return parsed
        except ValueError:
            pass
        # fallback: comma-separated
        return [p.strip() for p in s.split(",") if p.strip()]

    @field_validator("SLEEPER_API_BASE")
    @classmethod
    def _strip_base(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("DEFAULT_SEASON")
    @classmethod
    def _check_season(cls, v: Optional[str]) -> Optional[str]:
        if v is None or str(v).strip() == "":
            return None
        s = str(v).strip()
        if not s.isdigit() or len(s) != 4:
            raise ValueError("DEFAULT_SEASON must be a four-digit year, e.g. 2025")
        return s

    # ---------- Runtime validations ----------

    def validate_at_startup(self) -> None:
        """Fail fast with clear messages for misconfigurations."""
        problems: list[str] = []

        if not self.IS_LOCAL and self.SECRET_KEY == _DEV_SECRET:
            problems.append("SECRET_KEY must be set in non-local env.")

        if self.FETCH_TIMEOUT_SECONDS <= 0:
            problems.append("FETCH_TIMEOUT_SECONDS must be positive.")
        if self.BOOTSTRAP_TIMEOUT_SECONDS <= 0:
            problems.append("BOOTSTRAP_TIMEOUT_SECONDS must be positive.")
        if self.PLAYER_CATALOG_TTL_SECONDS <= 0:
            problems.append("PLAYER_CATALOG_TTL_SECONDS must be positive.")

        if not 1 <= self.SEASON_START_MONTH <= 12:
            problems.append("SEASON_START_MONTH must be 1..12.")
        if self.MAX_WEEK < 1:
            problems.append("MAX_WEEK must be at least 1.")

        # CORS must not be empty outside local
        if not self.IS_LOCAL and not self.CORS_ORIGINS:
            problems.append("CORS_ORIGINS must contain at least one allowed origin in non-local env.")

        if problems:
            # Collapse to one helpful error line
            raise RuntimeError("Config validation failed: " + " ".join(problems))


settings = Settings()
