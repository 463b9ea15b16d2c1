# app/core/errors.py
from __future__ import annotations

from typing import Iterable, Optional


class SleeperError(Exception):
    """Base for everything the sync layer records or raises."""

    kind = "error"


class UserNotFound(SleeperError):
    kind = "user_not_found"

    def __init__(self, handle: str):
        self.handle = handle
        super().__init__(f"User not found: {handle!r}. Please check the username and try again.")


class NetworkError(SleeperError):
    kind = "network_error"

    def __init__(self, message: str, status: Optional[int] = None, url: Optional[str] = None):
        self.status = status
        self.url = url
        super().__init__(message)

    @property
    def is_server_error(self) -> bool:
        # transport failures carry no status; treat them like 5xx
        return self.status is None or self.status >= 500


class FetchTimeout(SleeperError):
    kind = "timeout"

    def __init__(self, operation: str, seconds: Optional[float] = None):
        self.operation = operation
        self.seconds = seconds
        tail = f" after {seconds:g}s" if seconds is not None else ""
        super().__init__(f"Timed out fetching {operation}{tail}")


class InvalidPayload(SleeperError):
    kind = "invalid_payload"


class NoDataForPeriod(SleeperError):
    """Future season/week. Expected steady state, never shown to users."""

    kind = "no_data_for_period"

    def __init__(self, season: str, week: int):
        self.season = season
        self.week = week
        super().__init__(f"No stats yet for season {season} week {week}")


class PartialLoadError(SleeperError):
    kind = "partial_load"

    def __init__(self, failed: Iterable[str]):
        self.failed = sorted(set(failed))
        super().__init__(
            "Some data could not be loaded (" + ", ".join(self.failed) + "). You can retry loading it."
        )
