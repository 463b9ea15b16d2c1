from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from app.core.config import settings


def current_season(now: datetime, default: Optional[str] = None) -> str:
    return default or str(now.year)


def current_week(
    now: datetime,
    *,
    start_month: Optional[int] = None,
    start_day: Optional[int] = None,
    max_week: Optional[int] = None,
) -> int:
    """
    Approximate NFL week: days elapsed since the season anchor (Sep 1 of the
    current calendar year), rounded up to whole days then whole weeks, capped.
    There is no authoritative schedule behind this, and dates before the anchor
    count their distance backwards the same way.
    """
    anchor = now.replace(
        month=start_month or settings.SEASON_START_MONTH,
        day=start_day or settings.SEASON_START_DAY,
        hour=0, minute=0, second=0, microsecond=0,
    )
    days = math.ceil(abs((now - anchor).total_seconds()) / 86400)
    return min(math.ceil(days / 7), max_week or settings.MAX_WEEK)


def is_future_period(
    season: str,
    week: int,
    now: datetime,
    *,
    start_month: Optional[int] = None,
    start_day: Optional[int] = None,
    max_week: Optional[int] = None,
) -> bool:
    """True when stats cannot exist yet: a later season, or a later week of this one."""
    try:
        season_num = int(season)
    except (TypeError, ValueError):
        raise ValueError(f"season must be a year, got {season!r}")
    if season_num > now.year:
        return True
    this_week = current_week(now, start_month=start_month, start_day=start_day, max_week=max_week)
    if season_num == now.year and int(week) > this_week:
        return True
    return False
