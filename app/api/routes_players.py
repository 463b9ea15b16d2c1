# app/api/routes_players.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from app.deps import get_controller
from app.services.sync import SyncController

router = APIRouter(prefix="/players", tags=["players"])

# catalog_source -> X-Cache
_CACHE_HEADER = {"cache": "HIT", "stale": "STALE", "remote": "MISS", "none": "MISS"}


@router.get("")
async def player_catalog(response: Response, controller: SyncController = Depends(get_controller)) -> Dict[str, Any]:
    """
    Full player catalog keyed by player id. Served from the local cache for a
    day; `X-Cache: STALE` means Sleeper was unreachable and an older copy was used.
    """
    catalog = await controller.get_player_catalog()
    response.headers["X-Cache"] = _CACHE_HEADER.get(controller.catalog_source, "MISS")
    response.headers["Cache-Control"] = "private, max-age=300"
    return {pid: p.model_dump(exclude_none=True) for pid, p in catalog.items()}


@router.get("/stats")
async def player_stats(
    season: Optional[str] = Query(default=None, pattern=r"^\d{4}$", description="Defaults to the selected season"),
    week: Optional[int] = Query(default=None, description="Defaults to the selected week"),
    controller: SyncController = Depends(get_controller),
) -> Dict[str, Any]:
    season = season or controller.state.selected_season
    week = week if week is not None else controller.state.selected_week
    if not 1 <= week <= controller.config.MAX_WEEK:
        raise HTTPException(status_code=400, detail=f"week must be between 1 and {controller.config.MAX_WEEK}")

    stats = await controller.get_player_stats(season, week)
    return {
        "season": season,
        "week": week,
        "items": {pid: line.model_dump(exclude_none=True) for pid, line in stats.items()},
    }
