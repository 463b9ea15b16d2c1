# app/api/routes_session.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from app.core.auth import SESSION_COOKIE, SESSION_EXP_SECONDS, create_session_token
from app.core.config import settings
from app.core.errors import UserNotFound
from app.deps import get_controller, get_registry, get_session_id
from app.schemas.session import (
    LoginRequest,
    LoginResponse,
    RetryResponse,
    SelectLeagueRequest,
    SelectSeasonRequest,
    SelectWeekRequest,
    SessionSnapshot,
)
from app.services.sessions import SessionRegistry
from app.services.sync import SyncController

router = APIRouter(prefix="/session", tags=["session"])


def _cookie_params() -> dict:
    """
    Cross-site XHR only sends the cookie with SameSite=None, which requires Secure.
    Local dev runs over plain http on the same site, so Lax.
    """
    secure = settings.COOKIE_SECURE
    return {
        "httponly": True,
        "secure": secure,
        "samesite": "none" if secure else "lax",
        "path": "/",
        "max_age": SESSION_EXP_SECONDS,
    }


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    response: Response,
    registry: SessionRegistry = Depends(get_registry),
    session_id: Optional[str] = Depends(get_session_id),
):
    """
    Logs in with a Sleeper handle and loads the current season's leagues.
    Secondary data that failed to load is listed in `failed`; the login still succeeds.
    """
    controller = registry.get(session_id)
    created = controller is None
    if created:
        session_id, controller = registry.create()

    try:
        result = await controller.login(body.handle)
    except UserNotFound as e:
        if created:
            registry.drop(session_id)
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as ve:
        if created:
            registry.drop(session_id)
        raise HTTPException(status_code=400, detail=str(ve))

    response.set_cookie(SESSION_COOKIE, create_session_token(session_id), **_cookie_params())
    partial = result.partial_error
    return LoginResponse(
        session=controller.snapshot(),
        partial_error=str(partial) if partial else None,
        failed=partial.failed if partial else [],
    )


@router.post("/logout")
def logout(
    response: Response,
    registry: SessionRegistry = Depends(get_registry),
    session_id: Optional[str] = Depends(get_session_id),
):
    controller = registry.get(session_id)
    if controller is not None:
        controller.logout()
        registry.drop(session_id)
    params = _cookie_params()
    response.delete_cookie(
        SESSION_COOKIE,
        path=params["path"],
        secure=params["secure"],
        httponly=params["httponly"],
        samesite=params["samesite"],
    )
    return {"ok": True}


@router.get("", response_model=SessionSnapshot)
def session_state(controller: SyncController = Depends(get_controller)):
    return controller.snapshot()


@router.post("/league", response_model=SessionSnapshot)
async def select_league(body: SelectLeagueRequest, controller: SyncController = Depends(get_controller)):
    """Switches the current league. `league_id: null` clears the selection."""
    if body.league_id is None:
        await controller.select_league(None)
        return controller.snapshot()

    league = next((l for l in controller.state.leagues if l.league_id == body.league_id), None)
    if league is None:
        league = await controller.get_league(body.league_id)
    if league is None:
        raise HTTPException(status_code=404, detail=f"League {body.league_id} not found")
    await controller.select_league(league)
    return controller.snapshot()


@router.post("/season", response_model=SessionSnapshot)
async def select_season(body: SelectSeasonRequest, controller: SyncController = Depends(get_controller)):
    try:
        await controller.select_season(body.season)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    return controller.snapshot()


@router.post("/week", response_model=SessionSnapshot)
def select_week(body: SelectWeekRequest, controller: SyncController = Depends(get_controller)):
    try:
        controller.select_week(body.week)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    return controller.snapshot()


@router.post("/retry", response_model=RetryResponse)
async def retry(controller: SyncController = Depends(get_controller)):
    retried = await controller.retry()
    return RetryResponse(retried=retried, session=controller.snapshot())
