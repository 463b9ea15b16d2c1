# app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import routes_league, routes_players, routes_session
from app.core.config import settings
from app.core.errors import FetchTimeout, InvalidPayload, NetworkError, UserNotFound
from app.core.logging_config import setup_logging
from app.db.engine import SessionLocal, engine
from app.db.session import init_db
from app.middleware.cache_log import CacheHeaderLogMiddleware
from app.services.local_cache import LocalCache
from app.services.sessions import SessionRegistry
from app.services.sleeper import SleeperClient
from app.services.store import CacheStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    settings.validate_at_startup()
    init_db(engine)

    client = SleeperClient()
    app.state.registry = SessionRegistry(
        client=client,
        store=CacheStore(SessionLocal),
        local_cache=LocalCache(settings.LOCAL_CACHE_DIR),
    )
    logger.info("%s started (env=%s, sleeper=%s)", settings.APP_NAME, settings.APP_ENV, client.base_url)
    try:
        yield
    finally:
        await client.aclose()
        logger.info("%s stopped", settings.APP_NAME)


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.add_middleware(CacheHeaderLogMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$" if settings.IS_LOCAL else None,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600,
)


# Errors that escape a route: Sleeper trouble is an upstream problem, not ours
@app.exception_handler(UserNotFound)
async def _user_not_found(request: Request, exc: UserNotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(FetchTimeout)
async def _upstream_timeout(request: Request, exc: FetchTimeout):
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=504, content={"detail": str(exc)})


@app.exception_handler(NetworkError)
@app.exception_handler(InvalidPayload)
async def _upstream_error(request: Request, exc: Exception):
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


# Routers
app.include_router(routes_session.router)
app.include_router(routes_players.router)
app.include_router(routes_league.router)


@app.get("/health")
def health(request: Request):
    registry = getattr(request.app.state, "registry", None)
    return {"ok": True, "env": settings.APP_ENV, "sessions": len(registry) if registry is not None else 0}
