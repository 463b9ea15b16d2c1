# app/middleware/cache_log.py
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)


class CacheHeaderLogMiddleware(BaseHTTPMiddleware):
    """Logs the X-Cache outcome of responses that carry one."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        hit = response.headers.get("X-Cache")
        if hit:
            logger.info("[CACHE] %s %s cc=%s", request.url.path, hit, response.headers.get("Cache-Control"))
        return response
