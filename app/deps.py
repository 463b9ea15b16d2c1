from typing import Optional

from fastapi import Cookie, HTTPException, Request, status

from app.core.auth import decode_session_token
from app.services.sessions import SessionRegistry
from app.services.sync import SyncController


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_session_id(session_token: Optional[str] = Cookie(default=None)) -> Optional[str]:
    """Session id from the signed cookie, or None when absent / invalid / expired."""
    if not session_token:
        return None
    return decode_session_token(session_token)


async def get_controller(
    request: Request,
    session_token: Optional[str] = Cookie(default=None),
) -> SyncController:
    """
    Resolves the session cookie to its controller. Raises 401 if the cookie is
    missing, forged or expired, or if the session no longer exists.
    """
    if not session_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    sid = decode_session_token(session_token)
    if not sid:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired session")
    controller = await get_registry(request).resume(sid)
    if controller is None or controller.state.user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session expired, please log in again")
    return controller
