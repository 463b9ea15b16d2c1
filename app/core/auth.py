# app/core/auth.py
import json
import hmac
import hashlib
import base64
import time
from typing import Optional

from app.core.config import settings

# Dashboard session lifetime (1 week)
SESSION_EXP_SECONDS = 7 * 24 * 60 * 60
SESSION_COOKIE = "session_token"


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


def _b64decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(payload_b64: str, secret: str) -> bytes:
    return hmac.new(secret.encode(), payload_b64.encode(), hashlib.sha256).digest()


def create_session_token(session_id: str, *, secret: Optional[str] = None, now: Optional[float] = None) -> str:
    issued = time.time() if now is None else now
    payload = {"sid": session_id, "exp": int(issued) + SESSION_EXP_SECONDS}
    payload_json = json.dumps(payload, separators=(",", ":")).encode()
    payload_b64 = _b64encode(payload_json)
    signature_b64 = _b64encode(_sign(payload_b64, secret or settings.SECRET_KEY))
    return f"{payload_b64}.{signature_b64}"


def decode_session_token(token: str, *, secret: Optional[str] = None, now: Optional[float] = None) -> Optional[str]:
    """Returns the session id, or None when the token is forged, malformed or expired."""
    try:
        payload_b64, signature_b64 = token.split(".", 1)
        expected_sig = _sign(payload_b64, secret or settings.SECRET_KEY)
        if not hmac.compare_digest(expected_sig, _b64decode(signature_b64)):
            return None
        payload = json.loads(_b64decode(payload_b64))
    except (ValueError, TypeError):
        return None
    if not isinstance(payload, dict):
        return None
    if payload.get("exp", 0) < (time.time() if now is None else now):
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) and sid else None
