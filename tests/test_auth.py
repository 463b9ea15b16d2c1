"""Tests for the signed session cookie."""

from app.core.auth import SESSION_EXP_SECONDS, create_session_token, decode_session_token

SECRET = "test-secret"


def test_round_trip():
    token = create_session_token("sid-1", secret=SECRET, now=1000.0)
    assert decode_session_token(token, secret=SECRET, now=1001.0) == "sid-1"


def test_expired():
    token = create_session_token("sid-1", secret=SECRET, now=1000.0)
    assert decode_session_token(token, secret=SECRET, now=1000.0 + SESSION_EXP_SECONDS + 1) is None


def test_wrong_secret():
    token = create_session_token("sid-1", secret=SECRET)
    assert decode_session_token(token, secret="other") is None


def test_tampered_payload():
    token = create_session_token("sid-1", secret=SECRET)
    payload, sig = token.split(".")
    forged = create_session_token("sid-2", secret="other").split(".")[0]
    assert decode_session_token(f"{forged}.{sig}", secret=SECRET) is None


def test_garbage():
    assert decode_session_token("not-a-token", secret=SECRET) is None
    assert decode_session_token("a.b", secret=SECRET) is None
