"""Session cookie helpers for the HTTP layer."""

from __future__ import annotations

from fastapi import Response
from fastapi.requests import HTTPConnection

from taskboard.core.config import Settings


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the session token as an HttpOnly cookie living as long as the token."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_expiry_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="none" if settings.cookie_secure else "lax",
        path="/",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Expire the session cookie in the browser."""
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="none" if settings.cookie_secure else "lax",
        path="/",
    )


def get_session_token(connection: HTTPConnection, settings: Settings) -> str | None:
    """Read the session token from the cookie, falling back to a Bearer header."""
    token = connection.cookies.get(settings.session_cookie_name)
    if token:
        return token
    authorization = connection.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None
