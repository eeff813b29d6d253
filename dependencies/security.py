from typing import Annotated, Any, Dict, Optional

from fastapi import Cookie, Depends, Header

from config.settings import settings
from utils.exceptions import AuthError, PermissionDeniedError
from utils.security import decode_session_token

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]
SessionCookie = Annotated[Optional[str], Cookie(alias=settings.SESSION_COOKIE_NAME)]

SessionData = Dict[str, Any]


def get_current_session(authorization: AuthHeader = None, session_cookie: SessionCookie = None) -> SessionData:
    """
    Resolve the caller's session from "Authorization: Bearer <token>" or the session cookie.
    No session -> 401.
    """
    token = None
    if authorization:
        # "Bearer <token>"
        try:
            scheme, token = authorization.split(" ", 1)
        except ValueError:
            raise AuthError("Invalid Authorization header format")
        if scheme.lower() != "bearer":
            raise AuthError("Invalid auth scheme")
        token = token.strip()
    elif session_cookie:
        token = session_cookie

    if not token:
        raise AuthError("Unauthorized")

    payload = decode_session_token(token)
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthError("Invalid session")
    return {
        "user_id": user_id,
        "name": payload.get("name", ""),
        "email": payload.get("email", ""),
        "role": payload.get("role", ""),
    }


def require_role(*roles: str):
    """Dependency factory: session must carry one of the given roles, otherwise 403."""
    def _check(session: SessionData = Depends(get_current_session)) -> SessionData:
        if session["role"] not in roles:
            raise PermissionDeniedError(f"Requires role: {', '.join(roles)}")
        return session
    return _check
